from django.contrib import admin

from finance_core.models import AuditLog

from .ReadOnly import ReadOnlyAdmin


# Register `AuditLog` model
@admin.register(AuditLog)
class AuditLogAdmin(ReadOnlyAdmin):
    list_display = (
        "id",
        "admin",
        "action",
        "entity_id",
        "details",
        "created_at",
    )
    search_fields = ("entity_id", "details", "admin__username")
    list_filter = ("action", "created_at")

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("admin")
