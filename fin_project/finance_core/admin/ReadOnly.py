from django.contrib import admin
from django.core.exceptions import PermissionDenied


class ReadOnlyAdmin(admin.ModelAdmin):
    """
    Browse-only admin for ledger tables.
    Balances and rows only move through finance_core.services, so the
    admin forms never write; the explicit actions on a model call the
    services instead.
    """

    list_per_page = 50

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        # also hides the stock "delete selected" action
        return False

    def save_model(self, request, obj, form, change):
        raise PermissionDenied("Ledger rows cannot be changed via the admin form.")
