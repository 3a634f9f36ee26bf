from django.contrib import admin
from finance_core.models import Transaction
from .actions import remove_transactions, toggle_transaction_status
from .ReadOnly import ReadOnlyAdmin


# Register `Transaction` model
@admin.register(Transaction)
class TransactionAdmin(ReadOnlyAdmin):
    list_display = (
        "id",
        "date",
        "tx_type",
        "status",
        "amount",
        "category",
        "account",
        "related_account",
        "user",
    )
    list_filter = ("tx_type", "status", "account", "date")
    search_fields = ("category", "description", "user__username")
    date_hierarchy = "date"
    actions = [toggle_transaction_status, remove_transactions]

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("account", "related_account", "user")
