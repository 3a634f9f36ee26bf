from django.contrib import admin
from finance_core.models import FinancialAccount
from .ReadOnly import ReadOnlyAdmin


# Register `FinancialAccount` model
@admin.register(FinancialAccount)
class FinancialAccountAdmin(ReadOnlyAdmin):
    # balance is shown but only the ledger services move it
    list_display = ("id", "name", "ac_type", "balance", "created_at")
    list_filter = ("ac_type",)
    search_fields = ("name",)
    ordering = ("name",)
