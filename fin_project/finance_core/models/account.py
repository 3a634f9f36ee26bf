from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import FinancialAccountManager


class FinancialAccount(models.Model):
    """
    A named pool of money (cash box, bank account, personal wallet).
    - name: human-readable label shown to admins
    - ac_type: free-form tag such as CASH / BANK / PERSONAL
    - balance: materialized running total of COMPLETED transactions
    """

    name = models.CharField(max_length=200)  # "Main Cash", "Ziraat Bank"

    # Free-form classification, stored upper-cased ("CASH", "BANK")
    ac_type = models.CharField(max_length=32)

    # Authoritative current total for this account.
    # Only the ledger services move it, always via F() increments
    # inside the same atomic block that writes the transaction row.
    balance = models.DecimalField(
        max_digits=18,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    created_at = models.DateTimeField(
        auto_now_add=True
    )  # Track when the account was opened

    objects = FinancialAccountManager()

    class Meta:
        # Default listing order for pickers and reports
        ordering = ("name",)
        indexes = [models.Index(fields=["ac_type"], name="finance_cor_ac_type_3c9d21_idx")]

    def __str__(self):
        return f"{self.name} ({self.ac_type})"  # Example: "Main Cash (CASH)"

    def clean(self):
        if not (self.name or "").strip():
            raise ValidationError("Account name is required.")
        if not (self.ac_type or "").strip():
            raise ValidationError("Account type is required.")
