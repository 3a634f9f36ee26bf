from decimal import Decimal
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone
from ..managers import TransactionManager
from .account import FinancialAccount

# Movement kinds
INCOME = "INCOME"
EXPENSE = "EXPENSE"
TRANSFER = "TRANSFER"
DISTRIBUTION = "DISTRIBUTION"  # profit distribution to partners

TX_TYPES = [
    (INCOME, "Income"),
    (EXPENSE, "Expense"),
    (TRANSFER, "Transfer"),
    (DISTRIBUTION, "Distribution"),
]

# Types that reduce the owning account
OUTFLOW_TYPES = (EXPENSE, DISTRIBUTION)

# Types an admin may record directly (transfers go through transfer_funds)
RECORDABLE_TYPES = (INCOME, EXPENSE, DISTRIBUTION)

# Settlement state
COMPLETED = "COMPLETED"
PENDING = "PENDING"

TX_STATUS = [
    (COMPLETED, "Completed"),  # already reflected in the account balance
    (PENDING, "Pending"),  # receivable / payable, not yet in the balance
]

# Which side of a transfer a leg sits on
LEG_OUT = "OUT"
LEG_IN = "IN"

TRANSFER_LEGS = [
    (LEG_OUT, "Outgoing"),
    (LEG_IN, "Incoming"),
]


def to_millisecond(value):
    """Drop sub-millisecond digits; report windows end at .999 of a day."""
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def ledger_now():
    return to_millisecond(timezone.now())


class Transaction(models.Model):
    """
    One signed money movement on one account.

    A transfer is stored as two TRANSFER rows sharing ``transfer_id``:
    the OUT leg on the source account and the IN leg on the target,
    each pointing at the other's account through ``related_account``.
    """

    amount = models.DecimalField(max_digits=18, decimal_places=2)  # always > 0
    tx_type = models.CharField(max_length=16, choices=TX_TYPES)
    status = models.CharField(
        max_length=10, choices=TX_STATUS, default=COMPLETED
    )
    category = models.CharField(max_length=100)  # "Donation", "Rent", "Transfer"
    description = models.TextField(null=True, blank=True)

    # Business date chosen by the admin (drives period reports)
    date = models.DateTimeField(default=ledger_now)
    # Record date (when the row was written)
    created_at = models.DateTimeField(auto_now_add=True)

    # Owning account; PROTECT keeps history from being orphaned
    account = models.ForeignKey(
        FinancialAccount,
        on_delete=models.PROTECT,
        related_name="transactions",
    )
    # Counterpart account, only for TRANSFER legs
    related_account = models.ForeignKey(
        FinancialAccount,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="related_transactions",
    )
    transfer_leg = models.CharField(
        max_length=3, choices=TRANSFER_LEGS, null=True, blank=True
    )
    transfer_id = models.UUIDField(null=True, blank=True, db_index=True)

    # Optional link to the student/person an INCOME row was collected from
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="finance_transactions",
    )

    objects = TransactionManager()

    class Meta:
        ordering = ("-date", "-id")
        indexes = [
            models.Index(fields=["date"], name="finance_cor_date_5a7c10_idx"),
            models.Index(fields=["status", "date"], name="finance_cor_status_b3e9f2_idx"),
            models.Index(fields=["tx_type", "date"], name="finance_cor_tx_type_71d4a8_idx"),
            models.Index(fields=["account", "date"], name="finance_cor_account_2f6e93_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="tx_amount_positive",
            ),
            # Transfer bookkeeping fields are set on TRANSFER rows and only there
            models.CheckConstraint(
                condition=(
                    models.Q(
                        tx_type=TRANSFER,
                        related_account__isnull=False,
                        transfer_leg__isnull=False,
                        transfer_id__isnull=False,
                    )
                    | (
                        ~models.Q(tx_type=TRANSFER)
                        & models.Q(
                            related_account__isnull=True,
                            transfer_leg__isnull=True,
                            transfer_id__isnull=True,
                        )
                    )
                ),
                name="tx_transfer_fields_consistent",
            ),
        ]

    def __str__(self):
        return f"{self.tx_type} {self.amount} [{self.status}] {self.category}"

    @property
    def is_transfer(self):
        return self.tx_type == TRANSFER

    def signed_amount(self):
        """Amount with its direction: income and incoming legs are positive."""
        if self.tx_type == INCOME:
            return self.amount
        if self.tx_type == TRANSFER:
            return self.amount if self.transfer_leg == LEG_IN else -self.amount
        return -self.amount

    def balance_effect(self):
        """What this row contributes to its account's balance right now."""
        if self.status != COMPLETED:
            return Decimal("0.00")
        return self.signed_amount()

    def clean(self):
        if self.amount is None or self.amount <= 0:
            raise ValidationError("Amount must be greater than zero.")
        if not (self.category or "").strip():
            raise ValidationError("Category is required.")
        if self.tx_type == TRANSFER and self.related_account_id == self.account_id:
            raise ValidationError("A transfer needs two different accounts.")
