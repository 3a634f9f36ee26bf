from decimal import Decimal
from django.db import models
from django.db.models.functions import Coalesce

ZERO = Decimal("0.00")
CENT = Decimal("0.01")

# Output type for every money aggregate. SQLite returns computed sums
# without their scale, so results go through to_money() as well.
MONEY = models.DecimalField(max_digits=18, decimal_places=2)


def to_money(value):
    """Decimal with exactly two places (None counts as zero)."""
    if value is None:
        return ZERO
    return Decimal(str(value)).quantize(CENT)


def money_sum(expression="amount", filter=None):
    """SUM(...) that yields 0.00 instead of NULL for an empty set."""
    return Coalesce(
        models.Sum(expression, filter=filter),
        models.Value(ZERO),
        output_field=MONEY,
    )


def signed_amount():
    """
    SQL expression for a row's signed amount.
    INCOME and incoming transfer legs add, everything else subtracts.
    """
    return models.Case(
        models.When(tx_type="INCOME", then=models.F("amount")),
        models.When(tx_type="TRANSFER", transfer_leg="IN", then=models.F("amount")),
        default=-models.F("amount"),
        output_field=MONEY,
    )


def completed_signed_amount():
    """Signed amount for COMPLETED rows, 0 for PENDING ones."""
    return models.Case(
        models.When(status="COMPLETED", then=signed_amount()),
        default=models.Value(ZERO),
        output_field=MONEY,
    )


# -----------------------------------------
# Accounts
# -----------------------------------------
class FinancialAccountQuerySet(models.QuerySet):
    def locked(self, pks):
        """
        Lock the given account rows for the rest of the atomic block.
        Rows are always locked in primary-key order so two operations
        touching the same pair of accounts cannot deadlock.
        """
        return list(
            self.select_for_update().filter(pk__in=set(pks)).order_by("pk")
        )

    def apply_delta(self, pk, delta):
        """
        Move an account balance by ``delta`` with a single
        UPDATE ... SET balance = balance + delta.
        Returns the number of rows touched (0 when the account is gone).
        """
        if not delta:
            return 1 if self.filter(pk=pk).exists() else 0
        return self.filter(pk=pk).update(balance=models.F("balance") + delta)

    def total_balance(self):
        return to_money(self.aggregate(total=money_sum("balance"))["total"])


class FinancialAccountManager(models.Manager.from_queryset(FinancialAccountQuerySet)):
    pass


# -----------------------------------------
# Transactions
# -----------------------------------------
class TransactionQuerySet(models.QuerySet):
    def completed(self):
        return self.filter(status="COMPLETED")

    def pending(self):
        return self.filter(status="PENDING")

    def excluding_transfers(self):
        return self.exclude(tx_type="TRANSFER")

    def within(self, date_range):
        # both ends inclusive, matching DateRange semantics
        return self.filter(date__gte=date_range.start, date__lte=date_range.end)

    def before(self, moment):
        return self.filter(date__lt=moment)

    def signed_total(self):
        """Net signed sum of the rows in this queryset (status ignored)."""
        return to_money(self.aggregate(total=money_sum(signed_amount()))["total"])

    def status_split(self):
        """
        Income and outflow totals, split by settlement state,
        in one aggregate query.
        """
        income = models.Q(tx_type="INCOME")
        outflow = models.Q(tx_type__in=("EXPENSE", "DISTRIBUTION"))
        completed = models.Q(status="COMPLETED")
        pending = models.Q(status="PENDING")
        totals = self.aggregate(
            income_completed=money_sum(filter=income & completed),
            income_pending=money_sum(filter=income & pending),
            expense_completed=money_sum(filter=outflow & completed),
            expense_pending=money_sum(filter=outflow & pending),
        )
        return {key: to_money(value) for key, value in totals.items()}

    def category_totals(self, include_pending=False):
        """
        {category: signed total}, transfers excluded. By default only
        COMPLETED amounts count; categories whose rows are all pending
        are still listed, with 0.00.
        """
        amount = signed_amount() if include_pending else completed_signed_amount()
        rows = (
            self.excluding_transfers()
            .values("category")
            .annotate(total=money_sum(amount))
            .order_by("category")
        )
        return {row["category"]: to_money(row["total"]) for row in rows}


class TransactionManager(models.Manager.from_queryset(TransactionQuerySet)):
    pass
