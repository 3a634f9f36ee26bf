"""
Read-only financial reports.

Every figure is computed by the database (conditional SUMs grouped as
needed); no transaction list is loaded into Python. Reports never write
and need no locks: each call reflects whatever committed state the
queries observe, so two calls with nothing written in between return
equal reports.
"""

import datetime
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List

from django.db.models import Q
from django.db.models.functions import ExtractMonth

from ..managers import ZERO, money_sum, to_money
from ..models import FinancialAccount, Transaction
from ..models.transaction import INCOME, OUTFLOW_TYPES
from .guard import admin_required
from .periods import MONTH_NAMES, DateRange, Period, date_range, period_label


@dataclass(frozen=True)
class AmountSplit:
    completed: Decimal = ZERO
    pending: Decimal = ZERO
    total: Decimal = ZERO

    @classmethod
    def of(cls, completed, pending):
        return cls(completed=completed, pending=pending, total=completed + pending)


@dataclass(frozen=True)
class FinanceReport:
    period: Period
    date_range: DateRange
    label: str
    opening_balance: Decimal  # completed net before the window, transfers excluded
    period_income: AmountSplit
    period_expense: AmountSplit  # EXPENSE + DISTRIBUTION
    net_change: Decimal  # completed income - completed expense
    current_balance: Decimal  # sum of all account balances, period independent
    projected_closing: Decimal  # if every pending row in the window settles
    category_breakdown: Dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class FinancialStats:
    total_income: Decimal
    total_expense: Decimal
    net_balance: Decimal
    category_breakdown: Dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class MonthSummary:
    month: int
    month_name: str
    income: Decimal  # completed income
    expense: Decimal  # completed expense + distribution
    receivables: Decimal  # pending income
    payables: Decimal  # pending expense + distribution


def build_report(period: Period) -> FinanceReport:
    """Report body; compute_report runs it after the admin check."""
    window = date_range(period)
    transactions = Transaction.objects.all()

    # Transfer legs net to zero system-wide, so they stay out of the opening sum
    opening_balance = (
        transactions.completed().excluding_transfers().before(window.start).signed_total()
    )

    in_window = transactions.within(window)
    split = in_window.status_split()
    income = AmountSplit.of(split["income_completed"], split["income_pending"])
    expense = AmountSplit.of(split["expense_completed"], split["expense_pending"])

    net_change = income.completed - expense.completed
    return FinanceReport(
        period=period,
        date_range=window,
        label=period_label(period),
        opening_balance=opening_balance,
        period_income=income,
        period_expense=expense,
        net_change=net_change,
        current_balance=FinancialAccount.objects.total_balance(),
        projected_closing=opening_balance + net_change + income.pending - expense.pending,
        category_breakdown=in_window.category_totals(),
    )


@admin_required
def compute_report(actor, period: Period) -> FinanceReport:
    """Opening balance, splits, net change and projections for ``period``."""
    return build_report(period)


@admin_required
def financial_stats(actor) -> FinancialStats:
    """All-time completed totals plus the all-time category breakdown."""
    split = Transaction.objects.excluding_transfers().status_split()
    income = split["income_completed"]
    expense = split["expense_completed"]
    return FinancialStats(
        total_income=income,
        total_expense=expense,
        net_balance=income - expense,
        category_breakdown=Transaction.objects.category_totals(include_pending=True),
    )


@admin_required
def monthly_balance_sheet(actor, year: int) -> List[MonthSummary]:
    """Twelve rows for ``year``: completed flows and open receivables/payables."""
    start = datetime.datetime(year, 1, 1)
    end = datetime.datetime(year + 1, 1, 1)

    income = Q(tx_type=INCOME)
    outflow = Q(tx_type__in=OUTFLOW_TYPES)
    completed = Q(status="COMPLETED")
    pending = Q(status="PENDING")

    rows = (
        Transaction.objects.excluding_transfers()
        .filter(date__gte=start, date__lt=end)
        .annotate(month=ExtractMonth("date"))
        .values("month")
        .annotate(
            income=money_sum(filter=income & completed),
            expense=money_sum(filter=outflow & completed),
            receivables=money_sum(filter=income & pending),
            payables=money_sum(filter=outflow & pending),
        )
        .order_by("month")
    )
    by_month = {row["month"]: row for row in rows}

    sheet = []
    for month in range(1, 13):
        row = by_month.get(month, {})
        sheet.append(
            MonthSummary(
                month=month,
                month_name=MONTH_NAMES[month - 1],
                income=to_money(row.get("income")),
                expense=to_money(row.get("expense")),
                receivables=to_money(row.get("receivables")),
                payables=to_money(row.get("payables")),
            )
        )
    return sheet
