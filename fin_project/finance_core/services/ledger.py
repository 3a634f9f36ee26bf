"""
Transaction ledger.

Each operation writes the transaction row(s) and moves the owning
account balance in the same ``transaction.atomic()`` block, so a reader
never sees a row without its balance change or the other way round.

Balance policy: an account balance holds the signed sum of its
COMPLETED rows. PENDING rows are receivables/payables and only touch
the balance when they are settled (status moves to COMPLETED).
"""

import datetime
import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils.dateparse import parse_date, parse_datetime

from ..models import FinancialAccount, Transaction
from ..models.transaction import (COMPLETED, INCOME, RECORDABLE_TYPES,
                                  TX_STATUS, ledger_now, to_millisecond)
from .audit_helper import (DISTRIBUTION_ADDED, EXPENSE_ADDED,
                           MONEY_COLLECTED, TRANSACTION_DELETED,
                           TRANSACTION_STATUS_CHANGED, TRANSACTION_UPDATED,
                           log_action)
from .directory import get_user_directory
from .guard import admin_required
from .periods import date_range

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

# Fields amend_transaction accepts
AMENDABLE_FIELDS = (
    "amount",
    "tx_type",
    "status",
    "category",
    "description",
    "user_id",
    "account_id",
    "date",
)
# What may still change on a transfer leg without breaking the pair
TRANSFER_AMENDABLE_FIELDS = ("category", "description", "date")

AUDIT_ACTIONS = {
    INCOME: MONEY_COLLECTED,
    "EXPENSE": EXPENSE_ADDED,
    "DISTRIBUTION": DISTRIBUTION_ADDED,
}


# ----------------------------
# Input cleaning
# ----------------------------
def clean_amount(value) -> Decimal:
    """Positive money amount rounded to cents."""
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError("Enter a valid amount.")
    if not amount.is_finite():
        raise ValidationError("Enter a valid amount.")
    amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    if amount <= 0:
        raise ValidationError("Amount must be greater than zero.")
    return amount


def clean_category(value) -> str:
    category = (value or "").strip()
    if not category:
        raise ValidationError("Category is required.")
    return category


def clean_description(value):
    return (value or "").strip() or None


def clean_status(value) -> str:
    if value not in dict(TX_STATUS):
        raise ValidationError(f"Unknown transaction status: {value!r}")
    return value


def clean_tx_type(value) -> str:
    if value not in RECORDABLE_TYPES:
        raise ValidationError(
            f"Transaction type must be one of {', '.join(RECORDABLE_TYPES)}."
        )
    return value


def clean_date(value):
    """Accept datetime, date or ISO string; None means now. Kept to the millisecond."""
    if value is None:
        return ledger_now()
    if isinstance(value, datetime.datetime):
        return to_millisecond(value)
    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time.min)
    if isinstance(value, str):
        parsed = parse_datetime(value)
        if parsed is None:
            day = parse_date(value)
            if day is not None:
                parsed = datetime.datetime.combine(day, datetime.time.min)
        if parsed is not None:
            return to_millisecond(parsed)
    raise ValidationError(f"Invalid transaction date: {value!r}")


def clean_account_id(value):
    """Account primary key in its stored type ("7" and 7 are the same account)."""
    if value in (None, ""):
        raise ValidationError("Select the account this transaction belongs to.")
    return FinancialAccount._meta.pk.to_python(value)


def _require_user(user_id):
    if user_id and not get_user_model().objects.filter(pk=user_id).exists():
        raise ValidationError("Selected user does not exist.")


def _lock_accounts(*account_ids):
    """Lock every distinct account id given; missing ids are a validation error."""
    wanted = {clean_account_id(pk) for pk in account_ids if pk is not None}
    locked = FinancialAccount.objects.locked(wanted)
    if len(locked) != len(wanted):
        raise ValidationError("Account not found.")
    return {account.pk: account for account in locked}


def _payment_user(tx):
    """User a row collects money from (completed income only)."""
    if tx.tx_type == INCOME and tx.status == COMPLETED and tx.user_id:
        return tx.user_id
    return None


def _describe(tx):
    kind = {INCOME: "Income added", "DISTRIBUTION": "Profit distribution"}.get(
        tx.tx_type, "Expense added"
    )
    return f"{kind}: {tx.amount} - {tx.category} ({tx.status})"


# ----------------------------
# Ledger operations
# ----------------------------
@admin_required
def record_transaction(
    actor,
    *,
    amount,
    tx_type,
    category,
    account_id,
    date=None,
    status=COMPLETED,
    description=None,
    user_id=None,
) -> Transaction:
    """
    Append an INCOME / EXPENSE / DISTRIBUTION row and apply its
    balance effect. A completed income attributed to a user marks
    that user as paid.
    """
    amount = clean_amount(amount)
    tx_type = clean_tx_type(tx_type)
    category = clean_category(category)
    status = clean_status(status)
    date = clean_date(date)
    account_id = clean_account_id(account_id)

    with transaction.atomic():
        _lock_accounts(account_id)
        _require_user(user_id)

        tx = Transaction.objects.create(
            amount=amount,
            tx_type=tx_type,
            status=status,
            category=category,
            description=clean_description(description),
            date=date,
            account_id=account_id,
            user_id=user_id or None,
        )
        FinancialAccount.objects.apply_delta(account_id, tx.balance_effect())

        payer = _payment_user(tx)
        if payer:
            get_user_directory().mark_paid(payer)

        log_action(
            action=AUDIT_ACTIONS[tx_type],
            details=_describe(tx),
            entity_id=tx.pk,
            actor=actor,
        )

    logger.info(
        "Recorded %s %s on account %s (%s)", tx_type, amount, account_id, status
    )
    return tx


@admin_required
def amend_transaction(actor, transaction_id, **changes) -> Transaction:
    """
    Change fields of an existing row. When amount, type, status or
    account change, the old effect is taken off the old account and the
    new effect put on the new one; on the same account only the net
    difference is applied.
    """
    unknown = set(changes) - set(AMENDABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Cannot amend field(s): {', '.join(sorted(unknown))}")

    cleaned = {}
    if "amount" in changes:
        cleaned["amount"] = clean_amount(changes["amount"])
    if "tx_type" in changes:
        cleaned["tx_type"] = clean_tx_type(changes["tx_type"])
    if "status" in changes:
        cleaned["status"] = clean_status(changes["status"])
    if "category" in changes:
        cleaned["category"] = clean_category(changes["category"])
    if "description" in changes:
        cleaned["description"] = clean_description(changes["description"])
    if "date" in changes:
        cleaned["date"] = clean_date(changes["date"])
    if "user_id" in changes:
        cleaned["user_id"] = changes["user_id"] or None
    if "account_id" in changes:
        cleaned["account_id"] = clean_account_id(changes["account_id"])

    with transaction.atomic():
        tx = Transaction.objects.select_for_update().get(pk=transaction_id)

        partner = None
        if tx.is_transfer:
            blocked = set(cleaned) - set(TRANSFER_AMENDABLE_FIELDS)
            if blocked:
                raise ValidationError(
                    "Transfer legs only allow category, description and date changes."
                )
            if "date" in cleaned:
                # both legs always share one date
                partner = (
                    Transaction.objects.select_for_update()
                    .filter(transfer_id=tx.transfer_id)
                    .exclude(pk=tx.pk)
                    .first()
                )

        old_account_id = tx.account_id
        old_effect = tx.balance_effect()
        old_payer = _payment_user(tx)

        for field, value in cleaned.items():
            setattr(tx, field, value)
        new_effect = tx.balance_effect()

        _lock_accounts(old_account_id, tx.account_id)
        if "user_id" in cleaned:
            _require_user(tx.user_id)

        if tx.account_id == old_account_id:
            FinancialAccount.objects.apply_delta(tx.account_id, new_effect - old_effect)
        else:
            FinancialAccount.objects.apply_delta(old_account_id, -old_effect)
            FinancialAccount.objects.apply_delta(tx.account_id, new_effect)

        tx.save()
        if partner is not None:
            partner.date = tx.date
            partner.save(update_fields=["date"])

        payer = _payment_user(tx)
        if payer and payer != old_payer:
            get_user_directory().mark_paid(payer)

        log_action(
            action=TRANSACTION_UPDATED,
            details=f"Transaction updated: {tx.category}",
            entity_id=tx.pk,
            actor=actor,
        )

    logger.info(
        "Amended transaction %s (%s), balance delta %s -> %s",
        tx.pk,
        ", ".join(sorted(cleaned)) or "no changes",
        old_effect,
        new_effect,
    )
    return tx


@admin_required
def remove_transaction(actor, transaction_id) -> None:
    """
    Delete a row and take its effect off the account balance.
    Removing one leg of a transfer removes the whole transfer.
    """
    with transaction.atomic():
        tx = Transaction.objects.select_for_update().get(pk=transaction_id)
        if tx.is_transfer:
            rows = list(
                Transaction.objects.select_for_update()
                .filter(transfer_id=tx.transfer_id)
                .order_by("pk")
            )
        else:
            rows = [tx]

        _lock_accounts(*(row.account_id for row in rows))
        for row in rows:
            FinancialAccount.objects.apply_delta(row.account_id, -row.balance_effect())
        Transaction.objects.filter(pk__in=[row.pk for row in rows]).delete()

        log_action(
            action=TRANSACTION_DELETED,
            details=f"Transaction deleted: {tx.category}",
            entity_id=tx.pk,
            actor=actor,
        )

    logger.info("Removed transaction %s (%d row(s))", transaction_id, len(rows))


def _change_status(actor, transaction_id, new_status=None) -> Transaction:
    """Shared body of set_status / toggle_status. None means flip."""
    with transaction.atomic():
        tx = Transaction.objects.select_for_update().get(pk=transaction_id)
        if tx.is_transfer:
            raise ValidationError("The status of a transfer cannot be changed.")

        old_status = tx.status
        if new_status is None:
            new_status = "PENDING" if old_status == COMPLETED else COMPLETED
        if new_status == old_status:
            return tx

        old_effect = tx.balance_effect()
        tx.status = new_status
        delta = tx.balance_effect() - old_effect

        _lock_accounts(tx.account_id)
        FinancialAccount.objects.apply_delta(tx.account_id, delta)
        tx.save(update_fields=["status"])

        payer = _payment_user(tx)
        if payer:
            get_user_directory().mark_paid(payer)

        log_action(
            action=TRANSACTION_STATUS_CHANGED,
            details=f"Status changed: {tx.category} - {old_status} -> {new_status}",
            entity_id=tx.pk,
            actor=actor,
        )

    logger.info(
        "Transaction %s status %s -> %s (balance delta %s)",
        tx.pk,
        old_status,
        new_status,
        delta,
    )
    return tx


@admin_required
def set_status(actor, transaction_id, new_status) -> Transaction:
    """Settle (PENDING -> COMPLETED) or reopen (COMPLETED -> PENDING) a row."""
    return _change_status(actor, transaction_id, clean_status(new_status))


@admin_required
def toggle_status(actor, transaction_id) -> Transaction:
    return _change_status(actor, transaction_id)


# ----------------------------
# Reads
# ----------------------------
@admin_required
def get_transaction(actor, transaction_id) -> Transaction:
    return Transaction.objects.select_related(
        "account", "related_account", "user"
    ).get(pk=transaction_id)


@admin_required
def list_transactions(actor, period=None):
    """Newest first; optionally limited to a period's date range."""
    qs = Transaction.objects.select_related("account", "related_account", "user")
    if period is not None:
        qs = qs.within(date_range(period))
    return list(qs.order_by("-date", "-id"))