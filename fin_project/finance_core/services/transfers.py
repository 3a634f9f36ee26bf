import logging
import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction

from ..models import FinancialAccount, Transaction
from ..models.transaction import COMPLETED, LEG_IN, LEG_OUT, TRANSFER
from .audit_helper import FUNDS_TRANSFERRED, log_action
from .guard import admin_required
from .ledger import (clean_account_id, clean_amount, clean_date,
                     clean_description)

logger = logging.getLogger(__name__)


def transfer_category():
    return getattr(settings, "FINANCE_TRANSFER_CATEGORY", "Transfer")


# ----------------------------
# Transfer coordinator
# ----------------------------
@admin_required
def transfer_funds(actor, from_account_id, to_account_id, amount, description=None, date=None):
    """
    Move money between two accounts.

    One atomic unit writes four things: the source balance goes down,
    the target balance goes up, and two COMPLETED TRANSFER rows are
    inserted (OUT on the source, IN on the target) sharing one
    ``transfer_id`` and one ``date`` (now unless given). Returns
    ``(out_leg, in_leg)``.
    """
    if from_account_id in (None, "") or to_account_id in (None, ""):
        raise ValidationError("Select both a source and a target account.")
    from_account_id = clean_account_id(from_account_id)
    to_account_id = clean_account_id(to_account_id)
    if from_account_id == to_account_id:
        raise ValidationError("Source and target accounts must be different.")
    amount = clean_amount(amount)
    when = clean_date(date)

    with transaction.atomic():
        # lock both rows in pk order; also proves both accounts exist
        locked = {
            account.pk: account
            for account in FinancialAccount.objects.locked(
                [from_account_id, to_account_id]
            )
        }
        if from_account_id not in locked or to_account_id not in locked:
            raise ValidationError("Account not found.")
        source, target = locked[from_account_id], locked[to_account_id]

        text = clean_description(description) or f"Transfer: {source.name} -> {target.name}"
        pair = uuid.uuid4()
        common = {
            "amount": amount,
            "tx_type": TRANSFER,
            "status": COMPLETED,
            "category": transfer_category(),
            "description": text,
            "date": when,
            "transfer_id": pair,
        }

        FinancialAccount.objects.apply_delta(source.pk, -amount)
        FinancialAccount.objects.apply_delta(target.pk, amount)
        out_leg = Transaction.objects.create(
            account=source,
            related_account=target,
            transfer_leg=LEG_OUT,
            **common,
        )
        in_leg = Transaction.objects.create(
            account=target,
            related_account=source,
            transfer_leg=LEG_IN,
            **common,
        )

        log_action(
            action=FUNDS_TRANSFERRED,
            details=f"Transfer: {amount} {source.name} -> {target.name}",
            entity_id=f"{source.pk}->{target.pk}",
            actor=actor,
        )

    logger.info(
        "Transferred %s from account %s to account %s (pair %s)",
        amount,
        source.pk,
        target.pk,
        pair,
    )
    return out_leg, in_leg


def transfer_legs(transfer_id):
    """Both rows of one transfer, OUT leg first."""
    return list(
        Transaction.objects.filter(transfer_id=transfer_id).order_by("-transfer_leg")
    )
