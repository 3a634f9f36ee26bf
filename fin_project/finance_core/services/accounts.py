import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from ..models import FinancialAccount
from .audit_helper import FINANCIAL_ACCOUNT_CREATED, log_action
from .guard import admin_required

logger = logging.getLogger(__name__)


# ----------------------------
# Account store
# ----------------------------
@admin_required
def create_account(actor, name: str, ac_type: str) -> FinancialAccount:
    """Open a new account with a zero balance."""
    name = (name or "").strip()
    ac_type = (ac_type or "").strip().upper()
    if not name or not ac_type:
        raise ValidationError("Account name and type are required.")

    with transaction.atomic():
        account = FinancialAccount.objects.create(name=name, ac_type=ac_type)
        log_action(
            action=FINANCIAL_ACCOUNT_CREATED,
            details=f"Account created: {account.name} ({account.ac_type})",
            entity_id=account.pk,
            actor=actor,
        )
    logger.info("Financial account %s created (%s)", account.pk, account.ac_type)
    return account


@admin_required
def list_accounts(actor):
    """All accounts, ordered by name."""
    return list(FinancialAccount.objects.order_by("name", "pk"))


@admin_required
def get_account(actor, account_id) -> FinancialAccount:
    return FinancialAccount.objects.get(pk=account_id)
