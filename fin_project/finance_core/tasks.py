import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task  # register this function as a Celery task
def verify_account_balances():
    """
    Replay every account's COMPLETED rows and compare the signed sum
    with the stored balance. Read-only: drift is logged, never fixed.
    Returns {account_id: {"stored": ..., "replayed": ...}} for drifted accounts.
    """
    # import models lazily to avoid circular imports at module import time
    from .managers import ZERO, completed_signed_amount, money_sum, to_money
    from .models import FinancialAccount, Transaction

    # One grouped SUM per account: {account_id: replayed balance}
    replayed = dict(
        Transaction.objects.values("account")
        .annotate(total=money_sum(completed_signed_amount()))
        .order_by("account")
        .values_list("account", "total")
    )

    drift = {}
    for account in FinancialAccount.objects.order_by("pk"):
        expected = to_money(replayed.get(account.pk, ZERO))
        if account.balance != expected:
            drift[account.pk] = {
                "stored": str(account.balance),
                "replayed": str(expected),
            }
            logger.error(
                "Balance drift on account %s: stored %s, replayed %s",
                account.pk,
                account.balance,
                expected,
                extra={"account_id": account.pk},
            )

    logger.info(
        "Checked account balances: %d drifted", len(drift),
        extra={"drifted": len(drift)},
    )
    return drift
