from ..models import AuditLog

# Action codes written to the audit trail
MONEY_COLLECTED = "MONEY_COLLECTED"
EXPENSE_ADDED = "EXPENSE_ADDED"
DISTRIBUTION_ADDED = "DISTRIBUTION_ADDED"
TRANSACTION_UPDATED = "TRANSACTION_UPDATED"
TRANSACTION_DELETED = "TRANSACTION_DELETED"
TRANSACTION_STATUS_CHANGED = "TRANSACTION_STATUS_CHANGED"
FUNDS_TRANSFERRED = "FUNDS_TRANSFERRED"
FINANCIAL_ACCOUNT_CREATED = "FINANCIAL_ACCOUNT_CREATED"


def log_action(*, action: str, details: str, entity_id=None, actor=None):
    """
    Central audit logger.
    Called inside the caller's atomic block, so the trail row commits
    (or rolls back) together with the change it describes.
    """
    admin = actor if getattr(actor, "pk", None) else None
    return AuditLog.objects.create(
        admin=admin,
        action=action,
        details=details,
        entity_id=str(entity_id) if entity_id is not None else None,
    )
