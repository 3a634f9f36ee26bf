"""
Mutation guard for the finance back office.

Every public ledger/report operation takes the acting user as its first
argument and is wrapped with ``admin_required``:

1. The actor is checked once, before anything touches the database.
2. The operation runs (its own ``transaction.atomic()`` block decides
   what is committed).
3. A database failure surfaces as ``LedgerStorageError`` so callers can
   tell a retryable storage problem from a validation error.
"""

import functools
import logging

from django.db import DatabaseError

from ..exceptions import LedgerPermissionDenied, LedgerStorageError
from ..models.user import ROLE_ADMIN

logger = logging.getLogger(__name__)


def is_admin(actor) -> bool:
    """True for an authenticated, active user with back-office rights."""
    if actor is None:
        return False
    if not getattr(actor, "is_authenticated", False):
        return False
    if not getattr(actor, "is_active", False):
        return False
    if getattr(actor, "is_superuser", False):
        return True
    return getattr(actor, "role", None) == ROLE_ADMIN


def require_admin(actor) -> None:
    """Raise LedgerPermissionDenied unless ``actor`` is an admin."""
    if not is_admin(actor):
        logger.warning(
            "Finance access denied for actor %s",
            getattr(actor, "pk", None),
        )
        raise LedgerPermissionDenied("Unauthorized")


def admin_required(func):
    """Authorize the actor, then run the operation and map storage errors."""

    @functools.wraps(func)
    def wrapper(actor, *args, **kwargs):
        require_admin(actor)
        try:
            return func(actor, *args, **kwargs)
        except DatabaseError as exc:
            logger.exception("%s aborted by the database", func.__name__)
            raise LedgerStorageError(func.__name__, exc) from exc

    return wrapper
