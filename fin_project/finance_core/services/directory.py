from functools import lru_cache

from django.conf import settings
from django.contrib.auth import get_user_model
from django.utils.module_loading import import_string

from ..models.user import PAYMENT_PAID


class ModelUserDirectory:
    """
    User directory backed by the project's user model.
    Collecting an income from a student flips their payment status to PAID.
    """

    def mark_paid(self, user_id):
        User = get_user_model()
        return User.objects.filter(pk=user_id).update(payment_status=PAYMENT_PAID)


@lru_cache(maxsize=None)
def _directory_class(path):
    return import_string(path)


def get_user_directory():
    """Instantiate the directory configured in FINANCE_USER_DIRECTORY."""
    path = getattr(
        settings,
        "FINANCE_USER_DIRECTORY",
        "finance_core.services.directory.ModelUserDirectory",
    )
    return _directory_class(path)()
