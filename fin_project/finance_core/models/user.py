from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models

ROLE_ADMIN = "ADMIN"
ROLE_USER = "USER"

ROLE_CHOICES = [
    (ROLE_ADMIN, "Admin"),  # back-office staff, may touch the ledger
    (ROLE_USER, "User"),  # students using calendar sync
]

PAYMENT_UNPAID = "UNPAID"
PAYMENT_PAID = "PAID"
PAYMENT_FREE = "FREE"

PAYMENT_STATUS_CHOICES = [
    (PAYMENT_UNPAID, "Unpaid"),
    (PAYMENT_PAID, "Paid"),
    (PAYMENT_FREE, "Free"),  # complimentary access, never charged
]


# ---------- Custom User ----------
class User(AbstractUser):
    """
    Directory record for students and admins.

    The ledger only reads ``role`` (through the mutation guard) and
    writes ``payment_status`` (through the user directory) when an
    income is collected from the user.
    """

    role = models.CharField(
        max_length=10,
        choices=ROLE_CHOICES,
        default=ROLE_USER,  # safe default: no back-office access
    )
    payment_status = models.CharField(
        max_length=10,
        choices=PAYMENT_STATUS_CHOICES,
        default=PAYMENT_UNPAID,
    )

    objects = UserManager()

    class Meta:
        indexes = [models.Index(fields=["payment_status"], name="finance_cor_payment_6b0f1e_idx")]

    def __str__(self):
        return self.get_full_name() or self.username
