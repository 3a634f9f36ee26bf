from django.conf import settings  # To access global project settings
from django.db import models


# ---------- Audit / Event log ----------
class AuditLog(models.Model):  # Who changed what in the ledger, and when
    # Admin who performed the action
    # (Nullable so the trail survives if the admin is deleted)
    admin = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="finance_audit_entries",
    )
    # Action code, e.g. MONEY_COLLECTED, FUNDS_TRANSFERRED
    action = models.CharField(max_length=50)
    # Human-readable summary of the change
    details = models.TextField()
    # Identifier of the affected row (transaction id, "from->to" for transfers)
    entity_id = models.CharField(max_length=100, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at", "-id")
        indexes = [
            models.Index(fields=["action", "created_at"], name="finance_cor_action_8e2a47_idx"),
            models.Index(fields=["entity_id"], name="finance_cor_entity__d41f0c_idx"),
        ]

    def __str__(self):
        return f"[{self.created_at:%Y-%m-%d %H:%M}] {self.admin} {self.action}({self.entity_id})"
