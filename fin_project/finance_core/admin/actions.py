from django.contrib import admin, messages
from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.utils.translation import gettext_lazy as _

from finance_core.exceptions import LedgerPermissionDenied, LedgerStorageError
from finance_core.services.ledger import remove_transaction, toggle_status

# ---------- Admin actions ----------
# Both actions go through the ledger services so the owning account
# balance moves in the same atomic block as the row.


def _run_per_row(modeladmin, request, queryset, operation, verb):
    """Apply ``operation(request.user, pk)`` to each selected row and report."""
    pks = list(queryset.values_list("pk", flat=True))
    success = 0
    failures = 0

    for pk in pks:
        try:
            operation(request.user, pk)
            success += 1
        except LedgerPermissionDenied:
            modeladmin.message_user(
                request, _("You are not allowed to change the ledger."),
                level=messages.ERROR,
            )
            return
        except ObjectDoesNotExist:
            # already gone, e.g. the other leg of a removed transfer
            continue
        except (ValidationError, LedgerStorageError) as exc:
            failures += 1
            modeladmin.message_user(
                request,
                _("Could not %(verb)s transaction %(pk)s: %(err)s")
                % {"verb": verb, "pk": pk, "err": exc},
                level=messages.ERROR,
            )

    # Final summary message
    modeladmin.message_user(
        request,
        _("%(verb)s %(success)d of %(total)d transactions. %(failures)d failed.")
        % {
            "verb": verb.capitalize(),
            "success": success,
            "total": len(pks),
            "failures": failures,
        },
        level=messages.SUCCESS if failures == 0 else messages.WARNING,
    )


@admin.action(description=_("Toggle status (pending / completed)"))
def toggle_transaction_status(modeladmin, request, queryset):
    _run_per_row(modeladmin, request, queryset, toggle_status, "toggle")


@admin.action(description=_("Remove selected transactions (reverses balances)"))
def remove_transactions(modeladmin, request, queryset):
    _run_per_row(modeladmin, request, queryset, remove_transaction, "remove")
