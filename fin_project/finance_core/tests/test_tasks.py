import datetime
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from ..models import FinancialAccount, User
from ..models.user import ROLE_ADMIN
from ..services import create_account, record_transaction, transfer_funds
from ..tasks import verify_account_balances


class VerifyAccountBalancesTests(TestCase):

    def setUp(self):
        self.admin = User.objects.create_user("boss", password="pw-12345678", role=ROLE_ADMIN)
        self.cash = create_account(self.admin, "Cash", "CASH")
        self.bank = create_account(self.admin, "Bank", "BANK")
        record_transaction(
            self.admin, amount="300", tx_type="INCOME", category="Fees", account_id=self.cash.pk
        )
        record_transaction(
            self.admin, amount="50", tx_type="EXPENSE", status="PENDING",
            category="Rent", account_id=self.cash.pk,
        )
        transfer_funds(self.admin, self.cash.pk, self.bank.pk, "120")

    def test_consistent_ledger_reports_no_drift(self):
        self.assertEqual(verify_account_balances.apply().get(), {})

    def test_drift_is_reported_not_repaired(self):
        FinancialAccount.objects.filter(pk=self.bank.pk).update(balance=Decimal("999.00"))
        with self.assertLogs("finance_core.tasks", level="ERROR"):
            drift = verify_account_balances()
        self.assertEqual(drift, {self.bank.pk: {"stored": "999.00", "replayed": "120.00"}})
        self.assertEqual(FinancialAccount.objects.get(pk=self.bank.pk).balance, Decimal("999.00"))


class FinanceReportCommandTests(TestCase):

    def setUp(self):
        self.admin = User.objects.create_user("boss", password="pw-12345678", role=ROLE_ADMIN)
        User.objects.create_user("student", password="pw-12345678")
        cash = create_account(self.admin, "Cash", "CASH")
        record_transaction(
            self.admin, amount="500", tx_type="INCOME", category="Donation",
            account_id=cash.pk, date=datetime.datetime(2025, 11, 19),
        )

    def run_command(self, *args):
        out = StringIO()
        call_command("finance_report", *args, stdout=out)
        return out.getvalue()

    def test_monthly_report(self):
        output = self.run_command("--month", "2025-11", "--as", "boss")
        self.assertIn("Finance report: November 2025", output)
        self.assertIn("Donation", output)
        self.assertIn("500.00", output)
        self.assertIn("Opening balance:   0.00", output)

    def test_quarter_and_custom_views(self):
        self.assertIn("2025 Q4", self.run_command("--quarter", "2025-Q4", "--as", "boss"))
        output = self.run_command("--from", "2025-11-01", "--to", "2025-11-30", "--as", "boss")
        self.assertIn("2025-11-01 – 2025-11-30", output)

    def test_bad_arguments(self):
        for args in (
            ("--month", "2025-13", "--as", "boss"),
            ("--month", "Nov", "--as", "boss"),
            ("--quarter", "2025-Q5", "--as", "boss"),
            ("--from", "2025-11-01", "--as", "boss"),
            ("--month", "2025-11", "--quarter", "2025-Q4", "--as", "boss"),
            ("--month", "2025-11", "--as", "nobody"),
        ):
            with self.assertRaises(CommandError):
                self.run_command(*args)

    def test_non_admin_is_refused(self):
        with self.assertRaises(CommandError):
            self.run_command("--month", "2025-11", "--as", "student")
