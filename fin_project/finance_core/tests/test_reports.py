import datetime
from decimal import Decimal

from django.test import TestCase

from ..models import User
from ..models.user import ROLE_ADMIN
from ..services import (CustomPeriod, MonthlyPeriod, QuarterlyPeriod,
                        amend_transaction, compute_report, create_account,
                        financial_stats, monthly_balance_sheet,
                        record_transaction, set_status, transfer_funds)

D = Decimal


class ReportTestBase(TestCase):

    def setUp(self):
        self.admin = User.objects.create_user("boss", password="pw-12345678", role=ROLE_ADMIN)
        self.cash = create_account(self.admin, "Cash", "CASH")
        self.bank = create_account(self.admin, "Bank", "BANK")

    def record(self, amount, when, tx_type="INCOME", status="COMPLETED", category="Donation", account=None):
        return record_transaction(
            self.admin,
            amount=amount,
            tx_type=tx_type,
            status=status,
            category=category,
            account_id=(account or self.cash).pk,
            date=when,
        )


class ComputeReportTests(ReportTestBase):

    def test_donation_scenario(self):
        # Cash holds 1000 before November
        self.record("1000", datetime.datetime(2025, 10, 15), category="Opening")
        self.record("500", datetime.datetime(2025, 11, 19, 10, 30))

        report = compute_report(self.admin, MonthlyPeriod(2025, 11))
        self.assertEqual(report.label, "November 2025")
        self.assertEqual(report.opening_balance, D("1000.00"))
        self.assertEqual(report.period_income.completed, D("500.00"))
        self.assertEqual(report.category_breakdown, {"Donation": D("500.00")})
        self.assertEqual(report.current_balance, D("1500.00"))

    def test_net_change_and_projection(self):
        self.record("1000", datetime.datetime(2025, 10, 1), category="Opening")
        self.record("100", datetime.datetime(2025, 10, 20), tx_type="EXPENSE", category="Rent")
        nov = datetime.datetime(2025, 11, 5)
        self.record("400", nov, category="Fees")
        self.record("150", nov, status="PENDING", category="Fees")
        self.record("80", nov, tx_type="EXPENSE", category="Rent")
        self.record("20", nov, tx_type="DISTRIBUTION", category="Partners")
        self.record("30", nov, tx_type="EXPENSE", status="PENDING", category="Rent")

        report = compute_report(self.admin, MonthlyPeriod(2025, 11))

        self.assertEqual(report.opening_balance, D("900.00"))
        self.assertEqual(
            (report.period_income.completed, report.period_income.pending, report.period_income.total),
            (D("400.00"), D("150.00"), D("550.00")),
        )
        self.assertEqual(
            (report.period_expense.completed, report.period_expense.pending, report.period_expense.total),
            (D("100.00"), D("30.00"), D("130.00")),
        )
        self.assertEqual(report.net_change, D("300.00"))
        # opening + net + pending income - pending expense
        self.assertEqual(report.projected_closing, D("900.00") + D("300.00") + D("150.00") - D("30.00"))
        self.assertEqual(report.current_balance, D("1200.00"))
        self.assertEqual(
            report.category_breakdown,
            {"Fees": D("400.00"), "Partners": D("-20.00"), "Rent": D("-80.00")},
        )

    def test_pending_only_category_is_listed_with_zero(self):
        self.record("70", datetime.datetime(2025, 11, 2), status="PENDING", category="Tuition")
        report = compute_report(self.admin, MonthlyPeriod(2025, 11))
        self.assertEqual(report.category_breakdown, {"Tuition": D("0.00")})

    def test_transfers_stay_out_of_flows(self):
        self.record("1000", datetime.datetime(2025, 10, 1), category="Opening")
        transfer_funds(
            self.admin, self.cash.pk, self.bank.pk, "300", date=datetime.datetime(2025, 11, 3)
        )

        report = compute_report(self.admin, MonthlyPeriod(2025, 11))
        self.assertEqual(report.period_income.total, D("0.00"))
        self.assertEqual(report.period_expense.total, D("0.00"))
        self.assertNotIn("Transfer", report.category_breakdown)

        december = compute_report(self.admin, MonthlyPeriod(2025, 12))
        # transfers never move the system-wide opening balance
        self.assertEqual(december.opening_balance, D("1000.00"))

    def test_window_edges_are_inclusive(self):
        self.record("1", datetime.datetime(2025, 10, 31, 23, 59, 59, 999000))
        self.record("2", datetime.datetime(2025, 11, 1, 0, 0))
        self.record("4", datetime.datetime(2025, 11, 30, 23, 59, 59, 999000))
        self.record("8", datetime.datetime(2025, 12, 1, 0, 0))

        report = compute_report(self.admin, MonthlyPeriod(2025, 11))
        self.assertEqual(report.opening_balance, D("1.00"))
        self.assertEqual(report.period_income.completed, D("6.00"))

    def test_sub_millisecond_row_on_last_day_stays_in_its_month(self):
        self.record("50", datetime.datetime(2025, 11, 30, 23, 59, 59, 999500))

        november = compute_report(self.admin, MonthlyPeriod(2025, 11))
        december = compute_report(self.admin, MonthlyPeriod(2025, 12))
        self.assertEqual(november.opening_balance, D("0.00"))
        self.assertEqual(november.period_income.completed, D("50.00"))
        # consecutive months chain: closing of one is the opening of the next
        self.assertEqual(november.opening_balance + november.net_change, december.opening_balance)

    def test_moving_one_transfer_leg_keeps_openings_right(self):
        self.record("1000", datetime.datetime(2025, 1, 5), category="Opening")
        out_leg, _ = transfer_funds(
            self.admin, self.cash.pk, self.bank.pk, "300", date=datetime.datetime(2025, 6, 3)
        )
        amend_transaction(self.admin, out_leg.pk, date=datetime.datetime(2025, 2, 1))

        april = compute_report(self.admin, MonthlyPeriod(2025, 4))
        self.assertEqual(april.opening_balance, D("1000.00"))
        self.assertEqual(april.current_balance, D("1000.00"))

    def test_figures_carry_two_decimal_places(self):
        self.record("700", datetime.datetime(2025, 10, 1))
        report = compute_report(self.admin, MonthlyPeriod(2025, 11))
        self.assertEqual(str(report.opening_balance), "700.00")
        self.assertEqual(str(report.current_balance), "700.00")
        self.assertEqual(str(report.period_income.completed), "0.00")
        self.assertEqual(str(report.projected_closing), "700.00")

    def test_empty_window_reports_zeros(self):
        report = compute_report(self.admin, QuarterlyPeriod(2030, 1))
        self.assertEqual(report.label, "2030 Q1")
        for value in (
            report.opening_balance,
            report.period_income.total,
            report.period_expense.total,
            report.net_change,
            report.current_balance,
            report.projected_closing,
        ):
            self.assertEqual(value, D("0.00"))
        self.assertEqual(report.category_breakdown, {})

    def test_same_state_gives_same_report(self):
        self.record("10", datetime.datetime(2025, 11, 1))
        self.record("5", datetime.datetime(2025, 11, 2), status="PENDING")
        period = CustomPeriod(datetime.date(2025, 11, 1), datetime.date(2025, 11, 30))
        self.assertEqual(compute_report(self.admin, period), compute_report(self.admin, period))

    def test_settling_moves_amount_between_splits(self):
        tx = self.record("60", datetime.datetime(2025, 11, 4), status="PENDING")
        before = compute_report(self.admin, MonthlyPeriod(2025, 11))
        set_status(self.admin, tx.pk, "COMPLETED")
        after = compute_report(self.admin, MonthlyPeriod(2025, 11))

        self.assertEqual(before.period_income.pending, D("60.00"))
        self.assertEqual(after.period_income.completed, D("60.00"))
        self.assertEqual(after.period_income.pending, D("0.00"))
        # settling does not change the projection
        self.assertEqual(before.projected_closing, after.projected_closing)


class FinancialStatsTests(ReportTestBase):

    def test_all_time_totals(self):
        self.record("500", datetime.datetime(2024, 3, 1), category="Fees")
        self.record("200", datetime.datetime(2025, 6, 1), tx_type="EXPENSE", category="Rent")
        self.record("50", datetime.datetime(2025, 6, 2), status="PENDING", category="Fees")
        transfer_funds(self.admin, self.cash.pk, self.bank.pk, "100")

        stats = financial_stats(self.admin)
        self.assertEqual(stats.total_income, D("500.00"))
        self.assertEqual(stats.total_expense, D("200.00"))
        self.assertEqual(stats.net_balance, D("300.00"))
        # the all-time breakdown counts pending rows too
        self.assertEqual(stats.category_breakdown, {"Fees": D("550.00"), "Rent": D("-200.00")})


class MonthlyBalanceSheetTests(ReportTestBase):

    def test_twelve_rows_with_receivables_and_payables(self):
        self.record("300", datetime.datetime(2025, 1, 10))
        self.record("40", datetime.datetime(2025, 1, 20), status="PENDING")
        self.record("90", datetime.datetime(2025, 3, 5), tx_type="EXPENSE", category="Rent")
        self.record("25", datetime.datetime(2025, 3, 6), tx_type="DISTRIBUTION", status="PENDING", category="Partners")
        self.record("999", datetime.datetime(2024, 12, 31), category="Last year")

        sheet = monthly_balance_sheet(self.admin, 2025)
        self.assertEqual(len(sheet), 12)
        self.assertEqual([row.month for row in sheet], list(range(1, 13)))

        january, march = sheet[0], sheet[2]
        self.assertEqual(january.month_name, "January")
        self.assertEqual((january.income, january.receivables), (D("300.00"), D("40.00")))
        self.assertEqual((march.expense, march.payables), (D("90.00"), D("25.00")))
        self.assertEqual(sheet[11].income, D("0.00"))
