import re

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError
from django.utils.dateparse import parse_date

from finance_core.exceptions import LedgerPermissionDenied
from finance_core.services import (CustomPeriod, MonthlyPeriod,
                                   QuarterlyPeriod, compute_report,
                                   current_month_period)

MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")  # 2025-11
QUARTER_RE = re.compile(r"^(\d{4})-[Qq]([1-4])$")  # 2025-Q3


class Command(BaseCommand):
    help = "Prints the finance report for a month, a quarter or a custom date range."

    # Define command-line arguments
    def add_arguments(self, parser):
        parser.add_argument("--month", help="Monthly view, as YYYY-MM")
        parser.add_argument("--quarter", help="Quarterly view, as YYYY-Qn")
        parser.add_argument("--from", dest="date_from", help="Custom view start, YYYY-MM-DD")
        parser.add_argument("--to", dest="date_to", help="Custom view end, YYYY-MM-DD")
        parser.add_argument(
            "--as",
            dest="username",
            required=True,
            help="Username of the admin the report is run as",
        )

    def handle(self, *args, **options):
        User = get_user_model()
        try:
            actor = User.objects.get(username=options["username"])
        except User.DoesNotExist:
            raise CommandError(f"Unknown user: {options['username']}")

        period = self._period(options)
        try:
            report = compute_report(actor, period)
        except LedgerPermissionDenied:
            raise CommandError(f"{actor.username} is not allowed to read finance reports.")

        currency = getattr(settings, "FINANCE_CURRENCY_LABEL", "")
        write = self.stdout.write

        write(self.style.MIGRATE_HEADING(f"Finance report: {report.label}"))
        write(f"  Window:            {report.date_range.start} .. {report.date_range.end}")
        write(f"  Opening balance:   {report.opening_balance} {currency}")
        write(
            f"  Income:            {report.period_income.completed} completed, "
            f"{report.period_income.pending} pending"
        )
        write(
            f"  Expense:           {report.period_expense.completed} completed, "
            f"{report.period_expense.pending} pending"
        )
        write(f"  Net change:        {report.net_change} {currency}")
        write(f"  Current balance:   {report.current_balance} {currency}")
        write(f"  Projected closing: {report.projected_closing} {currency}")

        if report.category_breakdown:
            write(self.style.MIGRATE_HEADING("By category"))
            for category, total in report.category_breakdown.items():
                write(f"  {category:<24} {total}")
        self.stdout.write(self.style.SUCCESS("Done."))

    def _period(self, options):
        """Build the period from whichever flag was given (current month if none)."""
        month, quarter = options.get("month"), options.get("quarter")
        date_from, date_to = options.get("date_from"), options.get("date_to")

        chosen = sum(bool(x) for x in (month, quarter, date_from or date_to))
        if chosen > 1:
            raise CommandError("Use only one of --month, --quarter or --from/--to.")

        try:
            if month:
                match = MONTH_RE.match(month)
                if not match:
                    raise CommandError("--month must look like YYYY-MM.")
                return MonthlyPeriod(int(match.group(1)), int(match.group(2)))
            if quarter:
                match = QUARTER_RE.match(quarter)
                if not match:
                    raise CommandError("--quarter must look like YYYY-Qn.")
                return QuarterlyPeriod(int(match.group(1)), int(match.group(2)))
            if date_from or date_to:
                start, end = parse_date(date_from or ""), parse_date(date_to or "")
                if not start or not end:
                    raise CommandError("--from and --to must both be YYYY-MM-DD dates.")
                return CustomPeriod(start, end)
        except ValidationError as exc:
            raise CommandError("; ".join(exc.messages))
        except ValueError as exc:  # well-formed but impossible date
            raise CommandError(str(exc))
        return current_month_period()
