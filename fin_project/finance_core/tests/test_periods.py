import datetime

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase

from ..services.periods import (CustomPeriod, MonthlyPeriod, QuarterlyPeriod,
                                current_month_period, date_range, next_period,
                                parse_period, period_label, period_to_query,
                                previous_period)


class DateRangeTests(SimpleTestCase):

    def test_february_non_leap_year(self):
        window = date_range(MonthlyPeriod(2025, 2))
        self.assertEqual(window.start, datetime.datetime(2025, 2, 1, 0, 0, 0))
        self.assertEqual(window.end, datetime.datetime(2025, 2, 28, 23, 59, 59, 999000))

    def test_february_leap_year(self):
        window = date_range(MonthlyPeriod(2024, 2))
        self.assertEqual(window.end.date(), datetime.date(2024, 2, 29))

    def test_quarter_spans_three_months(self):
        window = date_range(QuarterlyPeriod(2025, 3))
        self.assertEqual(window.start, datetime.datetime(2025, 7, 1))
        self.assertEqual(window.end, datetime.datetime(2025, 9, 30, 23, 59, 59, 999000))

    def test_custom_period_covers_whole_days(self):
        window = date_range(CustomPeriod(datetime.date(2025, 1, 1), datetime.date(2025, 1, 1)))
        self.assertEqual(window.start, datetime.datetime(2025, 1, 1))
        self.assertEqual(window.end, datetime.datetime(2025, 1, 1, 23, 59, 59, 999000))


class NavigationTests(SimpleTestCase):

    def test_month_rolls_over_year_end(self):
        self.assertEqual(next_period(MonthlyPeriod(2025, 12)), MonthlyPeriod(2026, 1))
        self.assertEqual(previous_period(MonthlyPeriod(2025, 1)), MonthlyPeriod(2024, 12))

    def test_quarter_rolls_over_year_end(self):
        self.assertEqual(next_period(QuarterlyPeriod(2025, 4)), QuarterlyPeriod(2026, 1))
        self.assertEqual(previous_period(QuarterlyPeriod(2025, 1)), QuarterlyPeriod(2024, 4))

    def test_next_then_previous_is_identity(self):
        for period in (MonthlyPeriod(2025, 6), QuarterlyPeriod(2025, 2)):
            self.assertEqual(previous_period(next_period(period)), period)

    def test_custom_period_has_no_neighbours(self):
        period = CustomPeriod(datetime.date(2025, 1, 1), datetime.date(2025, 1, 31))
        self.assertEqual(next_period(period), period)
        self.assertEqual(previous_period(period), period)


class LabelTests(SimpleTestCase):

    def test_labels(self):
        self.assertEqual(period_label(MonthlyPeriod(2025, 11)), "November 2025")
        self.assertEqual(period_label(QuarterlyPeriod(2025, 3)), "2025 Q3")
        self.assertEqual(
            period_label(CustomPeriod(datetime.date(2025, 1, 1), datetime.date(2025, 1, 31))),
            "2025-01-01 – 2025-01-31",
        )


class ValidationTests(SimpleTestCase):

    def test_out_of_range_month_is_rejected(self):
        for month in (0, 13):
            with self.assertRaises(ValidationError):
                MonthlyPeriod(2025, month)

    def test_out_of_range_quarter_is_rejected(self):
        for quarter in (0, 5):
            with self.assertRaises(ValidationError):
                QuarterlyPeriod(2025, quarter)

    def test_custom_start_after_end_is_rejected(self):
        with self.assertRaises(ValidationError):
            CustomPeriod(datetime.date(2025, 2, 1), datetime.date(2025, 1, 1))


class QueryRoundTripTests(SimpleTestCase):
    today = datetime.date(2025, 11, 19)

    def test_current_month(self):
        self.assertEqual(current_month_period(self.today), MonthlyPeriod(2025, 11))

    def test_parse_each_view(self):
        self.assertEqual(
            parse_period({"view": "monthly", "year": "2025", "month": "2"}, self.today),
            MonthlyPeriod(2025, 2),
        )
        self.assertEqual(
            parse_period({"view": "quarterly", "year": "2024", "quarter": "4"}, self.today),
            QuarterlyPeriod(2024, 4),
        )
        self.assertEqual(
            parse_period({"view": "custom", "from": "2025-01-05", "to": "2025-03-01"}, self.today),
            CustomPeriod(datetime.date(2025, 1, 5), datetime.date(2025, 3, 1)),
        )

    def test_bad_params_fall_back_to_current_month(self):
        for params in (
            {},
            {"view": "monthly", "year": "2025", "month": "13"},
            {"view": "quarterly", "year": "x", "quarter": "1"},
            {"view": "custom", "from": "2025-03-01", "to": "2025-01-01"},
            {"view": "weekly"},
        ):
            self.assertEqual(parse_period(params, self.today), MonthlyPeriod(2025, 11))

    def test_period_to_query_parses_back(self):
        for period in (
            MonthlyPeriod(2025, 7),
            QuarterlyPeriod(2025, 1),
            CustomPeriod(datetime.date(2025, 1, 1), datetime.date(2025, 12, 31)),
        ):
            self.assertEqual(parse_period(period_to_query(period), self.today), period)
