from .accounts import create_account, get_account, list_accounts
from .ledger import (amend_transaction, get_transaction, list_transactions,
                     record_transaction, remove_transaction, set_status,
                     toggle_status)
from .periods import (CustomPeriod, DateRange, MonthlyPeriod, QuarterlyPeriod,
                      current_month_period, date_range, next_period,
                      parse_period, period_label, period_to_query,
                      previous_period)
from .reports import (FinanceReport, compute_report, financial_stats,
                      monthly_balance_sheet)
from .transfers import transfer_funds
