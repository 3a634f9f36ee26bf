from .account import FinancialAccountAdmin
from .actions import remove_transactions, toggle_transaction_status
from .auditlog import AuditLogAdmin
from .forms import UserAdminChangeForm, UserAdminCreationForm
from .transaction import TransactionAdmin
from .user import UserAdmin
