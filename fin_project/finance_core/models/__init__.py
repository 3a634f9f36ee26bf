from .account import FinancialAccount
from .auditlog import AuditLog
from .transaction import Transaction
from .user import User
