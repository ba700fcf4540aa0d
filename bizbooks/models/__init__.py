"""SQLAlchemy ORM models for the bookkeeping schema."""

from .base import Base
from .accounts import Account, AccountType
from .categories import Category, CategoryType
from .charity import Charity, CharityStatus
from .income import Income
from .ledger import Transaction, TransactionType
from .loans import Loan, LoanStatus, LoanType
from .sales import Sale, SaleStatus
from .spending import Expense, Purchase, SpendingRecord
from .users import User

__all__ = [
    "Account",
    "AccountType",
    "Base",
    "Category",
    "CategoryType",
    "Charity",
    "CharityStatus",
    "Expense",
    "Income",
    "Loan",
    "LoanStatus",
    "LoanType",
    "Purchase",
    "Sale",
    "SaleStatus",
    "SpendingRecord",
    "Transaction",
    "TransactionType",
    "User",
]
