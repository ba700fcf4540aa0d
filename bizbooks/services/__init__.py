"""Service layer: one class per bookkeeping area, all scoped to a user."""

from .account_service import AccountService, Transfer
from .audit import AuditTrail
from .auth_service import AuthResult, AuthService
from .category_service import CategoryService
from .charity_service import CharityService
from .dashboard_service import DashboardService
from .income_service import IncomeCreated, IncomeService
from .loan_service import LoanPayment, LoanService
from .sale_service import SaleService
from .spending_service import ExpenseService, PurchaseService, SpendingService

__all__ = [
    "AccountService",
    "AuditTrail",
    "AuthResult",
    "AuthService",
    "CategoryService",
    "CharityService",
    "DashboardService",
    "ExpenseService",
    "IncomeCreated",
    "IncomeService",
    "LoanPayment",
    "LoanService",
    "PurchaseService",
    "SaleService",
    "SpendingService",
    "Transfer",
]
