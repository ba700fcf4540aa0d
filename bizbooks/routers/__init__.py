"""FastAPI routers for the bookkeeping API."""

from .accounts import router as accounts_router
from .auth import router as auth_router
from .categories import router as categories_router
from .charity import router as charity_router
from .dashboard import router as dashboard_router
from .income import router as income_router
from .loans import router as loans_router
from .sales import router as sales_router
from .spending import expenses_router, purchases_router

API_ROUTERS = (
    auth_router,
    income_router,
    expenses_router,
    purchases_router,
    sales_router,
    charity_router,
    accounts_router,
    loans_router,
    categories_router,
    dashboard_router,
)

__all__ = [
    "API_ROUTERS",
    "accounts_router",
    "auth_router",
    "categories_router",
    "charity_router",
    "dashboard_router",
    "expenses_router",
    "income_router",
    "loans_router",
    "purchases_router",
    "sales_router",
]
