"""Pydantic schemas for request and response payloads."""

from .accounts import AccountCreate, AccountRecord, AccountUpdate, TransferCreate
from .auth import LoginRequest, ProfileUpdate, RegisterRequest, UserRecord
from .categories import CategoryCreate, CategoryListQuery, CategoryRecord, CategoryUpdate
from .charity import (
    CharityCreate,
    CharityListQuery,
    CharityPaymentCreate,
    CharityRecord,
    CharityUpdate,
)
from .common import DateRangeQuery, RecordModel, RequestModel, money_str
from .dashboard import AnalyticsQuery
from .income import IncomeCreate, IncomeListQuery, IncomeRecord, IncomeUpdate
from .loans import LoanCreate, LoanListQuery, LoanPaymentCreate, LoanRecord, LoanUpdate
from .sales import SaleCreate, SaleListQuery, SaleRecord, SaleUpdate
from .spending import SpendingCreate, SpendingListQuery, SpendingRecordOut, SpendingUpdate

__all__ = [
    "AccountCreate",
    "AccountRecord",
    "AccountUpdate",
    "AnalyticsQuery",
    "CategoryCreate",
    "CategoryListQuery",
    "CategoryRecord",
    "CategoryUpdate",
    "CharityCreate",
    "CharityListQuery",
    "CharityPaymentCreate",
    "CharityRecord",
    "CharityUpdate",
    "DateRangeQuery",
    "IncomeCreate",
    "IncomeListQuery",
    "IncomeRecord",
    "IncomeUpdate",
    "LoanCreate",
    "LoanListQuery",
    "LoanPaymentCreate",
    "LoanRecord",
    "LoanUpdate",
    "LoginRequest",
    "ProfileUpdate",
    "RecordModel",
    "RegisterRequest",
    "RequestModel",
    "SaleCreate",
    "SaleListQuery",
    "SaleRecord",
    "SaleUpdate",
    "SpendingCreate",
    "SpendingListQuery",
    "SpendingRecordOut",
    "SpendingUpdate",
    "TransferCreate",
    "UserRecord",
    "money_str",
]
