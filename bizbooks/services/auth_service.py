"""Registration, login and profile management."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bizbooks.core.errors import (
    ConflictError,
    InvalidCredentialsError,
    InvalidRequestError,
    NotFoundError,
)
from bizbooks.core.log import get_logger
from bizbooks.core.security import (
    AuthenticatedUser,
    SecurityProvider,
    hash_password,
    verify_password,
)
from bizbooks.db import transaction
from bizbooks.models import Account, AccountType, Category, CategoryType, User
from bizbooks.schemas.auth import LoginRequest, ProfileUpdate, RegisterRequest

LOGGER = get_logger(__name__)

DUPLICATE_USER = "Username or email already exists"

# (name, type, color, icon) seeded for every new user.
DEFAULT_CATEGORIES: tuple[tuple[str, CategoryType, str, str], ...] = (
    ("Salary", CategoryType.INCOME, "#10B981", "briefcase"),
    ("Business", CategoryType.INCOME, "#3B82F6", "building"),
    ("Investment", CategoryType.INCOME, "#8B5CF6", "trending-up"),
    ("Freelance", CategoryType.INCOME, "#F59E0B", "laptop"),
    ("Other Income", CategoryType.INCOME, "#6B7280", "plus-circle"),
    ("Food & Dining", CategoryType.EXPENSE, "#EF4444", "utensils"),
    ("Transportation", CategoryType.EXPENSE, "#F97316", "car"),
    ("Shopping", CategoryType.EXPENSE, "#EC4899", "shopping-bag"),
    ("Entertainment", CategoryType.EXPENSE, "#8B5CF6", "film"),
    ("Bills & Utilities", CategoryType.EXPENSE, "#06B6D4", "receipt"),
    ("Healthcare", CategoryType.EXPENSE, "#10B981", "heart"),
    ("Education", CategoryType.EXPENSE, "#3B82F6", "book"),
    ("Other Expenses", CategoryType.EXPENSE, "#6B7280", "minus-circle"),
    ("Inventory", CategoryType.PURCHASE, "#059669", "package"),
    ("Raw Materials", CategoryType.PURCHASE, "#DC2626", "layers"),
    ("Equipment", CategoryType.PURCHASE, "#7C3AED", "tool"),
    ("Office Supplies", CategoryType.PURCHASE, "#0891B2", "clipboard"),
    ("Technology", CategoryType.PURCHASE, "#EA580C", "monitor"),
    ("Other Purchases", CategoryType.PURCHASE, "#6B7280", "shopping-cart"),
    ("Product Sales", CategoryType.SALE, "#16A34A", "shopping-bag"),
    ("Service Sales", CategoryType.SALE, "#2563EB", "briefcase"),
    ("Digital Sales", CategoryType.SALE, "#9333EA", "smartphone"),
    ("Wholesale", CategoryType.SALE, "#DC2626", "truck"),
    ("Retail", CategoryType.SALE, "#059669", "store"),
    ("Other Sales", CategoryType.SALE, "#6B7280", "tag"),
)
DEFAULT_ACCOUNT_NAME = "Cash in Hand"


@dataclass(frozen=True)
class AuthResult:
    """A user together with a freshly issued access token."""

    user: User
    token: str

    def as_dict(self) -> dict[str, object]:
        return {
            "user": {
                "id": self.user.id,
                "username": self.user.username,
                "email": self.user.email,
                "full_name": self.user.full_name,
            },
            "token": self.token,
        }


def _principal(user: User) -> AuthenticatedUser:
    return AuthenticatedUser(user_id=user.id, username=user.username, email=user.email)


class AuthService:
    def __init__(self, session: Session, security: SecurityProvider) -> None:
        self._session = session
        self._security = security

    def register(self, payload: RegisterRequest) -> AuthResult:
        """Create a user with default categories and a cash account."""

        with transaction(self._session):
            existing = self._session.execute(
                select(User.id).where(
                    or_(User.username == payload.username, User.email == payload.email)
                )
            ).first()
            if existing is not None:
                raise ConflictError(DUPLICATE_USER)

            user = User(
                username=payload.username,
                email=payload.email,
                password_hash=hash_password(payload.password),
                full_name=payload.full_name,
                business_name=payload.business_name,
            )
            self._session.add(user)
            try:
                self._session.flush()
            except IntegrityError as exc:
                raise ConflictError(DUPLICATE_USER) from exc

            self._session.add_all(
                Category(user_id=user.id, name=name, type=kind, color=color, icon=icon)
                for name, kind, color, icon in DEFAULT_CATEGORIES
            )
            self._session.add(
                Account(
                    user_id=user.id,
                    account_type=AccountType.CASH,
                    account_name=DEFAULT_ACCOUNT_NAME,
                    balance=Decimal("0.00"),
                )
            )
        LOGGER.info("Registered user %s (#%s)", user.username, user.id)
        return AuthResult(user=user, token=self._security.create_access_token(_principal(user)))

    def login(self, payload: LoginRequest) -> AuthResult:
        user = self._session.execute(
            select(User).where(or_(User.username == payload.login, User.email == payload.login))
        ).scalars().first()
        if user is None or not verify_password(payload.password, user.password_hash):
            LOGGER.warning("Rejected login for %r", payload.login)
            raise InvalidCredentialsError("Invalid credentials")
        return AuthResult(user=user, token=self._security.create_access_token(_principal(user)))

    def profile(self, user_id: int) -> User:
        user = self._session.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, user_id: int, payload: ProfileUpdate) -> User:
        changes = {key: value for key, value in payload.provided_fields().items() if value}
        with transaction(self._session):
            user = self.profile(user_id)
            email = changes.get("email")
            if email is not None:
                taken = self._session.execute(
                    select(User.id).where(User.email == email, User.id != user_id)
                ).first()
                if taken is not None:
                    raise ConflictError("Email already in use")
            if not changes:
                raise InvalidRequestError("No valid fields to update")
            for field, value in changes.items():
                setattr(user, field, value)
            try:
                self._session.flush()
            except IntegrityError as exc:
                raise ConflictError("Email already in use") from exc
        self._session.refresh(user)
        return user

    def refresh(self, principal: AuthenticatedUser) -> str:
        return self._security.create_access_token(principal)


__all__ = ["AuthResult", "AuthService", "DEFAULT_ACCOUNT_NAME", "DEFAULT_CATEGORIES"]
