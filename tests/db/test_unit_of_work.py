"""Tests for the commit-or-rollback unit of work."""
from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from bizbooks.core.errors import BusinessRuleError
from bizbooks.db import UnitOfWork, transaction
from bizbooks.models import User


def _user(name: str) -> User:
    return User(
        username=name,
        email=f"{name}@example.com",
        password_hash="x",
        full_name=name.title(),
    )


def _count(session_factory: sessionmaker) -> int:
    with session_factory() as session:
        return session.execute(select(func.count(User.id))).scalar_one()


def test_unit_of_work_commits_on_success(session_factory: sessionmaker) -> None:
    with UnitOfWork(session_factory) as session:
        session.add(_user("committed"))

    assert _count(session_factory) == 1


def test_unit_of_work_rolls_back_on_error(session_factory: sessionmaker) -> None:
    unit = UnitOfWork(session_factory)
    with pytest.raises(BusinessRuleError):
        with unit as session:
            session.add(_user("discarded"))
            session.flush()
            raise BusinessRuleError("nope")

    assert _count(session_factory) == 0
    with pytest.raises(RuntimeError):
        unit.session


def test_transaction_rolls_back_after_preceding_read(session: Session, session_factory) -> None:
    session.execute(select(User.id)).all()
    assert session.in_transaction()

    with pytest.raises(BusinessRuleError):
        with transaction(session):
            session.add(_user("partial"))
            session.flush()
            raise BusinessRuleError("nope")

    assert _count(session_factory) == 0
