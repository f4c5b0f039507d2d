from __future__ import annotations

from decimal import Decimal

import pytest

from core.domain.enums import Role
from core.exceptions import ConcurrencyError, NotFoundError
from core.models import UserAccount
from infra.db.auth.repository import SqlAlchemyUserRepository


@pytest.fixture
def user_repo(session):
    return SqlAlchemyUserRepository(session)


@pytest.fixture
def funded(session, user_repo):
    user = UserAccount.create(
        username="funded",
        role=Role.PROJECT_MANAGER,
        company_name="Acme",
        balance=Decimal("500.00"),
    )
    user_repo.add(user)
    session.commit()
    return user


def test_conditional_debit_refuses_when_balance_is_short(session, user_repo, funded):
    assert user_repo.debit_balance(funded.id, Decimal("500.01")) is False
    session.commit()

    assert user_repo.get(funded.id).balance == Decimal("500.00")


def test_conditional_debit_takes_exact_balance(session, user_repo, funded):
    assert user_repo.debit_balance(funded.id, Decimal("500.00")) is True
    session.commit()

    stored = user_repo.get(funded.id)
    assert stored.balance == Decimal("0.00")
    assert stored.version == funded.version + 1


def test_second_debit_sees_first(session, user_repo, funded):
    assert user_repo.debit_balance(funded.id, Decimal("300.00")) is True
    assert user_repo.debit_balance(funded.id, Decimal("300.00")) is False
    session.commit()

    assert user_repo.get(funded.id).balance == Decimal("200.00")


def test_debit_unknown_user(user_repo):
    with pytest.raises(NotFoundError):
        user_repo.debit_balance("missing", Decimal("1.00"))


def test_credit_balance(session, user_repo, funded):
    user_repo.credit_balance(funded.id, Decimal("25.25"))
    session.commit()

    assert user_repo.get(funded.id).balance == Decimal("525.25")
    with pytest.raises(NotFoundError):
        user_repo.credit_balance("missing", Decimal("1.00"))


def test_update_rejects_stale_version(session, user_repo, funded):
    first = user_repo.get(funded.id)
    second = user_repo.get(funded.id)

    first.display_name = "First writer"
    user_repo.update(first)
    session.commit()

    second.display_name = "Second writer"
    with pytest.raises(ConcurrencyError):
        user_repo.update(second)
    session.rollback()

    assert user_repo.get(funded.id).display_name == "First writer"
