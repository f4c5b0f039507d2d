# tests/conftest.py
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.domain.enums import Role
from core.services.auth import principal_for_user
from infra.db.base import Base
import infra.db.models  # noqa
from infra.services import build_service_graph


@pytest.fixture(autouse=True)
def _pricing_env(monkeypatch):
    # keep tests independent from the developer's shell
    monkeypatch.delenv("TF_MISSING_PRICE_POLICY", raising=False)
    monkeypatch.delenv("TF_DEFAULT_OPERATION_PRICE", raising=False)
    monkeypatch.delenv("TF_ADMIN_USERNAME", raising=False)


@pytest.fixture
def session():
    # separate in-memory DB for tests
    engine = create_engine("sqlite:///:memory:", future=True)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def services(session):
    return build_service_graph(session).as_dict()


@pytest.fixture
def login(services):
    def _login(user):
        services["user_session"].set_principal(principal_for_user(user))
        return user

    return _login


@pytest.fixture
def admin(services, login):
    """Signed-in platform admin; companies 'Acme' and 'Globex' are registered."""
    user = services["user_service"].bootstrap_admin()
    login(user)
    for name in ("Acme", "Globex"):
        services["company_service"].create_company(name, contact_email=f"ops@{name.lower()}.test")
    return user


@pytest.fixture
def manager(services, admin, login):
    """Project manager of company 'Acme' with 1000.00 balance; leaves admin signed in."""
    us = services["user_service"]
    pm = us.create_user(
        "pm1",
        Role.PROJECT_MANAGER,
        display_name="Pat Manager",
        company_name="Acme",
        initial_balance="1000.00",
    )
    return pm
