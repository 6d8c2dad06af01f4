"""Pytest configuration and fixtures."""
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.database import Base, create_db_engine, create_session_factory

PASSWORD = "Passw0rd1"


@pytest.fixture
def settings(tmp_path):
    """Test settings on a throwaway SQLite file shared by the app and the tests."""
    return Settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        secret_key="test-secret-key",
        debug=True,
        bcrypt_rounds=4,
    )


@pytest.fixture
def engine(settings):
    import app.models  # noqa: F401

    engine = create_db_engine(settings)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def db_session(session_factory):
    """Create a test database session."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(settings, engine):
    """API client against an app bound to the same database file."""
    from app.main import create_app

    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def make_tenant(db_session):
    """Factory for committed tenants."""
    from app.repositories.tenant import TenantRepository

    def _make(subdomain="acme", name=None, **kwargs):
        tenant = TenantRepository(db_session).create(
            name=name or f"{subdomain.capitalize()} Corp", subdomain=subdomain, **kwargs
        )
        db_session.commit()
        return tenant

    return _make


@pytest.fixture
def make_user(db_session):
    """Factory for committed users, all with password ``PASSWORD``."""
    from app.repositories.user import UserRepository
    from app.services.credentials import hash_password

    def _make(tenant=None, email="user@acme.com", role="user", full_name="Test User", is_active=True):
        user = UserRepository(db_session).create(
            tenant_id=tenant.id if tenant else None,
            email=email,
            hashed_password=hash_password(PASSWORD, rounds=4),
            full_name=full_name,
            role=role,
        )
        user.is_active = is_active
        db_session.commit()
        return user

    return _make


@pytest.fixture
def sample_tenant(make_tenant):
    """Create a sample tenant."""
    return make_tenant("acme")


@pytest.fixture
def tenant_admin(make_user, sample_tenant):
    return make_user(sample_tenant, email="admin@acme.com", role="tenant_admin", full_name="Acme Admin")


@pytest.fixture
def member(make_user, sample_tenant):
    return make_user(sample_tenant, email="member@acme.com", role="user", full_name="Acme Member")


@pytest.fixture
def super_admin(make_user):
    return make_user(None, email="root@system.com", role="super_admin", full_name="Super Admin")


@pytest.fixture
def auth_headers(settings):
    """Build bearer headers for a user without going through /auth/login."""
    from app.services.credentials import create_access_token

    def _headers(user, expires=timedelta(hours=1)):
        token = create_access_token(
            {"sub": str(user.id), "role": user.role},
            settings.secret_key,
            expires_delta=expires,
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def principal_for():
    """Principal built straight from a user row."""
    from app.services.principal import Principal

    return Principal.from_user
