from datetime import UTC, datetime, time, timedelta
from pathlib import Path
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from samankhojo.adapters.clock import FixedClock
from samankhojo.adapters.sqlite.migrator import SQLiteMigrator
from samankhojo.adapters.sqlite.repos import SQLiteUserRepo
from samankhojo.api import deps
from samankhojo.api.auth_utils import create_access_token
from samankhojo.api.main import app
from samankhojo.app_shell.rate_limit import RateLimiter
from samankhojo.domain.entities import User
from samankhojo.rules.loader import load_rules

# Every test runs on 2025-11-01 at noon IST
TEST_NOW = datetime(2025, 11, 1, 6, 30, tzinfo=UTC)
TEST_LOCAL_TIME = time(12, 0)


@pytest.fixture
def rules():
    """Load the REAL rules from the project root (tests run from the root)."""
    rules_path = Path("rules.yaml").resolve()
    if not rules_path.exists():
        raise FileNotFoundError(f"Rules not found at {rules_path}")
    return load_rules(rules_path)


@pytest.fixture
def clock():
    return FixedClock(TEST_NOW, local=TEST_LOCAL_TIME)


@pytest.fixture
def db_path(tmp_path):
    """A migrated SQLite database in a temporary directory."""
    path = str(tmp_path / "samankhojo.db")
    SQLiteMigrator(path, "migrations").run_migrations()
    return path


# --- API fixtures ---


class _TestSettings:
    def __init__(self, data_dir: Path, db_path: str) -> None:
        self.data_dir = data_dir
        self.db_path = db_path
        self.assets_dir = data_dir / "assets"
        self.rules_path = Path("rules.yaml").resolve()
        self.migrations_dir = Path("migrations").resolve()


@pytest.fixture
def settings(tmp_path, db_path):
    return _TestSettings(tmp_path, db_path)


@pytest.fixture
def limiter(rules):
    return RateLimiter(rules.rate_limits)


@pytest.fixture
def client(settings, rules, clock, limiter):
    """
    TestClient wired to the temporary database.

    The lifespan is not entered, so no expiry thread is started.
    """
    app.dependency_overrides[deps.get_settings] = lambda: settings
    app.dependency_overrides[deps.get_rules] = lambda: rules
    app.dependency_overrides[deps.get_clock] = lambda: clock
    app.dependency_overrides[deps.get_rate_limiter] = lambda: limiter
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def user_repo(db_path):
    return SQLiteUserRepo(db_path)


def _make_user(repo: SQLiteUserRepo, email: str, roles: list[str]) -> User:
    user = User(
        id=uuid4(),
        email=email,
        display_name=email.split("@")[0].title(),
        phone="9800000000",
        password_hash="not-a-real-hash",
        roles=roles,
        status="active",
    )
    repo.save(user)
    return user


def _auth_headers(user: User) -> dict[str, str]:
    token = create_access_token({"sub": str(user.id)}, expires_delta=timedelta(minutes=30))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(user_repo):
    return _make_user(user_repo, "admin@example.com", ["customer", "admin"])


@pytest.fixture
def customer_user(user_repo):
    return _make_user(user_repo, "sita@example.com", ["customer"])


@pytest.fixture
def other_customer(user_repo):
    return _make_user(user_repo, "ram@example.com", ["customer"])


@pytest.fixture
def admin_headers(admin_user):
    return _auth_headers(admin_user)


@pytest.fixture
def customer_headers(customer_user):
    return _auth_headers(customer_user)


@pytest.fixture
def other_headers(other_customer):
    return _auth_headers(other_customer)


@pytest.fixture(autouse=True)
def _no_production_env(monkeypatch):
    monkeypatch.delenv("SAMANKHOJO_ENV", raising=False)
