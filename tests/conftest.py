"""Test configuration."""
import os
from collections.abc import AsyncIterator, Callable, Iterator
from datetime import datetime
from pathlib import Path
from uuid import uuid4

from alembic import command
from alembic.config import Config
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

# --- Default env for the test run
os.environ.setdefault("DATABASE_URL", "sqlite:///./cybershield_test.db")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ADMIN_EMAIL", "ops@example.com")
os.environ.setdefault("CYB_ENV", "test")

from cybershield.main import app  # noqa: E402
from cybershield.db import get_db  # noqa: E402
from cybershield.models import Base, User, UserRole  # noqa: E402
from cybershield.security import create_access_token, hash_password  # noqa: E402
from cybershield.services.notifications import get_mailer  # noqa: E402
from cybershield.services.rate_limit import build_rate_limits  # noqa: E402
from cybershield.utils.time import utcnow  # noqa: E402

DB_PATH = Path("./cybershield_test.db")
DEFAULT_PASSWORD = "s3cure-pass"


def _run_migrations() -> None:
    cfg = Config(str(Path(__file__).resolve().parents[1] / "alembic.ini"))
    cfg.set_main_option("script_location", str(Path(__file__).resolve().parents[1] / "alembic"))
    cfg.set_main_option("sqlalchemy.url", os.environ["DATABASE_URL"])
    command.upgrade(cfg, "head")


# --- (1) Fresh DB file per session
if DB_PATH.exists():
    DB_PATH.unlink()

engine = create_engine(
    os.environ["DATABASE_URL"],
    connect_args={"check_same_thread": False},
    future=True,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False,
                                   future=True, expire_on_commit=False)

# --- (2) Schema comes from Alembic only
_run_migrations()


class RecordingMailer:
    """Stand-in for ``Mailer`` that records or fails deliveries."""

    def __init__(self, *, admin_email: str | None = "ops@example.com", fail: bool = False) -> None:
        self.enabled = True
        self.admin_email = admin_email
        self.fail = fail
        self.attempts = []
        self.sent = []

    async def send(self, email) -> None:
        self.attempts.append(email)
        if self.fail:
            raise ConnectionError("SMTP unreachable")
        self.sent.append(email)


@pytest.fixture
def db_session() -> Iterator[Session]:
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        for table in reversed(Base.metadata.sorted_tables):
            session.execute(table.delete())
        session.commit()
        session.close()


@pytest.fixture(autouse=True)
def override_db_dependency(db_session: Session) -> Iterator[None]:
    def _get_db() -> Iterator[Session]:
        yield db_session
    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture(autouse=True)
def mailer() -> Iterator[RecordingMailer]:
    recording = RecordingMailer()
    app.dependency_overrides[get_mailer] = lambda: recording
    yield recording
    app.dependency_overrides.pop(get_mailer, None)


@pytest.fixture
def failing_mailer(mailer: RecordingMailer) -> Iterator[RecordingMailer]:
    recording = RecordingMailer(fail=True)
    app.dependency_overrides[get_mailer] = lambda: recording
    yield recording
    app.dependency_overrides.pop(get_mailer, None)


@pytest.fixture(autouse=True)
def fresh_rate_limits() -> Iterator[None]:
    previous = app.state.rate_limits
    app.state.rate_limits = build_rate_limits()
    yield
    app.state.rate_limits = previous


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as async_client:
        yield async_client


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def make_user(db_session: Session) -> Callable[..., User]:
    def _factory(
        *,
        name: str = "Test User",
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
        is_active: bool = True,
        role: UserRole = UserRole.user,
        created_at: datetime | None = None,
    ) -> User:
        user = User(
            name=name,
            email=email or f"user-{uuid4().hex[:8]}@example.com",
            password_hash=hash_password(password),
            is_active=is_active,
            role=role,
            created_at=created_at or utcnow(),
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _factory


@pytest.fixture
def auth_headers(make_user: Callable[..., User]) -> dict[str, str]:
    user = make_user()
    return {"Authorization": f"Bearer {create_access_token(user)}"}
