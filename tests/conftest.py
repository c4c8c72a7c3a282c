"""Shared test fixtures — async DB, client, auth helpers, factories.

Uses SQLite + aiosqlite for fast isolated tests without PostgreSQL.
"""

from __future__ import annotations

import os

# Set test settings before any other import touches pydantic-settings
os.environ.setdefault("JWT_SECRET", "test-secret-for-ci-do-not-use-in-production")
os.environ.setdefault("GRANT_RATE_LIMIT", "1000/minute")
os.environ.setdefault("LOGIN_RATE_LIMIT", "1000/minute")
os.environ.setdefault("LOG_LEVEL", "warning")

import uuid
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import AsyncGenerator, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy import update
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from hr_leave.auth.context import AuthContext
from hr_leave.auth.security import hash_password
from hr_leave.common.constants import (
    DurationUnit,
    LeaveKind,
    LeaveStatus,
    UserRole,
)
from hr_leave.config import settings
from hr_leave.database import Base, get_db
from hr_leave.main import create_app

# Register every mapped class on Base.metadata
import hr_leave.employees.models  # noqa: F401
import hr_leave.leave.models  # noqa: F401

from hr_leave.employees.models import Employee
from hr_leave.leave.models import LeaveRequest

# ── SQLite compat: compile PG-specific types ────────────────────────

from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.ext.compiler import compiles


@compiles(PG_UUID, "sqlite")
def _uuid_sqlite(element, compiler, **kw):
    return "CHAR(36)"


# ── Test database (SQLite in-memory) ────────────────────────────────

TEST_DATABASE_URL = "sqlite+aiosqlite://"

engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSessionFactory = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False,
)


@pytest.fixture(autouse=True)
async def _setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Reset rate limiter storage between tests to prevent cross-test interference."""
    from hr_leave.common.rate_limit import limiter

    limiter.reset()
    yield


async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app():
    """Create a fresh app instance with DB dependency overridden."""
    application = create_app()
    application.dependency_overrides[get_db] = _override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Database session (for direct DB operations in tests) ────────────

@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        yield session
        await session.commit()


# ── Model factories ─────────────────────────────────────────────────

async def seed_employee(
    db: AsyncSession,
    *,
    username: Optional[str] = None,
    name: str = "Test Employee",
    role: UserRole = UserRole.employee,
    hire_date: date = date(2020, 3, 1),
    correction_days: int = 0,
    remaining: Decimal = Decimal("0"),
    last_grant: Optional[date] = None,
    password: Optional[str] = None,
) -> Employee:
    emp = Employee(
        id=uuid.uuid4(),
        username=username or f"user_{uuid.uuid4().hex[:8]}",
        name=name,
        role=role,
        hire_date=hire_date,
        seniority_correction_days=correction_days,
        remaining_annual_leave_days=remaining,
        last_annual_leave_grant_date=last_grant,
        password_hash=hash_password(password) if password else None,
    )
    db.add(emp)
    await db.commit()
    return emp


async def seed_leave_request(
    db: AsyncSession,
    employee_id: uuid.UUID,
    *,
    leave_type: LeaveKind = LeaveKind.annual,
    other_leave_type: Optional[str] = None,
    start_date: date = date(2024, 6, 10),
    end_date: Optional[date] = None,
    duration: Decimal = Decimal("1"),
    unit: DurationUnit = DurationUnit.day,
    status: LeaveStatus = LeaveStatus.pending,
    deducted: Optional[bool] = False,
    submitted_by: Optional[uuid.UUID] = None,
) -> LeaveRequest:
    is_hourly = unit == DurationUnit.hour
    req = LeaveRequest(
        id=uuid.uuid4(),
        employee_id=employee_id,
        submitted_by=submitted_by or employee_id,
        leave_type=leave_type,
        other_leave_type=other_leave_type,
        start_date=start_date,
        end_date=end_date or start_date,
        is_hourly=is_hourly,
        start_time=time(9, 0) if is_hourly else None,
        end_time=time(13, 0) if is_hourly else None,
        duration=duration,
        duration_unit=unit,
        reason="Family trip",
        status=status,
        deducted_from_annual_leave=deducted,
    )
    db.add(req)
    await db.commit()
    if deducted is None:
        # Column default would replace an explicit None on insert
        await db.execute(
            update(LeaveRequest)
            .where(LeaveRequest.id == req.id)
            .values(deducted_from_annual_leave=None)
        )
        await db.commit()
    return req


def admin_ctx(actor_id: Optional[uuid.UUID] = None) -> AuthContext:
    return AuthContext(actor_id=actor_id or uuid.uuid4(), role=UserRole.admin)


def employee_ctx(actor_id: uuid.UUID) -> AuthContext:
    return AuthContext(actor_id=actor_id, role=UserRole.employee)


# ── Auth helpers ────────────────────────────────────────────────────

def create_access_token(
    employee_id: uuid.UUID,
    role: UserRole = UserRole.employee,
    expired: bool = False,
    token_type: str = "access",
) -> str:
    """Generate a JWT access token for testing."""
    if expired:
        exp = datetime.now(timezone.utc) - timedelta(hours=1)
    else:
        exp = datetime.now(timezone.utc) + timedelta(hours=1)
    payload = {
        "sub": str(employee_id),
        "role": role.value,
        "type": token_type,
        "exp": exp,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def bearer(employee: Employee) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(employee.id, employee.role)}"}


@pytest.fixture
async def admin(db) -> Employee:
    return await seed_employee(
        db, username="admin", name="Admin", role=UserRole.admin, hire_date=date(2015, 1, 5),
    )


@pytest.fixture
async def employee(db) -> Employee:
    return await seed_employee(
        db, username="alice", name="Alice", hire_date=date(2020, 3, 1), remaining=Decimal("10"),
    )
