"""
Test configuration and fixtures for MiniCash backend tests.
"""
import pytest
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from app.core.database import Base, get_db
from app.core.config import settings
from app.core.security import get_password_hash, create_principal_token
from main import app


# ============================================================
# Database Fixtures
# ============================================================

# Use SQLite for testing (in-memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

API = settings.API_PREFIX


@pytest.fixture
async def test_engine():
    """Create a fresh in-memory database for each test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for each test"""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ============================================================
# User Fixtures
# ============================================================

@pytest.fixture
async def test_user(db_session):
    """Create a client with the score a fresh registration leaves"""
    from app.modules.users.models import User, Role

    user = User(
        dni="12345678",
        nombres="María",
        apellidos="García",
        telefono="999888777",
        email="maria@example.com",
        password_hash=get_password_hash("cliente123"),
        role=Role.CLIENT,
        credit_score=30
    )

    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)

    return user


@pytest.fixture
async def admin_user(db_session):
    """Create an administrator"""
    from app.modules.users.models import User, Role

    admin = User(
        dni="00000000",
        nombres="Administrador",
        apellidos="Mini Cash",
        telefono="922163731",
        email="admin@minicash.pe",
        password_hash=get_password_hash("admin123"),
        role=Role.ADMIN,
        credit_score=100
    )

    db_session.add(admin)
    await db_session.commit()
    await db_session.refresh(admin)

    return admin


@pytest.fixture
async def auth_headers(test_user):
    """Generate auth headers for test user"""
    token = create_principal_token(test_user.id, test_user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def admin_headers(admin_user):
    """Generate auth headers for the administrator"""
    token = create_principal_token(admin_user.id, admin_user.role)
    return {"Authorization": f"Bearer {token}"}


# ============================================================
# Loan Fixtures
# ============================================================

@pytest.fixture
async def pending_loan(db_session, test_user):
    """A 200 over 2 installments application awaiting review"""
    from app.modules.loans.services import LoanService

    return await LoanService(db_session).apply_loan(test_user.id, 200, 2, "Negocio")


@pytest.fixture
async def active_loan(db_session, pending_loan):
    """The pending loan after approval"""
    from app.modules.loans.services import LoanService

    return await LoanService(db_session).approve_loan(pending_loan.id)
