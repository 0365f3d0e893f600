import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-suite-signing-key-not-for-production-use")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from coaching_api import create_app
from coaching_api.core.database import get_db
from coaching_api.models import Base, User
from coaching_api.schemas.auth import CallerContext
from coaching_api.schemas.enums import UserRole
from coaching_api.services import BatchService, IdentityService

PASSWORD = "secret123"


def caller_for(user: User) -> CallerContext:
    return CallerContext(identity=user.id, role=user.role, email=user.email)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    app = create_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def identity_service(db):
    return IdentityService(db)


@pytest.fixture
def batch_service(db):
    return BatchService(db)


@pytest.fixture
async def teacher(identity_service):
    return await identity_service.create_account(UserRole.TEACHER, "Asha Rao", "asha@brightminds.edu", PASSWORD)


@pytest.fixture
async def other_teacher(identity_service):
    return await identity_service.create_account(UserRole.TEACHER, "Vikram Sen", "vikram@brightminds.edu", PASSWORD)


@pytest.fixture
async def student(identity_service):
    return await identity_service.create_account(UserRole.STUDENT, "Ravi Kumar", "ravi@brightminds.edu", PASSWORD)


@pytest.fixture
async def other_student(identity_service):
    return await identity_service.create_account(UserRole.STUDENT, "Meena Iyer", "meena@brightminds.edu", PASSWORD)


@pytest.fixture
async def parent(identity_service, student):
    return await identity_service.register_parent(
        "Sunil Kumar", "sunil@brightminds.edu", PASSWORD, student.email
    )


@pytest.fixture
async def batch(batch_service, teacher, student):
    """A batch owned by `teacher` with `student` enrolled"""
    batch = await batch_service.create_batch(caller_for(teacher), "jee-a1", "JEE Morning", "Class 11")
    await batch_service.join_by_code(caller_for(student), "JEE-A1")
    return batch
