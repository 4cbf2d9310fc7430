"""
Test Configuration and Fixtures
Provides shared test setup for all test cases
"""
import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-recam-backend-tests")

import sys
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import patch
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from app.main import app
from app.database.connection import get_db, Base
from app.models.enums import UserRole, PropertyType, SaleCategory, ListingCaseStatus, MediaType
from app.models.user import User, PhotographyCompany, Agent
from app.models.listing_case import ListingCase, AgentListingCase
from app.models.media_asset import MediaAsset
from app.utils.security import create_access_token

# Test database URL (use in-memory SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Create test engine
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSessionLocal = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

# Every module that opens sessions through AsyncSessionLocal
MODULES_TO_PATCH = [
    "app.services.listing_case_service",
    "app.services.media_asset_service",
    "app.services.media_download_service",
    "app.services.history_service",
    "app.services.user_service",
    "app.database.connection",
]


@pytest_asyncio.fixture(scope="function")
async def db_session():
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(db_session):
    """Create test HTTP client"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    # Context manager that hands out the test session and leaves it open
    class TestSessionContext:
        def __init__(self, session):
            self.session = session

        async def __aenter__(self):
            return self.session

        async def __aexit__(self, *args):
            pass

    def make_test_session_local(session):
        return lambda: TestSessionContext(session)

    patches = []
    for module_name in MODULES_TO_PATCH:
        if module_name in sys.modules:
            module = sys.modules[module_name]
            if hasattr(module, "AsyncSessionLocal"):
                patches.append(patch.object(module, "AsyncSessionLocal", make_test_session_local(db_session)))

    for p in patches:
        p.start()

    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        for p in patches:
            p.stop()
        app.dependency_overrides.clear()


def auth_headers(user_id: str, role: str) -> dict:
    token = create_access_token({"sub": user_id, "role": role})
    return {"Authorization": f"Bearer {token}"}


async def _add_user(db_session, role: UserRole) -> User:
    user_id = str(uuid.uuid4())
    user = User(
        id=user_id,
        username=f"user_{uuid.uuid4().hex[:10]}",
        email=f"user_{uuid.uuid4().hex[:10]}@example.com",
        role=role,
        is_deleted=False,
    )
    db_session.add(user)
    if role is UserRole.PHOTOGRAPHY_COMPANY:
        db_session.add(PhotographyCompany(id=user_id, photography_company_name="Sunrise Photography"))
    else:
        db_session.add(Agent(
            id=user_id,
            agent_first_name="Olivia",
            agent_last_name="Nguyen",
            avatar_url=None,
            company_name="Harbour Realty",
        ))
    await db_session.commit()
    return user


@pytest_asyncio.fixture(scope="function")
async def photography_company(db_session):
    """Photography company user with its auth headers"""
    user = await _add_user(db_session, UserRole.PHOTOGRAPHY_COMPANY)
    return user, auth_headers(user.id, "PhotographyCompany")


@pytest_asyncio.fixture(scope="function")
async def other_photography_company(db_session):
    user = await _add_user(db_session, UserRole.PHOTOGRAPHY_COMPANY)
    return user, auth_headers(user.id, "PhotographyCompany")


@pytest_asyncio.fixture(scope="function")
async def assigned_agent(db_session):
    """Agent that the listing_case fixture assigns to its case"""
    user = await _add_user(db_session, UserRole.AGENT)
    return user, auth_headers(user.id, "Agent")


@pytest_asyncio.fixture(scope="function")
async def unassigned_agent(db_session):
    user = await _add_user(db_session, UserRole.AGENT)
    return user, auth_headers(user.id, "Agent")


async def _add_listing_case(db_session, owner_id: str, title: str = "3 Bed Family Home", created_at=None) -> ListingCase:
    listing_case = ListingCase(
        title=title,
        description="Renovated home close to schools",
        street="12 Ocean Street",
        city="Bondi",
        state="NSW",
        postcode=2026,
        longitude=Decimal("0"),
        latitude=Decimal("0"),
        price=Decimal("0"),
        bedrooms=3,
        bathrooms=2,
        garages=1,
        floor_area=180.5,
        created_at=created_at or datetime.now(timezone.utc),
        is_deleted=False,
        property_type=PropertyType.HOUSE,
        sale_category=SaleCategory.FOR_SALE,
        listing_case_status=ListingCaseStatus.CREATED,
        user_id=owner_id,
    )
    db_session.add(listing_case)
    await db_session.commit()
    return listing_case


async def _add_media_asset(
    db_session,
    listing_case: ListingCase,
    media_type: MediaType = MediaType.PHOTO,
    media_url: str = None,
    is_hero: bool = False,
    is_select: bool = False,
) -> MediaAsset:
    media_asset = MediaAsset(
        media_type=media_type,
        media_url=media_url or f"https://res.cloudinary.com/demo/image/upload/v1/media-assets/{uuid.uuid4().hex}.jpg",
        uploaded_at=datetime.now(timezone.utc),
        is_select=is_select,
        is_hero=is_hero,
        is_deleted=False,
        listing_case_id=listing_case.id,
        user_id=listing_case.user_id,
    )
    db_session.add(media_asset)
    await db_session.commit()
    return media_asset


@pytest_asyncio.fixture(scope="function")
async def listing_case(db_session, photography_company, assigned_agent):
    """Listing case owned by photography_company with assigned_agent on it"""
    company, _ = photography_company
    agent, _ = assigned_agent
    case = await _add_listing_case(db_session, company.id, created_at=datetime.now(timezone.utc) - timedelta(days=1))
    db_session.add(AgentListingCase(agent_id=agent.id, listing_case_id=case.id))
    await db_session.commit()
    return case


@pytest.fixture(scope="function")
def make_listing_case(db_session):
    """Factory: make_listing_case(owner_id, title=..., created_at=None)"""
    async def factory(owner_id: str, title: str = "3 Bed Family Home", created_at=None) -> ListingCase:
        return await _add_listing_case(db_session, owner_id, title, created_at)
    return factory


@pytest.fixture(scope="function")
def make_media_asset(db_session):
    """Factory: make_media_asset(listing_case, media_type=Photo, media_url=None, is_hero=False, is_select=False)"""
    async def factory(listing_case: ListingCase, media_type: MediaType = MediaType.PHOTO, **kwargs) -> MediaAsset:
        return await _add_media_asset(db_session, listing_case, media_type, **kwargs)
    return factory
