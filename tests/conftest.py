"""
Test configuration and fixtures for the Realty Staff API.
Provides database fixtures, test data factories, and image helpers.
"""

import io
import os
import shutil
import tempfile

# Configure the application before any realty_api module reads its settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"
os.environ["APP_URL"] = "http://testserver"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="realty-uploads-")

import pytest
from pathlib import Path
from typing import AsyncGenerator, Any, Dict
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.datastructures import Headers, UploadFile

from realty_api.config import settings
from realty_api.database import Base, get_db, json_serializer
from realty_api.main import app
from realty_api.models.property import PropertyType
from realty_api.repositories.property import PropertyRepository
from realty_api.repositories.user import UserRepository
from realty_api.services.image import ImageService, property_upload_policy, user_upload_policy
from realty_api.services.property import PropertyService
from realty_api.services.user import UserService


TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def test_engine():
    """Fresh in-memory database with the full schema for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        json_serializer=json_serializer,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database session override."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def upload_dir() -> Path:
    """Upload directory used by the application during tests."""
    return Path(settings.upload_dir)


@pytest.fixture(autouse=True)
def clean_upload_dir(upload_dir: Path):
    """Remove files written by a test."""
    yield
    for child in upload_dir.iterdir():
        if child.is_dir():
            shutil.rmtree(child, ignore_errors=True)
        else:
            child.unlink(missing_ok=True)


# Repository fixtures
@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    """Create a property repository instance."""
    return PropertyRepository(db_session)


@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    """Create a user repository instance."""
    return UserRepository(db_session)


# Service fixtures
@pytest.fixture
def property_service(db_session: AsyncSession) -> PropertyService:
    """Create a property service instance."""
    return PropertyService(db_session)


@pytest.fixture
def user_service(db_session: AsyncSession) -> UserService:
    """Create a user service instance."""
    return UserService(db_session)


@pytest.fixture
def property_image_service() -> ImageService:
    return ImageService(property_upload_policy())


@pytest.fixture
def user_image_service() -> ImageService:
    return ImageService(user_upload_policy())


# Image helpers
def make_image_bytes(image_format: str = "PNG", size=(8, 8), color=(200, 30, 30)) -> bytes:
    """Generate a small valid image."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=image_format)
    return buffer.getvalue()


def make_upload_file(
    filename: str = "photo.png",
    content: bytes = None,
    content_type: str = "image/png"
) -> UploadFile:
    """Build an UploadFile the way the framework hands it to services."""
    data = make_image_bytes() if content is None else content
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes()


# Test data factories
def property_data(**overrides: Any) -> Dict[str, Any]:
    """Field values for a valid property, keyed by attribute name."""
    data = {
        "property_id": "PROP-001",
        "title": "Modern family house",
        "description": "Corner house close to the park",
        "price": 250000.0,
        "location": "DHA Phase 5, Lahore",
        "house_number": "12",
        "block_number": "C",
        "property_type": PropertyType.HOUSE,
        "bedrooms": 4,
        "bathrooms": 3,
        "garage": 1,
        "area_size": "10 Marla",
        "year_built": 2018,
        "featured": False,
        "features": ["Garden", "Solar panels"],
    }
    data.update(overrides)
    return data


def property_form(**overrides: Any) -> Dict[str, str]:
    """Multipart form fields for a valid property, keyed by JSON name."""
    form = {
        "propertyId": "PROP-001",
        "title": "Modern family house",
        "description": "Corner house close to the park",
        "price": "250000",
        "location": "DHA Phase 5, Lahore",
        "houseNumber": "12",
        "blockNumber": "C",
        "propertyType": "house",
        "bedrooms": "4",
        "bathrooms": "3",
        "garage": "1",
        "areaSize": "10 Marla",
        "yearBuilt": "2018",
        "features": '["Garden", "Solar panels"]',
    }
    form.update(overrides)
    return {key: value for key, value in form.items() if value is not None}


def user_data(**overrides: Any) -> Dict[str, Any]:
    """Field values for a valid user, keyed by attribute name."""
    data = {
        "name": "Ayesha Khan",
        "email": "ayesha@example.com",
        "phone": "+92 300 1234567",
        "bio": "Senior agent for the northern blocks",
        "skills": ["Negotiation", "Valuation"],
    }
    data.update(overrides)
    return data


def user_form(**overrides: Any) -> Dict[str, str]:
    """Multipart form fields for a valid user."""
    form = {
        "name": "Ayesha Khan",
        "email": "ayesha@example.com",
        "phone": "+92 300 1234567",
        "role": "Manager",
        "department": "Sales",
        "bio": "Senior agent for the northern blocks",
        "skills": '["Negotiation", "Valuation"]',
    }
    form.update(overrides)
    return {key: value for key, value in form.items() if value is not None}


@pytest.fixture
def create_property(property_repository: PropertyRepository):
    """Factory inserting properties directly through the repository."""
    async def _create(**overrides: Any):
        return await property_repository.create(property_data(**overrides))
    return _create


@pytest.fixture
def create_user(user_repository: UserRepository):
    """Factory inserting users directly through the repository."""
    async def _create(**overrides: Any):
        return await user_repository.create(user_data(**overrides))
    return _create
