"""
Test configuration and fixtures for the Bay Homes listing API.
Provides an in-memory database, a recording blob store, service fixtures and test data factories.
"""

import os
import tempfile

# Settings are read at import time, so the environment is prepared first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["ENVIRONMENT"] = "testing"
os.environ["BLOB_BACKEND"] = "local"
os.environ.setdefault("MEDIA_DIR", tempfile.mkdtemp(prefix="bayhomes-media-"))

import base64
import io
import uuid
from typing import AsyncGenerator, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from bayhomes.database import Base, get_db
from bayhomes.main import app
from bayhomes.models import User, Area, Developer, Project, Property
from bayhomes.schemas.area import AreaCreate
from bayhomes.schemas.developer import DeveloperCreate
from bayhomes.schemas.project import ProjectCreate
from bayhomes.schemas.property import PropertyCreate
from bayhomes.schemas.user import UserCreate
from bayhomes.services.area import AreaService
from bayhomes.services.blob_store import BlobStore
from bayhomes.services.developer import DeveloperService
from bayhomes.services.project import ProjectService
from bayhomes.services.property import PropertyService
from bayhomes.services.user import UserService
from bayhomes.utils.dependencies import get_blob_store
from bayhomes.utils.exceptions import BlobStoreError


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Raw payloads are never decoded by the recording store
RAW_IMAGE = "data:image/png;base64,aGVsbG8="


def raw_image(tag: str) -> str:
    """A distinct raw payload, recognisable in ``RecordingBlobStore.uploads``."""
    return f"data:image/png;base64,{base64.b64encode(tag.encode()).decode()}"


def png_data_uri(color: str = "red", size=(4, 4), image_format: str = "PNG") -> str:
    """A real image encoded as a data URI, for stores that decode payloads."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=image_format)
    mime = "jpeg" if image_format == "JPEG" else image_format.lower()
    return f"data:image/{mime};base64,{base64.b64encode(buffer.getvalue()).decode()}"


class RecordingBlobStore(BlobStore):
    """
    Blob store double that records every upload and destroy call.
    URLs are shaped like Cloudinary delivery URLs.
    """

    base_url = "https://res.cloudinary.com/demo/image/upload/v1/bay-homes"

    def __init__(self):
        self.uploads: List[str] = []
        self.destroyed: List[str] = []
        self.fail_upload_on: Optional[str] = None
        self.fail_destroy = False

    async def upload(self, payload: str) -> str:
        if self.fail_upload_on and payload == self.fail_upload_on:
            raise BlobStoreError("upload", "simulated outage")
        self.uploads.append(payload)
        return f"{self.base_url}/blob{len(self.uploads)}.png"

    async def destroy(self, public_id: str) -> None:
        if self.fail_destroy:
            raise BlobStoreError("destroy", "simulated outage")
        self.destroyed.append(public_id)

    @property
    def call_count(self) -> int:
        return len(self.uploads) + len(self.destroyed)

    def reset(self) -> None:
        self.uploads.clear()
        self.destroyed.clear()


def public_id(url: str) -> str:
    """Identifier the recording store receives when ``url`` is released."""
    return url.split("/upload/v1/", 1)[1].rsplit(".", 1)[0]


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
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
def blob_store() -> RecordingBlobStore:
    return RecordingBlobStore()


@pytest.fixture
async def async_client(db_session: AsyncSession, blob_store: RecordingBlobStore) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database session and blob store overrides."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Service fixtures
@pytest.fixture
def user_service(db_session: AsyncSession) -> UserService:
    return UserService(db_session)


@pytest.fixture
def area_service(db_session: AsyncSession, blob_store: RecordingBlobStore) -> AreaService:
    return AreaService(db_session, blob_store)


@pytest.fixture
def developer_service(db_session: AsyncSession, blob_store: RecordingBlobStore) -> DeveloperService:
    return DeveloperService(db_session, blob_store)


@pytest.fixture
def project_service(db_session: AsyncSession, blob_store: RecordingBlobStore) -> ProjectService:
    return ProjectService(db_session, blob_store)


@pytest.fixture
def property_service(db_session: AsyncSession, blob_store: RecordingBlobStore) -> PropertyService:
    return PropertyService(db_session, blob_store)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def create_user_data(email: str = None, name: str = "Test Agent") -> dict:
        return {
            "email": email or f"agent{uuid.uuid4().hex[:8]}@bayhomes.ae",
            "name": name,
            "avatar": "https://lh3.googleusercontent.com/a/avatar.png",
        }

    @staticmethod
    async def create_user(user_service: UserService, **kwargs) -> User:
        user, _ = await user_service.get_or_create_user(UserCreate(**UserFactory.create_user_data(**kwargs)))
        return user


class AreaFactory:
    """Factory for creating test areas."""

    @staticmethod
    def create_area_data(email: str, area_name: str = None, image: str = None) -> dict:
        return {
            "areaName": area_name or f"Area {uuid.uuid4().hex[:6]}",
            "description": "Waterfront community",
            "features": ["Metro", "Schools"],
            "image": image,
            "location": {"city": "Dubai"},
            "email": email,
        }

    @staticmethod
    async def create_area(area_service: AreaService, email: str, **kwargs) -> Area:
        return await area_service.create_area(AreaCreate(**AreaFactory.create_area_data(email, **kwargs)))


class DeveloperFactory:
    """Factory for creating test developers."""

    @staticmethod
    def create_developer_data(email: str, developer_name: str = None, image: str = None) -> dict:
        return {
            "developerName": developer_name or f"Developer {uuid.uuid4().hex[:6]}",
            "description": "Master developer",
            "image": image,
            "email": email,
        }

    @staticmethod
    async def create_developer(developer_service: DeveloperService, email: str, **kwargs) -> Developer:
        return await developer_service.create_developer(
            DeveloperCreate(**DeveloperFactory.create_developer_data(email, **kwargs))
        )


class ProjectFactory:
    """Factory for creating test projects."""

    @staticmethod
    def create_project_data(
        email: str,
        area_name: str,
        developer_name: str,
        project_name: str = "Creek Rise",
        in_images: list = None,
        out_images: list = None,
        background_image: str = None,
        floor_plans: list = None
    ) -> dict:
        return {
            "projectName": project_name,
            "description": "Twin towers by the creek",
            "projectType": "Apartment",
            "startPrice": 1200000,
            "size": 850,
            "rooms": "1-3",
            "handoverDate": "Q4 2027",
            "aminities": ["Pool", "Gym"],
            "inImages": in_images or [],
            "outImages": out_images or [],
            "backgroundImage": background_image,
            "floorPlans": floor_plans or [],
            "location": "Dubai Creek Harbour",
            "areaName": area_name,
            "developerName": developer_name,
            "email": email,
        }

    @staticmethod
    async def create_project(project_service: ProjectService, email: str, area_name: str,
                             developer_name: str, **kwargs) -> Project:
        return await project_service.create_project(
            ProjectCreate(**ProjectFactory.create_project_data(email, area_name, developer_name, **kwargs))
        )


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(
        email: str,
        area_name: str,
        title: str = "Marina view 2BR",
        property_type: str = "Apartment",
        prop_images: list = None,
        background_image: str = None,
        barcode: str = None
    ) -> dict:
        return {
            "title": title,
            "description": "Bright corner unit",
            "propertyType": property_type,
            "location": {"city": "Dubai", "street": "Marina Walk"},
            "price": 1850000,
            "propImages": prop_images if prop_images is not None else [RAW_IMAGE],
            "backgroundImage": background_image,
            "numOfrooms": 2,
            "numOfbathrooms": 3,
            "size": 1320.5,
            "features": ["Balcony", "Sea view"],
            "permitNo": "71234567",
            "purpose": "Sale",
            "furnishingType": "Unfurnished",
            "classification": "Ready",
            "featured": True,
            "barcode": barcode,
            "areaName": area_name,
            "email": email,
        }

    @staticmethod
    async def create_property(property_service: PropertyService, email: str, area_name: str, **kwargs) -> Property:
        return await property_service.create_property(
            PropertyCreate(**PropertyFactory.create_property_data(email, area_name, **kwargs))
        )


# Common fixtures
@pytest.fixture
async def test_user(user_service: UserService) -> User:
    return await UserFactory.create_user(user_service, email="agent@bayhomes.ae", name="Bay Agent")


@pytest.fixture
async def test_area(area_service: AreaService, test_user: User) -> Area:
    return await AreaFactory.create_area(area_service, test_user.email, area_name="Downtown")


@pytest.fixture
async def test_developer(developer_service: DeveloperService, test_user: User) -> Developer:
    return await DeveloperFactory.create_developer(developer_service, test_user.email, developer_name="Emaar")
