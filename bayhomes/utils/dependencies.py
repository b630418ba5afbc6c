"""
FastAPI dependency injection utilities for sessions, the blob store and services.
"""

from typing import Optional
from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from bayhomes.config import get_settings
from bayhomes.database import get_db
from bayhomes.repositories.base import ListParams
from bayhomes.services.blob_store import BlobStore, build_blob_store
from bayhomes.services.area import AreaService
from bayhomes.services.developer import DeveloperService
from bayhomes.services.project import ProjectService
from bayhomes.services.property import PropertyService
from bayhomes.services.user import UserService


def get_blob_store(request: Request) -> BlobStore:
    """
    Get the application's blob store.
    Built once per application and kept on ``app.state``; tests override this dependency.
    """
    blob_store = getattr(request.app.state, "blob_store", None)
    if blob_store is None:
        blob_store = build_blob_store(get_settings())
        request.app.state.blob_store = blob_store
    return blob_store


def get_list_params(
    start: Optional[int] = Query(None, alias="_start", ge=0, description="First row offset"),
    end: Optional[int] = Query(None, alias="_end", ge=0, description="Exclusive end offset"),
    sort: Optional[str] = Query(None, alias="_sort", description="Field to sort by"),
    order: Optional[str] = Query(None, alias="_order", pattern="(?i)^(asc|desc)$", description="asc or desc")
) -> ListParams:
    """
    Translate the ``_start``/``_end``/``_sort``/``_order`` query convention.

    Returns:
        ListParams with ``skip=_start`` and ``limit=_end-_start``
    """
    settings = get_settings()
    return ListParams.from_window(
        start,
        end,
        sort=sort,
        order=order,
        default_size=settings.default_page_size,
        max_size=settings.max_page_size,
    )


async def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


async def get_area_service(
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
) -> AreaService:
    return AreaService(db, blob_store)


async def get_developer_service(
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
) -> DeveloperService:
    return DeveloperService(db, blob_store)


async def get_project_service(
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
) -> ProjectService:
    return ProjectService(db, blob_store)


async def get_property_service(
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
) -> PropertyService:
    """
    Get property service instance.

    Args:
        db: Database session
        blob_store: Application blob store

    Returns:
        PropertyService instance
    """
    return PropertyService(db, blob_store)
