"""
Property service for managing property listings.
Handles create, partial update, status-only update and delete, keeping the
owning user's and the area's back-reference lists and the blob store in step.
"""

from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from bayhomes.models.property import Property, PropertyStatus
from bayhomes.repositories.base import ListParams
from bayhomes.repositories.area import AreaRepository
from bayhomes.repositories.property import PropertyRepository
from bayhomes.schemas.property import PropertyCreate, PropertyUpdate, PropertyStatusUpdate
from bayhomes.services.base import EntityService
from bayhomes.services.blob_store import BlobStore
from bayhomes.utils.exceptions import APIException, NotFoundError, RelatedEntityNotFoundError
import uuid
import logging

logger = logging.getLogger(__name__)


class PropertyService(EntityService):
    """
    Property service with transactional multi-document writes.
    A property belongs to one area and one user; both list its id.
    """

    def __init__(self, db_session: AsyncSession, blob_store: BlobStore):
        super().__init__(db_session, blob_store)
        self.property_repo = PropertyRepository(db_session)
        self.area_repo = AreaRepository(db_session)

    async def list_properties(
        self,
        title_like: Optional[str] = None,
        property_type: Optional[str] = None,
        status: Optional[PropertyStatus] = None,
        params: Optional[ListParams] = None
    ) -> Tuple[List[Property], int]:
        """
        List properties matching the filters.

        Args:
            title_like: Case-insensitive substring of the title
            property_type: Exact property type
            status: Lifecycle status
            params: Offset window and sort order

        Returns:
            Tuple of (properties on the page, total matching properties)
        """
        conditions = self.property_repo.conditions(title_like, property_type, status)
        return await self.property_repo.list(conditions, params)

    async def get_property(self, property_id: uuid.UUID) -> Property:
        """
        Get a property with its area and creator populated.

        Raises:
            NotFoundError: If the property doesn't exist
        """
        property_obj = await self.property_repo.get_detail(property_id)
        if not property_obj:
            raise NotFoundError("Property", str(property_id))

        logger.debug(f"Retrieved property: {property_id}")
        return property_obj

    async def create_property(self, command: PropertyCreate) -> Property:
        """
        Create a property listing.

        The creator and the area are resolved before any image is uploaded.
        The property, the creator's list and the area's list are written in
        one transaction.

        Args:
            command: Validated create payload

        Returns:
            Created property with area and creator populated

        Raises:
            RelatedEntityNotFoundError: If the user or the area doesn't exist
            BlobStoreError: If an image upload fails
        """
        try:
            async with self.transaction():
                creator = await self._resolve_creator(command.email)
                area = await self.area_repo.get_by_name(command.area_name)
                if not area:
                    raise RelatedEntityNotFoundError("Area", command.area_name)

                images = await self.media.resolve_groups({
                    "gallery": command.prop_images,
                    "background": [command.background_image],
                    "barcode": [command.barcode],
                })

                property_obj = Property(
                    title=command.title,
                    description=command.description,
                    property_type=command.property_type,
                    location=command.location,
                    price=command.price,
                    gallery_images=[url for url in images["gallery"] if url],
                    background_image=images["background"][0],
                    barcode=images["barcode"][0],
                    num_of_rooms=command.num_of_rooms,
                    num_of_bathrooms=command.num_of_bathrooms,
                    size=command.size,
                    features=list(command.features),
                    permit_no=command.permit_no,
                    purpose=command.purpose,
                    furnishing_type=command.furnishing_type,
                    classification=command.classification,
                    featured=command.featured,
                    project_name=command.project_name,
                    status=PropertyStatus.ACTIVE,
                    area=area,
                    creator=creator,
                )
                await self.property_repo.add(property_obj)

                self.ledger.link(creator, "property_ids", property_obj.id)
                self.ledger.link(area, "property_ids", property_obj.id)

            logger.info(f"Property created by {creator.email}: {property_obj.title} (ID: {property_obj.id})")
            return property_obj

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to create property '{command.title}': {e}")
            raise

    async def update_property(self, property_id: uuid.UUID, command: PropertyUpdate) -> Property:
        """
        Update the supplied fields of a property.

        Image fields may mix stored URLs, which are kept, with raw payloads,
        which are uploaded. Blobs the property referenced before and no
        longer references are released after the commit.

        Args:
            property_id: UUID of the property
            command: Validated partial update

        Returns:
            Updated property with area and creator populated

        Raises:
            NotFoundError: If the property doesn't exist
            RelatedEntityNotFoundError: If a new area name doesn't exist
        """
        try:
            async with self.transaction():
                property_obj = await self.get_property(property_id)
                old_images = property_obj.image_urls
                changes = command.changes()

                area_name = changes.pop("area_name", None)
                if area_name is not None and (property_obj.area is None or property_obj.area.area_name != area_name):
                    area = await self.area_repo.get_by_name(area_name)
                    if not area:
                        raise RelatedEntityNotFoundError("Area", area_name)
                    self.ledger.move(property_obj.area, area, "property_ids", property_obj.id)
                    property_obj.area = area

                await self._apply_images(property_obj, changes)

                for field, value in changes.items():
                    setattr(property_obj, field, value)

            logger.info(f"Property updated: {property_obj.id}")

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to update property {property_id}: {e}")
            raise

        await self.media.release(self.media.superseded(old_images, property_obj.image_urls))
        return property_obj

    async def update_property_status(self, property_id: uuid.UUID, command: PropertyStatusUpdate) -> Property:
        """
        Change only the lifecycle status of a property.
        No image or relationship is read or written.

        Raises:
            NotFoundError: If the property doesn't exist
        """
        async with self.transaction():
            property_obj = await self.property_repo.get_by_id(property_id)
            if not property_obj:
                raise NotFoundError("Property", str(property_id))

            property_obj.status = command.status

        logger.info(f"Property {property_id} status updated to {command.status.value}")
        return property_obj

    async def delete_property(self, property_id: uuid.UUID) -> None:
        """
        Delete a property, pull its id from the creator and the area, then
        release every blob it owned. Release failures are logged and leave
        orphaned blobs.

        Raises:
            NotFoundError: If the property doesn't exist
        """
        try:
            async with self.transaction():
                property_obj = await self.get_property(property_id)
                owned = property_obj.image_urls

                self.ledger.unlink(property_obj.creator, "property_ids", property_obj.id)
                self.ledger.unlink(property_obj.area, "property_ids", property_obj.id)
                await self.property_repo.remove(property_obj)

            logger.info(f"Property deleted: {property_id}")

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to delete property {property_id}: {e}")
            raise

        await self.media.release(owned)

    async def _apply_images(self, property_obj: Property, changes: Dict[str, Any]) -> None:
        """Resolve the supplied image fields as one upload batch and set them."""
        groups = {}
        if "prop_images" in changes:
            groups["gallery"] = changes.pop("prop_images")
        if "background_image" in changes:
            groups["background"] = [changes.pop("background_image")]
        if "barcode" in changes:
            groups["barcode"] = [changes.pop("barcode")]

        if not groups:
            return

        resolved = await self.media.resolve_groups(groups)
        if "gallery" in resolved:
            property_obj.gallery_images = [url for url in resolved["gallery"] if url]
        if "background" in resolved:
            property_obj.background_image = resolved["background"][0]
        if "barcode" in resolved:
            property_obj.barcode = resolved["barcode"][0]
