"""
Property model for sale and rental listings.
Handles listing data, gallery images and the reference to the area it is located in.
"""

from sqlalchemy import String, Text, Integer, Float, Numeric, Boolean, JSON, ForeignKey, Uuid, Enum as SQLEnum, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from bayhomes.database import Base
from decimal import Decimal
import enum
import uuid
from typing import Any, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from bayhomes.models.user import User
    from bayhomes.models.area import Area


class PropertyStatus(str, enum.Enum):
    """Lifecycle status of a listing."""
    ACTIVE = "active"
    ARCHIVED = "archived"


class Property(Base):
    """
    Property document.
    Owns a gallery, a background image and a barcode image, all stored as blob URLs.
    """

    __tablename__ = "properties"

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Property listing title"
    )

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    property_type: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        index=True,
        comment="Apartment, villa, townhouse..."
    )

    location: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)

    price: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=14, scale=2),
        nullable=True,
        index=True
    )

    # Images
    gallery_images: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    background_image: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    barcode: Mapped[Optional[str]] = mapped_column(
        String(1024),
        nullable=True,
        comment="Blob store URL of the permit barcode"
    )

    # Specifications
    num_of_rooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    num_of_bathrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    size: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    features: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    permit_no: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    purpose: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    furnishing_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    classification: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    project_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    status: Mapped[PropertyStatus] = mapped_column(
        SQLEnum(PropertyStatus),
        nullable=False,
        default=PropertyStatus.ACTIVE,
        index=True
    )

    # References
    area_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("areas.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    creator_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )

    area: Mapped[Optional["Area"]] = relationship("Area")
    creator: Mapped["User"] = relationship("User")

    def __repr__(self) -> str:
        """String representation of the property."""
        return f"<Property(id={self.id}, title={self.title[:30]}..., price={self.price})>"

    @property
    def image_urls(self) -> List[str]:
        """Every blob URL owned by this property."""
        urls = list(self.gallery_images or [])
        if self.background_image:
            urls.append(self.background_image)
        if self.barcode:
            urls.append(self.barcode)
        return urls

    def to_dict(self, include_relations: bool = False) -> dict:
        """
        Convert property to dictionary.

        Args:
            include_relations: Whether to embed the populated area and creator

        Returns:
            Dictionary representation of property
        """
        result = {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "property_type": self.property_type,
            "location": self.location,
            "price": float(self.price) if self.price is not None else None,
            "images": {
                "gallery": list(self.gallery_images or []),
                "background_image": self.background_image,
            },
            "num_of_rooms": self.num_of_rooms,
            "num_of_bathrooms": self.num_of_bathrooms,
            "size": self.size,
            "features": list(self.features or []),
            "permit_no": self.permit_no,
            "purpose": self.purpose,
            "furnishing_type": self.furnishing_type,
            "classification": self.classification,
            "featured": self.featured,
            "project_name": self.project_name,
            "barcode": self.barcode,
            "status": self.status.value,
            "area_id": str(self.area_id) if self.area_id else None,
            "creator_id": str(self.creator_id),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if include_relations:
            result["area"] = self.area.to_summary() if self.area else None
            result["creator"] = self.creator.to_summary() if self.creator else None

        return result


# Listing pages filter by type and status, newest first
type_status_index = Index(
    'idx_properties_type_status',
    Property.property_type,
    Property.status,
    Property.created_at.desc()
)
