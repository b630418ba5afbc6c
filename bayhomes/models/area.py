"""
Area model for neighbourhoods that properties and projects belong to.
"""

from sqlalchemy import String, Text, JSON, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from bayhomes.database import Base
import uuid
from typing import Any, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from bayhomes.models.user import User


class Area(Base):
    """
    Area document.
    Resolved by name from property and project payloads; keeps back-reference
    lists of the properties and projects located in it.
    """

    __tablename__ = "areas"

    area_name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="Area name - natural key"
    )

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    features: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    image: Mapped[Optional[str]] = mapped_column(
        String(1024),
        nullable=True,
        comment="Blob store URL of the area image"
    )

    location: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)

    creator_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )

    # Back-reference lists
    property_ids: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    project_ids: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    creator: Mapped["User"] = relationship("User")

    def __repr__(self) -> str:
        """String representation of the area."""
        return f"<Area(id={self.id}, area_name={self.area_name})>"

    @property
    def image_urls(self) -> List[str]:
        """Every blob URL owned by this area."""
        return [self.image] if self.image else []

    def to_dict(self, include_creator: bool = False) -> dict:
        """
        Convert area to dictionary.

        Args:
            include_creator: Whether to embed the populated creator

        Returns:
            Dictionary representation of area
        """
        result = {
            "id": str(self.id),
            "area_name": self.area_name,
            "description": self.description,
            "features": list(self.features or []),
            "image": self.image,
            "location": self.location,
            "creator_id": str(self.creator_id),
            "property_ids": list(self.property_ids or []),
            "project_ids": list(self.project_ids or []),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if include_creator and self.creator:
            result["creator"] = self.creator.to_summary()

        return result

    def to_summary(self) -> dict:
        """Compact representation used when an area is embedded in another document."""
        return {
            "id": str(self.id),
            "area_name": self.area_name,
            "image": self.image,
            "location": self.location,
        }
