"""
Project model for off-plan and completed developments.
A project belongs to one area and one developer and owns interior, exterior,
background and floor plan images.
"""

from sqlalchemy import String, Text, Numeric, JSON, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from bayhomes.database import Base
from decimal import Decimal
import uuid
from typing import Any, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from bayhomes.models.user import User
    from bayhomes.models.area import Area
    from bayhomes.models.developer import Developer


class Project(Base):
    """
    Project document.
    Floor plans are embedded as a JSON list of
    ``{floor_type, floor_size, floor_image, num_of_rooms}`` objects.
    """

    __tablename__ = "projects"

    project_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Project name"
    )

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    project_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)

    # Optional commercial details
    start_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(precision=14, scale=2), nullable=True)
    size: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    rooms: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    handover_date: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    amenities: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    # Images
    interior_images: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    exterior_images: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    background_image: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    floor_plans: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    # Map
    location: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    about_map: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    map_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)

    # References
    area_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("areas.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    developer_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("developers.id", ondelete="SET NULL"),
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
    developer: Mapped[Optional["Developer"]] = relationship("Developer")
    creator: Mapped["User"] = relationship("User")

    def __repr__(self) -> str:
        """String representation of the project."""
        return f"<Project(id={self.id}, project_name={self.project_name})>"

    @property
    def floor_plan_images(self) -> List[str]:
        """Floor plan image URLs, skipping plans without an image."""
        return [plan["floor_image"] for plan in (self.floor_plans or []) if plan.get("floor_image")]

    @property
    def image_urls(self) -> List[str]:
        """Every blob URL owned by this project."""
        urls = list(self.interior_images or []) + list(self.exterior_images or [])
        if self.background_image:
            urls.append(self.background_image)
        urls.extend(self.floor_plan_images)
        return urls

    def to_dict(self, include_relations: bool = False) -> dict:
        """
        Convert project to dictionary.

        Args:
            include_relations: Whether to embed the populated area, developer and creator

        Returns:
            Dictionary representation of project
        """
        result = {
            "id": str(self.id),
            "project_name": self.project_name,
            "description": self.description,
            "project_type": self.project_type,
            "start_price": float(self.start_price) if self.start_price is not None else None,
            "size": self.size,
            "rooms": self.rooms,
            "handover_date": self.handover_date,
            "amenities": list(self.amenities or []),
            "images": {
                "interior": list(self.interior_images or []),
                "exterior": list(self.exterior_images or []),
                "background_image": self.background_image,
            },
            "floor_plans": [dict(plan) for plan in (self.floor_plans or [])],
            "location": self.location,
            "about_map": self.about_map,
            "map_url": self.map_url,
            "area_id": str(self.area_id) if self.area_id else None,
            "developer_id": str(self.developer_id) if self.developer_id else None,
            "creator_id": str(self.creator_id),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if include_relations:
            result["area"] = self.area.to_summary() if self.area else None
            result["developer"] = self.developer.to_summary() if self.developer else None
            result["creator"] = self.creator.to_summary() if self.creator else None

        return result

    def to_summary(self) -> dict:
        """Compact representation used when a project is embedded in another document."""
        return {
            "id": str(self.id),
            "project_name": self.project_name,
            "project_type": self.project_type,
            "background_image": self.background_image,
        }
