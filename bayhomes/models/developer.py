"""
Developer model for the companies building projects.
"""

from sqlalchemy import String, Text, JSON, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from bayhomes.database import Base
import uuid
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from bayhomes.models.user import User


class Developer(Base):
    """
    Developer document.
    Resolved by name from project payloads; keeps a back-reference list of its projects.
    """

    __tablename__ = "developers"

    developer_name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="Developer name - natural key"
    )

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    image: Mapped[Optional[str]] = mapped_column(
        String(1024),
        nullable=True,
        comment="Blob store URL of the developer logo"
    )

    creator_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )

    project_ids: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    creator: Mapped["User"] = relationship("User")

    def __repr__(self) -> str:
        """String representation of the developer."""
        return f"<Developer(id={self.id}, developer_name={self.developer_name})>"

    @property
    def image_urls(self) -> List[str]:
        """Every blob URL owned by this developer."""
        return [self.image] if self.image else []

    def to_dict(self, include_creator: bool = False) -> dict:
        """Convert developer to dictionary."""
        result = {
            "id": str(self.id),
            "developer_name": self.developer_name,
            "description": self.description,
            "image": self.image,
            "creator_id": str(self.creator_id),
            "project_ids": list(self.project_ids or []),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if include_creator and self.creator:
            result["creator"] = self.creator.to_summary()

        return result

    def to_summary(self) -> dict:
        """Compact representation used when a developer is embedded in another document."""
        return {
            "id": str(self.id),
            "developer_name": self.developer_name,
            "image": self.image,
        }
