"""
User model owning listings.
Users are referenced by email from every create payload and keep back-reference
lists of the properties, areas, developers and projects they created.
"""

from sqlalchemy import String, JSON
from sqlalchemy.orm import Mapped, mapped_column
from bayhomes.database import Base
from typing import List, Optional


class User(Base):
    """
    User document.
    Back-reference lists hold id strings and are maintained by the workflows.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address - natural key"
    )

    name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Display name"
    )

    avatar: Mapped[Optional[str]] = mapped_column(
        String(1024),
        nullable=True,
        comment="Avatar URL"
    )

    # Back-reference lists
    property_ids: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    area_ids: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    developer_ids: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    project_ids: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    def __repr__(self) -> str:
        """String representation of the user."""
        return f"<User(id={self.id}, email={self.email})>"

    def to_dict(self) -> dict:
        """
        Convert user to dictionary.

        Returns:
            Dictionary representation of user
        """
        return {
            "id": str(self.id),
            "email": self.email,
            "name": self.name,
            "avatar": self.avatar,
            "property_ids": list(self.property_ids or []),
            "area_ids": list(self.area_ids or []),
            "developer_ids": list(self.developer_ids or []),
            "project_ids": list(self.project_ids or []),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    def to_summary(self) -> dict:
        """Compact representation used when a user is embedded in another document."""
        return {
            "id": str(self.id),
            "email": self.email,
            "name": self.name,
            "avatar": self.avatar,
        }
