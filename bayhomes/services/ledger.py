"""
Back-reference maintenance shared by all services.

The store has no foreign-key driven lists, so every "append my id to the
related document" and "pull my id from it" goes through this ledger. It only
mutates session-tracked documents; the calling service's transaction writes
them together with the entity itself.
"""

from typing import Any, Optional
import logging
import uuid

logger = logging.getLogger(__name__)


class RelationshipLedger:
    """Maintains id lists such as ``User.property_ids`` or ``Area.project_ids``."""

    def link(self, owner: Any, field: str, entity_id: uuid.UUID) -> None:
        """
        Add an id to a back-reference list; an id is never listed twice.

        Args:
            owner: Document holding the list
            field: Name of the list attribute
            entity_id: Id to add
        """
        value = str(entity_id)
        ids = list(getattr(owner, field) or [])
        if value not in ids:
            ids.append(value)
        # Reassign so the JSON column is flagged dirty
        setattr(owner, field, ids)
        logger.debug(f"Linked {value} into {owner!r}.{field}")

    def unlink(self, owner: Optional[Any], field: str, entity_id: uuid.UUID) -> None:
        """
        Remove every occurrence of an id from a back-reference list.

        Args:
            owner: Document holding the list, None when the reference is already gone
            field: Name of the list attribute
            entity_id: Id to remove
        """
        if owner is None:
            return

        value = str(entity_id)
        setattr(owner, field, [item for item in (getattr(owner, field) or []) if item != value])
        logger.debug(f"Unlinked {value} from {owner!r}.{field}")

    def move(self, old_owner: Optional[Any], new_owner: Any, field: str, entity_id: uuid.UUID) -> None:
        """Move an id from one document's list to another's."""
        if old_owner is not None and old_owner is new_owner:
            self.link(new_owner, field, entity_id)
            return

        self.unlink(old_owner, field, entity_id)
        self.link(new_owner, field, entity_id)
