"""
Base repository class with common document operations using async SQLAlchemy.
Repositories only stage changes and flush; committing belongs to the service transaction.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload
from bayhomes.database import Base
from typing import TypeVar, Generic, Optional, List, Dict, Any, Type, Iterable, Sequence, Tuple, Union
import uuid
import logging

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)

LIKE_ESCAPE = "\\"


def contains_pattern(text: str) -> str:
    """LIKE pattern matching ``text`` as a literal substring; pair with ``escape=LIKE_ESCAPE``."""
    for char in (LIKE_ESCAPE, "%", "_"):
        text = text.replace(char, LIKE_ESCAPE + char)
    return f"%{text}%"


class ListParams:
    """Offset window and sort order for list queries."""

    def __init__(
        self,
        skip: int = 0,
        limit: int = 10,
        sort: Optional[str] = None,
        order: str = "desc"
    ):
        self.skip = max(skip, 0)
        self.limit = max(limit, 0)
        self.sort = sort
        self.order = order.lower() if order else "desc"

    @classmethod
    def from_window(
        cls,
        start: Optional[int],
        end: Optional[int],
        sort: Optional[str] = None,
        order: Optional[str] = None,
        default_size: int = 10,
        max_size: int = 100
    ) -> "ListParams":
        """
        Build parameters from a ``_start``/``_end`` pair.

        Args:
            start: First row offset, defaults to 0
            end: Exclusive end offset, defaults to ``start + default_size``
            sort: API field name to sort by
            order: ``asc`` or ``desc``
            default_size: Page size used when no end is given
            max_size: Upper bound on the page size

        Returns:
            ListParams instance
        """
        skip = max(start or 0, 0)
        limit = (end - skip) if end is not None else default_size
        return cls(skip=skip, limit=min(max(limit, 0), max_size), sort=sort, order=order or "desc")


class BaseRepository(Generic[ModelType]):
    """
    Base repository class providing common document operations.
    Subclasses declare ``sort_fields`` mapping API field names to model attributes.
    """

    sort_fields: Dict[str, str] = {}

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Initialize repository with model class and database session.

        Args:
            model: SQLAlchemy model class
            db: Async database session
        """
        self.model = model
        self.db = db

    async def add(self, obj: ModelType) -> ModelType:
        """
        Stage a new document and flush it so its id is usable by the caller.

        Args:
            obj: New model instance

        Returns:
            The same instance, now pending in the session
        """
        try:
            self.db.add(obj)
            await self.db.flush()
            logger.debug(f"Staged {self.model.__name__} with id: {obj.id}")
            return obj
        except Exception as e:
            logger.error(f"Failed to stage {self.model.__name__}: {e}")
            raise

    async def remove(self, obj: ModelType) -> None:
        """
        Stage the deletion of a document.

        Args:
            obj: Model instance to delete
        """
        try:
            await self.db.delete(obj)
            await self.db.flush()
            logger.debug(f"Staged deletion of {self.model.__name__} with id: {obj.id}")
        except Exception as e:
            logger.error(f"Failed to delete {self.model.__name__} {obj.id}: {e}")
            raise

    async def get_by_id(self, id: uuid.UUID, relations: Sequence[str] = ()) -> Optional[ModelType]:
        """
        Get a document by its ID.

        Args:
            id: UUID of the document
            relations: Relationship names to load eagerly

        Returns:
            Model instance if found, None otherwise
        """
        try:
            query = select(self.model).where(self.model.id == id)
            for relation in relations:
                query = query.options(selectinload(getattr(self.model, relation)))

            result = await self.db.execute(query)
            obj = result.scalar_one_or_none()

            if obj:
                logger.debug(f"Retrieved {self.model.__name__} with id: {id}")
            else:
                logger.debug(f"{self.model.__name__} with id {id} not found")

            return obj
        except Exception as e:
            logger.error(f"Failed to get {self.model.__name__} by id {id}: {e}")
            raise

    async def get_by_field(self, field: str, value: Any) -> Optional[ModelType]:
        """
        Get a document by a specific field value.

        Args:
            field: Field name to search by
            value: Value to search for

        Returns:
            Model instance if found, None otherwise
        """
        if not hasattr(self.model, field):
            raise ValueError(f"Field '{field}' does not exist on {self.model.__name__}")

        try:
            query = select(self.model).where(getattr(self.model, field) == value)
            result = await self.db.execute(query)
            obj = result.scalars().first()

            if obj:
                logger.debug(f"Retrieved {self.model.__name__} by {field}: {value}")
            else:
                logger.debug(f"{self.model.__name__} with {field}={value} not found")

            return obj
        except Exception as e:
            logger.error(f"Failed to get {self.model.__name__} by {field}={value}: {e}")
            raise

    async def get_many_by_ids(self, ids: Iterable[Union[str, uuid.UUID]]) -> List[ModelType]:
        """
        Resolve a back-reference list to documents, keeping the list order.
        Ids that are malformed or no longer exist are skipped.

        Args:
            ids: Document ids as UUIDs or strings

        Returns:
            List of model instances
        """
        wanted = []
        for value in ids:
            try:
                wanted.append(value if isinstance(value, uuid.UUID) else uuid.UUID(str(value)))
            except ValueError:
                logger.warning(f"Skipping malformed {self.model.__name__} id: {value}")

        if not wanted:
            return []

        result = await self.db.execute(select(self.model).where(self.model.id.in_(wanted)))
        found = {obj.id: obj for obj in result.scalars().all()}
        return [found[key] for key in dict.fromkeys(wanted) if key in found]

    def sort_column(self, sort: Optional[str]):
        """Map an API sort field to a column; unknown fields sort by creation time."""
        attribute = self.sort_fields.get(sort) if sort else None
        return getattr(self.model, attribute or "created_at")

    async def list(
        self,
        conditions: Sequence[Any] = (),
        params: Optional[ListParams] = None
    ) -> Tuple[List[ModelType], int]:
        """
        List documents matching all conditions, one page at a time.

        Args:
            conditions: SQLAlchemy boolean expressions, combined with AND
            params: Offset window and sort order

        Returns:
            Tuple of (documents on the page, total matching documents)
        """
        params = params or ListParams()

        try:
            query = select(self.model)
            for condition in conditions:
                query = query.where(condition)

            column = self.sort_column(params.sort)
            query = query.order_by(column.asc() if params.order == "asc" else column.desc())
            query = query.offset(params.skip).limit(params.limit)

            result = await self.db.execute(query)
            items = list(result.scalars().all())
            total = await self.count(conditions)

            logger.debug(f"Listed {len(items)} of {total} {self.model.__name__} records")
            return items, total
        except Exception as e:
            logger.error(f"Failed to list {self.model.__name__} records: {e}")
            raise

    async def count(self, conditions: Sequence[Any] = ()) -> int:
        """
        Count documents matching all conditions.

        Args:
            conditions: SQLAlchemy boolean expressions, combined with AND

        Returns:
            Number of matching documents
        """
        query = select(func.count(self.model.id))
        for condition in conditions:
            query = query.where(condition)

        result = await self.db.execute(query)
        return result.scalar() or 0
