"""
Base repository with generic CRUD operations.
"""
import json
import uuid
from typing import TypeVar, Generic, Type, Optional, List, Any, Tuple, get_args

from sqlmodel import SQLModel, select
from sqlalchemy import String, cast, or_
from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.core.pagination import paginate_query
from relateai.models.base import utcnow

ModelType = TypeVar("ModelType", bound=SQLModel)

LIKE_ESCAPE = "\\"


def contains_pattern(value: str) -> str:
    """LIKE pattern matching ``value`` anywhere, its wildcards taken literally."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def text_search(search: str, *columns):
    """Case-insensitive substring match on any of ``columns``."""
    pattern = contains_pattern(search)
    return or_(*(column.ilike(pattern, escape=LIKE_ESCAPE) for column in columns))


def json_list_contains(column, value: str):
    """
    Match a JSON string array containing ``value`` (portable across SQLite/PostgreSQL).

    SQLite keeps the serialized text, where non-ASCII is written as \\uXXXX;
    JSONB renders raw characters. Both spellings are matched.
    """
    text = cast(column, String)
    needles = sorted({json.dumps(value), json.dumps(value, ensure_ascii=False)})
    return or_(*(text.like(contains_pattern(needle), escape=LIKE_ESCAPE) for needle in needles))



class BaseRepository(Generic[ModelType]):
    """
    Generic repository with CRUD operations.
    Inherit and specify the model class and the column that names its owner.
    """
    owner_field: str = "user_id"

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    def _owner_column(self):
        return getattr(self.model, self.owner_field)

    def scoped(self, owner_id: Optional[uuid.UUID] = None):
        """Base select, limited to one owner when given."""
        query = select(self.model)
        if owner_id is not None:
            query = query.where(self._owner_column() == owner_id)
        return query

    async def create(self, obj_in: dict) -> ModelType:
        """Create a new record."""
        db_obj = self.model(**obj_in)
        self.session.add(db_obj)
        await self.session.commit()
        await self.session.refresh(db_obj)
        return db_obj

    async def get(self, id: uuid.UUID, owner_id: Optional[uuid.UUID] = None) -> Optional[ModelType]:
        """Get a record by ID, optionally requiring a given owner."""
        db_obj = await self.session.get(self.model, id)
        if db_obj is None:
            return None
        if owner_id is not None and getattr(db_obj, self.owner_field) != owner_id:
            return None
        return db_obj

    async def get_by_field(self, field: str, value: Any) -> Optional[ModelType]:
        """Get a record by a specific field."""
        query = select(self.model).where(getattr(self.model, field) == value)
        result = await self.session.exec(query)
        return result.first()

    async def list(
        self,
        owner_id: Optional[uuid.UUID] = None,
        filters: Optional[dict] = None,
        order_by: str = "created_at",
        order_desc: bool = True
    ) -> List[ModelType]:
        """List all records with optional equality filters."""
        query = self._apply_filters(self.scoped(owner_id), filters)
        query = self._apply_order(query, order_by, order_desc)
        result = await self.session.exec(query)
        return list(result.all())

    async def list_paginated(
        self,
        query,
        page: int = 1,
        limit: int = 20,
        order_by: str = "created_at",
        order_desc: bool = True
    ) -> Tuple[List[ModelType], dict]:
        """Order and paginate a prepared query."""
        query = self._apply_order(query, order_by, order_desc)
        items, pagination = await paginate_query(self.session, query, page, limit)
        return list(items), pagination

    def without_cleared(self, values: dict) -> dict:
        """Drop explicit None for columns the model does not allow to be empty."""
        fields = self.model.model_fields
        return {
            key: value
            for key, value in values.items()
            if value is not None or key not in fields or type(None) in get_args(fields[key].annotation)
        }

    async def update(self, db_obj: ModelType, obj_in: dict) -> ModelType:
        """Apply a partial update to a loaded record."""
        for field, value in obj_in.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        if hasattr(db_obj, "updated_at"):
            db_obj.updated_at = utcnow()

        return await self.save(db_obj)

    async def save(self, db_obj: ModelType) -> ModelType:
        """Persist a modified record."""
        self.session.add(db_obj)
        await self.session.commit()
        await self.session.refresh(db_obj)
        return db_obj

    async def delete(self, db_obj: ModelType) -> None:
        """Delete a loaded record."""
        await self.session.delete(db_obj)
        await self.session.commit()

    def _apply_filters(self, query, filters: Optional[dict]):
        if filters:
            for field, value in filters.items():
                if hasattr(self.model, field) and value is not None:
                    query = query.where(getattr(self.model, field) == value)
        return query

    def _apply_order(self, query, order_by: str, order_desc: bool):
        if hasattr(self.model, order_by):
            order_column = getattr(self.model, order_by)
            query = query.order_by(order_column.desc() if order_desc else order_column.asc())
        return query
