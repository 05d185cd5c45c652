"""Base service with CRUD operations shared by every store."""

from typing import Generic, Type, TypeVar

from cardhub.errors.common import NotFoundError
from cardhub.models.base import BaseModel
from cardhub.schemas.base import BaseFilterSchema, BaseUpdateSchema, PaginationSchema
from cardhub.uow import get_uow
from fastapi import Depends
from sqlalchemy.orm import Query, Session

M = TypeVar("M", bound=BaseModel)  # model
BFS = TypeVar("BFS", bound=BaseFilterSchema)
BUS = TypeVar("BUS", bound=BaseUpdateSchema)


class BaseService(Generic[M]):
    model: Type[M]
    db: Session

    def __init__(self, db: Session = Depends(get_uow)):
        self.db = db

    def create(self, schema: BUS, overrides: dict = {}) -> M:
        data = {**schema.dump(), **overrides}
        new_obj = self.model(**data)
        self.db.add(new_obj)
        self.db.flush()
        self.db.refresh(new_obj)
        return new_obj

    def find(self, obj_id: int) -> M | None:
        """Lookup which tolerates a missing row instead of raising."""
        return self.db.get(self.model, obj_id)

    def get(self, obj_id: int) -> M:
        db_obj = self.find(obj_id)
        if db_obj is None:
            raise NotFoundError(f"{self.model.__name__} id={obj_id}")
        return db_obj

    def _apply_base_filters(self, query: Query[M], filters: BFS) -> Query[M]:
        """Common filters that are present for any database model"""
        if filters.comment is not None:
            query = query.filter(self.model.comment.ilike(f"%{filters.comment}%"))
        if filters.created_after is not None:
            query = query.filter(self.model.created_at >= filters.created_after)
        if filters.created_before is not None:
            query = query.filter(self.model.created_at <= filters.created_before)
        return query

    def _apply_filters(self, query: Query[M], filters: BFS) -> Query[M]:
        """Filters for a particular model. To be overridden by child class."""
        return query

    def get_all(
        self, filters: BFS | None = None, skip=0, limit=100
    ) -> PaginationSchema[M]:
        query = self.db.query(self.model)
        if filters:
            query = self._apply_base_filters(query, filters)
            query = self._apply_filters(query, filters)
        # newest first
        query = query.order_by(self.model.id.desc())
        total = query.count()
        items = query.offset(skip).limit(limit).all()
        return PaginationSchema[M](items=items, total=total, skip=skip, limit=limit)

    def update(self, obj_id: int, schema: BUS, overrides: dict = {}) -> M:
        obj = self.get(obj_id)
        for key, value in {**schema.dump(), **overrides}.items():
            setattr(obj, key, value)
        obj.touch()
        self.db.flush()
        self.db.refresh(obj)
        return obj
