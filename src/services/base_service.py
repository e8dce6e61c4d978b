# src/services/base_service.py
from typing import Type, TypeVar, List, Optional, Dict, Any, Sequence
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, func
from sqlalchemy.exc import SQLAlchemyError
from pydantic import BaseModel
from core.cache import invalidate_namespace
from utils.logger import setup_logger
from utils.exceptions import handle_db_exception, NotFoundException

logger = setup_logger("BASE_SERVICE")

ModelType = TypeVar("ModelType")
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class BaseService:
    """CRUD over one mapped model.

    ``load_options`` are applied to every read so related rows are loaded
    eagerly; lazy loads are not available under the async session.
    """

    load_options: Sequence[Any] = ()

    def __init__(self, model: Type[ModelType], label: Optional[str] = None):
        self.model = model
        self.label = label or model.__name__
        self.logger = setup_logger(f"SERVICE_{model.__name__}")

    def _select(self):
        return select(self.model).options(*self.load_options)

    def _apply_filters(self, query, filters: Optional[Dict[str, Any]]):
        if not filters:
            return query
        conditions = [
            getattr(self.model, field) == value
            for field, value in filters.items()
            if value is not None and hasattr(self.model, field)
        ]
        return query.where(and_(*conditions)) if conditions else query

    async def get(self, db: AsyncSession, id: UUID) -> Optional[ModelType]:
        """Get a single item by ID"""
        try:
            result = await db.execute(
                self._select()
                .where(self.model.id == id)
                .execution_options(populate_existing=True)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            await handle_db_exception(db, self.logger, f"get {self.label}", e)

    async def get_or_404(self, db: AsyncSession, id: UUID) -> ModelType:
        item = await self.get(db, id)
        if item is None:
            raise NotFoundException(f"{self.label} not found")
        return item

    async def get_multi(
        self,
        db: AsyncSession,
        skip: int = 0,
        limit: int = 100,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Sequence[Any] = (),
    ) -> List[ModelType]:
        """Get multiple items with pagination and filtering"""
        try:
            query = self._apply_filters(self._select(), filters)
            if order_by:
                query = query.order_by(*order_by)
            result = await db.execute(query.offset(skip).limit(limit))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            await handle_db_exception(db, self.logger, f"list {self.label}", e)

    async def create(
        self, db: AsyncSession, obj_in: CreateSchemaType, **extra: Any
    ) -> ModelType:
        """Create a new item from a schema plus server-side values"""
        data = obj_in.model_dump(exclude_unset=True) if obj_in is not None else {}
        data.update(extra)
        return await self.create_from_dict(db, data)

    async def create_from_dict(self, db: AsyncSession, data: Dict[str, Any]) -> ModelType:
        try:
            db_obj = self.model(**data)
            db.add(db_obj)
            await db.flush()
            await db.commit()
            self.logger.info(f"Created {self.label} with ID: {db_obj.id}")
        except SQLAlchemyError as e:
            await handle_db_exception(db, self.logger, f"create {self.label}", e)

        await self.after_change(db)
        return await self.get(db, db_obj.id)

    async def update(
        self, db: AsyncSession, id: UUID, obj_in: UpdateSchemaType
    ) -> ModelType:
        """Partial update: only the fields present in the request are written"""
        return await self.update_fields(db, id, obj_in.model_dump(exclude_unset=True))

    async def update_fields(
        self, db: AsyncSession, id: UUID, values: Dict[str, Any]
    ) -> ModelType:
        db_obj = await self.get_or_404(db, id)
        try:
            for field, value in values.items():
                if hasattr(self.model, field):
                    setattr(db_obj, field, value)
            await db.flush()
            await db.commit()
            self.logger.info(f"Updated {self.label} with ID: {id}")
        except SQLAlchemyError as e:
            await handle_db_exception(db, self.logger, f"update {self.label}", e)

        await self.after_change(db)
        return await self.get(db, id)

    async def delete(self, db: AsyncSession, id: UUID) -> None:
        """Delete an item; related rows follow the model's cascade rules"""
        db_obj = await self.get_or_404(db, id)
        try:
            await db.delete(db_obj)
            await db.commit()
            self.logger.info(f"Deleted {self.label} with ID: {id}")
        except SQLAlchemyError as e:
            await handle_db_exception(db, self.logger, f"delete {self.label}", e)

        await self.after_change(db)

    async def count(
        self, db: AsyncSession, filters: Optional[Dict[str, Any]] = None
    ) -> int:
        """Count items with optional filters"""
        try:
            query = self._apply_filters(select(self.model.id), filters)
            result = await db.execute(
                select(func.count()).select_from(query.subquery())
            )
            return result.scalar_one()
        except SQLAlchemyError as e:
            await handle_db_exception(db, self.logger, f"count {self.label}", e)

    async def after_change(self, db: AsyncSession) -> None:
        """Every mutation makes the cached aggregate reads stale"""
        await invalidate_namespace()
