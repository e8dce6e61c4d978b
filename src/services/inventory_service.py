# src/services/inventory_service.py
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from models.inventory import InventoryItem
from schemas.inventory_schemas import InventoryItemPublic
from utils.logger import setup_logger
from .base_service import BaseService

logger = setup_logger("INVENTORY_SERVICE")


def item_to_public(item: InventoryItem) -> InventoryItemPublic:
    return InventoryItemPublic.model_validate(item)


class InventoryService(BaseService):
    def __init__(self):
        super().__init__(InventoryItem, "Inventory item")

    async def list_items(
        self,
        db: AsyncSession,
        category: Optional[str] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 200,
    ) -> List[InventoryItem]:
        query = self._apply_filters(self._select(), {"category": category})
        if search:
            query = query.where(func.lower(InventoryItem.name).like(f"%{search.lower()}%"))
        result = await db.execute(
            query.order_by(InventoryItem.category, InventoryItem.name)
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_low_stock(self, db: AsyncSession) -> List[InventoryItem]:
        """Items strictly below their reorder threshold"""
        result = await db.execute(
            self._select()
            .where(InventoryItem.quantity < InventoryItem.min_quantity)
            .order_by(InventoryItem.name)
        )
        return list(result.scalars().all())

    async def restock(self, db: AsyncSession, item_id: UUID, amount: int) -> InventoryItem:
        item = await self.get_or_404(db, item_id)
        logger.info(f"Restocking {item.name}: {item.quantity} + {amount}")
        return await self.update_fields(
            db,
            item_id,
            {
                "quantity": item.quantity + amount,
                "last_restocked": datetime.now(timezone.utc),
            },
        )


inventory_service = InventoryService()
