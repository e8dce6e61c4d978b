# src/models/inventory.py
import uuid
from sqlalchemy import Column, String, Integer, Numeric, DateTime, Uuid
from sqlalchemy.sql import func
from db.database import Base


def is_low_stock(quantity: int, min_quantity: int) -> bool:
    """Reorder alert: strictly below the threshold"""
    return quantity < min_quantity


class InventoryItem(Base):
    __tablename__ = "inventory"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    name = Column(String(200), nullable=False)
    category = Column(String(100), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=0)
    unit = Column(String(30), nullable=False)
    min_quantity = Column(Integer, nullable=False, default=0)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    supplier = Column(String(200), nullable=True)
    last_restocked = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def low_stock(self) -> bool:
        return is_low_stock(self.quantity, self.min_quantity)
