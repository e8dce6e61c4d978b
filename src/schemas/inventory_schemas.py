# src/schemas/inventory_schemas.py
from pydantic import Field
from typing import Optional
from datetime import datetime
from decimal import Decimal
from .base_schemas import FormSchema, PatchSchema, IDMixin, TimestampMixin


class InventoryItemCreate(FormSchema):
    name: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=100)
    quantity: int = Field(0, ge=0)
    unit: str = Field(..., min_length=1, max_length=30)
    min_quantity: int = Field(0, ge=0)
    price: Decimal = Field(Decimal("0"), ge=0)
    supplier: Optional[str] = None
    last_restocked: Optional[datetime] = None


class InventoryItemUpdate(PatchSchema):
    nullable_fields = frozenset({"supplier", "last_restocked"})

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    quantity: Optional[int] = Field(None, ge=0)
    unit: Optional[str] = Field(None, min_length=1, max_length=30)
    min_quantity: Optional[int] = Field(None, ge=0)
    price: Optional[Decimal] = Field(None, ge=0)
    supplier: Optional[str] = None
    last_restocked: Optional[datetime] = None


class InventoryRestock(FormSchema):
    amount: int = Field(..., gt=0)


class InventoryItemPublic(IDMixin, TimestampMixin):
    name: str
    category: str
    quantity: int
    unit: str
    min_quantity: int
    price: Decimal
    supplier: Optional[str] = None
    last_restocked: Optional[datetime] = None
    low_stock: bool
