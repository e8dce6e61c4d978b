# src/routes/inventory.py
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional, Any
from uuid import UUID
from core.dependencies import get_current_user
from db.database import get_db
from models.doctor import Doctor
from schemas.inventory_schemas import (
    InventoryItemCreate,
    InventoryItemPublic,
    InventoryItemUpdate,
    InventoryRestock,
)
from services.inventory_service import inventory_service, item_to_public

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("/", response_model=List[InventoryItemPublic], summary="List inventory")
async def list_items(
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Name fragment"),
    skip: int = Query(0, ge=0),
    limit: int = Query(200, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    items = await inventory_service.list_items(db, category, search, skip, limit)
    return [item_to_public(i) for i in items]


@router.get(
    "/low-stock",
    response_model=List[InventoryItemPublic],
    summary="Low stock items",
    description="Items whose quantity is below their minimum quantity",
)
async def low_stock_items(
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    return [item_to_public(i) for i in await inventory_service.get_low_stock(db)]


@router.post(
    "/",
    response_model=InventoryItemPublic,
    status_code=status.HTTP_201_CREATED,
    summary="Add inventory item",
)
async def create_item(
    item_data: InventoryItemCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    return item_to_public(await inventory_service.create(db, item_data))


@router.get("/{item_id}", response_model=InventoryItemPublic, summary="Get inventory item")
async def get_item(
    item_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    return item_to_public(await inventory_service.get_or_404(db, item_id))


@router.patch(
    "/{item_id}",
    response_model=InventoryItemPublic,
    summary="Update inventory item",
    description="Partial update: only the fields sent are changed",
)
async def update_item(
    item_id: UUID,
    item_data: InventoryItemUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    return item_to_public(await inventory_service.update(db, item_id, item_data))


@router.post(
    "/{item_id}/restock",
    response_model=InventoryItemPublic,
    summary="Restock item",
    description="Add units to the stock and stamp the restock time",
)
async def restock_item(
    item_id: UUID,
    restock: InventoryRestock,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    return item_to_public(await inventory_service.restock(db, item_id, restock.amount))


@router.delete(
    "/{item_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete inventory item"
)
async def delete_item(
    item_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Response:
    await inventory_service.delete(db, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
