"""
Inventory API endpoints - generic stock items with low-stock thresholds
"""
import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from truckhub.database import get_db
from truckhub.models.user import User
from truckhub.models.inventory import InventoryItem
from truckhub.api.auth import get_current_user
from truckhub.services.aggregation import compute_low_stock, is_low_stock
from truckhub.services.cache import ResourceCache, get_cache
from truckhub.services.trucks import require_truck_access

logger = logging.getLogger(__name__)
router = APIRouter()


class InventoryItemResponse(BaseModel):
    id: int
    truck_id: int
    name: str
    category: Optional[str]
    current_stock: float
    unit: str
    low_stock_threshold: Optional[float]
    cost: Optional[float]
    is_low_stock: bool = False
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class InventoryItemCreate(BaseModel):
    truck_id: int
    name: str
    category: Optional[str] = None
    current_stock: float = Field(..., ge=0)
    unit: str
    low_stock_threshold: Optional[float] = Field(None, ge=0)
    cost: Optional[float] = Field(None, ge=0)


class InventoryItemUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    current_stock: Optional[float] = Field(None, ge=0)
    unit: Optional[str] = None
    low_stock_threshold: Optional[float] = Field(None, ge=0)
    cost: Optional[float] = Field(None, ge=0)


def _build_item_response(item: InventoryItem) -> InventoryItemResponse:
    response = InventoryItemResponse.model_validate(item)
    response.is_low_stock = is_low_stock(item)
    return response


async def _load_inventory(db: AsyncSession, cache: ResourceCache, truck_id: int) -> list:
    async def load():
        result = await db.execute(
            select(InventoryItem)
            .where(InventoryItem.truck_id == truck_id)
            .order_by(InventoryItem.name)
        )
        return [_build_item_response(i) for i in result.scalars().all()]

    return await cache.get_or_load("inventory", truck_id, load)


async def _get_item(db: AsyncSession, user: User, item_id: int) -> InventoryItem:
    result = await db.execute(select(InventoryItem).where(InventoryItem.id == item_id))
    item = result.scalar_one_or_none()
    if not item:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    await require_truck_access(db, user, item.truck_id)
    return item


@router.get("/{truck_id}", response_model=List[InventoryItemResponse])
async def list_inventory(
    truck_id: int,
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_cache),
    current_user: User = Depends(get_current_user)
):
    """Inventory items for a truck, alphabetical"""
    await require_truck_access(db, current_user, truck_id)
    return await _load_inventory(db, cache, truck_id)


@router.get("/{truck_id}/low-stock", response_model=List[InventoryItemResponse])
async def list_low_stock(
    truck_id: int,
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_cache),
    current_user: User = Depends(get_current_user)
):
    """Items at or below their low-stock threshold"""
    await require_truck_access(db, current_user, truck_id)
    return compute_low_stock(await _load_inventory(db, cache, truck_id))


@router.post("/", response_model=InventoryItemResponse)
async def create_inventory_item(
    data: InventoryItemCreate,
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_cache),
    current_user: User = Depends(get_current_user)
):
    await require_truck_access(db, current_user, data.truck_id)

    item = InventoryItem(**data.model_dump())
    db.add(item)
    await db.commit()
    await db.refresh(item)
    cache.invalidate("inventory", item.truck_id)
    logger.info(f"Created inventory item {item.id} ({item.name}) for truck {item.truck_id}")
    return _build_item_response(item)


@router.put("/{item_id}", response_model=InventoryItemResponse)
async def update_inventory_item(
    item_id: int,
    data: InventoryItemUpdate,
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_cache),
    current_user: User = Depends(get_current_user)
):
    item = await _get_item(db, current_user, item_id)

    # Explicit nulls clear the threshold; other omitted fields are left alone
    updates = data.model_dump(exclude_unset=True)
    for key, value in updates.items():
        if value is None and key != "low_stock_threshold":
            continue
        setattr(item, key, value)

    item.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(item)
    cache.invalidate("inventory", item.truck_id)
    logger.info(f"Updated inventory item {item.id}")
    return _build_item_response(item)


@router.delete("/{item_id}")
async def delete_inventory_item(
    item_id: int,
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_cache),
    current_user: User = Depends(get_current_user)
):
    item = await _get_item(db, current_user, item_id)
    truck_id = item.truck_id

    await db.delete(item)
    await db.commit()
    cache.invalidate("inventory", truck_id)
    logger.info(f"Deleted inventory item {item_id}")
    return {"success": True}
