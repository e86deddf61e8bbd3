"""
Protein inventory API endpoints - per-protein allocations (lbs) with usage
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
from truckhub.models.inventory import ProteinInventory, ProteinType
from truckhub.api.auth import get_current_user
from truckhub.services.aggregation import compute_protein_usage
from truckhub.services.cache import ResourceCache, get_cache
from truckhub.services.trucks import get_truck_for_user, require_truck_access

logger = logging.getLogger(__name__)
router = APIRouter()


class ProteinInventoryResponse(BaseModel):
    id: int
    truck_id: int
    protein_type: ProteinType
    allocated_amount: float
    current_stock: float
    used_amount: float
    cost_per_unit: Optional[float]
    usage_percentage: float = 0
    is_low: bool = False
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class ProteinInventoryCreate(BaseModel):
    protein_type: ProteinType
    allocated_amount: float = Field(..., ge=0)
    current_stock: float = Field(..., ge=0)
    used_amount: float = Field(0, ge=0)
    cost_per_unit: Optional[float] = Field(None, ge=0)


class ProteinInventoryUpdate(BaseModel):
    protein_type: Optional[ProteinType] = None
    allocated_amount: Optional[float] = Field(None, ge=0)
    current_stock: Optional[float] = Field(None, ge=0)
    used_amount: Optional[float] = Field(None, ge=0)
    cost_per_unit: Optional[float] = Field(None, ge=0)


def _build_protein_response(item: ProteinInventory) -> ProteinInventoryResponse:
    usage = compute_protein_usage(item)
    return ProteinInventoryResponse.model_validate(item).model_copy(update=usage.model_dump())


async def _load_protein_inventory(db: AsyncSession, cache: ResourceCache, truck_id: int) -> list:
    async def load():
        result = await db.execute(
            select(ProteinInventory)
            .where(ProteinInventory.truck_id == truck_id)
            .order_by(ProteinInventory.protein_type, ProteinInventory.id)
        )
        return [_build_protein_response(p) for p in result.scalars().all()]

    return await cache.get_or_load("protein_inventory", truck_id, load)


async def _get_protein(db: AsyncSession, user: User, protein_id: int) -> ProteinInventory:
    result = await db.execute(select(ProteinInventory).where(ProteinInventory.id == protein_id))
    item = result.scalar_one_or_none()
    if not item:
        raise HTTPException(status_code=404, detail="Protein inventory not found")
    await require_truck_access(db, user, item.truck_id)
    return item


@router.get("/", response_model=List[ProteinInventoryResponse])
async def list_my_protein_inventory(
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_cache),
    current_user: User = Depends(get_current_user)
):
    """Protein allocations for the current user's truck (empty if none)"""
    truck = await get_truck_for_user(db, current_user)
    if not truck:
        return []
    return await _load_protein_inventory(db, cache, truck.id)


@router.get("/{truck_id}", response_model=List[ProteinInventoryResponse])
async def list_protein_inventory(
    truck_id: int,
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_cache),
    current_user: User = Depends(get_current_user)
):
    await require_truck_access(db, current_user, truck_id)
    return await _load_protein_inventory(db, cache, truck_id)


@router.post("/", response_model=ProteinInventoryResponse)
async def create_protein_inventory(
    data: ProteinInventoryCreate,
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_cache),
    current_user: User = Depends(get_current_user)
):
    """Add a protein allocation to the current user's truck"""
    truck = await get_truck_for_user(db, current_user)
    if not truck:
        raise HTTPException(status_code=400, detail="No truck found for user")

    item = ProteinInventory(truck_id=truck.id, **data.model_dump())
    db.add(item)
    await db.commit()
    await db.refresh(item)
    cache.invalidate("protein_inventory", truck.id)
    logger.info(f"Created {item.protein_type.value} allocation {item.id} for truck {truck.id}")
    return _build_protein_response(item)


@router.put("/{protein_id}", response_model=ProteinInventoryResponse)
async def update_protein_inventory(
    protein_id: int,
    data: ProteinInventoryUpdate,
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_cache),
    current_user: User = Depends(get_current_user)
):
    item = await _get_protein(db, current_user, protein_id)

    for key, value in data.model_dump(exclude_none=True).items():
        setattr(item, key, value)

    item.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(item)
    cache.invalidate("protein_inventory", item.truck_id)
    logger.info(f"Updated protein allocation {item.id}")
    return _build_protein_response(item)


@router.delete("/{protein_id}")
async def delete_protein_inventory(
    protein_id: int,
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_cache),
    current_user: User = Depends(get_current_user)
):
    item = await _get_protein(db, current_user, protein_id)
    truck_id = item.truck_id

    await db.delete(item)
    await db.commit()
    cache.invalidate("protein_inventory", truck_id)
    logger.info(f"Deleted protein allocation {protein_id}")
    return {"message": "Protein inventory deleted successfully"}
