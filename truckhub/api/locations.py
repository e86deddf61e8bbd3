"""
Location API endpoints - where each truck parks and sells
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
from truckhub.models.location import Location
from truckhub.api.auth import get_current_user
from truckhub.services.cache import ResourceCache, get_cache
from truckhub.services.trucks import require_truck_access

logger = logging.getLogger(__name__)
router = APIRouter()


# --- Pydantic Schemas ---

class LocationResponse(BaseModel):
    id: int
    truck_id: int
    name: str
    address: str
    latitude: Optional[float]
    longitude: Optional[float]
    description: Optional[str]
    is_active: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class LocationCreate(BaseModel):
    truck_id: int
    name: str
    address: str
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    description: Optional[str] = None
    is_active: bool = False


class LocationUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    description: Optional[str] = None
    is_active: Optional[bool] = None


async def _get_location(db: AsyncSession, user: User, location_id: int) -> Location:
    result = await db.execute(select(Location).where(Location.id == location_id))
    location = result.scalar_one_or_none()
    if not location:
        raise HTTPException(status_code=404, detail="Location not found")
    await require_truck_access(db, user, location.truck_id)
    return location


# --- Endpoints ---

@router.get("/{truck_id}", response_model=List[LocationResponse])
async def list_locations(
    truck_id: int,
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_cache),
    current_user: User = Depends(get_current_user)
):
    """Locations for a truck, newest first"""
    await require_truck_access(db, current_user, truck_id)

    async def load():
        result = await db.execute(
            select(Location)
            .where(Location.truck_id == truck_id)
            .order_by(Location.created_at.desc(), Location.id.desc())
        )
        return [LocationResponse.model_validate(loc) for loc in result.scalars().all()]

    return await cache.get_or_load("locations", truck_id, load)


@router.post("/", response_model=LocationResponse)
async def create_location(
    data: LocationCreate,
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_cache),
    current_user: User = Depends(get_current_user)
):
    await require_truck_access(db, current_user, data.truck_id)

    location = Location(**data.model_dump())
    db.add(location)
    await db.commit()
    await db.refresh(location)
    cache.invalidate("locations", location.truck_id)
    logger.info(f"Created location {location.id} for truck {location.truck_id}")
    return location


@router.put("/{location_id}", response_model=LocationResponse)
async def update_location(
    location_id: int,
    data: LocationUpdate,
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_cache),
    current_user: User = Depends(get_current_user)
):
    location = await _get_location(db, current_user, location_id)

    for key, value in data.model_dump(exclude_none=True).items():
        setattr(location, key, value)

    location.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(location)
    cache.invalidate("locations", location.truck_id)
    logger.info(f"Updated location {location.id}")
    return location


@router.delete("/{location_id}")
async def delete_location(
    location_id: int,
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_cache),
    current_user: User = Depends(get_current_user)
):
    location = await _get_location(db, current_user, location_id)
    truck_id = location.truck_id

    await db.delete(location)
    await db.commit()
    cache.invalidate("locations", truck_id)
    logger.info(f"Deleted location {location_id}")
    return {"success": True}
