"""
Food truck profile API endpoints - the truck the current user operates
"""
import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from datetime import datetime
from pydantic import BaseModel

from truckhub.database import get_db
from truckhub.models.user import User
from truckhub.models.organization import Organization
from truckhub.models.food_truck import FoodTruck
from truckhub.api.auth import get_current_user
from truckhub.services.cache import ResourceCache, get_cache
from truckhub.services.trucks import get_organization_for_owner, get_truck_for_user

logger = logging.getLogger(__name__)
router = APIRouter()


class FoodTruckResponse(BaseModel):
    id: int
    organization_id: int
    name: str
    description: Optional[str]
    cuisine: Optional[str]
    phone: Optional[str]
    website: Optional[str]
    logo: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class FoodTruckCreate(BaseModel):
    name: str
    description: Optional[str] = None
    cuisine: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    logo: Optional[str] = None


class FoodTruckUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    cuisine: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    logo: Optional[str] = None


@router.get("/", response_model=Optional[FoodTruckResponse])
async def get_food_truck(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """The truck the current user owns or is assigned to (null if none)"""
    return await get_truck_for_user(db, current_user)


@router.post("/", response_model=FoodTruckResponse)
async def create_food_truck(
    data: FoodTruckCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Create a truck, creating the user's organization on first use"""
    organization = await get_organization_for_owner(db, current_user)
    if not organization:
        organization = Organization(
            name=f"{data.name or 'My'} Organization",
            owner_id=current_user.id,
        )
        db.add(organization)
        await db.flush()
        logger.info(f"Created organization {organization.id} for user {current_user.id}")

    truck = FoodTruck(organization_id=organization.id, **data.model_dump(exclude_none=True))
    db.add(truck)
    await db.commit()
    await db.refresh(truck)
    logger.info(f"Created truck {truck.id} ({truck.name})")
    return truck


@router.put("/", response_model=FoodTruckResponse)
async def update_food_truck(
    data: FoodTruckUpdate,
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_cache),
    current_user: User = Depends(get_current_user)
):
    """Update the current user's truck profile"""
    truck = await get_truck_for_user(db, current_user)
    if not truck:
        raise HTTPException(status_code=404, detail="Food truck not found")

    for key, value in data.model_dump(exclude_none=True).items():
        setattr(truck, key, value)

    truck.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(truck)
    cache.invalidate_truck(truck.id)
    logger.info(f"Updated truck {truck.id}")
    return truck
