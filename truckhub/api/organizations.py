"""
Organization, team member and truck fleet API endpoints
"""
import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr

from truckhub.database import get_db
from truckhub.models.user import User
from truckhub.models.organization import Organization, TeamMember, TeamRole
from truckhub.models.food_truck import FoodTruck
from truckhub.api.auth import get_current_user
from truckhub.api.food_truck import FoodTruckCreate, FoodTruckResponse
from truckhub.services.trucks import get_organization_for_owner

logger = logging.getLogger(__name__)
router = APIRouter()


# --- Pydantic Schemas ---

class OrganizationResponse(BaseModel):
    id: int
    name: str
    owner_id: int
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class OrganizationCreate(BaseModel):
    name: str


class TeamMemberResponse(BaseModel):
    id: int
    organization_id: int
    user_id: str
    first_name: str
    last_name: str
    email: Optional[str]
    phone: Optional[str]
    truck_id: Optional[int]
    role: TeamRole
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class TeamMemberCreate(BaseModel):
    user_id: str
    first_name: str
    last_name: str
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    truck_id: Optional[int] = None
    role: TeamRole = TeamRole.MEMBER


async def _require_organization(db: AsyncSession, user: User) -> Organization:
    organization = await get_organization_for_owner(db, user)
    if not organization:
        raise HTTPException(status_code=400, detail="No organization found")
    return organization


# --- Organization ---

@router.get("/organization", response_model=Optional[OrganizationResponse])
async def get_organization(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """The organization owned by the current user (null if none)"""
    return await get_organization_for_owner(db, current_user)


@router.post("/organization", response_model=OrganizationResponse)
async def create_organization(
    data: OrganizationCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if await get_organization_for_owner(db, current_user):
        raise HTTPException(status_code=400, detail="Organization already exists")

    organization = Organization(name=data.name, owner_id=current_user.id)
    db.add(organization)
    await db.commit()
    await db.refresh(organization)
    logger.info(f"Created organization {organization.id} for user {current_user.id}")
    return organization


# --- Team members ---

@router.get("/team-members", response_model=List[TeamMemberResponse])
async def list_my_team_members(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Team of the current user's organization (empty if none)"""
    organization = await get_organization_for_owner(db, current_user)
    if not organization:
        return []

    result = await db.execute(
        select(TeamMember)
        .where(TeamMember.organization_id == organization.id)
        .order_by(TeamMember.last_name, TeamMember.first_name)
    )
    return result.scalars().all()


@router.get("/team-members/{organization_id}", response_model=List[TeamMemberResponse])
async def list_team_members(
    organization_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    organization = await get_organization_for_owner(db, current_user)
    if not organization or organization.id != organization_id:
        raise HTTPException(status_code=404, detail="Organization not found")

    result = await db.execute(
        select(TeamMember)
        .where(TeamMember.organization_id == organization_id)
        .order_by(TeamMember.last_name, TeamMember.first_name)
    )
    return result.scalars().all()


@router.post("/team-members", response_model=TeamMemberResponse)
async def add_team_member(
    data: TeamMemberCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    organization = await _require_organization(db, current_user)

    if data.truck_id is not None:
        result = await db.execute(
            select(FoodTruck).where(
                FoodTruck.id == data.truck_id,
                FoodTruck.organization_id == organization.id,
            )
        )
        if not result.scalar_one_or_none():
            raise HTTPException(status_code=400, detail="Truck does not belong to this organization")

    member = TeamMember(organization_id=organization.id, **data.model_dump())
    db.add(member)
    await db.commit()
    await db.refresh(member)
    logger.info(f"Added team member {member.user_id} to organization {organization.id}")
    return member


# --- Trucks ---

@router.get("/trucks", response_model=List[FoodTruckResponse])
async def list_trucks(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    organization = await get_organization_for_owner(db, current_user)
    if not organization:
        return []

    result = await db.execute(
        select(FoodTruck)
        .where(FoodTruck.organization_id == organization.id)
        .order_by(FoodTruck.id)
    )
    return result.scalars().all()


@router.post("/trucks", response_model=FoodTruckResponse)
async def create_truck(
    data: FoodTruckCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Add another truck to the current user's organization"""
    organization = await _require_organization(db, current_user)

    truck = FoodTruck(organization_id=organization.id, **data.model_dump(exclude_none=True))
    db.add(truck)
    await db.commit()
    await db.refresh(truck)
    logger.info(f"Created truck {truck.id} in organization {organization.id}")
    return truck
