"""
Truck ownership and membership lookups shared by the API routers
"""
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from truckhub.models.user import User
from truckhub.models.organization import Organization, TeamMember
from truckhub.models.food_truck import FoodTruck


async def get_organization_for_owner(db: AsyncSession, user: User) -> Optional[Organization]:
    result = await db.execute(
        select(Organization).where(Organization.owner_id == user.id)
    )
    return result.scalar_one_or_none()


async def get_membership(db: AsyncSession, user: User) -> Optional[TeamMember]:
    """Team membership matched by the user's email (the employee id or contact email)"""
    result = await db.execute(
        select(TeamMember)
        .where((TeamMember.user_id == user.email) | (TeamMember.email == user.email))
        .order_by(TeamMember.id)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_truck_for_user(db: AsyncSession, user: User) -> Optional[FoodTruck]:
    """
    The truck a user operates: the first truck of the organization they own,
    otherwise the truck they are assigned to as a team member.
    """
    organization = await get_organization_for_owner(db, user)
    if organization:
        result = await db.execute(
            select(FoodTruck)
            .where(FoodTruck.organization_id == organization.id)
            .order_by(FoodTruck.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    member = await get_membership(db, user)
    if member and member.truck_id:
        result = await db.execute(select(FoodTruck).where(FoodTruck.id == member.truck_id))
        return result.scalar_one_or_none()

    return None


async def require_truck_access(db: AsyncSession, user: User, truck_id: int) -> FoodTruck:
    """Return the truck if the user owns its organization or is assigned to it, else 404"""
    result = await db.execute(select(FoodTruck).where(FoodTruck.id == truck_id))
    truck = result.scalar_one_or_none()
    if not truck:
        raise HTTPException(status_code=404, detail="Food truck not found")

    organization = await get_organization_for_owner(db, user)
    if organization and truck.organization_id == organization.id:
        return truck

    member = await get_membership(db, user)
    if member and member.truck_id == truck.id:
        return truck

    raise HTTPException(status_code=404, detail="Food truck not found")
