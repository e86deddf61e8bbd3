"""
Order API endpoints - order log per truck
"""
import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Any, List, Optional, Union
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from truckhub.config import get_settings
from truckhub.database import get_db
from truckhub.models.user import User
from truckhub.models.order import Order
from truckhub.models.location import Location
from truckhub.api.auth import get_current_user
from truckhub.services.aggregation import format_order_items
from truckhub.services.cache import ResourceCache, get_cache
from truckhub.services.trucks import require_truck_access
from truckhub.utils.helpers import generate_order_number
from truckhub.utils.validators import validate_order_status

settings = get_settings()
logger = logging.getLogger(__name__)
router = APIRouter()


# --- Pydantic Schemas ---

class OrderLineSchema(BaseModel):
    name: str
    quantity: int = Field(..., ge=1)
    price: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class OrderResponse(BaseModel):
    id: int
    truck_id: int
    order_number: str
    customer_name: Optional[str]
    items: Any
    items_display: str = ""
    total_amount: float
    status: str
    location_id: Optional[int]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class OrderCreate(BaseModel):
    truck_id: int
    order_number: Optional[str] = None
    customer_name: Optional[str] = None
    items: Union[List[OrderLineSchema], str]
    total_amount: float = Field(..., ge=0)
    status: str = "pending"
    location_id: Optional[int] = None

    @field_validator("status")
    @classmethod
    def check_status(cls, v: str) -> str:
        return validate_order_status(v)


class OrderUpdate(BaseModel):
    customer_name: Optional[str] = None
    items: Optional[Union[List[OrderLineSchema], str]] = None
    total_amount: Optional[float] = Field(None, ge=0)
    status: Optional[str] = None
    location_id: Optional[int] = None

    @field_validator("status")
    @classmethod
    def check_status(cls, v: Optional[str]) -> Optional[str]:
        return validate_order_status(v) if v is not None else v


# --- Helper ---

def _build_order_response(order: Order) -> OrderResponse:
    response = OrderResponse.model_validate(order)
    response.items_display = format_order_items(order.items)
    return response


def _dump_items(items: Union[List[OrderLineSchema], str]) -> Union[list, str]:
    if isinstance(items, str):
        return items
    return [line.model_dump(exclude_none=True) for line in items]


async def _get_order(db: AsyncSession, user: User, order_id: int) -> Order:
    result = await db.execute(select(Order).where(Order.id == order_id))
    order = result.scalar_one_or_none()
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    await require_truck_access(db, user, order.truck_id)
    return order


async def _check_order_number_free(db: AsyncSession, order_number: str) -> None:
    result = await db.execute(select(Order.id).where(Order.order_number == order_number))
    if result.scalar_one_or_none() is not None:
        raise HTTPException(status_code=400, detail="Order number already exists")


async def _check_location(db: AsyncSession, location_id: Optional[int], truck_id: int) -> None:
    if location_id is None:
        return
    location = await db.get(Location, location_id)
    if not location or location.truck_id != truck_id:
        raise HTTPException(status_code=400, detail="Location does not belong to this truck")


# --- Endpoints ---

@router.get("/{truck_id}", response_model=List[OrderResponse])
async def list_orders(
    truck_id: int,
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_cache),
    current_user: User = Depends(get_current_user)
):
    """Most recent orders for a truck, newest first"""
    await require_truck_access(db, current_user, truck_id)

    async def load():
        result = await db.execute(
            select(Order)
            .where(Order.truck_id == truck_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .limit(settings.RECENT_ORDERS_LIMIT)
        )
        return [_build_order_response(o) for o in result.scalars().all()]

    return await cache.get_or_load("orders", truck_id, load)


@router.post("/", response_model=OrderResponse)
async def create_order(
    data: OrderCreate,
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_cache),
    current_user: User = Depends(get_current_user)
):
    await require_truck_access(db, current_user, data.truck_id)

    order_number = data.order_number or generate_order_number()
    await _check_order_number_free(db, order_number)
    await _check_location(db, data.location_id, data.truck_id)

    order = Order(
        truck_id=data.truck_id,
        order_number=order_number,
        customer_name=data.customer_name,
        items=_dump_items(data.items),
        total_amount=data.total_amount,
        status=data.status,
        location_id=data.location_id,
    )
    db.add(order)
    await db.commit()
    await db.refresh(order)
    cache.invalidate("orders", order.truck_id)
    logger.info(f"Logged order {order.order_number} for truck {order.truck_id}")
    return _build_order_response(order)


@router.put("/{order_id}", response_model=OrderResponse)
async def update_order(
    order_id: int,
    data: OrderUpdate,
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_cache),
    current_user: User = Depends(get_current_user)
):
    """Update an order; status may move between any of the known values"""
    order = await _get_order(db, current_user, order_id)
    await _check_location(db, data.location_id, order.truck_id)

    updates = data.model_dump(exclude_none=True)
    if data.items is not None:
        updates["items"] = _dump_items(data.items)

    previous_status = order.status
    for key, value in updates.items():
        setattr(order, key, value)

    order.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(order)
    cache.invalidate("orders", order.truck_id)
    if order.status != previous_status:
        logger.info(f"Order {order.order_number}: {previous_status} -> {order.status}")
    return _build_order_response(order)
