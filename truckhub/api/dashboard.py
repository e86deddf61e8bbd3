"""
Dashboard API - headline stats, sales series and stock alerts for one truck
"""
import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Literal

from truckhub.database import get_db
from truckhub.models.user import User
from truckhub.models.order import Order, OrderStatus
from truckhub.models.review import Review
from truckhub.models.location import Location
from truckhub.models.inventory import InventoryItem, ProteinInventory
from truckhub.api.auth import get_current_user
from truckhub.services.aggregation import (
    DailySales,
    DashboardStats,
    compute_daily_sales,
    compute_dashboard_stats,
    compute_low_stock,
    compute_protein_usage,
)
from truckhub.services.cache import ResourceCache, get_cache
from truckhub.services.trucks import require_truck_access
from truckhub.utils.helpers import SALES_RANGES, range_to_days, utc_today

logger = logging.getLogger(__name__)
router = APIRouter()


async def _truck_rows(db: AsyncSession, model, truck_id: int) -> list:
    result = await db.execute(select(model).where(model.truck_id == truck_id))
    return list(result.scalars().all())


async def _completed_orders(db: AsyncSession, truck_id: int) -> list:
    result = await db.execute(
        select(Order).where(
            Order.truck_id == truck_id,
            Order.status == OrderStatus.COMPLETED.value,
        )
    )
    return list(result.scalars().all())


@router.get("/{truck_id}", response_model=DashboardStats)
async def get_dashboard_stats(
    truck_id: int,
    period: Literal["today", "all"] = "today",
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_cache),
    current_user: User = Depends(get_current_user)
):
    """
    Today's completed sales and order count, average rating and active
    locations. period=all counts every completed order regardless of date.
    """
    await require_truck_access(db, current_user, truck_id)
    day = utc_today() if period == "today" else None

    async def load():
        orders = await _completed_orders(db, truck_id)
        reviews = await _truck_rows(db, Review, truck_id)
        locations = await _truck_rows(db, Location, truck_id)
        return day, compute_dashboard_stats(orders, reviews, locations, day=day)

    if day is None:
        return (await load())[1]

    # A cached entry is only valid for the date it was computed on
    cached_day, stats = await cache.get_or_load("dashboard", truck_id, load)
    if cached_day != day:
        cache.invalidate("dashboard", truck_id)
        _, stats = await cache.get_or_load("dashboard", truck_id, load)
    return stats


@router.get("/{truck_id}/sales", response_model=List[DailySales])
async def get_sales_series(
    truck_id: int,
    time_range: str = Query("7days", alias="range", pattern="^(" + "|".join(SALES_RANGES) + ")$"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Daily completed sales for the last 7, 30 or 90 days, oldest first"""
    await require_truck_access(db, current_user, truck_id)
    orders = await _completed_orders(db, truck_id)
    return compute_daily_sales(orders, range_to_days(time_range), utc_today())


@router.get("/{truck_id}/alerts")
async def get_stock_alerts(
    truck_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Inventory items at or below threshold and proteins under 20% of allocation"""
    await require_truck_access(db, current_user, truck_id)

    items = await _truck_rows(db, InventoryItem, truck_id)
    low_stock = [
        {
            "id": item.id,
            "item_name": item.name,
            "current_stock": item.current_stock,
            "threshold": item.low_stock_threshold,
            "unit": item.unit,
            "severity": "critical" if item.current_stock <= 0 else "low",
        }
        for item in compute_low_stock(sorted(items, key=lambda i: i.name))
    ]

    low_protein = []
    for protein in await _truck_rows(db, ProteinInventory, truck_id):
        usage = compute_protein_usage(protein)
        if usage.is_low:
            low_protein.append({
                "id": protein.id,
                "protein_type": protein.protein_type.value,
                "current_stock": protein.current_stock,
                "allocated_amount": protein.allocated_amount,
                "usage_percentage": usage.usage_percentage,
            })

    if low_stock or low_protein:
        logger.debug(f"Truck {truck_id}: {len(low_stock)} low-stock items, {len(low_protein)} low proteins")

    return {"low_stock": low_stock, "low_protein": low_protein}
