"""
Dashboard aggregation engine.

Pure functions over record sets that are already scoped to one truck:
dashboard statistics, low-stock flags, protein usage, rating distribution,
daily sales series and order-line display strings. Records may be ORM rows
or any object exposing the same attribute names. Nothing here touches the
database or mutates its inputs.
"""
import math
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Optional, Sequence, TypedDict, Union

from pydantic import BaseModel

from truckhub.utils.helpers import safe_json_parse

# Protein stock below this fraction of the allocation is flagged as low
PROTEIN_LOW_STOCK_RATIO = 0.2

RATING_VALUES = (5, 4, 3, 2, 1)

INVALID_ITEMS_TEXT = "Invalid order data"
NO_ITEMS_TEXT = "No items"

COMPLETED = "completed"

_UNDECODABLE = object()


class OrderLine(TypedDict, total=False):
    name: str
    quantity: int
    price: float


# Order items arrive either still JSON-encoded (legacy rows) or parsed
OrderItems = Union[str, Sequence[OrderLine]]


class DashboardStats(BaseModel):
    today_sales: float
    orders_today: int
    average_rating: float
    active_locations: int


class ProteinUsage(BaseModel):
    usage_percentage: float
    is_low: bool


class RatingBucket(BaseModel):
    count: int
    percentage: float


class DailySales(BaseModel):
    day: date
    sales: float
    orders: int


def round_half_away(value: float, digits: int = 1) -> float:
    """Round half away from zero (2.25 -> 2.3, -2.25 -> -2.3)."""
    factor = 10 ** digits
    scaled = abs(value) * factor
    rounded = math.floor(scaled + 0.5) / factor
    return math.copysign(rounded, value) if value else 0.0


def _created_on(record: Any, day: date) -> bool:
    created_at = getattr(record, "created_at", None)
    if created_at is None:
        return False
    if isinstance(created_at, datetime):
        created_at = created_at.date()
    return created_at == day


def _completed_orders(orders: Iterable[Any], day: Optional[date] = None) -> list:
    completed = [o for o in orders if o.status == COMPLETED]
    if day is not None:
        completed = [o for o in completed if _created_on(o, day)]
    return completed


def compute_average_rating(reviews: Sequence[Any]) -> float:
    if not reviews:
        return 0
    mean = sum(r.rating for r in reviews) / len(reviews)
    return round_half_away(mean, 1)


def compute_dashboard_stats(
    orders: Sequence[Any],
    reviews: Sequence[Any],
    locations: Sequence[Any],
    day: Optional[date] = None,
) -> DashboardStats:
    """
    Headline numbers for the truck dashboard.

    Sales and order counts only include completed orders. With ``day`` set,
    they are further restricted to orders created on that calendar date;
    without it every completed order counts.
    """
    completed = _completed_orders(orders, day)
    return DashboardStats(
        today_sales=sum(float(o.total_amount) for o in completed),
        orders_today=len(completed),
        average_rating=compute_average_rating(reviews),
        active_locations=sum(1 for loc in locations if loc.is_active),
    )


def is_low_stock(item: Any) -> bool:
    threshold = getattr(item, "low_stock_threshold", None)
    if threshold is None:
        return False
    return float(item.current_stock) <= float(threshold)


def compute_low_stock(items: Iterable[Any]) -> list:
    """Items at or below their threshold, in input order. No threshold, no flag."""
    return [item for item in items if is_low_stock(item)]


def compute_protein_usage(item: Any) -> ProteinUsage:
    allocated = float(item.allocated_amount)
    used = float(item.used_amount or 0)
    usage_percentage = (used / allocated) * 100 if allocated > 0 else 0
    return ProteinUsage(
        usage_percentage=usage_percentage,
        is_low=float(item.current_stock) < allocated * PROTEIN_LOW_STOCK_RATIO,
    )


def compute_rating_distribution(reviews: Sequence[Any]) -> dict[int, RatingBucket]:
    total = len(reviews)
    distribution = {}
    for rating in RATING_VALUES:
        count = sum(1 for r in reviews if r.rating == rating)
        distribution[rating] = RatingBucket(
            count=count,
            percentage=(count / total) * 100 if total > 0 else 0,
        )
    return distribution


def compute_review_summary(reviews: Sequence[Any], recent: int = 5) -> dict:
    """Average, total and distribution plus the newest ``recent`` reviews."""
    newest = sorted(
        reviews,
        key=lambda r: r.created_at or datetime.min,
        reverse=True,
    )
    return {
        "average_rating": compute_average_rating(reviews),
        "total_reviews": len(reviews),
        "rating_distribution": compute_rating_distribution(reviews),
        "recent_reviews": newest[:recent],
    }


def compute_daily_sales(orders: Sequence[Any], days: int, today: date) -> list[DailySales]:
    """One point per day for the last ``days`` days (oldest first), completed orders only."""
    series = []
    completed = _completed_orders(orders)
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        daily = [o for o in completed if _created_on(o, day)]
        series.append(DailySales(
            day=day,
            sales=sum(float(o.total_amount) for o in daily),
            orders=len(daily),
        ))
    return series


def format_order_items(items: OrderItems) -> str:
    """Render order lines as "2x Taco, 1x Horchata"."""
    if isinstance(items, str):
        items = safe_json_parse(items, default=_UNDECODABLE)
        if items is _UNDECODABLE:
            return INVALID_ITEMS_TEXT

    if not isinstance(items, (list, tuple)):
        return NO_ITEMS_TEXT

    return ", ".join(
        f"{line.get('quantity')}x {line.get('name')}" if isinstance(line, dict)
        else f"{getattr(line, 'quantity', None)}x {getattr(line, 'name', None)}"
        for line in items
    )
