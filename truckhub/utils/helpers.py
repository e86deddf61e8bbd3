"""
General helper utilities
"""
import json
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

# Sales chart ranges offered on the dashboard
SALES_RANGES = {"7days": 7, "30days": 30, "90days": 90}


def format_currency(amount: float) -> str:
    """Format amount as US dollars"""
    return f"${amount:,.2f}"


def range_to_days(period: str = "7days") -> int:
    """Number of days covered by a sales chart range"""
    return SALES_RANGES.get(period, 7)


def utc_today():
    """Today's calendar date in UTC (timestamps are stored as naive UTC)"""
    return datetime.now(timezone.utc).date()


def generate_order_number() -> str:
    """Order number for orders logged without one"""
    return f"ORD-{datetime.now(timezone.utc):%Y%m%d}-{uuid4().hex[:6].upper()}"


def safe_json_parse(text: str, default: Any = None) -> Any:
    """Safely parse JSON string"""
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return default
