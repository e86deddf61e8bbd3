"""
Input validation utilities
"""
from truckhub.models.order import OrderStatus

MIN_RATING = 1
MAX_RATING = 5


def validate_rating(rating: int) -> int:
    """Validate a review rating is a whole star count between 1 and 5"""
    if rating < MIN_RATING or rating > MAX_RATING:
        raise ValueError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
    return rating


def validate_order_status(status: str) -> str:
    """Validate an order status; any known status may follow any other"""
    valid = {s.value for s in OrderStatus}
    if status not in valid:
        raise ValueError(f"Invalid order status. Must be one of: {sorted(valid)}")
    return status

