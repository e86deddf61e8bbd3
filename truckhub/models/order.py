"""
Order model - sales logged at the truck window
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, JSON
from datetime import datetime
from enum import Enum
from truckhub.database import Base


class OrderStatus(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    truck_id = Column(Integer, ForeignKey("food_trucks.id"), nullable=False, index=True)
    order_number = Column(String, nullable=False, unique=True)
    customer_name = Column(String, nullable=True)
    items = Column(JSON, nullable=False)  # [{name, quantity, price}] or legacy encoded string
    total_amount = Column(Float, nullable=False)
    status = Column(String, nullable=False, default=OrderStatus.PENDING.value)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
