"""
Inventory models - generic stock items and per-protein allocations (lbs)
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Enum as SQLEnum
from datetime import datetime
from enum import Enum
from truckhub.database import Base


class ProteinType(str, Enum):
    PORK = "pork"
    BEEF = "beef"
    CHICKEN = "chicken"


class InventoryItem(Base):
    """Legacy stock item with an optional low-stock threshold"""
    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True, index=True)
    truck_id = Column(Integer, ForeignKey("food_trucks.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=True)
    current_stock = Column(Float, nullable=False)
    unit = Column(String, nullable=False)
    low_stock_threshold = Column(Float, nullable=True)
    cost = Column(Float, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class ProteinInventory(Base):
    __tablename__ = "protein_inventory"

    id = Column(Integer, primary_key=True, index=True)
    truck_id = Column(Integer, ForeignKey("food_trucks.id"), nullable=False, index=True)
    protein_type = Column(SQLEnum(ProteinType, native_enum=False), nullable=False)
    allocated_amount = Column(Float, nullable=False)
    current_stock = Column(Float, nullable=False)
    used_amount = Column(Float, nullable=False, default=0)
    cost_per_unit = Column(Float, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
