"""
Menu item model - shared dish catalog linked to protein allocations
"""
from sqlalchemy import Column, Integer, String, Float, Enum as SQLEnum
from truckhub.database import Base
from truckhub.models.inventory import ProteinType


class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=True)  # "tacos", "burritos", "bowls"
    protein_type = Column(SQLEnum(ProteinType, native_enum=False), nullable=True)
    protein_amount = Column(Float, nullable=True)  # lbs per serving
    price = Column(Float, nullable=True)
