"""
Menu catalog API endpoints
"""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Optional
from pydantic import BaseModel, Field

from truckhub.database import get_db
from truckhub.models.user import User
from truckhub.models.inventory import ProteinType
from truckhub.models.menu_item import MenuItem
from truckhub.api.auth import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter()


class MenuItemResponse(BaseModel):
    id: int
    name: str
    category: Optional[str]
    protein_type: Optional[ProteinType]
    protein_amount: Optional[float]
    price: Optional[float]

    class Config:
        from_attributes = True


class MenuItemCreate(BaseModel):
    name: str
    category: Optional[str] = None
    protein_type: Optional[ProteinType] = None
    protein_amount: Optional[float] = Field(None, ge=0)
    price: Optional[float] = Field(None, ge=0)


@router.get("/", response_model=List[MenuItemResponse])
async def list_menu_items(
    protein_type: Optional[ProteinType] = None,
    db: AsyncSession = Depends(get_db)
):
    """Public menu catalog, optionally narrowed to one protein"""
    query = select(MenuItem).order_by(MenuItem.category, MenuItem.name)
    if protein_type:
        query = query.where(MenuItem.protein_type == protein_type)

    result = await db.execute(query)
    return result.scalars().all()


@router.post("/", response_model=MenuItemResponse)
async def create_menu_item(
    data: MenuItemCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    item = MenuItem(**data.model_dump())
    db.add(item)
    await db.commit()
    await db.refresh(item)
    logger.info(f"Created menu item {item.id} ({item.name})")
    return item
