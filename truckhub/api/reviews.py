"""
Review API endpoints - customer ratings and the review summary
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel, field_validator

from truckhub.database import get_db
from truckhub.models.user import User
from truckhub.models.food_truck import FoodTruck
from truckhub.models.review import Review
from truckhub.api.auth import get_current_user
from truckhub.services.aggregation import RatingBucket, compute_review_summary
from truckhub.services.cache import ResourceCache, get_cache
from truckhub.services.trucks import require_truck_access
from truckhub.utils.validators import validate_rating

logger = logging.getLogger(__name__)
router = APIRouter()


class ReviewResponse(BaseModel):
    id: int
    truck_id: int
    customer_name: str
    rating: int
    comment: Optional[str]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class ReviewCreate(BaseModel):
    truck_id: int
    customer_name: str
    rating: int
    comment: Optional[str] = None

    @field_validator("rating")
    @classmethod
    def check_rating(cls, v: int) -> int:
        return validate_rating(v)


class ReviewSummaryResponse(BaseModel):
    average_rating: float
    total_reviews: int
    rating_distribution: Dict[int, RatingBucket]
    recent_reviews: List[ReviewResponse]


async def _load_reviews(db: AsyncSession, cache: ResourceCache, truck_id: int) -> list:
    async def load():
        result = await db.execute(
            select(Review)
            .where(Review.truck_id == truck_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
        )
        return [ReviewResponse.model_validate(r) for r in result.scalars().all()]

    return await cache.get_or_load("reviews", truck_id, load)


@router.get("/{truck_id}", response_model=List[ReviewResponse])
async def list_reviews(
    truck_id: int,
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_cache),
    current_user: User = Depends(get_current_user)
):
    """Reviews for a truck, newest first"""
    await require_truck_access(db, current_user, truck_id)
    return await _load_reviews(db, cache, truck_id)


@router.get("/{truck_id}/summary", response_model=ReviewSummaryResponse)
async def review_summary(
    truck_id: int,
    recent: int = Query(5, ge=0, le=50),
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_cache),
    current_user: User = Depends(get_current_user)
):
    """Average rating, 5..1 star distribution and the latest reviews"""
    await require_truck_access(db, current_user, truck_id)
    reviews = await _load_reviews(db, cache, truck_id)
    return compute_review_summary(reviews, recent=recent)


@router.post("/", response_model=ReviewResponse)
async def create_review(
    data: ReviewCreate,
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_cache),
):
    """Submit a review (public, no sign-in required)"""
    result = await db.execute(select(FoodTruck.id).where(FoodTruck.id == data.truck_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(status_code=404, detail="Food truck not found")

    review = Review(**data.model_dump())
    db.add(review)
    await db.commit()
    await db.refresh(review)
    cache.invalidate("reviews", review.truck_id)
    logger.info(f"New {review.rating}-star review for truck {review.truck_id}")
    return review
