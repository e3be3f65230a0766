# theatre/models/review.py
from datetime import datetime
from typing import Dict

from pydantic import BaseModel, field_validator


class ReviewCreate(BaseModel):
    show_id: str
    rating: int
    comment: str

    @field_validator("rating")
    def validate_rating(cls, v):
        if not 1 <= v <= 5:
            raise ValueError("rating must be between 1 and 5")
        return v

    @field_validator("comment")
    def validate_comment(cls, v):
        if not v.strip():
            raise ValueError("comment must not be empty")
        return v.strip()


class Review(ReviewCreate):
    id: str
    user_id: str
    user_name: str = ""
    show_title: str = ""
    created_at: datetime


class RatingBucket(BaseModel):
    count: int
    percentage: float


class ReviewSummary(BaseModel):
    count: int
    average_rating: float
    # Ordered 5 down to 1
    distribution: Dict[int, RatingBucket]
