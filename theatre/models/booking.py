# theatre/models/booking.py
from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel

from theatre.models.item import CartItem
from theatre.models.show import Seat


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    PENDING = "pending"
    CANCELLED = "cancelled"


class BookingBase(BaseModel):
    show_id: str
    user_id: str
    seats: List[str]
    items: List[CartItem] = []
    total_amount: float
    booking_date: datetime
    status: BookingStatus = BookingStatus.CONFIRMED


class Booking(BookingBase):
    id: str


class CartView(BaseModel):
    """Snapshot of a user's cart returned by the booking routes"""
    show_id: str
    seats: List[Seat]
    items: List[CartItem]
    seats_total: float
    items_total: float
    total_amount: float
