# theatre/models/dashboard.py
from typing import List

from pydantic import BaseModel

from theatre.models.booking import Booking


class ShowStats(BaseModel):
    show_id: str
    title: str
    bookings: int
    revenue: float
    average_rating: float
    booked_seats: int
    # Booked seats as a percentage of the auditorium
    capacity: float


class DashboardStats(BaseModel):
    total_revenue: float
    total_bookings: int
    total_users: int
    average_rating: float
    shows: List[ShowStats]


class BookingRecord(Booking):
    """A booking with the customer and show names the admin tables display"""
    user_name: str = ""
    show_title: str = ""
