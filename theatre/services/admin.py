# theatre/services/admin.py
import logging
from typing import Dict, List, Sequence

from theatre.database import BOOKINGS, MESSAGES, REVIEWS, SHOWS, USERS, Store, utc_now
from theatre.models.activity import ActivityType, Message, MessageCreate
from theatre.models.booking import BookingStatus
from theatre.models.dashboard import BookingRecord, DashboardStats, ShowStats
from theatre.models.show import Show
from theatre.models.user import AdminUserCreate, User
from theatre.services.activity import ActivityLog
from theatre.services.auth import AuthService
from theatre.services.seat_map import LAYOUT_SEAT_COUNT

logger = logging.getLogger(__name__)


def average_rating(ratings: Sequence[int]) -> float:
    return round(sum(ratings) / len(ratings), 2) if ratings else 0.0


class AdminService:
    def __init__(self, store: Store, auth: AuthService, activity: ActivityLog):
        self.store = store
        self.auth = auth
        self.activity = activity

    async def list_users(self) -> List[User]:
        rows = await self.store.select(USERS, order_by="created_at", descending=True)
        return [User.model_validate(row) for row in rows]

    async def user_counts(self) -> Dict[str, int]:
        total = await self.store.count(USERS)
        active = await self.store.count(USERS, {"is_active": True})
        return {"total": total, "active": active, "inactive": total - active}

    async def create_user(self, admin: User, new_user: AdminUserCreate) -> User:
        user = await self.auth.sign_up(new_user, role=new_user.role)
        await self.activity.log(user.id, ActivityType.ADMIN_CREATED, f"Account created by admin: {admin.name}")
        return user

    async def delete_user(self, admin: User, user_id: str) -> bool:
        return await self.auth.deactivate(
            user_id,
            description=f"Account deleted by admin: {admin.name}",
            activity_type=ActivityType.ADMIN_DELETED,
        )

    async def send_message(self, admin: User, message: MessageCreate) -> Message:
        if not message.recipient_ids:
            raise ValueError("Select at least one recipient")

        row = await self.store.insert(MESSAGES, {
            **message.model_dump(mode="json"),
            "sender_id": admin.id,
            "sent_at": utc_now(),
        })
        for user_id in message.recipient_ids:
            await self.activity.log(
                user_id,
                ActivityType.MESSAGE_RECEIVED,
                f"Received {message.message_type.value} message: {message.subject}",
                {"sender": admin.name},
            )
        logger.info("Sent %s message to %d users", message.message_type.value, len(message.recipient_ids),
                    extra={"user_id": admin.id})
        return Message.model_validate(row)

    async def dashboard_stats(self) -> DashboardStats:
        """Revenue, booking and rating totals, overall and per show."""
        bookings = await self.store.select(BOOKINGS, {"status": BookingStatus.CONFIRMED.value})
        reviews = await self.store.select(REVIEWS)
        shows = [Show.from_row(row) for row in await self.store.select(SHOWS, order_by="date")]

        show_stats = []
        for show in shows:
            show_bookings = [row for row in bookings if row["show_id"] == show.id]
            booked_seats = sum(len(row["seats"]) for row in show_bookings)
            show_stats.append(ShowStats(
                show_id=show.id,
                title=show.title,
                bookings=len(show_bookings),
                revenue=sum(row["total_amount"] for row in show_bookings),
                average_rating=average_rating([row["rating"] for row in reviews if row["show_id"] == show.id]),
                booked_seats=booked_seats,
                capacity=round(booked_seats / LAYOUT_SEAT_COUNT * 100, 1),
            ))

        return DashboardStats(
            total_revenue=sum(row["total_amount"] for row in bookings),
            total_bookings=len(bookings),
            total_users=await self.store.count(USERS),
            average_rating=average_rating([row["rating"] for row in reviews]),
            shows=show_stats,
        )

    async def recent_bookings(self, limit: int = 10) -> List[BookingRecord]:
        rows = await self.store.select(BOOKINGS, order_by="booking_date", descending=True, limit=limit)
        user_ids = sorted({row["user_id"] for row in rows})
        show_ids = sorted({row["show_id"] for row in rows})
        users = {row["id"]: row["name"] for row in await self.store.select(USERS, {"id": {"$in": user_ids}})}
        titles = {row["id"]: row["title"] for row in await self.store.select(SHOWS, {"id": {"$in": show_ids}})}
        return [
            BookingRecord(**row, user_name=users.get(row["user_id"], ""), show_title=titles.get(row["show_id"], ""))
            for row in rows
        ]
