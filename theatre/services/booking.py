# theatre/services/booking.py
import logging
import random
import uuid
from typing import List, Optional, Set

from theatre import config
from theatre.database import BOOKINGS, StoreError, Store, utc_now
from theatre.models.activity import ActivityType
from theatre.models.booking import Booking, BookingStatus
from theatre.models.show import Show
from theatre.models.user import User
from theatre.services.activity import ActivityLog
from theatre.services.cart import Cart, CartRegistry
from theatre.services.seat_map import generate_seats

logger = logging.getLogger(__name__)


class BookingError(Exception):
    """The booking could not be persisted."""


class EmptySelectionError(BookingError):
    pass


class SeatUnavailableError(BookingError):
    def __init__(self, seat_ids: List[str]):
        self.seat_ids = seat_ids
        super().__init__(f"Seats no longer available: {', '.join(seat_ids)}")


class BookingService:
    def __init__(
        self,
        store: Store,
        activity: ActivityLog,
        carts: Optional[CartRegistry] = None,
        rng: Optional[random.Random] = None,
        availability: float = config.SEAT_AVAILABILITY,
    ):
        self.store = store
        self.activity = activity
        self.carts = carts or CartRegistry()
        self.rng = rng or random.Random()
        self.availability = availability

    async def booked_seat_ids(self, show_id: str) -> Set[str]:
        rows = await self.store.select(BOOKINGS, {"show_id": show_id, "status": BookingStatus.CONFIRMED.value})
        return {seat_id for row in rows for seat_id in row["seats"]}

    async def open_cart(self, user_id: str, show: Optional[Show]) -> Optional[Cart]:
        """Generate a fresh seat map for ``show`` and open it as the user's cart."""
        if show is None:
            return None
        seats = generate_seats(show, self.rng, self.availability, await self.booked_seat_ids(show.id))
        return self.carts.open(user_id, show.id, seats)

    async def confirm_booking(self, show: Show, user: User, cart: Cart) -> Booking:
        """
        Persist the cart as a confirmed booking, then mark its seats taken and
        empty the cart. Nothing is written when the seat selection is empty.
        """
        if cart.is_empty:
            raise EmptySelectionError("Select at least one seat before confirming")

        seat_ids = [seat.id for seat in cart.selected_seats]
        taken = sorted((await self.booked_seat_ids(show.id)).intersection(seat_ids))
        if taken:
            cart.mark_booked(taken)
            for seat_id in taken:
                cart.deselect_seat(seat_id)
            raise SeatUnavailableError(taken)

        booking = Booking(
            id=str(uuid.uuid4()),
            show_id=show.id,
            user_id=user.id,
            seats=seat_ids,
            items=cart.items,
            total_amount=cart.total_amount,
            booking_date=utc_now(),
            status=BookingStatus.CONFIRMED,
        )
        try:
            await self.store.insert(BOOKINGS, booking.model_dump(mode="json"))
        except StoreError as exc:
            raise BookingError("Booking could not be saved, please try again") from exc

        cart.mark_booked(seat_ids)
        cart.clear()
        logger.info(
            "Booked %d seats for %s", len(seat_ids), show.title,
            extra={"user_id": user.id, "show_id": show.id, "booking_id": booking.id},
        )

        await self.activity.log(
            user.id,
            ActivityType.BOOKING,
            f"Booked {len(seat_ids)} seat(s) for {show.title}",
            {"booking_id": booking.id, "show_id": show.id, "seats": seat_ids, "total_amount": booking.total_amount},
        )
        return booking

    async def list_bookings(self, user_id: str) -> List[Booking]:
        rows = await self.store.select(BOOKINGS, {"user_id": user_id}, order_by="booking_date", descending=True)
        return [Booking.model_validate(row) for row in rows]
