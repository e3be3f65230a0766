# theatre/services/seat_map.py
import random
from collections import namedtuple
from typing import Collection, List, Optional

from theatre import config
from theatre.models.show import SeatTier, Seat, Show

# Every show uses the same auditorium; a tier owns a block of rows of equal length
TierLayout = namedtuple("TierLayout", ["tier", "rows", "seats_per_row"])

SEAT_LAYOUT = (
    TierLayout(SeatTier.VIP, ("A", "B"), 10),
    TierLayout(SeatTier.PREMIUM, ("C", "D", "E"), 12),
    TierLayout(SeatTier.REGULAR, ("F", "G", "H", "I", "J"), 14),
)

LAYOUT_SEAT_COUNT = sum(len(layout.rows) * layout.seats_per_row for layout in SEAT_LAYOUT)


def tier_for_row(row: str) -> Optional[SeatTier]:
    for layout in SEAT_LAYOUT:
        if row in layout.rows:
            return layout.tier
    return None


def generate_seats(
    show: Optional[Show],
    rng: Optional[random.Random] = None,
    availability: float = config.SEAT_AVAILABILITY,
    booked: Collection[str] = (),
) -> List[Seat]:
    """Build the full seat inventory for ``show``.

    An unknown show (``None``) yields an empty list. Seats listed in
    ``booked`` are never available; every other seat is available with
    probability ``availability``.
    """
    if show is None:
        return []

    rng = rng or random.Random()
    seats = []
    for layout in SEAT_LAYOUT:
        price = show.price.for_tier(layout.tier)
        for row in layout.rows:
            for number in range(1, layout.seats_per_row + 1):
                seat_id = f"{row}{number}"
                # Always draw so a seeded rng gives the same layout regardless of bookings
                drawn = rng.random() < availability
                seats.append(Seat(
                    id=seat_id,
                    row=row,
                    number=number,
                    tier=layout.tier,
                    price=price,
                    is_available=drawn and seat_id not in booked,
                ))
    return seats
