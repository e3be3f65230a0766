# theatre/utils/pricing.py
from typing import Any, Dict, Iterable

from theatre.models.item import CartItem
from theatre.models.show import Seat


def seats_subtotal(seats: Iterable[Seat]) -> float:
    return sum(seat.price for seat in seats)


def items_subtotal(items: Iterable[CartItem]) -> float:
    return sum(item.price * item.quantity for item in items)


def price_breakdown(seats: Iterable[Seat], items: Iterable[CartItem]) -> Dict[str, Any]:
    """
    Calculate the amounts shown at checkout for the selected seats and items.
    """
    seats = list(seats)
    items = list(items)
    seats_total = seats_subtotal(seats)
    items_total = items_subtotal(items)

    return {
        "seat_count": len(seats),
        "item_count": sum(item.quantity for item in items),
        "seats_total": seats_total,
        "items_total": items_total,
        "total_amount": seats_total + items_total,
    }
