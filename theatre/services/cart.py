# theatre/services/cart.py
import logging
from typing import Dict, Iterable, List, Optional

from theatre.models.booking import CartView
from theatre.models.item import CartItem, ConcessionItem
from theatre.models.show import Seat
from theatre.utils.pricing import items_subtotal, price_breakdown, seats_subtotal

logger = logging.getLogger(__name__)


class Cart:
    """
    Seat and concession-item selections for one show.

    A cart owns the seat map generated for the show it was opened on; loading a
    new seat map discards any previous seat selection.
    """

    def __init__(self, show_id: str, seats: Iterable[Seat] = ()):
        self.show_id = show_id
        self._seats: Dict[str, Seat] = {}
        self._selected: List[str] = []
        self._items: Dict[str, CartItem] = {}
        self.load_seats(seats)

    def load_seats(self, seats: Iterable[Seat]) -> None:
        """Replace the seat map and reset the seat selection."""
        self._seats = {seat.id: seat.model_copy(update={"is_selected": False}) for seat in seats}
        self._selected = []

    @property
    def seats(self) -> List[Seat]:
        return list(self._seats.values())

    @property
    def selected_seats(self) -> List[Seat]:
        return [self._seats[seat_id] for seat_id in self._selected]

    @property
    def items(self) -> List[CartItem]:
        return list(self._items.values())

    def get_seat(self, seat_id: str) -> Optional[Seat]:
        return self._seats.get(seat_id)

    def select_seat(self, seat_id: str) -> bool:
        """Select an available seat. Unknown or unavailable seats are ignored."""
        seat = self._seats.get(seat_id)
        if seat is None or not seat.is_available:
            return False
        if seat_id not in self._selected:
            seat.is_selected = True
            self._selected.append(seat_id)
        return True

    def deselect_seat(self, seat_id: str) -> bool:
        if seat_id not in self._selected:
            return False
        self._selected.remove(seat_id)
        self._seats[seat_id].is_selected = False
        return True

    def set_item_quantity(self, item: ConcessionItem, quantity: int) -> None:
        """Upsert an item line; a quantity of zero removes it."""
        if quantity < 0:
            raise ValueError("quantity must not be negative")
        if quantity == 0:
            self._items.pop(item.id, None)
            return
        self._items[item.id] = CartItem(**item.model_dump(), quantity=quantity)

    def mark_booked(self, seat_ids: Iterable[str]) -> None:
        for seat_id in seat_ids:
            seat = self._seats.get(seat_id)
            if seat is not None:
                seat.is_available = False
                seat.is_selected = False

    def clear(self) -> None:
        for seat_id in self._selected:
            self._seats[seat_id].is_selected = False
        self._selected = []
        self._items = {}

    @property
    def is_empty(self) -> bool:
        return not self._selected

    @property
    def seats_total(self) -> float:
        return seats_subtotal(self.selected_seats)

    @property
    def items_total(self) -> float:
        return items_subtotal(self.items)

    @property
    def total_amount(self) -> float:
        return self.seats_total + self.items_total

    def view(self) -> CartView:
        seats = self.selected_seats
        items = self.items
        totals = price_breakdown(seats, items)
        return CartView(
            show_id=self.show_id,
            seats=seats,
            items=items,
            seats_total=totals["seats_total"],
            items_total=totals["items_total"],
            total_amount=totals["total_amount"],
        )


class CartRegistry:
    """One open cart per user."""

    def __init__(self):
        self._carts: Dict[str, Cart] = {}

    def open(self, user_id: str, show_id: str, seats: Iterable[Seat]) -> Cart:
        cart = Cart(show_id, seats)
        self._carts[user_id] = cart
        logger.debug("Opened cart for show %s", show_id, extra={"user_id": user_id, "show_id": show_id})
        return cart

    def get(self, user_id: str, show_id: Optional[str] = None) -> Optional[Cart]:
        cart = self._carts.get(user_id)
        if cart is None or (show_id is not None and cart.show_id != show_id):
            return None
        return cart

    def discard(self, user_id: str) -> None:
        self._carts.pop(user_id, None)
