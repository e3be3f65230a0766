import random

import pytest

from theatre.models.item import ConcessionItem
from theatre.services.cart import Cart, CartRegistry
from theatre.services.seat_map import generate_seats

POPCORN = ConcessionItem(id="popcorn", name="Popcorn", price=8000, category="food")
PROGRAM = ConcessionItem(id="program", name="Souvenir Program", price=10000, category="program")


@pytest.fixture
def cart(kampala_nights):
    seats = generate_seats(kampala_nights, random.Random(0), availability=1.0)
    return Cart(kampala_nights.id, seats)


def test_kampala_nights_example_totals(cart):
    assert cart.select_seat("F1")   # regular
    assert cart.select_seat("A1")   # vip
    assert cart.seats_total == 55000

    cart.set_item_quantity(POPCORN, 2)
    assert cart.items_total == 16000
    assert cart.total_amount == 71000


def test_removing_seat_reduces_total_by_its_price(cart):
    cart.select_seat("A1")
    cart.select_seat("C4")
    cart.set_item_quantity(PROGRAM, 1)
    before = cart.total_amount

    assert cart.deselect_seat("C4")
    assert before - cart.total_amount == 28000
    assert [seat.id for seat in cart.selected_seats] == ["A1"]
    assert cart.get_seat("C4").is_selected is False
    assert cart.get_seat("C4").is_available is True


def test_unavailable_seat_cannot_be_selected(kampala_nights):
    seats = generate_seats(kampala_nights, random.Random(0), availability=1.0, booked={"A1"})
    cart = Cart(kampala_nights.id, seats)
    cart.select_seat("B2")

    assert cart.select_seat("A1") is False
    assert [seat.id for seat in cart.selected_seats] == ["B2"]
    assert cart.get_seat("A1").is_selected is False


def test_unknown_seat_is_ignored(cart):
    assert cart.select_seat("Z99") is False
    assert cart.deselect_seat("Z99") is False
    assert cart.is_empty


def test_selecting_twice_keeps_one_entry(cart):
    cart.select_seat("D3")
    cart.select_seat("D3")
    assert len(cart.selected_seats) == 1
    assert cart.seats_total == 28000


def test_item_quantity_is_an_upsert_removed_at_zero(cart):
    cart.set_item_quantity(POPCORN, 1)
    cart.set_item_quantity(POPCORN, 3)
    assert [(item.id, item.quantity) for item in cart.items] == [("popcorn", 3)]
    assert cart.items_total == 24000

    cart.set_item_quantity(POPCORN, 0)
    assert cart.items == []
    assert cart.items_total == 0

    # Removing an item that is not in the cart is harmless
    cart.set_item_quantity(PROGRAM, 0)
    assert cart.items == []


def test_negative_quantity_rejected(cart):
    with pytest.raises(ValueError):
        cart.set_item_quantity(POPCORN, -1)


def test_loading_new_seats_resets_selection(cart, kampala_nights):
    cart.select_seat("A1")
    cart.set_item_quantity(POPCORN, 1)

    cart.load_seats(generate_seats(kampala_nights, random.Random(9), availability=1.0))
    assert cart.is_empty
    assert not any(seat.is_selected for seat in cart.seats)
    # Items are not tied to the seat map
    assert cart.items_total == 8000


def test_mark_booked_and_clear(cart):
    cart.select_seat("A1")
    cart.select_seat("A2")
    cart.set_item_quantity(POPCORN, 2)

    cart.mark_booked(["A1", "A2"])
    cart.clear()

    assert cart.is_empty
    assert cart.items == []
    assert cart.total_amount == 0
    assert cart.get_seat("A1").is_available is False
    assert cart.select_seat("A1") is False


def test_view_matches_totals(cart):
    cart.select_seat("J14")
    cart.set_item_quantity(POPCORN, 1)
    view = cart.view()
    assert view.show_id == "2"
    assert [seat.id for seat in view.seats] == ["J14"]
    assert view.seats_total == 15000
    assert view.items_total == 8000
    assert view.total_amount == 23000


def test_registry_keeps_one_cart_per_user(kampala_nights):
    registry = CartRegistry()
    seats = generate_seats(kampala_nights, random.Random(0))
    first = registry.open("u1", "2", seats)
    assert registry.get("u1") is first
    assert registry.get("u1", "2") is first
    assert registry.get("u1", "1") is None

    second = registry.open("u1", "1", seats)
    assert registry.get("u1") is second

    registry.discard("u1")
    assert registry.get("u1") is None
