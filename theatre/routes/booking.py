# theatre/routes/booking.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from theatre.database import StoreError
from theatre.models.booking import Booking, CartView
from theatre.models.item import ItemQuantityRequest
from theatre.models.show import Seat
from theatre.models.user import User
from theatre.services.booking import BookingError, EmptySelectionError, SeatUnavailableError
from theatre.services.cart import Cart
from theatre.state import AppState, get_state
from theatre.utils.auth_utils import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


def open_cart_for(show_id: str, user: User, state: AppState) -> Cart:
    cart = state.bookings.carts.get(user.id, show_id)
    if cart is None:
        raise HTTPException(status_code=409, detail="Load the seat map for this show first")
    return cart


@router.get("/{show_id}/seats", response_model=List[Seat])
async def load_seat_map(show_id: str, user: User = Depends(get_current_user), state: AppState = Depends(get_state)):
    """Generate a fresh seat map for the show; any previous selection is dropped."""
    show = await state.catalog.get_show(show_id)
    cart = await state.bookings.open_cart(user.id, show)
    if cart is None:
        return []
    return cart.seats


@router.post("/{show_id}/seats/{seat_id}", response_model=CartView)
async def select_seat(show_id: str, seat_id: str, user: User = Depends(get_current_user),
                      state: AppState = Depends(get_state)):
    cart = open_cart_for(show_id, user, state)
    cart.select_seat(seat_id)
    return cart.view()


@router.delete("/{show_id}/seats/{seat_id}", response_model=CartView)
async def deselect_seat(show_id: str, seat_id: str, user: User = Depends(get_current_user),
                        state: AppState = Depends(get_state)):
    cart = open_cart_for(show_id, user, state)
    cart.deselect_seat(seat_id)
    return cart.view()


@router.put("/{show_id}/items/{item_id}", response_model=CartView)
async def set_item_quantity(show_id: str, item_id: str, request: ItemQuantityRequest,
                            user: User = Depends(get_current_user), state: AppState = Depends(get_state)):
    cart = open_cart_for(show_id, user, state)
    item = state.catalog.get_item(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Item not found")
    try:
        cart.set_item_quantity(item, request.quantity)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return cart.view()


@router.get("/{show_id}/cart", response_model=CartView)
async def get_cart(show_id: str, user: User = Depends(get_current_user), state: AppState = Depends(get_state)):
    return open_cart_for(show_id, user, state).view()


@router.post("/{show_id}/confirm", response_model=Booking)
async def confirm_booking(show_id: str, user: User = Depends(get_current_user), state: AppState = Depends(get_state)):
    show = await state.catalog.get_show(show_id)
    if not show:
        raise HTTPException(status_code=404, detail="Show not found")
    cart = open_cart_for(show_id, user, state)

    try:
        return await state.bookings.confirm_booking(show, user, cart)
    except EmptySelectionError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except SeatUnavailableError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except (BookingError, StoreError) as exc:
        logger.error("Booking failed: %s", exc, extra={"user_id": user.id, "show_id": show_id})
        raise HTTPException(status_code=502, detail=str(exc))
