# theatre/routes/profile.py
from typing import List

from fastapi import APIRouter, Depends, status

from theatre.models.activity import UserActivity
from theatre.models.booking import Booking
from theatre.models.user import ProfileUpdate, User
from theatre.state import AppState, get_state
from theatre.utils.auth_utils import get_current_user

router = APIRouter()


@router.get("", response_model=User)
async def get_profile(user: User = Depends(get_current_user)):
    return user


@router.patch("", response_model=User)
async def update_profile(changes: ProfileUpdate, user: User = Depends(get_current_user),
                         state: AppState = Depends(get_state)):
    return await state.auth.update_profile(user, changes)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(user: User = Depends(get_current_user), state: AppState = Depends(get_state)):
    """Deactivate the account; bookings and reviews are kept."""
    await state.auth.deactivate(user.id)
    state.bookings.carts.discard(user.id)


@router.get("/bookings", response_model=List[Booking])
async def booking_history(user: User = Depends(get_current_user), state: AppState = Depends(get_state)):
    return await state.bookings.list_bookings(user.id)


@router.get("/activity", response_model=List[UserActivity])
async def my_activity(limit: int = 20, user: User = Depends(get_current_user), state: AppState = Depends(get_state)):
    return await state.activity.recent(limit=limit, user_id=user.id)
