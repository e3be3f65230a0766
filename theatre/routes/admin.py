# theatre/routes/admin.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from theatre.models.activity import Message, MessageCreate, UserActivity
from theatre.models.dashboard import BookingRecord, DashboardStats
from theatre.models.show import Show, ShowCreate
from theatre.models.user import AdminUserCreate, User
from theatre.services.auth import AuthError
from theatre.state import AppState, get_state
from theatre.utils.auth_utils import admin_required

router = APIRouter()


class UserListing(BaseModel):
    users: List[User]
    total: int
    active: int
    inactive: int


@router.get("/users", response_model=UserListing)
async def list_users(admin: User = Depends(admin_required), state: AppState = Depends(get_state)):
    users = await state.admin.list_users()
    counts = await state.admin.user_counts()
    return UserListing(users=users, **counts)


@router.post("/users", response_model=User, status_code=status.HTTP_201_CREATED)
async def create_user(new_user: AdminUserCreate, admin: User = Depends(admin_required),
                      state: AppState = Depends(get_state)):
    try:
        return await state.admin.create_user(admin, new_user)
    except AuthError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: str, admin: User = Depends(admin_required), state: AppState = Depends(get_state)):
    if not await state.admin.delete_user(admin, user_id):
        raise HTTPException(status_code=404, detail="User not found")


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(admin: User = Depends(admin_required), state: AppState = Depends(get_state)):
    return await state.admin.dashboard_stats()


@router.get("/bookings", response_model=List[BookingRecord])
async def recent_bookings(limit: int = 10, admin: User = Depends(admin_required),
                          state: AppState = Depends(get_state)):
    return await state.admin.recent_bookings(limit=limit)


@router.get("/activity", response_model=List[UserActivity])
async def recent_activity(limit: int = 50, admin: User = Depends(admin_required),
                          state: AppState = Depends(get_state)):
    return await state.activity.recent(limit=limit)


@router.post("/messages", response_model=Message, status_code=status.HTTP_201_CREATED)
async def send_message(message: MessageCreate, admin: User = Depends(admin_required),
                       state: AppState = Depends(get_state)):
    try:
        return await state.admin.send_message(admin, message)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.post("/shows", response_model=Show, status_code=status.HTTP_201_CREATED)
async def create_show(show: ShowCreate, admin: User = Depends(admin_required), state: AppState = Depends(get_state)):
    return await state.catalog.create_show(show)
