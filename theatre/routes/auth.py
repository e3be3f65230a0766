# theatre/routes/auth.py
from fastapi import APIRouter, Depends, HTTPException, status

from theatre.models.user import LoginRequest, Token, User, UserCreate
from theatre.services.auth import AuthError
from theatre.state import AppState, get_state
from theatre.utils.auth_utils import get_bearer_token, get_current_user

router = APIRouter()


@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
async def register(user: UserCreate, state: AppState = Depends(get_state)):
    try:
        return await state.auth.sign_up(user)
    except AuthError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.post("/login", response_model=Token)
async def login(credentials: LoginRequest, state: AppState = Depends(get_state)):
    try:
        return await state.auth.sign_in(credentials.email, credentials.password)
    except AuthError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    user: User = Depends(get_current_user),
    token: str = Depends(get_bearer_token),
    state: AppState = Depends(get_state),
):
    await state.auth.sign_out(user, token)
    state.bookings.carts.discard(user.id)


@router.get("/me", response_model=User)
async def me(user: User = Depends(get_current_user)):
    return user
