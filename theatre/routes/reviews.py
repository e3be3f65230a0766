# theatre/routes/reviews.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status

from theatre.models.review import Review, ReviewCreate, ReviewSummary
from theatre.models.user import User
from theatre.services.reviews import ReviewError
from theatre.state import AppState, get_state
from theatre.utils.auth_utils import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[Review])
async def list_reviews(show_id: Optional[str] = None, sort: str = "newest", state: AppState = Depends(get_state)):
    try:
        return state.reviews.list_reviews(show_id, sort)
    except ReviewError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.get("/summary", response_model=ReviewSummary)
async def review_summary(show_id: Optional[str] = None, state: AppState = Depends(get_state)):
    return state.reviews.summary(show_id)


@router.post("", response_model=Review, status_code=status.HTTP_201_CREATED)
async def submit_review(review: ReviewCreate, user: User = Depends(get_current_user),
                        state: AppState = Depends(get_state)):
    try:
        return await state.reviews.submit(user, review)
    except ReviewError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.websocket("/live")
async def live_reviews(websocket: WebSocket):
    """Push every new review to the connected client."""
    broadcaster = websocket.app.state.theatre.broadcaster
    await broadcaster.connect(websocket)
    await broadcaster.send(websocket, {"type": "connected", "message": "Listening for new reviews"})
    try:
        while True:
            # Clients only listen; reading keeps the disconnect observable
            await websocket.receive_text()
    except WebSocketDisconnect:
        broadcaster.disconnect(websocket)
