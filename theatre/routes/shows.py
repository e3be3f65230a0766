# theatre/routes/shows.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from theatre.models.item import ConcessionItem
from theatre.models.show import Show
from theatre.state import AppState, get_state

router = APIRouter()


@router.get("", response_model=List[Show])
async def list_shows(state: AppState = Depends(get_state)):
    return await state.catalog.list_shows()


@router.get("/items/catalog", response_model=List[ConcessionItem])
async def list_items(state: AppState = Depends(get_state)):
    """Concession items that can be added to any booking."""
    return state.catalog.list_items()


@router.get("/{show_id}", response_model=Show)
async def get_show(show_id: str, state: AppState = Depends(get_state)):
    show = await state.catalog.get_show(show_id)
    if not show:
        raise HTTPException(status_code=404, detail="Show not found")
    return show
