# theatre/services/catalog.py
import logging
import uuid
from typing import Dict, List, Optional

from theatre.database import SHOWS, Store
from theatre.models.item import ConcessionItem
from theatre.models.show import Show, ShowCreate

logger = logging.getLogger(__name__)

DEFAULT_SHOWS = [
    Show(
        id="1",
        title="The Pearl of Africa",
        date="2025-02-15",
        time="19:30",
        venue="Main Theatre",
        duration="2h 30min",
        genre="Cultural Drama",
        description="A captivating story celebrating Uganda's rich cultural heritage and the resilience of its people.",
        image="https://images.pexels.com/photos/713149/pexels-photo-713149.jpeg",
        price={"vip": 50000, "premium": 35000, "regular": 20000},
    ),
    Show(
        id="2",
        title="Kampala Nights",
        date="2025-02-20",
        time="20:00",
        venue="Studio Theatre",
        duration="1h 45min",
        genre="Musical Comedy",
        description="A hilarious musical comedy about life in Uganda's bustling capital city.",
        image="https://images.pexels.com/photos/1190297/pexels-photo-1190297.jpeg",
        price={"vip": 40000, "premium": 28000, "regular": 15000},
    ),
    Show(
        id="3",
        title="Ancestral Spirits",
        date="2025-02-25",
        time="18:00",
        venue="Outdoor Stage",
        duration="2h 15min",
        genre="Traditional Dance",
        description="An enchanting performance showcasing traditional Ugandan dances and spiritual ceremonies.",
        image="https://images.pexels.com/photos/1387174/pexels-photo-1387174.jpeg",
        price={"vip": 45000, "premium": 30000, "regular": 18000},
    ),
]

CONCESSION_ITEMS = [
    ConcessionItem(id="popcorn", name="Popcorn", price=8000, category="food",
                   description="Freshly popped, salted or sweet."),
    ConcessionItem(id="soda", name="Soft Drink", price=5000, category="food",
                   description="Chilled 500ml soda."),
    ConcessionItem(id="rolex", name="Rolex Wrap", price=7000, category="food",
                   description="Chapati rolled with eggs and vegetables."),
    ConcessionItem(id="tshirt", name="Show T-Shirt", price=35000, category="merchandise",
                   description="Cotton t-shirt with the production artwork."),
    ConcessionItem(id="program", name="Souvenir Program", price=10000, category="program",
                   description="Cast biographies and behind-the-scenes photos."),
]


class ShowCatalog:
    """Shows come from the store; concession items are a fixed menu."""

    def __init__(self, store: Store, items: Optional[List[ConcessionItem]] = None):
        self.store = store
        self._items: Dict[str, ConcessionItem] = {item.id: item for item in (items or CONCESSION_ITEMS)}

    async def seed_defaults(self) -> int:
        if await self.store.count(SHOWS):
            return 0
        for show in DEFAULT_SHOWS:
            await self.store.insert(SHOWS, show.to_row())
        logger.info("Seeded %d default shows", len(DEFAULT_SHOWS))
        return len(DEFAULT_SHOWS)

    async def list_shows(self) -> List[Show]:
        rows = await self.store.select(SHOWS, order_by="date")
        return [Show.from_row(row) for row in rows]

    async def get_show(self, show_id: str) -> Optional[Show]:
        row = await self.store.select_one(SHOWS, {"id": show_id})
        return Show.from_row(row) if row else None

    async def create_show(self, show: ShowCreate) -> Show:
        new_show = Show(id=str(uuid.uuid4()), **show.model_dump())
        await self.store.insert(SHOWS, new_show.to_row())
        logger.info("Created show %s", new_show.title, extra={"show_id": new_show.id})
        return new_show

    def list_items(self) -> List[ConcessionItem]:
        return list(self._items.values())

    def get_item(self, item_id: str) -> Optional[ConcessionItem]:
        return self._items.get(item_id)
