# theatre/state.py
import random
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from theatre import config
from theatre.database import Store
from theatre.services.activity import ActivityLog
from theatre.services.admin import AdminService
from theatre.services.auth import AuthService
from theatre.services.booking import BookingService
from theatre.services.catalog import ShowCatalog
from theatre.services.reviews import ReviewFeed
from theatre.services.websocket_manager import ReviewBroadcaster


@dataclass
class AppState:
    """Services shared by every request, stored on ``app.state.theatre``."""
    store: Store
    activity: ActivityLog
    catalog: ShowCatalog
    auth: AuthService
    bookings: BookingService
    reviews: ReviewFeed
    admin: AdminService
    broadcaster: ReviewBroadcaster

    @classmethod
    def build(cls, database, rng: Optional[random.Random] = None,
              availability: float = config.SEAT_AVAILABILITY) -> "AppState":
        store = Store(database)
        activity = ActivityLog(store)
        catalog = ShowCatalog(store)
        auth = AuthService(store, activity)
        return cls(
            store=store,
            activity=activity,
            catalog=catalog,
            auth=auth,
            bookings=BookingService(store, activity, rng=rng, availability=availability),
            reviews=ReviewFeed(store, catalog, activity),
            admin=AdminService(store, auth, activity),
            broadcaster=ReviewBroadcaster(),
        )

    async def start(self, seed_catalog: bool = config.SEED_CATALOG) -> None:
        if seed_catalog:
            await self.catalog.seed_defaults()
        await self.reviews.start()
        self.broadcaster.attach(self.store.feed)

    def stop(self) -> None:
        self.broadcaster.detach()
        self.broadcaster.close()
        self.reviews.stop()


def get_state(request: Request) -> AppState:
    return request.app.state.theatre
