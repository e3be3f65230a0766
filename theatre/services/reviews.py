# theatre/services/reviews.py
import logging
from typing import Dict, List, Optional

from theatre.database import REVIEWS, Store, ensure_utc
from theatre.models.activity import ActivityType
from theatre.models.review import RatingBucket, Review, ReviewCreate, ReviewSummary
from theatre.models.user import User
from theatre.services.activity import ActivityLog
from theatre.services.catalog import ShowCatalog
from theatre.services.change_feed import INSERT, ChangeEvent, Subscription

logger = logging.getLogger(__name__)

SORT_ORDERS = ("newest", "oldest", "rating")


class ReviewError(Exception):
    pass


class ReviewFeed:
    """
    Every review held in memory, loaded once at startup and then kept current
    by merging each ``reviews`` insert published on the change feed. A new
    review never triggers a full reload.
    """

    def __init__(self, store: Store, catalog: ShowCatalog, activity: ActivityLog):
        self.store = store
        self.catalog = catalog
        self.activity = activity
        self._reviews: Dict[str, Review] = {}
        self._subscription: Optional[Subscription] = None

    async def start(self) -> None:
        rows = await self.store.select(REVIEWS)
        self._reviews = {row["id"]: Review.model_validate(row) for row in rows}
        if self._subscription is None:
            self._subscription = self.store.feed.subscribe(REVIEWS, self._on_change)
        logger.info("Loaded %d reviews", len(self._reviews))

    def stop(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    async def _on_change(self, event: ChangeEvent) -> None:
        if event.event != INSERT:
            return
        review = Review.model_validate(event.row)
        self._reviews[review.id] = review

    def list_reviews(self, show_id: Optional[str] = None, sort: str = "newest") -> List[Review]:
        if sort not in SORT_ORDERS:
            raise ReviewError(f"sort must be one of {', '.join(SORT_ORDERS)}")

        reviews = [r for r in self._reviews.values() if show_id is None or r.show_id == show_id]
        by_date = lambda r: ensure_utc(r.created_at)
        if sort == "rating":
            # Highest rating first, newest first within a rating
            reviews.sort(key=by_date, reverse=True)
            reviews.sort(key=lambda r: r.rating, reverse=True)
        else:
            reviews.sort(key=by_date, reverse=(sort == "newest"))
        return reviews

    def summary(self, show_id: Optional[str] = None) -> ReviewSummary:
        reviews = self.list_reviews(show_id)
        count = len(reviews)
        distribution = {}
        for rating in range(5, 0, -1):
            matching = sum(1 for r in reviews if r.rating == rating)
            distribution[rating] = RatingBucket(
                count=matching,
                percentage=round(matching / count * 100, 1) if count else 0.0,
            )
        average = round(sum(r.rating for r in reviews) / count, 2) if count else 0.0
        return ReviewSummary(count=count, average_rating=average, distribution=distribution)

    async def submit(self, user: User, review: ReviewCreate) -> Review:
        show = await self.catalog.get_show(review.show_id)
        if show is None:
            raise ReviewError("Show not found")

        row = await self.store.insert(REVIEWS, {
            **review.model_dump(),
            "user_id": user.id,
            "user_name": user.name,
            "show_title": show.title,
        })
        logger.info("New %d-star review", review.rating, extra={"user_id": user.id, "show_id": show.id})

        await self.activity.log(
            user.id,
            ActivityType.REVIEW,
            f"Left a {review.rating}-star review",
            {"show_id": show.id, "rating": review.rating},
        )
        return Review.model_validate(row)
