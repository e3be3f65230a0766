# theatre/services/change_feed.py
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List

logger = logging.getLogger(__name__)

INSERT = "INSERT"
UPDATE = "UPDATE"


@dataclass
class ChangeEvent:
    table: str
    event: str
    row: Dict[str, Any] = field(default_factory=dict)


Listener = Callable[[ChangeEvent], Awaitable[None]]


class Subscription:
    def __init__(self, feed: "ChangeFeed", table: str, listener: Listener):
        self._feed = feed
        self.table = table
        self.listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._feed._remove(self)
            self.active = False


class ChangeFeed:
    """
    In-process change notifications for store writes.

    The store publishes one ``ChangeEvent`` after every successful insert or
    update. Components that keep a live view of a table subscribe to it
    instead of polling.
    """

    def __init__(self):
        self._subscriptions: Dict[str, List[Subscription]] = {}

    def subscribe(self, table: str, listener: Listener) -> Subscription:
        subscription = Subscription(self, table, listener)
        self._subscriptions.setdefault(table, []).append(subscription)
        logger.debug("Subscribed listener to %s changes", table)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        listeners = self._subscriptions.get(subscription.table, [])
        if subscription in listeners:
            listeners.remove(subscription)

    def subscriber_count(self, table: str) -> int:
        return len(self._subscriptions.get(table, []))

    async def publish(self, event: ChangeEvent) -> None:
        # Copy: a listener may unsubscribe while we iterate
        for subscription in list(self._subscriptions.get(event.table, [])):
            try:
                await subscription.listener(event)
            except Exception:
                logger.exception("Change listener failed for %s %s", event.event, event.table)
