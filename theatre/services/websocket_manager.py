# theatre/services/websocket_manager.py
import asyncio
import logging
from typing import List, Optional

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder

from theatre.database import REVIEWS
from theatre.services.change_feed import INSERT, ChangeEvent, ChangeFeed, Subscription

logger = logging.getLogger(__name__)

# Messages a listener may fall behind by before it is dropped
LISTENER_BACKLOG = 100


class ReviewListener:
    """One connected socket with its own outbox and writer task."""

    def __init__(self, websocket: WebSocket, backlog: int):
        self.websocket = websocket
        self.outbox: asyncio.Queue = asyncio.Queue(maxsize=backlog)
        self.writer: Optional[asyncio.Task] = None

    def drain(self) -> None:
        while not self.outbox.empty():
            self.outbox.get_nowait()
            self.outbox.task_done()


class ReviewBroadcaster:
    """
    Pushes new reviews to websocket clients.

    Broadcasting only enqueues: each socket is written by its own task, so a
    slow client never holds up the write that triggered the broadcast.
    """

    def __init__(self, backlog: int = LISTENER_BACKLOG):
        self.backlog = backlog
        self._listeners: List[ReviewListener] = []
        self._subscription: Optional[Subscription] = None

    @property
    def active_connections(self) -> List[WebSocket]:
        return [listener.websocket for listener in self._listeners]

    def attach(self, feed: ChangeFeed) -> None:
        if self._subscription is None:
            self._subscription = feed.subscribe(REVIEWS, self._on_change)

    def detach(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        listener = ReviewListener(websocket, self.backlog)
        listener.writer = asyncio.create_task(self._write(listener))
        self._listeners.append(listener)
        logger.info("Review listener connected (%d open)", len(self._listeners))

    def disconnect(self, websocket: WebSocket) -> None:
        # Starlette sockets compare as mappings, so match on identity
        for listener in list(self._listeners):
            if listener.websocket is websocket:
                self._drop(listener)
        logger.info("Review listener disconnected (%d open)", len(self._listeners))

    def _drop(self, listener: ReviewListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)
        if listener.writer is not None and listener.writer is not asyncio.current_task():
            listener.writer.cancel()
        listener.drain()

    async def _write(self, listener: ReviewListener) -> None:
        while True:
            message = await listener.outbox.get()
            try:
                await listener.websocket.send_json(message)
            except Exception as exc:
                logger.warning("Dropping review listener: %s", exc)
                self._drop(listener)
                return
            finally:
                listener.outbox.task_done()

    async def _on_change(self, event: ChangeEvent) -> None:
        if event.event == INSERT:
            await self.broadcast({"type": "review_created", "review": jsonable_encoder(event.row)})

    def _enqueue(self, listener: ReviewListener, message: dict) -> None:
        try:
            listener.outbox.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning("Dropping review listener %d messages behind", self.backlog)
            self._drop(listener)

    async def broadcast(self, message: dict) -> None:
        for listener in list(self._listeners):
            self._enqueue(listener, message)

    async def send(self, websocket: WebSocket, message: dict) -> None:
        """Queue a message for one connected socket."""
        for listener in list(self._listeners):
            if listener.websocket is websocket:
                self._enqueue(listener, message)

    async def flush(self) -> None:
        """Wait until every queued message has been handed to its socket."""
        await asyncio.gather(*(listener.outbox.join() for listener in list(self._listeners)))

    def close(self) -> None:
        for listener in list(self._listeners):
            self._drop(listener)
