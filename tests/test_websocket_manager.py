import asyncio
import time

import pytest

from theatre.database import REVIEWS
from theatre.models.review import ReviewCreate
from theatre.services.change_feed import INSERT, UPDATE, ChangeEvent, ChangeFeed
from theatre.services.websocket_manager import ReviewBroadcaster


class FakeWebSocket:
    def __init__(self, fail=False, delay=0.0):
        self.accepted = False
        self.sent = []
        self.fail = fail
        self.delay = delay

    async def accept(self):
        self.accepted = True

    async def send_json(self, message):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(message)


@pytest.mark.asyncio
async def test_new_reviews_are_pushed_to_listeners():
    feed = ChangeFeed()
    broadcaster = ReviewBroadcaster()
    broadcaster.attach(feed)
    socket = FakeWebSocket()
    await broadcaster.connect(socket)

    await feed.publish(ChangeEvent(REVIEWS, INSERT, {"id": "r1", "rating": 5}))
    await feed.publish(ChangeEvent(REVIEWS, UPDATE, {"id": "r1"}))
    await broadcaster.flush()

    assert socket.accepted
    assert socket.sent == [{"type": "review_created", "review": {"id": "r1", "rating": 5}}]
    broadcaster.close()


@pytest.mark.asyncio
async def test_broken_listener_is_dropped():
    broadcaster = ReviewBroadcaster()
    healthy, broken = FakeWebSocket(), FakeWebSocket(fail=True)
    await broadcaster.connect(healthy)
    await broadcaster.connect(broken)

    await broadcaster.broadcast({"type": "ping"})
    await broadcaster.flush()

    assert healthy.sent == [{"type": "ping"}]
    assert broadcaster.active_connections == [healthy]
    broadcaster.close()


@pytest.mark.asyncio
async def test_detach_stops_pushes():
    feed = ChangeFeed()
    broadcaster = ReviewBroadcaster()
    broadcaster.attach(feed)
    broadcaster.detach()
    socket = FakeWebSocket()
    await broadcaster.connect(socket)

    await feed.publish(ChangeEvent(REVIEWS, INSERT, {"id": "r1"}))
    await broadcaster.flush()
    assert socket.sent == []
    broadcaster.close()


@pytest.mark.asyncio
async def test_slow_listener_does_not_hold_up_review_submission(store, review_feed, user):
    broadcaster = ReviewBroadcaster()
    broadcaster.attach(store.feed)
    slow, fast = FakeWebSocket(delay=1.5), FakeWebSocket()
    await broadcaster.connect(slow)
    await broadcaster.connect(fast)

    started = time.monotonic()
    review = await review_feed.submit(user, ReviewCreate(show_id="2", rating=5, comment="Brilliant"))
    assert time.monotonic() - started < 0.5

    await asyncio.sleep(0.05)
    assert [message["review"]["id"] for message in fast.sent] == [review.id]
    assert slow.sent == []

    broadcaster.detach()
    broadcaster.close()


@pytest.mark.asyncio
async def test_listener_that_falls_too_far_behind_is_dropped():
    broadcaster = ReviewBroadcaster(backlog=1)
    lagging = FakeWebSocket(delay=1.0)
    await broadcaster.connect(lagging)

    # Nothing yields between these, so the writer never gets to drain
    await broadcaster.broadcast({"type": "ping", "n": 1})
    await broadcaster.broadcast({"type": "ping", "n": 2})

    assert broadcaster.active_connections == []
    broadcaster.close()


@pytest.mark.asyncio
async def test_disconnect_cancels_writer():
    broadcaster = ReviewBroadcaster()
    socket = FakeWebSocket(delay=1.0)
    await broadcaster.connect(socket)
    await broadcaster.broadcast({"type": "ping"})

    broadcaster.disconnect(socket)
    await asyncio.wait_for(broadcaster.flush(), timeout=0.5)

    assert broadcaster.active_connections == []
    assert socket.sent == []
