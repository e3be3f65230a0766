import pytest

from theatre.database import REVIEWS, SHOWS
from theatre.services.change_feed import INSERT, UPDATE, ChangeEvent, ChangeFeed


@pytest.mark.asyncio
async def test_listeners_receive_events_for_their_table():
    feed = ChangeFeed()
    received = []

    async def listener(event):
        received.append(event)

    feed.subscribe(REVIEWS, listener)
    await feed.publish(ChangeEvent(REVIEWS, INSERT, {"id": "r1"}))
    await feed.publish(ChangeEvent(SHOWS, INSERT, {"id": "s1"}))

    assert [event.row["id"] for event in received] == ["r1"]


@pytest.mark.asyncio
async def test_unsubscribe_stops_delivery():
    feed = ChangeFeed()
    received = []

    async def listener(event):
        received.append(event)

    subscription = feed.subscribe(REVIEWS, listener)
    subscription.unsubscribe()
    subscription.unsubscribe()
    await feed.publish(ChangeEvent(REVIEWS, INSERT, {"id": "r1"}))

    assert received == []
    assert feed.subscriber_count(REVIEWS) == 0


@pytest.mark.asyncio
async def test_failing_listener_does_not_block_others():
    feed = ChangeFeed()
    received = []

    async def broken(event):
        raise RuntimeError("boom")

    async def listener(event):
        received.append(event)

    feed.subscribe(REVIEWS, broken)
    feed.subscribe(REVIEWS, listener)
    await feed.publish(ChangeEvent(REVIEWS, INSERT, {"id": "r1"}))

    assert len(received) == 1


@pytest.mark.asyncio
async def test_store_publishes_inserts_and_updates(store):
    events = []

    async def listener(event):
        events.append((event.event, event.row))

    store.feed.subscribe(SHOWS, listener)
    row = await store.insert(SHOWS, {"title": "Draft"})
    matched = await store.update(SHOWS, {"id": row["id"]}, {"title": "Final"})
    missed = await store.update(SHOWS, {"id": "missing"}, {"title": "Nope"})

    assert matched == 1
    assert missed == 0
    assert [kind for kind, _ in events] == [INSERT, UPDATE]
    assert events[0][1]["id"] == row["id"]
    assert "_id" not in events[0][1]
    assert (await store.select_one(SHOWS, {"id": row["id"]}))["title"] == "Final"


@pytest.mark.asyncio
async def test_update_matching_nothing_publishes_nothing(store):
    events = []

    async def listener(event):
        events.append(event)

    store.feed.subscribe(SHOWS, listener)
    assert await store.update(SHOWS, {"id": "missing"}, {"title": "Nope"}) == 0
    assert events == []

    row = await store.insert(SHOWS, {"title": "Draft"})
    await store.update(SHOWS, {"id": row["id"]}, {"title": "Final"})
    assert [(event.event, event.row["title"]) for event in events] == [(INSERT, "Draft"), (UPDATE, "Final")]
    assert events[1].row["id"] == row["id"]
    assert "updated_at" in events[1].row


@pytest.mark.asyncio
async def test_failing_listener_leaves_writes_intact(store):
    async def broken(event):
        raise RuntimeError("listener crashed")

    store.feed.subscribe(SHOWS, broken)

    row = await store.insert(SHOWS, {"title": "Draft"})
    assert (await store.select_one(SHOWS, {"id": row["id"]}))["title"] == "Draft"

    assert await store.update(SHOWS, {"id": row["id"]}, {"title": "Final"}) == 1
    assert (await store.select_one(SHOWS, {"id": row["id"]}))["title"] == "Final"
    assert await store.count(SHOWS, {"title": "Final"}) == 1


@pytest.mark.asyncio
async def test_unknown_table_is_rejected(store):
    with pytest.raises(ValueError):
        await store.select("tickets")
