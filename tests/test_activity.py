from datetime import datetime, timedelta, timezone

import pytest

from theatre.database import USER_ACTIVITY, StoreError
from theatre.models.activity import ActivityType


@pytest.mark.asyncio
async def test_log_returns_the_stored_entry(activity, store):
    entry = await activity.log("u2", ActivityType.BOOKING, "Booked 2 seat(s)", {"seats": ["A1", "A2"]})

    assert entry.user_id == "u2"
    assert entry.activity_type == ActivityType.BOOKING
    assert entry.metadata == {"seats": ["A1", "A2"]}
    assert await store.count(USER_ACTIVITY) == 1


@pytest.mark.asyncio
async def test_recent_is_newest_first(activity, store):
    start = datetime.now(timezone.utc)
    for minutes, (user_id, kind) in enumerate([("u1", "login"), ("u2", "booking"), ("u1", "logout")]):
        await store.insert(USER_ACTIVITY, {
            "user_id": user_id,
            "activity_type": kind,
            "activity_description": kind,
            "metadata": {},
            "created_at": start + timedelta(minutes=minutes),
        })

    recent = await activity.recent()
    assert [entry.activity_type for entry in recent] == [
        ActivityType.LOGOUT, ActivityType.BOOKING, ActivityType.LOGIN,
    ]
    assert len(await activity.recent(limit=1)) == 1
    assert [entry.activity_type for entry in await activity.recent(user_id="u1")] == [
        ActivityType.LOGOUT, ActivityType.LOGIN,
    ]


@pytest.mark.asyncio
async def test_failed_write_is_not_raised(activity, store, monkeypatch):
    async def failing_insert(table, row):
        raise StoreError("down")

    monkeypatch.setattr(store, "insert", failing_insert)
    assert await activity.log("u1", ActivityType.REVIEW, "Left a review") is None
