import random

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from theatre.database import USERS, Store
from theatre.main import create_app
from theatre.models.user import UserCreate, UserRole
from theatre.services.activity import ActivityLog
from theatre.services.auth import AuthService
from theatre.services.booking import BookingService
from theatre.services.catalog import DEFAULT_SHOWS, ShowCatalog
from theatre.services.reviews import ReviewFeed


@pytest.fixture
def database():
    client = AsyncMongoMockClient(tz_aware=True)
    return client.get_database("theatre_test")


@pytest.fixture
def store(database):
    return Store(database)


@pytest.fixture
def activity(store):
    return ActivityLog(store)


@pytest_asyncio.fixture
async def catalog(store):
    catalog = ShowCatalog(store)
    await catalog.seed_defaults()
    return catalog


@pytest.fixture
def kampala_nights():
    return DEFAULT_SHOWS[1]


@pytest.fixture
def auth(store, activity):
    return AuthService(store, activity)


@pytest.fixture
def booking_service(store, activity):
    # Every seat available unless already booked
    return BookingService(store, activity, rng=random.Random(42), availability=1.0)


@pytest_asyncio.fixture
async def user(auth):
    return await auth.sign_up(UserCreate(name="Sarah Nakimuli", email="sarah@example.com", password="secret123"))


@pytest_asyncio.fixture
async def review_feed(store, catalog, activity):
    feed = ReviewFeed(store, catalog, activity)
    await feed.start()
    yield feed
    feed.stop()


@pytest.fixture
def app(database):
    return create_app(
        database=database,
        rng=random.Random(7),
        availability=1.0,
        seed_catalog=True,
        configure_logging=False,
    )


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


def register_and_login(client, email="david@example.com", name="David Mukasa", password="secret123"):
    response = client.post("/auth/register", json={"name": name, "email": email, "password": password})
    assert response.status_code == 201, response.text
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth_headers(client):
    return register_and_login(client)


@pytest.fixture
def admin_headers(client, app):
    headers = register_and_login(client, email="admin@example.com", name="Grace Namatovu")
    # No route grants the admin role, so promote through the store on the app loop
    client.portal.call(
        app.state.theatre.store.update, USERS, {"email": "admin@example.com"}, {"role": UserRole.ADMIN.value}
    )
    return headers
