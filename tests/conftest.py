import os

# must be set before foodcourt.utils.settings is imported
os.environ["DATABASE_URL"] = "sqlite://"
# nothing listens here, publishing to the broker must fail fast
os.environ["CELERY_BROKER_URL"] = "redis://127.0.0.1:6399/1"
os.environ["CELERY_RESULT_BACKEND"] = "redis://127.0.0.1:6399/2"
os.environ["REDIS_TIMEOUT_SECONDS"] = "1"

import asyncio
import queue
import threading
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from foodcourt.api.deps import get_email_service, get_notifier
from foodcourt.data.database import Base, SessionLocal, engine
from foodcourt.data.models import MenuItemModel, StallModel, UserModel
from foodcourt.domain.actor import Actor
from foodcourt.domain.enums import Role
from foodcourt.main import app as fastapi_app
from foodcourt.services.notification_service import NotificationService
from foodcourt.services.realtime import broadcast_channel, connection_channel, encode_event


class RecordingTransport:
    def __init__(self):
        self.broadcasts = []
        self.direct = []
        self.fail = False

    def broadcast(self, event, payload):
        if self.fail:
            raise ConnectionError("transport down")
        self.broadcasts.append((event, payload))

    def send_to_connection(self, connection_id, event, payload):
        if self.fail:
            raise ConnectionError("transport down")
        self.direct.append((connection_id, event, payload))


class DictDirectory:
    def __init__(self):
        self.connections = {}

    def register(self, user_id, connection_id):
        self.connections[user_id] = connection_id

    def unregister(self, user_id, connection_id):
        if self.connections.get(user_id) == connection_id:
            del self.connections[user_id]
            return True
        return False

    def lookup(self, user_id):
        return self.connections.get(user_id)


class RecordingEmailService:
    def __init__(self):
        self.queued = []

    def queue_order_confirmation(self, email, summary):
        self.queued.append((email, summary))
        return True


class MemoryPubSub:
    def __init__(self, hub, channels):
        self.hub = hub
        self.channels = set(channels)
        self.inbox = queue.Queue()

    async def get_message(self, ignore_subscribe_messages=False, timeout=0.0):
        try:
            return self.inbox.get_nowait()
        except queue.Empty:
            await asyncio.sleep(0.01)
            return None

    async def aclose(self):
        self.hub.drop(self)


class InMemoryHub:
    """
    Pub/sub in process memory. Used as the notification transport on the
    publishing side and as the websocket event subscriber on the other.
    """

    def __init__(self):
        self.lock = threading.Lock()
        self.subscriptions = []

    async def subscribe(self, *channels):
        pubsub = MemoryPubSub(self, channels)
        with self.lock:
            self.subscriptions.append(pubsub)
        return pubsub

    def drop(self, pubsub):
        with self.lock:
            self.subscriptions.remove(pubsub)

    def publish(self, channel, data):
        with self.lock:
            targets = [p for p in self.subscriptions if channel in p.channels]
        for pubsub in targets:
            pubsub.inbox.put({"type": "message", "channel": channel, "data": data})

    def broadcast(self, event, payload):
        self.publish(broadcast_channel(), encode_event(event, payload))

    def send_to_connection(self, connection_id, event, payload):
        self.publish(connection_channel(connection_id), encode_event(event, payload))


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def directory():
    return DictDirectory()


@pytest.fixture
def notifier(transport, directory):
    return NotificationService(transport=transport, directory=directory)


@pytest.fixture
def email_service():
    return RecordingEmailService()


@pytest.fixture
def client(notifier, email_service):
    fastapi_app.dependency_overrides[get_notifier] = lambda: notifier
    fastapi_app.dependency_overrides[get_email_service] = lambda: email_service
    with TestClient(fastapi_app) as c:
        yield c
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def hub():
    return InMemoryHub()


@pytest.fixture
def live_client(hub, directory, email_service):
    """Client whose status events go through the hub to /ws/orders sockets."""
    fastapi_app.dependency_overrides[get_notifier] = lambda: NotificationService(transport=hub, directory=directory)
    fastapi_app.dependency_overrides[get_email_service] = lambda: email_service
    with TestClient(fastapi_app) as c:
        fastapi_app.state.event_subscriber = hub
        fastapi_app.state.connection_directory = directory
        yield c
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def world():
    """
    Two stall owners, one stall each, a customer, a food-court owner and
    menu items M1 ($5, stock 10) and M2 ($3, stock 10) at stall A, M3 at stall B.
    """
    session = SessionLocal()
    try:
        court_owner = UserModel(name="Court Owner", email="owner@example.com", role="FoodCourtOwner")
        vendor_a = UserModel(name="Vendor A", email="a@example.com", role="StallOwner")
        vendor_b = UserModel(name="Vendor B", email="b@example.com", role="StallOwner")
        customer = UserModel(name="Alice", email="alice@example.com", role="Customer")
        other = UserModel(name="Bob", email="bob@example.com", role="Customer")
        session.add_all([court_owner, vendor_a, vendor_b, customer, other])
        session.flush()

        stall_a = StallModel(owner_id=vendor_a.id, name="Burger Hut", category="Fast Food")
        stall_b = StallModel(owner_id=vendor_b.id, name="Noodle Bar", category="Asian")
        session.add_all([stall_a, stall_b])
        session.flush()

        m1 = MenuItemModel(stall_id=stall_a.id, name="Burger", category="Burger", price=Decimal("5.00"), stock=10)
        m2 = MenuItemModel(stall_id=stall_a.id, name="Fries", category="Sides", price=Decimal("3.00"), stock=10)
        m3 = MenuItemModel(stall_id=stall_b.id, name="Ramen", category="Noodles", price=Decimal("8.00"), stock=10)
        session.add_all([m1, m2, m3])
        session.commit()

        return {
            "court_owner": Actor(court_owner.id, Role.FOOD_COURT_OWNER),
            "vendor_a": Actor(vendor_a.id, Role.STALL_OWNER, frozenset({stall_a.id})),
            "vendor_b": Actor(vendor_b.id, Role.STALL_OWNER, frozenset({stall_b.id})),
            "customer": Actor(customer.id, Role.CUSTOMER),
            "other": Actor(other.id, Role.CUSTOMER),
            "stall_a": stall_a.id,
            "stall_b": stall_b.id,
            "m1": m1.id,
            "m2": m2.id,
            "m3": m3.id,
        }
    finally:
        session.close()


def set_menu_item(item_id, **fields):
    session = SessionLocal()
    try:
        item = session.get(MenuItemModel, item_id)
        for name, value in fields.items():
            setattr(item, name, value)
        session.commit()
    finally:
        session.close()


def get_stock(item_id):
    session = SessionLocal()
    try:
        return session.get(MenuItemModel, item_id).stock
    finally:
        session.close()


def create_user(client, name, role):
    r = client.post("/users/", json={"name": name, "email": f"{name.lower()}@example.com", "role": role})
    assert r.status_code == 201, r.text
    return r.json()["id"]


def setup_court(client):
    owner = create_user(client, "Owner", "FoodCourtOwner")
    vendor = create_user(client, "Vendor", "StallOwner")
    customer = create_user(client, "Customer", "Customer")

    r = client.post(f"/stalls/?user_id={vendor}", json={"name": "Burger Hut", "category": "Fast Food"})
    assert r.status_code == 201, r.text
    stall = r.json()["id"]

    items = []
    for name, price in (("Burger", "5.00"), ("Fries", "3.00")):
        r = client.post(
            f"/menu/?user_id={vendor}",
            json={"stall_id": stall, "name": name, "category": "Food", "price": price, "stock": 5},
        )
        assert r.status_code == 201, r.text
        items.append(r.json()["id"])

    return {"owner": owner, "vendor": vendor, "customer": customer, "stall": stall, "m1": items[0], "m2": items[1]}
