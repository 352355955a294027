from decimal import Decimal
from types import SimpleNamespace

from foodcourt.api.deps import get_email_service
from foodcourt.main import app as fastapi_app
from foodcourt.services import email_service as email_module
from foodcourt.services.email_service import EmailService
from tests.conftest import create_user, get_stock, set_menu_item, setup_court


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_duplicate_email_is_conflict(client):
    create_user(client, "Dup", "Customer")
    r = client.post("/users/", json={"name": "Dup", "email": "dup@example.com"})
    assert r.status_code == 409


def test_unknown_actor_is_forbidden(client):
    r = client.get("/cart/?user_id=999")
    assert r.status_code == 403
    assert r.json()["error"] == "Unauthorized"


def test_customer_cannot_open_stall(client):
    customer = create_user(client, "Carl", "Customer")
    r = client.post(f"/stalls/?user_id={customer}", json={"name": "X", "category": "Y"})
    assert r.status_code == 403


def test_checkout_and_status_flow(client, transport, directory, email_service):
    c = setup_court(client)
    cust = c["customer"]

    r = client.post(f"/cart/items?user_id={cust}", json={"menu_item_id": c["m1"], "quantity": 2})
    assert r.status_code == 201
    r = client.post(f"/cart/items?user_id={cust}", json={"menu_item_id": c["m2"], "quantity": 1})
    assert Decimal(r.json()["total_amount"]) == Decimal("13")

    r = client.post(
        f"/orders/?user_id={cust}",
        json={"payment_method": "Cash on Delivery", "delivery_address": {"street": "1 Main St", "city": "Dhaka"}},
    )
    assert r.status_code == 201, r.text
    order = r.json()
    assert Decimal(order["total_amount"]) == Decimal("13")
    assert order["status"] == "Pending"
    assert order["delivery_address"]["city"] == "Dhaka"
    assert get_stock(c["m1"]) == 3
    assert get_stock(c["m2"]) == 4
    assert client.get(f"/cart/?user_id={cust}").json()["items"] == []
    assert len(email_service.queued) == 1

    directory.register(cust, "sock-1")
    for status in ("Preparing", "Ready for Pickup", "Completed"):
        r = client.put(f"/orders/{order['id']}/status?user_id={c['vendor']}", json={"status": status})
        assert r.status_code == 200, r.text
        assert r.json()["status"] == status

    assert len(transport.broadcasts) == 3
    assert len(transport.direct) == 3

    r = client.put(f"/orders/{order['id']}/status?user_id={c['vendor']}", json={"status": "Preparing"})
    assert r.status_code == 409
    assert r.json()["error"] == "OrderClosed"


def test_checkout_errors(client):
    c = setup_court(client)
    cust = c["customer"]

    r = client.post(f"/orders/?user_id={cust}", json={"payment_method": "Bikash"})
    assert r.status_code == 400
    assert r.json()["error"] == "EmptyCart"

    r = client.post(f"/cart/items?user_id={cust}", json={"menu_item_id": c["m1"], "quantity": 6})
    assert r.status_code == 409
    assert r.json()["error"] == "OutOfStock"

    client.post(f"/cart/items?user_id={cust}", json={"menu_item_id": c["m1"], "quantity": 2})
    set_menu_item(c["m1"], stock=1)

    r = client.post(f"/orders/?user_id={cust}", json={"payment_method": "Bikash"})
    assert r.status_code == 409
    assert r.json()["error"] == "InsufficientStock"
    assert get_stock(c["m1"]) == 1
    assert len(client.get(f"/cart/?user_id={cust}").json()["items"]) == 1

    r = client.post(f"/orders/?user_id={cust}", json={"payment_method": "PayPal"})
    assert r.status_code == 422


def test_cart_line_endpoints(client):
    c = setup_court(client)
    cust = c["customer"]

    cart = client.post(f"/cart/items?user_id={cust}", json={"menu_item_id": c["m1"], "quantity": 1}).json()
    line_id = cart["items"][0]["id"]

    r = client.put(f"/cart/items/{line_id}?user_id={cust}", json={"quantity": 0})
    assert r.status_code == 400
    assert r.json()["error"] == "InvalidQuantity"

    r = client.put(f"/cart/items/{line_id}?user_id={cust}", json={"quantity": 4})
    assert Decimal(r.json()["total_amount"]) == Decimal("20")

    r = client.delete(f"/cart/items/{line_id + 100}?user_id={cust}")
    assert r.status_code == 404

    r = client.delete(f"/cart/items/{line_id}?user_id={cust}")
    assert r.json()["items"] == []

    client.post(f"/cart/items?user_id={cust}", json={"menu_item_id": c["m2"], "quantity": 1})
    r = client.delete(f"/cart/?user_id={cust}")
    assert r.json()["items"] == []
    assert Decimal(r.json()["total_amount"]) == Decimal("0")


def test_customer_cancellation_over_http(client):
    c = setup_court(client)
    cust = c["customer"]

    def checkout():
        client.post(f"/cart/items?user_id={cust}", json={"menu_item_id": c["m1"], "quantity": 1})
        return client.post(f"/orders/?user_id={cust}", json={"payment_method": "Nagad"}).json()["id"]

    first = checkout()
    r = client.put(f"/orders/{first}/status?user_id={cust}", json={"status": "Cancelled"})
    assert r.json()["status"] == "Cancelled"

    r = client.put(f"/orders/{first}/status?user_id={cust}", json={"status": "Cancelled"})
    assert r.status_code == 409
    assert r.json()["error"] == "OrderClosed"

    second = checkout()
    client.put(f"/orders/{second}/status?user_id={c['vendor']}", json={"status": "Preparing"})
    r = client.put(f"/orders/{second}/status?user_id={cust}", json={"status": "Cancelled"})
    assert r.status_code == 403


def test_order_listing_and_filters(client):
    c = setup_court(client)
    cust = c["customer"]

    for qty in (1, 3):
        client.post(f"/cart/items?user_id={cust}", json={"menu_item_id": c["m1"], "quantity": qty})
        client.post(f"/orders/?user_id={cust}", json={"payment_method": "Rocket"})

    mine = client.get(f"/orders/?user_id={cust}").json()
    assert [Decimal(o["total_amount"]) for o in mine] == [Decimal("15"), Decimal("5")]

    r = client.get(f"/orders/?user_id={c['owner']}&min_amount=10")
    assert [Decimal(o["total_amount"]) for o in r.json()] == [Decimal("15")]

    r = client.get(f"/orders/?user_id={c['vendor']}&status=Completed")
    assert r.json() == []

    r = client.get(f"/orders/?user_id={c['owner']}&min_amount=10&max_amount=1")
    assert r.status_code == 422

    stranger = create_user(client, "Stranger", "Customer")
    r = client.get(f"/orders/{mine[0]['id']}?user_id={stranger}")
    assert r.status_code == 403


def test_checkout_survives_mail_queue_outage(client, monkeypatch):
    def broker_down(*args, **kwargs):
        raise ConnectionError("broker down")

    monkeypatch.setattr(
        email_module,
        "send_order_confirmation_task",
        SimpleNamespace(apply_async=broker_down),
    )
    fastapi_app.dependency_overrides[get_email_service] = EmailService

    c = setup_court(client)
    cust = c["customer"]
    client.post(f"/cart/items?user_id={cust}", json={"menu_item_id": c["m1"], "quantity": 2})

    r = client.post(f"/orders/?user_id={cust}", json={"payment_method": "Bikash"})

    assert r.status_code == 201, r.text
    assert r.json()["status"] == "Pending"
    assert get_stock(c["m1"]) == 3
    assert client.get(f"/cart/?user_id={cust}").json()["items"] == []
