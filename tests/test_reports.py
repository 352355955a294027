from datetime import datetime, timedelta, timezone

import pytest

from foodcourt.data.models import OrderModel, UserModel
from foodcourt.domain.actor import Actor
from foodcourt.domain.enums import OrderStatus, PaymentMethod, Role
from foodcourt.domain.errors import NotFoundError, Unauthorized
from foodcourt.domain.schemas import OrderCreate, ReportRange, SalesReportQuery
from foodcourt.services.cart_service import CartService
from foodcourt.services.order_service import OrderService
from foodcourt.services.report_service import ReportService
from tests.conftest import create_user, setup_court


@pytest.fixture
def orders(db, notifier, email_service):
    return OrderService(db, notifier=notifier, email_service=email_service)


@pytest.fixture
def sales(db, world, orders):
    """$10 at stall A and $8 at stall B completed, $3 at stall A still pending."""
    owner = world["court_owner"]
    placed = []
    for actor, item, qty in (("customer", "m1", 2), ("customer", "m3", 1), ("other", "m2", 1)):
        CartService(db).add_item(world[actor], world[item], qty)
        placed.append(orders.create_order(world[actor], OrderCreate(payment_method=PaymentMethod.BIKASH)))

    for order in placed[:2]:
        orders.update_status(owner, order["id"], OrderStatus.COMPLETED)
    return placed


def test_reports_are_for_court_owner_only(db, world):
    svc = ReportService(db)
    for key in ("customer", "vendor_a"):
        with pytest.raises(Unauthorized):
            svc.sales_report(world[key], SalesReportQuery())
        with pytest.raises(Unauthorized):
            svc.performance_report(world[key], ReportRange())
        with pytest.raises(Unauthorized):
            svc.list_reports(world[key])


def test_sales_report_counts_completed_orders(db, world, sales):
    report = ReportService(db).sales_report(world["court_owner"], SalesReportQuery())

    today = datetime.now(timezone.utc).date().isoformat()
    assert report.type == "sales"
    assert report.title == "Sales Report (All Time)"
    assert report.generated_by == world["court_owner"].user_id
    assert report.data == {
        "total_sales": "18.00",
        "total_orders": 2,
        "average_order_value": "9.00",
        "sales_by_stall": {"Burger Hut": "10.00", "Noodle Bar": "8.00"},
        "sales_by_date": {today: "18.00"},
    }


def test_sales_report_stall_and_date_filters(db, world, sales):
    svc = ReportService(db)
    owner = world["court_owner"]

    report = svc.sales_report(owner, SalesReportQuery(stall_id=world["stall_b"]))
    assert report.data["total_sales"] == "8.00"
    assert report.filters == {"stall_id": world["stall_b"]}

    now = datetime.now(timezone.utc)
    db.get(OrderModel, sales[0]["id"]).created_at = now - timedelta(days=30)
    db.commit()

    report = svc.sales_report(
        owner,
        SalesReportQuery(start_date=now - timedelta(days=7), end_date=now + timedelta(minutes=1)),
    )
    assert report.data["total_orders"] == 1
    assert report.data["sales_by_stall"] == {"Noodle Bar": "8.00"}
    assert report.title.startswith("Sales Report (")
    assert report.title != "Sales Report (All Time)"


def test_performance_report_covers_every_status(db, world, sales):
    report = ReportService(db).performance_report(world["court_owner"], ReportRange())

    assert report.type == "performance"
    assert report.data == {
        "total_orders": 3,
        "order_status_counts": {"Completed": 2, "Pending": 1},
        "revenue_by_status": {"Completed": "18.00", "Pending": "3.00"},
    }


def test_stall_ranking_by_completed_revenue(db, world, sales):
    report = ReportService(db).stall_ranking_report(world["court_owner"], ReportRange())

    assert report.data["total_stalls"] == 2
    assert report.data["ranked_stalls"] == [
        {
            "rank": 1,
            "stall_id": world["stall_a"],
            "name": "Burger Hut",
            "total_revenue": "10.00",
            "total_orders": 1,
            "total_items_sold": 2,
        },
        {
            "rank": 2,
            "stall_id": world["stall_b"],
            "name": "Noodle Bar",
            "total_revenue": "8.00",
            "total_orders": 1,
            "total_items_sold": 1,
        },
    ]


def test_reports_are_listed_and_read_by_their_author(db, world, sales):
    svc = ReportService(db)
    owner = world["court_owner"]

    first = svc.sales_report(owner, SalesReportQuery())
    second = svc.performance_report(owner, ReportRange())

    assert [r.id for r in svc.list_reports(owner)] == [second.id, first.id]
    assert svc.get_report(owner, first.id).type == "sales"

    co_owner = UserModel(name="Co Owner", email="co@example.com", role="FoodCourtOwner")
    db.add(co_owner)
    db.commit()
    other_owner = Actor(co_owner.id, Role.FOOD_COURT_OWNER)

    assert svc.list_reports(other_owner) == []
    with pytest.raises(Unauthorized):
        svc.get_report(other_owner, first.id)
    with pytest.raises(NotFoundError):
        svc.get_report(owner, 999)


def test_report_range_needs_both_bounds():
    now = datetime.now(timezone.utc)
    with pytest.raises(ValueError):
        ReportRange(start_date=now)
    with pytest.raises(ValueError):
        ReportRange(start_date=now, end_date=now - timedelta(days=1))


def test_report_endpoints(client):
    c = setup_court(client)
    owner = c["owner"]

    r = client.get(f"/reports/sales?user_id={owner}")
    assert r.status_code == 200, r.text
    sales_id = r.json()["id"]
    assert r.json()["data"]["total_orders"] == 0

    r = client.get(f"/reports/stall-ranking?user_id={owner}")
    assert r.status_code == 200, r.text
    assert r.json()["data"] == {"ranked_stalls": [], "total_stalls": 0}

    r = client.get(f"/reports/?user_id={owner}")
    assert [report["type"] for report in r.json()] == ["stall-ranking", "sales"]

    r = client.get(f"/reports/{sales_id}?user_id={owner}")
    assert r.json()["type"] == "sales"

    r = client.get(f"/reports/sales?user_id={owner}&start_date=2024-01-01T00:00:00Z")
    assert r.status_code == 422

    r = client.get(f"/reports/performance?user_id={c['customer']}")
    assert r.status_code == 403

    stranger = create_user(client, "Auditor", "FoodCourtOwner")
    r = client.get(f"/reports/{sales_id}?user_id={stranger}")
    assert r.status_code == 403
