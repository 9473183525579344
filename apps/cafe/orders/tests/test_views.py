"""
Integration tests for order API views.
"""

import json
import uuid
from decimal import Decimal
from unittest.mock import patch

from django.db import DatabaseError
from django.test import Client as DjangoClient

import pytest

from apps.cafe.notifications.models import Notification
from apps.cafe.orders.models import Order, OrderItem
from apps.cafe.restaurant.models import TableStatus
from apps.cafe.restaurant.tests.factories import (
    BreakfastFactory,
    BreakfastOptionFactory,
    BreakfastOptionGroupFactory,
    MenuItemFactory,
    TableFactory,
)

from .factories import OrderFactory, OrderItemFactory, cart_payload

SESSION_HEADERS = {"HTTP_X_SESSION_ID": "client-session-1"}


def post_order(client: DjangoClient, payload: dict, **extra):
    return client.post(
        "/api/orders",
        data=json.dumps(payload),
        content_type="application/json",
        **{**SESSION_HEADERS, **extra},
    )


@pytest.fixture
def coffee():
    return MenuItemFactory(name="Coffee", regular_price=Decimal("10.00"))


@pytest.fixture
def table():
    return TableFactory(table_number="5")


@pytest.fixture
def scenario_a(coffee, table):
    """Two 10.00 items for a local table."""
    return cart_payload(
        items=[{"item_id": coffee.pk, "quantity": 2, "unit_price": "10.00"}],
        total_price="20.00",
        order_type="local",
        table_id=table.pk,
    )


@pytest.mark.django_db
class TestCreateOrder:
    """Tests for POST /api/orders."""

    def test_scenario_a_local_order_created(
        self,
        api_client,
        scenario_a,
        table,
        publisher,
        django_capture_on_commit_callbacks,
    ):
        with django_capture_on_commit_callbacks(execute=True):
            response = post_order(api_client, scenario_a)

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Order created"

        order = Order.objects.get(pk=data["orderId"])
        assert order.total_price == Decimal("20.00")
        assert order.session_id == "client-session-1"
        assert order.items.count() == 1
        table.refresh_from_db()
        assert table.status == TableStatus.OCCUPIED

        [new_order] = publisher.named("newOrder")
        assert new_order[1]["id"] == order.pk
        assert new_order[2] == "broadcast"
        [created] = publisher.named("order-created")
        assert created[2] == "session:client-session-1"
        assert len(publisher.named("newNotification")) == 1

    def test_scenario_b_total_mismatch(self, api_client, scenario_a, publisher):
        scenario_a["total_price"] = "19.00"

        response = post_order(api_client, scenario_a)

        assert response.status_code == 400
        assert response.json() == {
            "error": "Total price mismatch. Expected 20.00, got 19.00"
        }
        assert Order.objects.count() == 0
        assert publisher.events == []

    def test_scenario_c_uncovered_option_group(self, api_client, table):
        breakfast = BreakfastFactory(price=Decimal("8.00"))
        eggs = BreakfastOptionGroupFactory(breakfast=breakfast)
        BreakfastOptionGroupFactory(breakfast=breakfast)
        fried = BreakfastOptionFactory(group=eggs)
        payload = cart_payload(
            breakfastItems=[
                {
                    "breakfast_id": breakfast.pk,
                    "quantity": 1,
                    "unit_price": "8.00",
                    "option_ids": [fried.pk],
                }
            ],
            total_price="8.00",
            table_id=table.pk,
        )

        response = post_order(api_client, payload)

        assert response.status_code == 400
        assert str(breakfast.pk) in response.json()["error"]
        assert response.json()["error"] == (
            "Must select one option from each of the 2 option groups "
            f"for breakfast {breakfast.pk}"
        )

    def test_scenario_d_duplicate_submission(
        self, api_client, scenario_a
    ):
        first = post_order(api_client, scenario_a)
        second = post_order(api_client, scenario_a)

        assert first.status_code == 201
        assert second.status_code == 429
        assert Order.objects.count() == 1

    def test_resubmission_accepted_after_window(
        self, api_client, scenario_a, fake_clock
    ):
        post_order(api_client, scenario_a)
        fake_clock.advance(15)

        response = post_order(api_client, scenario_a)

        assert response.status_code == 201
        assert Order.objects.count() == 2

    def test_new_request_id_not_a_duplicate(self, api_client, scenario_a):
        post_order(api_client, scenario_a)
        scenario_a["request_id"] = str(uuid.uuid4())

        response = post_order(api_client, scenario_a)

        assert response.status_code == 201

    def test_delivery_order(self, api_client, coffee):
        payload = cart_payload(
            items=[{"item_id": coffee.pk, "quantity": 1, "unit_price": "10.00"}],
            total_price="10.00",
            order_type="delivery",
            delivery_address="3 Harbour Road",
        )

        response = post_order(api_client, payload)

        assert response.status_code == 201
        order = Order.objects.get(pk=response.json()["orderId"])
        assert order.delivery_address == "3 Harbour Road"
        assert order.table is None

    def test_malformed_request_id(self, api_client, scenario_a):
        scenario_a["request_id"] = "not-a-uuid"

        response = post_order(api_client, scenario_a)

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "validation_error"
        assert data["details"][0]["field"] == "request_id"

    def test_zero_quantity_rejected_by_schema(self, api_client, scenario_a):
        scenario_a["items"][0]["quantity"] = 0

        response = post_order(api_client, scenario_a)

        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "items.0.quantity"

    def test_out_of_range_prices_rejected_by_schema(self, api_client, scenario_a):
        scenario_a["items"][0]["unit_price"] = 1e30
        scenario_a["total_price"] = "1e30"

        response = post_order(api_client, scenario_a)

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "validation_error"
        fields = {detail["field"] for detail in data["details"]}
        assert fields == {"items.0.unit_price", "total_price"}
        assert Order.objects.count() == 0

    def test_sub_cent_price_rejected_by_schema(self, api_client, scenario_a):
        scenario_a["items"][0]["unit_price"] = "10.001"

        response = post_order(api_client, scenario_a)

        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "items.0.unit_price"

    def test_invalid_json(self, api_client):
        response = api_client.post(
            "/api/orders", data="{not json", content_type="application/json"
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON in request body"}

    def test_invalid_order_type(self, api_client, scenario_a):
        scenario_a["order_type"] = "takeaway"

        response = post_order(api_client, scenario_a)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid order type"}

    def test_empty_cart(self, api_client, table):
        payload = cart_payload(total_price="0.00", table_id=table.pk)

        response = post_order(api_client, payload)

        assert response.status_code == 400
        assert response.json() == {
            "error": "Items or breakfast items array is required and non-empty"
        }

    def test_local_order_requires_table(self, api_client, scenario_a):
        scenario_a["table_id"] = None

        response = post_order(api_client, scenario_a)

        assert response.status_code == 400
        assert response.json() == {"error": "Table ID required for local orders"}

    def test_delivery_requires_address(self, api_client, scenario_a):
        scenario_a.update(order_type="delivery", delivery_address="   ")

        response = post_order(api_client, scenario_a)

        assert response.status_code == 400
        assert response.json() == {"error": "Delivery address required"}

    def test_unknown_table(self, api_client, scenario_a):
        scenario_a["table_id"] = 987654

        response = post_order(api_client, scenario_a)

        assert response.status_code == 404
        assert response.json() == {"error": "Table does not exist"}

    def test_reserved_table(self, api_client, scenario_a, table):
        table.status = TableStatus.RESERVED
        table.save()

        response = post_order(api_client, scenario_a)

        assert response.status_code == 400
        assert response.json() == {"error": "Table is reserved"}

    def test_unavailable_item(self, api_client, scenario_a, coffee):
        coffee.availability = False
        coffee.save()

        response = post_order(api_client, scenario_a)

        assert response.status_code == 400
        assert response.json() == {"error": f"Item {coffee.pk} is unavailable"}

    def test_persistence_failure_returns_generic_error(
        self, api_client, scenario_a, table
    ):
        with patch.object(
            Notification.objects, "create", side_effect=DatabaseError("disk full")
        ):
            response = post_order(api_client, scenario_a)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create order"}
        assert Order.objects.count() == 0
        assert OrderItem.objects.count() == 0
        table.refresh_from_db()
        assert table.status == TableStatus.AVAILABLE

    def test_publish_failure_does_not_fail_request(
        self, api_client, scenario_a, publisher, django_capture_on_commit_callbacks
    ):
        with (
            patch.object(publisher, "publish", side_effect=ConnectionError("down")),
            django_capture_on_commit_callbacks(execute=True),
        ):
            response = post_order(api_client, scenario_a)

        assert response.status_code == 201
        assert Order.objects.count() == 1

    def test_cors_headers(self, api_client, scenario_a):
        response = post_order(api_client, scenario_a)

        assert response["Access-Control-Allow-Origin"] == "*"


@pytest.mark.django_db
class TestListOrders:
    """Tests for GET /api/orders."""

    def test_requires_staff(self, api_client):
        response = api_client.get("/api/orders")

        assert response.status_code == 403
        assert response.json() == {"error": "Admin or server access required"}

    def test_customer_forbidden(self, customer_user):
        client = DjangoClient()
        client.force_login(customer_user)

        response = client.get("/api/orders")

        assert response.status_code == 403

    def test_returns_array_newest_first(self, staff_client):
        first = OrderItemFactory().order
        second = OrderItemFactory().order

        response = staff_client.get("/api/orders")

        assert response.status_code == 200
        data = response.json()
        assert isinstance(data, list)
        assert [order["id"] for order in data] == [second.pk, first.pk]
        assert len(data[0]["items"]) == 1

    def test_filters_by_approval(self, staff_client):
        OrderFactory(approved=True)
        pending = OrderFactory(approved=False)

        response = staff_client.get("/api/orders", {"approved": "0"})

        assert [order["id"] for order in response.json()] == [pending.pk]

    def test_filters_by_time_range(self, staff_client):
        recent = OrderFactory()
        old = OrderFactory()
        Order.objects.filter(pk=old.pk).update(
            created_at=recent.created_at.replace(year=recent.created_at.year - 1)
        )

        response = staff_client.get("/api/orders", {"time_range": "month"})

        assert [order["id"] for order in response.json()] == [recent.pk]


@pytest.mark.django_db
class TestOrderDetail:
    """Tests for GET/PUT /api/orders/{id}."""

    def test_get_order(self, api_client):
        order = OrderItemFactory().order

        response = api_client.get(f"/api/orders/{order.pk}")

        assert response.status_code == 200
        assert response.json()["id"] == order.pk

    def test_missing_order(self, api_client):
        response = api_client.get("/api/orders/987654")

        assert response.status_code == 404
        assert response.json() == {"error": "Order not found"}

    def test_status_update_rejected(self, staff_client):
        order = OrderFactory()

        response = staff_client.put(
            f"/api/orders/{order.pk}",
            data=json.dumps({"status": "done"}),
            content_type="application/json",
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Order status updates are not supported"}

    def test_status_update_requires_staff(self, api_client):
        order = OrderFactory()

        response = api_client.put(f"/api/orders/{order.pk}")

        assert response.status_code == 403


@pytest.mark.django_db
class TestApproveOrderView:
    """Tests for POST /api/orders/{id}/approve."""

    def test_staff_approves(
        self, staff_client, publisher, django_capture_on_commit_callbacks
    ):
        order = OrderFactory(session_id="client-session-1")

        with django_capture_on_commit_callbacks(execute=True):
            response = staff_client.post(f"/api/orders/{order.pk}/approve")

        assert response.status_code == 200
        assert response.json() == {"message": "Order approved"}
        order.refresh_from_db()
        assert order.approved is True
        [approved] = publisher.named("order-approved")
        assert approved[2] == "session:client-session-1"
        assert len(publisher.named("orderApproved")) == 1

    def test_already_approved(self, staff_client):
        order = OrderFactory(approved=True)

        response = staff_client.post(f"/api/orders/{order.pk}/approve")

        assert response.status_code == 400
        assert response.json() == {"error": "Order already approved"}

    def test_missing_order(self, staff_client):
        response = staff_client.post("/api/orders/987654/approve")

        assert response.status_code == 404

    def test_anonymous_forbidden(self, api_client):
        order = OrderFactory()

        response = api_client.post(f"/api/orders/{order.pk}/approve")

        assert response.status_code == 403
        order.refresh_from_db()
        assert order.approved is False


@pytest.mark.django_db
class TestSessionInfo:
    """Tests for GET /api/session."""

    def test_header_session_id(self, api_client):
        response = api_client.get("/api/session", **SESSION_HEADERS)

        assert response.json() == {"sessionId": "client-session-1"}

    def test_django_session_key_is_stable(self, api_client):
        first = api_client.get("/api/session").json()["sessionId"]
        second = api_client.get("/api/session").json()["sessionId"]

        assert first
        assert first == second
