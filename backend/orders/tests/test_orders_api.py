"""
Order API tests.

Covers the HTTP contract of /api/orders/: pricing previews, create and
update payloads, ownership scoping, staff-only actions and the error shapes
the back office relies on.
"""
import pytest
from datetime import timedelta
from decimal import Decimal
from django.core import mail
from django.utils import timezone

from orders.models import Order
from orders.services import OrderService
from orders.statuses import OrderStatus, PaymentStatus


ORDERS_URL = "/api/orders/"
CALCULATE_URL = "/api/orders/calculate/"
BULK_UPDATE_URL = "/api/orders/bulk/update/"
BULK_DELETE_URL = "/api/orders/bulk/delete/"
STATUS_COUNTS_URL = "/api/orders/status-counts/"


def detail_url(order):
    return f"{ORDERS_URL}{order.pk}/"


@pytest.mark.django_db
class TestAuthentication:
    def test_anonymous_cannot_list(self, api_client):
        response = api_client.get(ORDERS_URL)

        assert response.status_code in (401, 403)
        assert response.data["success"] is False

    def test_anonymous_cannot_calculate(self, api_client, line_payload):
        response = api_client.post(
            CALCULATE_URL, {"type": "pickup", "order_items": [line_payload]}, format="json"
        )
        assert response.status_code in (401, 403)

    def test_health_check_is_public(self, api_client):
        response = api_client.get("/api/health/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


@pytest.mark.django_db
class TestCalculateEndpoint:
    def test_pickup(self, customer_client, business_setup, line_payload):
        response = customer_client.post(
            CALCULATE_URL, {"type": "pickup", "order_items": [line_payload]}, format="json"
        )

        assert response.status_code == 200
        # 10.00 x 2 + chips 1.50 x 2 + sourdough 2.00
        assert Decimal(response.data["total"]) == Decimal("25")
        assert Decimal(response.data["delivery_charge"]) == 0
        assert Decimal(response.data["grand_total"]) == Decimal("25")

        line = response.data["order_items"][0]
        assert Decimal(line["addons_amount"]) == Decimal("3")
        assert Decimal(line["variants_amount"]) == Decimal("2")
        assert Decimal(line["total_price"]) == Decimal("25")
        assert Decimal(line["grand_price"]) == Decimal("50")

    def test_delivery_uses_configured_charge(self, customer_client, business_setup, line_payload):
        response = customer_client.post(
            CALCULATE_URL,
            {"type": "delivery", "manual_discount": "5", "order_items": [line_payload]},
            format="json",
        )

        assert response.status_code == 200
        assert Decimal(response.data["delivery_charge"]) == Decimal("25")
        assert Decimal(response.data["grand_total"]) == Decimal("45")

    def test_fees(self, customer_client, business_setup, line_payload):
        response = customer_client.post(
            CALCULATE_URL,
            {
                "type": "pickup",
                "specialty_item_shopping_fee": "6.00",
                "service_charge": "4.00",
                "order_items": [line_payload],
            },
            format="json",
        )

        assert response.status_code == 200
        assert Decimal(response.data["specialty_item_shopping_fee"]) == Decimal("6")
        assert Decimal(response.data["service_charge"]) == Decimal("4")
        assert Decimal(response.data["grand_total"]) == Decimal("35")

    def test_negative_fee_is_invalid(self, customer_client, business_setup, line_payload):
        response = customer_client.post(
            CALCULATE_URL,
            {"type": "pickup", "service_charge": "-1", "order_items": [line_payload]},
            format="json",
        )

        assert response.status_code == 400
        assert "service_charge" in response.data["messages"]

    def test_percentage_discount(self, staff_client, business_setup):
        payload = {
            "type": "dine_in",
            "order_items": [
                {"price": "100", "quantity": "2", "discount": "10", "discount_type": "percentage"}
            ],
        }
        response = staff_client.post(CALCULATE_URL, payload, format="json")

        assert response.status_code == 200
        assert Decimal(response.data["discount"]) == Decimal("20")
        assert Decimal(response.data["grand_total"]) == Decimal("180")

    def test_empty_order(self, staff_client, business_setup):
        response = staff_client.post(
            CALCULATE_URL, {"type": "delivery", "order_items": []}, format="json"
        )

        assert response.status_code == 200
        assert Decimal(response.data["grand_total"]) == Decimal("25")
        assert response.data["order_items"] == []

    def test_negative_grand_total(self, staff_client, business_setup, line_payload):
        response = staff_client.post(
            CALCULATE_URL,
            {"type": "pickup", "manual_discount": "100", "order_items": [line_payload]},
            format="json",
        )

        assert response.status_code == 400
        assert response.data == {
            "success": False,
            "message": "Grand total can't be less than zero",
            "code": "negative_grand_total",
        }

    def test_value_too_large(self, staff_client, business_setup):
        response = staff_client.post(
            CALCULATE_URL,
            {"type": "pickup", "order_items": [{"price": "1000000000", "quantity": "1"}]},
            format="json",
        )

        assert response.status_code == 400
        assert response.data["code"] == "value_too_large"

    def test_invalid_payload(self, staff_client, business_setup):
        response = staff_client.post(
            CALCULATE_URL,
            {"type": "takeaway", "order_items": [{"price": "-1", "quantity": "1"}]},
            format="json",
        )

        assert response.status_code == 400
        assert response.data["success"] is False
        assert "type" in response.data["messages"]
        assert "order_items" in response.data["messages"]

    def test_nothing_is_stored(self, staff_client, business_setup, line_payload):
        staff_client.post(CALCULATE_URL, {"type": "pickup", "order_items": [line_payload]}, format="json")
        assert Order.objects.count() == 0


@pytest.mark.django_db
class TestCreateOrder:
    def test_customer_creates_own_order(self, customer_client, customer_user, business_setup, line_payload):
        response = customer_client.post(
            ORDERS_URL,
            {
                "type": "delivery",
                "order_items": [line_payload],
                "delivery_date": "2026-11-02",
                "delivery_time": "11:30",
                "note": "Leave at reception",
            },
            format="json",
        )

        assert response.status_code == 201
        assert response.data["success"] is True
        assert response.data["message"] == "Order created successfully"

        content = response.data["content"]
        assert content["order_number"] == "KA00001"
        assert content["customer"] == customer_user.id
        assert content["customer_name"] == "Sam Rivera"
        assert content["status"] == OrderStatus.QUOTE_PENDING
        assert Decimal(content["grand_total"]) == Decimal("50.00")
        assert len(content["items"]) == 1
        assert content["items"][0]["name"] == "Sandwich Platter"

    def test_customer_cannot_set_workflow_fields(self, customer_client, customer_user, other_customer, business_setup, line_payload):
        response = customer_client.post(
            ORDERS_URL,
            {
                "type": "pickup",
                "order_items": [line_payload],
                "customer": other_customer.id,
                "status": "client_confirmed",
                "payment_status": "paid",
                "vendor_cost": "10.00",
            },
            format="json",
        )

        assert response.status_code == 201
        order = Order.objects.get()
        assert order.customer == customer_user
        assert order.status == OrderStatus.QUOTE_PENDING
        assert order.payment_status == PaymentStatus.UNPAID
        assert order.vendor_cost == 0

    def test_staff_creates_for_customer(self, staff_client, customer_user, business_setup, line_payload):
        response = staff_client.post(
            ORDERS_URL,
            {
                "type": "pickup",
                "order_items": [line_payload],
                "customer": customer_user.id,
                "status": "quote_sent",
                "vendor_cost": "12.00",
            },
            format="json",
        )

        assert response.status_code == 201
        order = Order.objects.get()
        assert order.customer == customer_user
        assert order.status == OrderStatus.QUOTE_SENT
        assert order.vendor_cost == Decimal("12.00")

    def test_rejected_pricing(self, customer_client, business_setup, line_payload):
        response = customer_client.post(
            ORDERS_URL,
            {"type": "pickup", "manual_discount": "500", "order_items": [line_payload]},
            format="json",
        )

        assert response.status_code == 400
        assert response.data["code"] == "negative_grand_total"
        assert Order.objects.count() == 0

    def test_completed_unpaid(self, staff_client, business_setup, line_payload):
        response = staff_client.post(
            ORDERS_URL,
            {"type": "pickup", "status": "completed", "order_items": [line_payload]},
            format="json",
        )

        assert response.status_code == 400
        assert response.data["message"] == "Order status can't be completed until paid!"

    def test_sends_new_order_email(self, customer_client, business_setup, line_payload, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            customer_client.post(
                ORDERS_URL, {"type": "pickup", "order_items": [line_payload]}, format="json"
            )

        assert len(mail.outbox) == 1
        assert "KA00001" in mail.outbox[0].subject


@pytest.mark.django_db
class TestReadOrders:
    def test_customer_sees_only_own_orders(self, customer_client, pickup_order, other_order):
        response = customer_client.get(ORDERS_URL)

        assert response.status_code == 200
        numbers = [order["order_number"] for order in response.data["results"]]
        assert numbers == [pickup_order.order_number]

    def test_customer_cannot_read_other_order(self, customer_client, other_order):
        response = customer_client.get(detail_url(other_order))
        assert response.status_code == 404

    def test_staff_sees_everything(self, staff_client, pickup_order, other_order):
        response = staff_client.get(ORDERS_URL)
        assert response.data["count"] == 2

    def test_filter_by_status(self, staff_client, pickup_order, other_order):
        Order.objects.filter(pk=other_order.pk).update(status=OrderStatus.QUOTE_SENT)

        response = staff_client.get(ORDERS_URL, {"status": "quote_sent"})

        assert response.data["count"] == 1
        assert response.data["results"][0]["id"] == other_order.id

    def test_filter_by_order_type(self, staff_client, pickup_order, other_order):
        response = staff_client.get(ORDERS_URL, {"order_type": "dine_in"})
        assert [o["id"] for o in response.data["results"]] == [other_order.id]

    def test_filter_by_delivery_date(self, staff_client, pickup_order, other_order):
        Order.objects.filter(pk=pickup_order.pk).update(delivery_date="2026-11-02")

        response = staff_client.get(ORDERS_URL, {"delivery_date_from": "2026-11-01"})

        assert [o["id"] for o in response.data["results"]] == [pickup_order.id]

    def test_created_before_accepts_plain_date(self, staff_client, pickup_order, other_order):
        today = timezone.localdate().isoformat()

        response = staff_client.get(ORDERS_URL, {"created_before": today})

        assert response.data["count"] == 2

    def test_active_and_history_scopes(self, staff_client, pickup_order, delivery_order, other_order):
        Order.objects.filter(pk=delivery_order.pk).update(status=OrderStatus.OUT_FOR_DELIVERY)
        Order.objects.filter(pk=other_order.pk).update(status=OrderStatus.CANCELLED_BILLABLE)

        active = staff_client.get(ORDERS_URL, {"scope": "active"})
        history = staff_client.get(ORDERS_URL, {"scope": "history"})

        assert [o["id"] for o in active.data["results"]] == [pickup_order.id]
        assert {o["id"] for o in history.data["results"]} == {delivery_order.id, other_order.id}

    def test_unknown_scope(self, staff_client, pickup_order):
        response = staff_client.get(ORDERS_URL, {"scope": "archived"})
        assert response.status_code == 400

    def test_search_by_order_number(self, staff_client, pickup_order, other_order):
        response = staff_client.get(ORDERS_URL, {"search": other_order.order_number})
        assert [o["id"] for o in response.data["results"]] == [other_order.id]

    def test_nested_items(self, customer_client, pickup_order):
        response = customer_client.get(f"{detail_url(pickup_order)}items/")

        assert response.status_code == 200
        assert len(response.data) == 1
        assert Decimal(response.data[0]["grand_price"]) == Decimal("20.00")

    def test_nested_items_of_other_order(self, customer_client, other_order):
        response = customer_client.get(f"{detail_url(other_order)}items/")
        assert response.status_code == 200
        assert response.data == []


@pytest.mark.django_db
class TestUpdateOrder:
    def test_customer_cannot_update(self, customer_client, pickup_order, line_payload):
        response = customer_client.put(
            detail_url(pickup_order),
            {"type": "pickup", "payment_type": "cash", "status": "quote_pending", "order_items": [line_payload]},
            format="json",
        )

        assert response.status_code == 403
        assert response.data["success"] is False

    def test_full_update(self, staff_client, pickup_order, line_payload):
        response = staff_client.put(
            detail_url(pickup_order),
            {
                "type": "delivery",
                "payment_type": "card",
                "status": "quote_sent",
                "delivery_date": "2026-11-05",
                "order_items": [line_payload],
            },
            format="json",
        )

        assert response.status_code == 200
        assert response.data["message"] == "Order updated successfully"

        pickup_order.refresh_from_db()
        assert pickup_order.order_type == "delivery"
        assert pickup_order.payment_type == "card"
        assert pickup_order.delivery_charge == Decimal("25.00")
        assert pickup_order.grand_total == Decimal("50.00")
        assert pickup_order.revision == 1

    def test_delivery_requires_date(self, staff_client, pickup_order):
        response = staff_client.put(
            detail_url(pickup_order),
            {"type": "delivery", "payment_type": "cash", "status": "quote_pending"},
            format="json",
        )

        assert response.status_code == 400
        assert "delivery_date" in response.data["messages"]

    def test_update_without_items_reprices_stored_items(self, staff_client, pickup_order):
        response = staff_client.put(
            detail_url(pickup_order),
            {"type": "pickup", "payment_type": "cash", "status": "quote_pending", "manual_discount": "5"},
            format="json",
        )

        assert response.status_code == 200
        assert Decimal(response.data["content"]["grand_total"]) == Decimal("15.00")
        assert len(response.data["content"]["items"]) == 1


@pytest.mark.django_db
class TestStatusUpdate:
    def test_patch_status(self, staff_client, pickup_order):
        response = staff_client.patch(
            detail_url(pickup_order), {"status": "vendor_confirmed"}, format="json"
        )

        assert response.status_code == 200
        assert response.data["content"]["status"] == "vendor_confirmed"

    def test_complete_unpaid(self, staff_client, pickup_order):
        response = staff_client.patch(detail_url(pickup_order), {"status": "completed"}, format="json")

        assert response.status_code == 400
        assert response.data == {"success": False, "message": "Order status can't be completed until paid!"}

    def test_complete_and_pay_together(self, staff_client, pickup_order):
        response = staff_client.patch(
            detail_url(pickup_order), {"status": "completed", "payment_status": "paid"}, format="json"
        )
        assert response.status_code == 200

    def test_empty_patch(self, staff_client, pickup_order):
        response = staff_client.patch(detail_url(pickup_order), {}, format="json")
        assert response.status_code == 400

    def test_customer_cannot_patch(self, customer_client, pickup_order):
        response = customer_client.patch(detail_url(pickup_order), {"status": "quote_sent"}, format="json")
        assert response.status_code == 403


@pytest.mark.django_db
class TestDeleteOrder:
    def test_staff_delete(self, staff_client, pickup_order):
        response = staff_client.delete(detail_url(pickup_order))

        assert response.status_code == 200
        assert response.data == {"success": True, "message": "Order deleted successfully"}
        assert not Order.objects.exists()

    def test_customer_cannot_delete(self, customer_client, pickup_order):
        response = customer_client.delete(detail_url(pickup_order))

        assert response.status_code == 403
        assert Order.objects.exists()

    def test_missing_order(self, staff_client, business_setup):
        response = staff_client.delete(f"{ORDERS_URL}9999/")

        assert response.status_code == 404
        assert response.data["success"] is False


@pytest.mark.django_db
class TestBulkActions:
    def test_bulk_update(self, staff_client, pickup_order, other_order):
        response = staff_client.patch(
            BULK_UPDATE_URL,
            {"ids": [pickup_order.id, other_order.id], "payment_status": "payment_requested"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["count"] == 2
        assert response.data["message"] == "2 order(s) updated successfully"
        assert Order.objects.filter(payment_status=PaymentStatus.PAYMENT_REQUESTED).count() == 2

    def test_bulk_update_needs_a_field(self, staff_client, pickup_order):
        response = staff_client.patch(BULK_UPDATE_URL, {"ids": [pickup_order.id]}, format="json")
        assert response.status_code == 400

    def test_bulk_update_missing_order(self, staff_client, pickup_order):
        response = staff_client.patch(
            BULK_UPDATE_URL, {"ids": [pickup_order.id, 9999], "status": "quote_sent"}, format="json"
        )

        assert response.status_code == 400
        assert "9999" in response.data["message"]

    def test_bulk_delete(self, staff_client, pickup_order, other_order):
        response = staff_client.delete(
            BULK_DELETE_URL, {"ids": [pickup_order.id, other_order.id]}, format="json"
        )

        assert response.status_code == 200
        assert response.data["count"] == 2
        assert not Order.objects.exists()

    def test_bulk_is_staff_only(self, customer_client, pickup_order):
        response = customer_client.delete(BULK_DELETE_URL, {"ids": [pickup_order.id]}, format="json")

        assert response.status_code == 403
        assert Order.objects.exists()


@pytest.mark.django_db
class TestDuplicateOrder:
    def test_staff_duplicate(self, staff_client, pickup_order):
        OrderService.update_status(pickup_order, status=OrderStatus.CANCELLED_NOT_BILLABLE)

        response = staff_client.post(f"{detail_url(pickup_order)}duplicate/")

        assert response.status_code == 201
        assert response.data["message"] == "Order duplicated successfully"
        content = response.data["content"]
        assert content["id"] != pickup_order.id
        assert content["order_number"] == "KA00002"
        assert content["status"] == "quote_pending"
        assert content["payment_status"] == "unpaid"
        assert content["revision"] == 0
        assert Decimal(content["grand_total"]) == Decimal("20.00")
        assert len(content["items"]) == 1

    def test_customer_cannot_duplicate(self, customer_client, pickup_order):
        response = customer_client.post(f"{detail_url(pickup_order)}duplicate/")

        assert response.status_code == 403
        assert Order.objects.count() == 1

    def test_missing_order(self, staff_client, business_setup):
        response = staff_client.post(f"{ORDERS_URL}9999/duplicate/")
        assert response.status_code == 404


@pytest.mark.django_db
class TestStatusCounts:
    def test_staff_counts_every_order(self, staff_client, pickup_order, other_order):
        Order.objects.filter(pk=other_order.pk).update(status=OrderStatus.QUOTE_SENT)

        response = staff_client.get(STATUS_COUNTS_URL)

        assert response.status_code == 200
        assert response.data["quote_pending"] == 1
        assert response.data["quote_sent"] == 1
        assert response.data["completed"] == 0
        assert len(response.data) == len(OrderStatus.values)

    def test_customer_counts_own_orders(self, customer_client, pickup_order, other_order):
        response = customer_client.get(STATUS_COUNTS_URL)
        assert response.data["quote_pending"] == 1

    def test_timeframe(self, staff_client, pickup_order, other_order):
        Order.objects.filter(pk=other_order.pk).update(created_at=timezone.now() - timedelta(days=40))

        response = staff_client.get(STATUS_COUNTS_URL, {"timeframe": "month"})

        assert response.data["quote_pending"] == 1

    def test_unknown_timeframe(self, staff_client, business_setup):
        response = staff_client.get(STATUS_COUNTS_URL, {"timeframe": "decade"})

        assert response.status_code == 400
        assert response.data["success"] is False
