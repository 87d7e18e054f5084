"""
Orders API Integration Tests

Tests the complete request/response cycle for order endpoints including:
- Public order placement and customer lookups
- Staff authentication on every other endpoint
- Serializer validation and service error rendering
- Status transition actions
- Dashboard statistics and the customer list
"""
import uuid
import pytest
from decimal import Decimal
from rest_framework import status

from menu.models import MenuCategory, MenuItem
from orders.models import Order
from orders.services import OrderService

S = Order.OrderStatus
P = Order.PaymentStatus

ORDERS_URL = "/api/orders/"


def order_url(order, action=None):
    url = f"{ORDERS_URL}{order.id}/"
    return f"{url}{action}/" if action else url


@pytest.fixture
def order_payload(latte, table):
    return {
        "customer_name": "Alice",
        "customer_phone": "0812000001",
        "table_id": str(table.id),
        "items": [
            {"menu_item_id": str(latte.id), "quantity": 2, "size_label": "Large"},
        ],
    }


@pytest.mark.django_db
class TestOrderPlacement:
    """Customers place orders without logging in"""

    def test_create_order(self, api_client, order_payload, cafe_settings):
        response = api_client.post(ORDERS_URL, order_payload, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["status"] == "PENDING"
        assert response.data["payment_status"] == "PENDING"
        assert response.data["total_amount"] == "11.00"
        assert response.data["table_number"] == "T1"
        assert response.data["order_number"].endswith("-001")
        assert response.data["items"][0]["size_label"] == "Large"
        assert Order.objects.count() == 1

    def test_second_order_of_the_day(self, api_client, order_payload, cafe_settings):
        api_client.post(ORDERS_URL, order_payload, format="json")
        response = api_client.post(ORDERS_URL, order_payload, format="json")
        assert response.data["order_number"].endswith("-002")

    def test_create_follows_approval_setting(self, api_client, order_payload, approval_required):
        response = api_client.post(ORDERS_URL, order_payload, format="json")
        assert response.data["status"] == "PENDING_APPROVAL"

    def test_cake_order(self, api_client, cafe_settings, table):
        cake = MenuItem.objects.create(
            name="Chocolate Cake", price=Decimal("100.00"), category=MenuCategory.CAKES
        )
        response = api_client.post(ORDERS_URL, {
            "customer_name": "Sam",
            "customer_phone": "0812000002",
            "items": [{"menu_item_id": str(cake.id), "quantity": 1}],
            "cake_pickup_date": "2030-01-05T10:00:00Z",
        }, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["is_cake_order"] is True
        assert response.data["down_payment_amount"] == "50.00"
        assert response.data["down_payment_due_date"] is not None

    def test_empty_items_rejected(self, api_client, order_payload, cafe_settings):
        order_payload["items"] = []
        response = api_client.post(ORDERS_URL, order_payload, format="json")
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "items" in response.data

    def test_inactive_table_rejected(self, api_client, order_payload, inactive_table, cafe_settings):
        order_payload["table_id"] = str(inactive_table.id)
        response = api_client.post(ORDERS_URL, order_payload, format="json")
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "table_id" in response.data

    def test_unknown_menu_item(self, api_client, order_payload, cafe_settings):
        order_payload["items"][0]["menu_item_id"] = str(uuid.uuid4())
        response = api_client.post(ORDERS_URL, order_payload, format="json")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["code"] == "menu_item_not_found"

    def test_insufficient_stock(self, api_client, order_payload, croissant, cafe_settings):
        order_payload["items"] = [{"menu_item_id": str(croissant.id), "quantity": 6}]

        response = api_client.post(ORDERS_URL, order_payload, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["code"] == "insufficient_stock"
        assert response.data["details"]["remaining"] == 5
        croissant.refresh_from_db()
        assert croissant.stock_qty == 5

    def test_unavailable_item(self, api_client, order_payload, unavailable_item, cafe_settings):
        order_payload["items"] = [{"menu_item_id": str(unavailable_item.id), "quantity": 1}]
        response = api_client.post(ORDERS_URL, order_payload, format="json")
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["code"] == "invalid_order_request"


@pytest.mark.django_db
class TestOrdersAPIAuthentication:

    def test_list_requires_staff(self, api_client):
        response = api_client.get(ORDERS_URL)
        assert response.status_code in [status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN]

    def test_transitions_require_staff(self, api_client, pending_order):
        response = api_client.patch(order_url(pending_order, "mark-paid"))
        assert response.status_code in [status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN]

    def test_list_orders(self, staff_client, make_order):
        make_order()
        make_order(customer_phone="0899999999")

        response = staff_client.get(ORDERS_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 2

    def test_filter_by_status_list(self, staff_client, make_order):
        OrderService.mark_as_paid(make_order())
        make_order()

        response = staff_client.get(ORDERS_URL, {"status": "WAITING,COOKING"})

        assert response.data["count"] == 1
        assert response.data["results"][0]["status"] == "WAITING"

    def test_delete_is_not_allowed(self, staff_client, pending_order):
        response = staff_client.delete(order_url(pending_order))
        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED


@pytest.mark.django_db
class TestStatusActions:

    def test_mark_paid_then_cancel_conflicts(self, staff_client, pending_order, staff_user):
        response = staff_client.patch(order_url(pending_order, "mark-paid"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["payment_status"] == "PAID"
        assert response.data["status"] == "WAITING"
        assert response.data["paid_at"] is not None
        assert response.data["staff_name"] == "Bea Barista"

        response = staff_client.post(order_url(pending_order, "cancel"))
        assert response.status_code == status.HTTP_409_CONFLICT
        assert "paid order" in response.data["error"]

    def test_update_status(self, staff_client, pending_order):
        OrderService.mark_as_paid(pending_order)

        response = staff_client.patch(
            order_url(pending_order, "status"), {"status": "COOKING"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["status"] == "COOKING"
        assert response.data["cooking_started_at"] is not None

    def test_invalid_transition(self, staff_client, pending_order):
        response = staff_client.patch(
            order_url(pending_order, "status"), {"status": "COMPLETED"}, format="json"
        )
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["code"] == "invalid_status_transition"

    def test_unknown_status_value(self, staff_client, pending_order):
        response = staff_client.patch(
            order_url(pending_order, "status"), {"status": "LOST"}, format="json"
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_approve_and_reject(self, staff_client, make_order, approval_policy):
        first = make_order(policy=approval_policy)
        second = make_order(policy=approval_policy)

        assert staff_client.patch(order_url(first, "approve")).data["status"] == "APPROVED"
        assert staff_client.patch(order_url(second, "reject")).data["status"] == "REJECTED"

        response = staff_client.patch(order_url(second, "approve"))
        assert response.status_code == status.HTTP_409_CONFLICT

    def test_unknown_order(self, staff_client):
        response = staff_client.patch(f"{ORDERS_URL}{uuid.uuid4()}/mark-paid/")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_full_update(self, staff_client, pending_order, croissant):
        response = staff_client.put(order_url(pending_order), {
            "customer_name": "Alicia",
            "items": [{"menu_item_id": str(croissant.id), "quantity": 2}],
        }, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["customer_name"] == "Alicia"
        assert response.data["total_amount"] == "6.50"
        assert len(response.data["items"]) == 1

    def test_kitchen_queue(self, staff_client, make_order):
        paid = OrderService.mark_as_paid(make_order())
        make_order()

        response = staff_client.get(f"{ORDERS_URL}kitchen/")

        assert [order["id"] for order in response.data] == [str(paid.id)]


@pytest.mark.django_db
class TestCustomerActions:

    def test_status_lookup_is_public(self, api_client, pending_order):
        response = api_client.post(f"{ORDERS_URL}status-lookup/", {
            "order_number": pending_order.order_number,
            "customer_phone": "0812000001",
        }, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["id"] == str(pending_order.id)

    def test_status_lookup_wrong_phone(self, api_client, pending_order):
        response = api_client.post(f"{ORDERS_URL}status-lookup/", {
            "order_number": pending_order.order_number,
            "customer_phone": "0800000000",
        }, format="json")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_clear_table(self, api_client, pending_order):
        OrderService.cancel_order(pending_order)

        response = api_client.post(f"{ORDERS_URL}clear-table/", {
            "order_number": pending_order.order_number,
            "customer_phone": "0812000001",
        }, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["table_cleared"] is True
        assert response.data["table"] is None

    def test_by_number(self, staff_client, pending_order):
        response = staff_client.get(f"{ORDERS_URL}number/{pending_order.order_number}/")
        assert response.data["id"] == str(pending_order.id)

    def test_by_customer(self, staff_client, make_order):
        make_order()
        make_order(customer_phone="0899999999")

        response = staff_client.get(f"{ORDERS_URL}customer/0812000001/")

        assert len(response.data) == 1


@pytest.mark.django_db
class TestReportingActions:

    def test_stats(self, staff_client, make_order):
        make_order()
        response = staff_client.get(f"{ORDERS_URL}stats/")
        assert response.data["today_orders"] == 1
        assert response.data["pending_orders"] == 1

    def test_kitchen_stats_and_analytics(self, staff_client, db):
        assert staff_client.get(f"{ORDERS_URL}kitchen-stats/").status_code == status.HTTP_200_OK
        assert staff_client.get(f"{ORDERS_URL}analytics/").status_code == status.HTTP_200_OK

    def test_customers(self, staff_client, make_order):
        make_order()
        response = staff_client.get(f"{ORDERS_URL}customers/")
        assert response.data[0]["phone"] == "0812000001"

    def test_customers_export(self, staff_client, make_order):
        make_order()

        response = staff_client.get(f"{ORDERS_URL}customers/export/")

        assert response.status_code == status.HTTP_200_OK
        assert response["Content-Type"] == "text/csv"
        assert "attachment" in response["Content-Disposition"]
        assert response.content.decode().startswith("Name,Phone,")

    def test_delete_customer(self, staff_client, make_order):
        make_order()

        response = staff_client.delete(f"{ORDERS_URL}customers/0812000001/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"deleted_orders": 1}
        assert Order.objects.count() == 0

    def test_delete_unknown_customer(self, staff_client, db):
        response = staff_client.delete(f"{ORDERS_URL}customers/0800000000/")
        assert response.status_code == status.HTTP_404_NOT_FOUND
