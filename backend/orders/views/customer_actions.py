from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
import logging

from orders.serializers import OrderLookupSerializer, OrderSerializer
from orders.services import OrderService

logger = logging.getLogger(__name__)


class CustomerActionsMixin:
    """
    Mixin for customer-facing actions

    Customers have no accounts: they find their order by order number plus
    the phone they ordered with, from the table's QR page.
    """

    @action(detail=False, methods=["get"], url_path=r"number/(?P<order_number>[^/]+)")
    def by_number(self, request: Request, order_number=None) -> Response:
        order = OrderService.get_order_by_number(order_number)
        return Response(OrderSerializer(order).data)

    @action(detail=False, methods=["get"], url_path=r"customer/(?P<phone>[^/]+)")
    def by_customer(self, request: Request, phone=None) -> Response:
        orders = OrderService.get_orders_by_customer_phone(phone)
        return Response(OrderSerializer(orders, many=True).data)

    @action(
        detail=False,
        methods=["post"],
        url_path="status-lookup",
        permission_classes=[AllowAny],
    )
    def status_lookup(self, request: Request) -> Response:
        serializer = OrderLookupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = OrderService.lookup_status(
            serializer.validated_data["order_number"],
            serializer.validated_data["customer_phone"],
        )
        return Response(OrderSerializer(order).data)

    @action(
        detail=False,
        methods=["post"],
        url_path="clear-table",
        permission_classes=[AllowAny],
    )
    def clear_table(self, request: Request) -> Response:
        """Frees the table once the customer's order is closed."""
        serializer = OrderLookupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = OrderService.clear_table(
            serializer.validated_data["order_number"],
            serializer.validated_data["customer_phone"],
        )
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)
