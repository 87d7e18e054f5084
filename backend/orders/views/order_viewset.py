from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import MethodNotAllowed
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
import logging

from core_backend.base import BaseViewSet
from orders.filters import OrderFilter
from orders.models import Order
from orders.serializers import (
    OrderCreateSerializer,
    OrderSerializer,
    OrderUpdateSerializer,
)
from orders.services import OrderService
from settings.config import app_settings

from .customer_actions import CustomerActionsMixin
from .reporting_actions import ReportingActionsMixin
from .status_actions import StatusActionsMixin

logger = logging.getLogger(__name__)


class OrderViewSet(
    StatusActionsMixin,
    CustomerActionsMixin,
    ReportingActionsMixin,
    BaseViewSet,
):
    """
    ViewSet for café orders.

    This viewset combines multiple mixins to provide:
    - Status transitions (StatusActionsMixin)
    - Customer lookups and table clearing (CustomerActionsMixin)
    - Dashboard statistics and the customer list (ReportingActionsMixin)

    Placing an order is public (customers order from the table's QR page);
    everything else is for staff.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    search_fields = ["order_number", "customer_name", "customer_phone"]
    ordering_fields = ["created_at", "total_amount", "order_number"]
    ordering = ["-created_at", "-order_number"]
    lookup_value_regex = r"[0-9a-fA-F-]{36}"

    def get_permissions(self):
        if self.action == "create":
            return [AllowAny()]
        return super().get_permissions()

    def create(self, request, *args, **kwargs):
        """
        Validates the payload shape, then hands the order to OrderService,
        which does catalog checks, pricing, numbering and stock in one
        transaction. Returns the full order.
        """
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = OrderService.create_order(
            customer_name=data["customer_name"],
            customer_phone=data["customer_phone"],
            items=[dict(item) for item in data["items"]],
            table=data.get("table"),
            notes=data.get("notes", ""),
            language=data.get("language"),
            cake_pickup_date=data.get("cake_pickup_date"),
            cake_notes=data.get("cake_notes", ""),
            policy=app_settings.get_order_policy(),
        )

        response_serializer = OrderSerializer(order, context={"request": request})
        headers = self.get_success_headers(response_serializer.data)
        return Response(
            response_serializer.data, status=status.HTTP_201_CREATED, headers=headers
        )

    def update(self, request, *args, **kwargs):
        """
        Replaces customer fields and, when ``items`` is sent, the whole item
        set. Only allowed before cooking starts.
        """
        order = self.get_object()
        serializer = OrderUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        if "items" in data:
            data["items"] = [dict(item) for item in data["items"]]

        order = OrderService.update_order(
            order, data, policy=app_settings.get_order_policy()
        )
        return Response(OrderSerializer(order, context={"request": request}).data)

    def destroy(self, request, *args, **kwargs):
        # Orders are cancelled, never deleted individually
        raise MethodNotAllowed(request.method)

    @action(detail=False, methods=["get"], url_path="kitchen")
    def kitchen(self, request):
        """Paid orders in WAITING or COOKING, oldest first."""
        orders = OrderService.get_kitchen_orders()
        return Response(OrderSerializer(orders, many=True).data)
