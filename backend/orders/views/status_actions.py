from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
import logging

from orders.serializers import OrderSerializer, UpdateOrderStatusSerializer
from orders.services import OrderService

logger = logging.getLogger(__name__)


class StatusActionsMixin:
    """
    Mixin for order status transition actions

    This mixin provides action methods for OrderViewSet. Illegal transitions
    raise service errors that the exception handler renders as 409.
    """

    @action(detail=True, methods=["patch"], url_path="status")
    def update_status(self, request: Request, pk=None) -> Response:
        """
        Updates the status of an order, ensuring valid transitions via OrderService.
        """
        order = self.get_object()
        serializer = UpdateOrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = OrderService.update_status(
            order, serializer.validated_data["status"], staff=self._acting_staff(request)
        )
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["patch"], url_path="mark-paid")
    def mark_paid(self, request: Request, pk=None) -> Response:
        """Records payment and sends the order to the kitchen queue."""
        return self._handle_status_change(request, OrderService.mark_as_paid)

    @action(detail=True, methods=["patch"], url_path="approve")
    def approve(self, request: Request, pk=None) -> Response:
        return self._handle_status_change(request, OrderService.approve_order)

    @action(detail=True, methods=["patch"], url_path="reject")
    def reject(self, request: Request, pk=None) -> Response:
        return self._handle_status_change(request, OrderService.reject_order)

    @action(detail=True, methods=["post"], url_path="cancel")
    def cancel(self, request: Request, pk=None) -> Response:
        """Cancels the order."""
        return self._handle_status_change(request, OrderService.cancel_order)

    def _handle_status_change(self, request: Request, service_method) -> Response:
        """Generic handler for status-changing actions."""
        order = self.get_object()
        order = service_method(order, staff=self._acting_staff(request))
        return Response(OrderSerializer(order).data)

    @staticmethod
    def _acting_staff(request: Request):
        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated:
            return user
        return None
