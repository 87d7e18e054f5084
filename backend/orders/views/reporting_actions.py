from django.http import HttpResponse
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from orders.services import ReportingService


class ReportingActionsMixin:
    """
    Mixin for dashboard statistics and the customer list.
    """

    @action(detail=False, methods=["get"], url_path="stats")
    def stats(self, request: Request) -> Response:
        return Response(ReportingService.get_order_stats())

    @action(detail=False, methods=["get"], url_path="kitchen-stats")
    def kitchen_stats(self, request: Request) -> Response:
        return Response(ReportingService.get_kitchen_stats())

    @action(detail=False, methods=["get"], url_path="analytics")
    def analytics(self, request: Request) -> Response:
        return Response(ReportingService.get_analytics())

    @action(detail=False, methods=["get"], url_path="customers")
    def customers(self, request: Request) -> Response:
        return Response(ReportingService.get_all_customers())

    # Extra actions route in name order; this must sort before delete_customer
    @action(detail=False, methods=["get"], url_path="customers/export")
    def customers_export(self, request: Request) -> HttpResponse:
        filename = f"customers-{timezone.localdate():%Y%m%d}.csv"
        response = HttpResponse(
            ReportingService.export_customers_csv(), content_type="text/csv"
        )
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        return response

    @action(detail=False, methods=["delete"], url_path=r"customers/(?P<phone>[^/]+)")
    def delete_customer(self, request: Request, phone=None) -> Response:
        result = ReportingService.delete_customer_orders(phone)
        return Response(result, status=status.HTTP_200_OK)
