"""
Read-only aggregates for the staff dashboards, plus the customer list
derived from orders (customers have no table of their own).
"""
import csv
import io
import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

from django.db import transaction
from django.db.models import Avg, Count, Max, Min, Q, Sum
from django.db.models.functions import Coalesce, Extract
from django.utils import timezone

from orders.events import OrderEventPublisher
from orders.exceptions import OrderNotFoundError
from orders.models import Order
from orders.state_machine import KITCHEN_STATUSES

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")
CUSTOMER_CSV_HEADER = ["Name", "Phone", "First Order", "Last Order", "Total Orders", "Total Spent"]


def _start_of_day(now: datetime) -> datetime:
    local = timezone.localtime(now)
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


def _start_of_month(now: datetime) -> datetime:
    return _start_of_day(now).replace(day=1)


class ReportingService:
    @staticmethod
    def get_order_stats(now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Today's order count and paid revenue, unpaid orders and orders in
        the kitchen. "Today" starts at local midnight.
        """
        now = now or timezone.now()
        today = _start_of_day(now)
        todays = Order.objects.filter(created_at__gte=today)

        return {
            "today_orders": todays.count(),
            "today_revenue": todays.filter(payment_status=Order.PaymentStatus.PAID).aggregate(
                total=Coalesce(Sum("total_amount"), ZERO)
            )["total"],
            "pending_orders": Order.objects.filter(
                payment_status=Order.PaymentStatus.PENDING
            ).count(),
            "active_orders": Order.objects.filter(status__in=KITCHEN_STATUSES).count(),
        }

    @staticmethod
    def get_kitchen_stats(now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or timezone.now()
        today = _start_of_day(now)
        this_month = _start_of_month(now)
        last_month = _start_of_month(this_month - timedelta(days=1))

        completed = Order.objects.filter(status=Order.OrderStatus.COMPLETED)
        averages = completed.aggregate(
            cooking=Avg("cooking_duration"),
            preparation=Avg("preparation_duration"),
        )

        return {
            "orders_completed_today": completed.filter(completed_at__gte=today).count(),
            "orders_completed_this_month": completed.filter(completed_at__gte=this_month).count(),
            "orders_completed_last_month": completed.filter(
                completed_at__gte=last_month, completed_at__lt=this_month
            ).count(),
            "avg_cooking_minutes": round(averages["cooking"] or 0),
            "avg_preparation_minutes": round(averages["preparation"] or 0),
        }

    @staticmethod
    def get_analytics() -> Dict[str, Any]:
        """Revenue, table usage and busiest hours over completed, paid orders."""
        orders = Order.objects.filter(
            status=Order.OrderStatus.COMPLETED, payment_status=Order.PaymentStatus.PAID
        )
        totals = orders.aggregate(
            revenue=Coalesce(Sum("total_amount"), ZERO),
            count=Count("id"),
            cooking=Avg("cooking_duration"),
        )
        count = totals["count"]
        avg_order_value = (totals["revenue"] / count).quantize(Decimal("0.01")) if count else ZERO

        table_usage = [
            {"table_number": row["table__table_number"], "count": row["count"]}
            for row in orders.filter(table__isnull=False)
            .values("table__table_number")
            .annotate(count=Count("id"))
            .order_by("-count", "table__table_number")
        ]

        busiest_hours = [
            {"hour": row["hour"], "count": row["count"]}
            for row in orders.annotate(hour=Extract("created_at", "hour"))
            .values("hour")
            .annotate(count=Count("id"))
            .order_by("-count", "hour")[:5]
        ]

        return {
            "total_revenue": totals["revenue"],
            "avg_order_value": avg_order_value,
            "total_orders": count,
            "table_usage": table_usage,
            "busiest_hours": busiest_hours,
            "avg_cooking_minutes": round(totals["cooking"] or 0),
        }

    @staticmethod
    def get_all_customers() -> List[Dict[str, Any]]:
        """
        One row per distinct phone, most recently active first. The name is
        taken from the customer's latest order.
        """
        latest_names = dict(
            Order.objects.order_by("created_at").values_list("customer_phone", "customer_name")
        )
        rows = (
            Order.objects.order_by()
            .values("customer_phone")
            .annotate(
                first_order_date=Min("created_at"),
                last_order_date=Max("created_at"),
                order_count=Count("id"),
                total_spent=Coalesce(
                    Sum("total_amount", filter=Q(payment_status=Order.PaymentStatus.PAID)),
                    ZERO,
                ),
            )
            .order_by("-last_order_date")
        )
        return [
            {
                "name": latest_names.get(row["customer_phone"], ""),
                "phone": row["customer_phone"],
                "first_order_date": row["first_order_date"],
                "last_order_date": row["last_order_date"],
                "order_count": row["order_count"],
                "total_spent": row["total_spent"],
            }
            for row in rows
        ]

    @staticmethod
    def export_customers_csv() -> str:
        output = io.StringIO()
        writer = csv.writer(output, lineterminator="\n")
        writer.writerow(CUSTOMER_CSV_HEADER)
        for customer in ReportingService.get_all_customers():
            writer.writerow(
                [
                    customer["name"],
                    customer["phone"],
                    customer["first_order_date"].isoformat(),
                    customer["last_order_date"].isoformat(),
                    customer["order_count"],
                    customer["total_spent"],
                ]
            )
        return output.getvalue()

    @staticmethod
    @transaction.atomic
    def delete_customer_orders(phone: str) -> Dict[str, int]:
        """
        Deletes every order placed with ``phone`` and broadcasts
        ``order.deleted`` for each one after commit.
        """
        order_ids = list(Order.objects.filter(customer_phone=phone).values_list("pk", flat=True))
        if not order_ids:
            raise OrderNotFoundError(phone, message=f"No customer found with phone {phone}")

        Order.objects.filter(pk__in=order_ids).delete()
        for order_id in order_ids:
            OrderEventPublisher.order_deleted(order_id)

        logger.info(f"Deleted {len(order_ids)} order(s) for customer {phone}")
        return {"deleted_orders": len(order_ids)}
