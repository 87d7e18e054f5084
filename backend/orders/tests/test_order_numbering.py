"""
Order number allocation tests.

Numbers look like ORD-YYYYMMDD-NNN, are scoped to the UTC day, and are made
unique by the database constraint with one retry on collision.
"""
import pytest
from datetime import datetime, timedelta, timezone as dt_timezone
from unittest.mock import patch
from django.db import IntegrityError
from django.utils import timezone

from orders.exceptions import OrderConflictError
from orders.models import Order
from orders.services import create_order_with_number, next_order_number
from orders.services.numbering import _is_order_number_collision, order_number_prefix


def today_prefix():
    return f"ORD-{timezone.now().astimezone(dt_timezone.utc):%Y%m%d}-"


def order_fields(**overrides):
    fields = {"customer_name": "Alice", "customer_phone": "0812000001"}
    fields.update(overrides)
    return fields


class TestOrderNumberFormat:

    def test_prefix_uses_utc_date(self):
        # 23:30 at UTC-05:00 is already the next day in UTC
        local = datetime(2025, 3, 14, 23, 30, tzinfo=dt_timezone(timedelta(hours=-5)))
        assert order_number_prefix(local) == "ORD-20250315-"

    def test_collision_detection(self):
        assert _is_order_number_collision(
            IntegrityError("UNIQUE constraint failed: orders_order.order_number")
        )
        assert _is_order_number_collision(
            IntegrityError(
                'duplicate key value violates unique constraint "orders_order_order_number_key"'
            )
        )
        assert not _is_order_number_collision(
            IntegrityError("CHECK constraint failed: order_down_payment_iff_cake")
        )


@pytest.mark.django_db
class TestOrderNumberSequence:

    def test_first_order_of_the_day(self, make_order):
        order = make_order()
        assert order.order_number == f"{today_prefix()}001"

    def test_second_order_of_the_day(self, make_order):
        make_order()
        second = make_order(customer_name="Bob", customer_phone="0812000002")
        assert second.order_number == f"{today_prefix()}002"

    def test_sequence_continues_from_latest_order(self):
        now = timezone.now()
        Order.objects.create(order_number=f"{today_prefix()}007", **order_fields())
        assert next_order_number(now) == f"{today_prefix()}008"

    def test_previous_days_do_not_count(self):
        now = timezone.now()
        yesterday = now - timedelta(days=1)
        Order.objects.create(
            order_number=f"{order_number_prefix(yesterday)}041",
            created_at=yesterday,
            **order_fields(),
        )
        assert next_order_number(now) == f"{today_prefix()}001"

    def test_sequence_grows_past_three_digits(self):
        Order.objects.create(order_number=f"{today_prefix()}999", **order_fields())
        assert next_order_number() == f"{today_prefix()}1000"

    def test_sequence_follows_highest_number_not_newest_row(self):
        now = timezone.now()
        create_order_with_number(**order_fields(created_at=now))
        # Slower request: built earlier, inserted later with the next number
        late = create_order_with_number(
            **order_fields(customer_name="Bob", created_at=now - timedelta(seconds=2))
        )
        assert late.order_number == f"{today_prefix()}002"

        order = create_order_with_number(
            **order_fields(customer_name="Cara", created_at=now + timedelta(seconds=1))
        )
        assert order.order_number == f"{today_prefix()}003"

    def test_service_keeps_accepting_orders_after_out_of_order_insert(self, make_order):
        now = timezone.now()
        Order.objects.create(order_number=f"{today_prefix()}001", created_at=now, **order_fields())
        Order.objects.create(
            order_number=f"{today_prefix()}002",
            created_at=now - timedelta(seconds=2),
            **order_fields(customer_name="Bob"),
        )

        order = make_order(customer_name="Cara", customer_phone="0812000003")
        assert order.order_number == f"{today_prefix()}003"

    def test_four_digit_sequence_sorts_above_three_digits(self):
        now = timezone.now()
        Order.objects.create(order_number=f"{today_prefix()}1000", created_at=now, **order_fields())
        Order.objects.create(
            order_number=f"{today_prefix()}999",
            created_at=now + timedelta(seconds=1),
            **order_fields(customer_name="Bob"),
        )
        assert next_order_number(now) == f"{today_prefix()}1001"

    def test_retries_once_after_collision(self):
        prefix = today_prefix()
        Order.objects.create(order_number=f"{prefix}001", **order_fields())

        with patch(
            "orders.services.numbering.next_order_number",
            side_effect=[f"{prefix}001", f"{prefix}002"],
        ):
            order = create_order_with_number(**order_fields(customer_name="Bob"))

        assert order.order_number == f"{prefix}002"
        assert Order.objects.count() == 2

    def test_gives_up_after_second_collision(self):
        prefix = today_prefix()
        Order.objects.create(order_number=f"{prefix}001", **order_fields())

        with patch(
            "orders.services.numbering.next_order_number",
            return_value=f"{prefix}001",
        ):
            with pytest.raises(OrderConflictError, match="unique order number"):
                create_order_with_number(**order_fields(customer_name="Bob"))

        assert Order.objects.count() == 1
