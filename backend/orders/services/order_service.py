from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone
import logging

from menu.services import CatalogService
from orders.events import OrderEventPublisher
from orders.exceptions import (
    InvalidOrderRequestError,
    OrderConflictError,
    OrderNotFoundError,
)
from orders.models import Order, OrderItem
from orders.state_machine import (
    EDITABLE_STATUSES,
    KITCHEN_STATUSES,
    TERMINAL_STATUSES,
    OrderState,
)
from settings.config import OrderPolicy, app_settings

from .builder import OrderBuilder, bounded_quantities
from .numbering import create_order_with_number

logger = logging.getLogger(__name__)


def _minutes_between(start, end):
    return int((end - start).total_seconds() // 60)


class OrderService:
    """Core service for order lifecycle management - creating, updating, and moving orders through their states."""

    # Customer-facing fields a full update may replace
    UPDATABLE_FIELDS = (
        "customer_name",
        "customer_phone",
        "language",
        "table",
        "notes",
        "cake_pickup_date",
        "cake_notes",
    )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @staticmethod
    def base_queryset():
        return Order.objects.select_related("table", "staff").prefetch_related(
            "items__menu_item"
        )

    @staticmethod
    def get_order(order_id) -> Order:
        try:
            return OrderService.base_queryset().get(pk=order_id)
        except (Order.DoesNotExist, ValidationError, ValueError):
            raise OrderNotFoundError(order_id)

    @staticmethod
    def get_order_by_number(order_number: str) -> Order:
        try:
            return OrderService.base_queryset().get(order_number=order_number)
        except Order.DoesNotExist:
            raise OrderNotFoundError(order_number)

    @staticmethod
    def get_orders_by_customer_phone(phone: str):
        return OrderService.base_queryset().filter(customer_phone=phone).order_by("-created_at")

    @staticmethod
    def get_kitchen_orders():
        """Paid orders waiting for or being cooked, oldest first."""
        return (
            OrderService.base_queryset()
            .filter(status__in=KITCHEN_STATUSES, payment_status=Order.PaymentStatus.PAID)
            .order_by("created_at")
        )

    @staticmethod
    def lookup_status(order_number: str, phone: str) -> Order:
        """
        Finds a customer's order that is still on their table, by order number
        and the phone it was placed with.
        """
        order = (
            OrderService.base_queryset()
            .filter(order_number=order_number, customer_phone=phone, table_cleared=False)
            .order_by("-created_at")
            .first()
        )
        if order is None:
            raise OrderNotFoundError(
                order_number, message="No active order found for this order number and phone"
            )
        return order

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    @staticmethod
    @transaction.atomic
    def create_order(
        customer_name: str,
        customer_phone: str,
        items,
        table=None,
        notes: str = "",
        language: str = Order.Language.EN,
        cake_pickup_date=None,
        cake_notes: str = "",
        policy: OrderPolicy = None,
    ) -> Order:
        """
        Validates, prices and persists a new order with its items, and
        decrements stock for bounded-stock lines, as one transaction.

        Any failure (validation, stock, number allocation) rolls back the
        order, its items and every decrement made so far. ``order.created``
        is broadcast once the transaction commits.
        """
        if not customer_name or not customer_phone:
            raise InvalidOrderRequestError("Customer name and phone are required")

        policy = policy or app_settings.get_order_policy()
        draft = OrderBuilder(policy).build(items)

        order = create_order_with_number(
            customer_name=customer_name,
            customer_phone=customer_phone,
            table=table,
            notes=notes or "",
            language=language or Order.Language.EN,
            cake_pickup_date=cake_pickup_date,
            cake_notes=cake_notes or "",
            **draft.order_fields(),
        )
        OrderService._create_items(order, draft.lines)

        for menu_item_id, quantity in draft.bounded_quantities.items():
            CatalogService.decrement_stock(menu_item_id, quantity)

        logger.info(
            f"Created order {order.order_number} ({order.status}) total={order.total_amount} "
            f"cake={order.is_cake_order} items={len(draft.lines)}"
        )
        OrderEventPublisher.order_created(order)
        return OrderService.get_order(order.pk)

    @staticmethod
    def _create_items(order, lines):
        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    menu_item=line.menu_item,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    subtotal=line.subtotal,
                    size_label=line.size_label,
                    notes=line.notes,
                    position=line.position,
                )
                for line in lines
            ]
        )

    # ------------------------------------------------------------------
    # Full update
    # ------------------------------------------------------------------

    @staticmethod
    @transaction.atomic
    def update_order(order: Order, data: dict, policy: OrderPolicy = None) -> Order:
        """
        Replaces customer fields and optionally the whole item set of an
        order that has not reached the kitchen yet.

        When ``items`` is given, the stock held by the old bounded-stock
        lines is returned first, then the new lines are validated, priced
        and decremented, so an unchanged order always fits. Totals and cake
        fields are recomputed from the new lines; ``created_at`` stays the
        anchor of the down-payment due date.
        """
        current = Order.objects.select_for_update().filter(pk=order.pk).first()
        if current is None:
            raise OrderNotFoundError(order.pk)
        if current.status not in EDITABLE_STATUSES:
            raise OrderConflictError(
                "Cannot edit an order after cooking has started or once it is closed",
                details={"status": current.status},
            )

        changes = {
            field: data[field] for field in OrderService.UPDATABLE_FIELDS if field in data
        }
        if "customer_name" in changes and not changes["customer_name"]:
            raise InvalidOrderRequestError("Customer name cannot be empty")
        if "customer_phone" in changes and not changes["customer_phone"]:
            raise InvalidOrderRequestError("Customer phone cannot be empty")

        items = data.get("items")
        if items is not None:
            old_lines = list(current.items.select_related("menu_item"))
            for item in old_lines:
                if item.menu_item.has_bounded_stock:
                    CatalogService.restore_stock(item.menu_item_id, item.quantity)

            builder = OrderBuilder(policy or app_settings.get_order_policy())
            lines = builder.build_lines(items)
            draft = builder.summarize(lines, created_at=current.created_at)

            current.items.all().delete()
            OrderService._create_items(current, lines)
            for menu_item_id, quantity in bounded_quantities(lines).items():
                CatalogService.decrement_stock(menu_item_id, quantity)

            changes.update(
                total_amount=draft.total_amount,
                is_cake_order=draft.is_cake_order,
                down_payment_amount=draft.down_payment_amount,
                down_payment_due_date=draft.down_payment_due_date,
            )

        for field, value in changes.items():
            setattr(current, field, value)
        current.save()

        logger.info(
            f"Updated order {current.order_number}: fields={sorted(changes)} items_replaced={items is not None}"
        )
        OrderEventPublisher.order_status_changed(current)
        return OrderService.get_order(current.pk)

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    @staticmethod
    def _apply_transition(order: Order, expected: OrderState, target: OrderState, **fields) -> Order:
        """
        Persists ``target`` only if the stored order still has the state
        ``expected``. A concurrent writer that got there first leaves the
        row untouched and this call raises OrderConflictError.
        """
        updated = Order.objects.filter(
            pk=order.pk,
            status=expected.status,
            payment_status=expected.payment_status,
        ).update(
            status=target.status,
            payment_status=target.payment_status,
            updated_at=timezone.now(),
            **fields,
        )
        if not updated:
            if not Order.objects.filter(pk=order.pk).exists():
                raise OrderNotFoundError(order.pk)
            raise OrderConflictError(
                f"Order {order.order_number} was modified by another request, please reload",
                details={
                    "expected_status": expected.status,
                    "expected_payment_status": expected.payment_status,
                },
            )

        logger.info(
            f"Order {order.order_number}: {expected.status}/{expected.payment_status} "
            f"-> {target.status}/{target.payment_status}"
        )
        return OrderService.get_order(order.pk)

    @staticmethod
    def _staff_fields(staff) -> dict:
        return {"staff": staff} if staff is not None else {}

    @staticmethod
    @transaction.atomic
    def update_status(order: Order, new_status: str, staff=None) -> Order:
        """
        Moves an order along the status table.

        Into COOKING stamps ``cooking_started_at`` and the preparation time;
        into COMPLETED stamps ``completed_at`` with the total and cooking
        times, all in whole minutes.
        """
        expected = OrderState.of(order)
        target = expected.transition_to(new_status)

        now = timezone.now()
        fields = OrderService._staff_fields(staff)
        if target.status == Order.OrderStatus.COOKING and order.cooking_started_at is None:
            fields["cooking_started_at"] = now
            fields["preparation_duration"] = _minutes_between(order.created_at, now)
        if target.status == Order.OrderStatus.COMPLETED:
            fields["completed_at"] = now
            fields["total_duration"] = _minutes_between(order.created_at, now)
            if order.cooking_started_at is not None:
                fields["cooking_duration"] = _minutes_between(order.cooking_started_at, now)

        order = OrderService._apply_transition(order, expected, target, **fields)
        OrderEventPublisher.order_status_changed(order)
        return order

    @staticmethod
    @transaction.atomic
    def mark_as_paid(order: Order, staff=None) -> Order:
        """Records payment and releases the order to the kitchen queue."""
        expected = OrderState.of(order)
        target = expected.pay()

        order = OrderService._apply_transition(
            order,
            expected,
            target,
            paid_at=timezone.now(),
            **OrderService._staff_fields(staff),
        )
        OrderEventPublisher.order_payment_updated(order)
        return order

    @staticmethod
    @transaction.atomic
    def approve_order(order: Order, staff=None) -> Order:
        expected = OrderState.of(order)
        order = OrderService._apply_transition(
            order, expected, expected.approve(), **OrderService._staff_fields(staff)
        )
        OrderEventPublisher.order_status_changed(order)
        return order

    @staticmethod
    @transaction.atomic
    def reject_order(order: Order, staff=None) -> Order:
        expected = OrderState.of(order)
        order = OrderService._apply_transition(
            order, expected, expected.reject(), **OrderService._staff_fields(staff)
        )
        OrderEventPublisher.order_status_changed(order)
        return order

    @staticmethod
    @transaction.atomic
    def cancel_order(order: Order, staff=None) -> Order:
        """
        Cancels an unpaid order. Completed orders and paid orders (which need
        a refund first) are rejected with OrderConflictError.
        """
        expected = OrderState.of(order)
        order = OrderService._apply_transition(
            order, expected, expected.cancel(), **OrderService._staff_fields(staff)
        )
        OrderEventPublisher.order_status_changed(order)
        return order

    @staticmethod
    @transaction.atomic
    def clear_table(order_number: str, phone: str) -> Order:
        """
        Releases the table of a closed order so the next guest can order
        against it. Only COMPLETED, CANCELLED or REJECTED orders qualify.
        """
        order = (
            Order.objects.filter(
                order_number=order_number,
                customer_phone=phone,
                status__in=TERMINAL_STATUSES,
                table_cleared=False,
            )
            .order_by("-created_at")
            .first()
        )
        if order is None:
            raise OrderNotFoundError(
                order_number, message="No completed or closed order found to clear for this order number and phone"
            )

        now = timezone.now()
        updated = Order.objects.filter(pk=order.pk, table_cleared=False).update(
            table_cleared=True, table_cleared_at=now, table=None, updated_at=now
        )
        if not updated:
            raise OrderConflictError(f"Table for order {order.order_number} was already cleared")

        logger.info(f"Cleared table for order {order.order_number}")
        order = OrderService.get_order(order.pk)
        OrderEventPublisher.order_status_changed(order)
        return order
