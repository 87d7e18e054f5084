from decimal import Decimal
from uuid import UUID
import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction

logger = logging.getLogger(__name__)

# Channels group every staff dashboard joins
ORDERS_GROUP = "orders"


class OrderEvent:
    CREATED = "order.created"
    STATUS_CHANGED = "order.statusChanged"
    PAYMENT_UPDATED = "order.paymentUpdated"
    DELETED = "order.deleted"


def convert_complex_types_to_str(data):
    """
    Recursively converts UUID and Decimal objects in a data structure to strings.
    """
    if isinstance(data, dict):
        return {k: convert_complex_types_to_str(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [convert_complex_types_to_str(elem) for elem in data]
    elif isinstance(data, UUID):
        return str(data)
    elif isinstance(data, Decimal):
        return str(data)
    return data


class OrderEventPublisher:
    """
    Centralized event publishing for order events.

    Events are sent only after the surrounding transaction commits, so
    listeners never see an order that was rolled back. Delivery is
    best-effort: failures are logged and never reach the caller.
    """

    @staticmethod
    def order_created(order):
        OrderEventPublisher._publish(OrderEvent.CREATED, order.pk)

    @staticmethod
    def order_status_changed(order):
        OrderEventPublisher._publish(OrderEvent.STATUS_CHANGED, order.pk)

    @staticmethod
    def order_payment_updated(order):
        OrderEventPublisher._publish(OrderEvent.PAYMENT_UPDATED, order.pk)

    @staticmethod
    def order_deleted(order_id):
        OrderEventPublisher._publish(OrderEvent.DELETED, order_id, deleted=True)

    @staticmethod
    def _publish(event: str, order_id, deleted: bool = False):
        try:
            logger.info(f"Publishing {event} event for order {order_id}")

            # Ensure the database transaction is committed before broadcasting
            if transaction.get_connection().in_atomic_block:
                transaction.on_commit(
                    lambda: OrderEventPublisher._send(event, order_id, deleted)
                )
            else:
                OrderEventPublisher._send(event, order_id, deleted)

        except Exception as e:
            logger.error(f"Error publishing {event} event: {e}")

    @staticmethod
    def _send(event: str, order_id, deleted: bool = False):
        """Actually send the event after transaction commit"""
        try:
            if deleted:
                data = {"id": str(order_id)}
            else:
                data = OrderEventPublisher._serialize(order_id)
                if data is None:
                    logger.warning(f"Order {order_id} no longer exists, skipping {event}")
                    return

            channel_layer = get_channel_layer()
            if not channel_layer:
                logger.warning(f"Channel layer not available. Cannot send {event}.")
                return

            async_to_sync(channel_layer.group_send)(
                ORDERS_GROUP,
                {"type": "order_event", "event": event, "data": data},
            )
        except Exception as e:
            logger.error(f"Error sending {event} for order {order_id}: {e}", exc_info=True)

    @staticmethod
    def _serialize(order_id):
        from orders.models import Order
        from orders.serializers import OrderSerializer

        order = (
            Order.objects.select_related("table", "staff")
            .prefetch_related("items__menu_item")
            .filter(pk=order_id)
            .first()
        )
        if order is None:
            return None
        return convert_complex_types_to_str(OrderSerializer(order).data)
