import re
import logging
from datetime import timezone as dt_timezone

from django.db import IntegrityError, transaction
from django.db.models.functions import Length
from django.utils import timezone

from orders.exceptions import OrderConflictError
from orders.models import Order

logger = logging.getLogger(__name__)

ORDER_NUMBER_PREFIX = "ORD"

# One initial attempt plus one retry after a unique-constraint collision
MAX_ALLOCATION_ATTEMPTS = 2


def order_number_prefix(now=None) -> str:
    """Returns today's prefix, e.g. ``ORD-20250314-``. The date is always UTC."""
    now = now or timezone.now()
    return f"{ORDER_NUMBER_PREFIX}-{now.astimezone(dt_timezone.utc):%Y%m%d}-"


def next_order_number(now=None) -> str:
    """
    Computes the next order number for the current UTC day.

    The sequence continues from the highest number already issued with
    today's prefix, whatever order the rows were created in. It is
    zero-padded to three digits and simply grows past 999. Uniqueness is not guaranteed here; the unique constraint on
    ``Order.order_number`` is the arbiter (see ``create_order_with_number``).
    """
    prefix = order_number_prefix(now)
    last_number = (
        Order.objects.filter(order_number__startswith=prefix)
        .order_by(Length("order_number").desc(), "-order_number")
        .values_list("order_number", flat=True)
        .first()
    )

    next_seq = 1
    if last_number:
        match = re.match(rf"^{re.escape(prefix)}(\d+)$", last_number)
        if match:
            next_seq = int(match.group(1)) + 1

    return f"{prefix}{next_seq:03d}"


def _is_order_number_collision(error: IntegrityError) -> bool:
    message = str(error).lower()
    return "order_number" in message and (
        "duplicate key value" in message or "unique constraint failed" in message
    )


def create_order_with_number(**fields) -> Order:
    """
    Inserts an Order with a freshly allocated number.

    Each insert runs in its own savepoint so a collision with a concurrent
    writer rolls back only the failed INSERT and leaves the caller's
    transaction usable for the retry.

    Raises:
        OrderConflictError: if the number is still taken after the retry.
    """
    now = fields.get("created_at") or timezone.now()

    for attempt in range(1, MAX_ALLOCATION_ATTEMPTS + 1):
        order_number = next_order_number(now)
        try:
            with transaction.atomic():
                return Order.objects.create(order_number=order_number, **fields)
        except IntegrityError as e:
            if not _is_order_number_collision(e):
                raise
            logger.warning(
                f"Order number {order_number} already taken (attempt {attempt}/{MAX_ALLOCATION_ATTEMPTS})"
            )

    raise OrderConflictError(
        "Could not allocate a unique order number, please retry",
        details={"order_number": order_number},
    )
