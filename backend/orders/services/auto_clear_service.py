from datetime import datetime
from typing import Optional
import logging

from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from orders.events import OrderEventPublisher
from orders.models import Order
from orders.state_machine import TERMINAL_STATUSES
from settings.config import OrderPolicy

logger = logging.getLogger(__name__)


class AutoClearService:
    """
    Cancels orders that missed their payment or approval deadline.

    Each rule is a single conditional UPDATE whose predicate includes
    ``auto_cleared=False`` and excludes terminal statuses, so overlapping or
    repeated sweeps never touch an order twice. One failing rule is logged
    and does not stop the others.
    """

    RULE_UNAPPROVED = "unapproved"
    RULE_NORMAL = "normal"
    RULE_CAKE = "cake"

    def __init__(self, policy: OrderPolicy):
        self.policy = policy

    def rule_filters(self, now: datetime) -> dict:
        """The matching predicate of every rule, keyed by rule name."""
        return {
            self.RULE_UNAPPROVED: Q(
                status=Order.OrderStatus.PENDING_APPROVAL,
                created_at__lt=now - self.policy.unapproved_window,
            ),
            self.RULE_NORMAL: Q(
                is_cake_order=False,
                payment_status=Order.PaymentStatus.PENDING,
                created_at__lt=now - self.policy.normal_order_window,
            ),
            self.RULE_CAKE: Q(
                is_cake_order=True,
                payment_status=Order.PaymentStatus.PENDING,
                down_payment_due_date__lt=now,
            ),
        }

    def preview(self, now: Optional[datetime] = None) -> dict:
        """Counts what ``sweep`` would clear without changing anything."""
        now = now or timezone.now()
        return {
            rule: Order.objects.filter(predicate, auto_cleared=False)
            .exclude(status__in=TERMINAL_STATUSES)
            .count()
            for rule, predicate in self.rule_filters(now).items()
        }

    def sweep(self, now: Optional[datetime] = None) -> dict:
        """
        Runs every rule once and returns the number of orders each one cleared.
        A rule that failed reports ``None``.

        Every order cleared by this sweep is broadcast as
        ``order.statusChanged`` so dashboards drop it without a reload.
        """
        now = now or timezone.now()
        counts = {}

        for rule, predicate in self.rule_filters(now).items():
            try:
                counts[rule] = self._apply_rule(rule, predicate, now)
            except Exception as e:
                logger.error(f"Auto-clear rule '{rule}' failed: {e}", exc_info=True)
                counts[rule] = None

        if any(counts.values()):
            self._broadcast_cleared(now)

        logger.info(f"Auto-clear sweep at {now.isoformat()} finished: {counts}")
        return counts

    @transaction.atomic
    def _apply_rule(self, rule: str, predicate: Q, now: datetime) -> int:
        cleared = (
            Order.objects.filter(predicate, auto_cleared=False)
            .exclude(status__in=TERMINAL_STATUSES)
            .update(
                status=Order.OrderStatus.CANCELLED,
                auto_cleared=True,
                auto_cleared_at=now,
                updated_at=now,
            )
        )
        if cleared:
            logger.info(f"Auto-clear rule '{rule}' cancelled {cleared} order(s)")
        return cleared

    @staticmethod
    def _broadcast_cleared(now: datetime):
        # auto_cleared_at is stamped with this sweep's own timestamp
        for order in Order.objects.filter(auto_cleared=True, auto_cleared_at=now).only("pk"):
            OrderEventPublisher.order_status_changed(order)
