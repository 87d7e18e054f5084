"""
Order state machine.

An order's lifecycle position is the pair ``(status, payment_status)``. The
two move together: paying releases an order to the kitchen, and a paid order
cannot be cancelled. ``OrderState`` makes that pair explicit and every staff
action is expressed as a pure function from one ``OrderState`` to the next.
Persisting the result is the service layer's job (see
``OrderService._apply_transition``), which writes it with an UPDATE guarded
by the state the transition was computed from.

Status transition table::

    PENDING           -> PAID, PENDING_APPROVAL, CANCELLED
    PENDING_APPROVAL  -> APPROVED, REJECTED, CANCELLED
    APPROVED          -> WAITING, CANCELLED
    PAID              -> WAITING, CANCELLED
    WAITING           -> COOKING, CANCELLED
    COOKING           -> COMPLETED
    COMPLETED, CANCELLED, REJECTED are terminal

Payment rule: recording payment sets ``payment_status`` to PAID and moves
any order that has not reached the kitchen (PENDING, PENDING_APPROVAL,
APPROVED, PAID, WAITING) to WAITING. Payment is the gate into the kitchen,
not a way back out of it, so orders already COOKING or COMPLETED keep their
status. Closed orders (CANCELLED, REJECTED) cannot be paid: terminal
statuses have no exits, and an order cancelled by the unpaid-order sweeper
(``auto_cleared``) must stay terminal and never come back to the queue.
"""
from dataclasses import dataclass, replace

from .exceptions import InvalidStatusTransitionError, OrderConflictError
from .models import Order

OrderStatus = Order.OrderStatus
PaymentStatus = Order.PaymentStatus


VALID_STATUS_TRANSITIONS = {
    OrderStatus.PENDING: [
        OrderStatus.PAID,
        OrderStatus.PENDING_APPROVAL,
        OrderStatus.CANCELLED,
    ],
    OrderStatus.PENDING_APPROVAL: [
        OrderStatus.APPROVED,
        OrderStatus.REJECTED,
        OrderStatus.CANCELLED,
    ],
    OrderStatus.APPROVED: [OrderStatus.WAITING, OrderStatus.CANCELLED],
    OrderStatus.PAID: [OrderStatus.WAITING, OrderStatus.CANCELLED],
    OrderStatus.WAITING: [OrderStatus.COOKING, OrderStatus.CANCELLED],
    OrderStatus.COOKING: [OrderStatus.COMPLETED],
    OrderStatus.COMPLETED: [],
    OrderStatus.CANCELLED: [],
    OrderStatus.REJECTED: [],
}

TERMINAL_STATUSES = frozenset(
    {OrderStatus.COMPLETED, OrderStatus.CANCELLED, OrderStatus.REJECTED}
)

# Statuses in which the order has not reached the kitchen and can still be edited
EDITABLE_STATUSES = frozenset(
    {
        OrderStatus.PENDING,
        OrderStatus.PENDING_APPROVAL,
        OrderStatus.APPROVED,
        OrderStatus.PAID,
        OrderStatus.WAITING,
    }
)

# Payment releases these to the kitchen queue
RELEASED_ON_PAYMENT = EDITABLE_STATUSES

KITCHEN_STATUSES = (OrderStatus.WAITING, OrderStatus.COOKING)


def can_transition(from_status, to_status) -> bool:
    return to_status in VALID_STATUS_TRANSITIONS.get(from_status, [])


def validate_transition(from_status, to_status):
    if to_status not in OrderStatus.values:
        raise InvalidStatusTransitionError(
            from_status, to_status, message=f"'{to_status}' is not a valid order status."
        )
    if not can_transition(from_status, to_status):
        raise InvalidStatusTransitionError(from_status, to_status)


@dataclass(frozen=True)
class OrderState:
    status: str
    payment_status: str

    @classmethod
    def of(cls, order) -> "OrderState":
        return cls(status=order.status, payment_status=order.payment_status)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    def transition_to(self, new_status) -> "OrderState":
        """Plain status move along the transition table. Payment is untouched."""
        validate_transition(self.status, new_status)
        return replace(self, status=new_status)

    def pay(self) -> "OrderState":
        """Applies the payment rule described in the module docstring."""
        if self.is_paid:
            raise OrderConflictError(
                "Order is already paid",
                details={"status": self.status, "payment_status": self.payment_status},
            )
        if self.status in (OrderStatus.CANCELLED, OrderStatus.REJECTED):
            raise OrderConflictError(
                f"Cannot record payment for a {self.status.lower()} order",
                details={"status": self.status},
            )

        new_status = self.status
        if self.status in RELEASED_ON_PAYMENT:
            new_status = OrderStatus.WAITING
        return OrderState(status=new_status, payment_status=PaymentStatus.PAID)

    def approve(self) -> "OrderState":
        self._require_pending_approval(OrderStatus.APPROVED)
        return replace(self, status=OrderStatus.APPROVED)

    def reject(self) -> "OrderState":
        self._require_pending_approval(OrderStatus.REJECTED)
        return replace(self, status=OrderStatus.REJECTED)

    def cancel(self) -> "OrderState":
        if self.status == OrderStatus.COMPLETED:
            raise OrderConflictError(
                "Cannot cancel a completed order", details={"status": self.status}
            )
        if self.is_paid:
            raise OrderConflictError(
                "Must refund before cancelling a paid order",
                details={"status": self.status, "payment_status": self.payment_status},
            )
        return self.transition_to(OrderStatus.CANCELLED)

    def _require_pending_approval(self, target):
        if self.status != OrderStatus.PENDING_APPROVAL:
            raise InvalidStatusTransitionError(
                self.status,
                target,
                message=f"Only orders pending approval can be {target.lower()}",
            )
