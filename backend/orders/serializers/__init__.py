"""
Orders serializers package - modular serializer layer.
"""

# Order serializers
from .order_serializers import (
    OrderItemSerializer,
    OrderSerializer,
    OrderItemInputSerializer,
    OrderCreateSerializer,
    OrderUpdateSerializer,
    OrderLookupSerializer,
)

# Status serializers
from .status_serializers import UpdateOrderStatusSerializer

__all__ = [
    # Orders
    'OrderItemSerializer',
    'OrderSerializer',
    'OrderItemInputSerializer',
    'OrderCreateSerializer',
    'OrderUpdateSerializer',
    'OrderLookupSerializer',
    # Status
    'UpdateOrderStatusSerializer',
]
