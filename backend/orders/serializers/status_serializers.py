from rest_framework import serializers
from orders.models import Order


class UpdateOrderStatusSerializer(serializers.Serializer):
    """
    Serializer specifically for validating an order status change request.
    Whether the transition is legal is decided by the state machine.
    """

    status = serializers.ChoiceField(choices=Order.OrderStatus.choices)
