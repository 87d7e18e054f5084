import django_filters
from core_backend.base.filters import BaseFilterSet, FlexibleDateTimeFilter
from .models import Order


class CharInFilter(django_filters.BaseInFilter, django_filters.CharFilter):
    pass


class OrderFilter(BaseFilterSet):
    """
    Filters for the order list.

    ``status`` and ``payment_status`` accept a comma-separated list
    (``?status=WAITING,COOKING``). Date filters accept date-only values,
    which cover the whole day.
    """

    status = CharInFilter(field_name='status', lookup_expr='in')
    payment_status = CharInFilter(field_name='payment_status', lookup_expr='in')
    customer_phone = django_filters.CharFilter(field_name='customer_phone')
    order_number = django_filters.CharFilter(field_name='order_number', lookup_expr='iexact')
    table = django_filters.UUIDFilter(field_name='table_id')

    completed_after = FlexibleDateTimeFilter(field_name='completed_at', lookup_expr='gte')
    completed_before = FlexibleDateTimeFilter(field_name='completed_at', lookup_expr='lte')

    class Meta:
        model = Order
        fields = [
            'status',
            'payment_status',
            'customer_phone',
            'order_number',
            'is_cake_order',
            'auto_cleared',
            'table',
        ]
