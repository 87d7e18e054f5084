from datetime import datetime, time
import logging

import django_filters
from django.utils import timezone

logger = logging.getLogger(__name__)


class FlexibleDateTimeFilter(django_filters.DateTimeFilter):
    """
    Accepts a bare date as well as a datetime. Upper bounds given as a date
    (``completed_before=2025-03-14``) cover that whole day.
    """

    def filter(self, qs, value):
        is_bare_date = isinstance(value, datetime) and value.time() == time.min
        if is_bare_date and self.lookup_expr in ("lt", "lte"):
            value = datetime.combine(value.date(), time.max, tzinfo=value.tzinfo)
            if timezone.is_naive(value):
                value = timezone.make_aware(value)
            logger.debug(f"Extended {self.field_name}__{self.lookup_expr} to end of day: {value}")
        return super().filter(qs, value)


class BaseFilterSet(django_filters.FilterSet):
    """Filter set with a ``created_after`` / ``created_before`` range on every resource."""

    created_after = FlexibleDateTimeFilter(field_name="created_at", lookup_expr="gte")
    created_before = FlexibleDateTimeFilter(field_name="created_at", lookup_expr="lte")
