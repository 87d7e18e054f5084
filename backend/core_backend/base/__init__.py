"""
Shared building blocks for the API: the viewset every resource extends, its
query optimization and the common filter set.
"""

from .filters import BaseFilterSet, FlexibleDateTimeFilter
from .mixins import OptimizedQuerysetMixin
from .viewsets import BaseViewSet

__all__ = [
    "BaseViewSet",
    "BaseFilterSet",
    "FlexibleDateTimeFilter",
    "OptimizedQuerysetMixin",
]
