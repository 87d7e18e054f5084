from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, viewsets

from ..pagination import StandardPagination
from .mixins import OptimizedQuerysetMixin


class BaseViewSet(OptimizedQuerysetMixin, viewsets.ModelViewSet):
    """
    ModelViewSet with the project's pagination and filter backends.

    Subclasses set ``filterset_class``, ``search_fields`` and
    ``ordering_fields``; joins come from the serializer Meta (see
    OptimizedQuerysetMixin).
    """

    pagination_class = StandardPagination
    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]
    ordering = ["-created_at"]
