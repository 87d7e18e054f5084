"""
Order views. ``OrderViewSet`` is assembled from action mixins grouped by
audience: staff status changes, customer self-service and reporting.
"""

from .order_viewset import OrderViewSet

__all__ = ["OrderViewSet"]
