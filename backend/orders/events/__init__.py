from .publishers import OrderEvent, OrderEventPublisher, ORDERS_GROUP

__all__ = ["OrderEvent", "OrderEventPublisher", "ORDERS_GROUP"]
