"""
Orders services package - modular service layer for order management.

- OrderService: Core order lifecycle (create, update, status, payment, cancel)
- OrderBuilder: Catalog validation and pricing of requested lines
- AutoClearService: Scheduled cancellation of unpaid and unapproved orders
- ReportingService: Dashboard aggregates and customer list
- numbering: Order number allocation
"""

# Core order operations
from .order_service import OrderService

# Intake
from .builder import OrderBuilder, OrderDraft, OrderLine, calculate_down_payment

# Numbering
from .numbering import create_order_with_number, next_order_number

# Auto-clear sweep
from .auto_clear_service import AutoClearService

# Reporting
from .reporting_service import ReportingService

__all__ = [
    # Core
    'OrderService',
    # Intake
    'OrderBuilder',
    'OrderDraft',
    'OrderLine',
    'calculate_down_payment',
    # Numbering
    'create_order_with_number',
    'next_order_number',
    # Sweep
    'AutoClearService',
    # Reporting
    'ReportingService',
]
