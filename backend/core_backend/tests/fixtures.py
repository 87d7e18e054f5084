"""
Shared test fixtures for all backend tests.

This module provides reusable pytest fixtures for common test objects
like staff users, tables, menu items and orders.
"""
import pytest
from decimal import Decimal
from django.contrib.auth import get_user_model

from menu.models import MenuCategory, MenuItem
from orders.models import Order
from orders.services import OrderService
from settings.config import OrderPolicy
from settings.models import CafeSettings, OrderApprovalMode
from tables.models import Table

User = get_user_model()


# ============================================================================
# USER FIXTURES
# ============================================================================

@pytest.fixture
def staff_user(db):
    """Create a café staff member"""
    return User.objects.create_user(
        username='barista',
        email='barista@cafe.test',
        password='password123',
        first_name='Bea',
        last_name='Barista',
        is_staff=True,
    )


# ============================================================================
# TABLE FIXTURES
# ============================================================================

@pytest.fixture
def table(db):
    """Create an active table"""
    return Table.objects.create(table_number='T1')


@pytest.fixture
def inactive_table(db):
    """Create a table taken out of service"""
    return Table.objects.create(table_number='T99', is_active=False)


# ============================================================================
# MENU FIXTURES
# ============================================================================

@pytest.fixture
def latte(db):
    """Create a drink with size variants ($4.50, Large $5.50)"""
    return MenuItem.objects.create(
        name='Latte',
        price=Decimal('4.50'),
        category=MenuCategory.DRINKS,
        sizes=[
            {'label': 'Regular', 'price': '4.50'},
            {'label': 'Large', 'price': '5.50'},
        ],
    )


@pytest.fixture
def croissant(db):
    """Create a cabinet food item with 5 units in stock"""
    return MenuItem.objects.create(
        name='Croissant',
        price=Decimal('3.25'),
        category=MenuCategory.CABINET_FOOD,
        stock_qty=5,
    )


@pytest.fixture
def cheesecake(db):
    """Create a whole cake ($45.00), which requires a down payment"""
    return MenuItem.objects.create(
        name='Basque Cheesecake',
        price=Decimal('45.00'),
        category=MenuCategory.CAKES,
    )


@pytest.fixture
def unavailable_item(db):
    """Create a menu item that is switched off"""
    return MenuItem.objects.create(
        name='Seasonal Tart',
        price=Decimal('6.00'),
        category=MenuCategory.SNACKS,
        is_available=False,
    )


# ============================================================================
# SETTINGS FIXTURES
# ============================================================================

@pytest.fixture
def direct_policy():
    """Orders go straight to PENDING; default auto-clear windows"""
    return OrderPolicy(
        approval_mode=OrderApprovalMode.DIRECT,
        normal_order_hours=Decimal('1'),
        cake_order_days=2,
        unapproved_minutes=30,
    )


@pytest.fixture
def approval_policy():
    """Orders wait in PENDING_APPROVAL for staff"""
    return OrderPolicy(
        approval_mode=OrderApprovalMode.REQUIRES_APPROVAL,
        normal_order_hours=Decimal('1'),
        cake_order_days=2,
        unapproved_minutes=30,
    )


@pytest.fixture
def cafe_settings(db):
    """The settings row with default values"""
    return CafeSettings.load()


@pytest.fixture
def approval_required(cafe_settings):
    """Switch the café to approval mode"""
    cafe_settings.order_approval_mode = OrderApprovalMode.REQUIRES_APPROVAL
    cafe_settings.save()
    return cafe_settings


# ============================================================================
# ORDER FIXTURES
# ============================================================================

@pytest.fixture
def make_order(db, latte, direct_policy):
    """
    Factory placing an order through OrderService.

    Usage:
        order = make_order()
        order = make_order(items=[{'menu_item_id': cake.id, 'quantity': 1}])
    """
    def _make_order(
        items=None,
        customer_name='Alice',
        customer_phone='0812000001',
        policy=None,
        **kwargs
    ):
        if items is None:
            items = [{'menu_item_id': latte.id, 'quantity': 2}]
        return OrderService.create_order(
            customer_name=customer_name,
            customer_phone=customer_phone,
            items=items,
            policy=policy or direct_policy,
            **kwargs
        )

    return _make_order


@pytest.fixture
def pending_order(make_order, table):
    """A PENDING, unpaid order for two lattes at table T1"""
    return make_order(table=table)


@pytest.fixture
def backdate():
    """
    Move an order's created_at into the past, bypassing the service layer.

    Usage:
        backdate(order, hours=2)
    """
    from datetime import timedelta

    def _backdate(order, **delta):
        Order.objects.filter(pk=order.pk).update(
            created_at=order.created_at - timedelta(**delta)
        )
        order.refresh_from_db()
        return order

    return _backdate
