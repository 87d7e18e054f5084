"""
Order builder tests: validation and pricing of requested lines before
anything is persisted.
"""
import uuid
import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone

from menu.models import MenuCategory, MenuItem
from orders.exceptions import (
    InsufficientStockError,
    InvalidOrderRequestError,
    MenuItemNotFoundError,
)
from orders.models import Order
from orders.services import OrderBuilder, calculate_down_payment


class TestDownPayment:

    @pytest.mark.parametrize("total,expected", [
        (Decimal("100.00"), Decimal("50.00")),
        (Decimal("45.00"), Decimal("22.50")),
        (Decimal("0.05"), Decimal("0.03")),
        (Decimal("12.35"), Decimal("6.18")),
    ])
    def test_half_rounded_half_up(self, total, expected):
        assert calculate_down_payment(total) == expected


@pytest.mark.django_db
class TestOrderBuilder:

    def test_prices_lines_from_catalog(self, direct_policy):
        """2 x 5.00 + 1 x 3.00 totals 13.00"""
        tea = MenuItem.objects.create(name="Tea", price=Decimal("5.00"))
        cookie = MenuItem.objects.create(
            name="Cookie", price=Decimal("3.00"), category=MenuCategory.SNACKS
        )

        draft = OrderBuilder(direct_policy).build([
            {"menu_item_id": tea.id, "quantity": 2},
            {"menu_item_id": cookie.id, "quantity": 1, "notes": "warm please"},
        ])

        assert draft.total_amount == Decimal("13.00")
        assert [line.subtotal for line in draft.lines] == [Decimal("10.00"), Decimal("3.00")]
        assert draft.lines[1].notes == "warm please"
        assert draft.status == Order.OrderStatus.PENDING
        assert draft.is_cake_order is False
        assert draft.down_payment_amount is None
        assert draft.down_payment_due_date is None

    def test_size_label_selects_variant_price(self, direct_policy, latte):
        draft = OrderBuilder(direct_policy).build([
            {"menu_item_id": latte.id, "quantity": 2, "size_label": "Large"},
        ])
        assert draft.lines[0].unit_price == Decimal("5.50")
        assert draft.total_amount == Decimal("11.00")

    def test_unknown_size_is_rejected(self, direct_policy, latte):
        with pytest.raises(InvalidOrderRequestError, match="no size"):
            OrderBuilder(direct_policy).build([
                {"menu_item_id": latte.id, "quantity": 1, "size_label": "Bucket"},
            ])

    def test_approval_mode_starts_in_pending_approval(self, approval_policy, latte):
        draft = OrderBuilder(approval_policy).build([{"menu_item_id": latte.id, "quantity": 1}])
        assert draft.status == Order.OrderStatus.PENDING_APPROVAL

    def test_cake_order_gets_down_payment(self, direct_policy, cheesecake, latte):
        now = timezone.now()
        draft = OrderBuilder(direct_policy).build(
            [
                {"menu_item_id": cheesecake.id, "quantity": 2},
                {"menu_item_id": latte.id, "quantity": 1},
            ],
            now=now,
        )
        assert draft.is_cake_order is True
        assert draft.total_amount == Decimal("94.50")
        assert draft.down_payment_amount == Decimal("47.25")
        assert draft.down_payment_due_date == now + timedelta(days=2)

    def test_empty_item_list_is_rejected(self, direct_policy):
        with pytest.raises(InvalidOrderRequestError, match="at least one item"):
            OrderBuilder(direct_policy).build([])

    def test_missing_menu_item_id(self, direct_policy):
        with pytest.raises(InvalidOrderRequestError, match="missing a menu item"):
            OrderBuilder(direct_policy).build([{"quantity": 1}])

    def test_unknown_menu_item(self, direct_policy):
        missing_id = uuid.uuid4()
        with pytest.raises(MenuItemNotFoundError) as exc_info:
            OrderBuilder(direct_policy).build([{"menu_item_id": missing_id, "quantity": 1}])
        assert exc_info.value.details == {"menu_item_id": str(missing_id)}

    def test_unavailable_item(self, direct_policy, unavailable_item):
        with pytest.raises(InvalidOrderRequestError, match="unavailable"):
            OrderBuilder(direct_policy).build([{"menu_item_id": unavailable_item.id, "quantity": 1}])

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, "two", None, True])
    def test_bad_quantities(self, direct_policy, latte, quantity):
        with pytest.raises(InvalidOrderRequestError, match="Quantity"):
            OrderBuilder(direct_policy).build([{"menu_item_id": latte.id, "quantity": quantity}])

    def test_stock_is_checked_across_lines(self, direct_policy, croissant):
        """Two lines of 3 exceed the 5 in stock even though each line fits"""
        with pytest.raises(InsufficientStockError) as exc_info:
            OrderBuilder(direct_policy).build([
                {"menu_item_id": croissant.id, "quantity": 3},
                {"menu_item_id": croissant.id, "quantity": 3, "notes": "heated"},
            ])
        assert exc_info.value.requested == 6
        assert exc_info.value.remaining == 5

    def test_bounded_quantities_only_counts_cabinet_food(self, direct_policy, croissant, latte):
        draft = OrderBuilder(direct_policy).build([
            {"menu_item_id": croissant.id, "quantity": 2},
            {"menu_item_id": latte.id, "quantity": 4},
            {"menu_item_id": croissant.id, "quantity": 1},
        ])
        assert draft.bounded_quantities == {croissant.id: 3}

    def test_builder_does_not_touch_stock(self, direct_policy, croissant):
        OrderBuilder(direct_policy).build([{"menu_item_id": croissant.id, "quantity": 2}])
        croissant.refresh_from_db()
        assert croissant.stock_qty == 5
