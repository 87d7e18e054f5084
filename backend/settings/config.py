"""
Centralized access to café business policy.

Business logic never queries CafeSettings directly: it asks ``app_settings``
for an immutable ``OrderPolicy`` and passes that into the order builder and
the auto-clear sweep. The policy is read per call, so a change saved in the
admin applies to the next order and the next sweep in every process.
"""

from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import Optional
import logging

from .models import OrderApprovalMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderPolicy:
    approval_mode: str = OrderApprovalMode.DIRECT
    normal_order_hours: Decimal = Decimal("1")
    cake_order_days: int = 2
    unapproved_minutes: int = 30

    @property
    def requires_approval(self) -> bool:
        return self.approval_mode == OrderApprovalMode.REQUIRES_APPROVAL

    @property
    def normal_order_window(self) -> timedelta:
        return timedelta(hours=float(self.normal_order_hours))

    @property
    def down_payment_window(self) -> timedelta:
        return timedelta(days=self.cake_order_days)

    @property
    def unapproved_window(self) -> timedelta:
        return timedelta(minutes=self.unapproved_minutes)


class AppSettings:
    """
    Singleton facade over the CafeSettings row. Importing it never touches
    the database, so ``migrate`` can run before the table exists.
    """

    _instance: Optional["AppSettings"] = None

    def __new__(cls) -> "AppSettings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def get_order_policy(self) -> OrderPolicy:
        from .models import CafeSettings

        settings_obj = CafeSettings.load()
        policy = OrderPolicy(
            approval_mode=settings_obj.order_approval_mode,
            normal_order_hours=settings_obj.normal_order_clear_hours,
            cake_order_days=settings_obj.cake_order_clear_days,
            unapproved_minutes=settings_obj.auto_clear_unapproved_minutes,
        )
        logger.debug(f"Loaded order policy: {policy}")
        return policy

    def get_order_approval_mode(self) -> str:
        return self.get_order_policy().approval_mode

    def get_auto_clear_windows(self) -> dict:
        policy = self.get_order_policy()
        return {
            "normal_order_hours": policy.normal_order_hours,
            "cake_order_days": policy.cake_order_days,
            "unapproved_minutes": policy.unapproved_minutes,
        }


app_settings = AppSettings()
