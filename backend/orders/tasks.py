from celery import shared_task
import logging

logger = logging.getLogger(__name__)


@shared_task
def clear_unpaid_orders():
    """
    Cancel orders that missed their payment or approval deadline.

    This task runs every hour via Celery Beat. The windows come from the
    café settings at the time of the run.

    Returns:
        dict: Number of orders cleared per rule
    """
    from settings.config import app_settings
    from .services import AutoClearService

    try:
        policy = app_settings.get_order_policy()
        counts = AutoClearService(policy).sweep()

        total = sum(count for count in counts.values() if count)
        if not total:
            logger.info("No unpaid or unapproved orders to clear")
        else:
            logger.info(f"Auto-cleared {total} orders: {counts}")
        return counts

    except Exception as e:
        error_msg = f"Error clearing unpaid orders: {e}"
        logger.error(error_msg, exc_info=True)
        raise
