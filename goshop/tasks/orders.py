import logging
from celery import shared_task
from flask import current_app, has_app_context

from goshop.services.errors import InvalidTransition, OrderNotFound

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=0)
def advance_order_status_task(self, order_id: str, status: str) -> bool:
    """Move an order one step along its delivery lifecycle."""
    if not has_app_context():
        logger.warning("order %s: no app context, cannot reach the store", order_id)
        return False
    checkout = current_app.extensions["goshop"].checkout
    try:
        checkout.advance_status(order_id, status)
    except (InvalidTransition, OrderNotFound) as exc:
        # cancelled or unknown orders simply stop progressing
        logger.info("order %s: skipped %s (%s)", order_id, status, exc)
        return False
    return True
