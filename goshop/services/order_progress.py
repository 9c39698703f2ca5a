"""Simulated delivery progress for freshly placed orders.

Timings are illustrative only; nothing in the core depends on them.
"""
import logging
from flask import current_app, has_app_context

from goshop.models import OrderStatus
from goshop.signals import order_placed

logger = logging.getLogger(__name__)

PROGRESS_STEPS = (
    (OrderStatus.CONFIRMED, 2),
    (OrderStatus.PREPARING, 10),
    (OrderStatus.OUT_FOR_DELIVERY, 20),
    (OrderStatus.DELIVERED, 30),
)


def schedule_progress(order_id: str) -> None:
    from goshop.tasks.orders import advance_order_status_task

    for status, delay in PROGRESS_STEPS:
        advance_order_status_task.apply_async((order_id, status.value), countdown=delay)
    logger.info("order %s: progress scheduled", order_id)


@order_placed.connect
def _on_order_placed(order, **kwargs):
    if not has_app_context() or not current_app.config.get("ORDER_PROGRESS_ENABLED"):
        return
    schedule_progress(order.id)
