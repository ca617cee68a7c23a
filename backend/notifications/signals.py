from django.dispatch import receiver
import logging

from orders.signals import order_created, order_status_changed
from .services import EmailService

logger = logging.getLogger(__name__)


@receiver(order_created)
def handle_order_created(sender, order, **kwargs):
    """
    Send the new order email. EmailService logs delivery failures itself;
    anything else is logged here so the order request still succeeds.
    """
    try:
        EmailService().send_new_order_notification(order)
    except Exception as e:
        logger.error(
            f"Unexpected error sending new order email for Order #{order.order_number}: {e}"
        )


@receiver(order_status_changed)
def handle_order_status_changed(sender, order, previous_status=None, **kwargs):
    logger.info(
        f"Order #{order.order_number} moved from {previous_status} to {order.status}, notifying customer"
    )
    try:
        EmailService().send_order_status_notification(order)
    except Exception as e:
        logger.error(
            f"Unexpected error sending status email for Order #{order.order_number}: {e}"
        )
