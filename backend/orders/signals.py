from django.db import transaction
from django.dispatch import Signal
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
from channels.layers import get_channel_layer
from asgiref.sync import async_to_sync
from .models import Order
import logging

logger = logging.getLogger(__name__)

# Custom signals that other apps can listen to
order_created = Signal()  # kwargs: order
order_status_changed = Signal()  # kwargs: order, previous_status

ORDERS_GROUP = "orders"


def broadcast_orders_changed(action, order_id=None):
    """
    Tell connected back-office clients that the order list changed.
    The payload is a hint to refetch; it never carries order data.
    """
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return

    try:
        async_to_sync(channel_layer.group_send)(
            ORDERS_GROUP,
            {
                "type": "orders.changed",
                "success": True,
                "action": action,
                "order_id": order_id,
            },
        )
    except Exception as e:
        # A broadcast failure must not roll back the order write
        logger.error(f"Failed to broadcast order change ({action}): {e}")


# Broadcast only after commit: clients refetch on the hint and must see the
# order together with its items

@receiver(post_save, sender=Order)
def handle_order_saved(sender, instance, created, **kwargs):
    action = "created" if created else "updated"
    order_id = instance.pk
    transaction.on_commit(lambda: broadcast_orders_changed(action, order_id))


@receiver(post_delete, sender=Order)
def handle_order_deleted(sender, instance, **kwargs):
    order_id = instance.pk
    transaction.on_commit(lambda: broadcast_orders_changed("deleted", order_id))
