import json
import logging
from channels.generic.websocket import AsyncWebsocketConsumer

from .signals import ORDERS_GROUP

logger = logging.getLogger(__name__)


class OrdersConsumer(AsyncWebsocketConsumer):
    """
    Pushes "orders changed" hints to back-office screens so they can refetch
    the order list. Only staff users may subscribe.
    """

    async def connect(self):
        user = self.scope.get("user")
        if user is None or not user.is_authenticated or not user.is_staff:
            logger.warning("OrdersConsumer: rejected connection from non-staff user")
            await self.close(code=4003)
            return

        await self.channel_layer.group_add(ORDERS_GROUP, self.channel_name)
        await self.accept()
        logger.info(f"OrdersConsumer: {user} subscribed to order updates")

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(ORDERS_GROUP, self.channel_name)

    async def receive(self, text_data=None, bytes_data=None):
        # Clients only listen; anything they send is ignored.
        pass

    async def orders_changed(self, event):
        await self.send(
            text_data=json.dumps(
                {
                    "type": "orders_changed",
                    "success": event.get("success", True),
                    "action": event.get("action"),
                    "order_id": event.get("order_id"),
                }
            )
        )
