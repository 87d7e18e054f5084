import json
import logging

from channels.generic.websocket import AsyncWebsocketConsumer

from .events import ORDERS_GROUP

logger = logging.getLogger(__name__)


class OrderEventsConsumer(AsyncWebsocketConsumer):
    """
    Relays order events to connected dashboards.

    Every connection joins the ``orders`` group; the services publish into
    that group after each committed change (see ``OrderEventPublisher``).
    Messages go out as ``{"event": "order.created", "data": {...}}``.
    """

    async def connect(self):
        await self.channel_layer.group_add(ORDERS_GROUP, self.channel_name)
        await self.accept()
        logger.info(f"OrderEventsConsumer: {self.channel_name} joined group {ORDERS_GROUP}")

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(ORDERS_GROUP, self.channel_name)

    async def receive(self, text_data=None, bytes_data=None):
        # Clients only listen; a ping keeps idle connections alive through proxies
        try:
            data = json.loads(text_data or "{}")
        except json.JSONDecodeError:
            logger.warning("OrderEventsConsumer: ignoring malformed message")
            return

        if data.get("type") == "ping":
            await self.send(text_data=json.dumps({"type": "pong"}))

    async def order_event(self, event):
        """
        Handles the 'order_event' message from the channel layer and sends it to the client.
        """
        await self.send(
            text_data=json.dumps({"event": event["event"], "data": event["data"]})
        )
