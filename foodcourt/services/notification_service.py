# foodcourt/services/notification_service.py
from typing import Any, Dict

from foodcourt.services.realtime import ConnectionDirectory, NotificationTransport
from foodcourt.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_STATUS_EVENT = "order_status_updated"


class NotificationService:
    """
    Fan-out of order status changes.

    Every subscriber gets the broadcast, the customer additionally gets the
    event on their private connection if they are connected right now.
    At-most-once, nothing is queued for offline customers, and a delivery
    failure never reaches the caller: the status change is already committed.
    """

    def __init__(self, transport: NotificationTransport, directory: ConnectionDirectory):
        self.transport = transport
        self.directory = directory

    def notify_status_change(self, order) -> Dict[str, Any]:
        payload = {
            "orderId": order.id,
            "status": order.status,
            "customerId": order.customer_id,
        }

        try:
            self.transport.broadcast(ORDER_STATUS_EVENT, payload)
        except Exception as e:
            logger.warning(f"[NOTIFICATION] Broadcast for order {order.id} failed: {e}")

        try:
            connection_id = self.directory.lookup(order.customer_id)
            if connection_id:
                self.transport.send_to_connection(connection_id, ORDER_STATUS_EVENT, payload)
                logger.info(f"[NOTIFICATION] User {order.customer_id}: order {order.id} is {order.status}")
            else:
                logger.info(f"[NOTIFICATION] User {order.customer_id} not connected, private event dropped")
        except Exception as e:
            logger.warning(f"[NOTIFICATION] Private delivery for order {order.id} failed: {e}")

        return payload
