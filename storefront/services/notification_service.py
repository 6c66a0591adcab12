# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Customer notifications.
    Delivered through Celery so checkout never waits on them.
    """

    @staticmethod
    def send_order_notification(order_id: int, order_number: str, owner: str):
        """
        Queues the "order placed" notification. Broker problems are logged,
        the order is already committed at this point.
        """
        try:
            send_order_notification_task.delay(order_id, order_number, owner)
        except Exception as e:
            logger.error(f"Could not queue notification for order {order_id}: {e}")


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(order_id: int, order_number: str, owner: str):
    """
    Celery task, a real deployment would send an e-mail here.
    For now it only logs.
    """
    logger.info(f"[NOTIFICATION] {owner}: order {order_number} (id {order_id}) has been placed")

    return {"order_id": order_id, "order_number": order_number, "owner": owner, "status": "sent"}
