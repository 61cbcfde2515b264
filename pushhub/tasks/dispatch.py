"""Celery task running notification dispatch outside the request cycle."""

import asyncio
import logging

from sqlalchemy.orm import Session

from pushhub.celery_app import app as celery_app
from pushhub.database import SessionLocal
from pushhub.exceptions import NotificationNotFoundError, PushNotConfiguredError
from pushhub.services.dispatch import DispatchEngine
from pushhub.services.notification_records import NotificationRecordStore
from pushhub.services.push_delivery import get_push_delivery_client

logger = logging.getLogger(__name__)


@celery_app.task(name="tasks.dispatch_notification")
def dispatch_notification(client_id: int, notification_id: int) -> dict:
    """Send a pending notification to all subscribers of its client.

    Only ids cross the queue; the task opens its own session so nothing tied
    to the originating request outlives it.

    Args:
        client_id: ID of the client (tenant) sending the notification
        notification_id: ID of the pending Notification record

    Returns:
        dict with the dispatch result
    """
    db: Session = SessionLocal()
    try:
        try:
            delivery_client = get_push_delivery_client()
        except PushNotConfiguredError as e:
            logger.error(f"Cannot dispatch notification {notification_id}: {e}")
            records = NotificationRecordStore(db)
            records.mark_failed(records.get(notification_id), f"Push delivery not configured: {e}")
            return {"error": str(e)}

        engine = DispatchEngine(db, delivery_client)
        result = asyncio.run(engine.dispatch(client_id, notification_id))
        return result.to_dict()

    except NotificationNotFoundError as e:
        logger.error(str(e))
        return {"error": "Notification not found"}

    except Exception as e:
        logger.error(f"Error dispatching notification {notification_id}: {e}", exc_info=True)
        db.rollback()
        return {"error": str(e)}

    finally:
        db.close()
