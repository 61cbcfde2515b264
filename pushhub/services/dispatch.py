"""Dispatch engine: fan one notification out to every subscriber of a client."""

import asyncio
import json
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass

from sqlalchemy.orm import Session

from pushhub.config import get_settings
from pushhub.models import Client, Notification
from pushhub.models.enums import NotificationStatus
from pushhub.services.notification_records import NotificationRecordStore
from pushhub.services.push_delivery import (
    DeliveryOutcome,
    DeliveryResult,
    DeliveryTarget,
    PushDeliveryClient,
)
from pushhub.services.subscription_store import SubscriptionStore

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    """Summary of one dispatch, returned to the background worker."""

    notification_id: int
    status: str
    recipient_count: int = 0
    success_count: int = 0
    failure_count: int = 0
    removed_count: int = 0
    error: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


def build_payload(
    notification: Notification,
    client: Client | None,
    default_icon_url: str,
    timestamp_ms: int | None = None,
) -> dict:
    """Build the push message shown by the browser's service worker.

    The ``tag`` lets the browser collapse duplicate deliveries of the same
    notification.
    """
    timestamp_ms = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    brand_logo = client.brand_logo_url if client is not None else None
    return {
        "title": notification.title,
        "body": notification.content,
        "icon": brand_logo or default_icon_url,
        "badge": default_icon_url,
        "image": notification.promo_image_url,
        "data": {
            "clientId": notification.client_id,
            "notificationId": notification.id,
            "url": notification.target_url or "/",
            "timestamp": timestamp_ms,
        },
        "actions": [
            {"action": "view", "title": "View", "icon": default_icon_url},
            {"action": "close", "title": "Close"},
        ],
        "requireInteraction": False,
        "silent": False,
        "tag": f"notification-{notification.id}",
        "timestamp": timestamp_ms,
    }


class DispatchEngine:
    """Sends one notification to all current subscriptions of a client.

    Every subscriber gets exactly one delivery attempt. Attempts run
    concurrently and the engine waits for all of them to settle before pruning
    gone subscriptions and finalizing the notification record. Failures of a
    single subscriber never escape :meth:`dispatch`.
    """

    def __init__(
        self,
        db: Session,
        delivery_client: PushDeliveryClient,
        max_workers: int | None = None,
        default_icon_url: str | None = None,
    ) -> None:
        settings = get_settings()
        self.db = db
        self.delivery_client = delivery_client
        self.subscriptions = SubscriptionStore(db)
        self.records = NotificationRecordStore(db)
        self.max_workers = max_workers if max_workers is not None else settings.dispatch_max_workers
        self.default_icon_url = default_icon_url or settings.default_icon_url

    async def dispatch(self, client_id: int, notification_id: int) -> DispatchResult:
        """Run the fan-out for a pending notification.

        Raises:
            NotificationNotFoundError: If the notification record does not exist.
        """
        notification = self.records.get(notification_id)
        if notification.status != NotificationStatus.PENDING.value:
            logger.warning(
                f"Notification {notification_id} is already '{notification.status}', skipping"
            )
            return DispatchResult(notification_id, notification.status)

        try:
            client = self.db.get(Client, client_id)
            targets = [
                DeliveryTarget(sub.id, sub.endpoint, sub.p256dh_key, sub.auth_key)
                for sub in self.subscriptions.list_by_client(client_id)
            ]
            payload = json.dumps(build_payload(notification, client, self.default_icon_url))
        except Exception as e:
            logger.error(
                f"Could not prepare dispatch of notification {notification_id}: {e}",
                exc_info=True,
            )
            return self._fail(notification_id, notification, f"Failed to load subscribers: {e}")

        logger.info(
            f"Dispatching notification {notification_id} to {len(targets)} subscribers "
            f"of client {client_id}"
        )
        results = await self._deliver_all(targets, payload)

        success_count = sum(1 for r in results if r.outcome == DeliveryOutcome.SUCCESS)
        failure_count = len(results) - success_count
        gone_ids = [r.subscription_id for r in results if r.outcome == DeliveryOutcome.PERMANENT]

        try:
            removed_count = self.subscriptions.delete_by_ids(gone_ids)
            if removed_count:
                logger.info(f"Removed {removed_count} invalid subscriptions for client {client_id}")
            self.records.mark_sent(notification, len(targets), success_count, failure_count)
        except Exception as e:
            logger.error(f"Could not finalize notification {notification_id}: {e}", exc_info=True)
            return self._fail(
                notification_id, notification, f"Failed to record delivery results: {e}"
            )

        logger.info(
            f"Notification {notification_id} sent: {success_count} successful, "
            f"{failure_count} failed"
        )
        return DispatchResult(
            notification_id=notification_id,
            status=NotificationStatus.SENT.value,
            recipient_count=len(targets),
            success_count=success_count,
            failure_count=failure_count,
            removed_count=removed_count,
        )

    async def _deliver_all(
        self, targets: list[DeliveryTarget], payload: str
    ) -> list[DeliveryResult]:
        """Attempt every delivery concurrently and wait for all of them to settle."""
        if not targets:
            return []

        loop = asyncio.get_running_loop()
        workers = min(self.max_workers, len(targets)) if self.max_workers else len(targets)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="push") as pool:
            settled = await asyncio.gather(
                *(
                    loop.run_in_executor(pool, self.delivery_client.send, target, payload)
                    for target in targets
                ),
                return_exceptions=True,
            )

        results = []
        for target, outcome in zip(targets, settled, strict=True):
            if isinstance(outcome, BaseException):
                logger.error(
                    f"Unexpected error delivering to subscription {target.subscription_id}: "
                    f"{outcome!r}"
                )
                outcome = DeliveryResult(
                    target.subscription_id, DeliveryOutcome.TRANSIENT, error=str(outcome)
                )
            results.append(outcome)
        return results

    def _fail(
        self, notification_id: int, notification: Notification, message: str
    ) -> DispatchResult:
        # A failed statement leaves the session unusable until it is rolled back
        self.db.rollback()
        try:
            self.records.mark_failed(notification, message)
        except Exception as e:
            self.db.rollback()
            logger.error(
                f"Could not mark notification {notification_id} as failed: {e}", exc_info=True
            )
        return DispatchResult(
            notification_id=notification_id,
            status=NotificationStatus.FAILED.value,
            error=message,
        )
