"""Notification record lifecycle: pending -> sent | failed."""

import logging
from datetime import UTC, datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from pushhub.exceptions import InvalidStateTransitionError, NotificationNotFoundError
from pushhub.models import Notification
from pushhub.models.enums import NotificationStatus

logger = logging.getLogger(__name__)


class NotificationRecordStore:
    """Creates notification records and moves them to a terminal state exactly once."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def create_pending(
        self,
        client_id: int,
        title: str,
        content: str,
        recipient_count: int,
        promo_image_url: str | None = None,
        target_url: str = "/",
    ) -> Notification:
        """Persist a new notification in the pending state."""
        notification = Notification(
            client_id=client_id,
            title=title,
            content=content,
            promo_image_url=promo_image_url,
            target_url=target_url,
            status=NotificationStatus.PENDING.value,
            recipient_count=recipient_count,
            success_count=0,
            failure_count=0,
        )
        self.db.add(notification)
        self.db.commit()
        self.db.refresh(notification)
        return notification

    def get(self, notification_id: int) -> Notification:
        """Get a notification by ID.

        Raises:
            NotificationNotFoundError: If no such notification exists.
        """
        notification = self.db.get(Notification, notification_id)
        if notification is None:
            raise NotificationNotFoundError(notification_id)
        return notification

    def get_for_client(self, client_id: int, notification_id: int) -> Notification | None:
        """Get a notification only if it belongs to the client."""
        return (
            self.db.query(Notification)
            .filter(Notification.id == notification_id, Notification.client_id == client_id)
            .first()
        )

    def list_for_client(
        self, client_id: int, offset: int = 0, limit: int = 20
    ) -> tuple[list[Notification], int]:
        """Get a page of a client's notifications, newest first, and the total count."""
        query = self.db.query(Notification).filter(Notification.client_id == client_id)
        total = query.count()
        notifications = (
            query.order_by(Notification.created_at.desc(), Notification.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return notifications, total

    def count_by_status(self, client_id: int) -> dict[str, int]:
        """Count a client's notifications per lifecycle status."""
        rows = (
            self.db.query(Notification.status, func.count(Notification.id))
            .filter(Notification.client_id == client_id)
            .group_by(Notification.status)
            .all()
        )
        counts = {status.value: 0 for status in NotificationStatus}
        counts.update(dict(rows))
        return counts

    def delete(self, notification: Notification) -> None:
        """Administratively remove a notification record."""
        self.db.delete(notification)
        self.db.commit()

    def _check_pending(self, notification: Notification, target: NotificationStatus) -> None:
        if NotificationStatus(notification.status).is_terminal:
            raise InvalidStateTransitionError(notification.id, notification.status, target.value)

    def mark_sent(
        self,
        notification: Notification,
        recipient_count: int,
        success_count: int,
        failure_count: int,
    ) -> Notification:
        """Finalize a dispatch that ran to completion.

        Raises:
            InvalidStateTransitionError: If the record is already terminal.
            ValueError: If the counts do not add up to the recipient count.
        """
        self._check_pending(notification, NotificationStatus.SENT)
        if min(recipient_count, success_count, failure_count) < 0:
            raise ValueError("Delivery counts cannot be negative")
        if success_count + failure_count != recipient_count:
            raise ValueError(
                f"success ({success_count}) + failure ({failure_count}) "
                f"must equal recipients ({recipient_count})"
            )

        notification.status = NotificationStatus.SENT.value
        notification.recipient_count = recipient_count
        notification.success_count = success_count
        notification.failure_count = failure_count
        notification.completed_at = datetime.now(UTC)
        self.db.commit()
        self.db.refresh(notification)
        return notification

    def mark_failed(self, notification: Notification, error_message: str) -> Notification:
        """Finalize a dispatch that could not run.

        Delivery counts are left untouched.

        Raises:
            InvalidStateTransitionError: If the record is already terminal.
            ValueError: If no error message is given.
        """
        self._check_pending(notification, NotificationStatus.FAILED)
        if not error_message or not error_message.strip():
            raise ValueError("An error message is required to fail a notification")

        notification.status = NotificationStatus.FAILED.value
        notification.error_message = error_message
        notification.completed_at = datetime.now(UTC)
        self.db.commit()
        self.db.refresh(notification)
        logger.warning(f"Notification {notification.id} failed: {error_message}")
        return notification
