"""Notification API endpoints: compose, send, and track delivery results."""

import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from kombu.exceptions import OperationalError
from sqlalchemy.orm import Session

from pushhub.api.dependencies import get_current_client, get_push_client
from pushhub.database import get_db
from pushhub.models import Client
from pushhub.models.enums import NotificationStatus
from pushhub.schemas.common import MessageResponse, Pagination
from pushhub.schemas.notification import (
    NotificationCreate,
    NotificationListResponse,
    NotificationPreview,
    NotificationQueuedResponse,
    NotificationResponse,
    NotificationStats,
    NotificationStatsResponse,
)
from pushhub.services.notification_records import NotificationRecordStore
from pushhub.services.push_delivery import PushDeliveryClient
from pushhub.services.subscription_store import SubscriptionStore
from pushhub.tasks.dispatch import dispatch_notification

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    db: Annotated[Session, Depends(get_db)],
    client: Annotated[Client, Depends(get_current_client)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
):
    """Get the current client's notifications, newest first."""
    notifications, total = NotificationRecordStore(db).list_for_client(
        client.id, offset=(page - 1) * limit, limit=limit
    )
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/stats", response_model=NotificationStatsResponse)
async def get_notification_stats(
    db: Annotated[Session, Depends(get_db)],
    client: Annotated[Client, Depends(get_current_client)],
):
    """Get delivery statistics and the five most recent notifications."""
    records = NotificationRecordStore(db)
    counts = records.count_by_status(client.id)
    recent, total = records.list_for_client(client.id, limit=5)

    return NotificationStatsResponse(
        stats=NotificationStats(
            total_notifications=total,
            sent_notifications=counts[NotificationStatus.SENT.value],
            failed_notifications=counts[NotificationStatus.FAILED.value],
            pending_notifications=counts[NotificationStatus.PENDING.value],
            total_subscribers=SubscriptionStore(db).count_by_client(client.id),
        ),
        recent_notifications=[NotificationResponse.model_validate(n) for n in recent],
    )


@router.post(
    "/send",
    response_model=NotificationQueuedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def send_notification(
    notification_data: NotificationCreate,
    db: Annotated[Session, Depends(get_db)],
    client: Annotated[Client, Depends(get_current_client)],
    _push_client: Annotated[PushDeliveryClient, Depends(get_push_client)],
):
    """Queue a notification for delivery to every subscriber of the client.

    Returns as soon as the pending record exists; poll the notification to
    observe the final delivery counts.
    """
    subscriber_count = SubscriptionStore(db).count_by_client(client.id)
    if subscriber_count == 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No subscribers found. Add push subscriptions before sending notifications.",
        )

    records = NotificationRecordStore(db)
    notification = records.create_pending(
        client_id=client.id,
        title=notification_data.title,
        content=notification_data.content,
        recipient_count=subscriber_count,
        promo_image_url=notification_data.promo_image_url,
        target_url=notification_data.target_url,
    )

    try:
        dispatch_notification.delay(client.id, notification.id)
    except OperationalError as e:
        logger.error(f"Failed to queue notification {notification.id}: {e}")
        records.mark_failed(notification, "Failed to queue notification for dispatch")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notification could not be queued. Please try again later.",
        ) from e

    logger.info(
        f"Notification {notification.id} queued for {subscriber_count} subscribers "
        f"of client {client.id}"
    )
    return NotificationQueuedResponse(
        notification=NotificationResponse.model_validate(notification),
    )


@router.post("/preview", response_model=NotificationPreview)
async def preview_notification(
    notification_data: NotificationCreate,
    db: Annotated[Session, Depends(get_db)],
    client: Annotated[Client, Depends(get_current_client)],
):
    """Show how a notification would look without sending it."""
    subscriber_count = SubscriptionStore(db).count_by_client(client.id)
    return NotificationPreview(
        title=notification_data.title,
        content=notification_data.content,
        promo_image_url=notification_data.promo_image_url,
        target_url=notification_data.target_url,
        brand_logo_url=client.brand_logo_url,
        client_name=client.name,
        subscriber_count=subscriber_count,
        estimated_reach=subscriber_count,
        preview_timestamp=datetime.now(UTC),
    )


@router.get("/{notification_id}", response_model=NotificationResponse)
async def get_notification(
    notification_id: int,
    db: Annotated[Session, Depends(get_db)],
    client: Annotated[Client, Depends(get_current_client)],
):
    """Get a notification and its current delivery status."""
    notification = NotificationRecordStore(db).get_for_client(client.id, notification_id)
    if not notification:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return notification


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(
    notification_id: int,
    db: Annotated[Session, Depends(get_db)],
    client: Annotated[Client, Depends(get_current_client)],
):
    """Delete a notification record."""
    records = NotificationRecordStore(db)
    notification = records.get_for_client(client.id, notification_id)
    if not notification:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    records.delete(notification)
    return MessageResponse(message="Notification deleted successfully")
