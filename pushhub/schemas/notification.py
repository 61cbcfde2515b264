"""Notification schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from pushhub.schemas.common import Pagination
from pushhub.services.validation import sanitize_text, validate_target_url, validate_url

MAX_TITLE_LENGTH = 100
MAX_CONTENT_LENGTH = 500


class NotificationCreate(BaseModel):
    """Compose a notification for all of the client's subscribers."""

    title: str
    content: str
    promo_image_url: str | None = None
    target_url: str = "/"

    @field_validator("title")
    @classmethod
    def check_title(cls, value: str) -> str:
        return sanitize_text(value, "Title", 1, MAX_TITLE_LENGTH)

    @field_validator("content")
    @classmethod
    def check_content(cls, value: str) -> str:
        return sanitize_text(value, "Content", 1, MAX_CONTENT_LENGTH)

    @field_validator("promo_image_url")
    @classmethod
    def check_promo_image(cls, value: str | None) -> str | None:
        if not value:
            return None
        return validate_url(value)

    @field_validator("target_url")
    @classmethod
    def check_target_url(cls, value: str) -> str:
        if not value:
            return "/"
        return validate_target_url(value)


class NotificationResponse(BaseModel):
    """Notification record with its delivery status."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    client_id: int
    title: str
    content: str
    promo_image_url: str | None
    target_url: str
    status: str
    recipient_count: int
    success_count: int
    failure_count: int
    error_message: str | None
    created_at: datetime
    completed_at: datetime | None


class NotificationQueuedResponse(BaseModel):
    """Acknowledgement that a notification was queued for dispatch."""

    success: bool = True
    message: str = "Notification queued for sending"
    notification: NotificationResponse


class NotificationListResponse(BaseModel):
    """Paginated notification history."""

    notifications: list[NotificationResponse]
    pagination: Pagination


class NotificationStats(BaseModel):
    """Notification counts for a client."""

    total_notifications: int
    sent_notifications: int
    failed_notifications: int
    pending_notifications: int
    total_subscribers: int


class NotificationStatsResponse(BaseModel):
    """Notification statistics with the most recent notifications."""

    stats: NotificationStats
    recent_notifications: list[NotificationResponse]


class NotificationPreview(BaseModel):
    """How a notification would look and how many subscribers it would reach."""

    title: str
    content: str
    promo_image_url: str | None
    target_url: str
    brand_logo_url: str | None
    client_name: str
    subscriber_count: int
    estimated_reach: int
    preview_timestamp: datetime
