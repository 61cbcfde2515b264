"""Notification model tracking one send to a client's subscribers."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from pushhub.database import Base
from pushhub.models.enums import NotificationStatus
from pushhub.models.mixins import TimestampMixin


class Notification(Base, TimestampMixin):
    """Delivery record for one notification dispatch."""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(
        Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(100), nullable=False)
    content = Column(String(500), nullable=False)
    promo_image_url = Column(String(2048), nullable=True)
    target_url = Column(String(2048), nullable=False, default="/")

    # 'pending' -> 'sent' | 'failed'
    status = Column(
        String(20), nullable=False, default=NotificationStatus.PENDING.value, index=True
    )
    recipient_count = Column(Integer, nullable=False, default=0)
    success_count = Column(Integer, nullable=False, default=0)
    failure_count = Column(Integer, nullable=False, default=0)
    error_message = Column(Text, nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    client = relationship("Client", back_populates="notifications")
