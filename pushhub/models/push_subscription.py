"""Push subscription model for web push notifications."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from pushhub.database import Base
from pushhub.models.mixins import TimestampMixin


class PushSubscription(Base, TimestampMixin):
    """Stores a browser's web push registration for one client."""

    __tablename__ = "push_subscriptions"
    __table_args__ = (UniqueConstraint("client_id", "endpoint", name="uq_client_endpoint"),)

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(
        Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    endpoint = Column(String(1000), nullable=False)
    p256dh_key = Column(String(200), nullable=False)
    auth_key = Column(String(100), nullable=False)

    # Diagnostics metadata
    domain = Column(String(253), nullable=False, default="unknown")
    user_agent = Column(String(500), nullable=False, default="unknown")
    ip_address = Column(String(45), nullable=True)
    subscribed_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )

    # Relationships
    client = relationship("Client", back_populates="push_subscriptions")

    def subscription_info(self) -> dict:
        """Return the subscription in the browser PushSubscription JSON shape."""
        return {
            "endpoint": self.endpoint,
            "keys": {
                "p256dh": self.p256dh_key,
                "auth": self.auth_key,
            },
        }
