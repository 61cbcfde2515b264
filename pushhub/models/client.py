"""Client (tenant) model."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from pushhub.database import Base
from pushhub.models.enums import ClientStatus
from pushhub.models.mixins import TimestampMixin


class Client(Base, TimestampMixin):
    """A tenant account owning domains, subscribers and notifications."""

    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    brand_logo_url = Column(String(2048), nullable=True)
    status = Column(String(20), nullable=False, default=ClientStatus.ACTIVE.value, index=True)

    # Relationships
    users = relationship("User", back_populates="client", cascade="all, delete-orphan")
    domains = relationship("Domain", back_populates="client", cascade="all, delete-orphan")
    push_subscriptions = relationship(
        "PushSubscription", back_populates="client", cascade="all, delete-orphan"
    )
    notifications = relationship(
        "Notification", back_populates="client", cascade="all, delete-orphan"
    )

    @property
    def is_active(self) -> bool:
        """Check if the tenant may receive new subscriptions and send notifications."""
        return self.status == ClientStatus.ACTIVE.value
