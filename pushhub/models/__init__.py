"""SQLAlchemy models."""

from pushhub.models.client import Client
from pushhub.models.domain import Domain
from pushhub.models.notification import Notification
from pushhub.models.push_subscription import PushSubscription
from pushhub.models.user import User

__all__ = [
    "Client",
    "Domain",
    "Notification",
    "PushSubscription",
    "User",
]
