"""Enums for model fields."""

from enum import Enum


class UserRole(str, Enum):
    """Roles a user account can hold."""

    MASTER = "master"
    CLIENT = "client"


class ClientStatus(str, Enum):
    """Lifecycle status of a client tenant."""

    ACTIVE = "active"
    INACTIVE = "inactive"

    def toggled(self) -> "ClientStatus":
        """Return the opposite status."""
        return ClientStatus.INACTIVE if self == ClientStatus.ACTIVE else ClientStatus.ACTIVE


class DomainStatus(str, Enum):
    """Status of a registered domain."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class NotificationStatus(str, Enum):
    """Delivery status of a notification record.

    ``pending`` is the only non-terminal state.
    """

    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Check if no further transitions are allowed."""
        return self != NotificationStatus.PENDING
