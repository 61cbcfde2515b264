"""Domain errors raised by services and translated to HTTP responses by the API layer."""


class PushHubError(Exception):
    """Base class for application errors."""


class ClientNotFoundError(PushHubError):
    """Raised when a client (tenant) does not exist."""

    def __init__(self, client_id: int):
        self.client_id = client_id
        super().__init__(f"Client {client_id} not found")


class ClientInactiveError(PushHubError):
    """Raised when a write targets a tenant that is not active."""

    def __init__(self, client_id: int):
        self.client_id = client_id
        super().__init__(f"Client {client_id} is not active")


class NotificationNotFoundError(PushHubError):
    """Raised when a notification record does not exist."""

    def __init__(self, notification_id: int):
        self.notification_id = notification_id
        super().__init__(f"Notification {notification_id} not found")


class InvalidStateTransitionError(PushHubError):
    """Raised when a notification record is moved out of a terminal state."""

    def __init__(self, notification_id: int, current: str, target: str):
        self.notification_id = notification_id
        self.current = current
        self.target = target
        super().__init__(
            f"Notification {notification_id} cannot move from '{current}' to '{target}'"
        )


class PushNotConfiguredError(PushHubError):
    """Raised when VAPID credentials are missing and push delivery is disabled."""
