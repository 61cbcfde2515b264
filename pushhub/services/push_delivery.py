"""Web Push delivery to a single subscription endpoint."""

import logging
from dataclasses import dataclass
from enum import Enum

import requests
from pywebpush import WebPushException, webpush

from pushhub.config import Settings, get_settings
from pushhub.exceptions import PushNotConfiguredError

logger = logging.getLogger(__name__)

# Push services answer 404/410 once a subscription has been revoked or expired
GONE_STATUS_CODES = frozenset({404, 410})


@dataclass(frozen=True)
class VapidConfig:
    """VAPID credentials identifying this server to browser push services."""

    public_key: str
    private_key: str
    contact: str

    @classmethod
    def from_settings(cls, settings: Settings) -> "VapidConfig":
        """Build the config from settings.

        Raises:
            PushNotConfiguredError: If any VAPID value is missing.
        """
        if not settings.push_configured:
            raise PushNotConfiguredError(
                "VAPID_PUBLIC_KEY, VAPID_PRIVATE_KEY and VAPID_EMAIL must be set"
            )
        return cls(
            public_key=settings.vapid_public_key,
            private_key=settings.vapid_private_key,
            contact=settings.vapid_email,
        )

    @property
    def subject(self) -> str:
        """Contact URI for the VAPID ``sub`` claim."""
        if self.contact.startswith(("mailto:", "https:")):
            return self.contact
        return f"mailto:{self.contact}"


@dataclass(frozen=True)
class DeliveryTarget:
    """The parts of a stored subscription needed to deliver one message."""

    subscription_id: int
    endpoint: str
    p256dh_key: str
    auth_key: str

    def subscription_info(self) -> dict:
        return {
            "endpoint": self.endpoint,
            "keys": {"p256dh": self.p256dh_key, "auth": self.auth_key},
        }


class DeliveryOutcome(str, Enum):
    """Classification of one delivery attempt."""

    SUCCESS = "success"
    TRANSIENT = "transient"  # keep the subscription
    PERMANENT = "permanent"  # endpoint is gone, remove the subscription


@dataclass(frozen=True)
class DeliveryResult:
    """Result of delivering to one subscription."""

    subscription_id: int
    outcome: DeliveryOutcome
    status_code: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == DeliveryOutcome.SUCCESS


def classify_status(status_code: int | None) -> DeliveryOutcome:
    """Map a push service HTTP status to a delivery outcome."""
    if status_code is not None and 200 <= status_code < 300:
        return DeliveryOutcome.SUCCESS
    if status_code in GONE_STATUS_CODES:
        return DeliveryOutcome.PERMANENT
    return DeliveryOutcome.TRANSIENT


class PushDeliveryClient:
    """Sends encrypted Web Push messages signed with the server's VAPID key.

    Each call to :meth:`send` performs exactly one HTTP exchange with the push
    service. Retries are left to the caller.
    """

    def __init__(self, config: VapidConfig, ttl: int = 86400, timeout: float | None = 10.0) -> None:
        if not (config.public_key and config.private_key and config.contact):
            raise PushNotConfiguredError("VAPID public key, private key and contact are required")
        self.config = config
        self.ttl = ttl
        self.timeout = timeout

    @property
    def public_key(self) -> str:
        return self.config.public_key

    def send(self, target: DeliveryTarget, payload: str) -> DeliveryResult:
        """Deliver a serialized payload to one subscription."""
        try:
            response = webpush(
                subscription_info=target.subscription_info(),
                data=payload,
                vapid_private_key=self.config.private_key,
                # webpush adds aud/exp to the claims dict, so never share it
                vapid_claims={"sub": self.config.subject},
                ttl=self.ttl,
                timeout=self.timeout,
            )
        except WebPushException as e:
            status_code = e.response.status_code if e.response is not None else None
            outcome = classify_status(status_code)
            if outcome == DeliveryOutcome.SUCCESS:
                outcome = DeliveryOutcome.TRANSIENT
            logger.warning(
                f"Push failed for subscription {target.subscription_id} "
                f"(status {status_code}): {e.message}"
            )
            return DeliveryResult(target.subscription_id, outcome, status_code, e.message)
        except requests.RequestException as e:
            logger.warning(f"Push request error for subscription {target.subscription_id}: {e}")
            return DeliveryResult(target.subscription_id, DeliveryOutcome.TRANSIENT, None, str(e))

        status_code = getattr(response, "status_code", None)
        outcome = classify_status(status_code)
        if outcome != DeliveryOutcome.SUCCESS:
            return DeliveryResult(
                target.subscription_id, outcome, status_code, f"Push service returned {status_code}"
            )
        logger.debug(f"Push delivered to subscription {target.subscription_id}")
        return DeliveryResult(target.subscription_id, outcome, status_code)


def get_push_delivery_client() -> PushDeliveryClient:
    """Create a delivery client from application settings.

    Raises:
        PushNotConfiguredError: If VAPID credentials are missing.
    """
    settings = get_settings()
    return PushDeliveryClient(
        VapidConfig.from_settings(settings),
        ttl=settings.push_ttl_seconds,
        timeout=settings.push_timeout_seconds,
    )
