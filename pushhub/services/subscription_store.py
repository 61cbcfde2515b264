"""Persistence and tenant-scoped retrieval of push subscriptions."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import delete, func
from sqlalchemy.orm import Session

from pushhub.exceptions import ClientInactiveError, ClientNotFoundError
from pushhub.models import Client, PushSubscription

logger = logging.getLogger(__name__)


@dataclass
class SubscriptionMetadata:
    """Diagnostic details recorded when a browser subscribes."""

    domain: str = "unknown"
    user_agent: str = "unknown"
    ip_address: str | None = None


class SubscriptionStore:
    """Data access for push subscriptions, always scoped to one client."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _require_active_client(self, client_id: int) -> Client:
        client = self.db.get(Client, client_id)
        if client is None:
            raise ClientNotFoundError(client_id)
        if not client.is_active:
            raise ClientInactiveError(client_id)
        return client

    def get_by_endpoint(self, client_id: int, endpoint: str) -> PushSubscription | None:
        """Get a client's subscription by its push endpoint."""
        return (
            self.db.query(PushSubscription)
            .filter(
                PushSubscription.client_id == client_id,
                PushSubscription.endpoint == endpoint,
            )
            .first()
        )

    def upsert(
        self,
        client_id: int,
        endpoint: str,
        p256dh_key: str,
        auth_key: str,
        metadata: SubscriptionMetadata | None = None,
    ) -> tuple[PushSubscription, bool]:
        """Create a subscription, or refresh the keys of an existing one.

        Returns:
            Tuple of (subscription, created) where ``created`` is False when an
            existing (client, endpoint) registration was updated.

        Raises:
            ClientNotFoundError: If the client does not exist.
            ClientInactiveError: If the client is not active.
        """
        self._require_active_client(client_id)

        existing = self.get_by_endpoint(client_id, endpoint)
        if existing:
            existing.p256dh_key = p256dh_key
            existing.auth_key = auth_key
            self.db.commit()
            self.db.refresh(existing)
            return existing, False

        metadata = metadata or SubscriptionMetadata()
        subscription = PushSubscription(
            client_id=client_id,
            endpoint=endpoint,
            p256dh_key=p256dh_key,
            auth_key=auth_key,
            domain=metadata.domain,
            user_agent=metadata.user_agent,
            ip_address=metadata.ip_address,
        )
        self.db.add(subscription)
        self.db.commit()
        self.db.refresh(subscription)
        logger.info(
            f"New push subscription {subscription.id} for client {client_id} "
            f"from domain {metadata.domain}"
        )
        return subscription, True

    def list_by_client(self, client_id: int) -> list[PushSubscription]:
        """Get all subscriptions of a client."""
        return (
            self.db.query(PushSubscription)
            .filter(PushSubscription.client_id == client_id)
            .order_by(PushSubscription.id)
            .all()
        )

    def count_by_client(self, client_id: int) -> int:
        """Count the subscriptions of a client."""
        return (
            self.db.query(func.count(PushSubscription.id))
            .filter(PushSubscription.client_id == client_id)
            .scalar()
        )

    def delete_by_id(self, subscription_id: int) -> bool:
        """Delete one subscription. Returns False if it did not exist."""
        subscription = self.db.get(PushSubscription, subscription_id)
        if subscription is None:
            return False
        self.db.delete(subscription)
        self.db.commit()
        return True

    def delete_by_ids(self, subscription_ids: Iterable[int]) -> int:
        """Delete many subscriptions in a single statement.

        Returns:
            Number of rows removed.
        """
        ids = list(subscription_ids)
        if not ids:
            return 0
        result = self.db.execute(delete(PushSubscription).where(PushSubscription.id.in_(ids)))
        self.db.commit()
        return result.rowcount

    def delete_by_endpoint(self, client_id: int, endpoint: str) -> bool:
        """Remove a client's subscription for an endpoint (explicit unsubscribe)."""
        result = self.db.execute(
            delete(PushSubscription)
            .where(
                PushSubscription.client_id == client_id,
                PushSubscription.endpoint == endpoint,
            )
        )
        self.db.commit()
        return result.rowcount > 0
