"""Public endpoints used by websites embedding the push subscription script.

These routes are unauthenticated: browsers identify the tenant by client ID.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from pushhub.api.dependencies import get_push_client
from pushhub.database import get_db
from pushhub.exceptions import ClientInactiveError, ClientNotFoundError
from pushhub.models import Domain
from pushhub.schemas.common import MessageResponse
from pushhub.schemas.subscription import (
    SubscribeRequest,
    SubscribeResponse,
    UnsubscribeRequest,
    VapidPublicKeyResponse,
)
from pushhub.services.push_delivery import PushDeliveryClient
from pushhub.services.subscription_store import SubscriptionMetadata, SubscriptionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/subscribe", tags=["subscribe"])


@router.post(
    "",
    response_model=SubscribeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={200: {"model": SubscribeResponse, "description": "Existing subscription updated"}},
)
async def subscribe(
    request_data: SubscribeRequest,
    request: Request,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a browser push subscription for a client."""
    domain_name = request_data.domain.strip().lower() if request_data.domain else None

    if domain_name:
        registered = (
            db.query(Domain)
            .filter(Domain.client_id == request_data.client_id, Domain.domain_name == domain_name)
            .first()
        )
        if not registered:
            # Domains are informational; unknown origins are still accepted
            logger.warning(
                f"Domain {domain_name} not registered for client {request_data.client_id}"
            )

    metadata = SubscriptionMetadata(
        domain=domain_name or "unknown",
        user_agent=request.headers.get("user-agent", "unknown")[:500],
        ip_address=request.client.host if request.client else None,
    )

    try:
        subscription, created = SubscriptionStore(db).upsert(
            client_id=request_data.client_id,
            endpoint=request_data.subscription.endpoint,
            p256dh_key=request_data.subscription.keys.p256dh,
            auth_key=request_data.subscription.keys.auth,
            metadata=metadata,
        )
    except ClientNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found") from e
    except ClientInactiveError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Client account is not active"
        ) from e

    if not created:
        response.status_code = status.HTTP_200_OK
        return SubscribeResponse(
            message="Subscription updated successfully", subscription_id=subscription.id
        )

    return SubscribeResponse(
        message="Subscription registered successfully", subscription_id=subscription.id
    )


@router.delete("", response_model=MessageResponse)
async def unsubscribe(
    request_data: UnsubscribeRequest,
    db: Annotated[Session, Depends(get_db)],
):
    """Remove a browser push subscription."""
    removed = SubscriptionStore(db).delete_by_endpoint(
        request_data.client_id, request_data.endpoint.strip()
    )
    if not removed:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subscription not found")

    logger.info(f"Push subscription unregistered for client {request_data.client_id}")
    return MessageResponse(message="Subscription removed successfully")


@router.get("/vapid-public-key", response_model=VapidPublicKeyResponse)
async def get_vapid_public_key(
    push_client: Annotated[PushDeliveryClient, Depends(get_push_client)],
) -> VapidPublicKeyResponse:
    """Get the VAPID public key browsers need to create a subscription."""
    return VapidPublicKeyResponse(public_key=push_client.public_key)
