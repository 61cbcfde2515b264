"""Client (tenant) management endpoints for master administrators."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from pushhub.api.dependencies import require_master
from pushhub.database import get_db
from pushhub.models import Client, Domain, Notification, PushSubscription
from pushhub.models.enums import ClientStatus, UserRole
from pushhub.models.user import User
from pushhub.schemas.auth import UserResponse
from pushhub.schemas.client import (
    ClientCreate,
    ClientCreateResponse,
    ClientDetailResponse,
    ClientListResponse,
    ClientResponse,
    ClientStats,
    ClientStatsResponse,
    ClientUpdate,
)
from pushhub.schemas.common import MessageResponse, Pagination
from pushhub.services.auth import create_user, get_user_by_email

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/clients",
    tags=["clients"],
    dependencies=[Depends(require_master)],
)


def get_client_or_404(db: Session, client_id: int) -> Client:
    """Get a client by ID or raise 404."""
    client = db.get(Client, client_id)
    if client is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return client


def _count(db: Session, model, client_id: int) -> int:
    return db.query(func.count(model.id)).filter(model.client_id == client_id).scalar()


@router.get("", response_model=ClientListResponse)
async def list_clients(
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    search: str = "",
    client_status: Annotated[ClientStatus | None, Query(alias="status")] = None,
):
    """Get clients with pagination, name search and status filter."""
    query = db.query(Client)
    if search:
        query = query.filter(Client.name.ilike(f"%{search}%"))
    if client_status is not None:
        query = query.filter(Client.status == client_status.value)

    total = query.count()
    clients = (
        query.order_by(Client.created_at.desc(), Client.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return ClientListResponse(
        clients=[ClientResponse.model_validate(c) for c in clients],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/stats", response_model=ClientStatsResponse)
async def get_client_stats(
    db: Annotated[Session, Depends(get_db)],
):
    """Get client counts and the five most recent clients."""
    counts = dict(db.query(Client.status, func.count(Client.id)).group_by(Client.status).all())
    recent = db.query(Client).order_by(Client.created_at.desc(), Client.id.desc()).limit(5).all()

    return ClientStatsResponse(
        stats=ClientStats(
            total_clients=sum(counts.values()),
            active_clients=counts.get(ClientStatus.ACTIVE.value, 0),
            inactive_clients=counts.get(ClientStatus.INACTIVE.value, 0),
        ),
        recent_clients=[ClientResponse.model_validate(c) for c in recent],
    )


@router.get("/{client_id}", response_model=ClientDetailResponse)
async def get_client(
    client_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Get a client with domain, subscriber and notification counts."""
    client = get_client_or_404(db, client_id)

    response = ClientDetailResponse.model_validate(client)
    response.domain_count = _count(db, Domain, client_id)
    response.subscriber_count = _count(db, PushSubscription, client_id)
    response.notification_count = _count(db, Notification, client_id)
    return response


@router.post("", response_model=ClientCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    client_data: ClientCreate,
    db: Annotated[Session, Depends(get_db)],
):
    """Create a client and the client-role user that manages it."""
    if get_user_by_email(db, client_data.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists",
        )

    client = Client(name=client_data.name, brand_logo_url=client_data.brand_logo_url)
    db.add(client)
    db.flush()

    user = create_user(
        db,
        client_data.email,
        client_data.password,
        role=UserRole.CLIENT,
        client_id=client.id,
        commit=False,
    )
    db.commit()
    db.refresh(client)
    db.refresh(user)

    logger.info(f"Created client {client.id} with user {user.id}")

    return ClientCreateResponse(
        message="Client created successfully",
        client=ClientResponse.model_validate(client),
        user=UserResponse.model_validate(user),
    )


@router.put("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: int,
    client_data: ClientUpdate,
    db: Annotated[Session, Depends(get_db)],
):
    """Update a client's name, logo or status."""
    client = get_client_or_404(db, client_id)

    update_data = client_data.model_dump(exclude_unset=True)
    if update_data.get("name") is None:
        update_data.pop("name", None)
    if "status" in update_data:
        if update_data["status"] is None:
            del update_data["status"]
        else:
            update_data["status"] = ClientStatus(update_data["status"]).value

    for field, value in update_data.items():
        setattr(client, field, value)

    db.commit()
    db.refresh(client)
    return client


@router.patch("/{client_id}/status", response_model=ClientResponse)
async def toggle_client_status(
    client_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Toggle a client between active and inactive."""
    client = get_client_or_404(db, client_id)
    client.status = ClientStatus(client.status).toggled().value
    db.commit()
    db.refresh(client)
    logger.info(f"Client {client.id} is now {client.status}")
    return client


@router.delete("/{client_id}", response_model=MessageResponse)
async def delete_client(
    client_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(require_master)],
):
    """Delete a client and all of its users, domains, subscriptions and notifications."""
    client = get_client_or_404(db, client_id)
    db.delete(client)
    db.commit()
    logger.info(f"Client {client_id} deleted by user {current_user.id}")
    return MessageResponse(message="Client and all associated data deleted successfully")
