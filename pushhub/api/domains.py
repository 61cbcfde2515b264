"""Domain management endpoints for client users."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from pushhub.api.dependencies import get_current_client
from pushhub.database import get_db
from pushhub.models import Client, Domain
from pushhub.schemas.common import MessageResponse
from pushhub.schemas.domain import (
    DomainCreate,
    DomainListResponse,
    DomainResponse,
    DomainStatsResponse,
    DomainUpdate,
)

router = APIRouter(prefix="/api/v1/domains", tags=["domains"])


def get_client_domain(db: Session, domain_id: int, client: Client) -> Domain:
    """Get a domain owned by the client or raise 404."""
    domain = (
        db.query(Domain).filter(Domain.id == domain_id, Domain.client_id == client.id).first()
    )
    if not domain:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Domain not found")
    return domain


def _domain_taken(
    db: Session, client: Client, domain_name: str, exclude_id: int | None = None
) -> bool:
    query = db.query(Domain).filter(
        Domain.client_id == client.id, Domain.domain_name == domain_name
    )
    if exclude_id is not None:
        query = query.filter(Domain.id != exclude_id)
    return query.first() is not None


@router.get("", response_model=DomainListResponse)
async def list_domains(
    db: Annotated[Session, Depends(get_db)],
    client: Annotated[Client, Depends(get_current_client)],
):
    """Get all domains of the current client, newest first."""
    domains = (
        db.query(Domain)
        .filter(Domain.client_id == client.id)
        .order_by(Domain.created_at.desc(), Domain.id.desc())
        .all()
    )
    return DomainListResponse(
        domains=[DomainResponse.model_validate(d) for d in domains],
        total_domains=len(domains),
    )


@router.get("/stats", response_model=DomainStatsResponse)
async def get_domain_stats(
    db: Annotated[Session, Depends(get_db)],
    client: Annotated[Client, Depends(get_current_client)],
):
    """Get the domain count and the five most recent domains."""
    query = db.query(Domain).filter(Domain.client_id == client.id)
    recent = query.order_by(Domain.created_at.desc(), Domain.id.desc()).limit(5).all()
    return DomainStatsResponse(
        total_domains=query.count(),
        recent_domains=[DomainResponse.model_validate(d) for d in recent],
    )


@router.get("/{domain_id}", response_model=DomainResponse)
async def get_domain(
    domain_id: int,
    db: Annotated[Session, Depends(get_db)],
    client: Annotated[Client, Depends(get_current_client)],
):
    """Get a single domain."""
    return get_client_domain(db, domain_id, client)


@router.post("", response_model=DomainResponse, status_code=status.HTTP_201_CREATED)
async def create_domain(
    domain_data: DomainCreate,
    db: Annotated[Session, Depends(get_db)],
    client: Annotated[Client, Depends(get_current_client)],
):
    """Register a new domain for the current client."""
    if _domain_taken(db, client, domain_data.domain_name):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This domain is already registered for your account",
        )

    domain = Domain(client_id=client.id, domain_name=domain_data.domain_name)
    db.add(domain)
    db.commit()
    db.refresh(domain)
    return domain


@router.put("/{domain_id}", response_model=DomainResponse)
async def update_domain(
    domain_id: int,
    domain_data: DomainUpdate,
    db: Annotated[Session, Depends(get_db)],
    client: Annotated[Client, Depends(get_current_client)],
):
    """Rename a domain."""
    domain = get_client_domain(db, domain_id, client)

    if _domain_taken(db, client, domain_data.domain_name, exclude_id=domain.id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This domain name is already registered for your account",
        )

    domain.domain_name = domain_data.domain_name
    db.commit()
    db.refresh(domain)
    return domain


@router.delete("/{domain_id}", response_model=MessageResponse)
async def delete_domain(
    domain_id: int,
    db: Annotated[Session, Depends(get_db)],
    client: Annotated[Client, Depends(get_current_client)],
):
    """Delete a domain."""
    domain = get_client_domain(db, domain_id, client)
    db.delete(domain)
    db.commit()
    return MessageResponse(message="Domain deleted successfully")
