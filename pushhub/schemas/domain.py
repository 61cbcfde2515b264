"""Domain schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pushhub.services.validation import normalize_domain


class DomainCreate(BaseModel):
    """Register a domain."""

    domain_name: str = Field(..., max_length=300)

    @field_validator("domain_name")
    @classmethod
    def check_domain(cls, value: str) -> str:
        return normalize_domain(value)


class DomainUpdate(DomainCreate):
    """Rename a domain."""


class DomainResponse(BaseModel):
    """Domain response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    client_id: int
    domain_name: str
    status: str
    created_at: datetime
    updated_at: datetime


class DomainListResponse(BaseModel):
    """All domains of a client."""

    domains: list[DomainResponse]
    total_domains: int


class DomainStatsResponse(BaseModel):
    """Domain count and the most recent domains."""

    total_domains: int
    recent_domains: list[DomainResponse]
