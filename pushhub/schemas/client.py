"""Client (tenant) schemas."""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from pushhub.models.enums import ClientStatus
from pushhub.schemas.auth import UserResponse
from pushhub.schemas.common import Pagination
from pushhub.services.validation import sanitize_text, validate_url

# At least one lower-case letter, one upper-case letter and one digit
PASSWORD_REGEX = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)[a-zA-Z\d@$!%*?&]{8,}$")


class ClientCreate(BaseModel):
    """Create a client together with its login account."""

    name: str = Field(..., max_length=1000)
    email: EmailStr = Field(..., max_length=254)
    password: str = Field(..., min_length=8, max_length=128)
    brand_logo_url: str | None = Field(None, max_length=2048)

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        return sanitize_text(value, "Client name", 1, 100)

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        if not PASSWORD_REGEX.match(value):
            raise ValueError(
                "Password must contain at least one uppercase letter, "
                "one lowercase letter, and one number"
            )
        return value

    @field_validator("brand_logo_url")
    @classmethod
    def check_logo(cls, value: str | None) -> str | None:
        if not value:
            return None
        return validate_url(value)


class ClientUpdate(BaseModel):
    """Update a client."""

    name: str | None = Field(None, max_length=1000)
    brand_logo_url: str | None = Field(None, max_length=2048)
    status: ClientStatus | None = None

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return sanitize_text(value, "Client name", 1, 100)

    @field_validator("brand_logo_url")
    @classmethod
    def check_logo(cls, value: str | None) -> str | None:
        # Empty string clears the logo
        if not value:
            return None
        return validate_url(value)


class ClientResponse(BaseModel):
    """Client response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    brand_logo_url: str | None
    status: str
    created_at: datetime
    updated_at: datetime


class ClientDetailResponse(ClientResponse):
    """Client response with ownership counts."""

    domain_count: int = 0
    subscriber_count: int = 0
    notification_count: int = 0


class ClientListResponse(BaseModel):
    """Paginated client list."""

    clients: list[ClientResponse]
    pagination: Pagination


class ClientStats(BaseModel):
    """Client counts by status."""

    total_clients: int
    active_clients: int
    inactive_clients: int


class ClientStatsResponse(BaseModel):
    """Client statistics with the most recent clients."""

    stats: ClientStats
    recent_clients: list[ClientResponse]


class ClientCreateResponse(BaseModel):
    """Response after creating a client and its user."""

    message: str
    client: ClientResponse
    user: UserResponse

