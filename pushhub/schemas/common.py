"""Shared response schemas."""

from pydantic import BaseModel


class Pagination(BaseModel):
    """Pagination details for list responses."""

    current_page: int
    total_pages: int
    total_items: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = (total + limit - 1) // limit
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_items=total,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )


class MessageResponse(BaseModel):
    """Simple acknowledgement."""

    message: str
