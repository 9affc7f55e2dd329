import math
from pydantic import BaseModel
from typing import Generic, Optional, TypeVar
from app.models.tenant import Plan

T = TypeVar("T")

class ApiResponse(BaseModel, Generic[T]):
    """Success envelope shared by every endpoint."""
    success: bool = True
    data: T
    message: Optional[str] = None

class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )

class SubscriptionUsage(BaseModel):
    """Note quota summary attached to note responses. None means unlimited."""
    plan: Plan
    notes_used: int
    notes_limit: Optional[int] = None
    notes_remaining: Optional[int] = None
