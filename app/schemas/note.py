from datetime import datetime
from pydantic import BaseModel, field_validator, model_validator
from typing import List, Optional
from app.models.user import Role
from app.schemas.common import Pagination, SubscriptionUsage

TITLE_MAX_LENGTH = 200
CONTENT_MAX_LENGTH = 10000
SEARCH_MAX_LENGTH = 200


def _clean_title(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Title cannot be empty")
    if len(value) > TITLE_MAX_LENGTH:
        raise ValueError(f"Title must be {TITLE_MAX_LENGTH} characters or less")
    return value


def _clean_content(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Content cannot be empty")
    if len(value) > CONTENT_MAX_LENGTH:
        raise ValueError("Content must be 10,000 characters or less")
    return value


class NoteCreate(BaseModel):
    title: str
    content: str

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _clean_title(v)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _clean_content(v)

class NoteUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _clean_title(v)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _clean_content(v)

    @model_validator(mode="after")
    def check_not_empty(self):
        if self.title is None and self.content is None:
            raise ValueError("At least one field (title or content) must be provided for update")
        return self

class NoteAuthor(BaseModel):
    id: int
    email: str
    role: Role

    class Config:
        from_attributes = True

class NoteResponse(BaseModel):
    id: int
    title: str
    content: str
    author_id: int
    tenant_id: int
    created_at: datetime
    updated_at: datetime
    author: NoteAuthor

    class Config:
        from_attributes = True

class NoteSummary(BaseModel):
    id: int
    title: str
    author: NoteAuthor

    class Config:
        from_attributes = True

class NoteDetail(BaseModel):
    note: NoteResponse

class NoteCreated(BaseModel):
    note: NoteResponse
    subscription: SubscriptionUsage

class NoteList(BaseModel):
    notes: List[NoteResponse]
    pagination: Pagination
    subscription: SubscriptionUsage

class NoteDeleted(BaseModel):
    deleted_note: NoteSummary
    subscription: SubscriptionUsage
