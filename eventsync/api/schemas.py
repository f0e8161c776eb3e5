"""Request bodies accepted by the API."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SignUpRequest(BaseModel):
    email: str
    password: str
    name: str


class SignInRequest(BaseModel):
    email: str
    password: str


class PosterPayload(BaseModel):
    """Poster file, base64 encoded."""

    filename: str
    content_base64: str


class EventCreateRequest(BaseModel):
    """
    A new event as entered in the submission form.

    ``community`` and ``event_type`` take one of the predefined labels or
    ``Other``, in which case the matching ``custom_*`` field is used.
    """
    title: str = Field(min_length=1)
    community: str
    custom_community: Optional[str] = None
    event_type: str
    custom_type: Optional[str] = None
    description: str = ''
    start_time: datetime
    end_time: Optional[datetime] = None
    poster: Optional[PosterPayload] = None


class SuggestionRequest(BaseModel):
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    reason: str = ''


class RoleUpdateRequest(BaseModel):
    role: str


class NotificationPayload(BaseModel):
    """Wire shape of a lifecycle notification."""

    eventId: str
    action: str
    recipientEmail: str
    eventTitle: str
    hodMessage: Optional[str] = None
