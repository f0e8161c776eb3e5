"""Event listing, submission and lifecycle command routes."""

import base64
import binascii
from typing import Dict, List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends

from ...config.categories import COMMUNITIES, EVENT_TYPES, resolve_category
from ...errors import ValidationError
from ...event_service import CommandResult, EventService, PosterUpload
from ...lifecycle.state import Actor, EventStatus
from ..dependencies import get_actor, get_event_service
from ..schemas import EventCreateRequest, SuggestionRequest

router = APIRouter(prefix="/events", tags=["events"])


def _command_response(result: CommandResult, service: EventService, background_tasks: BackgroundTasks) -> Dict:
    # Dispatch runs after the response, the write is already committed
    if result.notification is not None:
        background_tasks.add_task(service.notify, result.notification)
    return result.event.to_dict()


@router.get("", response_model=List[Dict])
def list_events(
    community: Optional[str] = None,
    status: Optional[EventStatus] = None,
    actor: Actor = Depends(get_actor),
    service: EventService = Depends(get_event_service)
):
    """All events ordered by start time, optionally filtered."""
    return [event.to_dict() for event in service.list_events(community=community, status=status)]


@router.get("/communities", response_model=List[str])
def list_communities(
    actor: Actor = Depends(get_actor),
    service: EventService = Depends(get_event_service)
):
    """Community labels currently used by events."""
    return service.store.list_communities()


@router.get("/categories")
def list_categories(actor: Actor = Depends(get_actor)):
    """Predefined choices for the submission form."""
    return {"communities": list(COMMUNITIES), "event_types": list(EVENT_TYPES)}


@router.get("/{event_id}", response_model=Dict)
def get_event(
    event_id: str,
    actor: Actor = Depends(get_actor),
    service: EventService = Depends(get_event_service)
):
    """Get a single event by ID."""
    return service.get_event(event_id).to_dict()


@router.post("", status_code=201, response_model=Dict)
def submit_event(
    body: EventCreateRequest,
    actor: Actor = Depends(get_actor),
    service: EventService = Depends(get_event_service)
):
    """Submit a new event for approval."""
    community = resolve_category(body.community, body.custom_community, COMMUNITIES, 'community')
    event_type = resolve_category(body.event_type, body.custom_type, EVENT_TYPES, 'event type')

    poster = None
    if body.poster is not None:
        try:
            content = base64.b64decode(body.poster.content_base64, validate=True)
        except (binascii.Error, ValueError):
            raise ValidationError("Poster content is not valid base64")
        poster = PosterUpload(filename=body.poster.filename, content=content)

    event = service.submit_event(
        actor,
        title=body.title,
        community=community,
        event_type=event_type,
        description=body.description,
        start_time=body.start_time,
        end_time=body.end_time,
        poster=poster,
    )
    return event.to_dict()


@router.post("/{event_id}/approve", response_model=Dict)
def approve_event(
    event_id: str,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    service: EventService = Depends(get_event_service)
):
    return _command_response(service.approve(actor, event_id), service, background_tasks)


@router.post("/{event_id}/reject", response_model=Dict)
def reject_event(
    event_id: str,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    service: EventService = Depends(get_event_service)
):
    return _command_response(service.reject(actor, event_id), service, background_tasks)


@router.post("/{event_id}/mark-pending", response_model=Dict)
def mark_event_pending(
    event_id: str,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    service: EventService = Depends(get_event_service)
):
    return _command_response(service.mark_pending(actor, event_id), service, background_tasks)


@router.post("/{event_id}/suggestion", response_model=Dict)
def propose_new_time(
    event_id: str,
    body: SuggestionRequest,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    service: EventService = Depends(get_event_service)
):
    """Suggest a new date/time to the event's creator."""
    result = service.propose_new_time(
        actor,
        event_id,
        start_time=body.start_time,
        reason=body.reason,
        end_time=body.end_time,
    )
    return _command_response(result, service, background_tasks)


@router.post("/{event_id}/accept-suggestion", response_model=Dict)
def accept_suggestion(
    event_id: str,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    service: EventService = Depends(get_event_service)
):
    """Reschedule the event to the suggested time and resubmit it."""
    return _command_response(service.accept_suggestion(actor, event_id), service, background_tasks)
