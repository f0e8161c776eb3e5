"""Export routes: report summary, iCalendar feed and CSV download."""

from typing import Optional

from fastapi import APIRouter, Depends, Response

from ... import export
from ...event_service import EventService
from ...lifecycle.state import Actor, EventStatus
from ...utils.time_utils import now_utc
from ..dependencies import get_actor, get_event_service, require_approver

router = APIRouter(prefix="/events/export", tags=["export"])


def _selected_events(service: EventService, community: Optional[str], status: Optional[EventStatus], future_only: bool):
    events = service.list_events(community=community, status=status)
    return export.future_events(events) if future_only else events


@router.get("/summary")
def export_summary(
    community: Optional[str] = None,
    status: Optional[EventStatus] = None,
    actor: Actor = Depends(require_approver),
    service: EventService = Depends(get_event_service)
):
    """Totals, status counts and the current/next month breakdown of future events."""
    now = now_utc()
    events = export.future_events(service.list_events(community=community, status=status), now)
    return {
        "generated_at": now.isoformat(),
        "total": len(events),
        "status_counts": export.status_summary(events),
        "months": [
            {
                "label": group.label,
                "count": len(group.events),
                "events": [event.to_dict() for event in group.events],
            }
            for group in export.group_by_month(events, now)
        ],
    }


@router.get("/calendar.ics")
def export_calendar(
    community: Optional[str] = None,
    status: Optional[EventStatus] = None,
    future_only: bool = True,
    actor: Actor = Depends(get_actor),
    service: EventService = Depends(get_event_service)
):
    """Generate an iCalendar feed of events."""
    events = _selected_events(service, community, status, future_only)
    return Response(
        content=export.to_ical(events),
        media_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": "attachment; filename=calendar.ics"},
    )


@router.get("/events.csv")
def export_csv(
    community: Optional[str] = None,
    status: Optional[EventStatus] = None,
    future_only: bool = True,
    actor: Actor = Depends(require_approver),
    service: EventService = Depends(get_event_service)
):
    """Spreadsheet export of future events."""
    events = _selected_events(service, community, status, future_only)
    filename = f"eventsync-future-events-{now_utc().date().isoformat()}.csv"
    return Response(
        content=export.to_csv(events),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
