"""Reminder API endpoints.

Handlers are ``async def`` so every store mutation runs on the event loop,
interleaved with alarm sweeps but never concurrent with them.
"""

from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from lifesync.api.deps import CreateGuard, CurrentUser, Intake, Store, to_http_error
from lifesync.models.reminder import (
    ALL_CATEGORIES,
    IntakeRequest,
    Reminder,
    ReminderCreate,
    ReminderListResponse,
    ReminderStats,
    ToggleResponse,
)
from lifesync.services.errors import LifeSyncError

router = APIRouter(prefix="/api/reminders", tags=["Reminders"])


@router.get("", response_model=ReminderListResponse)
async def list_reminders_endpoint(
    store: Store,
    current_user: CurrentUser,
    category: str = Query(default=ALL_CATEGORIES, description="Category name or All"),
) -> ReminderListResponse:
    """List reminders, newest first, optionally filtered by category."""
    reminders = store.list_reminders(category)
    return ReminderListResponse(reminders=reminders, total=len(reminders))


@router.get("/stats", response_model=ReminderStats)
async def reminder_stats_endpoint(store: Store, current_user: CurrentUser) -> ReminderStats:
    """Total, pending and completed counts."""
    return store.stats()


@router.post("", response_model=Reminder, status_code=status.HTTP_201_CREATED)
async def create_reminder_endpoint(
    store: Store,
    current_user: CurrentUser,
    reminder_data: ReminderCreate,
) -> Reminder:
    """Create a reminder from the manual form."""
    try:
        return store.create(reminder_data)
    except LifeSyncError as e:
        raise to_http_error(e) from e


@router.post("/intake", response_model=Reminder, status_code=status.HTTP_201_CREATED)
async def create_from_text_endpoint(
    store: Store,
    intake: Intake,
    guard: CreateGuard,
    current_user: CurrentUser,
    request: IntakeRequest,
) -> Reminder:
    """Create a reminder from free text via the intake adapter.

    Only one such request may be in flight; a concurrent one gets 409.
    Extraction failures still create a reminder from the raw text.
    """
    try:
        async with guard.hold():
            draft = await intake.parse(request.text)
            return store.create_from_draft(draft)
    except LifeSyncError as e:
        raise to_http_error(e) from e


@router.post("/{reminder_id}/toggle", response_model=ToggleResponse)
async def toggle_reminder_endpoint(
    store: Store,
    current_user: CurrentUser,
    reminder_id: UUID,
) -> ToggleResponse:
    """Flip completion. ``completed`` is null when the reminder does not exist."""
    return ToggleResponse(id=reminder_id, completed=store.toggle_complete(reminder_id))


@router.delete("/{reminder_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reminder_endpoint(
    store: Store,
    current_user: CurrentUser,
    reminder_id: UUID,
) -> None:
    """Delete a reminder. Deleting a missing reminder is a no-op."""
    store.delete(reminder_id)


@router.get("/{reminder_id}", response_model=Reminder)
async def get_reminder_endpoint(
    store: Store,
    current_user: CurrentUser,
    reminder_id: UUID,
) -> Reminder:
    """Get a specific reminder by ID."""
    reminder = store.get(reminder_id)
    if reminder is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Reminder not found",
        )
    return reminder
