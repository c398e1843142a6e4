"""Sound signal endpoint polled by clients."""

from fastapi import APIRouter

from lifesync.api.deps import SoundQueue
from lifesync.models.notification import NotificationListResponse

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationListResponse)
async def drain_notifications_endpoint(player: SoundQueue) -> NotificationListResponse:
    """Return pending sound signals, oldest first, and clear them."""
    return NotificationListResponse(signals=player.drain())
