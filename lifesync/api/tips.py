"""Category tip endpoint."""

from fastapi import APIRouter

from lifesync.api.deps import CurrentUser, Intake
from lifesync.models.reminder import Category, TipResponse

router = APIRouter(prefix="/api/tips", tags=["Tips"])


@router.get("/{category}", response_model=TipResponse)
async def category_tip_endpoint(
    intake: Intake,
    current_user: CurrentUser,
    category: Category,
) -> TipResponse:
    """One-sentence motivating tip; never fails for backend errors."""
    return TipResponse(category=category, tip=await intake.category_tip(category))
