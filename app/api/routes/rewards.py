from fastapi import APIRouter

from app.domain.schemas import ERROR_RESPONSES, RewardListResponse, RewardResponse
from app.services import loyalty

router = APIRouter(responses=ERROR_RESPONSES)


@router.get("", response_model=RewardListResponse)
def list_active_rewards():
    """Every active reward across businesses, for customers to browse."""
    rows = loyalty.get_all_active_rewards()
    return RewardListResponse(rewards=[RewardResponse(**r) for r in rows])
