from fastapi import APIRouter, Query

from app.domain.schemas import (
    ERROR_RESPONSES,
    BusinessAnalytics,
    BusinessCreate,
    BusinessDashboard,
    BusinessResponse,
    CheckInRequest,
    RewardListResponse,
    RewardResponse,
    VisitListResponse,
    VisitResponse,
)
from app.services import loyalty

router = APIRouter(responses=ERROR_RESPONSES)


@router.post("", response_model=BusinessResponse, status_code=201)
def register_business(data: BusinessCreate):
    """Register a business under its owner's phone number. 409 if the phone is taken."""
    business = loyalty.register_business(
        data.phone_number,
        data.name,
        data.category,
        data.points_per_visit,
    )
    return BusinessResponse(**business)


@router.post("/{business_id}/check-ins", response_model=VisitResponse, status_code=201)
def check_in_customer(business_id: str, data: CheckInRequest):
    """Check in a registered customer and award points.

    404 customer_not_found when the phone is not registered; nothing is written.
    """
    visit = loyalty.check_in(data.customer_phone, business_id, data.points)
    return VisitResponse(**visit)


@router.get("/{business_id}/analytics", response_model=BusinessAnalytics)
def get_business_analytics(business_id: str):
    return loyalty.get_business_analytics(business_id)


@router.get("/{business_id}/visits", response_model=VisitListResponse)
def list_recent_visits(
    business_id: str,
    limit: int | None = Query(None),
):
    """Most recent visits with customer name and phone."""
    rows = loyalty.get_recent_visits(business_id, limit)
    return VisitListResponse(visits=[VisitResponse(**r) for r in rows])


@router.get("/{business_id}/rewards", response_model=RewardListResponse)
def list_business_rewards(business_id: str):
    """Active rewards for a business, cheapest first."""
    rows = loyalty.get_business_rewards(business_id)
    return RewardListResponse(rewards=[RewardResponse(**r) for r in rows])


@router.get("/{business_id}/dashboard", response_model=BusinessDashboard)
def get_business_dashboard(business_id: str):
    """Business view: analytics, recent visits, insights."""
    dashboard = loyalty.get_business_dashboard(business_id)
    return BusinessDashboard(
        business=BusinessResponse(**dashboard["business"]),
        analytics=dashboard["analytics"],
        recent_visits=[VisitResponse(**v) for v in dashboard["recent_visits"]],
        insights=dashboard["insights"],
    )
