from typing import Union

from fastapi import APIRouter

from app.api.routes.identity import build_identity_response
from app.domain.schemas import (
    ERROR_RESPONSES,
    CustomerCreate,
    CustomerDashboard,
    CustomerResponse,
    IdentityResponse,
    PointsSummary,
    RewardResponse,
    Role,
    VisitListResponse,
    VisitResponse,
)
from app.services import loyalty

router = APIRouter(responses=ERROR_RESPONSES)


@router.post("", response_model=CustomerResponse, status_code=201)
def register_customer(data: CustomerCreate):
    """Register a customer by phone number. 409 if the phone is taken."""
    customer = loyalty.register_customer(data.phone_number, data.name)
    return CustomerResponse(**customer)


@router.get("/{phone_number}/points", response_model=PointsSummary)
def get_customer_points(phone_number: str):
    """Points summary; zeros for a customer with no visits yet."""
    return loyalty.get_customer_points(phone_number)


@router.get("/{phone_number}/visits", response_model=VisitListResponse)
def list_customer_visits(phone_number: str):
    """Visit history across businesses, newest first."""
    rows = loyalty.get_customer_visits(phone_number)
    return VisitListResponse(visits=[VisitResponse(**r) for r in rows])


@router.get("/{phone_number}/dashboard", response_model=Union[CustomerDashboard, IdentityResponse])
def get_customer_dashboard(phone_number: str):
    """Customer view: points, rewards with eligibility, insights.

    Falls back to the registration-required payload for an unknown phone.
    """
    dashboard = loyalty.get_customer_dashboard(phone_number)
    if dashboard is None:
        return build_identity_response(Role.CUSTOMER, None)
    return CustomerDashboard(
        customer=CustomerResponse(**dashboard["customer"]),
        points=dashboard["points"],
        rewards=[RewardResponse(**r) for r in dashboard["rewards"]],
        insights=dashboard["insights"],
    )
