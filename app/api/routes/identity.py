from fastapi import APIRouter

from app.core.errors import BusinessNotFound
from app.domain.schemas import (
    ERROR_RESPONSES,
    BusinessAnalytics,
    BusinessResponse,
    CustomerResponse,
    IdentityResponse,
    Role,
)
from app.services import loyalty

router = APIRouter(responses=ERROR_RESPONSES)


def build_identity_response(role: Role, record: dict | None) -> IdentityResponse:
    if not record:
        return IdentityResponse(status="not_found", role=role, registration_required=True)
    if role == Role.CUSTOMER:
        return IdentityResponse(
            status="found", role=role, registration_required=False,
            customer=CustomerResponse(**record),
        )
    return IdentityResponse(
        status="found", role=role, registration_required=False,
        business=BusinessResponse(**record),
    )


@router.get("/{role}/{phone_number}", response_model=IdentityResponse)
def resolve_identity(role: Role, phone_number: str):
    """Resolve a phone number to a customer or business.

    An unknown phone is a normal answer (``not_found``) telling the caller to
    show the registration flow.
    """
    record = loyalty.resolve_identity(phone_number, role)
    return build_identity_response(role, record)


@router.get("/business/{phone_number}/analytics", response_model=BusinessAnalytics)
def get_business_analytics_by_phone(phone_number: str):
    """Analytics for the business owned by a phone number."""
    analytics = loyalty.get_business_analytics_by_phone(phone_number)
    if analytics is None:
        raise BusinessNotFound("No business is registered with this phone number")
    return analytics
