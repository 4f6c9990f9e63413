from enum import Enum
from typing import Optional, List
from datetime import datetime

from pydantic import BaseModel, Field


class BusinessCategory(str, Enum):
    SALON = "salon"
    BARBERSHOP = "barbershop"
    RESTAURANT = "restaurant"
    CAFE = "cafe"
    SPA = "spa"
    OTHER = "other"


class Role(str, Enum):
    CUSTOMER = "customer"
    BUSINESS = "business"


# ============================================
# Customer Schemas
# ============================================

class CustomerCreate(BaseModel):
    phone_number: str
    name: str


class CustomerResponse(BaseModel):
    id: str
    phone_number: str
    name: str
    created_at: Optional[datetime] = None


# ============================================
# Business Schemas
# ============================================

class BusinessCreate(BaseModel):
    phone_number: str
    name: str
    # Checked against BusinessCategory in the service so bad values surface as validation_error
    category: str
    points_per_visit: Optional[int] = None


class BusinessResponse(BaseModel):
    id: str
    owner_phone: str
    name: str
    type: BusinessCategory
    points_per_visit: int
    created_at: Optional[datetime] = None


# ============================================
# Identity Schemas
# ============================================

class IdentityResponse(BaseModel):
    """Result of a phone lookup. ``not_found`` routes the caller to registration."""
    status: str  # "found" | "not_found"
    role: Role
    registration_required: bool
    customer: Optional[CustomerResponse] = None
    business: Optional[BusinessResponse] = None


# ============================================
# Visit Schemas
# ============================================

class CheckInRequest(BaseModel):
    customer_phone: str
    # Defaults to the business's points_per_visit
    points: Optional[int] = None


class VisitResponse(BaseModel):
    id: str
    customer_id: str
    business_id: str
    points_earned: int
    visit_date: Optional[datetime] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    business_name: Optional[str] = None
    business_type: Optional[str] = None


class VisitListResponse(BaseModel):
    visits: List[VisitResponse]


# ============================================
# Aggregate Schemas
# ============================================

class PointsSummary(BaseModel):
    available_points: int = 0
    total_points_earned: int = 0
    total_visits: int = 0


class BusinessAnalytics(BaseModel):
    total_customers: int = 0
    total_visits: int = 0
    avg_points_per_visit: float = 0
    total_redemptions: int = 0


# ============================================
# Reward Schemas
# ============================================

class RewardResponse(BaseModel):
    id: str
    business_id: str
    name: str
    description: Optional[str] = None
    points_required: int = Field(..., ge=0)
    is_active: bool = True
    business_name: Optional[str] = None
    business_type: Optional[str] = None
    redeemable: Optional[bool] = None  # Only set on a customer's dashboard


class RewardListResponse(BaseModel):
    rewards: List[RewardResponse]


# ============================================
# Dashboard Schemas
# ============================================

class CustomerDashboard(BaseModel):
    customer: CustomerResponse
    points: PointsSummary
    rewards: List[RewardResponse]
    insights: List[str]


class BusinessDashboard(BaseModel):
    business: BusinessResponse
    analytics: BusinessAnalytics
    recent_visits: List[VisitResponse]
    insights: List[str]


class ErrorResponse(BaseModel):
    error: str
    detail: str


# Tagged error bodies rendered by the LoyaltyError handler
ERROR_RESPONSES = {
    status: {"model": ErrorResponse}
    for status in (404, 409, 422, 503)
}
