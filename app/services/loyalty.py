"""
Points/visit ledger workflow.

Identity resolution, registration, check-in and the aggregate reads every
dashboard depends on. Input is validated here before any store access;
repositories raise the typed errors from app.core.errors for store failures.
"""

import logging
import uuid

from app.core.config import settings
from app.core.errors import (
    BusinessNotFound,
    CustomerNotFound,
    DuplicateKey,
    PersistenceFailure,
    ValidationError,
)
from app.domain.schemas import BusinessAnalytics, BusinessCategory, PointsSummary, Role
from app.repositories.analytics import AnalyticsRepository
from app.repositories.business import BusinessRepository
from app.repositories.customer import CustomerRepository
from app.repositories.reward import RewardRepository
from app.repositories.visit import VisitRepository
from app.services.insights import business_insights, customer_insights

logger = logging.getLogger(__name__)


# ============================================
# Validation
# ============================================

def validate_phone(phone_number: str) -> str:
    phone = (phone_number or "").strip()
    if len(phone) < settings.min_phone_length:
        raise ValidationError("Please enter a valid phone number")
    return phone


def validate_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Name is required")
    return cleaned


def validate_category(category: str) -> BusinessCategory:
    try:
        return BusinessCategory(category)
    except ValueError:
        allowed = ", ".join(c.value for c in BusinessCategory)
        raise ValidationError(f"Unknown business category '{category}'. Expected one of: {allowed}")


def validate_business_id(business_id: str) -> str:
    try:
        return str(uuid.UUID(str(business_id)))
    except ValueError:
        raise ValidationError(f"Malformed business id '{business_id}'")


def validate_points(points) -> int:
    low, high = settings.min_points_per_visit, settings.max_points_per_visit
    # bool is an int subclass; True is not a point value
    if isinstance(points, bool) or not isinstance(points, int):
        raise ValidationError("Points must be a whole number")
    if points < low or points > high:
        raise ValidationError(f"Points must be between {low} and {high}")
    return points


# ============================================
# Identity Resolution & Registration
# ============================================

def resolve_identity(phone_number: str, role: Role | str) -> dict | None:
    """Look up the customer or business registered under a phone number.

    Returns None when nobody is registered in that role; callers route that
    to registration rather than treating it as a failure.
    """
    phone = validate_phone(phone_number)
    role = Role(role)
    if role == Role.CUSTOMER:
        return CustomerRepository.get_by_phone(phone)
    return BusinessRepository.get_by_phone(phone)


def register_customer(phone_number: str, name: str) -> dict:
    phone = validate_phone(phone_number)
    name = validate_name(name)

    if CustomerRepository.get_by_phone(phone):
        raise DuplicateKey("A customer is already registered with this phone number")

    # A concurrent registration still trips the unique constraint -> DuplicateKey
    customer = CustomerRepository.create(phone, name)
    if not customer:
        raise PersistenceFailure("Failed to create customer")

    logger.info(f"Registered customer {customer['id']}")
    return customer


def register_business(
    phone_number: str,
    name: str,
    category: str,
    points_per_visit: int | None = None,
) -> dict:
    phone = validate_phone(phone_number)
    name = validate_name(name)
    category = validate_category(category)
    if points_per_visit is None:
        points_per_visit = settings.default_points_per_visit
    points_per_visit = validate_points(points_per_visit)

    if BusinessRepository.get_by_phone(phone):
        raise DuplicateKey("A business is already registered with this phone number")

    business = BusinessRepository.create(phone, name, category.value, points_per_visit)
    if not business:
        raise PersistenceFailure("Failed to create business")

    logger.info(f"Registered business {business['id']} ({category.value})")
    return business


# ============================================
# Check-In
# ============================================

def check_in(customer_phone: str, business_id: str, points: int | None = None) -> dict:
    """Record a visit for a registered customer and award points.

    Fails closed: an unregistered phone raises CustomerNotFound and nothing is
    written. The visit and the relation increment are committed together by
    the check_in_customer database function.
    """
    phone = validate_phone(customer_phone)
    business_id = validate_business_id(business_id)
    if points is not None:
        points = validate_points(points)

    customer = CustomerRepository.get_by_phone(phone)
    if not customer:
        raise CustomerNotFound("Customer not found. Please ask them to register first.")

    business = BusinessRepository.get_by_id(business_id)
    if not business:
        raise BusinessNotFound("Business not found")

    if points is None:
        points = validate_points(business.get("points_per_visit") or settings.default_points_per_visit)

    visit = VisitRepository.check_in(customer["id"], business["id"], points)
    if not visit:
        raise PersistenceFailure("Check-in returned no visit")

    logger.info(f"Checked in customer {customer['id']} at business {business['id']} for {points} points")
    return visit


# ============================================
# Aggregate Projection
# ============================================

def get_customer_points(phone_number: str) -> PointsSummary:
    """Points summary for a customer; all zeros when there is nothing to report."""
    phone = validate_phone(phone_number)
    row = AnalyticsRepository.get_customer_points(phone)
    if not row:
        return PointsSummary()
    return PointsSummary(
        available_points=row.get("available_points") or 0,
        total_points_earned=row.get("total_points_earned") or 0,
        total_visits=row.get("total_visits") or 0,
    )


def get_business_analytics(business_id: str) -> BusinessAnalytics:
    """Analytics for a business; all zeros when it has no activity."""
    business_id = validate_business_id(business_id)
    row = AnalyticsRepository.get_business_analytics(business_id)
    if not row:
        return BusinessAnalytics()
    return BusinessAnalytics(
        total_customers=row.get("total_customers") or 0,
        total_visits=row.get("total_visits") or 0,
        avg_points_per_visit=float(row.get("avg_points_per_visit") or 0),
        total_redemptions=row.get("total_redemptions") or 0,
    )


def get_business_analytics_by_phone(phone_number: str) -> BusinessAnalytics | None:
    business = resolve_identity(phone_number, Role.BUSINESS)
    if not business:
        return None
    return get_business_analytics(business["id"])


def _flatten_visit(visit: dict) -> dict:
    flat = {k: v for k, v in visit.items() if k not in ("customers", "businesses")}
    customer = visit.get("customers") or {}
    business = visit.get("businesses") or {}
    flat["customer_name"] = customer.get("name")
    flat["customer_phone"] = customer.get("phone_number")
    flat["business_name"] = business.get("name")
    flat["business_type"] = business.get("type")
    return flat


def get_recent_visits(business_id: str, limit: int | None = None) -> list[dict]:
    """Most recent visits at a business, newest first, with customer details."""
    if limit is None:
        limit = settings.recent_visits_limit
    if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= settings.max_recent_visits_limit:
        raise ValidationError(f"Limit must be between 1 and {settings.max_recent_visits_limit}")
    business_id = validate_business_id(business_id)
    rows = VisitRepository.list_recent_by_business(business_id, limit)
    return [_flatten_visit(r) for r in rows]


def get_customer_visits(phone_number: str) -> list[dict]:
    """A customer's visit history across businesses, newest first."""
    phone = validate_phone(phone_number)
    customer = CustomerRepository.get_by_phone(phone)
    if not customer:
        raise CustomerNotFound("Customer not found")
    rows = VisitRepository.list_by_customer(customer["id"])
    return [_flatten_visit(r) for r in rows]


# ============================================
# Rewards
# ============================================

def is_reward_redeemable(available_points: int, reward: dict) -> bool:
    return bool(reward.get("is_active")) and available_points >= reward.get("points_required", 0)


def _flatten_reward(reward: dict) -> dict:
    flat = {k: v for k, v in reward.items() if k != "businesses"}
    business = reward.get("businesses") or {}
    flat["business_name"] = business.get("name")
    flat["business_type"] = business.get("type")
    return flat


def get_business_rewards(business_id: str) -> list[dict]:
    business_id = validate_business_id(business_id)
    return RewardRepository.list_active_by_business(business_id)


def get_all_active_rewards() -> list[dict]:
    return [_flatten_reward(r) for r in RewardRepository.list_all_active()]


# ============================================
# Dashboards
# ============================================

def get_customer_dashboard(phone_number: str) -> dict | None:
    """Everything the customer view shows, or None if the phone is unregistered."""
    customer = resolve_identity(phone_number, Role.CUSTOMER)
    if not customer:
        return None

    points = get_customer_points(customer["phone_number"])
    rewards = get_all_active_rewards()
    for reward in rewards:
        reward["redeemable"] = is_reward_redeemable(points.available_points, reward)

    return {
        "customer": customer,
        "points": points,
        "rewards": rewards,
        "insights": customer_insights(points),
    }


def get_business_dashboard(business_id: str) -> dict:
    business_id = validate_business_id(business_id)
    business = BusinessRepository.get_by_id(business_id)
    if not business:
        raise BusinessNotFound("Business not found")

    analytics = get_business_analytics(business["id"])
    return {
        "business": business,
        "analytics": analytics,
        "recent_visits": get_recent_visits(business["id"]),
        "insights": business_insights(analytics),
    }
