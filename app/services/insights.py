"""
Dashboard insights.

Fixed message templates picked by simple threshold checks on the aggregate
summaries. Pure functions: no store access, no model calls.
"""

from app.core.config import settings
from app.domain.schemas import BusinessAnalytics, PointsSummary


def customer_insights(
    summary: PointsSummary,
    reward_threshold: int | None = None,
    loyal_visits: int | None = None,
) -> list[str]:
    """Build the insight lines shown on a customer's dashboard."""
    if reward_threshold is None:
        reward_threshold = settings.reward_points_threshold
    if loyal_visits is None:
        loyal_visits = settings.loyal_customer_visits

    points = summary.available_points
    visits = summary.total_visits

    if points >= reward_threshold:
        points_hint = "You can redeem rewards now!"
    else:
        points_hint = f"Just {reward_threshold - points} more points to your first reward."

    if visits >= loyal_visits:
        visits_hint = "You're a loyal customer!"
    else:
        visits_hint = "Keep visiting to unlock more benefits!"

    return [
        f"🎯 You have {points} points! {points_hint}",
        f"📈 You've made {visits} visits. {visits_hint}",
        "💡 Based on your activity, Thursday afternoons might be the best time for deals!",
        "🌟 You're building great loyalty! Consider trying our premium services.",
    ]


def business_insights(
    analytics: BusinessAnalytics,
    engaged_customers: int | None = None,
) -> list[str]:
    """Build the insight lines shown on a business dashboard."""
    if engaged_customers is None:
        engaged_customers = settings.engaged_customer_count

    customers = analytics.total_customers
    visits = analytics.total_visits

    if customers > engaged_customers:
        engagement = "Great engagement!"
    else:
        engagement = "Focus on customer acquisition."

    if customers > 0:
        next_step = "Send personalized offers to increase return visits."
    else:
        next_step = "Start by getting your first customers!"

    return [
        f"📈 You have {customers} customers and {visits} total visits. {engagement}",
        f"🎯 {next_step}",
        "💡 Consider implementing a referral program to grow your customer base.",
        "🌟 Reward your most loyal customers with exclusive perks to increase retention.",
    ]
