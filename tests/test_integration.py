"""
Check-in against a real Supabase project with database/schema.py applied.

Opt-in: writes rows, so it only runs with LOYALTY_INTEGRATION=1 and
SUPABASE_URL / SUPABASE_SECRET_KEY set.
"""

import os
import random
from concurrent.futures import ThreadPoolExecutor

import pytest

from app.repositories.analytics import AnalyticsRepository
from app.services import loyalty

pytestmark = pytest.mark.skipif(
    os.getenv("LOYALTY_INTEGRATION") != "1"
    or not os.getenv("SUPABASE_URL")
    or not os.getenv("SUPABASE_SECRET_KEY"),
    reason="needs LOYALTY_INTEGRATION=1 and Supabase credentials",
)


def random_phone() -> str:
    return "+2547" + "".join(random.choices("0123456789", k=8))


def test_concurrent_check_ins_serialize_in_postgres():
    customer = loyalty.register_customer(random_phone(), "Integration Customer")
    business = loyalty.register_business(random_phone(), "Integration Salon", "salon")
    points = [n % 20 + 1 for n in range(30)]

    with ThreadPoolExecutor(max_workers=10) as pool:
        list(pool.map(
            lambda n: loyalty.check_in(customer["phone_number"], business["id"], n),
            points,
        ))

    relation = AnalyticsRepository.get_relation(customer["id"], business["id"])
    assert relation["total_visits"] == len(points)
    assert relation["total_points_earned"] == sum(points)

    summary = loyalty.get_customer_points(customer["phone_number"])
    assert summary.total_visits == len(points)
    assert summary.available_points == sum(points)
