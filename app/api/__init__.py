from fastapi import APIRouter

from .routes import (
    businesses,
    customers,
    health,
    identity,
    rewards,
)

api_router = APIRouter()

# Health check
api_router.include_router(health.router, tags=["health"])

# Phone number lookup
api_router.include_router(identity.router, prefix="/identity", tags=["identity"])

# Registration, points and check-ins
api_router.include_router(customers.router, prefix="/customers", tags=["customers"])
api_router.include_router(businesses.router, prefix="/businesses", tags=["businesses"])

# Reward catalogue
api_router.include_router(rewards.router, prefix="/rewards", tags=["rewards"])
