"""API v1 routes."""

from fastapi import APIRouter

from houser.api.v1 import auth, health, houses, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, tags=["auth"])
router.include_router(users.router, tags=["users"])
router.include_router(houses.router, tags=["houses"])
