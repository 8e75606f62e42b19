"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.handymen import router as handymen_router

router = APIRouter()
router.include_router(handymen_router)
