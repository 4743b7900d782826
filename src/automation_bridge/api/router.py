"""Top-level router."""

from fastapi import APIRouter

from automation_bridge.api import auth, health, install, webhooks

router = APIRouter()

router.include_router(health.router)
router.include_router(install.router)
router.include_router(auth.router)
router.include_router(webhooks.router)
