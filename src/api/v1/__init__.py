"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.contacts import router as contacts_router
from api.v1.routes.likes import router as likes_router
from api.v1.routes.likes import unregistered_likes_router, user_likes_router
from api.v1.routes.notifications import router as notifications_router
from api.v1.routes.profiles import router as profiles_router
from api.v1.routes.search import router as search_router

router = APIRouter()
router.include_router(profiles_router)
router.include_router(search_router)
router.include_router(likes_router)
router.include_router(unregistered_likes_router)
router.include_router(user_likes_router)
router.include_router(notifications_router)
router.include_router(contacts_router)
