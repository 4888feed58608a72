"""
Central API router – registers all endpoint sub-routers under /api.
"""
from fastapi import APIRouter
import logging

from artisan_admin.api.endpoints import auth, categories, dashboard, listings, users

logger = logging.getLogger(__name__)

api_router = APIRouter(prefix="/api")

logger.info("Registering API routers")
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(categories.router)
api_router.include_router(listings.products_router)
api_router.include_router(listings.services_router)
api_router.include_router(listings.training_router)
api_router.include_router(listings.status_router)
api_router.include_router(listings.admin_status_router)
api_router.include_router(dashboard.router)
