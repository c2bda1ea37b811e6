"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.apify_keys import router as apify_keys_router
from api.v1.routes.linkedin_profiles import router as linkedin_profiles_router
from api.v1.routes.profiles import router as profiles_router
from api.v1.routes.scraping_jobs import router as scraping_jobs_router

router = APIRouter()
router.include_router(profiles_router)
router.include_router(apify_keys_router)
router.include_router(linkedin_profiles_router)
router.include_router(scraping_jobs_router)
