# api/v1/router.py
from fastapi import APIRouter

from . import daily, meals, plans, profiles, progress, quick_foods

api_router = APIRouter()

api_router.include_router(plans.router, prefix="/plans", tags=["Plans"])
api_router.include_router(profiles.router, prefix="/profiles", tags=["Profiles"])
api_router.include_router(meals.router, prefix="/meals", tags=["Meals"])

# these live *under* the profile resource, e.g. /profiles/{user_id}/plan
api_router.include_router(plans.profile_router, prefix="/profiles", tags=["Plans"])
api_router.include_router(progress.router, prefix="/profiles", tags=["Progress"])
api_router.include_router(quick_foods.router, prefix="/profiles", tags=["Quick foods"])
api_router.include_router(daily.router, prefix="/profiles", tags=["Daily"])
