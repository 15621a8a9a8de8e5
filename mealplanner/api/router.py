from fastapi import APIRouter
from mealplanner.api.endpoints import auth, meals, weekly

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(meals.router, prefix="/meals", tags=["meals"])
api_router.include_router(weekly.router, prefix="/weekly", tags=["weekly-plans"])
