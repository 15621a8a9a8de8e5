from fastapi import Depends, HTTPException

from mealplanner.core.errors import (
    AuthError,
    GenerationInProgressError,
    IncompleteCatalogError,
    MealNotFoundError,
    MealPlannerError,
    MealValidationError,
    PermissionDeniedError,
    PlanExistsError,
    StoreError,
)
from mealplanner.core.security import get_db, get_session_context
from mealplanner.core.session import SessionContext
from mealplanner.db.repositories import MealRepository, WeeklyPlanRepository
from mealplanner.meals.gateway import MealGateway
from mealplanner.weekly_plans.service import WeeklyPlanService

STATUS_FOR = [
    (AuthError, 401),
    (PermissionDeniedError, 403),
    (MealNotFoundError, 404),
    (PlanExistsError, 409),
    (GenerationInProgressError, 409),
    (MealValidationError, 422),
    (IncompleteCatalogError, 422),
    (StoreError, 502),
]


def to_http(error: MealPlannerError) -> HTTPException:
    for cls, code in STATUS_FOR:
        if isinstance(error, cls):
            return HTTPException(status_code=code, detail=error.message)
    return HTTPException(status_code=500, detail=error.message)


def get_meal_repository(db=Depends(get_db)) -> MealRepository:
    return MealRepository(db)


def get_plan_repository(db=Depends(get_db)) -> WeeklyPlanRepository:
    return WeeklyPlanRepository(db)


def get_meal_gateway(
    session: SessionContext = Depends(get_session_context),
    meals: MealRepository = Depends(get_meal_repository),
) -> MealGateway:
    return MealGateway(session, meals)


def get_plan_service(
    meals: MealRepository = Depends(get_meal_repository),
    plans: WeeklyPlanRepository = Depends(get_plan_repository),
) -> WeeklyPlanService:
    return WeeklyPlanService(meals, plans)
