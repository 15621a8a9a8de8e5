from datetime import date
from typing import Optional
from fastapi import APIRouter, Body, Depends, Query

from mealplanner.api.deps import get_plan_service, to_http
from mealplanner.core.errors import MealPlannerError
from mealplanner.core.security import get_session_context
from mealplanner.core.session import SessionContext
from mealplanner.schemas.weekly_plan import GenerateRequest, GenerateResponse, WeeklyPlanView
from mealplanner.weekly_plans.service import WeeklyPlanService

router = APIRouter()


@router.get("", response_model=WeeklyPlanView)
def get_weekly_plan(
    week_start: Optional[date] = Query(None, description="Any date in the week; normalized to its Monday"),
    session: SessionContext = Depends(get_session_context),
    service: WeeklyPlanService = Depends(get_plan_service),
):
    try:
        return service.view(week_start)
    except MealPlannerError as e:
        raise to_http(e)


@router.post("/generate", response_model=GenerateResponse, status_code=201)
def generate_week(
    body: Optional[GenerateRequest] = Body(default=None),
    session: SessionContext = Depends(get_session_context),
    service: WeeklyPlanService = Depends(get_plan_service),
):
    """Fill this week's 21 slots at random from the catalog.

    Returns 409 when a plan already exists and ``confirm_overwrite`` is false;
    the client asks the user and repeats the call with the flag set.
    """
    try:
        return service.generate(session, confirm_overwrite=bool(body and body.confirm_overwrite))
    except MealPlannerError as e:
        raise to_http(e)
