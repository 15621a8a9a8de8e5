from typing import Optional
from fastapi import APIRouter, Depends, Query

from mealplanner.api.deps import get_meal_gateway, to_http
from mealplanner.core.errors import MealPlannerError
from mealplanner.meals.gateway import MealGateway
from mealplanner.schemas.meal import Meal, MealForm, MealListResponse

router = APIRouter()


@router.get("", response_model=MealListResponse)
def list_meals(
    category: Optional[str] = Query(None, pattern="^(all|breakfast|lunch|dinner)$"),
    gateway: MealGateway = Depends(get_meal_gateway),
):
    """Meal library, ordered by category; ``category`` filters (``all`` = no filter)."""
    try:
        meals = gateway.list(category)
        return MealListResponse(meals=meals, count=len(meals))
    except MealPlannerError as e:
        raise to_http(e)


@router.get("/{meal_id}", response_model=Meal)
def get_meal(meal_id: str, gateway: MealGateway = Depends(get_meal_gateway)):
    try:
        return gateway.get(meal_id)
    except MealPlannerError as e:
        raise to_http(e)


@router.post("", response_model=Meal, status_code=201)
def create_meal(form: MealForm, gateway: MealGateway = Depends(get_meal_gateway)):
    try:
        return gateway.create(form)
    except MealPlannerError as e:
        raise to_http(e)


@router.put("/{meal_id}", response_model=Meal)
def update_meal(meal_id: str, form: MealForm, gateway: MealGateway = Depends(get_meal_gateway)):
    try:
        return gateway.update(meal_id, form)
    except MealPlannerError as e:
        raise to_http(e)


@router.delete("/{meal_id}")
def delete_meal(meal_id: str, gateway: MealGateway = Depends(get_meal_gateway)):
    try:
        gateway.delete(meal_id)
        return {"message": "Meal deleted"}
    except MealPlannerError as e:
        raise to_http(e)
