import datetime as dt
from datetime import date
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict

from mealplanner.schemas.meal import Meal

DAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
MEAL_TIMES = ["breakfast", "lunch", "dinner"]
SLOT_KEYS = [f"{day}_{time}" for day in DAYS for time in MEAL_TIMES]


def slot_key(day: str, meal_time: str) -> str:
    return f"{day}_{meal_time}"


class WeeklyPlan(BaseModel):
    """One row of ``weekly_plans``: a week-start key and 21 meal references."""
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    week_start: date
    monday_breakfast: Optional[str] = None
    monday_lunch: Optional[str] = None
    monday_dinner: Optional[str] = None
    tuesday_breakfast: Optional[str] = None
    tuesday_lunch: Optional[str] = None
    tuesday_dinner: Optional[str] = None
    wednesday_breakfast: Optional[str] = None
    wednesday_lunch: Optional[str] = None
    wednesday_dinner: Optional[str] = None
    thursday_breakfast: Optional[str] = None
    thursday_lunch: Optional[str] = None
    thursday_dinner: Optional[str] = None
    friday_breakfast: Optional[str] = None
    friday_lunch: Optional[str] = None
    friday_dinner: Optional[str] = None
    saturday_breakfast: Optional[str] = None
    saturday_lunch: Optional[str] = None
    saturday_dinner: Optional[str] = None
    sunday_breakfast: Optional[str] = None
    sunday_lunch: Optional[str] = None
    sunday_dinner: Optional[str] = None

    def slot(self, day: str, meal_time: str) -> Optional[str]:
        return getattr(self, slot_key(day, meal_time))

    def slots(self) -> Dict[str, Optional[str]]:
        return {key: getattr(self, key) for key in SLOT_KEYS}

    def to_row(self) -> Dict[str, Optional[str]]:
        """Column mapping for insert/update; ``id`` is assigned by the store."""
        return {"week_start": self.week_start.isoformat(), **self.slots()}


class PlanSlot(BaseModel):
    meal_time: str
    meal_id: Optional[str] = None
    meal: Optional[Meal] = None


class PlanDay(BaseModel):
    day: str
    date: dt.date
    meals: List[PlanSlot]


class WeeklyPlanView(BaseModel):
    week_start: date
    plan_id: Optional[str] = None
    exists: bool
    days: List[PlanDay]


class GenerateRequest(BaseModel):
    confirm_overwrite: bool = False


class GenerateResponse(BaseModel):
    message: str
    replaced: bool
    plan: WeeklyPlanView
