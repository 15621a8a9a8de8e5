import logging
import random
import threading
from datetime import date
from typing import Dict, List, Optional

from mealplanner.core.errors import (
    GenerationInProgressError,
    PermissionDeniedError,
    PlanExistsError,
)
from mealplanner.core.session import SessionContext
from mealplanner.db.repositories import MealRepository, WeeklyPlanRepository
from mealplanner.schemas.meal import Meal
from mealplanner.schemas.weekly_plan import (
    DAYS,
    MEAL_TIMES,
    GenerateResponse,
    PlanDay,
    PlanSlot,
    WeeklyPlan,
    WeeklyPlanView,
)
from .generate import assign_week, partition_by_category, require_complete
from .week_key import resolve_week_start, today_in, week_days

logger = logging.getLogger(__name__)

# one generation at a time per process; other sessions are not coordinated
_generating = threading.Lock()


def build_view(week_start: date, plan: Optional[WeeklyPlan], meals: List[Meal]) -> WeeklyPlanView:
    by_id: Dict[str, Meal] = {m.id: m for m in meals}
    days = []
    for day, day_date in zip(DAYS, week_days(week_start)):
        slots = []
        for meal_time in MEAL_TIMES:
            meal_id = plan.slot(day, meal_time) if plan else None
            slots.append(PlanSlot(meal_time=meal_time, meal_id=meal_id, meal=by_id.get(meal_id) if meal_id else None))
        days.append(PlanDay(day=day, date=day_date, meals=slots))
    return WeeklyPlanView(
        week_start=week_start,
        plan_id=plan.id if plan else None,
        exists=plan is not None,
        days=days,
    )


class WeeklyPlanService:
    def __init__(self, meals: MealRepository, plans: WeeklyPlanRepository, rng: Optional[random.Random] = None):
        self.meals = meals
        self.plans = plans
        self.rng = rng

    def view(self, day: Optional[date] = None) -> WeeklyPlanView:
        """Plan for the week containing ``day`` (default: today), meals resolved."""
        week_start = resolve_week_start(day or today_in())
        plan = self.plans.find_by_week(week_start.isoformat())
        return build_view(week_start, plan, self.meals.list())

    def generate(self, session: SessionContext, confirm_overwrite: bool = False,
                 day: Optional[date] = None) -> GenerateResponse:
        if not session.is_admin:
            raise PermissionDeniedError("Only admins can generate a weekly plan")
        if not _generating.acquire(blocking=False):
            raise GenerationInProgressError()
        try:
            return self._generate(session, confirm_overwrite, resolve_week_start(day or today_in()))
        finally:
            _generating.release()

    def _generate(self, session: SessionContext, confirm_overwrite: bool, week_start: date) -> GenerateResponse:
        key = week_start.isoformat()
        logger.info("Generating weekly plan for %s (requested by %s)", key, session.user_id)

        catalog = self.meals.list()
        partition = require_complete(partition_by_category(catalog))

        existing = self.plans.find_by_week(key)
        if existing and not confirm_overwrite:
            logger.info("Plan for %s exists; overwrite not confirmed", key)
            raise PlanExistsError(key)

        plan = assign_week(partition, week_start, self.rng)
        if existing:
            saved = self.plans.replace(existing.id, plan)
            logger.info("Replaced plan %s for %s", existing.id, key)
        else:
            saved = self.plans.insert(plan)
            logger.info("Inserted plan for %s", key)
        return GenerateResponse(
            message="New week generated!",
            replaced=existing is not None,
            plan=build_view(week_start, saved, catalog),
        )
