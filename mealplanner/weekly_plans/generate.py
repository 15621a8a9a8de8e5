import random
from datetime import date
from typing import Dict, Iterable, List, NamedTuple, Optional

from mealplanner.core.errors import IncompleteCatalogError
from mealplanner.schemas.meal import Meal, MealCategory
from mealplanner.schemas.weekly_plan import DAYS, WeeklyPlan, slot_key


class CategoryPartition(NamedTuple):
    breakfast: List[Meal]
    lunch: List[Meal]
    dinner: List[Meal]

    def by_time(self) -> Dict[str, List[Meal]]:
        return self._asdict()


def partition_by_category(meals: Iterable[Meal]) -> CategoryPartition:
    """Split the catalog into breakfast/lunch/dinner, keeping catalog order."""
    groups: Dict[str, List[Meal]] = {c.value: [] for c in MealCategory}
    for meal in meals:
        groups[MealCategory(meal.category).value].append(meal)
    return CategoryPartition(**groups)


def missing_categories(partition: CategoryPartition) -> List[str]:
    return [name for name, meals in partition.by_time().items() if not meals]


def require_complete(partition: CategoryPartition) -> CategoryPartition:
    missing = missing_categories(partition)
    if missing:
        raise IncompleteCatalogError(missing)
    return partition


def spread(meals: List[Meal], rng: Optional[random.Random] = None) -> List[Meal]:
    """One meal per day: a fresh permutation, reused from the start once exhausted."""
    shuffled = (rng or random).sample(meals, len(meals))
    return [shuffled[i % len(shuffled)] for i in range(len(DAYS))]


def assign_week(partition: CategoryPartition, week_start: date, rng: Optional[random.Random] = None) -> WeeklyPlan:
    require_complete(partition)
    slots: Dict[str, Optional[str]] = {}
    for meal_time, meals in partition.by_time().items():
        for day, meal in zip(DAYS, spread(meals, rng)):
            slots[slot_key(day, meal_time)] = meal.id
    return WeeklyPlan(week_start=week_start, **slots)
