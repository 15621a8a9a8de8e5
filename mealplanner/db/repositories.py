"""Narrow table gateways over the supabase query builder.

Nothing outside this module builds queries; callers get schema objects back
and every store failure surfaces as ``StoreError``.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx
from postgrest.exceptions import APIError

from mealplanner.core.config import get_settings
from mealplanner.core.errors import StoreError
from mealplanner.schemas.meal import Ingredient, Meal, MealWrite
from mealplanner.schemas.user import Role
from mealplanner.schemas.weekly_plan import SLOT_KEYS, WeeklyPlan

logger = logging.getLogger(__name__)


def _rows(res) -> List[Dict[str, Any]]:
    return (getattr(res, "data", None) or []) if res is not None else []


def _execute(query, action: str):
    try:
        return query.execute()
    except APIError as e:
        message = getattr(e, "message", None) or str(e)
        logger.error("Store error while %s: %s", action, message)
        raise StoreError(f"Error {action}: {message}") from e
    except httpx.HTTPError as e:
        logger.error("Store unreachable while %s: %s", action, e)
        raise StoreError(f"Error {action}: {e}") from e


def _id(value) -> Optional[str]:
    return None if value is None else str(value)


def _ingredients(meal_id, value) -> List[Ingredient]:
    """Stored ingredients as strings; entries without a name and quantity are skipped."""
    items = []
    for item in value if isinstance(value, list) else []:
        name = item.get("name") if isinstance(item, dict) else None
        quantity = item.get("quantity") if isinstance(item, dict) else None
        if name is None or quantity is None or not str(name).strip() or not str(quantity).strip():
            logger.warning("Skipping unusable ingredient %r on meal %s", item, meal_id)
            continue
        items.append(Ingredient(name=str(name), quantity=str(quantity)))
    return items


def meal_from_row(row: Dict[str, Any]) -> Meal:
    return Meal(
        id=_id(row.get("id")),
        name=row.get("name") or "",
        category=row.get("category"),
        calories=int(row.get("calories") or 0),
        portion=row.get("portion") or "",
        prep_time=_id(row.get("prep_time")),
        image_url=row.get("image_url"),
        ingredients=_ingredients(row.get("id"), row.get("ingredients")),
        created_at=_id(row.get("created_at")),
    )


def plan_from_row(row: Dict[str, Any]) -> WeeklyPlan:
    slots = {key: _id(row.get(key)) for key in SLOT_KEYS}
    return WeeklyPlan(id=_id(row.get("id")), week_start=row["week_start"], **slots)


class MealRepository:
    def __init__(self, client, table: Optional[str] = None):
        self.client = client
        self.table = table or get_settings().MEALS_TABLE

    def list(self, category: Optional[str] = None) -> List[Meal]:
        query = self.client.table(self.table).select("*")
        if category:
            query = query.eq("category", category)
        res = _execute(query.order("category"), "fetching meals")
        return [meal_from_row(r) for r in _rows(res)]

    def get(self, meal_id: str) -> Optional[Meal]:
        res = _execute(
            self.client.table(self.table).select("*").eq("id", meal_id).limit(1),
            "fetching meal",
        )
        rows = _rows(res)
        return meal_from_row(rows[0]) if rows else None

    def insert(self, meal: MealWrite) -> Meal:
        res = _execute(
            self.client.table(self.table).insert(meal.model_dump(mode="json")),
            "adding meal",
        )
        rows = _rows(res)
        if not rows:
            raise StoreError("Error adding meal: no row returned")
        return meal_from_row(rows[0])

    def update(self, meal_id: str, meal: MealWrite) -> Optional[Meal]:
        res = _execute(
            self.client.table(self.table).update(meal.model_dump(mode="json")).eq("id", meal_id),
            "updating meal",
        )
        rows = _rows(res)
        return meal_from_row(rows[0]) if rows else None

    def delete(self, meal_id: str) -> bool:
        res = _execute(
            self.client.table(self.table).delete().eq("id", meal_id),
            "deleting meal",
        )
        return bool(_rows(res))


class WeeklyPlanRepository:
    def __init__(self, client, table: Optional[str] = None):
        self.client = client
        self.table = table or get_settings().WEEKLY_PLANS_TABLE

    def find_by_week(self, week_start: str) -> Optional[WeeklyPlan]:
        res = _execute(
            self.client.table(self.table).select("*").eq("week_start", week_start).limit(1),
            "checking existing plan",
        )
        rows = _rows(res)
        return plan_from_row(rows[0]) if rows else None

    def insert(self, plan: WeeklyPlan) -> WeeklyPlan:
        res = _execute(
            self.client.table(self.table).insert(plan.to_row()),
            "generating week",
        )
        rows = _rows(res)
        return plan_from_row(rows[0]) if rows else plan

    def replace(self, plan_id: str, plan: WeeklyPlan) -> WeeklyPlan:
        """Overwrite all 21 slots of an existing row in a single update."""
        res = _execute(
            self.client.table(self.table).update(plan.slots()).eq("id", plan_id),
            "replacing existing plan",
        )
        rows = _rows(res)
        if not rows:
            # the row vanished or the update was filtered out by row-level policy
            raise StoreError("Error replacing existing plan: plan was not updated")
        return plan_from_row(rows[0])


class UserRoleRepository:
    def __init__(self, client, table: Optional[str] = None):
        self.client = client
        self.table = table or get_settings().USER_ROLES_TABLE

    def role_for(self, user_id: str) -> Role:
        res = _execute(
            self.client.table(self.table).select("role").eq("user_id", user_id).limit(1),
            "fetching user role",
        )
        rows = _rows(res)
        value = rows[0].get("role") if rows else None
        try:
            return Role(value)
        except ValueError:
            return Role.viewer
