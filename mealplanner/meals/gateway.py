import logging
from typing import List, Optional

from mealplanner.core.errors import MealNotFoundError, PermissionDeniedError
from mealplanner.core.session import SessionContext
from mealplanner.db.repositories import MealRepository
from mealplanner.schemas.meal import Meal, MealCategory, MealForm
from .validation import validate_meal_form

logger = logging.getLogger(__name__)


class MealGateway:
    """Meal catalog operations for one session.

    Mutations are refused here for non-admins; the store's row-level policies
    check the same thing again on its side.
    """

    def __init__(self, session: SessionContext, repository: MealRepository):
        self.session = session
        self.repository = repository

    def _require_admin(self, action: str) -> None:
        if not self.session.is_admin:
            logger.info("User %s tried to %s without admin role", self.session.user_id, action)
            raise PermissionDeniedError(f"Only admins can {action}")

    def list(self, category: Optional[str] = None) -> List[Meal]:
        if category in (None, "", "all"):
            return self.repository.list()
        return self.repository.list(MealCategory(category).value)

    def get(self, meal_id: str) -> Meal:
        meal = self.repository.get(meal_id)
        if meal is None:
            raise MealNotFoundError("Meal not found")
        return meal

    def create(self, form: MealForm) -> Meal:
        self._require_admin("add meals")
        meal = self.repository.insert(validate_meal_form(form))
        logger.info("Meal %s added by %s", meal.id, self.session.user_id)
        return meal

    def update(self, meal_id: str, form: MealForm) -> Meal:
        self._require_admin("edit meals")
        meal = self.repository.update(meal_id, validate_meal_form(form))
        if meal is None:
            raise MealNotFoundError("Meal not found")
        return meal

    def delete(self, meal_id: str) -> None:
        self._require_admin("delete meals")
        if not self.repository.delete(meal_id):
            raise MealNotFoundError("Meal not found")
        logger.info("Meal %s deleted by %s", meal_id, self.session.user_id)
