import logging
from typing import List, Optional

from mealplanner.core.config import get_settings
from mealplanner.core.errors import MealValidationError
from mealplanner.schemas.meal import Ingredient, MealCategory, MealForm, MealWrite

logger = logging.getLogger(__name__)


def _text(value) -> str:
    return "" if value is None else str(value).strip()


def _optional(value) -> Optional[str]:
    return _text(value) or None


def filled_ingredients(form: MealForm) -> List[Ingredient]:
    return [
        Ingredient(name=_text(row.name), quantity=_text(row.quantity))
        for row in form.ingredients
        if _text(row.name) and _text(row.quantity)
    ]


def validate_meal_form(form: MealForm) -> MealWrite:
    """Check an add/edit form and build the row to store.

    Raises ``MealValidationError`` with the message shown next to the form;
    nothing is sent to the store in that case.
    """
    name, calories, portion = _text(form.name), _text(form.calories), _text(form.portion)
    if not name or not calories or not portion:
        raise MealValidationError("Please fill in all required fields")
    try:
        calories_value = int(calories)
    except ValueError:
        logger.debug("Rejected calories value %r", calories)
        raise MealValidationError("Calories must be a whole number")
    if calories_value < 0:
        raise MealValidationError("Calories cannot be negative")
    try:
        category = MealCategory(_text(form.category) or MealCategory.breakfast.value)
    except ValueError:
        raise MealValidationError("Category must be breakfast, lunch or dinner")

    ingredients = filled_ingredients(form)
    if not ingredients:
        raise MealValidationError("Please add at least one ingredient")

    return MealWrite(
        name=name,
        category=category,
        calories=calories_value,
        portion=portion,
        prep_time=_optional(form.prep_time),
        image_url=_optional(form.image_url) or get_settings().DEFAULT_MEAL_IMAGE_URL,
        ingredients=ingredients,
    )
