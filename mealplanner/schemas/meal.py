from enum import Enum
from typing import List, Optional, Union
from pydantic import BaseModel, Field


class MealCategory(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"


CATEGORIES: List[MealCategory] = [MealCategory.breakfast, MealCategory.lunch, MealCategory.dinner]


class Ingredient(BaseModel):
    name: str = Field(..., min_length=1)
    quantity: str = Field(..., min_length=1)


class Meal(BaseModel):
    id: str
    name: str
    category: MealCategory
    calories: int = Field(..., ge=0)
    portion: str
    prep_time: Optional[str] = None
    image_url: Optional[str] = None
    ingredients: List[Ingredient] = []
    created_at: Optional[str] = None


class IngredientRow(BaseModel):
    # raw form row; blank rows are dropped during validation
    name: Optional[str] = ""
    quantity: Optional[str] = ""


class MealForm(BaseModel):
    """Add/edit meal form as submitted, before validation.

    Values are kept as the user typed them so that ``calories = "abc"`` reaches
    the validator instead of failing request parsing.
    """
    name: Optional[str] = ""
    category: Optional[str] = MealCategory.breakfast.value
    calories: Optional[Union[str, int]] = ""
    portion: Optional[str] = ""
    prep_time: Optional[str] = None
    image_url: Optional[str] = None
    ingredients: List[IngredientRow] = []


class MealWrite(BaseModel):
    """Validated row sent to the store."""
    name: str
    category: MealCategory
    calories: int = Field(..., ge=0)
    portion: str
    prep_time: Optional[str] = None
    image_url: str
    ingredients: List[Ingredient] = Field(..., min_length=1)


class MealListResponse(BaseModel):
    meals: List[Meal]
    count: int
