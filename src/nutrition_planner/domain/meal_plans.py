"""Models for structured meal plan answers."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FoodCategory(str, Enum):
    """Time of day a planned food is eaten."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class MealPlanFood(BaseModel):
    """Single food entry of a meal plan."""

    model_config = ConfigDict(populate_by_name=True)

    food: str
    weight: str
    macros: str
    food_explanation: str = Field(alias="foodExplanation")
    food_category: FoodCategory = Field(alias="foodCategory")


class MealPlanResponse(BaseModel):
    """Meal plan with its explanation and preparation notes."""

    model_config = ConfigDict(populate_by_name=True)

    plan: list[MealPlanFood]
    plan_explanation: str = Field(alias="planExplanation")
    plan_preparation: str = Field(alias="planPreparation")
