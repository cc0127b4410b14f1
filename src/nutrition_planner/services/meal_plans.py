"""Meal plan generation from the current foods and macro targets."""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Protocol

from pydantic import ValidationError

from nutrition_planner.domain.meal_plans import MealPlanResponse
from nutrition_planner.domain.models import StateSnapshot
from nutrition_planner.services.state import StateReader

logger = logging.getLogger(__name__)

MEAL_PLAN_PROMPT = """\
You are a personal nutritionist with access to historical meal plans and their outcomes.
Consider the following context when creating a meal plan:

{context}

Please generate a meal plan that:
1. Considers the available foods. You are free to suggest similar items, the list
is to give you context in what foods I like.
2. Meets the macro targets as much as possible
3. Considers previous successful meal plans
4. Includes 5 meals per day with one protein shake being one of them
5. Is suitable for meal prep (same meals daily)

Provide portions in grams and include estimated macros per meal if possible.

For your response, prefer to give portions and weights for all weekdays instead
of per day while breaking down macros per day. For example:
"chicken breast 800g (160 per serving)"

Stick to this JSON format for the output.

{{
    "plan": [
        {{
            "food": string, // The food name
            "weight": string, // The weight of the food in grams
            "macros": string, // Protein, fat, carbs, and calories
            "foodExplanation": string, // Why this food was chosen over alternatives
            "foodCategory": string // The time of the meal
        }}
    ],
    "planExplanation": string, // Explanation of the plan in markdown.
    "planPreparation": string // Explanation of the plan preparation in markdown.
}}

"foodCategory" must be one of breakfast, lunch, dinner, or snack.

Ensure for "planPreparation" you solely use the foods in the "plan".

Make the "planExplanation" and "planPreparation" compatible with some color!
Ensure the plan is formatted in a way that's displayable in a terminal.
"""


class MealPlanError(RuntimeError):
    """Raised when a meal plan cannot be produced."""


class MealPlanClient(Protocol):
    """Interface for the language model producing meal plans."""

    async def complete(self, *, model: str, prompt: str) -> str:
        """Return the raw text answer for a prompt."""


@dataclass(frozen=True)
class PlanExchange:
    """State sent with a previous request and the answer it received."""

    context: str
    answer: str


@dataclass
class MealPlanService:
    """Builds meal plan prompts from current state and validates answers."""

    client: MealPlanClient
    state: StateReader
    model: str
    history_size: int = 5
    history: deque[PlanExchange] = field(init=False)

    def __post_init__(self) -> None:
        self.history = deque(maxlen=self.history_size)

    async def generate_meal_plan(self) -> MealPlanResponse:
        """Generate a meal plan for the currently loaded foods and targets."""
        state_context = format_state(self.state.current_state())
        context = f"{state_context}\n{format_history(list(self.history))}"
        answer = await self.client.complete(
            model=self.model, prompt=MEAL_PLAN_PROMPT.format(context=context)
        )
        self.history.append(PlanExchange(context=state_context, answer=answer))
        try:
            return MealPlanResponse.model_validate_json(strip_json_markup(answer))
        except ValidationError as exc:
            logger.warning("Meal plan answer failed validation: %s", exc)
            raise MealPlanError("Model returned an invalid meal plan") from exc


def format_state(snapshot: StateSnapshot) -> str:
    """Render foods and targets as prompt context."""
    foods = ", ".join(food.name for food in snapshot.foods) or "none"
    lines = [f"Foods: {foods}", "Targets:"]
    if not snapshot.targets:
        lines.append("- none")
    for day in snapshot.targets:
        lines.append(
            f"- {day.date.isoformat()}: expenditure {day.expenditure} kcal, "
            f"weight {day.weight} kg (trend {day.trend_weight} kg), "
            f"actual {day.actual.calories} kcal P{day.actual.protein} "
            f"F{day.actual.fat} C{day.actual.carbs}, "
            f"target {day.target.calories} kcal P{day.target.protein} "
            f"F{day.target.fat} C{day.target.carbs}"
        )
    return "\n".join(lines)


def format_history(history: list[PlanExchange]) -> str:
    """Render previous requests and answers, oldest first."""
    lines = ["History:"]
    if not history:
        lines.append("- none")
    for exchange in history:
        request = exchange.context.replace("\n", "\n  ")
        lines.append(f"- Request:\n  {request}\n  Answer: {exchange.answer}")
    return "\n".join(lines)


def strip_json_markup(text: str) -> str:
    """Remove line breaks and markdown code fences around a JSON answer."""
    cleaned = text.replace("\n", "")
    cleaned = cleaned.replace("```json", "")
    return cleaned.replace("```", "")
