"""OpenAI-compatible chat completions client for meal plans."""

from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from nutrition_planner.services.meal_plans import MealPlanClient, MealPlanError


@dataclass
class OpenAIMealPlanClient(MealPlanClient):
    """Meal plan client backed by an OpenAI-compatible chat API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "OpenAIMealPlanClient":
        """Create a client for the given API endpoint."""
        return cls(client=AsyncOpenAI(api_key=api_key, base_url=base_url))

    async def complete(self, *, model: str, prompt: str) -> str:
        """Send the prompt as a single user message and return the answer."""
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
            )
        except OpenAIError as exc:
            raise MealPlanError(f"Meal plan request failed: {exc}") from exc
        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise MealPlanError("Model returned an empty response")
        return content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
