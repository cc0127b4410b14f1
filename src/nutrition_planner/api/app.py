"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, HTTPException, Request, status

from nutrition_planner.app_logging import configure_logging
from nutrition_planner.containers import AppContainer
from nutrition_planner.domain.meal_plans import MealPlanResponse
from nutrition_planner.domain.models import StateSnapshot
from nutrition_planner.services.bootstrap import load_existing_files
from nutrition_planner.services.meal_plans import MealPlanError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        # Subscribe first so edits made during the initial walk are queued.
        state_container.watcher.subscribe()
        try:
            load_existing_files(
                state_container.settings.data_dir, state_container.change_router
            )
        except Exception:
            state_container.watcher.stop()
            raise
        state_container.watcher.start()
        try:
            yield
        finally:
            state_container.watcher.stop()
            await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/state")
    async def current_state(request: Request) -> dict[str, object]:
        """Return the foods and macro targets currently loaded."""
        state_container: AppContainer = request.app.state.container
        return _snapshot_payload(state_container.state_store.current_state())

    @app.post("/mealplan")
    async def meal_plan(request: Request) -> MealPlanResponse:
        """Generate a meal plan from the current foods and targets."""
        state_container: AppContainer = request.app.state.container
        logger.info("Generating meal plan")
        try:
            return await state_container.meal_plan_service.generate_meal_plan()
        except MealPlanError as exc:
            logger.warning("Meal plan generation failed: %s", exc)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
            ) from exc

    return app


def _snapshot_payload(snapshot: StateSnapshot) -> dict[str, object]:
    return {
        "foods": [asdict(food) for food in snapshot.foods],
        "targets": [
            {**asdict(day), "date": day.date.isoformat()} for day in snapshot.targets
        ],
    }
