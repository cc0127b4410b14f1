"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from nutrition_planner.adapters.openai_meal_plan_client import OpenAIMealPlanClient
from nutrition_planner.adapters.watchdog_source import WatchdogEventSource
from nutrition_planner.config import Settings
from nutrition_planner.services.meal_plans import MealPlanService
from nutrition_planner.services.routing import ChangeRouter, build_routes
from nutrition_planner.services.state import InMemoryStateStore
from nutrition_planner.services.watcher import DirectoryWatcher


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    state_store: InMemoryStateStore
    change_router: ChangeRouter
    watcher: DirectoryWatcher
    meal_plan_service: MealPlanService
    close_resources: Callable[[], Awaitable[None]]


def build_change_router(settings: Settings, store: InMemoryStateStore) -> ChangeRouter:
    """Create a router for the configured data directory names."""
    return ChangeRouter(
        routes=build_routes(
            store,
            foods_dir_name=settings.foods_dir_name,
            targets_dir_name=settings.targets_dir_name,
        )
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    state_store = InMemoryStateStore()
    change_router = build_change_router(resolved_settings, state_store)
    watcher = DirectoryWatcher(
        source=WatchdogEventSource(resolved_settings.watched_directories),
        router=change_router,
        extension=resolved_settings.watch_extension,
    )
    meal_plan_client = OpenAIMealPlanClient.create(
        api_key=resolved_settings.openai_api_key,
        base_url=resolved_settings.openai_base_url,
    )
    meal_plan_service = MealPlanService(
        client=meal_plan_client,
        state=state_store,
        model=resolved_settings.openai_model,
        history_size=resolved_settings.meal_plan_history_size,
    )

    async def close_resources() -> None:
        await meal_plan_client.close()

    return AppContainer(
        settings=resolved_settings,
        state_store=state_store,
        change_router=change_router,
        watcher=watcher,
        meal_plan_service=meal_plan_service,
        close_resources=close_resources,
    )
