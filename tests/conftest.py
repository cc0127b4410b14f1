"""Shared test fixtures."""

import json
import queue
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from nutrition_planner.config import Settings
from nutrition_planner.containers import AppContainer, build_change_router
from nutrition_planner.services.meal_plans import MealPlanClient, MealPlanService
from nutrition_planner.services.parsers import MACRO_DAYS_HEADER
from nutrition_planner.services.state import InMemoryStateStore
from nutrition_planner.services.watcher import (
    DirectoryWatcher,
    EventSource,
    SourceItem,
)

MACRO_HEADER_LINE = ",".join(MACRO_DAYS_HEADER)
MACRO_ROW = "1/2/2024,2200,80.1,80.5,2000,150,60,200,2200,160,70,220"

MEAL_PLAN_ANSWER: dict[str, object] = {
    "plan": [
        {
            "food": "Chicken Breast",
            "weight": "800g",
            "macros": "P160 F16 C0 740kcal",
            "foodExplanation": "Lean protein",
            "foodCategory": "lunch",
        }
    ],
    "planExplanation": "High protein week.",
    "planPreparation": "Grill the chicken.",
}


def write_csv(path: Path, *lines: str) -> Path:
    """Write lines as a CSV file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@dataclass
class QueueEventSource(EventSource):
    """In-memory event source driven by tests."""

    items: "queue.Queue[SourceItem]" = field(default_factory=queue.Queue)
    started: int = 0
    closed: bool = False

    def start(self) -> None:
        self.started += 1

    def next_event(self, timeout: float | None = None) -> SourceItem:
        return self.items.get(timeout=timeout)

    def push(self, item: SourceItem) -> None:
        self.items.put(item)

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self.items.put(None)


@dataclass
class FakeMealPlanClient(MealPlanClient):
    """Fake meal plan client returning a canned answer."""

    answer: str = json.dumps(MEAL_PLAN_ANSWER)
    prompts: list[str] = field(default_factory=list)

    async def complete(self, *, model: str, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.answer


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    root = tmp_path / "data"
    (root / "foods").mkdir(parents=True)
    (root / "targets").mkdir(parents=True)
    return root


@pytest.fixture
def settings(data_dir: Path) -> Settings:
    return Settings(data_dir=data_dir, openai_api_key="openai-key")


@pytest.fixture
def state_store() -> InMemoryStateStore:
    return InMemoryStateStore()


@pytest.fixture
def event_source() -> QueueEventSource:
    return QueueEventSource()


@pytest.fixture
def meal_plan_client() -> FakeMealPlanClient:
    return FakeMealPlanClient()


@pytest.fixture
def container(
    settings: Settings,
    state_store: InMemoryStateStore,
    event_source: QueueEventSource,
    meal_plan_client: FakeMealPlanClient,
) -> AppContainer:
    change_router = build_change_router(settings, state_store)
    watcher = DirectoryWatcher(source=event_source, router=change_router)
    meal_plan_service = MealPlanService(
        client=meal_plan_client,
        state=state_store,
        model=settings.openai_model,
        history_size=settings.meal_plan_history_size,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        state_store=state_store,
        change_router=change_router,
        watcher=watcher,
        meal_plan_service=meal_plan_service,
        close_resources=close_resources,
    )
