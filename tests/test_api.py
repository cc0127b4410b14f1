"""Tests for the HTTP API."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from nutrition_planner.api.app import create_app
from nutrition_planner.services.bootstrap import BootstrapError
from nutrition_planner.services.watcher import EventKind, WatcherState, WatchEvent
from tests.conftest import (
    MACRO_HEADER_LINE,
    MACRO_ROW,
    FakeMealPlanClient,
    QueueEventSource,
    write_csv,
)


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_state_is_loaded_on_startup(container, data_dir: Path) -> None:
    write_csv(data_dir / "foods" / "list.csv", "Food Name", "Chicken Breast", "Rice")
    write_csv(data_dir / "targets" / "days.csv", MACRO_HEADER_LINE, MACRO_ROW)

    with TestClient(create_app(container)) as client:
        response = client.get("/state")

    assert response.status_code == 200
    data = response.json()
    assert data["foods"] == [{"name": "Chicken Breast"}, {"name": "Rice"}]
    assert data["targets"] == [
        {
            "date": "2024-01-02",
            "expenditure": 2200,
            "trend_weight": 80.1,
            "weight": 80.5,
            "actual": {"calories": 2000, "protein": 150, "fat": 60, "carbs": 200},
            "target": {"calories": 2200, "protein": 160, "fat": 70, "carbs": 220},
        }
    ]


def test_lifespan_runs_and_stops_watcher(
    container, data_dir: Path, event_source: QueueEventSource
) -> None:
    path = write_csv(data_dir / "foods" / "list.csv", "Food Name", "Rice")

    with TestClient(create_app(container)):
        assert container.state_store.current_state().foods[0].name == "Rice"
        write_csv(path, "Food Name", "Oats")
        event_source.push(WatchEvent(EventKind.MODIFIED, str(path)))

    assert event_source.started == 1
    assert event_source.closed
    assert container.watcher.state is WatcherState.STOPPED
    assert container.state_store.current_state().foods[0].name == "Oats"


def test_startup_fails_without_data_dir(container, data_dir: Path) -> None:
    container.settings.data_dir = data_dir / "missing"

    with pytest.raises(BootstrapError):
        with TestClient(create_app(container)):
            pass


def test_meal_plan_endpoint_returns_camel_case(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/mealplan")

    assert response.status_code == 200
    data = response.json()
    assert data["plan"][0]["foodCategory"] == "lunch"
    assert data["plan"][0]["foodExplanation"] == "Lean protein"
    assert data["planExplanation"] == "High protein week."


def test_meal_plan_endpoint_reports_invalid_answer(
    container, meal_plan_client: FakeMealPlanClient
) -> None:
    meal_plan_client.answer = "not json"
    client = TestClient(create_app(container))

    response = client.post("/mealplan")

    assert response.status_code == 500
    assert response.json()["detail"] == "Model returned an invalid meal plan"
