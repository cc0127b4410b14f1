"""Tests for container wiring."""

import asyncio

from nutrition_planner.adapters.watchdog_source import WatchdogEventSource
from nutrition_planner.containers import build_container


def test_build_container_wires_shared_state(settings) -> None:
    container = build_container(settings)

    assert container.meal_plan_service.state is container.state_store
    assert isinstance(container.watcher.source, WatchdogEventSource)
    assert container.watcher.source.directories == settings.watched_directories
    assert container.watcher.router is container.change_router
    assert set(container.change_router.routes) == {"foods", "targets"}
    asyncio.run(container.close_resources())
