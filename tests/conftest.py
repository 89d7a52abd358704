"""
Shared fixtures for storeff tests.

``todo_store`` mirrors a small application: actions that schedule effects
routed to the ``success``/``failure`` mutations, plus plain todo mutations.
"""

from typing import Any

import pytest

from storeff import Effect, Store, StoreConfig

SUCCESS = "success"
FAILURE = "failure"


async def _resolved(store: Any) -> None:
    return None


async def _rejected(store: Any) -> None:
    raise RuntimeError("boom")


def _actions() -> dict[str, Any]:
    def test_success(state, _payload):
        return {
            "state": state,
            "effect": Effect(_resolved, success_label=SUCCESS, failure_label=FAILURE),
        }

    def test_failure(state, _payload):
        return {
            "state": state,
            "effect": Effect(_rejected, success_label=SUCCESS, failure_label=FAILURE),
        }

    def add_todo(state, todo):
        return {"state": {**state, "todos": [*state["todos"], todo]}}

    return {
        "testSuccess": test_success,
        "testFailure": test_failure,
        "addTodo": add_todo,
    }


def _mutations() -> dict[str, Any]:
    return {
        "addPlainTodo": lambda state, todo: {**state, "todos": [*state["todos"], todo]},
        SUCCESS: lambda state, _: {**state, "success": True},
        FAILURE: lambda state, _: {**state, "failure": True},
    }


@pytest.fixture
def config() -> StoreConfig:
    return StoreConfig()


@pytest.fixture
def todo_store(config: StoreConfig) -> Store:
    return Store({"todos": []}, _mutations(), _actions(), config=config)
