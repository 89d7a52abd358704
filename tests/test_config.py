"""
Tests for store configuration loading.
"""

import pytest

from storeff import DEFAULT_CONFIG, Store, StoreConfig, load_config
from storeff.config import env_key


class TestLoadConfig:
    def test_defaults(self) -> None:
        config = load_config(env={})

        assert config == StoreConfig()
        assert config.trace_limit == DEFAULT_CONFIG["store.trace_limit"]

    def test_env_key(self) -> None:
        assert env_key("store.trace_limit") == "STOREFF_TRACE_LIMIT"

    def test_environment_overrides_defaults(self) -> None:
        config = load_config(
            env={"STOREFF_TRACE_LIMIT": "5", "STOREFF_LOG_DISPATCHES": "yes"}
        )

        assert config.trace_limit == 5
        assert config.log_dispatches is True

    def test_explicit_overrides_win(self) -> None:
        config = load_config(
            {"store.trace_limit": 0, "store.copy_initial_state": "true"},
            env={"STOREFF_TRACE_LIMIT": "5"},
        )

        assert config.trace_limit == 0
        assert config.copy_initial_state is True

    def test_unknown_key(self) -> None:
        with pytest.raises(KeyError, match="store.nope"):
            load_config({"store.nope": 1}, env={})

    @pytest.mark.parametrize(
        "overrides",
        [
            {"store.trace_limit": "many"},
            {"store.trace_limit": True},
            {"store.log_dispatches": "maybe"},
        ],
    )
    def test_bad_values(self, overrides) -> None:
        with pytest.raises(ValueError):
            load_config(overrides, env={})

    def test_negative_trace_limit(self) -> None:
        with pytest.raises(ValueError, match="trace_limit"):
            StoreConfig(trace_limit=-1)

    def test_error_limit_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="error_limit"):
            StoreConfig(error_limit=0)

        assert load_config(env={"STOREFF_ERROR_LIMIT": "3"}).error_limit == 3

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STOREFF_TRACE_LIMIT", "7")

        assert load_config().trace_limit == 7


class TestStoreConfig:
    def test_copy_initial_state(self) -> None:
        initial = {"todos": []}
        store = Store(initial, config=StoreConfig(copy_initial_state=True))

        assert store.state == initial
        assert store.state is not initial

    def test_initial_state_shared_by_default(self) -> None:
        initial = {"todos": []}

        assert Store(initial, config=StoreConfig()).state is initial
