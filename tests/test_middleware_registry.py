"""Tests for the middleware registry and per-request filtering."""

from __future__ import annotations

import logging

import pytest

from onionware.config.schema import MiddlewareConfig
from onionware.middleware.filter import select_middleware, unique
from onionware.middleware.registry import MiddlewareRegistry

# ── Registry ─────────────────────────────────────────────────────────────


class TestRegister:
    def test_starts_empty(self) -> None:
        reg = MiddlewareRegistry()
        assert reg.get_global() == []
        assert reg.get_named() == {}
        assert len(reg) == 0

    def test_register_without_namespace_is_global(self) -> None:
        reg = MiddlewareRegistry()
        reg.register("App/Middleware/Cors")
        assert reg.get_global() == ["App/Middleware/Cors"]
        assert reg.get_named() == {}

    def test_empty_namespace_is_global(self) -> None:
        reg = MiddlewareRegistry()
        reg.register("App/Middleware/Cors", "")
        assert reg.get_global() == ["App/Middleware/Cors"]

    def test_register_with_namespace_is_named(self) -> None:
        reg = MiddlewareRegistry()
        reg.register("auth", "App/Middleware/Auth")
        assert reg.get_named() == {"auth": "App/Middleware/Auth"}
        assert reg.get_global() == []

    def test_duplicate_global_is_returned_once(self) -> None:
        reg = MiddlewareRegistry()
        reg.register("App/Middleware/Cors")
        reg.register("App/Middleware/Timer")
        reg.register("App/Middleware/Cors")
        assert reg.get_global() == ["App/Middleware/Cors", "App/Middleware/Timer"]

    def test_named_key_overwrites(self) -> None:
        reg = MiddlewareRegistry()
        reg.register("auth", "App/Middleware/Auth")
        reg.register("auth", "App/Middleware/TokenAuth")
        assert reg.get_named() == {"auth": "App/Middleware/TokenAuth"}


class TestBatchRegistration:
    def test_register_global_keeps_order(self) -> None:
        reg = MiddlewareRegistry()
        reg.register("g0")
        reg.register_global(["g1", "g2", "g3"])
        assert reg.get_global() == ["g0", "g1", "g2", "g3"]

    def test_register_global_dedups_on_read(self) -> None:
        reg = MiddlewareRegistry()
        reg.register_global(["g1", "g2"])
        reg.register_global(["g2", "g1", "g3"])
        assert reg.get_global() == ["g1", "g2", "g3"]

    def test_register_named_batch(self) -> None:
        reg = MiddlewareRegistry()
        reg.register_named({"auth": "A", "csrf": "C"})
        assert reg.get_named() == {"auth": "A", "csrf": "C"}

    def test_register_named_batch_overwrites(self) -> None:
        reg = MiddlewareRegistry()
        reg.register("auth", "Old")
        reg.register_named({"auth": "New"})
        assert reg.get_named()["auth"] == "New"


class TestReset:
    def test_reset_clears_everything(self) -> None:
        reg = MiddlewareRegistry()
        reg.register_global(["g1", "g2"])
        reg.register_named({"auth": "A"})
        reg.reset()
        assert reg.get_global() == []
        assert reg.get_named() == {}

    def test_registries_are_independent(self) -> None:
        first = MiddlewareRegistry()
        second = MiddlewareRegistry()
        first.register("g1")
        first.register("auth", "A")
        assert second.get_global() == []
        assert second.get_named() == {}


class TestSnapshots:
    def test_get_named_is_a_copy(self) -> None:
        reg = MiddlewareRegistry()
        reg.register("auth", "A")
        named = reg.get_named()
        named["csrf"] = "C"
        assert "csrf" not in reg.get_named()

    def test_get_global_is_a_copy(self) -> None:
        reg = MiddlewareRegistry()
        reg.register("g1")
        reg.get_global().append("g2")
        assert reg.get_global() == ["g1"]

    def test_contains_and_len(self) -> None:
        reg = MiddlewareRegistry()
        reg.register_global(["g1", "g1"])
        reg.register("auth", "A")
        assert "g1" in reg
        assert "auth" in reg
        assert "A" not in reg
        assert len(reg) == 2

    def test_repr(self) -> None:
        reg = MiddlewareRegistry()
        reg.register("g1")
        reg.register("auth", "A")
        assert repr(reg) == "MiddlewareRegistry(global=['g1'], named=['auth'])"


class TestLoadConfig:
    def test_applies_global_then_named(self) -> None:
        cfg = MiddlewareConfig.model_validate(
            {"global": ["g1", "g2", "g1"], "named": {"auth": "A", "csrf": "C"}}
        )
        reg = MiddlewareRegistry()
        reg.load_config(cfg)
        assert reg.get_global() == ["g1", "g2"]
        assert reg.get_named() == {"auth": "A", "csrf": "C"}

    def test_logs_only_at_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        cfg = MiddlewareConfig.model_validate({"global": ["g1"], "named": {"auth": "A"}})
        with caplog.at_level(logging.INFO, logger="onionware.middleware.registry"):
            MiddlewareRegistry().load_config(cfg)
        assert caplog.records == []

    def test_appends_to_existing_registrations(self) -> None:
        reg = MiddlewareRegistry()
        reg.register("g0")
        reg.load_config(MiddlewareConfig.model_validate({"global": ["g1"]}))
        assert reg.get_global() == ["g0", "g1"]


# ── Filter ───────────────────────────────────────────────────────────────


class TestFilter:
    def _registry(self) -> MiddlewareRegistry:
        reg = MiddlewareRegistry()
        reg.register_global(["g1", "g2", "g1"])
        reg.register_named({"a": "A", "b": "B"})
        return reg

    def test_request_order_not_map_order(self) -> None:
        assert self._registry().filter(["b", "a"], False) == ["B", "A"]

    def test_globals_first(self) -> None:
        assert self._registry().filter(["a"], True) == ["g1", "g2", "A"]

    def test_globals_first_regardless_of_keys(self) -> None:
        assert self._registry().filter(["b", "a"], True) == ["g1", "g2", "B", "A"]

    def test_unknown_key_dropped(self) -> None:
        assert self._registry().filter(["missing"], False) == []

    def test_unknown_key_dropped_among_known(self) -> None:
        assert self._registry().filter(["missing", "b"], False) == ["B"]

    def test_only_globals(self) -> None:
        assert self._registry().filter([], True) == ["g1", "g2"]

    def test_default_excludes_globals(self) -> None:
        assert self._registry().filter(["a"]) == ["A"]

    def test_only_literal_true_includes_globals(self) -> None:
        assert self._registry().filter(["a"], 1) == ["A"]  # type: ignore[arg-type]

    def test_keys_matched_against_named_only(self) -> None:
        # A global namespace passed as a key is not a named key.
        assert self._registry().filter(["g1"], False) == []

    def test_repeated_key_selected_once(self) -> None:
        assert self._registry().filter(["a", "a", "b"], False) == ["A", "B"]

    def test_no_dedup_between_global_and_named(self) -> None:
        reg = MiddlewareRegistry()
        reg.register("Shared")
        reg.register("shared", "Shared")
        assert reg.filter(["shared"], True) == ["Shared", "Shared"]

    def test_accepts_any_iterable(self) -> None:
        assert self._registry().filter(iter(["a"]), False) == ["A"]


class TestSelectMiddleware:
    def test_unique_keeps_first_occurrence(self) -> None:
        assert unique(["x", "y", "x", "z", "y"]) == ["x", "y", "z"]

    def test_select_without_registry(self) -> None:
        assert select_middleware(["g"], {"k": "K"}, ["k"], True) == ["g", "K"]
