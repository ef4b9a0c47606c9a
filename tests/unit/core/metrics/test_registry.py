"""Tests for core.metrics.registry."""

from __future__ import annotations

from harness_credentials.core.metrics.registry import (
    InMemoryRegistry,
    MeterRegistry,
)


class TestMeterRegistryProtocol:
    def test_in_memory_registry_satisfies_protocol(self) -> None:
        assert isinstance(InMemoryRegistry(), MeterRegistry)


class TestInMemoryRegistryCounter:
    def test_increment_default(self) -> None:
        reg = InMemoryRegistry()
        reg.counter("hc_secret_provider_calls")
        assert reg.get_counter("hc_secret_provider_calls") == 1.0

    def test_accumulates(self) -> None:
        reg = InMemoryRegistry()
        reg.counter("calls")
        reg.counter("calls", value=3.0)
        assert reg.get_counter("calls") == 4.0

    def test_tags_separate_counters(self) -> None:
        reg = InMemoryRegistry()
        reg.counter("calls", tags={"scheme": "kv"})
        reg.counter("calls", tags={"scheme": "env"})
        reg.counter("calls", tags={"scheme": "kv"})
        assert reg.get_counter("calls", tags={"scheme": "kv"}) == 2.0
        assert reg.get_counter("calls", tags={"scheme": "env"}) == 1.0

    def test_tag_order_irrelevant(self) -> None:
        reg = InMemoryRegistry()
        reg.counter("calls", tags={"a": "1", "b": "2"})
        assert reg.get_counter("calls", tags={"b": "2", "a": "1"}) == 1.0

    def test_missing_counter_returns_zero(self) -> None:
        assert InMemoryRegistry().get_counter("nope") == 0.0


class TestInMemoryRegistryTimer:
    def test_records(self) -> None:
        reg = InMemoryRegistry()
        reg.timer("hc_secret_resolve_duration", 12.5, tags={"scheme": "kv"})
        reg.timer("hc_secret_resolve_duration", 7.5, tags={"scheme": "kv"})
        assert reg.get_timer_count("hc_secret_resolve_duration", tags={"scheme": "kv"}) == 2
        timers = reg.get_metrics()["timers"]["hc_secret_resolve_duration"]
        assert next(iter(timers.values())) == {"total_ms": 20.0, "count": 2}

    def test_missing_timer_returns_zero(self) -> None:
        assert InMemoryRegistry().get_timer_count("nope") == 0


class TestInMemoryRegistryReset:
    def test_reset_clears_everything(self) -> None:
        reg = InMemoryRegistry()
        reg.counter("calls")
        reg.timer("duration", 1.0)
        reg.reset()
        assert reg.get_metrics() == {"counters": {}, "timers": {}}
