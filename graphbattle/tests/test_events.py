"""
Tests for events and the event bus.

Tests:
- Subscribe / unsubscribe
- Publishing with and without subscribers
- Handler failures
- Event factories and serialization
"""

import pytest

from ..engine_core import events
from ..engine_core.events import EventBus, EventType, GameEvent
from ..engine_core.state import ReinforcementSummary, create_turn


class TestEventBus:
    """Publish/subscribe behavior."""

    def test_handler_receives_matching_events(self):
        bus = EventBus()
        seen = []
        bus.subscribe(EventType.TURN_STARTED, seen.append)

        bus.publish(events.turn_started(create_turn("p1")))
        bus.publish(events.turn_ended(create_turn("p1")))

        assert [e.type for e in seen] == [EventType.TURN_STARTED]

    def test_subscribe_by_string(self):
        bus = EventBus()
        seen = []
        bus.subscribe("turn_ended", seen.append)
        bus.publish(events.turn_ended(create_turn("p1")))
        assert len(seen) == 1

    def test_unsubscribe(self):
        bus = EventBus()
        seen = []
        unsubscribe = bus.subscribe(EventType.TURN_STARTED, seen.append)
        unsubscribe()
        unsubscribe()
        bus.publish(events.turn_started(create_turn("p1")))
        assert seen == []
        assert bus.handler_count(EventType.TURN_STARTED) == 0

    def test_handlers_called_in_order(self):
        bus = EventBus()
        calls = []
        bus.subscribe(EventType.GAME_WON, lambda e: calls.append("first"))
        bus.subscribe(EventType.GAME_WON, lambda e: calls.append("second"))
        bus.publish(events.game_won("p1", create_turn("p1")))
        assert calls == ["first", "second"]

    def test_unsubscribe_during_publish(self):
        bus = EventBus()
        calls = []
        holder = {}

        def once(event):
            calls.append("once")
            holder["unsubscribe"]()

        holder["unsubscribe"] = bus.subscribe(EventType.TURN_STARTED, once)
        bus.subscribe(EventType.TURN_STARTED, lambda e: calls.append("other"))

        bus.publish(events.turn_started(create_turn("p1")))
        bus.publish(events.turn_started(create_turn("p1")))
        assert calls == ["once", "other", "other"]

    def test_publish_without_subscribers(self):
        EventBus().publish(events.reinforcements_complete("p1"))

    def test_subscribe_all(self):
        bus = EventBus()
        seen = []
        unsubscribe = bus.subscribe_all(seen.append)
        bus.publish(events.turn_started(create_turn("p1")))
        bus.publish(events.reinforcements_complete("p1"))
        unsubscribe()
        bus.publish(events.turn_started(create_turn("p1")))
        assert len(seen) == 2

    def test_handler_exception_propagates(self):
        bus = EventBus()

        def boom(event):
            raise RuntimeError("handler failed")

        bus.subscribe(EventType.TURN_STARTED, boom)
        with pytest.raises(RuntimeError, match="handler failed"):
            bus.publish(events.turn_started(create_turn("p1")))

    def test_rejects_non_callable(self):
        with pytest.raises(TypeError):
            EventBus().subscribe(EventType.TURN_STARTED, "not callable")

    def test_rejects_unknown_type(self):
        with pytest.raises(ValueError):
            EventBus().subscribe("no_such_event", print)

    def test_rejects_non_event(self):
        with pytest.raises(TypeError):
            EventBus().publish({"type": "turn_started"})


class TestEventFactories:
    """Payload shapes."""

    def test_turn_payload(self):
        event = events.turn_skipped(create_turn("p2", number=3, order_index=1))
        assert event.payload == {
            "turn": {"number": 3, "order_index": 1, "active_player_id": "p2"}
        }

    def test_attack_iteration_payload(self):
        event = events.attack_iteration("a", "b", "attacker", 3, 0, 1)
        assert event.payload["winner"] == "attacker"
        assert event.payload["defender_strength"] == 0

    def test_reinforcements_awarded_payload(self):
        summary = ReinforcementSummary(player_id="p1", total=0)
        event = events.reinforcements_awarded(summary)
        assert event.payload["summary"]["player_id"] == "p1"
        assert event.payload["summary"]["allocations"] == []

    def test_round_trip(self):
        event = events.reinforcement_step("p1", "n1", 4, 2, 3)
        data = event.to_dict()
        assert data["type"] == "reinforcement_step"
        assert GameEvent.from_dict(data) == event
