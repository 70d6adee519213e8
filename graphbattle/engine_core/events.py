"""
Game events for UI hooks and logging.
Events describe what happened during action processing.

The bus is synchronous: publish() calls every handler before returning,
and a handler that raises stops the publish and propagates to the caller.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, TYPE_CHECKING

if TYPE_CHECKING:
    from .state import Player, Turn, ReinforcementSummary


class EventType(str, Enum):
    """Event catalog."""
    # Lifecycle
    GAME_STARTED = "game_started"
    GAME_WON = "game_won"

    # Turn events
    TURN_STARTED = "turn_started"
    TURN_ENDED = "turn_ended"
    TURN_SKIPPED = "turn_skipped"

    # Combat events
    ATTACK_ITERATION = "attack_iteration"
    ATTACK_RESOLVED = "attack_resolved"

    # Reinforcement events
    REINFORCEMENT_STEP = "reinforcement_step"
    REINFORCEMENTS_AWARDED = "reinforcements_awarded"
    REINFORCEMENTS_COMPLETE = "reinforcements_complete"


@dataclass(frozen=True)
class GameEvent:
    """Base event class. All events have a type and payload."""
    type: EventType
    payload: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "payload": self.payload}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameEvent:
        return cls(type=EventType(data["type"]), payload=data["payload"])


Handler = Callable[[GameEvent], Any]


class EventBus:
    """
    Type-keyed publish/subscribe.

    Usage:
        bus = EventBus()
        unsubscribe = bus.subscribe(EventType.TURN_STARTED, on_turn)
        ...
        unsubscribe()
    """

    def __init__(self):
        self._handlers: dict[EventType, list[Handler]] = {}

    def subscribe(self, event_type: EventType | str, handler: Handler) -> Callable[[], None]:
        if not callable(handler):
            raise TypeError("Event handler must be callable")
        key = EventType(event_type)
        handlers = self._handlers.setdefault(key, [])
        handlers.append(handler)

        def unsubscribe() -> None:
            current = self._handlers.get(key)
            if current is None or handler not in current:
                return
            current.remove(handler)
            if not current:
                del self._handlers[key]

        return unsubscribe

    def subscribe_all(self, handler: Handler) -> Callable[[], None]:
        """Subscribe one handler to every event type."""
        unsubscribers = [self.subscribe(t, handler) for t in EventType]

        def unsubscribe() -> None:
            for fn in unsubscribers:
                fn()

        return unsubscribe

    def publish(self, event: GameEvent) -> None:
        if not isinstance(event, GameEvent):
            raise TypeError("event must be a GameEvent")
        handlers = self._handlers.get(event.type)
        if not handlers:
            return
        # Copy so handlers may unsubscribe while being called
        for handler in list(handlers):
            handler(event)

    def handler_count(self, event_type: EventType | str) -> int:
        return len(self._handlers.get(EventType(event_type), ()))


# ===== Event Factory Functions =====

def game_started(players: tuple[Player, ...]) -> GameEvent:
    return GameEvent(EventType.GAME_STARTED, {
        "players": [p.to_dict() for p in players],
    })


def turn_started(turn: Turn) -> GameEvent:
    return GameEvent(EventType.TURN_STARTED, {"turn": turn.to_dict()})


def turn_ended(turn: Turn) -> GameEvent:
    return GameEvent(EventType.TURN_ENDED, {"turn": turn.to_dict()})


def turn_skipped(turn: Turn) -> GameEvent:
    """Emitted when the rotation passes over a player who owns no nodes."""
    return GameEvent(EventType.TURN_SKIPPED, {"turn": turn.to_dict()})


def attack_iteration(
    attacker_id: str,
    defender_id: str,
    winner: str,
    attacker_strength: int,
    defender_strength: int,
    index: int,
) -> GameEvent:
    return GameEvent(EventType.ATTACK_ITERATION, {
        "attacker_id": attacker_id,
        "defender_id": defender_id,
        "winner": winner,  # "attacker" or "defender"
        "attacker_strength": attacker_strength,
        "defender_strength": defender_strength,
        "index": index,
    })


def attack_resolved(
    player_id: str,
    attacker_id: str,
    defender_id: str,
    success: bool,
    rounds: list[dict[str, Any]],
    attacker_strength: int,
    defender_strength: int,
    new_owner_id: str | None,
) -> GameEvent:
    return GameEvent(EventType.ATTACK_RESOLVED, {
        "player_id": player_id,
        "attacker_id": attacker_id,
        "defender_id": defender_id,
        "success": success,
        "rounds": rounds,
        "attacker_strength": attacker_strength,
        "defender_strength": defender_strength,
        "new_owner_id": new_owner_id,
    })


def reinforcement_step(
    player_id: str,
    node_id: str,
    strength: int,
    step: int,
    total_steps: int,
) -> GameEvent:
    """One unit of reinforcement landing on a node; strength is the new value."""
    return GameEvent(EventType.REINFORCEMENT_STEP, {
        "player_id": player_id,
        "node_id": node_id,
        "strength": strength,
        "step": step,
        "total_steps": total_steps,
    })


def reinforcements_awarded(summary: ReinforcementSummary) -> GameEvent:
    return GameEvent(EventType.REINFORCEMENTS_AWARDED, {"summary": summary.to_dict()})


def reinforcements_complete(player_id: str) -> GameEvent:
    return GameEvent(EventType.REINFORCEMENTS_COMPLETE, {"player_id": player_id})


def game_won(winner_id: str, turn: Turn) -> GameEvent:
    return GameEvent(EventType.GAME_WON, {
        "winner_id": winner_id,
        "turn": turn.to_dict(),
    })
