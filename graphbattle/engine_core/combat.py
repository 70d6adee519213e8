"""
Combat resolution system.

Two pieces:
- can_attack(): pure eligibility check for an attack
- resolve_attack(): the round-by-round randomized combat loop

Each round one draw decides the winner: the attacker wins iff the draw is
at least (1 - win_probability). The loser of the round loses one strength.
Combat ends when the defender reaches 0 or the attacker drops below 2.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from .errors import MissingNodeError
from .rng import RandomSource
from .state import Board, Node, create_node

DEFAULT_WIN_PROBABILITY = 0.5
MIN_ATTACK_STRENGTH = 2

ATTACKER = "attacker"
DEFENDER = "defender"


class AttackIneligibility(str, Enum):
    """Reasons an attack may not be made."""
    NOT_OWNER = "NOT_OWNER"
    INVALID_DEFENDER = "INVALID_DEFENDER"
    NOT_ADJACENT = "NOT_ADJACENT"
    INSUFFICIENT_STRENGTH = "INSUFFICIENT_STRENGTH"


_MESSAGES = {
    AttackIneligibility.NOT_OWNER: "Attacker node does not belong to the player.",
    AttackIneligibility.INVALID_DEFENDER: "Defender must be owned by an opponent.",
    AttackIneligibility.NOT_ADJACENT: "Attacker and defender must be adjacent.",
    AttackIneligibility.INSUFFICIENT_STRENGTH: (
        "Attacker must have at least 2 strength to initiate an attack."
    ),
}


@dataclass(frozen=True)
class AttackEvaluation:
    """Outcome of can_attack(). Node snapshots are only set when ok."""
    ok: bool
    reason: AttackIneligibility | None = None
    message: str | None = None
    attacker: Node | None = None
    defender: Node | None = None
    attacker_neighbors: frozenset[str] = frozenset()

    @classmethod
    def rejected(cls, reason: AttackIneligibility) -> AttackEvaluation:
        return cls(ok=False, reason=reason, message=_MESSAGES[reason])


@dataclass(frozen=True)
class CombatRound:
    """One attack iteration, with the strengths left after it."""
    index: int
    winner: str
    roll: float
    attacker_strength: int
    defender_strength: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "winner": self.winner,
            "roll": self.roll,
            "attacker_strength": self.attacker_strength,
            "defender_strength": self.defender_strength,
        }


@dataclass(frozen=True)
class AttackOutcome:
    """Final strengths after combat; success means the defender was wiped out."""
    success: bool
    attacker_strength: int
    defender_strength: int
    rounds: tuple[CombatRound, ...] = field(default_factory=tuple)


def can_attack(board: Board, player_id: str, attacker_id: str, defender_id: str) -> AttackEvaluation:
    """
    Check whether player_id may attack defender_id from attacker_id.

    Raises MissingNodeError if either node is not on the board; that is a
    caller bug, not a rule failure. Otherwise returns the first failing
    check, in order: ownership, defender, adjacency, strength.
    """
    attacker = board.get_node(attacker_id)
    defender = board.get_node(defender_id)
    missing = [nid for nid, node in ((attacker_id, attacker), (defender_id, defender)) if node is None]
    if missing:
        raise MissingNodeError(missing)

    if attacker.owner_id != player_id:
        return AttackEvaluation.rejected(AttackIneligibility.NOT_OWNER)

    if defender.owner_id is None or defender.owner_id == player_id:
        return AttackEvaluation.rejected(AttackIneligibility.INVALID_DEFENDER)

    neighbors = board.neighbors(attacker.id)
    if defender.id not in neighbors:
        return AttackEvaluation.rejected(AttackIneligibility.NOT_ADJACENT)

    if attacker.strength < MIN_ATTACK_STRENGTH:
        return AttackEvaluation.rejected(AttackIneligibility.INSUFFICIENT_STRENGTH)

    return AttackEvaluation(
        ok=True,
        attacker=create_node(attacker.id, attacker.owner_id, attacker.strength, attacker.position),
        defender=create_node(defender.id, defender.owner_id, defender.strength, defender.position),
        attacker_neighbors=frozenset(neighbors),
    )


def validate_win_probability(win_probability: float) -> float:
    if not isinstance(win_probability, (int, float)) or isinstance(win_probability, bool):
        raise ValueError("win_probability must be a number")
    if not 0 < win_probability < 1:
        raise ValueError("win_probability must be strictly between 0 and 1")
    return float(win_probability)


def resolve_attack(
    attacker_strength: int,
    defender_strength: int,
    rng: RandomSource,
    win_probability: float = DEFAULT_WIN_PROBABILITY,
    on_round: Callable[[CombatRound], None] | None = None,
) -> AttackOutcome:
    """
    Run combat rounds until one side can no longer continue.

    Terminates because exactly one counter drops by one per round and
    neither can go below its stopping bound.
    """
    threshold = 1 - validate_win_probability(win_probability)
    a, d = attacker_strength, defender_strength
    rounds: list[CombatRound] = []

    while a >= MIN_ATTACK_STRENGTH and d > 0:
        roll = rng.next()
        if roll >= threshold:
            d -= 1
            winner = ATTACKER
        else:
            a -= 1
            winner = DEFENDER
        combat_round = CombatRound(
            index=len(rounds) + 1,
            winner=winner,
            roll=roll,
            attacker_strength=a,
            defender_strength=d,
        )
        rounds.append(combat_round)
        if on_round is not None:
            on_round(combat_round)

    return AttackOutcome(
        success=d == 0,
        attacker_strength=a,
        defender_strength=d,
        rounds=tuple(rounds),
    )


def apply_attack_outcome(attacker: Node, defender: Node, outcome: AttackOutcome) -> tuple[Node, Node]:
    """
    Nodes after combat.

    On success the attacker keeps a garrison of 1 and the survivors move
    into the captured node; on failure both keep their final strengths.
    """
    if outcome.success:
        moved = max(outcome.attacker_strength - 1, 0)
        return (
            attacker.with_strength(1),
            defender.with_owner(attacker.owner_id, moved),
        )
    return (
        attacker.with_strength(outcome.attacker_strength),
        defender.with_strength(outcome.defender_strength),
    )
