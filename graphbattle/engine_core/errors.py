"""
Fatal errors raised by the engine.

These indicate a caller bug (bad construction arguments, references to
nodes that do not exist) rather than a game-rule outcome. Game-rule
failures are ActionResult values, not exceptions.
"""


class GraphBattleError(Exception):
    """Base class for engine errors."""


class MissingNodeError(GraphBattleError, KeyError):
    """A node id was referenced that is not on the board."""

    def __init__(self, node_ids: list[str]):
        self.node_ids = list(node_ids)
        super().__init__(f"Board is missing node(s): {', '.join(self.node_ids)}")

    def __str__(self) -> str:
        return self.args[0]
