"""
Session Module - Manages ephemeral hosted games.

A session wraps one engine plus its action and event logs so the game can
be served over the API and replayed from its seed.
"""

from .manager import SessionManager, Session, SessionState

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
]
