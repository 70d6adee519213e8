"""
Graph Battle - Territory Conquest Engine

A deterministic, turn-based engine for a territory-conquest game played on a
graph carved out of a grid. The engine provides:
- Seeded board generation
- Attack resolution with per-round combat records
- End-of-turn reinforcement allocation
- Turn rotation, elimination skipping and victory detection
- A synchronous event bus for UI and bot collaborators
"""

__version__ = "0.1.0"
