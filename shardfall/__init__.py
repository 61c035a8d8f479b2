"""
Shardfall - Deterministic card-game rules engine

A seeded, replayable engine for a two-player shard card game.
The engine builds matches from deck lists and provides:
- State management with per-player redacted views
- Legal action generation
- Deterministic effect resolution (stack, continuous effects, opcodes)
- Bot policies for automated seats
"""

__version__ = "0.1.0"
