"""
BlastGrid - Simultaneous-turn bomb grid engine

A deterministic engine for a two-player grid combat game where both
players plan their turn at once. The engine provides:
- Seeded board generation
- Command normalization
- Simultaneous turn resolution with conflict arbitration
- Read-only command projection for previews and bots
- Bot policies for automated opponents
"""

__version__ = "0.1.0"
