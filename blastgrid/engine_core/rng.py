"""
Deterministic PRNG - 32-bit linear congruential generator.

Every random draw in a match (soft-wall fill, item drops) advances the
single seed carried in GameState. Nothing reseeds or forks the stream,
so a match replays exactly from its initial seed and command history.
"""

from __future__ import annotations

MULTIPLIER = 1664525
INCREMENT = 1013904223
MODULUS = 2 ** 32


def next_seed(seed: int) -> int:
    """Advance the seed by one LCG step."""
    return (seed * MULTIPLIER + INCREMENT) % MODULUS


def next_value(seed: int) -> tuple[float, int]:
    """
    Draw one value in [0, 1).

    Returns:
        (value, advanced seed)
    """
    advanced = next_seed(seed % MODULUS)
    return advanced / MODULUS, advanced
