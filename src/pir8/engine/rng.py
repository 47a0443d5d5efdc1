"""
Seeded random streams.

Every randomized engine computation takes an explicit seed. Independent
streams are derived from the game seed plus integer keys so that, for
example, combat in action 12 never shares draws with map generation.
"""

import zlib

import numpy as np

SEED_MASK = (1 << 64) - 1

# Stream keys
MAP_STREAM = 0
COMBAT_STREAM = 1
AGENT_STREAM = 2


def make_rng(seed: int, *keys: int) -> np.random.Generator:
    """
    Build a numpy Generator for a seed and stream keys.

    Args:
        seed: Unsigned 64-bit game seed
        *keys: Non-negative integers selecting an independent stream

    Returns:
        PCG64-backed Generator
    """
    entropy = [int(seed) & SEED_MASK] + [int(key) & SEED_MASK for key in keys]
    return np.random.default_rng(np.random.SeedSequence(entropy))


def derive_seed(seed: int, *keys: int) -> int:
    """Derive a child u64 seed from a seed and stream keys."""
    return int(make_rng(seed, *keys).integers(0, SEED_MASK, dtype=np.uint64, endpoint=True))


def string_key(value: str) -> int:
    """Stable integer key for a string (player id, game id)."""
    return zlib.crc32(value.encode("utf-8"))
