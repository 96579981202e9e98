#!/usr/bin/env python3
"""
Random Source for Name Allocation
=================================
Uniform pseudorandom selection shared by every allocation call.

The allocator only needs uniform draws, not cryptographic strength, so this
wraps ``random.Random``. A single ``NameRandom`` may be shared by any number
of threads: each draw holds a lock, which makes the generator the only
serialized resource in the allocation path.

Usage:
    from aliaskit.entropy import NameRandom, get_rng

    rng = NameRandom(seed=42)     # deterministic, e.g. for tests
    rng.choice(["Wren", "Lark"])
    get_rng().randrange(10)        # process-wide instance
"""

import random
import threading
from typing import Any, Optional, Sequence


# =============================================================================
# Thread-safe Random Generator
# =============================================================================

class NameRandom:
    """
    Lock-guarded pseudorandom generator.

    Parameters
    ----------
    seed : int, optional
        Seed for reproducible sequences. ``None`` seeds from system entropy.
    """

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)
        self._lock = threading.Lock()

    def randrange(self, stop: int) -> int:
        """Return a uniform integer in ``[0, stop)``."""
        if stop <= 0:
            raise ValueError("stop must be positive")
        with self._lock:
            return self._rng.randrange(stop)

    def choice(self, seq: Sequence[Any]) -> Any:
        """Return a uniform element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from empty sequence")
        return seq[self.randrange(len(seq))]

    def seed(self, value: Optional[int] = None) -> None:
        """Reseed the generator."""
        with self._lock:
            self._rng.seed(value)

    def spawn(self) -> "NameRandom":
        """Return an independent generator seeded from this one."""
        with self._lock:
            child_seed = self._rng.getrandbits(64)
        return NameRandom(child_seed)


# Global instance
_name_random = NameRandom()

def get_rng() -> NameRandom:
    """Get the process-wide random generator."""
    return _name_random


__all__ = [
    "NameRandom",
    "get_rng",
]
