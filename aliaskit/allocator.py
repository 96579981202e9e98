#!/usr/bin/env python3
"""
Unique Pseudonym Allocator
==========================
Picks a display name that nobody in the current scope is using yet.

The caller passes the names already taken in one scope (a thread, a channel,
a message box) as an ascending sequence. The allocator compares its length
``k`` with the corpus size ``n`` and picks one of three strategies:

- SPARSE    (k < n/8):     rejection sampling with binary-search lookups
- DENSE     (n/8 <= k < n): one merge pass builds the unused remainder
- EXHAUSTED (k >= n):      corpus name + separator + base64 timestamp

Usage:
    from aliaskit import Allocator, load_corpus

    allocator = Allocator(load_corpus())
    name = allocator.allocate(["Aster", "Wren"])
"""

import base64
import logging
import time
from bisect import bisect_left, insort
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

from aliaskit.corpus import Corpus, default_corpus
from aliaskit.entropy import NameRandom, get_rng
from aliaskit.exceptions import AllocationExhaustedError, ExclusionOrderError
from aliaskit.settings import get_setting

logger = logging.getLogger(__name__)

EXCLUSION_MODES = ('strict', 'normalize', 'trust')


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class AllocatorConfig:
    """Allocator tuning, filled from the ``allocator`` section of app.yaml."""
    separator: Optional[str] = None         # Between base name and timestamp suffix
    sparse_divisor: Optional[int] = None    # Sparse while k * divisor < n
    max_attempts: Optional[int] = None      # Draw budget for the retry loops
    exclusion_mode: Optional[str] = None    # strict | normalize | trust
    warn_after_attempts: Optional[int] = None

    def __post_init__(self):
        cfg = get_setting("allocator", {}) or {}
        if self.separator is None:
            self.separator = cfg.get("separator")
        if self.sparse_divisor is None:
            self.sparse_divisor = cfg.get("sparse_divisor")
        if self.max_attempts is None:
            self.max_attempts = cfg.get("max_attempts")
        if self.exclusion_mode is None:
            self.exclusion_mode = cfg.get("exclusion_mode")
        if self.warn_after_attempts is None:
            self.warn_after_attempts = cfg.get("warn_after_attempts")

        missing = [
            name for name, value in (
                ("separator", self.separator),
                ("sparse_divisor", self.sparse_divisor),
                ("max_attempts", self.max_attempts),
                ("exclusion_mode", self.exclusion_mode),
                ("warn_after_attempts", self.warn_after_attempts),
            )
            if value is None
        ]
        if missing:
            raise ValueError(f"allocator settings missing in app.yaml: {', '.join(missing)}")

        if self.exclusion_mode not in EXCLUSION_MODES:
            raise ValueError(
                f"Unknown exclusion_mode '{self.exclusion_mode}'. "
                f"Available modes: {', '.join(EXCLUSION_MODES)}"
            )
        if int(self.sparse_divisor) < 1:
            raise ValueError("allocator.sparse_divisor must be at least 1")
        if int(self.max_attempts) < 1:
            raise ValueError("allocator.max_attempts must be at least 1")


# =============================================================================
# Density Buckets
# =============================================================================

class Density(Enum):
    """Load-factor range of an exclusion set relative to the corpus."""
    SPARSE = "sparse"
    DENSE = "dense"
    EXHAUSTED = "exhausted"


def density_bucket(excluded_count: int, corpus_size: int, divisor: int = 8) -> Density:
    """Classify ``excluded_count`` against ``corpus_size``."""
    if excluded_count * divisor < corpus_size:
        return Density.SPARSE
    if excluded_count < corpus_size:
        return Density.DENSE
    return Density.EXHAUSTED


# =============================================================================
# Helpers
# =============================================================================

def timestamp_suffix(now: Optional[float] = None) -> str:
    """
    Encode the current Unix time for suffix synthesis.

    Whole seconds are packed as an unsigned 64-bit little-endian integer and
    rendered with standard base64, giving 12 printable characters.
    """
    seconds = int(time.time() if now is None else now)
    return base64.b64encode(seconds.to_bytes(8, 'little')).decode('ascii')


def contains_sorted(names: Sequence[str], target: str) -> bool:
    """Binary-search membership test on an ascending sequence."""
    i = bisect_left(names, target)
    return i < len(names) and names[i] == target


def check_ascending(names: Sequence[str]) -> None:
    """Raise ExclusionOrderError unless ``names`` is strictly ascending."""
    for i in range(1, len(names)):
        if not names[i - 1] < names[i]:
            problem = "duplicate" if names[i - 1] == names[i] else "out of order"
            raise ExclusionOrderError(
                f"excluded names must be strictly ascending: "
                f"{names[i]!r} at position {i} is {problem}",
                position=i,
            )


def prepare_exclusion(excluded: Sequence[str], mode: str = 'strict') -> Sequence[str]:
    """
    Bring a caller's exclusion sequence into the form the strategies expect.

    Args:
        excluded: Names in use within the scope
        mode: 'strict' validates order, 'normalize' sorts and de-duplicates
            a copy, 'trust' passes the sequence through untouched

    Returns:
        An ascending sequence (guaranteed for 'strict' and 'normalize')
    """
    if mode == 'trust':
        return excluded
    if mode == 'normalize':
        return sorted(set(excluded))
    if mode == 'strict':
        check_ascending(excluded)
        return excluded
    raise ValueError(f"Unknown exclusion mode '{mode}'")


def subtract_sorted(corpus: Sequence[str], excluded: Sequence[str]) -> List[str]:
    """
    Corpus entries missing from ``excluded`` via one synchronized scan.

    Both inputs must be ascending. Excluded names that are not corpus entries
    (synthesized names, names from an older corpus) are stepped over.
    """
    remainder = []
    j = 0
    m = len(excluded)
    for name in corpus:
        while j < m and excluded[j] < name:
            j += 1
        if j < m and excluded[j] == name:
            j += 1
        else:
            remainder.append(name)
    return remainder


# =============================================================================
# Allocator
# =============================================================================

class Allocator:
    """
    Allocates scope-unique names from a corpus.

    Parameters
    ----------
    corpus : Corpus, optional
        Candidate names. Defaults to the bundled corpus.
    config : AllocatorConfig, optional
        Tuning knobs. Defaults to the values in app.yaml.
    rng : NameRandom, optional
        Random source. Defaults to the process-wide generator.
    clock : callable, optional
        Returns the current Unix time in seconds; used by suffix synthesis.
    """

    def __init__(
        self,
        corpus: Optional[Corpus] = None,
        config: Optional[AllocatorConfig] = None,
        rng: Optional[NameRandom] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.corpus = corpus if corpus is not None else default_corpus()
        self.config = config or AllocatorConfig()
        self.rng = rng or get_rng()
        self.clock = clock or time.time

    def bucket_for(self, excluded: Sequence[str]) -> Density:
        """Which strategy ``allocate`` would run for this exclusion sequence."""
        return density_bucket(len(excluded), self.corpus.size, int(self.config.sparse_divisor))

    def allocate(self, excluded: Sequence[str] = ()) -> str:
        """
        Return a name not present in ``excluded``.

        Args:
            excluded: Ascending names already used in this scope

        Returns:
            A corpus entry, or a corpus entry plus separator and timestamp
            suffix once the corpus is exhausted

        Raises:
            ExclusionOrderError: In strict mode, if ``excluded`` is not
                strictly ascending
            AllocationExhaustedError: If the attempt budget runs out
        """
        prepared = prepare_exclusion(excluded, self.config.exclusion_mode)
        return self._allocate_prepared(prepared)

    def allocate_many(self, excluded: Sequence[str] = (), count: int = 1) -> List[str]:
        """
        Allocate ``count`` names for one scope, distinct from each other too.

        Each result is added to a private copy of the exclusion sequence
        before the next draw; the caller's sequence is not modified.
        """
        if count < 0:
            raise ValueError("count must be non-negative")
        taken = list(prepare_exclusion(excluded, self.config.exclusion_mode))
        names = []
        for _ in range(count):
            name = self._allocate_prepared(taken)
            insort(taken, name)
            names.append(name)
        return names

    # -------------------------------------------------------------------------
    # Strategies
    # -------------------------------------------------------------------------

    def _allocate_prepared(self, excluded: Sequence[str]) -> str:
        bucket = self.bucket_for(excluded)
        logger.debug(
            f"Allocating with {len(excluded)}/{self.corpus.size} excluded: {bucket.value}"
        )
        if bucket is Density.SPARSE:
            return self._sample_sparse(excluded)
        if bucket is Density.DENSE:
            return self._subtract_dense(excluded)
        return self._synthesize_exhausted(excluded)

    def _sample_sparse(self, excluded: Sequence[str]) -> str:
        entries = self.corpus.entries
        for attempt in range(1, int(self.config.max_attempts) + 1):
            name = self.rng.choice(entries)
            if not contains_sorted(excluded, name):
                self._note_attempts(attempt, Density.SPARSE)
                return name
        raise AllocationExhaustedError(
            f"No unused name after {self.config.max_attempts} draws "
            f"({len(excluded)} of {self.corpus.size} excluded)",
            attempts=int(self.config.max_attempts),
        )

    def _subtract_dense(self, excluded: Sequence[str]) -> str:
        remainder = subtract_sorted(self.corpus.entries, excluded)
        if not remainder:
            raise AllocationExhaustedError(
                f"Every corpus name is excluded ({len(excluded)} excluded, "
                f"corpus size {self.corpus.size})"
            )
        return self.rng.choice(remainder)

    def _synthesize_exhausted(self, excluded: Sequence[str]) -> str:
        entries = self.corpus.entries
        separator = self.config.separator
        for attempt in range(1, int(self.config.max_attempts) + 1):
            name = f"{self.rng.choice(entries)}{separator}{timestamp_suffix(self.clock())}"
            if not contains_sorted(excluded, name):
                self._note_attempts(attempt, Density.EXHAUSTED)
                return name
        raise AllocationExhaustedError(
            f"No unused suffixed name after {self.config.max_attempts} draws; "
            f"every base name is taken for the current second",
            attempts=int(self.config.max_attempts),
        )

    def _note_attempts(self, attempts: int, bucket: Density) -> None:
        if attempts > int(self.config.warn_after_attempts):
            logger.warning(f"{bucket.value} allocation needed {attempts} draws")
        elif attempts > 1:
            logger.debug(f"{bucket.value} allocation needed {attempts} draws")


# =============================================================================
# Convenience Functions
# =============================================================================

def allocate(
    corpus: Corpus,
    excluded: Sequence[str] = (),
    rng: Optional[NameRandom] = None,
) -> str:
    """Allocate one name from ``corpus`` that is absent from ``excluded``."""
    return Allocator(corpus, rng=rng).allocate(excluded)


def random_name(corpus: Optional[Corpus] = None, rng: Optional[NameRandom] = None) -> str:
    """A uniformly random name from ``corpus`` (default: bundled corpus)."""
    corpus = corpus if corpus is not None else default_corpus()
    return (rng or get_rng()).choice(corpus.entries)


__all__ = [
    "Allocator",
    "AllocatorConfig",
    "Density",
    "EXCLUSION_MODES",
    "allocate",
    "check_ascending",
    "contains_sorted",
    "density_bucket",
    "prepare_exclusion",
    "random_name",
    "subtract_sorted",
    "timestamp_suffix",
]
