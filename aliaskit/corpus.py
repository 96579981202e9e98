#!/usr/bin/env python3
"""
Name Corpus
===========
The fixed, sorted set of candidate display names that allocations draw from.

A corpus is loaded once at startup and never mutated afterwards, so a single
instance can be read by any number of threads without locking.

Supported sources:
- JSON file: a top-level array of strings (``names.json``)
- YAML file: a top-level list of strings (``.yaml`` / ``.yml``)
- Raw JSON content as ``bytes`` or ``str``
- Any iterable of strings

Usage:
    from aliaskit.corpus import load_corpus, default_corpus

    corpus = load_corpus("my_names.json")
    corpus = default_corpus()        # bundled names, loaded once
"""

from __future__ import annotations

import json
import logging
import os
from bisect import bisect_left
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Iterator, Tuple, Union

import yaml

from aliaskit.exceptions import CorpusError
from aliaskit.settings import get_setting, resolve_path

logger = logging.getLogger(__name__)

CorpusSource = Union[str, bytes, Path, Iterable[str], None]

YAML_SUFFIXES = ('.yaml', '.yml')


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class Corpus:
    """Immutable, ascending, duplicate-free sequence of candidate names."""
    entries: Tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, 'entries', tuple(self.entries))
        if not self.entries:
            raise CorpusError("corpus must contain at least one name")
        for i, item in enumerate(self.entries):
            if not isinstance(item, str):
                raise CorpusError(f"Corpus entry {i} is not a string: {item!r}")
        for i in range(1, len(self.entries)):
            if not self.entries[i - 1] < self.entries[i]:
                raise CorpusError(
                    f"corpus entries must be strictly ascending "
                    f"(position {i}: {self.entries[i]!r})"
                )

    @property
    def size(self) -> int:
        return len(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> str:
        return self.entries[index]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.index_of(name) >= 0

    def index_of(self, name: str) -> int:
        """Binary-search position of ``name``, or -1 if absent."""
        i = bisect_left(self.entries, name)
        if i < len(self.entries) and self.entries[i] == name:
            return i
        return -1


# =============================================================================
# Loading
# =============================================================================

def _parse_json(text: Union[str, bytes], origin: str) -> list:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CorpusError(f"Malformed JSON corpus in {origin}: {e}") from e


def _parse_yaml(text: str, origin: str) -> list:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise CorpusError(f"Malformed YAML corpus in {origin}: {e}") from e


def _read_file(path: Path) -> list:
    if not path.exists():
        raise CorpusError(f"Corpus file not found: {path}")
    try:
        text = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise CorpusError(f"Cannot read corpus file {path}: {e}") from e
    if path.suffix.lower() in YAML_SUFFIXES:
        return _parse_yaml(text, str(path))
    return _parse_json(text, str(path))


def _read_source(source: CorpusSource) -> Tuple[object, str]:
    """Turn any supported source into raw parsed data plus a label for errors."""
    if source is None:
        configured = get_setting("corpus.path")
        if not configured:
            raise ValueError("corpus.path must be set in app.yaml")
        path = resolve_path(configured)
        return _read_file(path), str(path)

    if isinstance(source, Path):
        return _read_file(source), str(source)

    if isinstance(source, bytes):
        return _parse_json(source, "<bytes>"), "<bytes>"

    if isinstance(source, str):
        # An existing file wins over inline JSON content
        path = Path(source).expanduser()
        if not os.path.exists(path) and source.lstrip().startswith('['):
            return _parse_json(source, "<string>"), "<string>"
        return _read_file(path), str(path)

    return list(source), "<iterable>"


def build_entries(items: object, origin: str = "<iterable>") -> Tuple[str, ...]:
    """Validate parsed items and return them sorted and de-duplicated."""
    if not isinstance(items, (list, tuple)):
        raise CorpusError(
            f"Corpus in {origin} must be a list of strings, got {type(items).__name__}"
        )

    for i, item in enumerate(items):
        if not isinstance(item, str):
            raise CorpusError(f"Corpus entry {i} in {origin} is not a string: {item!r}")
        if not item:
            raise CorpusError(f"Corpus entry {i} in {origin} is empty")

    entries = sorted(set(items))
    if len(entries) != len(items):
        logger.debug(f"Dropped {len(items) - len(entries)} duplicate names from {origin}")
    if not entries:
        raise CorpusError(f"Corpus in {origin} is empty")
    return tuple(entries)


def load_corpus(source: CorpusSource = None) -> Corpus:
    """
    Load, validate, sort and freeze a corpus.

    Args:
        source: Path to a JSON/YAML file, raw JSON content, an iterable of
            names, or None for the configured bundled corpus.

    Returns:
        Immutable Corpus

    Raises:
        CorpusError: If the source is missing, malformed, or holds anything
            other than non-empty strings.
    """
    items, origin = _read_source(source)
    corpus = Corpus(build_entries(items, origin))
    logger.debug(f"Loaded corpus of {corpus.size} names from {origin}")
    return corpus


@lru_cache(maxsize=1)
def default_corpus() -> Corpus:
    """The bundled corpus, loaded on first use and shared thereafter."""
    return load_corpus()


__all__ = [
    "Corpus",
    "CorpusSource",
    "build_entries",
    "load_corpus",
    "default_corpus",
]
