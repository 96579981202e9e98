#!/usr/bin/env python3
"""
AliasKit - Unique Pseudonym Allocator
=====================================

Hands out display names that are unique within a scope (a thread, a channel,
a message box) from a fixed corpus of candidate names.

Quick Start
-----------
    from aliaskit import Allocator, load_corpus

    allocator = Allocator(load_corpus())

    # Names already used in this thread, ascending
    name = allocator.allocate(["Aster", "Wren"])

    # Several newcomers at once
    names = allocator.allocate_many(["Aster", "Wren"], count=3)

Modules
-------
    aliaskit.corpus     - Loading the sorted, immutable name corpus
    aliaskit.allocator  - Density buckets and the three allocation strategies
    aliaskit.entropy    - Thread-safe random source
    aliaskit.settings   - YAML application settings

CLI Usage
---------
    python -m aliaskit corpus
    python -m aliaskit allocate --exclude Aster Wren -n 3
    python -m aliaskit bucket --excluded 40
"""

__version__ = "0.1.0"
__author__ = "AliasKit"

from .allocator import (
    Allocator,
    AllocatorConfig,
    Density,
    allocate,
    density_bucket,
    random_name,
    timestamp_suffix,
)
from .corpus import (
    Corpus,
    default_corpus,
    load_corpus,
)
from .entropy import (
    NameRandom,
    get_rng,
)
from .exceptions import (
    AliasKitError,
    AllocationExhaustedError,
    CorpusError,
    ExclusionOrderError,
)
from .settings import get_setting

__all__ = [
    '__version__',
    # Allocator
    'Allocator',
    'AllocatorConfig',
    'Density',
    'allocate',
    'density_bucket',
    'random_name',
    'timestamp_suffix',
    # Corpus
    'Corpus',
    'default_corpus',
    'load_corpus',
    # Randomness
    'NameRandom',
    'get_rng',
    # Errors
    'AliasKitError',
    'AllocationExhaustedError',
    'CorpusError',
    'ExclusionOrderError',
    # Settings
    'get_setting',
]
