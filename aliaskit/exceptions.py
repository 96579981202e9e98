#!/usr/bin/env python3
"""Exception types raised by AliasKit."""


class AliasKitError(Exception):
    """Base class for all AliasKit errors."""


class CorpusError(AliasKitError, ValueError):
    """The corpus source could not be read or parsed."""


class ExclusionOrderError(AliasKitError, ValueError):
    """The exclusion sequence is not strictly ascending."""

    def __init__(self, message: str, position: int = -1):
        super().__init__(message)
        self.position = position


class AllocationExhaustedError(AliasKitError, RuntimeError):
    """No unused name was found within the attempt budget."""

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


__all__ = [
    "AliasKitError",
    "CorpusError",
    "ExclusionOrderError",
    "AllocationExhaustedError",
]
