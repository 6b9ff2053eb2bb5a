"""Exceptions raised by the counting core."""

from __future__ import annotations


class LincountError(Exception):
    """Base class for every error raised by lincount."""


class SizeError(LincountError, ValueError):
    """Raised when a bitmap length or dump buffer violates KiB granularity."""


class SizeMismatchError(LincountError, ValueError):
    """Raised when combining bitmaps or counters of unequal length."""


class EmptyInputError(LincountError, ValueError):
    """Raised when a merge is requested over no counters at all."""


class HashFinalizedError(LincountError, RuntimeError):
    """Raised when feeding a hasher whose digest was already produced."""
