"""Exceptions raised by wavehash.

Everything derives from :class:`ValueError`, so callers that already guard
numeric input with ``except ValueError`` keep working.
"""

from __future__ import annotations


class WaveHashError(ValueError):
    """Base class for invalid input to the transform or hash pipeline."""


class DimensionMismatchError(WaveHashError):
    """Signal or matrix shape can't be transformed as requested."""


class RegionOutOfRangeError(WaveHashError):
    """Requested sub-region is larger than the matrix."""


class EmptyInputError(WaveHashError):
    """Operation needs at least one value."""
