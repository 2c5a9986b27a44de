"""Nearest-hash matching.

For each query image hash we look for the reference hash with the smallest
Hamming distance and accept it when the distance is within a cap.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .hashing import ImageHash, hamming_distance


@dataclass(frozen=True)
class MatchResult:
    """Result of matching one query image against a reference set."""

    query_path: Path
    query_hash: int
    reference_path: Optional[Path]
    reference_hash: Optional[int]
    distance: Optional[int]  # None if the reference set was empty
    status: str  # "matched" | "no_match"


def find_best_match(
    query: ImageHash,
    references: Sequence[ImageHash],
    max_distance: int,
) -> MatchResult:
    """Find the closest reference hash for *query*.

    References computed with a different ``hash_size`` are ignored, their
    bits aren't comparable. The nearest candidate is still reported when it
    is farther than *max_distance*, but with status ``"no_match"``.
    """

    best: Optional[ImageHash] = None
    best_dist = 0

    qhash = query.whash
    for ref in references:
        if ref.hash_size != query.hash_size:
            continue
        d = hamming_distance(qhash, ref.whash)
        if best is None or d < best_dist:
            best = ref
            best_dist = d
            if d == 0:
                break

    if best is None:
        return MatchResult(
            query_path=query.path,
            query_hash=qhash,
            reference_path=None,
            reference_hash=None,
            distance=None,
            status="no_match",
        )

    return MatchResult(
        query_path=query.path,
        query_hash=qhash,
        reference_path=best.path,
        reference_hash=best.whash,
        distance=best_dist,
        status="matched" if best_dist <= max_distance else "no_match",
    )
