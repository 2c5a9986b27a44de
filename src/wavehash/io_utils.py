"""I/O helpers for wavehash.

This module handles:
- hash cache read/write
- hash listings and match reports (CSV)
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List

from .hashing import ImageHash, format_hash, parse_hash


logger = logging.getLogger(__name__)

CACHE_FIELDS = ["path", "mtime_ns", "size", "hash_size", "resample", "whash"]
HASH_FIELDS = ["path", "hash_size", "whash"]
REPORT_FIELDS = ["query", "reference_match", "distance", "status"]


@dataclass(frozen=True)
class CacheEntry:
    """One cached hash keyed by absolute file path."""

    mtime_ns: int
    size: int
    hash_size: int
    resample: str  # Pillow filter name, lower case
    whash: int


def load_cache(cache_path: Path) -> Dict[str, CacheEntry]:
    """Load a hash cache from CSV.

    Cache schema:
        path, mtime_ns, size, hash_size, resample, whash (hex)

    Rows that can't be parsed are skipped. A missing file is an empty cache.
    """

    cache: Dict[str, CacheEntry] = {}
    if not cache_path.exists():
        return cache

    with cache_path.open("r", newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for lineno, row in enumerate(reader, start=2):
            try:
                cache[row["path"]] = CacheEntry(
                    mtime_ns=int(row["mtime_ns"]),
                    size=int(row["size"]),
                    hash_size=int(row["hash_size"]),
                    resample=row["resample"].lower(),
                    whash=parse_hash(row["whash"]),
                )
            except (AttributeError, KeyError, TypeError, ValueError):
                logger.debug("Ignoring malformed cache row %d in %s", lineno, cache_path)
    return cache


def save_cache(cache_path: Path, hashes: Iterable[ImageHash], resample: str) -> None:
    """Write *hashes* to a cache CSV.

    Each row is stamped with the file's current mtime and size and with the
    name of the *resample* filter the hashes were computed with.
    """

    cache_path.parent.mkdir(parents=True, exist_ok=True)
    with cache_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CACHE_FIELDS)
        for h in hashes:
            st = h.path.stat()
            writer.writerow(
                [
                    str(h.path),
                    st.st_mtime_ns,
                    st.st_size,
                    h.hash_size,
                    resample,
                    format_hash(h.whash, h.hash_size),
                ]
            )


def write_hashes_csv(hashes: Iterable[ImageHash], out_csv: Path) -> None:
    """Write one ``path, hash_size, whash`` row per image."""

    out_csv.parent.mkdir(parents=True, exist_ok=True)
    with out_csv.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(HASH_FIELDS)
        for h in hashes:
            writer.writerow([str(h.path), h.hash_size, format_hash(h.whash, h.hash_size)])


def write_report_csv(rows: List[dict], out_csv: Path) -> None:
    """Write the match report as CSV."""

    out_csv.parent.mkdir(parents=True, exist_ok=True)
    with out_csv.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=REPORT_FIELDS)
        writer.writeheader()
        writer.writerows(rows)
