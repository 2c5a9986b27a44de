"""wavehash CLI.

This is the entry point used by:
- `python -m wavehash`
- the console script `wavehash` (installed via pyproject.toml)

Examples
--------
wavehash scan --images "/data/photos" --out "/data/hashes.csv"
wavehash match --reference "/data/raw" --query "/data/edited" --out "/data/report"
"""

from __future__ import annotations

import argparse
import concurrent.futures
import functools
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from PIL import Image
from tqdm import tqdm

from .hashing import DEFAULT_HASH_SIZE, ImageHash, check_hash_size, iter_images, whash_path
from .io_utils import load_cache, save_cache, write_hashes_csv, write_report_csv
from .matching import find_best_match


logger = logging.getLogger(__name__)

RESAMPLE_FILTERS = {f.name.lower(): f for f in Image.Resampling}


def _add_hash_options(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--hash-size",
        type=int,
        default=DEFAULT_HASH_SIZE,
        help=f"Side of the hashed coefficient block, a power of two (default: {DEFAULT_HASH_SIZE}).",
    )
    p.add_argument(
        "--resample",
        choices=sorted(RESAMPLE_FILTERS),
        default="bicubic",
        help="Resampling filter used to resize images before hashing (default: bicubic).",
    )
    p.add_argument(
        "--workers",
        type=int,
        default=0,
        help=(
            "Number of worker processes for hashing (default: 0 = auto). "
            "Use 1 to disable multiprocessing."
        ),
    )
    p.add_argument(
        "--cache",
        type=Path,
        default=None,
        help=(
            "Optional CSV cache of hashes, reused when a file's mtime and size, "
            "the hash size and the resample filter are unchanged."
        ),
    )


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    p = argparse.ArgumentParser(
        prog="wavehash",
        description="Perceptual image hashing with a multi-level Haar wavelet transform.",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = p.add_subparsers(dest="command", required=True)

    scan = sub.add_parser("scan", help="Hash every image in a folder and write a CSV listing.")
    scan.add_argument(
        "--images",
        required=True,
        type=Path,
        help="Folder of images to hash (scanned recursively).",
    )
    scan.add_argument("--out", required=True, type=Path, help="Output CSV path.")
    _add_hash_options(scan)

    match = sub.add_parser(
        "match", help="Match each query image to its closest reference image."
    )
    match.add_argument(
        "--reference",
        required=True,
        type=Path,
        help="Folder of reference/original images (scanned recursively).",
    )
    match.add_argument(
        "--query",
        required=True,
        type=Path,
        help="Folder of query images to look up (scanned recursively).",
    )
    match.add_argument("--out", required=True, type=Path, help="Output folder for the report.")
    match.add_argument(
        "--max-distance",
        type=int,
        default=5,
        help=(
            "Maximum Hamming distance allowed for a match (default: 5). "
            "Larger => fewer false negatives, more false positives."
        ),
    )
    _add_hash_options(match)
    return p.parse_args(argv)


def _hash_path_worker(p: Path, hash_size: int, resample: Image.Resampling) -> Optional[ImageHash]:
    """Multiprocessing worker: compute the wHash for a single image path.

    This function is top-level so it can be pickled on Windows.
    """
    h = whash_path(p, hash_size=hash_size, resample=resample)
    if h is None:
        return None
    return ImageHash(path=p, whash=h, hash_size=hash_size)


def _hash_images(
    root: Path,
    hash_size: int,
    resample: Image.Resampling,
    workers: int,
    cache_path: Optional[Path] = None,
    desc: str = "Hashing",
) -> List[ImageHash]:
    """Hash every image under *root*, reusing cached hashes where possible."""
    paths = [p.resolve() for p in iter_images(root)]
    cache = load_cache(cache_path) if cache_path is not None else {}

    resample_name = resample.name.lower()

    out: List[ImageHash] = []
    todo: List[Path] = []
    for p in paths:
        try:
            st = p.stat()
        except OSError as exc:
            logger.warning("Skipping %s: %s", p, exc)
            continue
        ce = cache.get(str(p))
        if (
            ce is not None
            and ce.hash_size == hash_size
            and ce.resample == resample_name
            and ce.mtime_ns == st.st_mtime_ns
            and ce.size == st.st_size
        ):
            out.append(ImageHash(path=p, whash=ce.whash, hash_size=hash_size))
        else:
            todo.append(p)
    logger.debug("%s: %d cached, %d to hash under %s", desc, len(out), len(todo), root)

    worker = functools.partial(_hash_path_worker, hash_size=hash_size, resample=resample)
    if workers == 1:
        results = map(worker, todo)
        for r in tqdm(results, total=len(todo), desc=desc, unit="img"):
            if r is not None:
                out.append(r)
    elif todo:
        max_workers = None if workers == 0 else max(1, workers)
        with concurrent.futures.ProcessPoolExecutor(max_workers=max_workers) as ex:
            for r in tqdm(ex.map(worker, todo), total=len(todo), desc=desc, unit="img"):
                if r is not None:
                    out.append(r)

    out.sort(key=lambda h: str(h.path))
    if cache_path is not None and todo:
        save_cache(cache_path, out, resample_name)
    return out


def _resolve_dir(path: Path, flag: str) -> Path:
    path = path.expanduser().resolve()
    if not path.is_dir():
        raise SystemExit(f"{flag} must be an existing folder: {path}")
    return path


def _run_scan(args: argparse.Namespace) -> int:
    images_dir = _resolve_dir(args.images, "--images")
    out_csv: Path = args.out.expanduser().resolve()

    hashes = _hash_images(
        images_dir,
        hash_size=args.hash_size,
        resample=RESAMPLE_FILTERS[args.resample],
        workers=args.workers,
        cache_path=args.cache,
        desc="Hashing",
    )
    if not hashes:
        raise SystemExit("No readable images found. Check extensions and permissions.")

    write_hashes_csv(hashes, out_csv)
    print(f"\nDone. Hashed: {len(hashes)}")
    print(f"Hashes: {out_csv}")
    return 0


def _run_match(args: argparse.Namespace) -> int:
    reference_dir = _resolve_dir(args.reference, "--reference")
    query_dir = _resolve_dir(args.query, "--query")
    out_dir: Path = args.out.expanduser().resolve()
    out_dir.mkdir(parents=True, exist_ok=True)
    resample = RESAMPLE_FILTERS[args.resample]

    # 1) Hash references (cached)
    references = _hash_images(
        reference_dir,
        hash_size=args.hash_size,
        resample=resample,
        workers=args.workers,
        cache_path=args.cache,
        desc="Hashing reference",
    )
    if not references:
        raise SystemExit("No readable reference images found. Check extensions and permissions.")

    # 2) Hash queries
    queries = _hash_images(
        query_dir,
        hash_size=args.hash_size,
        resample=resample,
        workers=args.workers,
        desc="Hashing query",
    )
    if not queries:
        raise SystemExit("No readable query images found. Check extensions and permissions.")

    # 3) Match
    rows: List[dict] = []
    for q in tqdm(queries, desc="Matching", unit="img"):
        res = find_best_match(q, references, max_distance=args.max_distance)
        rows.append(
            {
                "query": str(res.query_path),
                "reference_match": str(res.reference_path) if res.reference_path else "",
                "distance": res.distance if res.distance is not None else "",
                "status": res.status,
            }
        )

    # 4) Report
    out_csv = out_dir / "mapping.csv"
    write_report_csv(rows, out_csv)

    matched = sum(1 for r in rows if r["status"] == "matched")
    print(f"\nDone. Matched: {matched} | Not matched: {len(rows) - matched}")
    print(f"Report: {out_csv}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run wavehash.

    Returns
    -------
    int
        Process exit code (0 success).
    """
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        check_hash_size(args.hash_size)
    except ValueError as exc:
        raise SystemExit(f"--hash-size: {exc}")
    if args.cache is not None:
        args.cache = args.cache.expanduser().resolve()

    if args.command == "scan":
        return _run_scan(args)
    return _run_match(args)


if __name__ == "__main__":
    raise SystemExit(main())
