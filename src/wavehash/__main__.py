"""Allow running the package with: `python -m wavehash`.

This delegates to :func:`wavehash.cli.main`.
"""

from .cli import main


if __name__ == "__main__":
    raise SystemExit(main())
