"""Module entry-point: ``python -m basic_fits``.

Without arguments we print the version and exit successfully.
"""

from __future__ import annotations

import sys

from basic_fits.cli import main


def _run() -> int:
    argv = sys.argv[1:] or ["version"]
    return main(argv)


if __name__ == "__main__":
    raise SystemExit(_run())
