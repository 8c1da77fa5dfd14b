#!/usr/bin/env python3
"""Check the yearly deduction rule files without installing the package."""

from __future__ import annotations

import sys
from pathlib import Path

# Running straight from a checkout needs ``src`` on the import path, the same
# way ``tests/conftest.py`` sets it up.
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = REPO_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from reformtax.backend.config.validator import main


if __name__ == "__main__":
    raise SystemExit(main())
