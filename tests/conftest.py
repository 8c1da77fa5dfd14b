"""Test configuration utilities and shared fixtures."""

import sys
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402

from reformtax.backend.config.year_config import (  # noqa: E402
    YearConfiguration,
    load_year_configuration,
)
from reformtax.backend.localization import Translator, get_translator  # noqa: E402


@pytest.fixture()
def config() -> YearConfiguration:
    """Return the 2025 rule set used by most calculator tests."""

    return load_year_configuration(2025)


@pytest.fixture()
def translator() -> Translator:
    return get_translator("en")
