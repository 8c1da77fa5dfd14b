"""Regression coverage ensuring calculator outputs stay stable."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from reformtax.backend.services.calculation_service import calculate_certificate

_DATA_PATH = Path(__file__).resolve().parents[1] / "data" / "regression_scenarios.json"


def _assert_matches(actual: dict[str, object], expected: dict[str, object]) -> None:
    for field, value in expected.items():
        if isinstance(value, (bool, str)):
            assert actual[field] == value, field
        else:
            assert actual[field] == pytest.approx(value), field


@pytest.mark.parametrize(
    "scenario",
    json.loads(_DATA_PATH.read_text("utf-8")),
    ids=lambda item: f"{item['name']}_{item['payload']['year']}",
)
def test_calculate_certificate_matches_regression_scenario(
    scenario: dict[str, object],
) -> None:
    """The calculation service returns the expected results for known payloads."""

    payload = scenario["payload"]
    expectations = scenario["expectations"]

    result = calculate_certificate(payload)

    categories = {entry["category"]: entry for entry in result["categories"]}
    for category, category_expectations in expectations["categories"].items():
        assert category in categories, f"Missing calculation for {category}"
        _assert_matches(categories[category], category_expectations)

    _assert_matches(result["combination"], expectations["combination"])
    _assert_matches(result["cost_summary"], expectations["cost_summary"])
