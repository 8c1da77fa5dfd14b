"""Unit coverage for certificate cost totals and classification rows."""

from __future__ import annotations

import pytest

from reformtax.backend.config.year_config import YearConfiguration
from reformtax.backend.localization import Translator, get_translator
from reformtax.backend.services.calculators import (
    calculate_certificate_cost,
    validate_housing_loan_eligibility,
    work_type_breakdown,
)
from reformtax.backend.services.calculators.certificate_cost import (
    WORK_CATEGORIES,
    classification_number,
)


def test_totals_are_summed_per_category_and_overall(config: YearConfiguration) -> None:
    summary = calculate_certificate_cost(
        {"seismic": [600_000, 200_000], "energy_saving": [900_000], "childcare": None},
        subsidy_amount=300_000,
        config=config,
    )

    assert summary.total_for("seismic") == 800_000
    assert summary.total_for("energy_saving") == 900_000
    assert summary.total_for("childcare") == 0
    assert summary.total_work_cost == 1_700_000
    assert summary.deductible_amount == 1_400_000
    assert summary.meets_housing_loan_requirement is True
    assert set(summary.as_dict()["category_totals"]) == set(WORK_CATEGORIES)


def test_housing_loan_minimum_is_inclusive(config: YearConfiguration) -> None:
    exact = calculate_certificate_cost({"seismic": [1_000_000]}, config=config)
    short = calculate_certificate_cost({"seismic": [999_999]}, config=config)

    assert exact.meets_housing_loan_requirement is True
    assert short.meets_housing_loan_requirement is False


def test_subsidy_larger_than_cost_clamps_to_zero(config: YearConfiguration) -> None:
    summary = calculate_certificate_cost(
        {"barrier_free": [200_000]}, subsidy_amount=500_000, config=config
    )

    assert summary.deductible_amount == 0


def test_unknown_work_category_is_rejected(config: YearConfiguration) -> None:
    with pytest.raises(KeyError):
        calculate_certificate_cost({"roofing": [100]}, config=config)


def test_classification_numbers_follow_certificate_rows() -> None:
    assert classification_number("seismic") == 1
    assert classification_number("long_term_housing") == 5
    assert classification_number("other_renovation") == 6
    assert classification_number("childcare") == 6
    with pytest.raises(KeyError):
        classification_number("roofing")


def test_breakdown_groups_childcare_with_other_work(
    config: YearConfiguration, translator: Translator
) -> None:
    summary = calculate_certificate_cost(
        {"seismic": [700_000], "other_renovation": [150_000], "childcare": [600_000]},
        config=config,
    )

    rows = work_type_breakdown(summary, translator)

    assert [row["classification_number"] for row in rows] == [1, 2, 3, 4, 5, 6]
    assert rows[0]["amount"] == 700_000
    assert rows[0]["has_work"] is True
    assert rows[1]["has_work"] is False
    assert rows[0]["label"] == translator("categories.seismic")

    last = rows[-1]
    assert last["amount"] == 750_000
    assert last["has_work"] is True
    assert [item["amount"] for item in last["sub_items"]] == [150_000, 600_000]


def test_eligibility_message_without_cost(
    config: YearConfiguration, translator: Translator
) -> None:
    summary = calculate_certificate_cost({}, config=config)

    assert validate_housing_loan_eligibility(summary, translator) == translator(
        "eligibility.no_cost"
    )


def test_eligibility_message_reports_shortfall(config: YearConfiguration) -> None:
    summary = calculate_certificate_cost(
        {"seismic": [900_000]}, subsidy_amount=100_000, config=config
    )

    message = validate_housing_loan_eligibility(summary, get_translator("en"))

    assert message is not None
    assert "1,000,000" in message
    assert "800,000" in message


def test_eligibility_message_absent_when_requirement_met(
    config: YearConfiguration, translator: Translator
) -> None:
    summary = calculate_certificate_cost({"seismic": [1_500_000]}, config=config)

    assert validate_housing_loan_eligibility(summary, translator) is None
