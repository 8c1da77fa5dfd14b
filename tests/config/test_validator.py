from reformtax.backend.config.validator import (
    main,
    validate_all_years,
    validate_year_configuration,
)
from reformtax.backend.config.year_config import load_year_configuration


def _with_rule(config, name: str, **updates):
    rule = getattr(config.categories, name).model_copy(update=updates)
    categories = config.categories.model_copy(update={name: rule})
    return config.model_copy(update={"categories": categories})


def test_current_configurations_are_valid() -> None:
    results = validate_all_years()
    assert results and all(not issues for issues in results.values()), results


def test_validator_flags_cap_below_threshold() -> None:
    broken = _with_rule(load_year_configuration(2025), "seismic", cap=400_000)

    errors = validate_year_configuration(broken)

    assert any("categories.seismic" in error and "threshold" in error for error in errors)


def test_validator_flags_window_ratio_outside_energy_work() -> None:
    broken = _with_rule(
        load_year_configuration(2025), "barrier_free", applies_window_ratio=True
    )

    errors = validate_year_configuration(broken)

    assert any("categories.barrier_free" in error for error in errors)


def test_validator_flags_and_cap_below_or_cap() -> None:
    broken = _with_rule(
        load_year_configuration(2025),
        "long_term_housing_and",
        cap=2_000_000,
        solar_cap=2_000_000,
    )

    errors = validate_year_configuration(broken)

    assert any("'or' grouping cap" in error for error in errors)


def test_validator_flags_limit_below_category_cap() -> None:
    config = load_year_configuration(2025)
    limits = config.limits.model_copy(update={"total_deduction_limit": 3_000_000})
    broken = config.model_copy(update={"limits": limits})

    errors = validate_year_configuration(broken)

    assert any("limits.total_deduction_limit" in error for error in errors)


def test_main_reports_success(capsys) -> None:
    assert main(["2025"]) == 0
    assert "[2025] OK" in capsys.readouterr().out


def test_main_reports_unknown_years(capsys) -> None:
    assert main(["1990"]) == 1
    assert "failed to load configuration" in capsys.readouterr().out
