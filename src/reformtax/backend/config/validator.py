"""Consistency checks for the yearly deduction rule files."""

from __future__ import annotations

import argparse
from typing import Sequence

from reformtax.backend.models.domain import RenovationCategory

from .year_config import (
    CategoryRule,
    ConfigurationError,
    ProgramLimits,
    YearConfiguration,
    available_years,
    load_year_configuration,
)

_WINDOW_RATIO_CATEGORIES = frozenset(
    {
        RenovationCategory.ENERGY_SAVING,
        RenovationCategory.LONG_TERM_HOUSING_OR,
        RenovationCategory.LONG_TERM_HOUSING_AND,
    }
)


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_category(category: RenovationCategory, rule: CategoryRule) -> list[str]:
    errors: list[str] = []
    scope = f"categories.{category.value}"

    if category is RenovationCategory.OTHER_RENOVATION:
        if rule.solar_cap is not None:
            errors.append(_format_scope(scope, "uncapped category cannot define 'solar_cap'"))
        return errors

    if rule.threshold is None:
        errors.append(_format_scope(scope, "qualifying threshold is required"))
    if rule.cap is None:
        errors.append(_format_scope(scope, "deduction cap is required"))

    if rule.threshold is not None and rule.cap is not None and rule.cap <= rule.threshold:
        errors.append(
            _format_scope(
                scope,
                f"cap {rule.cap} must exceed the qualifying threshold {rule.threshold}",
            )
        )

    if rule.applies_window_ratio and category not in _WINDOW_RATIO_CATEGORIES:
        errors.append(
            _format_scope(scope, "window area ratio only applies to energy-saving work")
        )
    if not rule.applies_window_ratio and category in _WINDOW_RATIO_CATEGORIES:
        errors.append(_format_scope(scope, "window area ratio must be applied"))

    if rule.label_key is None:
        errors.append(_format_scope(scope, "label_key is required"))

    return errors


def _validate_long_term_housing(config: YearConfiguration) -> list[str]:
    errors: list[str] = []
    or_rule = config.categories.long_term_housing_or
    and_rule = config.categories.long_term_housing_and

    for has_solar_panel in (False, True):
        or_cap = or_rule.cap_for(has_solar_panel)
        and_cap = and_rule.cap_for(has_solar_panel)
        if or_cap is None or and_cap is None:
            continue
        if and_cap < or_cap:
            variant = "solar" if has_solar_panel else "standard"
            errors.append(
                _format_scope(
                    "categories.long_term_housing_and",
                    f"{variant} cap {and_cap} is lower than the 'or' grouping cap {or_cap}",
                )
            )

    return errors


def _validate_limits(limits: ProgramLimits, config: YearConfiguration) -> list[str]:
    errors: list[str] = []

    for category in RenovationCategory:
        rule = config.rule_for(category)
        cap = rule.cap_for(True)
        if cap is not None and cap > limits.total_deduction_limit:
            errors.append(
                _format_scope(
                    "limits.total_deduction_limit",
                    f"limit is lower than the '{category.value}' cap {cap}",
                )
            )

    if limits.housing_loan_minimum_cost > limits.total_deduction_limit:
        errors.append(
            _format_scope(
                "limits.housing_loan_minimum_cost",
                "minimum cost cannot exceed the total deduction limit",
            )
        )

    return errors


def validate_year_configuration(config: YearConfiguration) -> list[str]:
    """Return a list of validation issues for the provided configuration."""

    errors: list[str] = []

    for category in RenovationCategory:
        errors.extend(_validate_category(category, config.rule_for(category)))

    errors.extend(_validate_long_term_housing(config))
    errors.extend(_validate_limits(config.limits, config))

    return errors


def validate_all_years(years: Sequence[int] | None = None) -> dict[int, list[str]]:
    """Map each published (or requested) year to its rule issues."""

    return {
        int(year): validate_year_configuration(load_year_configuration(year))
        for year in (years or available_years())
    }


def _report(year: int) -> list[str]:
    """Return the printable report lines for ``year``; empty when valid."""

    try:
        config = load_year_configuration(year)
    except (FileNotFoundError, ConfigurationError) as error:
        return [f"[{year}] failed to load configuration: {error}"]

    issues = validate_year_configuration(config)
    if not issues:
        return []
    return [f"[{year}] {len(issues)} issue(s) detected:"] + [f"  - {issue}" for issue in issues]


def main(argv: Sequence[str] | None = None) -> int:
    """Check deduction rule files and print one report block per year."""

    parser = argparse.ArgumentParser(
        description="Check renovation deduction rule files for inconsistent caps and limits."
    )
    parser.add_argument(
        "years",
        nargs="*",
        type=int,
        help="tax years to check (default: every year in the manifest)",
    )
    args = parser.parse_args(argv)

    years = args.years or list(available_years())
    if not years:
        parser.print_help()
        return 1

    failed = False
    for year in years:
        lines = _report(year)
        if not lines:
            print(f"[{year}] OK")
            continue
        failed = True
        print("\n".join(lines))

    return 1 if failed else 0


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
