"""Orchestrate request validation, category calculations and the optimizer.

The calculators trust their inputs; this module is the boundary where raw
payloads are validated, work type codes are priced from the standard unit
price catalogue, and the tax year configuration is resolved. Profiling hooks
live here so the rest of the package stays free of timing concerns.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from time import perf_counter
from typing import Any

from pydantic import ValidationError

from reformtax.backend.config.work_types import get_work_type, has_solar_power_work
from reformtax.backend.config.year_config import (
    YearConfiguration,
    default_year,
    load_year_configuration,
)
from reformtax.backend.localization import Translator, get_translator
from reformtax.backend.models import (
    CategoryInput,
    CertificateRequest,
    CertificateResponse,
    CombinedRenovations,
    OptimalCombinationResult,
    RenovationCalculation,
    RenovationCategory,
    WorkItem,
    WorkItemInput,
    format_validation_error,
)
from reformtax.backend.version import get_project_version

from .calculators import (
    calculate_category,
    calculate_category_from_total,
    calculate_certificate_cost,
    calculate_optimal_combination,
    calculate_other_renovation,
    validate_housing_loan_eligibility,
    work_type_breakdown,
)

_LOGGER = logging.getLogger(__name__)

# (request section, rule category, CombinedRenovations field, work category)
_ITEMISED_SECTIONS: tuple[tuple[str, RenovationCategory, str, str], ...] = (
    ("seismic", RenovationCategory.SEISMIC, "seismic", "seismic"),
    ("barrier_free", RenovationCategory.BARRIER_FREE, "barrier_free", "barrier_free"),
    ("energy_saving", RenovationCategory.ENERGY_SAVING, "energy", "energy_saving"),
    ("cohabitation", RenovationCategory.COHABITATION, "cohabitation", "cohabitation"),
    ("childcare", RenovationCategory.CHILDCARE, "childcare", "childcare"),
)


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("REFORMTAX_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def _build_work_item(entry: WorkItemInput) -> WorkItem:
    if entry.unit_price is not None:
        return WorkItem.create(
            unit_price=entry.unit_price,
            quantity=entry.quantity,
            resident_ratio=entry.resident_ratio,
            window_area_ratio=entry.window_area_ratio,
        )

    code = entry.work_type_code or ""
    try:
        work_type = get_work_type(code)
    except KeyError as exc:
        raise ValueError(f"Unknown work type code: {code}") from exc

    return work_type.build_item(
        entry.quantity,
        resident_ratio=entry.resident_ratio,
        window_area_ratio=entry.window_area_ratio,
    )


def _calculate_section(
    category: RenovationCategory,
    section: CategoryInput,
    config: YearConfiguration,
    has_solar_panel: bool,
) -> RenovationCalculation:
    if section.total_cost is not None:
        return calculate_category_from_total(
            category,
            section.total_cost,
            section.subsidy_amount,
            has_solar_panel=has_solar_panel,
            config=config,
        )

    items = [_build_work_item(entry) for entry in section.items]
    return calculate_category(
        category,
        items,
        section.subsidy_amount,
        has_solar_panel=has_solar_panel,
        config=config,
    )


def _solar_section_codes(request: CertificateRequest) -> list[str | None]:
    """Work type codes of the sections whose cap depends on solar power work."""

    codes: list[str | None] = []
    for section in (request.energy_saving, request.long_term_housing):
        if section is not None:
            codes.extend(entry.work_type_code for entry in section.items)
    return codes


def _validate_request(payload: Mapping[str, Any] | CertificateRequest) -> CertificateRequest:
    if isinstance(payload, CertificateRequest):
        data: Any = payload.model_dump(mode="python")
    elif isinstance(payload, Mapping):
        data = payload
    else:
        raise ValueError("Payload must be a mapping")

    try:
        return CertificateRequest.model_validate(data)
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc)) from exc


def _resolve_configuration(year: int | None) -> YearConfiguration:
    target = year if year is not None else default_year()
    try:
        return load_year_configuration(target)
    except FileNotFoundError as exc:
        raise ValueError(f"Unsupported tax year: {target}") from exc


def _calculation_entry(
    category: RenovationCategory, calculation: RenovationCalculation, translator: Translator
) -> dict[str, Any]:
    return {
        "category": category.value,
        "label": translator(f"categories.{category.value}"),
        **calculation.as_dict(),
    }


def _combination_payload(
    result: OptimalCombinationResult, translator: Translator
) -> dict[str, Any]:
    payload = result.as_dict()
    payload["patterns"] = [
        {**entry.as_dict(), "label": translator(f"patterns.{entry.pattern}")}
        for entry in result.patterns
    ]
    return payload


def calculate_certificate(
    payload: Mapping[str, Any] | CertificateRequest,
) -> dict[str, Any]:
    """Compute every category, the optimal combination and the cost summary."""

    request = _validate_request(payload)

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    config = _resolve_configuration(request.year)
    translator = get_translator(request.locale)
    has_solar_panel = request.has_solar_panel or has_solar_power_work(
        _solar_section_codes(request)
    )

    entries: list[dict[str, Any]] = []
    combined: dict[str, RenovationCalculation] = {}
    work_totals: dict[str, list[float]] = {}
    subsidy_total = 0.0

    with _profile_section("categories", timings):
        for section_name, category, field_name, work_category in _ITEMISED_SECTIONS:
            section = getattr(request, section_name)
            if section is None:
                continue
            calculation = _calculate_section(category, section, config, has_solar_panel)
            combined[field_name] = calculation
            work_totals[work_category] = [calculation.total_cost]
            subsidy_total += section.subsidy_amount
            entries.append(_calculation_entry(category, calculation, translator))

        long_term = request.long_term_housing
        if long_term is not None:
            category = long_term.mode.category
            calculation = _calculate_section(category, long_term, config, has_solar_panel)
            combined[category.value] = calculation
            work_totals["long_term_housing"] = [calculation.total_cost]
            subsidy_total += long_term.subsidy_amount
            entries.append(_calculation_entry(category, calculation, translator))

        other = request.other_renovation
        if other is not None:
            calculation = calculate_other_renovation(
                other.total_cost, other.subsidy_amount, config=config
            )
            combined["other"] = calculation
            work_totals["other_renovation"] = [calculation.total_cost]
            subsidy_total += other.subsidy_amount
            entries.append(
                _calculation_entry(
                    RenovationCategory.OTHER_RENOVATION, calculation, translator
                )
            )

    with _profile_section("combination", timings):
        optimal = calculate_optimal_combination(
            CombinedRenovations(**combined), config=config
        )

    with _profile_section("cost_summary", timings):
        subsidy_amount = (
            request.subsidy_amount if request.subsidy_amount is not None else subsidy_total
        )
        summary = calculate_certificate_cost(work_totals, subsidy_amount, config=config)
        cost_summary = {
            "total_work_cost": summary.total_work_cost,
            "subsidy_amount": summary.subsidy_amount,
            "deductible_amount": summary.deductible_amount,
            "meets_housing_loan_requirement": summary.meets_housing_loan_requirement,
            "housing_loan_message": validate_housing_loan_eligibility(summary, translator),
            "breakdown": work_type_breakdown(summary, translator),
        }

    if timings is not None and overall_start is not None:
        timings["total"] = perf_counter() - overall_start
        _LOGGER.debug(
            "calculate_certificate timings (ms): %s",
            {name: round(duration * 1000, 3) for name, duration in timings.items()},
        )

    _LOGGER.debug(
        "Certificate for %s selected pattern %s (max control amount %s)",
        config.year,
        optimal.selected_pattern,
        optimal.max_control_amount,
    )

    response_model = CertificateResponse.model_validate(
        {
            "categories": entries,
            "combination": _combination_payload(optimal, translator),
            "cost_summary": cost_summary,
            "meta": {
                "year": config.year,
                "locale": translator.locale,
                "has_solar_panel": has_solar_panel,
                "engine_version": get_project_version(),
            },
        }
    )

    return response_model.model_dump(mode="json", exclude_none=True)


__all__ = ["calculate_certificate"]
