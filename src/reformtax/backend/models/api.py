"""Pydantic models describing the calculation service payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .domain import LongTermHousingMode

__all__ = [
    "WorkItemInput",
    "CategoryInput",
    "LongTermHousingInput",
    "OtherRenovationInput",
    "CertificateRequest",
    "CalculationEntry",
    "PatternEntry",
    "CombinationSummary",
    "BreakdownSubItem",
    "BreakdownEntry",
    "CostSummary",
    "ResponseMeta",
    "CertificateResponse",
    "format_validation_error",
]


class WorkItemInput(BaseModel):
    """A priced line, either explicit or looked up by work type code."""

    model_config = ConfigDict(extra="forbid")

    work_type_code: str | None = None
    unit_price: float | None = Field(default=None, ge=0)
    quantity: float = Field(default=0.0, ge=0)
    resident_ratio: float | None = Field(default=None, ge=0, le=1)
    window_area_ratio: float | None = Field(default=None, ge=0, le=1)

    @model_validator(mode="after")
    def _require_price_source(self) -> "WorkItemInput":
        if self.unit_price is None and not self.work_type_code:
            raise ValueError("either unit_price or work_type_code is required")
        return self


class CategoryInput(BaseModel):
    """Work lines (or a pre-aggregated total) and subsidy for one category."""

    model_config = ConfigDict(extra="forbid")

    items: list[WorkItemInput] = Field(default_factory=list)
    total_cost: float | None = Field(default=None, ge=0)
    subsidy_amount: float = Field(default=0.0, ge=0)

    @model_validator(mode="after")
    def _single_cost_source(self) -> "CategoryInput":
        if self.items and self.total_cost is not None:
            raise ValueError("provide either items or total_cost, not both")
        return self


class LongTermHousingInput(CategoryInput):
    """Long-term excellent housing work with its legal grouping."""

    mode: LongTermHousingMode = LongTermHousingMode.OR


class OtherRenovationInput(BaseModel):
    """Other extension and renovation work, entered as a total."""

    model_config = ConfigDict(extra="forbid")

    total_cost: float = Field(default=0.0, ge=0)
    subsidy_amount: float = Field(default=0.0, ge=0)


class CertificateRequest(BaseModel):
    """Complete payload for one renovation certificate calculation."""

    model_config = ConfigDict(extra="forbid")

    year: int | None = Field(default=None, ge=2000, le=2100)
    locale: str | None = None
    has_solar_panel: bool = False
    seismic: CategoryInput | None = None
    barrier_free: CategoryInput | None = None
    energy_saving: CategoryInput | None = None
    cohabitation: CategoryInput | None = None
    childcare: CategoryInput | None = None
    long_term_housing: LongTermHousingInput | None = None
    other_renovation: OtherRenovationInput | None = None
    subsidy_amount: float | None = Field(default=None, ge=0)


class CalculationEntry(BaseModel):
    """Audited per-category figures."""

    model_config = ConfigDict(extra="forbid")

    category: str
    label: str
    total_cost: int
    after_subsidy: int
    deductible_amount: int
    max_deduction: int
    excess_amount: int


class PatternEntry(BaseModel):
    """Sums for one candidate grouping."""

    model_config = ConfigDict(extra="forbid")

    pattern: str
    label: str
    total: int
    max_deduction: int
    excess: int


class CombinationSummary(BaseModel):
    """Final figures of the optimal grouping."""

    model_config = ConfigDict(extra="forbid")

    total_deductible: int
    max_control_amount: int
    excess_amount: int
    remaining: int
    final_deductible: int
    five_percent_deductible: int
    selected_pattern: str
    patterns: list[PatternEntry] = Field(default_factory=list)


class BreakdownSubItem(BaseModel):
    model_config = ConfigDict(extra="forbid")

    label: str
    amount: float


class BreakdownEntry(BaseModel):
    """A statutory classification row of the certificate."""

    model_config = ConfigDict(extra="forbid")

    classification: str
    classification_number: int = Field(ge=1, le=6)
    label: str
    amount: float
    has_work: bool
    sub_items: list[BreakdownSubItem] | None = None


class CostSummary(BaseModel):
    """Certificate-wide work cost totals."""

    model_config = ConfigDict(extra="forbid")

    total_work_cost: float
    subsidy_amount: float
    deductible_amount: float
    meets_housing_loan_requirement: bool
    housing_loan_message: str | None = None
    breakdown: list[BreakdownEntry] = Field(default_factory=list)


class ResponseMeta(BaseModel):
    model_config = ConfigDict(extra="forbid")

    year: int
    locale: str
    has_solar_panel: bool
    engine_version: str


class CertificateResponse(BaseModel):
    """Serialised result returned by ``calculate_certificate``."""

    model_config = ConfigDict(extra="forbid")

    categories: list[CalculationEntry]
    combination: CombinationSummary
    cost_summary: CostSummary
    meta: ResponseMeta


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message: Any = issue.get("msg", "Invalid value")
        if "greater than or equal to 0" in str(message).lower():
            message = "value cannot be negative"
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(str(message))

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid certificate payload: {details}"
