"""Typed models shared by the calculators and the calculation service.

Domain value objects are plain frozen dataclasses: the engine trusts its
callers and never validates. Payloads entering through the service layer are
Pydantic models so that shape and sign errors surface before any arithmetic.
"""

from .api import (
    BreakdownEntry,
    BreakdownSubItem,
    CalculationEntry,
    CategoryInput,
    CertificateRequest,
    CertificateResponse,
    CombinationSummary,
    CostSummary,
    LongTermHousingInput,
    OtherRenovationInput,
    PatternEntry,
    ResponseMeta,
    WorkItemInput,
    format_validation_error,
)
from .domain import (
    CertificateCostSummary,
    CombinedRenovations,
    LongTermHousingMode,
    OptimalCombinationResult,
    PatternTotals,
    RenovationCalculation,
    RenovationCategory,
    WorkItem,
)

__all__ = [
    "BreakdownEntry",
    "BreakdownSubItem",
    "CalculationEntry",
    "CategoryInput",
    "CertificateCostSummary",
    "CertificateRequest",
    "CertificateResponse",
    "CombinationSummary",
    "CombinedRenovations",
    "CostSummary",
    "LongTermHousingInput",
    "LongTermHousingMode",
    "OptimalCombinationResult",
    "OtherRenovationInput",
    "PatternEntry",
    "PatternTotals",
    "RenovationCalculation",
    "RenovationCategory",
    "ResponseMeta",
    "WorkItem",
    "WorkItemInput",
    "format_validation_error",
]
