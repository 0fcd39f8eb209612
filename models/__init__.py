"""Models for HCC adjuvant TACE survival projection."""

from __future__ import annotations

from models.constants import (
    BASE_SURVIVAL_MONTHS,
    DEFAULT_TACE_EFFECT,
    FACTOR_OPTIONS,
    REQUIRED_FIELDS,
    RISK_FACTORS,
    TACE_EFFECTIVENESS,
)
from models.scoring import (
    NetBenefit,
    ProjectionResult,
    SurvivalEstimate,
    compute_risk_score,
    compute_survival_rate,
    compute_survival_time,
    compute_tace_effect,
    format_net_benefit,
    missing_required_fields,
    normalize_patient_keys,
    project,
)
from models.survival_model import TaceSurvivalModel

__all__ = [
    "TaceSurvivalModel",
    "NetBenefit",
    "ProjectionResult",
    "SurvivalEstimate",
    "compute_risk_score",
    "compute_survival_rate",
    "compute_survival_time",
    "compute_tace_effect",
    "format_net_benefit",
    "missing_required_fields",
    "normalize_patient_keys",
    "project",
    "BASE_SURVIVAL_MONTHS",
    "DEFAULT_TACE_EFFECT",
    "FACTOR_OPTIONS",
    "REQUIRED_FIELDS",
    "RISK_FACTORS",
    "TACE_EFFECTIVENESS",
]
