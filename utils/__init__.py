"""Utility functions for the TACE survival calculator."""

from __future__ import annotations

from utils.logging_config import get_logger, setup_logging
from utils.translations import factor_label, option_label, translate
from utils.visualization import (
    build_factor_contributions_figure,
    build_survival_curve_figure,
    finalize_figure,
    plot_factor_contributions,
    plot_factor_sensitivity,
    plot_patient_projections,
    plot_survival_curves,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "factor_label",
    "option_label",
    "translate",
    "build_factor_contributions_figure",
    "build_survival_curve_figure",
    "finalize_figure",
    "plot_factor_contributions",
    "plot_factor_sensitivity",
    "plot_patient_projections",
    "plot_survival_curves",
]
