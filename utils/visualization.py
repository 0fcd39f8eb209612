from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from matplotlib.figure import Figure

from models.constants import SURVIVAL_HORIZONS_YEARS
from models.scoring import ProjectionResult

sns.set_style("whitegrid")

# Chinese labels need a CJK-capable font; the first installed family wins.
CJK_FONT_FALLBACKS = (
    "Noto Sans CJK SC",
    "Source Han Sans SC",
    "WenQuanYi Zen Hei",
    "Microsoft YaHei",
    "SimHei",
    "PingFang SC",
)
plt.rcParams["font.sans-serif"] = [
    *CJK_FONT_FALLBACKS,
    *(f for f in plt.rcParams["font.sans-serif"] if f not in CJK_FONT_FALLBACKS),
]
plt.rcParams["axes.unicode_minus"] = False

FIG_SURVIVAL_CURVES = "survival_curves.png"
FIG_PATIENT_PROJECTIONS = "patient_projections.png"
FIG_FACTOR_SENSITIVITY = "factor_sensitivity.png"
FIG_FACTOR_CONTRIBUTIONS = "factor_contributions.png"

ARM_COLORS = {
    "with_tace": "#27ae60",
    "without_tace": "#c0392b",
}


def finalize_figure(fig: Figure, output_path: Path, show_plots: bool) -> Path:
    """Persist figure to disk and optionally show the interactive window."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=300, bbox_inches="tight")
    if show_plots:
        fig.show()
    else:
        plt.close(fig)
    return output_path


def survival_curve_points(survival_time: float, years: np.ndarray) -> np.ndarray:
    """Exponential survival percentages for an array of horizons in years."""

    years = np.asarray(years, dtype=float)
    if survival_time <= 0:
        return np.zeros_like(years)
    return np.clip(100.0 * np.exp(-(years * 12.0) / survival_time), 0.0, 100.0)


def build_survival_curve_figure(
    result: ProjectionResult,
    horizon_years: float = 10.0,
    labels: Mapping[str, str] | None = None,
) -> Figure:
    """
    Draw the projected survival curves of both treatment arms.

    Parameters
    ----------
    result : ProjectionResult
        Output of ``project`` for one patient.
    horizon_years : float, optional
        Right edge of the time axis (default: 10 years).
    labels : Mapping[str, str] or None, optional
        Display text for ``with_tace``, ``without_tace`` and
        ``survival_curve``. English defaults when omitted.

    Returns
    -------
    Figure
        Unsaved figure; pass to :func:`finalize_figure` to persist it.
    """
    labels = dict(labels or {})
    years = np.linspace(0.0, horizon_years, 241)

    fig, ax = plt.subplots(figsize=(9, 5))
    arms = (
        ("with_tace", result.with_tace, labels.get("with_tace", "With TACE")),
        ("without_tace", result.without_tace, labels.get("without_tace", "Without TACE")),
    )
    for key, estimate, label in arms:
        color = ARM_COLORS[key]
        ax.plot(
            years,
            survival_curve_points(estimate.survival_time, years),
            linewidth=2,
            color=color,
            label=f"{label} ({estimate.survival_time:.1f} mo)",
        )
        for horizon, rate in zip(
            SURVIVAL_HORIZONS_YEARS, (estimate.survival_3yr, estimate.survival_5yr)
        ):
            ax.scatter([horizon], [rate], color=color, s=40, zorder=3)
            ax.annotate(
                f"{rate:.1f}%",
                (horizon, rate),
                textcoords="offset points",
                xytext=(6, 6),
                fontsize=9,
                color=color,
            )

    for horizon in SURVIVAL_HORIZONS_YEARS:
        ax.axvline(horizon, color="gray", linestyle=":", alpha=0.6)
    ax.set_xlim(0, horizon_years)
    ax.set_ylim(0, 100)
    ax.set_xlabel("Years after resection", fontsize=12)
    ax.set_ylabel("Projected survival (%)", fontsize=12)
    ax.set_title(
        labels.get("survival_curve", "Projected Survival Curves"), fontsize=14, fontweight="bold"
    )
    ax.legend(loc="upper right")
    fig.tight_layout()
    return fig


def plot_survival_curves(
    result: ProjectionResult,
    output_dir: Path,
    show_plots: bool,
    horizon_years: float = 10.0,
) -> Path:
    """Save the survival curves of one projection."""

    fig = build_survival_curve_figure(result, horizon_years)
    return finalize_figure(fig, output_dir / FIG_SURVIVAL_CURVES, show_plots)


def plot_patient_projections(
    results_df: pd.DataFrame, output_dir: Path, show_plots: bool
) -> Path:
    """Compare survival time with and without TACE across patients."""

    fig, axes = plt.subplots(1, 2, figsize=(15, max(4, 0.6 * len(results_df) + 2)))

    positions = np.arange(len(results_df))
    height = 0.38
    axes[0].barh(
        positions + height / 2,
        results_df["survival_time_with_tace"],
        height=height,
        color=ARM_COLORS["with_tace"],
        label="With TACE",
    )
    axes[0].barh(
        positions - height / 2,
        results_df["survival_time_without_tace"],
        height=height,
        color=ARM_COLORS["without_tace"],
        label="Without TACE",
    )
    axes[0].set_yticks(positions)
    axes[0].set_yticklabels(results_df["Patient"])
    axes[0].set_xlabel("Projected survival (months)", fontsize=12)
    axes[0].set_title("Survival Time by Treatment Arm", fontsize=14, fontweight="bold")
    axes[0].legend(loc="lower right")
    axes[0].grid(axis="x", alpha=0.3)

    sns.scatterplot(
        data=results_df,
        x="risk_score",
        y="net_benefit_survival_time",
        hue="tace_effect",
        palette="viridis",
        s=80,
        ax=axes[1],
    )
    axes[1].set_xlabel("Risk score", fontsize=12)
    axes[1].set_ylabel("Net benefit (months)", fontsize=12)
    axes[1].set_title("TACE Net Benefit vs. Risk", fontsize=14, fontweight="bold")

    plt.tight_layout()
    return finalize_figure(fig, output_dir / FIG_PATIENT_PROJECTIONS, show_plots)


def plot_factor_sensitivity(
    sensitivity_df: pd.DataFrame, output_dir: Path, show_plots: bool
) -> Path | None:
    """Visualize how changing one factor at a time shifts the projection."""

    if sensitivity_df.empty:
        return None

    labels = sensitivity_df["factor"] + " = " + sensitivity_df["value"]
    fig, axes = plt.subplots(1, 2, figsize=(15, max(4, 0.4 * len(sensitivity_df) + 2)))

    for ax, column, title in (
        (axes[0], "delta_survival_time_without_tace", "Change in Survival Without TACE"),
        (axes[1], "delta_net_benefit_survival_time", "Change in TACE Net Benefit"),
    ):
        values = sensitivity_df[column]
        colors = ["#27ae60" if v >= 0 else "#c0392b" for v in values]
        ax.barh(labels, values, color=colors)
        ax.axvline(0, color="gray", linestyle="--", alpha=0.6)
        ax.set_xlabel("Months", fontsize=12)
        ax.set_title(title, fontsize=14, fontweight="bold")
        ax.grid(axis="x", alpha=0.3)

    axes[1].tick_params(axis="y", labelleft=False)
    plt.tight_layout()
    return finalize_figure(fig, output_dir / FIG_FACTOR_SENSITIVITY, show_plots)


def build_factor_contributions_figure(
    contributions: Mapping[str, float],
    factor_labels: Mapping[str, str] | None = None,
    title: str = "Risk Factor Contributions",
) -> Figure:
    """Horizontal bar chart of each factor's risk weight for one patient."""

    factor_labels = factor_labels or {}
    names = [factor_labels.get(factor, factor) for factor in contributions]
    values = list(contributions.values())

    fig, ax = plt.subplots(figsize=(8, 4))
    ax.barh(names, values, color=["#667eea" if v > 0 else "#b0b0b0" for v in values])
    ax.invert_yaxis()
    ax.set_xlabel("Risk score contribution")
    ax.set_title(title)
    fig.tight_layout()
    return fig


def plot_factor_contributions(
    contributions: Mapping[str, float], output_dir: Path, show_plots: bool
) -> Path:
    fig = build_factor_contributions_figure(contributions)
    return finalize_figure(fig, output_dir / FIG_FACTOR_CONTRIBUTIONS, show_plots)
