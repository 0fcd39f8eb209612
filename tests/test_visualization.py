"""Tests for visualization module."""

from __future__ import annotations

import tempfile
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest

from models.scoring import project
from models.survival_model import TaceSurvivalModel
from utils.visualization import (
    ARM_COLORS,
    CJK_FONT_FALLBACKS,
    FIG_FACTOR_CONTRIBUTIONS,
    FIG_FACTOR_SENSITIVITY,
    FIG_PATIENT_PROJECTIONS,
    FIG_SURVIVAL_CURVES,
    build_factor_contributions_figure,
    build_survival_curve_figure,
    finalize_figure,
    plot_factor_contributions,
    plot_factor_sensitivity,
    plot_patient_projections,
    plot_survival_curves,
    survival_curve_points,
)


@pytest.fixture
def sample_projections():
    """Minimal cohort results frame with the columns the plots read."""
    return pd.DataFrame(
        {
            "Patient": ["A", "B", "C", "D"],
            "risk_score": [0.0, 1.5, 2.7, 3.8],
            "tace_effect": [0.275, 0.225, 0.2, 0.16],
            "survival_time_with_tace": [61.2, 13.1, 3.9, 1.2],
            "survival_time_without_tace": [48.0, 10.7, 3.2, 1.1],
            "net_benefit_survival_time": [13.2, 2.4, 0.7, 0.1],
        }
    )


@pytest.fixture
def sample_sensitivity():
    return pd.DataFrame(
        {
            "factor": ["child_pugh", "macrovascular_invasion", "tumor_size"],
            "value": ["B", "yes", "large"],
            "survival_time_without_tace": [26.3, 21.6, 35.6],
            "survival_time_with_tace": [32.9, 26.4, 44.0],
            "delta_survival_time_without_tace": [-21.7, -26.4, -12.4],
            "delta_net_benefit_survival_time": [-6.6, -8.4, -4.8],
        }
    )


class TestArmColors:
    def test_both_arms_have_colors(self):
        for arm in ("with_tace", "without_tace"):
            assert ARM_COLORS[arm].startswith("#")


class TestFonts:
    def test_cjk_fonts_lead_sans_serif_list(self):
        families = list(plt.rcParams["font.sans-serif"])
        assert families[: len(CJK_FONT_FALLBACKS)] == list(CJK_FONT_FALLBACKS)
        assert "DejaVu Sans" in families

    def test_unicode_minus_disabled(self):
        assert plt.rcParams["axes.unicode_minus"] is False


class TestFinalizeFunction:
    """Test the finalize_figure utility function."""

    def test_finalize_creates_output_directory(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            nested_path = Path(tmpdir) / "nested" / "subdir" / "figure.png"
            fig, ax = plt.subplots()
            ax.plot([1, 2, 3])

            output_path = finalize_figure(fig, nested_path, show_plots=False)
            assert output_path.exists()
            assert output_path.parent.exists()

    def test_finalize_closes_figure_when_not_showing(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            fig, ax = plt.subplots()
            fig_num = fig.number
            ax.plot([1, 2, 3])

            finalize_figure(fig, Path(tmpdir) / "test.png", show_plots=False)
            assert fig_num not in plt.get_fignums()


class TestSurvivalCurvePoints:
    def test_starts_at_full_survival(self):
        points = survival_curve_points(48.0, np.array([0.0, 3.0, 5.0]))
        assert points[0] == pytest.approx(100.0)
        assert points[1] == pytest.approx(47.2, abs=0.05)
        assert points[2] == pytest.approx(28.7, abs=0.05)

    def test_monotone_decreasing(self):
        points = survival_curve_points(13.1, np.linspace(0, 10, 50))
        assert np.all(np.diff(points) < 0)

    def test_zero_survival_time_is_flat_zero(self):
        points = survival_curve_points(0.0, np.array([0.0, 1.0, 2.0]))
        assert np.all(points == 0.0)


class TestSurvivalCurves:
    def test_figure_has_one_line_per_arm(self, favorable_patient):
        fig = build_survival_curve_figure(project(favorable_patient))
        ax = fig.axes[0]
        assert len(ax.get_lines()) >= 2
        legend_text = [text.get_text() for text in ax.get_legend().get_texts()]
        assert legend_text == ["With TACE (61.2 mo)", "Without TACE (48.0 mo)"]
        plt.close(fig)

    def test_translated_labels(self, favorable_patient):
        labels = {"with_tace": "接受TACE治疗", "without_tace": "未接受TACE治疗"}
        fig = build_survival_curve_figure(project(favorable_patient), labels=labels)
        legend_text = [text.get_text() for text in fig.axes[0].get_legend().get_texts()]
        assert legend_text[0].startswith("接受TACE治疗")
        plt.close(fig)

    def test_plot_creates_file(self, unfavorable_patient):
        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = plot_survival_curves(
                project(unfavorable_patient), Path(tmpdir), show_plots=False
            )
            assert output_path.exists()
            assert output_path.name == FIG_SURVIVAL_CURVES


class TestCohortPlots:
    def test_patient_projections_creates_file(self, sample_projections):
        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = plot_patient_projections(
                sample_projections, Path(tmpdir), show_plots=False
            )
            assert output_path.exists()
            assert output_path.suffix == ".png"
            assert output_path.name == FIG_PATIENT_PROJECTIONS

    def test_patient_projections_single_patient(self, sample_projections):
        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = plot_patient_projections(
                sample_projections.head(1), Path(tmpdir), show_plots=False
            )
            assert output_path.exists()

    def test_special_characters_in_patient_names(self, sample_projections):
        df = sample_projections.assign(
            Patient=["Patient A/B", "Patient (C)", "Patient D&E", "患者 F"]
        )
        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = plot_patient_projections(df, Path(tmpdir), show_plots=False)
            assert output_path.exists()


class TestSensitivityPlot:
    def test_creates_file(self, sample_sensitivity):
        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = plot_factor_sensitivity(
                sample_sensitivity, Path(tmpdir), show_plots=False
            )
            assert output_path is not None
            assert output_path.exists()
            assert output_path.name == FIG_FACTOR_SENSITIVITY

    def test_returns_none_without_rows(self, sample_sensitivity):
        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = plot_factor_sensitivity(
                sample_sensitivity.iloc[0:0], Path(tmpdir), show_plots=False
            )
            assert output_path is None


class TestContributionsPlot:
    def test_bar_per_factor(self, favorable_patient):
        contributions = TaceSurvivalModel({}).factor_contributions(
            dict(favorable_patient, child_pugh="B")
        )
        fig = build_factor_contributions_figure(contributions)
        assert len(fig.axes[0].patches) == len(contributions)
        plt.close(fig)

    def test_factor_labels_applied(self):
        fig = build_factor_contributions_figure(
            {"child_pugh": 0.6}, factor_labels={"child_pugh": "Child-Pugh Class"}
        )
        fig.canvas.draw()
        tick_text = [t.get_text() for t in fig.axes[0].get_yticklabels()]
        assert "Child-Pugh Class" in tick_text
        plt.close(fig)

    def test_plot_creates_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = plot_factor_contributions(
                {"child_pugh": 0.6, "tumor_size": 0.0}, Path(tmpdir), show_plots=False
            )
            assert output_path.exists()
            assert output_path.name == FIG_FACTOR_CONTRIBUTIONS
