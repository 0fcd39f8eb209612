"""
HCC Adjuvant TACE Survival Calculator
Purpose: Project survival after hepatectomy with and without adjuvant TACE
Based on: Illustrative fixed-coefficient exponential survival model
"""

from __future__ import annotations

import argparse
import copy
import json
import logging
import os
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

BASE_DIR = Path(__file__).resolve().parent
# Ensure Matplotlib cache uses a writable path (containers may block ~/.config).
mplt_config_dir = Path(os.environ.setdefault("MPLCONFIGDIR", str(BASE_DIR / ".matplotlib")))
mplt_config_dir.mkdir(parents=True, exist_ok=True)

import pandas as pd  # noqa: E402

from models.constants import (  # noqa: E402
    BASE_SURVIVAL_MONTHS,
    DEFAULT_TACE_EFFECT,
    FACTOR_ALIASES,
    FACTOR_OPTIONS,
    RISK_FACTORS,
    TACE_EFFECTIVENESS,
)
from models.scoring import (  # noqa: E402
    ProjectionResult,
    format_net_benefit,
    missing_required_fields,
    normalize_patient_keys,
    round_one_decimal,
)
from models.survival_model import TaceSurvivalModel  # noqa: E402
from utils.logging_config import get_logger, setup_logging  # noqa: E402
from utils.translations import (  # noqa: E402
    DEFAULT_LANGUAGE,
    SUPPORTED_LANGUAGES,
    factor_label,
    translate,
)
from utils.visualization import (  # noqa: E402
    plot_factor_sensitivity,
    plot_patient_projections,
    plot_survival_curves,
)

DEFAULT_OUTPUT_DIR = BASE_DIR
DEFAULT_MODEL_CONFIG = BASE_DIR / "models" / "tace_model.json"
COHORT_RESULTS_FILE = "cohort_projections.csv"
ID_COLUMNS = ("name", "patient_id", "Patient")

logger = get_logger()


def _plain_table(table: Mapping[str, Mapping[str, float]]) -> dict[str, dict[str, float]]:
    return {factor: dict(weights) for factor, weights in table.items()}


DEFAULT_CONFIG_PAYLOAD = {
    "id": "hcc_adjuvant_tace_v1",
    "name": "HCC adjuvant TACE survival projection (exponential form)",
    "description": (
        "Illustrative fixed-coefficient model: eight categorical risk factors scale a "
        "48-month baseline survival by exp(-risk); TACE adds the mean effectiveness "
        "of the matched factors."
    ),
    "citation": "Illustrative coefficients for demonstration; not derived from a validated cohort.",
    "base_survival_months": BASE_SURVIVAL_MONTHS,
    "default_tace_effect": DEFAULT_TACE_EFFECT,
    "risk_factors": _plain_table(RISK_FACTORS),
    "tace_effectiveness": _plain_table(TACE_EFFECTIVENESS),
}

EXAMPLE_PATIENTS = [
    {
        "name": "Patient A - Favorable",
        "portal_hypertension": "no",
        "macrovascular_invasion": "no",
        "afp_level": "low",
        "microvascular_invasion": "no",
        "child_pugh": "A",
        "resection_margin": "wide",
        "tumor_number": "1",
        "tumor_size": "small",
    },
    {
        "name": "Patient B - Microvascular Invasion",
        "portal_hypertension": "no",
        "macrovascular_invasion": "no",
        "afp_level": "high",
        "microvascular_invasion": "yes",
        "child_pugh": "A",
        "resection_margin": "narrow",
        "tumor_number": "1",
        "tumor_size": "medium",
    },
    {
        "name": "Patient C - Multifocal",
        "portal_hypertension": "yes",
        "macrovascular_invasion": "no",
        "afp_level": "high",
        "microvascular_invasion": "yes",
        "child_pugh": "A",
        "resection_margin": "narrow",
        "tumor_number": "3plus",
        "tumor_size": "large",
    },
    {
        "name": "Patient D - Macrovascular Invasion",
        "portal_hypertension": "yes",
        "macrovascular_invasion": "yes",
        "afp_level": "high",
        "microvascular_invasion": "yes",
        "child_pugh": "B",
        "resection_margin": "narrow",
        "tumor_number": "2",
        "tumor_size": "large",
    },
]


def load_model_config(config_path: Path | None = None) -> dict[str, Any]:
    """
    Load model configuration from a JSON file.

    Parameters
    ----------
    config_path : Path or None, optional
        Path to the JSON configuration. If None, uses ``DEFAULT_MODEL_CONFIG``
        (models/tace_model.json).

    Returns
    -------
    dict[str, Any]
        Configuration dictionary containing:
        - id, name, description, citation : str - Model metadata
        - base_survival_months : float - Survival at a zero risk score
        - default_tace_effect : float - Effect used when no factor matches
        - risk_factors : dict[str, dict[str, float]] - Risk weights
        - tace_effectiveness : dict[str, dict[str, float]] - TACE weights

    Raises
    ------
    Never raises; falls back to ``DEFAULT_CONFIG_PAYLOAD`` on any read or
    parse error.

    Examples
    --------
    >>> config = load_model_config()
    >>> config['id']
    'hcc_adjuvant_tace_v1'
    """
    payload: dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG_PAYLOAD)
    target_path = config_path or DEFAULT_MODEL_CONFIG

    if target_path and target_path.exists():
        try:
            with target_path.open("r", encoding="utf-8") as stream:
                loaded = json.load(stream)
        except json.JSONDecodeError as exc:
            logger.warning(
                "Unable to parse %s: %s. Falling back to bundled config.", target_path, exc
            )
        except OSError as exc:
            logger.warning(
                "Unable to read %s: %s. Falling back to bundled config.", target_path, exc
            )
        else:
            if isinstance(loaded, dict):
                payload = loaded
            else:
                logger.warning(
                    "Config %s is not a JSON object. Falling back to bundled config.", target_path
                )
    elif config_path is not None:
        logger.warning("Model config not found at %s; using bundled config.", config_path)

    return payload


def _option_flag(factor: str) -> str:
    return "--" + factor.replace("_", "-")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Project HCC survival with and without adjuvant TACE."
    )
    factors = parser.add_argument_group(
        "patient factors",
        "Provide all eight to project a single patient. "
        "Without them, the example patients (or --cohort) are scored.",
    )
    for factor, options in FACTOR_OPTIONS.items():
        factors.add_argument(
            _option_flag(factor),
            dest=factor,
            choices=options,
            default=None,
            help=f"{factor_label(factor)} ({'/'.join(options)}).",
        )
    parser.add_argument(
        "--cohort",
        type=Path,
        default=None,
        help="CSV/TSV file with one patient per row to score in batch.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help="Directory to store generated figures and tables (default: project root).",
    )
    parser.add_argument(
        "--show-plots",
        action="store_true",
        help="Display matplotlib figures after saving them.",
    )
    parser.add_argument(
        "--model-config",
        type=Path,
        default=DEFAULT_MODEL_CONFIG,
        help="Path to JSON file containing factor weights (default: %(default)s).",
    )
    parser.add_argument(
        "--language",
        choices=SUPPORTED_LANGUAGES,
        default=DEFAULT_LANGUAGE,
        help="Language of the projection report (default: %(default)s).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging output.",
    )
    parser.add_argument(
        "--log-timestamps",
        action="store_true",
        help="Include timestamps in log output (disabled by default for reproducible logs).",
    )
    return parser.parse_args(argv)


def patient_from_args(args: argparse.Namespace) -> dict[str, str]:
    """Collect the factor options that were given on the command line."""

    return {
        factor: getattr(args, factor)
        for factor in FACTOR_OPTIONS
        if getattr(args, factor, None) is not None
    }


def log_projection(
    result: ProjectionResult, language: str = DEFAULT_LANGUAGE, name: str | None = None
) -> None:
    """Write a projection to the log in the requested language."""

    def t(key: str) -> str:
        return translate(key, language)

    logger.info("")
    if name:
        logger.info("%s", name)
    logger.info(
        "  %s: %.2f | %s: %.3f", t("risk_score"), result.risk_score, t("tace_effect"), result.tace_effect
    )
    for key, estimate in (("with_tace", result.with_tace), ("without_tace", result.without_tace)):
        logger.info(
            "  %-18s %s %.1f | %s %.1f%% | %s %.1f%%",
            t(key) + ":",
            t("survival_time"),
            estimate.survival_time,
            t("survival_3yr"),
            estimate.survival_3yr,
            t("survival_5yr"),
            estimate.survival_5yr,
        )
    formatted = result.net_benefit.formatted()
    logger.info(
        "  %-18s %s %s | %s %s%% | %s %s%%",
        t("net_benefit") + ":",
        t("survival_time"),
        formatted["survival_time"],
        t("survival_3yr"),
        formatted["survival_3yr"],
        t("survival_5yr"),
        formatted["survival_5yr"],
    )


def _patient_name(patient: Mapping[str, Any], index: int) -> str:
    for column in ID_COLUMNS:
        value = patient.get(column)
        if value:
            return str(value)
    return f"Patient {index + 1}"


def score_patients(
    model: TaceSurvivalModel, patients: Sequence[Mapping[str, Any]]
) -> pd.DataFrame:
    """
    Project every patient and collect the results in a dataframe.

    Parameters
    ----------
    model : TaceSurvivalModel
        Initialized projection model.
    patients : Sequence[Mapping[str, Any]]
        Patient records. Factor keys may use snake_case or the web form's
        camelCase names; ``name``/``patient_id`` label the row.

    Returns
    -------
    pd.DataFrame
        One row per patient with columns ``Patient``, ``missing_factors``,
        ``risk_score``, ``tace_effect``, ``survival_time_with_tace``,
        ``survival_3yr_with_tace``, ``survival_5yr_with_tace``, the same
        three for ``without_tace``, and the ``net_benefit_*`` deltas with
        their ``*_display`` strings.

    Notes
    -----
    Incomplete or unrecognized factors do not stop scoring; they are ignored
    by the model and counted in ``missing_factors``.
    """
    rows = []
    for index, patient in enumerate(patients):
        normalized = normalize_patient_keys(patient)
        factors = {k: v for k, v in normalized.items() if k not in ID_COLUMNS}
        unknown = model.unrecognized_factors(factors)
        if unknown:
            logger.debug(
                "%s: ignoring unrecognized factors %s",
                _patient_name(normalized, index),
                ", ".join(f"{k}={factors[k]}" for k in unknown),
            )
        result = model.project(factors)
        row: dict[str, Any] = {
            "Patient": _patient_name(normalized, index),
            "missing_factors": len(missing_required_fields(factors)),
        }
        row.update(result.to_record())
        rows.append(row)

    return pd.DataFrame(rows)


def run_example_patients(model: TaceSurvivalModel, language: str = DEFAULT_LANGUAGE) -> pd.DataFrame:
    """Project the illustrative patients and log each result."""

    logger.info("")
    logger.info("=" * 60)
    logger.info("EXAMPLE PATIENTS")
    logger.info("-" * 60)
    for patient in EXAMPLE_PATIENTS:
        factors = {k: v for k, v in patient.items() if k != "name"}
        log_projection(model.project(factors), language, patient["name"])

    return score_patients(model, EXAMPLE_PATIENTS)


def run_sensitivity_analysis(
    model: TaceSurvivalModel, patient: Mapping[str, str]
) -> pd.DataFrame:
    """
    Change one factor at a time and record how the projection moves.

    Every alternative value of every configured factor is substituted into
    ``patient``; deltas are relative to the unchanged patient.
    """
    logger.info("")
    logger.info("=" * 60)
    logger.info("SENSITIVITY ANALYSIS: One factor at a time")
    logger.info("-" * 60)

    baseline = model.project(patient)
    rows = []
    for factor, options in model.factor_options().items():
        for value in options:
            if patient.get(factor) == value:
                continue
            variant = dict(patient)
            variant[factor] = value
            result = model.project(variant)
            delta_time = round_one_decimal(
                result.without_tace.survival_time - baseline.without_tace.survival_time
            )
            delta_benefit = round_one_decimal(
                result.net_benefit.survival_time - baseline.net_benefit.survival_time
            )
            rows.append(
                {
                    "factor": factor,
                    "value": value,
                    "survival_time_without_tace": result.without_tace.survival_time,
                    "survival_time_with_tace": result.with_tace.survival_time,
                    "delta_survival_time_without_tace": delta_time,
                    "delta_net_benefit_survival_time": delta_benefit,
                }
            )
            logger.info(
                "%-24s -> %-7s survival %s mo, net benefit %s mo",
                factor,
                value,
                format_net_benefit(delta_time),
                format_net_benefit(delta_benefit),
            )

    return pd.DataFrame(
        rows,
        columns=[
            "factor",
            "value",
            "survival_time_without_tace",
            "survival_time_with_tace",
            "delta_survival_time_without_tace",
            "delta_net_benefit_survival_time",
        ],
    )


def load_patient_cohort(data_path: Path) -> pd.DataFrame:
    """Load a patient table (CSV, or TSV for .tsv/.txt) with string values."""

    if not data_path.exists():
        logger.warning("Cohort file not found at %s.", data_path)
        return pd.DataFrame()

    sep = "\t" if data_path.suffix.lower() in {".tsv", ".txt"} else ","
    try:
        df = pd.read_csv(data_path, sep=sep, dtype=str)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        logger.warning("Unable to parse cohort file %s: %s", data_path, exc)
        return pd.DataFrame()

    df.columns = [str(column).strip() for column in df.columns]
    return df.rename(columns=FACTOR_ALIASES)


def analyze_cohort(
    model: TaceSurvivalModel, data_path: Path, output_dir: Path, show_plots: bool
) -> list[Path]:
    """Score a cohort file, write the projections table, and plot it."""

    cohort = load_patient_cohort(data_path)
    if cohort.empty:
        logger.warning("Cohort not analyzed (file missing, empty or unparseable).")
        return []

    patients = cohort.to_dict(orient="records")
    results = score_patients(model, patients)

    logger.info("")
    logger.info("=" * 60)
    logger.info("Cohort Projection")
    logger.info("-" * 60)
    logger.info("Patients scored: %d", len(results))
    logger.info("Median risk score: %.2f", results["risk_score"].median())
    logger.info(
        "Median survival: %.1f mo with TACE, %.1f mo without",
        results["survival_time_with_tace"].median(),
        results["survival_time_without_tace"].median(),
    )
    logger.info("Median net benefit: %.1f mo", results["net_benefit_survival_time"].median())

    incomplete = int((results["missing_factors"] > 0).sum())
    if incomplete:
        logger.warning(
            "%d patient(s) had missing factors; their projections ignore those factors.",
            incomplete,
        )

    output_dir.mkdir(parents=True, exist_ok=True)
    table_path = output_dir / COHORT_RESULTS_FILE
    results.to_csv(table_path, index=False)

    return [table_path, plot_patient_projections(results, output_dir, show_plots)]


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)

    logger = setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        include_timestamp=args.log_timestamps,
    )

    logger.info("HCC Adjuvant TACE Survival Calculator")
    logger.info("=" * 60)
    logger.info("Output directory: %s", args.output_dir)

    model_config = load_model_config(args.model_config)
    model = TaceSurvivalModel(model_config)
    logger.info("Model: %s – %s", model.model_id, model.name)

    generated_files: list[Path] = []
    patient = patient_from_args(args)
    if patient:
        missing = missing_required_fields(patient)
        if missing:
            logger.error("%s", translate("missing_fields", args.language))
            logger.error(
                "Missing: %s", ", ".join(_option_flag(factor) for factor in missing)
            )
            return 2
        result = model.project(patient)
        log_projection(result, args.language)
        generated_files.append(plot_survival_curves(result, args.output_dir, args.show_plots))
        sensitivity = run_sensitivity_analysis(model, patient)
    elif args.cohort:
        generated_files.extend(
            analyze_cohort(model, args.cohort, args.output_dir, args.show_plots)
        )
        sensitivity = pd.DataFrame()
    else:
        example_results = run_example_patients(model, args.language)
        generated_files.append(
            plot_patient_projections(example_results, args.output_dir, args.show_plots)
        )
        reference = {k: v for k, v in EXAMPLE_PATIENTS[1].items() if k != "name"}
        sensitivity = run_sensitivity_analysis(model, reference)

    sensitivity_fig = plot_factor_sensitivity(sensitivity, args.output_dir, args.show_plots)
    if sensitivity_fig:
        generated_files.append(sensitivity_fig)

    logger.info("")
    logger.info("Generated files:")
    for path in generated_files:
        logger.info("  - %s", path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
