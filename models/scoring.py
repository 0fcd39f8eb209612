"""
Scoring engine for the HCC adjuvant TACE survival projection.

Pure functions only: a patient mapping goes in, numbers come out. Unknown
factors or values are skipped rather than rejected so that a partially
filled form still produces a projection.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass

from models.constants import (
    BASE_SURVIVAL_MONTHS,
    DEFAULT_TACE_EFFECT,
    FACTOR_ALIASES,
    REQUIRED_FIELDS,
    RISK_FACTORS,
    TACE_EFFECTIVENESS,
)

FactorTable = Mapping[str, Mapping[str, float]]


@dataclass(frozen=True)
class SurvivalEstimate:
    """Projected survival for one treatment arm."""

    survival_time: float
    survival_3yr: float
    survival_5yr: float


@dataclass(frozen=True)
class NetBenefit:
    """Treated-minus-untreated differences, each rounded to one decimal."""

    survival_time: float
    survival_3yr: float
    survival_5yr: float

    def formatted(self) -> dict[str, str]:
        """Return the deltas as display strings with an explicit sign."""
        return {
            "survival_time": format_net_benefit(self.survival_time),
            "survival_3yr": format_net_benefit(self.survival_3yr),
            "survival_5yr": format_net_benefit(self.survival_5yr),
        }


@dataclass(frozen=True)
class ProjectionResult:
    """Full projection for one patient: score, effect, both arms, benefit."""

    risk_score: float
    tace_effect: float
    with_tace: SurvivalEstimate
    without_tace: SurvivalEstimate
    net_benefit: NetBenefit

    def to_record(self) -> dict[str, float | str]:
        """Flatten the projection into a single row for tabular output."""
        record: dict[str, float | str] = {
            "risk_score": self.risk_score,
            "tace_effect": self.tace_effect,
        }
        for arm, estimate in (("with_tace", self.with_tace), ("without_tace", self.without_tace)):
            for field, value in asdict(estimate).items():
                record[f"{field}_{arm}"] = value
        for field, value in asdict(self.net_benefit).items():
            record[f"net_benefit_{field}"] = value
        for field, text in self.net_benefit.formatted().items():
            record[f"net_benefit_{field}_display"] = text
        return record


def round_one_decimal(value: float) -> float:
    """
    Round to one decimal place, halves away from zero.

    Python's built-in ``round`` uses banker's rounding (``round(0.25, 1)`` is
    ``0.2``), which would shift displayed survival figures, so the scaled
    value is floored after adding one half instead.

    Examples
    --------
    >>> round_one_decimal(61.25)
    61.3
    >>> round_one_decimal(-0.25)
    -0.3
    >>> round_one_decimal(-0.04)
    0.0
    """
    scaled = math.floor(abs(value) * 10.0 + 0.5)
    # Adding 0.0 turns a negative zero into a positive one.
    return math.copysign(scaled, value) / 10.0 + 0.0


def format_number(value: float) -> str:
    """Render a one-decimal value without a redundant trailing ``.0``."""
    text = f"{value:.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    if text == "-0":
        text = "0"
    return text


def format_net_benefit(delta: float) -> str:
    """
    Render a net-benefit delta with a sign.

    Non-negative deltas (zero included) get a leading ``+``; negative deltas
    keep their native minus sign.

    >>> format_net_benefit(13.2)
    '+13.2'
    >>> format_net_benefit(0.0)
    '+0'
    >>> format_net_benefit(-1.5)
    '-1.5'
    """
    delta = round_one_decimal(delta)
    if delta >= 0:
        return "+" + format_number(delta)
    return format_number(delta)


def normalize_patient_keys(patient: Mapping[str, object]) -> dict[str, str]:
    """Map web-form field names to factor names and stringify the values."""

    normalized: dict[str, str] = {}
    for key, value in patient.items():
        factor = FACTOR_ALIASES.get(str(key), str(key))
        if value is None or (isinstance(value, float) and math.isnan(value)):
            continue
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        text = str(value).strip()
        if text:
            normalized[factor] = text
    return normalized


def missing_required_fields(patient: Mapping[str, object]) -> list[str]:
    """Return the required factors that are absent or blank, in form order."""

    missing = []
    for field in REQUIRED_FIELDS:
        value = patient.get(field)
        if value is None or not str(value).strip():
            missing.append(field)
    return missing


def option_key(value: object) -> str | None:
    """
    Key under which ``value`` is looked up in a factor's weight mapping.

    Integral numbers match their string form (``2`` and ``2.0`` both become
    ``"2"``); ``None`` matches nothing. Containers stringify to text no table
    contains, so they are skipped like any other unknown value.
    """
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def lookup_weight(weights: Mapping[str, float] | None, value: object) -> float | None:
    """Weight of ``value`` in ``weights``, or None when either is unknown."""
    if weights is None:
        return None
    key = option_key(value)
    if key is None or key not in weights:
        return None
    return float(weights[key])


def compute_risk_score(
    patient: Mapping[str, str], risk_factors: FactorTable = RISK_FACTORS
) -> float:
    """
    Sum the risk weights of every recognized factor value.

    Parameters
    ----------
    patient : Mapping[str, str]
        Factor name to selected categorical value.
    risk_factors : FactorTable, optional
        Factor name to {value: weight}. Defaults to ``RISK_FACTORS``.

    Returns
    -------
    float
        Unitless risk score. Higher values indicate worse prognosis.

    Notes
    -----
    Keys absent from the table, or values absent from a factor's mapping,
    contribute nothing. They are never reported as errors.
    """
    score = 0.0
    for factor, value in patient.items():
        weight = lookup_weight(risk_factors.get(factor), value)
        if weight is not None:
            score += weight
    return score


def compute_tace_effect(
    patient: Mapping[str, str],
    tace_effectiveness: FactorTable = TACE_EFFECTIVENESS,
    default_effect: float = DEFAULT_TACE_EFFECT,
) -> float:
    """
    Average the TACE effectiveness weights of the recognized factor values.

    Returns ``default_effect`` (0.2 unless overridden) when no factor of the
    patient is recognized, including for an empty mapping.
    """
    total = 0.0
    matched = 0
    for factor, value in patient.items():
        weight = lookup_weight(tace_effectiveness.get(factor), value)
        if weight is not None:
            total += weight
            matched += 1
    if matched == 0:
        return default_effect
    return total / matched


def compute_survival_time(
    risk_score: float,
    with_tace: bool = False,
    tace_effect: float = 0.0,
    base_survival_months: float = BASE_SURVIVAL_MONTHS,
) -> float:
    """
    Project survival time in months.

    Computes ``base * exp(-risk_score)``, multiplied by ``1 + tace_effect``
    when TACE is given, and rounds the result to one decimal.

    Parameters
    ----------
    risk_score : float
        Output of :func:`compute_risk_score`.
    with_tace : bool, optional
        Whether the treated arm is being projected.
    tace_effect : float, optional
        Output of :func:`compute_tace_effect`. Ignored when ``with_tace`` is
        False.
    base_survival_months : float, optional
        Survival time at a zero risk score (48 months by default).

    Returns
    -------
    float
        Survival time in months, one decimal.

    Examples
    --------
    >>> compute_survival_time(0.0)
    48.0
    >>> compute_survival_time(0.0, with_tace=True, tace_effect=0.275)
    61.2
    """
    survival_time = base_survival_months * math.exp(-risk_score)
    if with_tace:
        survival_time *= 1.0 + tace_effect
    return round_one_decimal(survival_time)


def compute_survival_rate(survival_time: float, years: float) -> float:
    """
    Percentage of patients alive after ``years`` under exponential decay.

    ``rate = 100 * exp(-(years * 12) / survival_time)``, clamped to
    ``[0, 100]`` and rounded to one decimal. A survival time of zero is the
    limit ``exp(-inf)`` and yields ``0.0``.
    """
    if survival_time == 0:
        return 0.0
    exponent = -(years * 12.0) / survival_time
    # exp(x) >= 1 for x >= 0, which clamps to 100 anyway.
    rate = 100.0 * math.exp(min(exponent, 0.0))
    return max(0.0, min(100.0, round_one_decimal(rate)))


def _estimate_arm(survival_time: float) -> SurvivalEstimate:
    return SurvivalEstimate(
        survival_time=survival_time,
        survival_3yr=compute_survival_rate(survival_time, 3),
        survival_5yr=compute_survival_rate(survival_time, 5),
    )


def project(
    patient: Mapping[str, str],
    *,
    risk_factors: FactorTable = RISK_FACTORS,
    tace_effectiveness: FactorTable = TACE_EFFECTIVENESS,
    base_survival_months: float = BASE_SURVIVAL_MONTHS,
    default_tace_effect: float = DEFAULT_TACE_EFFECT,
) -> ProjectionResult:
    """
    Project survival with and without TACE for a single patient.

    Parameters
    ----------
    patient : Mapping[str, str]
        Factor name to selected value. Unknown entries are ignored.
    risk_factors, tace_effectiveness : FactorTable, optional
        Weight tables. Default to the bundled constants.
    base_survival_months, default_tace_effect : float, optional
        Model constants. Default to 48 months and 0.2.

    Returns
    -------
    ProjectionResult
        Risk score, TACE effect, both arms, and the net benefit.

    Examples
    --------
    >>> result = project({"child_pugh": "A", "tumor_size": "small"})
    >>> result.without_tace.survival_time
    48.0
    >>> result.net_benefit.formatted()["survival_time"]
    '+13.2'
    """
    risk_score = compute_risk_score(patient, risk_factors)
    tace_effect = compute_tace_effect(patient, tace_effectiveness, default_tace_effect)

    without_tace = _estimate_arm(
        compute_survival_time(risk_score, False, base_survival_months=base_survival_months)
    )
    with_tace = _estimate_arm(
        compute_survival_time(
            risk_score, True, tace_effect, base_survival_months=base_survival_months
        )
    )

    net_benefit = NetBenefit(
        survival_time=round_one_decimal(with_tace.survival_time - without_tace.survival_time),
        survival_3yr=round_one_decimal(with_tace.survival_3yr - without_tace.survival_3yr),
        survival_5yr=round_one_decimal(with_tace.survival_5yr - without_tace.survival_5yr),
    )
    return ProjectionResult(
        risk_score=risk_score,
        tace_effect=tace_effect,
        with_tace=with_tace,
        without_tace=without_tace,
        net_benefit=net_benefit,
    )
