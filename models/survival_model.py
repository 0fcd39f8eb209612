"""
Configurable TACE survival model
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from models.constants import (
    BASE_SURVIVAL_MONTHS,
    DEFAULT_TACE_EFFECT,
    RISK_FACTORS,
    TACE_EFFECTIVENESS,
)
from models.scoring import (
    FactorTable,
    ProjectionResult,
    compute_risk_score,
    compute_survival_rate,
    compute_survival_time,
    compute_tace_effect,
    lookup_weight,
    project,
)


def freeze_factor_table(table: Mapping[str, Mapping[str, Any]]) -> FactorTable:
    """Return a read-only copy of a factor table with float weights."""

    return MappingProxyType(
        {
            str(factor): MappingProxyType(
                {str(value): float(weight) for value, weight in weights.items()}
            )
            for factor, weights in table.items()
        }
    )


class TaceSurvivalModel:
    """
    Exponential survival projection with and without adjuvant TACE.

    Coefficients come from a JSON-style configuration so that alternative
    weightings can be explored without touching code. Missing entries fall
    back to the bundled tables.
    """

    def __init__(self, config: dict[str, Any]):
        self.config = config
        self.model_id = config.get("id", "tace_survival")
        self.name = config.get("name", "TACE Survival Projection")
        self.description = config.get("description", "")
        self.citation = config.get("citation", "")
        self.risk_factors = freeze_factor_table(config.get("risk_factors", RISK_FACTORS))
        self.tace_effectiveness = freeze_factor_table(
            config.get("tace_effectiveness", TACE_EFFECTIVENESS)
        )
        self.base_survival_months = float(
            config.get("base_survival_months", BASE_SURVIVAL_MONTHS)
        )
        self.default_tace_effect = float(config.get("default_tace_effect", DEFAULT_TACE_EFFECT))

    def calculate_risk_score(self, patient_data: Mapping[str, str]) -> float:
        """Weighted sum of the recognized risk factors."""
        return compute_risk_score(patient_data, self.risk_factors)

    def calculate_tace_effect(self, patient_data: Mapping[str, str]) -> float:
        """Mean TACE effectiveness over recognized factors."""
        return compute_tace_effect(
            patient_data, self.tace_effectiveness, self.default_tace_effect
        )

    def calculate_survival_time(
        self, risk_score: float, with_tace: bool = False, tace_effect: float = 0.0
    ) -> float:
        return compute_survival_time(
            risk_score, with_tace, tace_effect, base_survival_months=self.base_survival_months
        )

    @staticmethod
    def calculate_survival_rate(survival_time: float, years: float) -> float:
        return compute_survival_rate(survival_time, years)

    def project(self, patient_data: Mapping[str, str]) -> ProjectionResult:
        """
        Project survival time and rates for both treatment arms.

        Parameters
        ----------
        patient_data : Mapping[str, str]
            Factor name to selected value, e.g.::

                {"portal_hypertension": "no", "macrovascular_invasion": "no",
                 "afp_level": "low", "microvascular_invasion": "yes",
                 "child_pugh": "A", "resection_margin": "narrow",
                 "tumor_number": "1", "tumor_size": "medium"}

        Returns
        -------
        ProjectionResult
            Risk score, TACE effect, with/without TACE estimates and the
            net benefit.

        See Also
        --------
        models.scoring.project : The stateless pipeline this delegates to.
        """
        return project(
            patient_data,
            risk_factors=self.risk_factors,
            tace_effectiveness=self.tace_effectiveness,
            base_survival_months=self.base_survival_months,
            default_tace_effect=self.default_tace_effect,
        )

    def factor_contributions(self, patient_data: Mapping[str, str]) -> dict[str, float]:
        """Return each configured factor's risk weight for this patient."""

        contributions = {}
        for factor, weights in self.risk_factors.items():
            weight = lookup_weight(weights, patient_data.get(factor))
            contributions[factor] = 0.0 if weight is None else weight
        return contributions

    def unrecognized_factors(self, patient_data: Mapping[str, str]) -> list[str]:
        """Return keys whose factor or value the risk table does not know."""

        return [
            factor
            for factor, value in patient_data.items()
            if lookup_weight(self.risk_factors.get(factor), value) is None
        ]

    def factor_options(self) -> dict[str, tuple[str, ...]]:
        """Legal values for each configured factor."""
        return {factor: tuple(weights) for factor, weights in self.risk_factors.items()}
