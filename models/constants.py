"""Shared factor tables and defaults for the TACE survival projection."""

from __future__ import annotations

from types import MappingProxyType

RISK_FACTORS = MappingProxyType(
    {
        "portal_hypertension": MappingProxyType({"yes": 0.3, "no": 0.0}),
        "macrovascular_invasion": MappingProxyType({"yes": 0.8, "no": 0.0}),
        "afp_level": MappingProxyType({"high": 0.4, "low": 0.0}),
        "microvascular_invasion": MappingProxyType({"yes": 0.5, "no": 0.0}),
        "child_pugh": MappingProxyType({"B": 0.6, "A": 0.0}),
        "resection_margin": MappingProxyType({"narrow": 0.3, "wide": 0.0}),
        "tumor_number": MappingProxyType({"1": 0.0, "2": 0.2, "3plus": 0.5}),
        "tumor_size": MappingProxyType({"small": 0.0, "medium": 0.3, "large": 0.7}),
    }
)

TACE_EFFECTIVENESS = MappingProxyType(
    {
        "portal_hypertension": MappingProxyType({"yes": 0.15, "no": 0.25}),
        "macrovascular_invasion": MappingProxyType({"yes": 0.1, "no": 0.3}),
        "afp_level": MappingProxyType({"high": 0.15, "low": 0.25}),
        "microvascular_invasion": MappingProxyType({"yes": 0.15, "no": 0.25}),
        "child_pugh": MappingProxyType({"B": 0.1, "A": 0.25}),
        "resection_margin": MappingProxyType({"narrow": 0.2, "wide": 0.3}),
        "tumor_number": MappingProxyType({"1": 0.3, "2": 0.2, "3plus": 0.1}),
        "tumor_size": MappingProxyType({"small": 0.3, "medium": 0.2, "large": 0.1}),
    }
)

# Months of survival for a patient with a zero risk score and no TACE.
BASE_SURVIVAL_MONTHS = 48.0

# Used when no factor of the patient matches the effectiveness table.
DEFAULT_TACE_EFFECT = 0.2

SURVIVAL_HORIZONS_YEARS = (3, 5)

REQUIRED_FIELDS = tuple(RISK_FACTORS)

FACTOR_OPTIONS = {factor: tuple(values) for factor, values in RISK_FACTORS.items()}

# Field names used by the web form.
FACTOR_ALIASES = {
    "portalHypertension": "portal_hypertension",
    "macrovascularInvasion": "macrovascular_invasion",
    "afpLevel": "afp_level",
    "microvascularInvasion": "microvascular_invasion",
    "childPugh": "child_pugh",
    "resectionMargin": "resection_margin",
    "tumorNumber": "tumor_number",
    "tumorSize": "tumor_size",
}
