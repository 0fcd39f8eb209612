"""Pytest configuration for test discovery and path setup."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import pytest

# Mark that we're running under pytest to prevent stdout/stderr wrapping issues
os.environ["PYTEST_CURRENT_TEST"] = "true"
os.environ.setdefault("MPLBACKEND", "Agg")

# Add the repository root to sys.path for imports
ROOT_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT_DIR))


@pytest.fixture
def favorable_patient() -> dict[str, str]:
    """Every factor at its lowest-risk value."""
    return {
        "portal_hypertension": "no",
        "macrovascular_invasion": "no",
        "afp_level": "low",
        "microvascular_invasion": "no",
        "child_pugh": "A",
        "resection_margin": "wide",
        "tumor_number": "1",
        "tumor_size": "small",
    }


@pytest.fixture
def unfavorable_patient() -> dict[str, str]:
    """Every factor at its highest-risk value."""
    return {
        "portal_hypertension": "yes",
        "macrovascular_invasion": "yes",
        "afp_level": "high",
        "microvascular_invasion": "yes",
        "child_pugh": "B",
        "resection_margin": "narrow",
        "tumor_number": "3plus",
        "tumor_size": "large",
    }


@pytest.fixture(autouse=True)
def reset_calculator_logger():
    """Drop handlers bound to a previous test's captured stdout."""
    yield
    logger = logging.getLogger("hcc_tace")
    for handler in logger.handlers[:]:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
