"""
Interactive Streamlit Demo: HCC Adjuvant TACE Survival Calculator

Collects eight categorical risk factors after hepatectomy for hepatocellular
carcinoma and projects survival with and without adjuvant TACE
(transarterial chemoembolization), together with the net benefit.

License: MIT

⚠️ EDUCATIONAL USE ONLY - NOT FOR CLINICAL DECISION-MAKING ⚠️
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure project root is in path for imports
BASE_DIR = Path(__file__).resolve().parent
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

import streamlit as st
import pandas as pd
import matplotlib.pyplot as plt

from tace_calculator import load_model_config
from models.scoring import missing_required_fields
from models.survival_model import TaceSurvivalModel
from utils.translations import (
    DEFAULT_LANGUAGE,
    LANGUAGE_NAMES,
    SUPPORTED_LANGUAGES,
    factor_label,
    option_label,
    translate,
)
from utils.visualization import (
    build_factor_contributions_figure,
    build_survival_curve_figure,
)

# =============================================================================
# Page Configuration
# =============================================================================

st.set_page_config(
    page_title="HCC TACE Survival Calculator",
    page_icon="🏥",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .main-header {
        font-size: 2.3rem;
        font-weight: 700;
        color: #1E3A5F;
        text-align: center;
        margin-bottom: 0.5rem;
    }
    .sub-header {
        font-size: 1.1rem;
        color: #666;
        text-align: center;
        margin-bottom: 1.5rem;
    }
    .warning-banner {
        background-color: #FFF3CD;
        border-left: 4px solid #FFC107;
        padding: 1rem;
        border-radius: 4px;
        margin-bottom: 1.5rem;
        color: #856404;
    }
    .arm-card {
        border-radius: 12px;
        padding: 1.2rem;
        color: white;
        text-align: center;
        box-shadow: 0 4px 6px rgba(0, 0, 0, 0.1);
    }
    .arm-card h3 { margin: 0 0 0.6rem 0; }
    .arm-card p { margin: 0.2rem 0; font-size: 1.05rem; }
    .arm-with { background: linear-gradient(135deg, #27ae60 0%, #2ecc71 100%); }
    .arm-without { background: linear-gradient(135deg, #c0392b 0%, #e74c3c 100%); }
    .arm-benefit { background: linear-gradient(135deg, #2980b9 0%, #6dd5fa 100%); }
</style>
""", unsafe_allow_html=True)

FACTOR_KEY_PREFIX = "factor_"


@st.cache_resource
def load_model():
    """Load and cache the projection model."""
    return TaceSurvivalModel(load_model_config())


def reset_form():
    for key in list(st.session_state.keys()):
        if key.startswith(FACTOR_KEY_PREFIX):
            del st.session_state[key]
    st.session_state.pop("projection", None)


model = load_model()

# =============================================================================
# Sidebar: Language
# =============================================================================

if "language" not in st.session_state:
    st.session_state["language"] = DEFAULT_LANGUAGE

language = st.sidebar.radio(
    "Language / 语言",
    options=list(SUPPORTED_LANGUAGES),
    format_func=lambda code: LANGUAGE_NAMES[code],
    key="language",
    horizontal=True,
)


def t(key: str) -> str:
    return translate(key, language)


st.markdown(f'<h1 class="main-header">🏥 {t("title")}</h1>', unsafe_allow_html=True)
st.markdown(f'<p class="sub-header">{t("subtitle")}</p>', unsafe_allow_html=True)
st.markdown(f'<div class="warning-banner">⚠️ {t("disclaimer")}</div>', unsafe_allow_html=True)

# =============================================================================
# Patient Form
# =============================================================================

st.header(f"📋 {t('patient_parameters')}")

with st.form("calculator_form"):
    columns = st.columns(2)
    selections: dict[str, str | None] = {}
    for position, (factor, options) in enumerate(model.factor_options().items()):
        with columns[position % 2]:
            selections[factor] = st.radio(
                factor_label(factor, language),
                options=list(options),
                index=None,
                format_func=lambda value: option_label(value, language),
                key=FACTOR_KEY_PREFIX + factor,
                horizontal=True,
            )
    submitted = st.form_submit_button(t("calculate"), type="primary")

st.button(t("reset"), on_click=reset_form)

if submitted:
    patient = {factor: value for factor, value in selections.items() if value is not None}
    if missing_required_fields(patient):
        st.error(t("missing_fields"))
        missing_labels = [factor_label(f, language) for f in missing_required_fields(patient)]
        st.caption(", ".join(missing_labels))
    else:
        with st.spinner(t("calculating")):
            st.session_state["projection"] = (patient, model.project(patient))

# =============================================================================
# Results
# =============================================================================

st.header(f"📊 {t('results')}")

projection = st.session_state.get("projection")
if projection is None:
    st.info(t("no_results"))
    st.stop()

patient, result = projection
net = result.net_benefit.formatted()

col1, col2, col3 = st.columns(3)
cards = (
    (col1, "arm-with", t("with_tace"), (
        f"{result.with_tace.survival_time}",
        f"{result.with_tace.survival_3yr}%",
        f"{result.with_tace.survival_5yr}%",
    )),
    (col2, "arm-without", t("without_tace"), (
        f"{result.without_tace.survival_time}",
        f"{result.without_tace.survival_3yr}%",
        f"{result.without_tace.survival_5yr}%",
    )),
    (col3, "arm-benefit", t("net_benefit"), (
        net["survival_time"],
        net["survival_3yr"] + "%",
        net["survival_5yr"] + "%",
    )),
)
for column, css_class, heading, (months, rate3, rate5) in cards:
    with column:
        st.markdown(f"""
        <div class="arm-card {css_class}">
            <h3>{heading}</h3>
            <p>{t("survival_time")}: <strong>{months}</strong></p>
            <p>{t("survival_3yr")}: <strong>{rate3}</strong></p>
            <p>{t("survival_5yr")}: <strong>{rate5}</strong></p>
        </div>
        """, unsafe_allow_html=True)

st.markdown("<br>", unsafe_allow_html=True)
metric1, metric2 = st.columns(2)
metric1.metric(t("risk_score"), f"{result.risk_score:.2f}")
metric2.metric(t("tace_effect"), f"{result.tace_effect:.3f}")

tab1, tab2 = st.tabs([f"📉 {t('survival_curve')}", f"🧮 {t('factor_contributions')}"])

with tab1:
    fig = build_survival_curve_figure(
        result,
        labels={key: t(key) for key in ("with_tace", "without_tace", "survival_curve")},
    )
    st.pyplot(fig)
    plt.close(fig)

with tab2:
    fig = build_factor_contributions_figure(
        model.factor_contributions(patient),
        factor_labels={factor: factor_label(factor, language) for factor in patient},
        title=t("factor_contributions"),
    )
    st.pyplot(fig)
    plt.close(fig)

# =============================================================================
# Export
# =============================================================================

export_row = {factor_label(f, language): option_label(v, language) for f, v in patient.items()}
export_row.update(result.to_record())
st.download_button(
    t("export"),
    data=pd.DataFrame([export_row]).to_csv(index=False).encode("utf-8-sig"),
    file_name="tace_projection.csv",
    mime="text/csv",
)

st.caption("""
---
**Disclaimer:** This tool is provided for educational purposes only.
It is NOT intended for clinical use or to guide patient care decisions.
""")
