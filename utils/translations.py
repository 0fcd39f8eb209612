"""English and Chinese display text for the calculator front ends."""

from __future__ import annotations

SUPPORTED_LANGUAGES = ("en", "zh")
DEFAULT_LANGUAGE = "en"
LANGUAGE_NAMES = {"en": "English", "zh": "中文"}

TRANSLATIONS: dict[str, dict[str, str]] = {
    "en": {
        "title": "HCC Adjuvant TACE Survival Calculator",
        "subtitle": "Projected survival after hepatectomy with and without adjuvant TACE",
        "disclaimer": (
            "Illustrative fixed-coefficient model for education only. "
            "It is not validated for clinical decision-making."
        ),
        "patient_parameters": "Patient Parameters",
        "calculate": "Calculate",
        "calculating": "Calculating...",
        "reset": "Reset",
        "export": "Export Results",
        "missing_fields": "Please fill in all required fields",
        "no_results": "Please calculate results first",
        "results": "Prediction Results",
        "with_tace": "With TACE",
        "without_tace": "Without TACE",
        "net_benefit": "Net Benefit",
        "survival_time": "Median Survival (months)",
        "survival_3yr": "3-Year Survival",
        "survival_5yr": "5-Year Survival",
        "risk_score": "Risk Score",
        "tace_effect": "TACE Effect",
        "survival_curve": "Projected Survival Curves",
        "factor_contributions": "Risk Factor Contributions",
        "language": "Language",
    },
    "zh": {
        "title": "肝癌术后辅助TACE生存预测计算器",
        "subtitle": "肝切除术后接受与不接受辅助TACE治疗的生存预测",
        "disclaimer": "本工具为固定系数的示例模型，仅供教学使用，不可用于临床决策。",
        "patient_parameters": "患者参数",
        "calculate": "计算",
        "calculating": "计算中...",
        "reset": "重置",
        "export": "导出结果",
        "missing_fields": "请填写所有必需的字段",
        "no_results": "请先计算结果",
        "results": "预测结果",
        "with_tace": "接受TACE治疗",
        "without_tace": "不接受TACE治疗",
        "net_benefit": "净获益",
        "survival_time": "中位生存时间（月）",
        "survival_3yr": "3年生存率",
        "survival_5yr": "5年生存率",
        "risk_score": "风险评分",
        "tace_effect": "TACE效果",
        "survival_curve": "预测生存曲线",
        "factor_contributions": "风险因素贡献",
        "language": "语言",
    },
}

FACTOR_LABELS: dict[str, dict[str, str]] = {
    "en": {
        "portal_hypertension": "Portal Hypertension",
        "macrovascular_invasion": "Macrovascular Invasion",
        "afp_level": "AFP Level",
        "microvascular_invasion": "Microvascular Invasion",
        "child_pugh": "Child-Pugh Class",
        "resection_margin": "Resection Margin",
        "tumor_number": "Tumor Number",
        "tumor_size": "Tumor Size",
    },
    "zh": {
        "portal_hypertension": "门静脉高压",
        "macrovascular_invasion": "大血管侵犯",
        "afp_level": "AFP水平",
        "microvascular_invasion": "微血管侵犯",
        "child_pugh": "Child-Pugh分级",
        "resection_margin": "切缘",
        "tumor_number": "肿瘤数目",
        "tumor_size": "肿瘤大小",
    },
}

OPTION_LABELS: dict[str, dict[str, str]] = {
    "en": {
        "yes": "Yes",
        "no": "No",
        "high": "High",
        "low": "Low",
        "A": "Class A",
        "B": "Class B",
        "narrow": "Narrow",
        "wide": "Wide",
        "1": "1",
        "2": "2",
        "3plus": "≥3",
        "small": "Small",
        "medium": "Medium",
        "large": "Large",
    },
    "zh": {
        "yes": "是",
        "no": "否",
        "high": "高",
        "low": "低",
        "A": "A级",
        "B": "B级",
        "narrow": "窄",
        "wide": "宽",
        "1": "1个",
        "2": "2个",
        "3plus": "≥3个",
        "small": "小",
        "medium": "中",
        "large": "大",
    },
}


def resolve_language(language: str | None) -> str:
    """Return ``language`` if supported, otherwise the default language."""
    if language in SUPPORTED_LANGUAGES:
        return language  # type: ignore[return-value]
    return DEFAULT_LANGUAGE


def translate(key: str, language: str | None = DEFAULT_LANGUAGE) -> str:
    """
    Look up display text.

    Unknown languages fall back to English; unknown keys return the key so
    missing entries show up verbatim.
    """
    lang = resolve_language(language)
    text = TRANSLATIONS[lang].get(key)
    if text is None:
        text = TRANSLATIONS[DEFAULT_LANGUAGE].get(key, key)
    return text


def factor_label(factor: str, language: str | None = DEFAULT_LANGUAGE) -> str:
    lang = resolve_language(language)
    return FACTOR_LABELS[lang].get(factor, factor)


def option_label(value: str, language: str | None = DEFAULT_LANGUAGE) -> str:
    """Display text for a factor value."""
    lang = resolve_language(language)
    return OPTION_LABELS[lang].get(value, value)
