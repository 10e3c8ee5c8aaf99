from __future__ import annotations

import os
from enum import Enum


class AnalysisType(str, Enum):
    URL = "urlAnalysis"
    PAYMENT = "paymentAnalysis"
    QR_CODE = "qrCodeAnalysis"


class Limit(str, Enum):
    MAX_INPUT_LENGTH = "MAX_INPUT_LENGTH"
    MAX_QR_IMAGE_BYTES = "MAX_QR_IMAGE_BYTES"
    HISTORY_PAGE_MAX = "HISTORY_PAGE_MAX"


GLOBAL_LIMITS: dict[Limit, int] = {
    Limit.MAX_INPUT_LENGTH: 2048,
    Limit.MAX_QR_IMAGE_BYTES: 4 * 1024 * 1024,
    Limit.HISTORY_PAGE_MAX: 100,
}

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_OPENAI_TEMPERATURE = 0.2
DEFAULT_HISTORY_TABLE = "analysis_history"
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:9002",
]


def get_global_limit(limit: Limit | str) -> int:
    key = limit if isinstance(limit, Limit) else Limit(str(limit))
    return GLOBAL_LIMITS[key]


def normalize_analysis_type(raw: AnalysisType | str) -> AnalysisType:
    if isinstance(raw, AnalysisType):
        return raw
    value = str(raw).strip()
    for analysis_type in AnalysisType:
        if value.lower() in {analysis_type.value.lower(), analysis_type.name.lower()}:
            return analysis_type
    raise ValueError(f"Unknown analysis type: {raw}")


def get_openai_model() -> str:
    return os.getenv("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL


def get_openai_temperature() -> float:
    raw = os.getenv("OPENAI_TEMPERATURE")
    if not raw:
        return DEFAULT_OPENAI_TEMPERATURE
    try:
        return float(raw)
    except ValueError:
        return DEFAULT_OPENAI_TEMPERATURE


def get_history_table() -> str:
    return os.getenv("HISTORY_TABLE") or DEFAULT_HISTORY_TABLE


def get_cors_origins() -> list[str]:
    configured = os.getenv("CORS_ORIGINS", "").strip()
    if not configured:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in configured.split(",") if origin.strip()]


def get_log_level() -> str:
    return (os.getenv("LOG_LEVEL") or "INFO").upper()
