import logging
import math
from typing import Any, Mapping, Optional

from app.schemas.analysis_schemas import AnalysisVerdict, ContentType

logger = logging.getLogger(__name__)

CANONICAL_SCORE_SCALE = 100

CONTENT_TYPE_SYNONYMS = {
    "url": ContentType.URL,
    "website": ContentType.URL,
    "link": ContentType.URL,
    "web link": ContentType.URL,
    "upipayment": ContentType.UPI_PAYMENT,
    "upi payment": ContentType.UPI_PAYMENT,
    "upi": ContentType.UPI_PAYMENT,
    "text": ContentType.TEXT,
    "plain text": ContentType.TEXT,
    "plaintext": ContentType.TEXT,
    "other": ContentType.OTHER,
}


def _pick(payload: Mapping[str, Any], preferred: str, legacy: str):
    value = payload.get(preferred)
    if value is None:
        value = payload.get(legacy)
    return value


def normalize_trust_score(raw: Any, is_safe: bool) -> int:
    """
    Map an upstream trust score onto the 0-100 integer scale.

    Values in [0, 1] are treated as fractions; anything above passes through.
    A missing or unreadable score falls back to 100 (safe) or 0 (unsafe).
    """
    if raw is None or isinstance(raw, bool):
        return 100 if is_safe else 0

    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 100 if is_safe else 0

    if math.isnan(value):
        return 100 if is_safe else 0

    if math.isinf(value):
        return 100 if value > 0 else 0

    if 0 <= value <= 1:
        value = value * 100

    return int(min(100, max(0, round(value))))


def normalize_content_type(raw: Any) -> ContentType:
    if isinstance(raw, ContentType):
        return raw
    if not raw:
        return ContentType.OTHER

    value = str(raw).strip()
    for content_type in ContentType:
        if value == content_type.value:
            return content_type

    return CONTENT_TYPE_SYNONYMS.get(value.lower(), ContentType.OTHER)


def normalize_verdict(
    payload: Mapping[str, Any] | AnalysisVerdict,
    default_content_type: ContentType = ContentType.OTHER,
) -> AnalysisVerdict:
    """
    Reconcile an upstream response into the canonical AnalysisVerdict.

    A verdict that is already canonical is returned unchanged.
    """
    if isinstance(payload, AnalysisVerdict):
        return payload

    is_safe = bool(_pick(payload, "isSafe", "safe"))
    reasoning = _pick(payload, "reasoning", "reason") or ""
    raw_content_type = payload.get("contentType") or default_content_type

    return AnalysisVerdict(
        is_safe=is_safe,
        reasoning=str(reasoning),
        trust_score=normalize_trust_score(payload.get("trustScore"), is_safe),
        content_type=normalize_content_type(raw_content_type),
        extracted_url=payload.get("extractedUrl") or None,
        payee_name=payload.get("payeeName"),
        vpa=payload.get("vpa"),
        amount=payload.get("amount"),
    )


def normalize_stored_record(row: Mapping[str, Any]) -> Optional[dict]:
    """
    Return the changed columns of a persisted history row, or None when the row
    is already canonical.

    Rows written with ``score_scale == 100`` are canonical and never rescaled.
    """
    is_safe = bool(_pick(row, "is_safe", "safe"))
    changes: dict = {}

    if row.get("is_safe") is None:
        changes["is_safe"] = is_safe

    if row.get("reasoning") is None:
        changes["reasoning"] = row.get("reason") or ""

    stored_score = row.get("trust_score")
    if row.get("score_scale") == CANONICAL_SCORE_SCALE and isinstance(stored_score, int):
        score = stored_score
    else:
        score = normalize_trust_score(stored_score, is_safe)

    if stored_score != score or row.get("score_scale") != CANONICAL_SCORE_SCALE:
        changes["trust_score"] = score
        changes["score_scale"] = CANONICAL_SCORE_SCALE

    content_type = normalize_content_type(row.get("content_type")).value
    if row.get("content_type") != content_type:
        changes["content_type"] = content_type

    if changes:
        logger.debug("history row %s needs normalization: %s", row.get("id"), sorted(changes))
        return changes
    return None
