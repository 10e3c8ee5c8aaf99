import logging
from datetime import datetime, timezone
from typing import Optional

from app.core.config import AnalysisType, get_history_table
from app.core.errors import PersistenceFailedError
from app.schemas.analysis_schemas import AnalysisVerdict
from app.services.normalizer import CANONICAL_SCORE_SCALE, normalize_stored_record
from app.services.supabase_client import get_supabase

logger = logging.getLogger(__name__)


def build_history_row(
    user_id: str,
    analysis_type: AnalysisType,
    input_text: str,
    verdict: AnalysisVerdict,
) -> dict:
    return {
        "user_id": user_id,
        "analysis_type": analysis_type.value,
        "input_text": input_text,
        "is_safe": verdict.is_safe,
        "reasoning": verdict.reasoning,
        "trust_score": verdict.trust_score,
        "score_scale": CANONICAL_SCORE_SCALE,
        "content_type": verdict.content_type.value,
        "extracted_url": verdict.extracted_url,
        "payee_name": verdict.payee_name,
        "vpa": verdict.vpa,
        "amount": verdict.amount,
        "analysis_date": datetime.now(timezone.utc).isoformat(),
    }


def append_analysis(
    user_id: str,
    analysis_type: AnalysisType,
    input_text: str,
    verdict: AnalysisVerdict,
) -> dict:
    """Insert one history row. Rows are never updated or deleted from here."""
    row = build_history_row(user_id, analysis_type, input_text, verdict)
    try:
        get_supabase().table(get_history_table()).insert(row).execute()
    except Exception as exc:
        raise PersistenceFailedError(f"Failed to save {analysis_type.value} result: {exc}") from exc
    return row


def save_analysis_result(
    user_id: Optional[str],
    analysis_type: AnalysisType,
    input_text: str,
    verdict: AnalysisVerdict,
) -> bool:
    """
    Fire-and-forget history write.

    Anonymous requests are not persisted. Failures are logged and swallowed so
    the verdict reaches the user regardless.
    """
    if not user_id:
        return False

    try:
        append_analysis(user_id, analysis_type, input_text, verdict)
    except PersistenceFailedError:
        logger.exception("Failed to save analysis history")
        return False

    return True


def list_history(
    user_id: str,
    analysis_type: AnalysisType,
    limit: int = 20,
    offset: int = 0,
) -> list[dict]:
    response = (
        get_supabase()
        .table(get_history_table())
        .select("*")
        .eq("user_id", user_id)
        .eq("analysis_type", analysis_type.value)
        .order("analysis_date", desc=True)
        .range(offset, offset + limit - 1)
        .execute()
    )
    # rows written before the 0-100 scale are normalized on read until migrated
    rows = []
    for row in response.data or []:
        changes = normalize_stored_record(row)
        rows.append({**row, **changes} if changes else row)
    return rows


def iter_history_rows(analysis_type: AnalysisType, page_size: int = 500):
    table = get_history_table()
    offset = 0
    while True:
        response = (
            get_supabase()
            .table(table)
            .select("*")
            .eq("analysis_type", analysis_type.value)
            .order("id")
            .range(offset, offset + page_size - 1)
            .execute()
        )
        rows = response.data or []
        yield from rows
        if len(rows) < page_size:
            return
        offset += page_size


def update_history_row(row_id, changes: dict):
    get_supabase().table(get_history_table()).update(changes).eq("id", row_id).execute()
