import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from app.core.config import AnalysisType, Limit, get_global_limit
from app.core.errors import PhishnixError, QrDecodeError, raise_http_error
from app.dependencies.auth import get_current_user_id_optional
from app.schemas.analysis_schemas import (
    AnalyzeResponse,
    PaymentAnalyzeRequest,
    QrAnalyzeRequest,
    UrlAnalyzeRequest,
)
from app.services.analysis_pipeline import run_analysis
from app.services.history_store import save_analysis_result
from app.services.qr_decoder import decode_qr_image

router = APIRouter(prefix="/analyze", tags=["Analyzer"])
logger = logging.getLogger(__name__)


def _analyze(
    analysis_type: AnalysisType,
    raw_input: str,
    user_id: Optional[str],
) -> AnalyzeResponse:
    try:
        run = run_analysis(analysis_type, raw_input)
    except PhishnixError as exc:
        raise_http_error(exc)

    saved = save_analysis_result(
        user_id=user_id,
        analysis_type=analysis_type,
        input_text=run.normalized_input,
        verdict=run.verdict,
    )

    logger.info(
        "analysis complete: submission=%s type=%s content_type=%s is_safe=%s saved=%s",
        run.submission_id,
        analysis_type.value,
        run.verdict.content_type.value,
        run.verdict.is_safe,
        saved,
    )
    return AnalyzeResponse(data=run.verdict, saved=saved)


@router.post("/url", response_model=AnalyzeResponse)
def analyze_url(
    payload: UrlAnalyzeRequest,
    user_id: Optional[str] = Depends(get_current_user_id_optional),
):
    return _analyze(AnalysisType.URL, payload.url, user_id)


@router.post("/payment", response_model=AnalyzeResponse)
def analyze_payment_link(
    payload: PaymentAnalyzeRequest,
    user_id: Optional[str] = Depends(get_current_user_id_optional),
):
    return _analyze(AnalysisType.PAYMENT, payload.payment_link, user_id)


@router.post("/qr", response_model=AnalyzeResponse)
def analyze_qr_content(
    payload: QrAnalyzeRequest,
    user_id: Optional[str] = Depends(get_current_user_id_optional),
):
    return _analyze(AnalysisType.QR_CODE, payload.qr_content, user_id)


@router.post("/qr/image", response_model=AnalyzeResponse)
def analyze_qr_image(
    file: UploadFile = File(...),
    user_id: Optional[str] = Depends(get_current_user_id_optional),
):
    # ---------- FILE VALIDATION ----------
    if not (file.content_type or "").startswith("image/"):
        raise_http_error(
            QrDecodeError("Only image files are supported for QR scan", field="file")
        )

    # ---------- DECODE ----------
    try:
        content = decode_qr_image(file.file.read(get_global_limit(Limit.MAX_QR_IMAGE_BYTES) + 1))
    except PhishnixError as exc:
        raise_http_error(exc)

    return _analyze(AnalysisType.QR_CODE, content, user_id)
