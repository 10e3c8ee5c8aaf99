"""
Per-submission analysis chain.

    Idle -> Validating -> Classifying -> AwaitingExternalService -> Normalizing -> Succeeded

Validation and the external call may end the run in Failed. UPI payment
content goes from Classifying straight to Normalizing. Nothing here retries;
a failed submission is final and the caller resubmits to try again.
"""

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Type

from pydantic import BaseModel

from app.core.config import AnalysisType
from app.core.errors import AnalysisFailedError, PhishnixError
from app.schemas.analysis_schemas import AnalysisVerdict, ContentType
from app.services.classifier import (
    Classification,
    apply_upi_policy,
    build_oracle_request,
    classify_content,
)
from app.services.input_validator import normalize_url_input, validate_qr_content
from app.services.normalizer import normalize_verdict
from app.services.reasoning_client import request_structured_verdict

logger = logging.getLogger(__name__)

OracleCall = Callable[[str, Type[BaseModel]], dict]


class AnalysisStage(str, Enum):
    IDLE = "Idle"
    VALIDATING = "Validating"
    CLASSIFYING = "Classifying"
    AWAITING_EXTERNAL_SERVICE = "AwaitingExternalService"
    NORMALIZING = "Normalizing"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


@dataclass
class AnalysisRun:
    analysis_type: AnalysisType
    raw_input: str
    submission_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    stage: AnalysisStage = AnalysisStage.IDLE
    stages: List[AnalysisStage] = field(default_factory=lambda: [AnalysisStage.IDLE])
    normalized_input: Optional[str] = None
    classification: Optional[Classification] = None
    verdict: Optional[AnalysisVerdict] = None
    failed_stage: Optional[AnalysisStage] = None
    external_calls: int = 0

    def advance(self, stage: AnalysisStage):
        logger.debug(
            "analysis %s: %s -> %s",
            self.submission_id,
            self.stage.value,
            stage.value,
        )
        self.stage = stage
        self.stages.append(stage)

    def fail(self):
        self.failed_stage = self.stage
        self.advance(AnalysisStage.FAILED)


def _validate(analysis_type: AnalysisType, raw_input: str) -> str:
    if analysis_type == AnalysisType.URL:
        return normalize_url_input(raw_input, field="url")
    if analysis_type == AnalysisType.PAYMENT:
        return normalize_url_input(raw_input, field="paymentLink")
    return validate_qr_content(raw_input)


def run_analysis(
    analysis_type: AnalysisType,
    raw_input: str,
    oracle: Optional[OracleCall] = None,
) -> AnalysisRun:
    """
    Validate, classify, consult the reasoning service and normalize.

    Raises the PhishnixError subclass of the stage that failed; the run is
    attached to the exception as ``exc.run``.
    """
    oracle = oracle or request_structured_verdict
    run = AnalysisRun(analysis_type=analysis_type, raw_input=raw_input)

    try:
        run.advance(AnalysisStage.VALIDATING)
        run.normalized_input = _validate(analysis_type, raw_input)

        run.advance(AnalysisStage.CLASSIFYING)
        run.classification = classify_content(run.normalized_input)

        if run.classification.is_upi_payment:
            run.advance(AnalysisStage.NORMALIZING)
            run.verdict = apply_upi_policy(run.classification)
        else:
            request = build_oracle_request(analysis_type, run.classification)

            run.advance(AnalysisStage.AWAITING_EXTERNAL_SERVICE)
            run.external_calls += 1
            try:
                payload = oracle(request.prompt, request.output_schema)
            except AnalysisFailedError:
                raise
            except Exception as exc:
                raise AnalysisFailedError(str(exc)) from exc

            run.advance(AnalysisStage.NORMALIZING)
            verdict = normalize_verdict(payload, default_content_type=request.default_content_type)
            if verdict.content_type == ContentType.URL and not verdict.extracted_url:
                if run.classification.content_type == ContentType.URL:
                    verdict = verdict.model_copy(update={"extracted_url": run.classification.content})
            run.verdict = verdict
    except PhishnixError as exc:
        run.fail()
        if isinstance(exc, AnalysisFailedError):
            exc.stage = run.failed_stage.value
        exc.run = run
        logger.info(
            "analysis %s failed at %s: %s",
            run.submission_id,
            run.failed_stage.value,
            exc.code,
        )
        raise

    run.advance(AnalysisStage.SUCCEEDED)
    return run
