import pytest

from app.core.config import AnalysisType
from app.core.errors import AnalysisFailedError, EmptyContentError, InvalidUrlError
from app.schemas.analysis_schemas import ContentType
from app.services.analysis_pipeline import AnalysisStage, run_analysis


def test_url_analysis_runs_every_stage(oracle):
    run = run_analysis(AnalysisType.URL, "example.com", oracle=oracle)

    assert run.stages == [
        AnalysisStage.IDLE,
        AnalysisStage.VALIDATING,
        AnalysisStage.CLASSIFYING,
        AnalysisStage.AWAITING_EXTERNAL_SERVICE,
        AnalysisStage.NORMALIZING,
        AnalysisStage.SUCCEEDED,
    ]
    assert run.normalized_input == "https://example.com"
    assert run.external_calls == 1
    assert len(oracle.calls) == 1
    assert "https://example.com" in oracle.calls[0][0]
    assert run.verdict.is_safe is True
    assert run.verdict.trust_score == 92
    assert run.verdict.content_type == ContentType.URL
    assert run.verdict.extracted_url == "https://example.com"


def test_invalid_url_fails_without_external_call(oracle):
    with pytest.raises(InvalidUrlError) as exc_info:
        run_analysis(AnalysisType.URL, "not a url", oracle=oracle)

    run = exc_info.value.run
    assert run.stage == AnalysisStage.FAILED
    assert run.failed_stage == AnalysisStage.VALIDATING
    assert run.external_calls == 0
    assert oracle.calls == []


def test_empty_qr_content_fails_without_external_call(oracle):
    with pytest.raises(EmptyContentError):
        run_analysis(AnalysisType.QR_CODE, "", oracle=oracle)

    assert oracle.calls == []


def test_upi_qr_content_skips_the_reasoning_service(oracle):
    run = run_analysis(
        AnalysisType.QR_CODE,
        "upi://pay?pa=x@bank&pn=Shop&am=50",
        oracle=oracle,
    )

    assert oracle.calls == []
    assert AnalysisStage.AWAITING_EXTERNAL_SERVICE not in run.stages
    assert run.stage == AnalysisStage.SUCCEEDED
    assert run.verdict.is_safe is True
    assert run.verdict.trust_score == 100
    assert run.verdict.vpa == "x@bank"
    assert run.verdict.payee_name == "Shop"
    assert run.verdict.amount == "50"


def test_network_error_is_surfaced_verbatim(make_oracle):
    oracle = make_oracle(error=ConnectionError("Connection reset by peer"))

    with pytest.raises(AnalysisFailedError) as exc_info:
        run_analysis(AnalysisType.PAYMENT, "https://pay.example.com/x", oracle=oracle)

    exc = exc_info.value
    assert exc.message == "Connection reset by peer"
    assert exc.display_message == "Analysis failed: Connection reset by peer"
    assert exc.stage == AnalysisStage.AWAITING_EXTERNAL_SERVICE.value
    assert len(oracle.calls) == 1


def test_oracle_failure_is_not_retried(make_oracle):
    oracle = make_oracle(error=AnalysisFailedError("schema mismatch"))

    with pytest.raises(AnalysisFailedError):
        run_analysis(AnalysisType.URL, "https://example.com", oracle=oracle)

    assert len(oracle.calls) == 1


def test_qr_text_uses_oracle_content_type(make_oracle):
    oracle = make_oracle(
        response={
            "safe": False,
            "reason": "Asks the user to send an OTP.",
            "trustScore": 0,
            "contentType": "Plain Text",
        }
    )

    run = run_analysis(AnalysisType.QR_CODE, "Send your OTP to 99999", oracle=oracle)

    assert run.verdict.is_safe is False
    assert run.verdict.reasoning == "Asks the user to send an OTP."
    assert run.verdict.content_type == ContentType.TEXT
    assert run.verdict.trust_score == 0


def test_default_oracle_is_the_reasoning_client(patched_oracle):
    run_analysis(AnalysisType.URL, "example.com")

    assert len(patched_oracle.calls) == 1


def test_infinite_trust_score_is_clamped(make_oracle):
    oracle = make_oracle(
        response={"isSafe": True, "reasoning": "Looks fine.", "trustScore": float("inf")}
    )

    run = run_analysis(AnalysisType.URL, "example.com", oracle=oracle)

    assert run.stage == AnalysisStage.SUCCEEDED
    assert run.verdict.trust_score == 100
