import pytest

from app.schemas.analysis_schemas import AnalysisVerdict, ContentType
from app.services.normalizer import (
    normalize_content_type,
    normalize_stored_record,
    normalize_trust_score,
    normalize_verdict,
)


@pytest.mark.parametrize(
    "raw, is_safe, expected",
    [
        (1, True, 100),
        (0.42, True, 42),
        (0, False, 0),
        (85, True, 85),
        (42.6, True, 43),
        (150, True, 100),
        (-3, False, 0),
        (None, True, 100),
        (None, False, 0),
        ("0.5", True, 50),
        ("n/a", False, 0),
        (float("nan"), True, 100),
        (float("inf"), True, 100),
        (float("inf"), False, 100),
        (float("-inf"), True, 0),
        ("1e309", True, 100),
    ],
)
def test_normalize_trust_score(raw, is_safe, expected):
    assert normalize_trust_score(raw, is_safe) == expected


def test_legacy_field_names_are_accepted():
    verdict = normalize_verdict({"safe": False, "reason": "Known phishing kit."})

    assert verdict.is_safe is False
    assert verdict.reasoning == "Known phishing kit."
    assert verdict.trust_score == 0


def test_current_field_names_win_over_legacy():
    verdict = normalize_verdict(
        {"isSafe": False, "safe": True, "reasoning": "current", "reason": "legacy"}
    )

    assert verdict.is_safe is False
    assert verdict.reasoning == "current"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("URL", ContentType.URL),
        ("Plain Text", ContentType.TEXT),
        ("website", ContentType.URL),
        ("UpiPayment", ContentType.UPI_PAYMENT),
        ("vCard", ContentType.OTHER),
        ("WiFi credentials", ContentType.OTHER),
        (None, ContentType.OTHER),
    ],
)
def test_content_type_mapping(raw, expected):
    assert normalize_content_type(raw) == expected


def test_default_content_type_used_when_missing():
    verdict = normalize_verdict(
        {"isSafe": True, "reasoning": "ok"},
        default_content_type=ContentType.URL,
    )

    assert verdict.content_type == ContentType.URL


def test_normalizing_a_normalized_verdict_is_stable():
    first = normalize_verdict(
        {
            "isSafe": True,
            "reasoning": "Looks fine.",
            "trustScore": 0.42,
            "contentType": "URL",
            "extractedUrl": "https://example.com",
        }
    )

    assert normalize_verdict(first) == first
    assert normalize_verdict(first.model_dump(by_alias=True)) == first
    assert normalize_verdict(first.model_dump(by_alias=True, mode="json")) == first


def test_canonical_verdict_instance_passes_through(sample_verdict):
    assert normalize_verdict(sample_verdict) is sample_verdict


def test_verdict_serializes_with_camel_case(sample_verdict):
    dumped = sample_verdict.model_dump(by_alias=True, mode="json")

    assert dumped["isSafe"] is False
    assert dumped["trustScore"] == 12
    assert dumped["contentType"] == "URL"
    assert dumped["extractedUrl"] == "https://secure-hdfc-login.example.net"


class TestNormalizeStoredRecord:
    def test_fractional_legacy_score_is_rescaled(self):
        changes = normalize_stored_record(
            {"id": 7, "is_safe": True, "reasoning": "ok", "trust_score": 1, "content_type": "URL"}
        )

        assert changes == {"trust_score": 100, "score_scale": 100}

    def test_canonical_row_is_untouched(self):
        row = {
            "id": 8,
            "is_safe": False,
            "reasoning": "bad",
            "trust_score": 1,
            "score_scale": 100,
            "content_type": "Text",
        }

        assert normalize_stored_record(row) is None

    def test_legacy_columns_are_filled(self):
        changes = normalize_stored_record(
            {"id": 9, "safe": False, "reason": "bad", "content_type": "Plain Text"}
        )

        assert changes["is_safe"] is False
        assert changes["reasoning"] == "bad"
        assert changes["trust_score"] == 0
        assert changes["content_type"] == "Text"

    def test_infinite_legacy_score_is_clamped(self):
        changes = normalize_stored_record(
            {"id": 10, "is_safe": True, "reasoning": "ok", "trust_score": float("inf"), "content_type": "URL"}
        )

        assert changes == {"trust_score": 100, "score_scale": 100}

    def test_null_reasoning_becomes_empty_string(self):
        changes = normalize_stored_record(
            {
                "id": 11,
                "is_safe": True,
                "reasoning": None,
                "trust_score": 80,
                "score_scale": 100,
                "content_type": "URL",
            }
        )

        assert changes == {"reasoning": ""}
