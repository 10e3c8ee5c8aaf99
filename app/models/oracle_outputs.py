"""
Output schemas requested from the reasoning service.

Older prompt revisions answered with ``safe``/``reason`` instead of
``isSafe``/``reasoning``; both spellings are accepted here and reconciled by
the normalizer.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

OUTPUT_SCHEMA_VERSION = "2"


class SafetyOutput(BaseModel):
    model_config = ConfigDict(extra="ignore")

    isSafe: Optional[bool] = None
    safe: Optional[bool] = None
    reasoning: Optional[str] = None
    reason: Optional[str] = None
    trustScore: Optional[float] = None

    @model_validator(mode="after")
    def require_verdict_fields(self):
        if self.isSafe is None and self.safe is None:
            raise ValueError("response is missing 'isSafe'")
        if self.reasoning is None and self.reason is None:
            raise ValueError("response is missing 'reasoning'")
        return self


class WebsiteSafetyOutput(SafetyOutput):
    pass


class PaymentLinkSafetyOutput(SafetyOutput):
    pass


class QrCodeSafetyOutput(SafetyOutput):
    contentType: Optional[str] = None
    extractedUrl: Optional[str] = None
