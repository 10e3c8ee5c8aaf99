import re
from dataclasses import dataclass
from typing import Optional, Type
from urllib.parse import parse_qs, urlparse

from pydantic import BaseModel

from app.core.config import AnalysisType
from app.models.oracle_outputs import (
    PaymentLinkSafetyOutput,
    QrCodeSafetyOutput,
    WebsiteSafetyOutput,
)
from app.schemas.analysis_schemas import AnalysisVerdict, ContentType, UpiPaymentFields
from app.services.prompt_templates import (
    PAYMENT_LINK_SAFETY_PROMPT,
    QR_CONTENT_SAFETY_PROMPT,
    WEBSITE_SAFETY_PROMPT,
    render_prompt,
)

UPI_PAY_PREFIX = "upi://pay"
URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)

UPI_POLICY_REASONING = (
    "This is a UPI payment request. UPI payments still require your PIN to "
    "complete, so the request itself is treated as safe. Before you enter your "
    "PIN, check that the payee name, UPI ID and amount below are what you expect."
)


@dataclass(frozen=True)
class OracleRequest:
    prompt: str
    output_schema: Type[BaseModel]
    default_content_type: ContentType


@dataclass(frozen=True)
class Classification:
    content: str
    content_type: ContentType
    upi_fields: Optional[UpiPaymentFields] = None

    @property
    def is_upi_payment(self) -> bool:
        return self.content_type == ContentType.UPI_PAYMENT


def _first_param(params: dict, key: str) -> Optional[str]:
    values = params.get(key)
    if not values:
        return None
    return values[0]


def parse_upi_uri(content: str) -> UpiPaymentFields:
    """
    Extract ``pa``, ``pn`` and ``am`` from a ``upi://pay`` URI.

    Values are taken verbatim (percent-decoding only); absent keys stay None.
    """
    parsed = urlparse(content)
    params = parse_qs(parsed.query, keep_blank_values=True)
    return UpiPaymentFields(
        vpa=_first_param(params, "pa"),
        payee_name=_first_param(params, "pn"),
        amount=_first_param(params, "am"),
    )


def classify_content(content: str) -> Classification:
    if content.lower().startswith(UPI_PAY_PREFIX):
        return Classification(
            content=content,
            content_type=ContentType.UPI_PAYMENT,
            upi_fields=parse_upi_uri(content),
        )

    if URL_PATTERN.match(content):
        return Classification(content=content, content_type=ContentType.URL)

    return Classification(content=content, content_type=ContentType.TEXT)


def apply_upi_policy(classification: Classification) -> AnalysisVerdict:
    """UPI requests are presumed safe; the extracted fields are for the user to verify."""
    fields = classification.upi_fields or UpiPaymentFields()
    return AnalysisVerdict(
        is_safe=True,
        reasoning=UPI_POLICY_REASONING,
        trust_score=100,
        content_type=ContentType.UPI_PAYMENT,
        payee_name=fields.payee_name,
        vpa=fields.vpa,
        amount=fields.amount,
    )


def build_oracle_request(
    analysis_type: AnalysisType,
    classification: Classification,
) -> OracleRequest:
    if analysis_type == AnalysisType.URL:
        return OracleRequest(
            prompt=render_prompt(WEBSITE_SAFETY_PROMPT, classification.content),
            output_schema=WebsiteSafetyOutput,
            default_content_type=ContentType.URL,
        )

    if analysis_type == AnalysisType.PAYMENT:
        return OracleRequest(
            prompt=render_prompt(PAYMENT_LINK_SAFETY_PROMPT, classification.content),
            output_schema=PaymentLinkSafetyOutput,
            default_content_type=ContentType.URL,
        )

    return OracleRequest(
        prompt=render_prompt(QR_CONTENT_SAFETY_PROMPT, classification.content),
        output_schema=QrCodeSafetyOutput,
        default_content_type=classification.content_type,
    )
