from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ContentType(str, Enum):
    URL = "URL"
    UPI_PAYMENT = "UpiPayment"
    TEXT = "Text"
    OTHER = "Other"


class UpiPaymentFields(BaseModel):
    vpa: Optional[str] = None
    payee_name: Optional[str] = None
    amount: Optional[str] = None


class AnalysisVerdict(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    is_safe: bool = Field(..., alias="isSafe")
    reasoning: str
    trust_score: int = Field(..., ge=0, le=100, alias="trustScore")
    content_type: ContentType = Field(ContentType.OTHER, alias="contentType")
    extracted_url: Optional[str] = Field(default=None, alias="extractedUrl")
    payee_name: Optional[str] = Field(default=None, alias="payeeName")
    vpa: Optional[str] = None
    amount: Optional[str] = None


class UrlAnalyzeRequest(BaseModel):
    url: str


class PaymentAnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    payment_link: str = Field(..., alias="paymentLink")


class QrAnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    qr_content: str = Field(..., alias="qrContent")


class AnalyzeResponse(BaseModel):
    data: AnalysisVerdict
    saved: bool = False


class HistoryRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[Union[str, int]] = None
    analysis_type: str
    input_text: Optional[str] = None
    is_safe: bool
    reasoning: str = ""
    trust_score: int
    content_type: str = ContentType.OTHER.value
    extracted_url: Optional[str] = None
    payee_name: Optional[str] = None
    vpa: Optional[str] = None
    amount: Optional[str] = None
    analysis_date: Optional[str] = None


class HistoryResponse(BaseModel):
    analysis_type: str
    limit: int
    offset: int
    history: List[HistoryRecord]


class ProfileUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, max_length=120)
    phone: Optional[str] = Field(default=None, max_length=32)
