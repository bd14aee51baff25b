"""
Analysis API - photo recognition and business advice.

Thin mapping onto the AI client. Failures of the external model come back
as 500 with the upstream message so the client can offer a retry; nothing
is retried here.
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import Field

from catchbook.ai.analysis_schema import FishAnalysis, ReceiptAnalysis
from catchbook.ai.groq_client import AIClient
from catchbook.api.deps import get_ai_client
from catchbook.core.audit import AuditLog
from catchbook.core.config import settings
from catchbook.core.exceptions import AnalysisFailed, BusinessError
from catchbook.schemas.records import CamelModel

router = APIRouter()


class AdviceRequest(CamelModel):
    question: Optional[str] = None
    business_data: Optional[dict] = Field(default=None)


class AdviceResponse(CamelModel):
    advice: str


def _read_image(image: Optional[UploadFile]) -> bytes:
    """Upload contents, or 400 when missing, empty or too large."""
    if image is None:
        raise BusinessError.bad_request("画像ファイルが必要です")
    content = image.file.read(settings.MAX_UPLOAD_BYTES + 1)
    if not content:
        raise BusinessError.bad_request("画像ファイルが必要です")
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise BusinessError.bad_request(
            f"画像ファイルが大きすぎます (max {settings.MAX_UPLOAD_BYTES} bytes)"
        )
    return content


def _mime_type(image: UploadFile) -> str:
    content_type = image.content_type or ""
    return content_type if content_type.startswith("image/") else "image/jpeg"


@router.post("/analyze-fish", response_model=FishAnalysis)
def analyze_fish(
    image: Optional[UploadFile] = File(None),
    ai: AIClient = Depends(get_ai_client),
):
    """Species and estimated weight from a catch photo."""
    content = _read_image(image)
    try:
        result = ai.analyze_fish_image(content, _mime_type(image))
    except AnalysisFailed as e:
        AuditLog.log_analysis("fish", False, details=str(e))
        raise BusinessError.upstream_failure("魚種解析に失敗しました", e)

    AuditLog.log_analysis("fish", True)
    return result


@router.post("/analyze-receipt", response_model=ReceiptAnalysis)
def analyze_receipt(
    image: Optional[UploadFile] = File(None),
    ai: AIClient = Depends(get_ai_client),
):
    """Date, amount, vendor and category from a receipt photo."""
    content = _read_image(image)
    try:
        result = ai.analyze_receipt_image(content, _mime_type(image))
    except AnalysisFailed as e:
        AuditLog.log_analysis("receipt", False, details=str(e))
        raise BusinessError.upstream_failure("レシート解析に失敗しました", e)

    AuditLog.log_analysis("receipt", True)
    return result


@router.post("/business-advice", response_model=AdviceResponse)
def business_advice(
    body: AdviceRequest,
    ai: AIClient = Depends(get_ai_client),
):
    """Free-text advice on the question, given the current business figures."""
    if not body.question or not body.question.strip():
        raise BusinessError.bad_request("質問が必要です")

    try:
        advice = ai.get_business_advice(body.question, body.business_data or {})
    except AnalysisFailed as e:
        AuditLog.log_analysis("advice", False, details=str(e))
        raise BusinessError.upstream_failure("アドバイス生成に失敗しました", e)

    AuditLog.log_analysis("advice", True)
    return AdviceResponse(advice=advice)
