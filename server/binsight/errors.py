"""分析错误分类 — 每种错误对应稳定的 code 和 HTTP 状态码。"""

from __future__ import annotations

from binsight.schemas import ErrorResponse


class AnalysisError(Exception):
    code: str = "analysis_error"
    status_code: int = 500
    default_message: str = "Unknown error occurred"
    details: str = "Please try again with a clear photo of recyclable materials."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> ErrorResponse:
        return ErrorResponse(error=self.message, code=self.code, details=self.details)


class MissingInput(AnalysisError):
    code = "missing_input"
    status_code = 400
    default_message = "No image data provided"
    details = "Please select an image first."


class UnsupportedImage(AnalysisError):
    code = "unsupported_image"
    status_code = 415
    default_message = "Please select a valid image file"
    details = "Supported uploads are image/* files such as JPEG or PNG."


class ConfigurationError(AnalysisError):
    code = "configuration_error"
    status_code = 500
    default_message = "Analysis service is not configured"
    details = "This is a server problem, not something you can fix. Please try again later."


class RateLimited(AnalysisError):
    code = "rate_limited"
    status_code = 429
    default_message = "Rate limit exceeded. Please try again in a moment."
    details = "Wait a few seconds before resubmitting the photo."


class QuotaExceeded(AnalysisError):
    code = "quota_exceeded"
    status_code = 402
    default_message = "AI service quota exceeded. Please contact support."
    details = "Retrying will not help until the quota is restored."


class InferenceFailure(AnalysisError):
    code = "inference_failure"
    status_code = 502
    default_message = "Failed to analyze image"


class EmptyResponse(AnalysisError):
    code = "empty_response"
    status_code = 502
    default_message = "No response from AI model"
