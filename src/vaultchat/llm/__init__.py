from .client import DEFAULT_BASE_URL, GeminiClient
from .errors import (
    EmptyResponseError,
    GeminiAPIError,
    GeminiError,
    InvalidApiKeyError,
    ModelNotFoundError,
    QuotaExceededError,
)
from .models import ConnectionResult, GeminiModel, GenerateContentResponse

__all__ = [
    "DEFAULT_BASE_URL",
    "ConnectionResult",
    "EmptyResponseError",
    "GeminiAPIError",
    "GeminiClient",
    "GeminiError",
    "GeminiModel",
    "GenerateContentResponse",
    "InvalidApiKeyError",
    "ModelNotFoundError",
    "QuotaExceededError",
]
