"""Wire models for the Gemini generative-language REST API.

Only the fields the client reads are declared; everything else the
provider sends is ignored.
"""

from pydantic import BaseModel, ConfigDict, Field

STOP_FINISH_REASON = "STOP"
GENERATE_CONTENT_METHOD = "generateContent"


class _Wire(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Part(_Wire):
    text: str | None = None


class Content(_Wire):
    parts: list[Part] = Field(default_factory=list)
    role: str | None = None

    def joined_text(self) -> str:
        return "".join(part.text for part in self.parts if part.text)


class Candidate(_Wire):
    content: Content | None = None
    finish_reason: str | None = Field(default=None, alias="finishReason")


class PromptFeedback(_Wire):
    block_reason: str | None = Field(default=None, alias="blockReason")


class ApiError(_Wire):
    message: str = ""
    code: int | str | None = None
    status: str | None = None


class GenerateContentResponse(_Wire):
    """Envelope returned by ``models/{model}:generateContent``."""

    candidates: list[Candidate] = Field(default_factory=list)
    prompt_feedback: PromptFeedback | None = Field(default=None, alias="promptFeedback")
    error: ApiError | None = None


class ModelInfo(_Wire):
    name: str
    display_name: str | None = Field(default=None, alias="displayName")
    description: str | None = None
    supported_generation_methods: list[str] = Field(
        default_factory=list, alias="supportedGenerationMethods"
    )


class ListModelsResponse(_Wire):
    models: list[ModelInfo] = Field(default_factory=list)


def build_generate_request(prompt: str) -> dict:
    """Request body carrying the prompt as a single content part."""
    return {"contents": [{"parts": [{"text": prompt}]}]}


class GeminiModel(BaseModel):
    """A model that supports content generation."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Model id without the 'models/' prefix")
    display_name: str
    description: str | None = None


class ConnectionResult(BaseModel):
    """Outcome of a connection test."""

    model_config = ConfigDict(frozen=True)

    success: bool
    message: str
