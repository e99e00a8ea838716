"""Request and response models for auto-reply generation."""

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from deepmail.defaults import EMAIL_CONTENT_MAX_LINES, SPECIFICATIONS_MAX_LINES
from deepmail.text.bounded import line_count

_LINE_LIMITS: dict[str, int] = {
    "email_content": EMAIL_CONTENT_MAX_LINES,
    "specifications": SPECIFICATIONS_MAX_LINES,
}


class AutoreplyRequest(BaseModel):
    """Input for generating a reply.

    Attributes:
        email_content: The email being replied to (at most 50 lines).
        specifications: Instructions for the reply (at most 10 lines).
    """

    model_config = ConfigDict(frozen=True)

    email_content: str
    specifications: str = ""

    @field_validator("email_content", "specifications")
    @classmethod
    def _check_line_limit(cls, v: str, info: ValidationInfo) -> str:
        limit = _LINE_LIMITS[info.field_name]
        if line_count(v) > limit:
            raise ValueError(f"{info.field_name} must not exceed {limit} lines")
        return v


class AutoreplyResponse(BaseModel):
    """Generated reply text with usage metadata."""

    generated_text: str
    model_used: str | None = None
    input_tokens: int | None = None
    output_tokens: int | None = None
