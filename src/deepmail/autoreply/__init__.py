"""Auto-reply generation: request contract, generators and form session."""

from deepmail.autoreply.generator import AnthropicReplyGenerator, BaseReplyGenerator
from deepmail.autoreply.models import AutoreplyRequest, AutoreplyResponse
from deepmail.autoreply.session import AutoreplySession

__all__ = [
    "AnthropicReplyGenerator",
    "AutoreplyRequest",
    "AutoreplyResponse",
    "AutoreplySession",
    "BaseReplyGenerator",
]
