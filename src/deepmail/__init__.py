"""Backend for the DeepMail desktop app: bounded form fields, derived server
settings and auto-reply generation."""

from deepmail.accounts.config import (
    AuthenticationType,
    ManualServerConfig,
    ServerPorts,
    ServerProtocol,
    derive_ports,
)
from deepmail.accounts.providers import EmailProvider, ProviderSelection
from deepmail.autoreply import (
    AnthropicReplyGenerator,
    AutoreplyRequest,
    AutoreplyResponse,
    AutoreplySession,
    BaseReplyGenerator,
)
from deepmail.config import Settings
from deepmail.text.bounded import BoundedText, apply_line_limit, line_count

__version__ = "0.1.0"

__all__ = [
    "AnthropicReplyGenerator",
    "AuthenticationType",
    "AutoreplyRequest",
    "AutoreplyResponse",
    "AutoreplySession",
    "BaseReplyGenerator",
    "BoundedText",
    "EmailProvider",
    "ManualServerConfig",
    "ProviderSelection",
    "ServerPorts",
    "ServerProtocol",
    "Settings",
    "apply_line_limit",
    "derive_ports",
    "line_count",
]
