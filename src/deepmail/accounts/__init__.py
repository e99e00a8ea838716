"""Account connection forms: provider choice and manual server configuration."""

from deepmail.accounts.config import (
    AuthenticationType,
    ManualServerConfig,
    ServerPorts,
    ServerProtocol,
    derive_ports,
)
from deepmail.accounts.providers import (
    PROVIDERS,
    EmailProvider,
    ProviderSelection,
    get_provider,
    list_providers,
)

__all__ = [
    "PROVIDERS",
    "AuthenticationType",
    "EmailProvider",
    "ManualServerConfig",
    "ProviderSelection",
    "ServerPorts",
    "ServerProtocol",
    "derive_ports",
    "get_provider",
    "list_providers",
]
