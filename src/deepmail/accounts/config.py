"""Manual mail server configuration with ports derived from protocol and SSL."""

import logging
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    computed_field,
    model_validator,
)

from deepmail.exceptions import DerivedFieldError

logger = logging.getLogger(__name__)


class ServerProtocol(str, Enum):
    """Protocol used to read mail from the incoming server."""

    IMAP = "IMAP"
    POP3 = "POP3"
    EXCHANGE = "Exchange"

    @classmethod
    def _missing_(cls, value: object) -> "ServerProtocol | None":
        # Accept "imap", "pop3", "EXCHANGE" and the like
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


class AuthenticationType(str, Enum):
    """How the account authenticates against its servers."""

    PASSWORD = "Password"
    OAUTH = "OAuth"
    API_KEY = "API Key"


class ServerPorts(BaseModel):
    """Incoming and outgoing port pair for a server configuration."""

    model_config = ConfigDict(frozen=True)

    incoming_port: int
    outgoing_port: int


# POP3 and Exchange share the POP3 port numbers
_INCOMING_PORTS: dict[tuple[ServerProtocol, bool], int] = {
    (ServerProtocol.IMAP, True): 993,
    (ServerProtocol.IMAP, False): 143,
    (ServerProtocol.POP3, True): 995,
    (ServerProtocol.POP3, False): 110,
    (ServerProtocol.EXCHANGE, True): 995,
    (ServerProtocol.EXCHANGE, False): 110,
}

# SMTP ports depend on SSL only
_OUTGOING_PORTS: dict[bool, int] = {
    True: 465,
    False: 587,
}


def derive_ports(protocol: ServerProtocol, ssl_enabled: bool) -> ServerPorts:
    """Return the canonical ports for a protocol and SSL setting.

    Args:
        protocol: Incoming server protocol.
        ssl_enabled: Whether SSL is used.

    Returns:
        ServerPorts with the incoming and outgoing port numbers.
    """
    return ServerPorts(
        incoming_port=_INCOMING_PORTS[(ServerProtocol(protocol), bool(ssl_enabled))],
        outgoing_port=_OUTGOING_PORTS[bool(ssl_enabled)],
    )


_DRIVER_FIELDS = frozenset({"protocol", "ssl_enabled"})
_DERIVED_FIELDS = ("incoming_port", "outgoing_port")


class ManualServerConfig(BaseModel):
    """State of the manual email configuration form.

    ``incoming_port`` and ``outgoing_port`` are derived from ``protocol`` and
    ``ssl_enabled`` on every read, so they always match the port table no
    matter how the driver fields were set (assignment, ``model_copy`` or
    validation). Setting a derived port directly raises DerivedFieldError.
    Input data may carry the ports, as ``model_dump()`` output does, as long
    as they agree with the drivers.

    Attributes:
        email_address: Account email address.
        password: Account password.
        authentication: Authentication method.
        protocol: Incoming server protocol (default: IMAP).
        ssl_enabled: Whether SSL is used (default: True).
        incoming_server: Incoming server hostname.
        outgoing_server: Outgoing (SMTP) server hostname.
        same_authentication: Outgoing server reuses the incoming credentials.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    email_address: str = ""
    password: SecretStr = SecretStr("")
    authentication: AuthenticationType = AuthenticationType.PASSWORD
    protocol: ServerProtocol = ServerProtocol.IMAP
    ssl_enabled: bool = True
    incoming_server: str = ""
    outgoing_server: str = ""
    same_authentication: bool = Field(default=True, frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _accept_matching_ports(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not any(name in data for name in _DERIVED_FIELDS):
            return data

        data = dict(data)
        given = {name: data.pop(name) for name in _DERIVED_FIELDS if name in data}
        ssl_enabled = data.get("ssl_enabled", True)
        if not isinstance(ssl_enabled, bool):
            return data
        try:
            expected = derive_ports(data.get("protocol", ServerProtocol.IMAP), ssl_enabled)
        except ValueError:
            # Invalid drivers are reported by field validation
            return data

        for name, value in given.items():
            if value != getattr(expected, name):
                raise ValueError(
                    f"{name} is derived from protocol and SSL settings "
                    f"(expected {getattr(expected, name)}, got {value})"
                )
        return data

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _DERIVED_FIELDS:
            raise DerivedFieldError(name)
        super().__setattr__(name, value)
        if name in _DRIVER_FIELDS:
            logger.debug(
                "Ports re-derived (protocol=%s, ssl=%s): incoming=%d outgoing=%d",
                self.protocol.value,
                self.ssl_enabled,
                self.incoming_port,
                self.outgoing_port,
            )

    @property
    def ports(self) -> ServerPorts:
        """Ports for the current protocol and SSL setting."""
        return derive_ports(self.protocol, self.ssl_enabled)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def incoming_port(self) -> int:
        """Incoming server port."""
        return self.ports.incoming_port

    @computed_field  # type: ignore[prop-decorator]
    @property
    def outgoing_port(self) -> int:
        """Outgoing server port."""
        return self.ports.outgoing_port
