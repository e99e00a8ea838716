"""Tests for manual server configuration and port derivation."""

import pytest
from pydantic import SecretStr, ValidationError

from deepmail.accounts.config import (
    AuthenticationType,
    ManualServerConfig,
    ServerPorts,
    ServerProtocol,
    derive_ports,
)
from deepmail.exceptions import DerivedFieldError


class TestDerivePorts:
    @pytest.mark.parametrize(
        ("protocol", "ssl_enabled", "incoming", "outgoing"),
        [
            (ServerProtocol.IMAP, True, 993, 465),
            (ServerProtocol.IMAP, False, 143, 587),
            (ServerProtocol.POP3, True, 995, 465),
            (ServerProtocol.POP3, False, 110, 587),
            (ServerProtocol.EXCHANGE, True, 995, 465),
            (ServerProtocol.EXCHANGE, False, 110, 587),
        ],
    )
    def test_port_table(
        self, protocol: ServerProtocol, ssl_enabled: bool, incoming: int, outgoing: int
    ) -> None:
        assert derive_ports(protocol, ssl_enabled) == ServerPorts(
            incoming_port=incoming, outgoing_port=outgoing
        )

    def test_accepts_protocol_value_string(self) -> None:
        """Plain protocol strings are accepted in place of the enum."""
        assert derive_ports("POP3", True).incoming_port == 995  # type: ignore[arg-type]

    def test_unknown_protocol_raises(self) -> None:
        with pytest.raises(ValueError):
            derive_ports("SMTP", True)  # type: ignore[arg-type]

    def test_ports_are_immutable(self) -> None:
        ports = derive_ports(ServerProtocol.IMAP, True)
        with pytest.raises(ValidationError):
            ports.incoming_port = 1


class TestServerProtocol:
    def test_case_insensitive_lookup(self) -> None:
        assert ServerProtocol("imap") is ServerProtocol.IMAP
        assert ServerProtocol("EXCHANGE") is ServerProtocol.EXCHANGE

    def test_unknown_value(self) -> None:
        with pytest.raises(ValueError):
            ServerProtocol("nntp")

    def test_non_string_value(self) -> None:
        with pytest.raises(ValueError):
            ServerProtocol(993)


class TestManualServerConfig:
    def test_defaults(self) -> None:
        """A new form uses IMAP with SSL and the matching ports."""
        config = ManualServerConfig()
        assert config.protocol == ServerProtocol.IMAP
        assert config.ssl_enabled is True
        assert config.authentication == AuthenticationType.PASSWORD
        assert config.same_authentication is True
        assert config.incoming_port == 993
        assert config.outgoing_port == 465

    def test_ports_derived_at_construction(self) -> None:
        config = ManualServerConfig(protocol=ServerProtocol.POP3, ssl_enabled=False)
        assert config.incoming_port == 110
        assert config.outgoing_port == 587

    def test_toggling_ssl_rederives_both_ports(self) -> None:
        config = ManualServerConfig()
        config.ssl_enabled = False
        assert (config.incoming_port, config.outgoing_port) == (143, 587)
        config.ssl_enabled = True
        assert (config.incoming_port, config.outgoing_port) == (993, 465)

    def test_changing_protocol_rederives_ports(self) -> None:
        config = ManualServerConfig()
        config.protocol = ServerProtocol.EXCHANGE
        assert (config.incoming_port, config.outgoing_port) == (995, 465)

    def test_protocol_assigned_as_string(self) -> None:
        config = ManualServerConfig(ssl_enabled=False)
        config.protocol = "POP3"  # type: ignore[assignment]
        assert config.protocol is ServerProtocol.POP3
        assert config.incoming_port == 110

    def test_invalid_protocol_keeps_previous_ports(self) -> None:
        config = ManualServerConfig()
        with pytest.raises(ValidationError):
            config.protocol = "Gopher"  # type: ignore[assignment]
        assert config.protocol == ServerProtocol.IMAP
        assert config.incoming_port == 993

    @pytest.mark.parametrize("ssl_enabled", [True, False])
    def test_protocol_never_changes_outgoing_port(self, ssl_enabled: bool) -> None:
        config = ManualServerConfig(ssl_enabled=ssl_enabled)
        outgoing = config.outgoing_port
        for protocol in (ServerProtocol.POP3, ServerProtocol.EXCHANGE, ServerProtocol.IMAP):
            config.protocol = protocol
            assert config.outgoing_port == outgoing

    def test_other_fields_do_not_touch_ports(self) -> None:
        config = ManualServerConfig(ssl_enabled=False)
        config.incoming_server = "imap.example.com"
        config.email_address = "user@example.com"
        assert config.ports == ServerPorts(incoming_port=143, outgoing_port=587)

    @pytest.mark.parametrize("field", ["incoming_port", "outgoing_port"])
    def test_setting_derived_port_is_rejected(self, field: str) -> None:
        config = ManualServerConfig()
        with pytest.raises(DerivedFieldError) as exc_info:
            setattr(config, field, 1234)
        assert exc_info.value.field_name == field
        assert config.ports == ServerPorts(incoming_port=993, outgoing_port=465)

    def test_derived_port_rejected_at_construction(self) -> None:
        with pytest.raises(ValidationError):
            ManualServerConfig(incoming_port=1234)  # type: ignore[call-arg]

    def test_matching_ports_accepted_as_input(self) -> None:
        config = ManualServerConfig.model_validate(
            {"protocol": "POP3", "ssl_enabled": False, "incoming_port": 110, "outgoing_port": 587}
        )
        assert config.ports == ServerPorts(incoming_port=110, outgoing_port=587)

    def test_model_copy_update_rederives_ports(self) -> None:
        """Ports follow drivers changed through model_copy, which bypasses assignment."""
        config = ManualServerConfig()
        copy = config.model_copy(update={"protocol": ServerProtocol.POP3, "ssl_enabled": False})

        assert (copy.incoming_port, copy.outgoing_port) == (110, 587)
        assert (config.incoming_port, config.outgoing_port) == (993, 465)

    def test_dump_validates_back(self) -> None:
        config = ManualServerConfig(
            email_address="user@example.com",
            protocol=ServerProtocol.POP3,
            ssl_enabled=False,
            incoming_server="pop.example.com",
        )

        restored = ManualServerConfig.model_validate(config.model_dump())

        assert restored == config
        assert restored.ports == ServerPorts(incoming_port=110, outgoing_port=587)

    def test_dump_with_edited_port_rejected(self) -> None:
        data = ManualServerConfig().model_dump()
        data["outgoing_port"] = 25
        with pytest.raises(ValidationError, match="outgoing_port is derived"):
            ManualServerConfig.model_validate(data)

    def test_same_authentication_is_fixed(self) -> None:
        config = ManualServerConfig()
        with pytest.raises(ValidationError):
            config.same_authentication = False

    def test_password_is_secret(self) -> None:
        config = ManualServerConfig(password=SecretStr("hunter2"))
        assert "hunter2" not in repr(config)
        assert config.password.get_secret_value() == "hunter2"

    def test_dump_includes_derived_ports(self) -> None:
        data = ManualServerConfig(protocol=ServerProtocol.POP3).model_dump()
        assert data["incoming_port"] == 995
        assert data["outgoing_port"] == 465
