"""Custom exceptions for deepmail."""


class DeepMailError(Exception):
    """Base exception for deepmail."""


class ConfigError(DeepMailError):
    """Raised when there is a configuration error.

    Carries the file location when the problem comes from a YAML config file.
    """

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        line: int | None = None,
        col: int | None = None,
    ) -> None:
        self.file_path = file_path
        self.line = line
        self.col = col
        full_message = message
        if file_path:
            location = f" in {file_path}"
            if line is not None:
                location += f" at line {line}"
                if col is not None:
                    location += f", column {col}"
            full_message = f"Configuration error{location}: {message}"
        super().__init__(full_message)


class GenerationFailedError(DeepMailError):
    """Raised when the auto-reply generator could not produce a response."""


class GenerationInProgressError(DeepMailError):
    """Raised when a generation is requested while another is still outstanding."""

    def __init__(self) -> None:
        super().__init__("A response is already being generated")


class ActionDisabledError(DeepMailError):
    """Raised when a form action is invoked while it is disabled."""

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(f"Action '{action}' is unavailable until a response is generated")


class DerivedFieldError(DeepMailError):
    """Raised on an attempt to set a field that is derived from other fields."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(
            f"'{field_name}' is derived from protocol and SSL settings and cannot be set"
        )


class UnknownProviderError(DeepMailError):
    """Raised when a requested email provider is not in the catalog."""

    def __init__(self, provider_id: str) -> None:
        self.provider_id = provider_id
        super().__init__(f"Unknown email provider: {provider_id}")
