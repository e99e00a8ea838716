"""Shared construction of settings, generators and sessions."""

from functools import lru_cache

from anthropic import AsyncAnthropic

from deepmail.autoreply.generator import AnthropicReplyGenerator, BaseReplyGenerator
from deepmail.autoreply.session import AutoreplySession
from deepmail.config import Settings, get_settings_eager


@lru_cache
def get_settings() -> Settings:
    """Return the settings, loaded once per process.

    Call ``get_settings.cache_clear()`` in tests to reload.

    Raises:
        ConfigError: If the configuration is invalid.
    """
    return get_settings_eager()


def create_reply_generator(settings: Settings | None = None) -> BaseReplyGenerator:
    """Create the reply generator configured in settings."""
    settings = settings or get_settings()
    api_key = settings.anthropic_api_key.get_secret_value() or None
    return AnthropicReplyGenerator(
        AsyncAnthropic(api_key=api_key),
        model=settings.autoreply.model,
        max_tokens=settings.autoreply.max_tokens,
    )


def create_session(
    generator: BaseReplyGenerator | None = None,
    settings: Settings | None = None,
) -> AutoreplySession:
    """Create an empty auto-reply session.

    Args:
        generator: Reply generator to use. Defaults to the configured one.
        settings: Settings to read the timeout from. Defaults to get_settings().
    """
    settings = settings or get_settings()
    return AutoreplySession(
        generator or create_reply_generator(settings),
        timeout=settings.autoreply.timeout,
    )


@lru_cache
def get_reply_generator() -> BaseReplyGenerator:
    """Return the configured reply generator, created once per process."""
    return create_reply_generator()
