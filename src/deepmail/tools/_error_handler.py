"""Common error handling for MCP tools."""

import functools
import inspect
import logging
from collections.abc import Callable
from typing import Any

from deepmail.exceptions import (
    ConfigError,
    GenerationFailedError,
    UnknownProviderError,
)

logger = logging.getLogger(__name__)


def _describe_error(func_name: str, exc: Exception) -> str:
    """Turn an exception raised by a tool into a user-facing message."""
    if isinstance(exc, GenerationFailedError):
        return f"Could not generate a reply: {exc}"
    if isinstance(exc, UnknownProviderError):
        return f"Unknown provider: {exc.provider_id}"
    if isinstance(exc, ConfigError):
        return f"Configuration error: {exc}"
    if isinstance(exc, ValueError):
        return f"Invalid input: {exc}"
    logger.error("Unexpected error in tool %s", func_name, exc_info=exc)
    return "An unexpected error occurred. Check the server logs for details."


def handle_tool_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap an MCP tool function so errors come back as messages.

    Works for both plain and async tool functions.
    """
    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> str:
            try:
                result: str = await func(*args, **kwargs)
                return result
            except Exception as e:
                return _describe_error(func.__name__, e)

        return async_wrapper

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> str:
        try:
            result: str = func(*args, **kwargs)
            return result
        except Exception as e:
            return _describe_error(func.__name__, e)

    return wrapper
