"""Auto-reply form state: bounded inputs, the held response, and its actions."""

import asyncio
import logging
from collections.abc import Callable
from types import TracebackType

from deepmail.autoreply.generator import BaseReplyGenerator, generate_with_timeout
from deepmail.autoreply.models import AutoreplyRequest, AutoreplyResponse
from deepmail.defaults import (
    DEFAULT_GENERATION_TIMEOUT,
    EMAIL_CONTENT_MAX_LINES,
    SPECIFICATIONS_MAX_LINES,
)
from deepmail.exceptions import (
    ActionDisabledError,
    GenerationFailedError,
    GenerationInProgressError,
)
from deepmail.text.bounded import BoundedText

logger = logging.getLogger(__name__)


class AutoreplySession:
    """Holds the state of one auto-reply form.

    Both input fields are line-bounded on every edit. At most one generation
    is outstanding at a time, and its result replaces the held response
    wholesale. A failed generation leaves the response empty and the inputs
    untouched. Closing the session cancels an outstanding generation, whose
    result is then discarded.

    Copy and Reset are only available while a response is held; availability
    is computed from the held response on every access.
    """

    def __init__(
        self,
        generator: BaseReplyGenerator,
        timeout: float | None = DEFAULT_GENERATION_TIMEOUT,
    ) -> None:
        """Initialize an empty session.

        Args:
            generator: Service used to generate replies.
            timeout: Seconds to wait for a reply, or None to wait indefinitely.
        """
        self._generator = generator
        self._timeout = timeout
        self.email_content = BoundedText(max_lines=EMAIL_CONTENT_MAX_LINES)
        self.specifications = BoundedText(max_lines=SPECIFICATIONS_MAX_LINES)
        self._generated_text = ""
        self._pending: asyncio.Future[AutoreplyResponse] | None = None
        self._closed = False

    @property
    def generated_text(self) -> str:
        """The held response, or an empty string when there is none."""
        return self._generated_text

    @property
    def is_generating(self) -> bool:
        return self._pending is not None and not self._pending.done()

    @property
    def can_copy(self) -> bool:
        return bool(self._generated_text)

    @property
    def can_reset(self) -> bool:
        return bool(self._generated_text)

    def edit_email_content(self, proposed: str) -> str:
        """Apply an edit to the email content field."""
        return self.email_content.edit(proposed)

    def edit_specifications(self, proposed: str) -> str:
        """Apply an edit to the specifications field."""
        return self.specifications.edit(proposed)

    async def generate(self) -> str:
        """Generate a reply from the current inputs.

        Returns:
            The generated text, which is now the held response.

        Raises:
            GenerationInProgressError: If a generation is already outstanding.
            GenerationFailedError: If the generator failed, timed out, or the
                session was closed while waiting.
            RuntimeError: If the session is closed.
        """
        if self._closed:
            raise RuntimeError("Session is closed")
        if self.is_generating:
            raise GenerationInProgressError()

        request = AutoreplyRequest(
            email_content=self.email_content.content,
            specifications=self.specifications.content,
        )
        task = asyncio.ensure_future(
            generate_with_timeout(self._generator, request, self._timeout)
        )
        self._pending = task

        try:
            response = await task
        except asyncio.CancelledError:
            if not self._closed:
                raise
            logger.info("Reply generation cancelled, session closed")
            raise GenerationFailedError("Generation cancelled") from None
        except GenerationFailedError:
            self._generated_text = ""
            raise
        except Exception as e:
            self._generated_text = ""
            logger.exception("Unexpected error during reply generation")
            raise GenerationFailedError(f"Generation failed: {e}") from e
        finally:
            self._pending = None

        if self._closed:
            raise GenerationFailedError("Generation cancelled")

        self._generated_text = response.generated_text
        return self._generated_text

    def copy(self, clipboard: Callable[[str], None]) -> str:
        """Hand the held response to the clipboard unchanged.

        Args:
            clipboard: Callable that places text on the system clipboard.

        Returns:
            The copied text.

        Raises:
            ActionDisabledError: If no response is held.
        """
        if not self.can_copy:
            raise ActionDisabledError("copy")
        clipboard(self._generated_text)
        logger.debug("Response copied (chars=%d)", len(self._generated_text))
        return self._generated_text

    def reset(self) -> None:
        """Clear both inputs and the held response.

        Raises:
            ActionDisabledError: If no response is held.
        """
        if not self.can_reset:
            raise ActionDisabledError("reset")
        self.email_content.clear()
        self.specifications.clear()
        self._generated_text = ""

    def close(self) -> None:
        """Dismiss the form, cancelling any outstanding generation."""
        self._closed = True
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()

    def __enter__(self) -> "AutoreplySession":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
