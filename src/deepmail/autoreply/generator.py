"""Reply generators: the boundary to the text generation service."""

import asyncio
import logging
from abc import ABC, abstractmethod

import anthropic
from anthropic import AsyncAnthropic

from deepmail.autoreply.models import AutoreplyRequest, AutoreplyResponse
from deepmail.autoreply.prompts import (
    AUTOREPLY_SYSTEM_PROMPT,
    AUTOREPLY_USER_PROMPT,
    NO_SPECIFICATIONS,
)
from deepmail.defaults import DEFAULT_REPLY_MAX_TOKENS, DEFAULT_REPLY_MODEL
from deepmail.exceptions import GenerationFailedError

logger = logging.getLogger(__name__)


class BaseReplyGenerator(ABC):
    """Abstract interface for services that turn a request into reply text."""

    @abstractmethod
    async def generate(self, request: AutoreplyRequest) -> AutoreplyResponse:
        """Generate a reply for the request.

        Args:
            request: Email content and specifications, already within their
                line limits.

        Returns:
            AutoreplyResponse with the generated text.

        Raises:
            GenerationFailedError: If no reply could be produced.
        """
        ...


class AnthropicReplyGenerator(BaseReplyGenerator):
    """Generates replies with the Anthropic Messages API."""

    def __init__(
        self,
        client: AsyncAnthropic | None = None,
        model: str = DEFAULT_REPLY_MODEL,
        max_tokens: int = DEFAULT_REPLY_MAX_TOKENS,
    ) -> None:
        """Initialize the generator.

        Args:
            client: Configured async Anthropic client. When omitted, one is
                created that reads ANTHROPIC_API_KEY from the environment.
            model: Model ID to use.
            max_tokens: Upper bound on generated tokens.
        """
        self._client = client or AsyncAnthropic()
        self._model = model
        self._max_tokens = max_tokens

    @property
    def model(self) -> str:
        return self._model

    async def generate(self, request: AutoreplyRequest) -> AutoreplyResponse:
        user_text = AUTOREPLY_USER_PROMPT.format(
            email_content=request.email_content,
            specifications=request.specifications.strip() or NO_SPECIFICATIONS,
        )

        logger.info(
            "Generating reply (model=%s, email_chars=%d, spec_chars=%d)",
            self._model,
            len(request.email_content),
            len(request.specifications),
        )

        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                system=AUTOREPLY_SYSTEM_PROMPT,
                messages=[{"role": "user", "content": user_text}],
            )
        except anthropic.APIError as e:
            logger.warning("Reply generation failed: %s", e)
            raise GenerationFailedError(f"Generation service error: {e}") from e

        text = "".join(block.text for block in response.content if block.type == "text")
        if not text.strip():
            raise GenerationFailedError("Generation service returned an empty reply")

        logger.info(
            "Reply generated (input_tokens=%d, output_tokens=%d)",
            response.usage.input_tokens,
            response.usage.output_tokens,
        )
        return AutoreplyResponse(
            generated_text=text,
            model_used=self._model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )


async def generate_with_timeout(
    generator: BaseReplyGenerator,
    request: AutoreplyRequest,
    timeout: float | None,
) -> AutoreplyResponse:
    """Run a generator, turning an overdue call into GenerationFailedError.

    Args:
        generator: Generator to run.
        request: Request to generate a reply for.
        timeout: Seconds to wait, or None to wait indefinitely.

    Raises:
        GenerationFailedError: If generation failed or timed out.
    """
    try:
        return await asyncio.wait_for(generator.generate(request), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Reply generation timed out (timeout=%ss)", timeout)
        raise GenerationFailedError(f"Generation timed out after {timeout:g} seconds") from None
