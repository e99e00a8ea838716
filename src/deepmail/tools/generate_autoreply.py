"""Generate auto-reply MCP tool."""

from deepmail.autoreply.generator import generate_with_timeout
from deepmail.autoreply.models import AutoreplyRequest
from deepmail.service import get_reply_generator, get_settings
from deepmail.tools._app import mcp
from deepmail.tools._error_handler import handle_tool_errors


@mcp.tool
@handle_tool_errors
async def generate_autoreply(email_content: str, specifications: str = "") -> str:
    """Write a reply to an email.

    Args:
        email_content: The email to reply to (at most 50 lines).
        specifications: Optional instructions for the reply, such as tone or
            points to cover (at most 10 lines).

    Returns:
        The generated reply body.
    """
    request = AutoreplyRequest(email_content=email_content, specifications=specifications)
    response = await generate_with_timeout(
        get_reply_generator(),
        request,
        get_settings().autoreply.timeout,
    )
    return response.generated_text
