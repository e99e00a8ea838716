"""Prompt templates for reply generation.

Templates use ``{placeholder}`` fields filled in by the generator.
"""

AUTOREPLY_SYSTEM_PROMPT = """You write email replies on behalf of the user.

RULES:
- Write ONLY the reply body. No subject line.
- Follow the user's specifications exactly when they are given.
- Do not invent facts, dates, amounts or commitments that are not in the email \
or the specifications.
- Match the language and level of formality of the original email.
"""

AUTOREPLY_USER_PROMPT = """Write a reply to this email:

EMAIL:
{email_content}

SPECIFICATIONS:
{specifications}

Write the reply body now."""

NO_SPECIFICATIONS = "(none)"
