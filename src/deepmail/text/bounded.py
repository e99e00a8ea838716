"""Line-bounded text buffers for multi-line form fields.

A bounded field never holds more than ``max_lines`` line-break-delimited
segments. The limit is enforced on every edit, not on submit.
"""

import logging

from pydantic import BaseModel, ConfigDict, Field, model_validator

logger = logging.getLogger(__name__)

LINE_BREAK = "\n"


def line_count(text: str) -> int:
    """Count the line-break-delimited segments of ``text``.

    An empty string has one line, and a string with ``k`` line breaks has
    ``k + 1`` lines, including leading and trailing breaks.
    """
    return text.count(LINE_BREAK) + 1


def apply_line_limit(current: str, proposed: str, max_lines: int) -> str:
    """Return the content a bounded field accepts for a proposed edit.

    Edits within the limit are accepted unchanged, including shrinking edits
    such as deletions. An edit over the limit is cut just before its last line
    break, repeatedly, until it fits. If it still does not fit and there is no
    line break left to cut at, the edit is rejected and ``current`` is kept.

    Args:
        current: Content the field holds before the edit.
        proposed: Content the edit would produce.
        max_lines: Maximum number of lines the field may hold.

    Returns:
        The accepted content.

    Raises:
        ValueError: If max_lines is negative.
    """
    if max_lines < 0:
        raise ValueError("max_lines must not be negative")

    lines = line_count(proposed)
    if lines <= max_lines:
        return proposed

    accepted = proposed
    while lines > max_lines:
        cut = accepted.rfind(LINE_BREAK)
        if cut == -1:
            logger.debug("Edit rejected, no line break to cut at (max_lines=%d)", max_lines)
            return current
        accepted = accepted[:cut]
        lines -= 1

    logger.debug(
        "Edit truncated from %d to %d lines (max_lines=%d)",
        line_count(proposed),
        lines,
        max_lines,
    )
    return accepted


class BoundedText(BaseModel):
    """Content of a multi-line field with a fixed line ceiling.

    Attributes:
        content: Currently accepted text.
        max_lines: Line ceiling, fixed for the lifetime of the field.
    """

    model_config = ConfigDict(validate_assignment=True)

    content: str = ""
    max_lines: int = Field(..., gt=0, frozen=True)

    @model_validator(mode="after")
    def _check_line_limit(self) -> "BoundedText":
        if line_count(self.content) > self.max_lines:
            raise ValueError(
                f"content has {line_count(self.content)} lines, "
                f"the limit is {self.max_lines}"
            )
        return self

    @property
    def lines(self) -> int:
        """Number of lines currently held."""
        return line_count(self.content)

    def edit(self, proposed: str) -> str:
        """Apply an edit to the field and return the accepted content."""
        self.content = apply_line_limit(self.content, proposed, self.max_lines)
        return self.content

    def clear(self) -> None:
        """Reset the field to an empty string."""
        self.content = ""

    def __str__(self) -> str:
        return self.content
