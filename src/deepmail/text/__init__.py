"""Text constraints applied to form fields."""

from deepmail.text.bounded import BoundedText, apply_line_limit, line_count

__all__ = [
    "BoundedText",
    "apply_line_limit",
    "line_count",
]
