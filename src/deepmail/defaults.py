"""Default values shared across the backend."""

# Line ceilings for the auto-reply form fields
EMAIL_CONTENT_MAX_LINES = 50
SPECIFICATIONS_MAX_LINES = 10

DEFAULT_REPLY_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_REPLY_MAX_TOKENS = 1024
DEFAULT_GENERATION_TIMEOUT = 60.0  # seconds
