"""Tests for auto-reply request and response models."""

import pytest
from pydantic import ValidationError

from deepmail.autoreply.models import AutoreplyRequest, AutoreplyResponse


class TestAutoreplyRequest:
    def test_minimal_request(self) -> None:
        request = AutoreplyRequest(email_content="Hi, can we meet Friday?")
        assert request.specifications == ""

    def test_email_content_at_limit(self) -> None:
        content = "\n".join(["line"] * 50)
        assert AutoreplyRequest(email_content=content).email_content == content

    def test_email_content_over_limit(self) -> None:
        content = "\n".join(["line"] * 51)
        with pytest.raises(ValidationError, match="email_content must not exceed 50 lines"):
            AutoreplyRequest(email_content=content)

    def test_specifications_over_limit(self) -> None:
        with pytest.raises(ValidationError, match="specifications must not exceed 10 lines"):
            AutoreplyRequest(email_content="Hi", specifications="\n" * 10)

    def test_request_is_immutable(self) -> None:
        request = AutoreplyRequest(email_content="Hi")
        with pytest.raises(ValidationError):
            request.email_content = "Bye"


class TestAutoreplyResponse:
    def test_usage_is_optional(self) -> None:
        response = AutoreplyResponse(generated_text="Thanks!")
        assert response.model_used is None
        assert response.input_tokens is None
        assert response.output_tokens is None
