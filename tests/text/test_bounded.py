"""Tests for line-bounded text fields."""

import pytest
from pydantic import ValidationError

from deepmail.text.bounded import BoundedText, apply_line_limit, line_count


class TestLineCount:
    def test_empty_string_is_one_line(self) -> None:
        assert line_count("") == 1

    def test_single_line(self) -> None:
        assert line_count("hello") == 1

    def test_counts_breaks_plus_one(self) -> None:
        assert line_count("a\nb\nc") == 3

    def test_trailing_and_leading_breaks_count(self) -> None:
        """Leading and trailing breaks each add a segment."""
        assert line_count("\n") == 2
        assert line_count("\na\n") == 3

    def test_only_line_feed_is_a_break(self) -> None:
        assert line_count("a\rb") == 1
        assert line_count("a\r\nb") == 2


class TestApplyLineLimit:
    def test_within_limit_accepted_unchanged(self) -> None:
        assert apply_line_limit("", "a\nb\nc", 3) == "a\nb\nc"

    def test_shrinking_edit_accepted(self) -> None:
        """Deleting text is always accepted."""
        assert apply_line_limit("a\nb\nc", "a\nb", 3) == "a\nb"

    def test_paste_replace_within_limit_accepted(self) -> None:
        assert apply_line_limit("old text", "new\ntext", 2) == "new\ntext"

    def test_newline_past_limit_is_dropped(self) -> None:
        """Typing a line break on the last allowed line removes the new empty line."""
        assert apply_line_limit("a\nb", "a\nb\n", 2) == "a\nb"

    def test_cut_happens_at_the_end_not_the_insertion_point(self) -> None:
        """An inserted line in the middle pushes the last line out."""
        result = apply_line_limit("a\nc", "a\nb\nc", 2)
        assert result == "a\nb"

    def test_multi_line_paste_cut_back_to_limit(self) -> None:
        # The desktop editor cuts once at the last line break, which can leave
        # a paste over the limit. Cutting repeatedly keeps the field within its
        # limit and makes the result stable under re-application.
        result = apply_line_limit("", "1\n2\n3\n4\n5", 2)
        assert result == "1\n2"
        assert line_count(result) == 2

    def test_result_is_strict_prefix_when_over_limit(self) -> None:
        proposed = "one\ntwo\nthree\nfour"
        result = apply_line_limit("", proposed, 3)
        assert proposed.startswith(result)
        assert len(result) < len(proposed)
        assert line_count(result) < line_count(proposed)

    def test_no_line_break_to_cut_rejects_edit(self) -> None:
        """With a zero-line ceiling nothing fits and nothing can be cut."""
        assert apply_line_limit("keep", "no breaks here", 0) == "keep"

    def test_zero_limit_with_breaks_rejects_edit(self) -> None:
        assert apply_line_limit("keep", "a\nb", 0) == "keep"

    def test_negative_limit_raises(self) -> None:
        with pytest.raises(ValueError, match="must not be negative"):
            apply_line_limit("", "a", -1)

    @pytest.mark.parametrize(
        "proposed",
        ["", "x", "a\nb", "a\nb\nc\nd\ne", "\n\n\n\n", "line\n" * 12],
    )
    def test_reapplying_accepted_result_changes_nothing(self, proposed: str) -> None:
        once = apply_line_limit("", proposed, 3)
        assert apply_line_limit("", once, 3) == once


class TestBoundedText:
    def test_starts_empty(self) -> None:
        field = BoundedText(max_lines=50)
        assert field.content == ""
        assert field.lines == 1

    def test_edit_within_limit(self) -> None:
        field = BoundedText(max_lines=3)
        assert field.edit("a\nb") == "a\nb"
        assert field.content == "a\nb"

    def test_edit_over_limit_truncates(self) -> None:
        field = BoundedText(max_lines=2, content="a\nb")
        assert field.edit("a\nb\n") == "a\nb"
        assert field.content == "a\nb"

    def test_single_line_edit_fits_one_line_field(self) -> None:
        field = BoundedText(max_lines=1, content="first")
        assert field.edit("second") == "second"

    def test_multi_line_edit_cut_to_one_line(self) -> None:
        field = BoundedText(max_lines=1, content="first")
        assert field.edit("a\nb\nc") == "a"

    def test_max_lines_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            BoundedText(max_lines=0)

    def test_content_over_limit_rejected_at_construction(self) -> None:
        with pytest.raises(ValidationError):
            BoundedText(max_lines=2, content="a\nb\nc")

    def test_direct_assignment_over_limit_rejected(self) -> None:
        field = BoundedText(max_lines=2)
        with pytest.raises(ValidationError):
            field.content = "a\nb\nc"
        assert field.content == ""

    def test_max_lines_is_fixed(self) -> None:
        field = BoundedText(max_lines=10)
        with pytest.raises(ValidationError):
            field.max_lines = 20

    def test_clear(self) -> None:
        field = BoundedText(max_lines=5, content="a\nb")
        field.clear()
        assert field.content == ""

    def test_typing_past_fifty_lines_one_newline_at_a_time(self) -> None:
        """Each newline insertion beyond the ceiling is cut back to 50 lines."""
        field = BoundedText(max_lines=50)
        text = ""
        for i in range(52):
            text = field.edit(field.content + ("\n" if i else "") + "x")
            if i >= 49:
                assert field.lines == 50
        assert field.lines == 50
        assert text == "\n".join(["x"] * 50)

        # Further newline inserts keep truncating to 50
        field.edit(field.content + "\n")
        assert field.lines == 50
        field.edit(field.content + "\n")
        assert field.lines == 50
