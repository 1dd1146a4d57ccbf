"""Tests for the single-edit primitives."""

import pytest

from hashline_editor.editing.errors import (
    EmptyInsertPayloadError,
    HashMismatchError,
    InvalidAdjacencyError,
    InvalidRangeError,
    TextNotFoundError,
)
from hashline_editor.editing.line_hash import HASHLINE_DICT, compute_line_hash
from hashline_editor.editing.operations import (
    apply_append,
    apply_insert_after,
    apply_insert_before,
    apply_insert_between,
    apply_prepend,
    apply_replace,
    apply_replace_lines,
    apply_set_line,
)


def _tag(lines: list[str], line: int) -> str:
    return f"{line}#{compute_line_hash(line, lines[line - 1])}"


SAMPLE = [
    "def authenticate_user(username, password):",
    "    user = db.find(username)",
    "    return user.check_password(password)",
    "",
    "def helper():",
    "    return 42",
]


class TestSetLine:
    def test_replaces_one_line(self):
        result = apply_set_line(SAMPLE, _tag(SAMPLE, 6), "    return 43")
        assert result[5] == "    return 43"
        assert len(result) == len(SAMPLE)

    def test_input_not_mutated(self):
        before = list(SAMPLE)
        apply_set_line(SAMPLE, _tag(SAMPLE, 6), "    return 43")
        assert SAMPLE == before

    def test_restores_indent(self):
        result = apply_set_line(SAMPLE, _tag(SAMPLE, 6), "return 43")
        assert result[5] == "    return 43"

    def test_empty_list_deletes(self):
        result = apply_set_line(SAMPLE, _tag(SAMPLE, 4), [])
        assert result == SAMPLE[:3] + SAMPLE[4:]

    def test_multi_line_payload(self):
        result = apply_set_line(SAMPLE, _tag(SAMPLE, 6), ["    x = 1", "    return x"])
        assert result[-2:] == ["    x = 1", "    return x"]

    def test_strips_hashline_prefixes(self):
        payload = f"{_tag(SAMPLE, 6)}|    return 7"
        assert apply_set_line(SAMPLE, _tag(SAMPLE, 6), payload)[5] == "    return 7"

    def test_stale_anchor(self):
        actual = compute_line_hash(6, SAMPLE[5])
        wrong = next(h for h in HASHLINE_DICT if h != actual)
        with pytest.raises(HashMismatchError):
            apply_set_line(SAMPLE, f"6#{wrong}", "x")


class TestReplaceLines:
    def test_replaces_range(self):
        result = apply_replace_lines(
            SAMPLE, _tag(SAMPLE, 2), _tag(SAMPLE, 3), ["    return True"],
        )
        assert result[:2] == [SAMPLE[0], "    return True"]
        assert len(result) == len(SAMPLE) - 1

    def test_invalid_range(self):
        with pytest.raises(InvalidRangeError) as exc:
            apply_replace_lines(SAMPLE, _tag(SAMPLE, 3), _tag(SAMPLE, 1), ["x"])
        assert str(exc.value) == "Invalid range: start line 3 cannot be greater than end line 1"

    def test_strips_boundary_echo(self):
        lines = ["a", "b", "c", "d"]
        result = apply_replace_lines(lines, _tag(lines, 2), _tag(lines, 3), ["a", "X", "Y", "d"])
        assert result == ["a", "X", "Y", "d"]

    def test_collapses_rewrapped_line(self):
        lines = ["start()", "value = compute(alpha, beta)", "finish()"]
        result = apply_replace_lines(
            lines, _tag(lines, 1), _tag(lines, 2),
            ["value = compute(alpha,", "beta)"],
        )
        assert result == ["value = compute(alpha, beta)", "finish()"]

    def test_restores_indent_on_every_paired_line(self):
        lines = ["def f():", "    a = 1", "    b = 2"]
        result = apply_replace_lines(lines, _tag(lines, 2), _tag(lines, 3), ["a = 10", "b = 20"])
        assert result == ["def f():", "    a = 10", "    b = 20"]

    def test_paired_indent_keeps_explicit_indent(self):
        lines = ["def f():", "    a = 1", "    b = 2"]
        result = apply_replace_lines(lines, _tag(lines, 2), _tag(lines, 3), ["a = 10", "  b = 20"])
        assert result == ["def f():", "    a = 10", "  b = 20"]

    def test_whitespace_only_change_keeps_original(self):
        lines = ["if ok:", "    a = 1", "    b = 2"]
        result = apply_replace_lines(lines, _tag(lines, 2), _tag(lines, 3), ["a  =  1", "b=2"])
        assert result == lines

    def test_expands_merged_line_with_indent(self):
        lines = ["if ok:", "    foo()", "    bar()"]
        result = apply_replace_lines(lines, _tag(lines, 2), _tag(lines, 3), ["foo() bar()"])
        assert result == lines


class TestInserts:
    def test_insert_after(self):
        lines = ["a", "b"]
        assert apply_insert_after(lines, _tag(lines, 1), ["x"]) == ["a", "x", "b"]

    def test_insert_after_strips_echo(self):
        lines = ["a", "b"]
        assert apply_insert_after(lines, _tag(lines, 1), ["a", "x"]) == ["a", "x", "b"]

    def test_insert_after_echo_only_is_empty(self):
        lines = ["a", "b"]
        with pytest.raises(EmptyInsertPayloadError) as exc:
            apply_insert_after(lines, _tag(lines, 1), ["a"])
        assert "non-empty" in str(exc.value)

    def test_insert_before(self):
        lines = ["a", "b"]
        assert apply_insert_before(lines, _tag(lines, 2), ["x", "b"]) == ["a", "x", "b"]

    def test_insert_before_empty(self):
        lines = ["a", "b"]
        with pytest.raises(EmptyInsertPayloadError):
            apply_insert_before(lines, _tag(lines, 2), [])

    def test_insert_between(self):
        lines = ["a", "b", "c"]
        result = apply_insert_between(lines, _tag(lines, 2), _tag(lines, 3), ["b", "x", "c"])
        assert result == ["a", "b", "x", "c"]

    def test_insert_between_non_adjacent_goes_above_before(self):
        lines = ["a", "b", "c"]
        result = apply_insert_between(lines, _tag(lines, 1), _tag(lines, 3), ["x"])
        assert result == ["a", "b", "x", "c"]

    def test_insert_between_order(self):
        lines = ["a", "b", "c"]
        with pytest.raises(InvalidAdjacencyError):
            apply_insert_between(lines, _tag(lines, 2), _tag(lines, 2), ["x"])


class TestWholeFileOperations:
    def test_replace_all_occurrences(self):
        assert apply_replace("a foo b foo", "foo", "bar") == "a bar b bar"

    def test_replace_list_payload(self):
        assert apply_replace("x\nold\ny", "old", ["n1", "n2"]) == "x\nn1\nn2\ny"

    def test_replace_not_found(self):
        with pytest.raises(TextNotFoundError) as exc:
            apply_replace("abc", "zzz", "x")
        assert "Text not found in file" in str(exc.value)

    def test_append_and_prepend(self):
        assert apply_append(["a"], "b") == ["a", "b"]
        assert apply_prepend(["a"], ["x", "y"]) == ["x", "y", "a"]

    def test_append_to_empty(self):
        assert apply_append([], ["only"]) == ["only"]

    def test_append_requires_payload(self):
        with pytest.raises(EmptyInsertPayloadError):
            apply_append(["a"], [])
