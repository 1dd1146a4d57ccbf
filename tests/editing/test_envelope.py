"""Tests for BOM and line-ending handling."""

from hashline_editor.editing.envelope import (
    BOM,
    CRLF,
    LF,
    FileTextEnvelope,
    canonicalize_file_text,
    detect_line_ending,
    join_content,
    restore_file_text,
    split_content,
)


class TestCanonicalize:
    def test_plain_lf(self):
        env = canonicalize_file_text("a\nb\n")
        assert env == FileTextEnvelope(content="a\nb\n", had_bom=False, line_ending=LF)

    def test_bom_and_crlf(self):
        env = canonicalize_file_text(BOM + "a\r\nb\r\n")
        assert env.content == "a\nb\n"
        assert env.had_bom is True
        assert env.line_ending == CRLF

    def test_bare_cr_is_content(self):
        env = canonicalize_file_text("a\rb\nc\n")
        assert env.content == "a\rb\nc\n"
        assert env.line_ending == LF

    def test_detect_uses_first_newline(self):
        assert detect_line_ending("a\r\nb\nc") == CRLF
        assert detect_line_ending("a\nb\r\nc") == LF
        assert detect_line_ending("no newline") == LF


class TestRestore:
    def test_round_trip_bom_crlf(self):
        raw = BOM + "x\r\ny\r\n"
        env = canonicalize_file_text(raw)
        assert restore_file_text(env.content, env) == raw

    def test_new_lines_get_original_ending(self):
        env = canonicalize_file_text("a\r\nb\r\n")
        assert restore_file_text("a\nnew\nb\n", env) == "a\r\nnew\r\nb\r\n"

    def test_lf_untouched(self):
        env = FileTextEnvelope(content="")
        assert restore_file_text("a\nb", env) == "a\nb"


class TestSplitJoin:
    def test_trailing_newline_flag(self):
        assert split_content("a\nb\n") == (["a", "b"], True)
        assert split_content("a\nb") == (["a", "b"], False)

    def test_empty(self):
        assert split_content("") == ([], False)
        assert join_content([], True) == ""

    def test_single_newline(self):
        assert split_content("\n") == ([""], True)
        assert join_content([""], True) == "\n"

    def test_join_inverse(self):
        for text in ("a", "a\n", "a\n\nb\n", "\n\n"):
            assert join_content(*split_content(text)) == text
