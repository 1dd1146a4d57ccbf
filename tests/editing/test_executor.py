"""Tests for the file-level edit executor."""

import os

import pytest

from hashline_editor.config import Config
from hashline_editor.editing.executor import EditResult, HashlineEditExecutor
from hashline_editor.editing.line_hash import HASHLINE_DICT, compute_line_hash
from hashline_editor.editing.metadata_store import ToolMetadataStore
from hashline_editor.editing.metrics import read_edit_stats


def _tag(line: int, content: str) -> str:
    return f"{line}#{compute_line_hash(line, content)}"


def _wrong_tag(line: int, content: str) -> str:
    actual = compute_line_hash(line, content)
    return f"{line}#{next(h for h in HASHLINE_DICT if h != actual)}"


def _read_bytes(path) -> bytes:
    with open(path, "rb") as f:
        return f.read()


@pytest.fixture
def config():
    return Config({
        "include_listing": True,
        "color_diff": False,
        "metrics_enabled": False,
    })


@pytest.fixture
def executor(config):
    return HashlineEditExecutor(config=config)


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "sample.py"
    path.write_text("a\nb\nc\n", encoding="utf-8")
    return path


class TestSuccessfulEdits:
    def test_set_line_writes_file(self, executor, sample_file):
        result = executor.execute(
            str(sample_file), [{"op": "replace", "pos": _tag(2, "b"), "lines": ["B"]}],
        )
        assert isinstance(result, EditResult)
        assert result.success
        assert sample_file.read_text(encoding="utf-8") == "a\nB\nc\n"
        assert result.output.startswith(f"Updated {sample_file}")
        assert "-b" in result.output.split("\n")
        assert "+B" in result.output.split("\n")
        assert f"{_tag(2, 'B')}|B" in result.output

    def test_counts_in_summary(self, executor, sample_file):
        edit = {"op": "replace", "pos": _tag(1, "a"), "lines": ["A"]}
        result = executor.execute(str(sample_file), [edit, dict(edit)])
        assert result.success
        assert "Applied 2 edit(s): 0 no-op, 1 deduplicated." in result.output

    def test_listing_can_be_disabled(self, sample_file):
        executor = HashlineEditExecutor(config=Config({"include_listing": False}))
        result = executor.execute(
            str(sample_file), [{"op": "replace", "pos": _tag(2, "b"), "lines": ["B"]}],
        )
        assert result.success
        assert "LINE#ID|content" not in result.output

    def test_colored_diff(self, sample_file):
        executor = HashlineEditExecutor(config=Config({"color_diff": True}))
        result = executor.execute(
            str(sample_file), [{"op": "replace", "pos": _tag(2, "b"), "lines": ["B"]}],
        )
        assert "\033[32m+B\033[0m" in result.output

    def test_preserves_bom_and_crlf(self, executor, tmp_path):
        path = tmp_path / "win.txt"
        path.write_bytes(b"\xef\xbb\xbfa\r\nb\r\n")
        result = executor.execute(
            str(path), [{"op": "append", "pos": _tag(1, "a"), "lines": ["x"]}],
        )
        assert result.success
        assert _read_bytes(path) == b"\xef\xbb\xbfa\r\nx\r\nb\r\n"

    def test_canonical_dicts_accepted(self, executor, sample_file):
        result = executor.execute(
            str(sample_file),
            [{"type": "insert_before", "line": _tag(1, "a"), "text": "top"}],
        )
        assert result.success
        assert sample_file.read_text(encoding="utf-8") == "top\na\nb\nc\n"

    def test_metadata(self, executor, sample_file):
        result = executor.execute(
            str(sample_file), [{"op": "replace", "pos": _tag(2, "b"), "lines": ["B"]}],
        )
        meta = result.metadata
        assert meta["filePath"] == str(sample_file)
        assert meta["noopEdits"] == 0
        assert meta["deduplicatedEdits"] == 0
        assert meta["firstChangedLine"] == 2
        assert meta["diff"].startswith(f"--- {sample_file}\n+++ {sample_file}\n")
        assert meta["filediff"]["before"] == "a\nb\nc\n"
        assert meta["filediff"]["after"] == "a\nB\nc\n"
        assert meta["filediff"]["additions"] == 1
        assert meta["filediff"]["deletions"] == 1

    def test_metadata_stored_per_call(self, config, sample_file):
        store = ToolMetadataStore()
        executor = HashlineEditExecutor(config=config, metadata_store=store)
        executor.execute(
            str(sample_file),
            [{"op": "replace", "pos": _tag(2, "b"), "lines": ["B"]}],
            session_id="s1",
            call_id="c1",
        )
        stored = store.consume("s1", "c1")
        assert stored is not None
        assert stored["firstChangedLine"] == 2
        assert store.consume("s1", "c1") is None

    def test_default_store_uses_configured_ttl(self, sample_file):
        executor = HashlineEditExecutor(config=Config({"metadata_ttl_seconds": 7}))
        assert executor.metadata_store.ttl_seconds == 7.0
        executor.execute(
            str(sample_file),
            [{"op": "replace", "pos": _tag(2, "b"), "lines": ["B"]}],
            session_id="s1",
            call_id="c1",
        )
        assert executor.metadata_store.peek("s1", "c1")["noopEdits"] == 0


class TestFileModes:
    def test_create_with_append(self, executor, tmp_path):
        path = tmp_path / "new" / "file.txt"
        result = executor.execute(str(path), [{"op": "append", "lines": ["hello", "world"]}])
        assert result.success
        assert path.read_text(encoding="utf-8") == "hello\nworld"

    def test_missing_file_with_anchor(self, executor, tmp_path):
        path = tmp_path / "missing.txt"
        result = executor.execute(str(path), [{"op": "replace", "pos": "1#ZZ", "lines": ["x"]}])
        assert not result.success
        assert result.output == f"Error: File not found: {path}"
        assert not path.exists()

    def test_missing_file_with_plain_replace(self, executor, tmp_path):
        path = tmp_path / "missing.txt"
        result = executor.execute(
            str(path), [{"type": "replace", "old_text": "a", "new_text": "b"}],
        )
        assert not result.success
        assert result.output == f"Error: File not found: {path}"

    def test_delete(self, executor, sample_file):
        result = executor.execute(str(sample_file), [], delete=True)
        assert result.success
        assert not sample_file.exists()

    def test_delete_missing(self, executor, tmp_path):
        result = executor.execute(str(tmp_path / "nope.txt"), [], delete=True)
        assert not result.success
        assert "File not found" in result.output

    def test_delete_with_edits(self, executor, sample_file):
        result = executor.execute(str(sample_file), [{"op": "append", "lines": ["x"]}], delete=True)
        assert not result.success
        assert result.output.startswith("Error: ")
        assert sample_file.exists()

    def test_delete_with_rename(self, executor, sample_file, tmp_path):
        result = executor.execute(
            str(sample_file), [], delete=True, rename=str(tmp_path / "other.py"),
        )
        assert not result.success
        assert sample_file.exists()

    def test_rename(self, executor, sample_file, tmp_path):
        target = tmp_path / "pkg" / "renamed.py"
        result = executor.execute(
            str(sample_file),
            [{"op": "replace", "pos": _tag(3, "c"), "lines": ["C"]}],
            rename=str(target),
        )
        assert result.success
        assert result.output.startswith(f"Moved {sample_file} to {target}")
        assert not sample_file.exists()
        assert target.read_text(encoding="utf-8") == "a\nb\nC\n"
        assert result.metadata["filePath"] == str(target)

    def test_no_edits(self, executor, sample_file):
        result = executor.execute(str(sample_file), [])
        assert not result.success
        assert "at least one edit" in result.output


class TestErrors:
    def test_hash_mismatch_has_tip(self, executor, sample_file):
        result = executor.execute(
            str(sample_file), [{"op": "replace", "pos": _wrong_tag(2, "b"), "lines": ["B"]}],
        )
        assert not result.success
        assert result.hash_mismatch
        assert result.output.startswith("Error: hash mismatch - Hash mismatch: 1 line has changed")
        assert f">>> {_tag(2, 'b')}|b" in result.output
        assert result.output.rstrip().endswith("or batch related edits in one call.")
        assert sample_file.read_text(encoding="utf-8") == "a\nb\nc\n"

    def test_other_errors_have_no_tip(self, executor, sample_file):
        result = executor.execute(
            str(sample_file), [{"op": "replace", "pos": "9#ZZ", "lines": ["x"]}],
        )
        assert result.output == "Error: Line number 9 out of bounds. File has 3 lines."
        assert not result.hash_mismatch
        assert "Tip:" not in result.output

    def test_stale_anchor_after_previous_edit(self, executor, tmp_path):
        candidates = ["second", "middle", "two", "line two", "b"]
        original = next(
            c for c in candidates if compute_line_hash(2, c) != compute_line_hash(2, "first")
        )
        path = tmp_path / "stale.txt"
        path.write_text(f"first\n{original}\nthird\n", encoding="utf-8")
        anchor = _tag(2, original)

        first = executor.execute(str(path), [{"op": "prepend", "lines": ["header"]}])
        assert first.success

        second = executor.execute(str(path), [{"op": "replace", "pos": anchor, "lines": ["x"]}])
        assert not second.success
        assert second.hash_mismatch
        assert path.read_text(encoding="utf-8") == f"header\nfirst\n{original}\nthird\n"

    def test_unchanged_result_rejected(self, executor, sample_file):
        result = executor.execute(
            str(sample_file), [{"op": "replace", "pos": _tag(2, "b"), "lines": ["b"]}],
        )
        assert not result.success
        assert result.output.startswith(f"Error: No changes made to {sample_file}.")
        assert "1 edit(s) were no-ops" in result.output

    def test_invalid_utf8(self, executor, tmp_path):
        path = tmp_path / "binary.bin"
        path.write_bytes(b"\xff\xfe\x00abc")
        result = executor.execute(str(path), [{"op": "append", "lines": ["x"]}])
        assert not result.success
        assert "not valid UTF-8" in result.output
        assert _read_bytes(path) == b"\xff\xfe\x00abc"

    def test_invalid_edit_entry(self, executor, sample_file):
        result = executor.execute(str(sample_file), [{"op": "explode"}])
        assert not result.success
        assert result.output.startswith("Error: Edit 0:")

    def test_no_temp_files_left(self, executor, sample_file, tmp_path):
        executor.execute(
            str(sample_file), [{"op": "replace", "pos": _tag(2, "b"), "lines": ["B"]}],
        )
        assert sorted(os.listdir(tmp_path)) == ["sample.py"]


class TestMetricsLogging:
    def test_entry_per_call(self, sample_file, tmp_path):
        metrics_dir = str(tmp_path / "metrics")
        executor = HashlineEditExecutor(
            config=Config({"metrics_enabled": True, "metrics_dir": metrics_dir}),
        )
        executor.execute(
            str(sample_file), [{"op": "replace", "pos": _tag(2, "b"), "lines": ["B"]}],
        )
        executor.execute(
            str(sample_file), [{"op": "replace", "pos": _wrong_tag(1, "a"), "lines": ["A"]}],
        )

        stats = read_edit_stats(project_root=str(tmp_path), metrics_dir=metrics_dir)
        assert stats["total_edits"] == 2
        assert stats["success_rate"] == 50.0
        assert stats["hash_mismatch_rate"] == 50.0
        assert stats["operations"] == {"set_line": 100.0}
