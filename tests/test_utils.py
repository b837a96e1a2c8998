"""Unit tests for utility functions (scaffoldkit.utils).

Tests cover:
- run_command (success, failure, timeout, list vs string, cwd, env vars)
- ensure_dir / remove_tree
- matches_pattern
- format_duration
- Rich output helpers (print_success, print_summary_table, etc.)
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from scaffoldkit.utils import (
    console,
    ensure_dir,
    format_duration,
    matches_pattern,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    print_warning,
    remove_tree,
    run_command,
)


# ---------------------------------------------------------------------------
# run_command
# ---------------------------------------------------------------------------


class TestRunCommand:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_successful_command_list(self):
        returncode, stdout, stderr = await run_command(["echo", "hello"])
        assert returncode == 0
        assert stdout == "hello"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_successful_command_string(self):
        returncode, stdout, stderr = await run_command("echo hello")
        assert returncode == 0
        assert stdout == "hello"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failed_command(self):
        returncode, stdout, stderr = await run_command("exit 4")
        assert returncode == 4

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_command_with_cwd(self, tmp_path: Path):
        returncode, stdout, stderr = await run_command("pwd", cwd=tmp_path)
        assert returncode == 0
        assert Path(stdout).resolve() == tmp_path.resolve()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_command_timeout(self):
        returncode, stdout, stderr = await run_command(
            [sys.executable, "-c", "import time; time.sleep(10)"], timeout=0.5
        )
        assert returncode == -1
        assert "timed out" in stderr

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_command_with_env(self):
        returncode, stdout, stderr = await run_command(
            "echo $SCAFFOLDKIT_TEST_VAR", env={"SCAFFOLDKIT_TEST_VAR": "test_value"}
        )
        assert returncode == 0
        assert stdout == "test_value"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_command_returns_stderr(self):
        returncode, stdout, stderr = await run_command("echo error_msg >&2")
        assert stderr == "error_msg"
        assert stdout == ""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_cwd_raises(self, tmp_path: Path):
        with pytest.raises(OSError):
            await run_command("echo hi", cwd=tmp_path / "missing")


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


class TestFileSystemHelpers:
    @pytest.mark.unit
    def test_ensure_dir_creates_nested(self, tmp_path: Path):
        target = tmp_path / "a" / "b"
        result = ensure_dir(target)
        assert target.is_dir()
        assert result == target.resolve()

    @pytest.mark.unit
    def test_ensure_dir_existing_dir_no_error(self, tmp_path: Path):
        assert ensure_dir(tmp_path) == tmp_path.resolve()

    @pytest.mark.unit
    def test_remove_tree(self, tmp_path: Path):
        target = tmp_path / "tree"
        (target / "nested").mkdir(parents=True)
        (target / "nested" / "file.txt").write_text("x", encoding="utf-8")
        remove_tree(target)
        assert not target.exists()

    @pytest.mark.unit
    def test_remove_tree_missing_is_ignored(self, tmp_path: Path):
        remove_tree(tmp_path / "missing")


# ---------------------------------------------------------------------------
# matches_pattern
# ---------------------------------------------------------------------------


class TestMatchesPattern:
    @pytest.mark.unit
    def test_anchored_pattern(self):
        assert matches_pattern("my-app", r"^[a-z][a-z0-9-]*$")
        assert not matches_pattern("My App", r"^[a-z][a-z0-9-]*$")

    @pytest.mark.unit
    def test_unanchored_pattern_searches(self):
        assert matches_pattern("prefix-core-suffix", "core")


# ---------------------------------------------------------------------------
# format_duration
# ---------------------------------------------------------------------------


class TestFormatDuration:
    @pytest.mark.unit
    def test_seconds_only(self):
        assert format_duration(3.7) == "3.7s"

    @pytest.mark.unit
    def test_minutes_and_seconds(self):
        assert format_duration(65.2) == "1m 5s"

    @pytest.mark.unit
    def test_hours_minutes_seconds(self):
        assert format_duration(3661.0) == "1h 1m 1s"

    @pytest.mark.unit
    def test_zero(self):
        assert format_duration(0.0) == "0.0s"

    @pytest.mark.unit
    def test_negative(self):
        assert format_duration(-5.0) == "0.0s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


class TestRichOutputHelpers:
    @pytest.mark.unit
    def test_print_helpers_write_message(self):
        with console.capture() as capture:
            print_success("created")
            print_error("failed")
            print_warning("careful")
            print_info("note")
        output = capture.get()
        for text in ("created", "failed", "careful", "note"):
            assert text in output

    @pytest.mark.unit
    def test_markup_in_messages_is_escaped(self):
        with console.capture() as capture:
            print_error("bad [bold]value[/bold]")
        assert "[bold]value[/bold]" in capture.get()

    @pytest.mark.unit
    def test_print_summary_table(self):
        with console.capture() as capture:
            print_summary_table({"Key1": "Value1", "Key2": "[x]"}, title="Test Summary")
        output = capture.get()
        assert "Value1" in output
        assert "[x]" in output
