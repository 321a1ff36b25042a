"""Tests for core.sandbox."""

import subprocess
import tempfile
from unittest.mock import patch, MagicMock

import pytest

from core.sandbox import check_allowed, run_in_sandbox


def _completed(stdout="", stderr="", returncode=0):
    result = MagicMock()
    result.stdout = stdout
    result.stderr = stderr
    result.returncode = returncode
    return result


def test_allowed_command():
    with tempfile.TemporaryDirectory() as tmpdir:
        with patch("subprocess.run", return_value=_completed("gcc 13.2", "", 0)) as run:
            stdout, stderr, rc = run_in_sandbox(["gcc", "--version"], cwd=tmpdir, timeout=5)
    assert rc == 0
    assert stdout == "gcc 13.2"
    assert run.call_args.kwargs["timeout"] == 5


def test_allowed_command_by_path():
    with tempfile.TemporaryDirectory() as tmpdir:
        with patch("subprocess.run", return_value=_completed()):
            _, _, rc = run_in_sandbox(["/usr/bin/cppcheck", "a.c"], cwd=tmpdir, timeout=5)
    assert rc == 0


def test_disallowed_command():
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(ValueError, match="not in allowlist"):
            run_in_sandbox(["rm", "-rf", "/"], cwd=tmpdir, timeout=5)


def test_disallowed_bash():
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(ValueError, match="not in allowlist"):
            run_in_sandbox(["bash", "-c", "echo pwned"], cwd=tmpdir, timeout=5)


def test_invalid_cwd():
    with pytest.raises(ValueError, match="does not exist"):
        run_in_sandbox(["gcc", "--version"], cwd="/nonexistent/path", timeout=5)


def test_empty_command():
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(ValueError, match="non-empty list"):
            run_in_sandbox([], cwd=tmpdir, timeout=5)


def test_timeout():
    with tempfile.TemporaryDirectory() as tmpdir:
        with patch("subprocess.run", side_effect=subprocess.TimeoutExpired("cppcheck", 15)):
            stdout, stderr, rc = run_in_sandbox(["cppcheck", "a.c"], cwd=tmpdir, timeout=15)
    assert rc == -1
    assert stdout == ""
    assert "timed out" in stderr.lower()


def test_command_not_found():
    with tempfile.TemporaryDirectory() as tmpdir:
        with patch("subprocess.run", side_effect=FileNotFoundError):
            stdout, stderr, rc = run_in_sandbox(["clang-tidy", "a.c"], cwd=tmpdir, timeout=15)
    assert rc == -1
    assert "not found" in stderr.lower()


def test_tool_runs_with_c_locale():
    with tempfile.TemporaryDirectory() as tmpdir:
        with patch("subprocess.run", return_value=_completed()) as run:
            run_in_sandbox(["gcc", "-c", "a.c"], cwd=tmpdir, timeout=5)
    kwargs = run.call_args.kwargs
    assert kwargs["env"]["LC_ALL"] == "C"
    assert kwargs["errors"] == "replace"


def test_command_not_executable():
    with tempfile.TemporaryDirectory() as tmpdir:
        with patch("subprocess.run", side_effect=PermissionError):
            stdout, stderr, rc = run_in_sandbox(["cppcheck", "a.c"], cwd=tmpdir, timeout=15)
    assert rc == -1
    assert "not executable" in stderr


def test_check_allowed_uses_basename():
    check_allowed("/opt/gcc-arm/bin/arm-none-eabi-gcc")
    with pytest.raises(ValueError, match="not in allowlist"):
        check_allowed("/usr/bin/python3")
