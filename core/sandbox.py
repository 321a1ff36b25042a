"""Runs the external C toolchain (compiler, cppcheck, clang-tidy) under an allowlist."""

import os
import subprocess

from config.defaults import DEFAULTS


def check_allowed(executable):
    """Raise ValueError unless the executable's basename is an allowed tool."""
    allowed = DEFAULTS["allowed_commands"]
    if os.path.basename(executable) not in allowed:
        raise ValueError(
            f"Command '{executable}' not in allowlist: {allowed}"
        )


def _tool_env():
    # Diagnostic parsers match the untranslated "error:"/"warning:" keywords.
    env = dict(os.environ)
    env["LC_ALL"] = "C"
    env["LANG"] = "C"
    return env


def run_in_sandbox(command, cwd, timeout):
    """Run one diagnostic tool and capture what it printed.

    Output is decoded leniently: compilers echo source lines back, and a
    stray non-UTF-8 byte in a comment must not lose the whole diagnostic.

    Returns:
        (stdout, stderr, returncode). returncode is -1 when the tool could
        not be started or ran past ``timeout`` seconds; stderr says which.

    Raises:
        ValueError: For an empty command, a tool outside the allowlist,
            or a missing working directory.
    """
    if not command or not isinstance(command, list):
        raise ValueError("Command must be a non-empty list of strings")

    tool = command[0]
    check_allowed(tool)

    workdir = os.path.realpath(cwd)
    if not os.path.isdir(workdir):
        raise ValueError(f"Working directory does not exist: {workdir}")

    try:
        proc = subprocess.run(
            command,
            cwd=workdir,
            env=_tool_env(),
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        return "", f"Command timed out after {timeout}s", -1
    except FileNotFoundError:
        return "", f"Command not found: {tool}", -1
    except PermissionError:
        return "", f"Command not executable: {tool}", -1
    return proc.stdout or "", proc.stderr or "", proc.returncode
