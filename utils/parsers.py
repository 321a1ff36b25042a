"""Line matchers for compiler and static-analyzer output.

Each matcher understands exactly one tool's text grammar and returns None for
anything else. They track the output formats of gcc/clang, cppcheck and
clang-tidy as of their current releases; they are not general parsers and
may need adjusting when a tool changes its format.
"""

import os
import re
from dataclasses import dataclass


@dataclass(frozen=True)
class ToolDiagnostic:
    path: str
    line: int
    column: int
    severity: str       # raw severity word from the tool
    message: str


# gcc/clang: "file:line:col: error|warning: message"
_COMPILER_RE = re.compile(r"^(.+?):(\d+):(\d+):\s*(?:fatal\s+)?(error|warning):\s*(.+)$")

# cppcheck (legacy template): "[file:line]: (severity) message"
_CPPCHECK_RE = re.compile(r"\[([^:\]]+):(\d+)\]:\s*\((\w+)\)\s*(.+)$")

# clang-tidy: "file:line:col: warning|error: message [check-name]"
_CLANG_TIDY_RE = re.compile(
    r"^(.+?):(\d+):(\d+):\s*(warning|error):\s*(.+?)\s*\[([^\]]+)\]\s*$"
)


def match_compiler_line(line):
    m = _COMPILER_RE.match(line.strip())
    if not m:
        return None
    path, lineno, col, severity, message = m.groups()
    return ToolDiagnostic(path, int(lineno), int(col), severity, message.strip())


def match_cppcheck_line(line):
    m = _CPPCHECK_RE.search(line.strip())
    if not m:
        return None
    path, lineno, severity, message = m.groups()
    return ToolDiagnostic(path, int(lineno), 0, severity, message.strip())


def match_clang_tidy_line(line):
    m = _CLANG_TIDY_RE.match(line.strip())
    if not m:
        return None
    path, lineno, col, severity, message, check = m.groups()
    return ToolDiagnostic(
        path, int(lineno), int(col), severity, f"{message.strip()} [{check}]"
    )


def _parse(output, matcher):
    diagnostics = []
    for line in (output or "").splitlines():
        diag = matcher(line)
        if diag is not None:
            diagnostics.append(diag)
    return diagnostics


def parse_compiler_output(output):
    """Return ToolDiagnostics for every gcc/clang error or warning line."""
    return _parse(output, match_compiler_line)


def parse_cppcheck_output(output):
    return _parse(output, match_cppcheck_line)


def parse_clang_tidy_output(output):
    return _parse(output, match_clang_tidy_line)


def resolve_file(reported_path, files):
    """Map a tool-reported path back to one of the analysed files.

    An exact basename match is preferred, then basename containment in
    either direction. When several files qualify, the first one in ``files``
    wins. Returns None when nothing matches.
    """
    name = os.path.basename(reported_path)
    if not name:
        return None
    for f in files:
        if os.path.basename(f) == name:
            return f
    for f in files:
        if name in f or os.path.basename(f) in name:
            return f
    return None
