"""Compiler agent — compiles all sources as one translation unit. Zero LLM calls."""

import logging
import os
import tempfile

from config.defaults import DEFAULTS
from core.sandbox import run_in_sandbox
from core.state import Issue
from utils.parsers import parse_compiler_output, resolve_file
from utils.source import build_unit, display_name, get_line_content

logger = logging.getLogger(__name__)

UNIT_NAME = "__traceback_unit.c"


class CompilerAgent:
    """Runs the C compiler with warnings as errors over a synthetic unit.

    The unit is every unique include followed by every file body, written to
    a temporary directory so the analysed tree is never touched. A missing
    compiler or a timeout yields no issues.
    """

    name = "compiler"

    def __init__(self, compiler=None, timeout=None, verbose=False):
        self.compiler = compiler or DEFAULTS["compiler"]
        self.timeout = timeout or DEFAULTS["compile_timeout"]
        self.verbose = verbose

    def run(self, files, code_dir) -> list:
        sources = [f for f in files if f.endswith(DEFAULTS["compilable_extensions"])]
        if not sources:
            return []

        unit_text, origins = build_unit(files)

        with tempfile.TemporaryDirectory(prefix="traceback_cc_") as tmpdir:
            unit_path = os.path.join(tmpdir, UNIT_NAME)
            with open(unit_path, "w", encoding="utf-8") as fp:
                fp.write(unit_text)

            stdout, stderr, rc = run_in_sandbox(
                [
                    self.compiler,
                    "-c", unit_path,
                    "-o", os.path.join(tmpdir, "__traceback_unit.o"),
                    "-std=c11",
                    "-Wall",
                    "-Wextra",
                    "-Werror",
                    "-I", os.path.realpath(code_dir),
                ],
                cwd=tmpdir,
                timeout=self.timeout,
            )

        if rc == -1:
            if self.verbose:
                logger.warning("Compiler check skipped: %s", stderr)
            return []
        if rc == 0:
            return []

        return self.to_issues(stdout + "\n" + stderr, files, code_dir, origins)

    def to_issues(self, output, files, code_dir, origins=None) -> list:
        """Turn compiler diagnostics into Issues, mapped back to the source files."""
        issues = []
        for diag in parse_compiler_output(output):
            path, line = self._locate(diag.path, diag.line, files, origins)
            if path is not None:
                file = display_name(path, code_dir)
                code = get_line_content(path, line)
            else:
                file = os.path.basename(diag.path)
                code = ""
            issues.append(Issue(
                file=file,
                line=line,
                column=diag.column,
                message=diag.message,
                type="compilation",
                severity="error" if diag.severity == "error" else "warning",
                code=code.strip(),
            ))
        if not issues and output.strip() and self.verbose:
            logger.warning("Compiler output did not match any diagnostic line")
        return issues

    @staticmethod
    def _locate(reported_path, line, files, origins):
        """Return (source_path, line) for a diagnostic, or (None, line).

        Unit lines with no origin of their own (file separators) are charged
        to the nearest source above them (or below, for the very first
        line) at line 0.
        """
        if os.path.basename(reported_path) == UNIT_NAME:
            if not origins:
                return None, 0
            if 0 < line <= len(origins) and origins[line - 1]:
                return origins[line - 1]
            pos = min(max(line, 1), len(origins))
            above = reversed(origins[:pos])
            below = origins[pos:]
            for origin in (*above, *below):
                if origin:
                    return origin[0], 0
            return None, 0
        return resolve_file(reported_path, files), line
