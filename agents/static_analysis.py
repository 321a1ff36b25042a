"""Static analysis agent — cppcheck and clang-tidy runners. Zero LLM calls."""

import logging
import os

from config.defaults import DEFAULTS
from core.sandbox import run_in_sandbox
from core.state import Issue
from utils.parsers import parse_clang_tidy_output, parse_cppcheck_output, resolve_file
from utils.source import display_name, get_line_content

logger = logging.getLogger(__name__)


class StaticAnalysisAgent:
    """Runs cppcheck then clang-tidy over the C sources.

    Tool runners degrade gracefully: if either analyzer is not installed or
    times out, its checks are silently skipped. Output lines that do not
    match the tool's grammar are ignored.
    """

    name = "static_analysis"

    def __init__(self, timeout=None, verbose=False):
        self.timeout = timeout or DEFAULTS["analyzer_timeout"]
        self.verbose = verbose

    def run(self, files, code_dir) -> list:
        sources = [f for f in files if f.endswith(DEFAULTS["compilable_extensions"])]
        if not sources:
            return []
        issues = []
        issues.extend(self._run_cppcheck(sources, files, code_dir))
        issues.extend(self._run_clang_tidy(sources, files, code_dir))
        return issues

    # ------------------------------------------------------------------
    # cppcheck
    # ------------------------------------------------------------------

    def _run_cppcheck(self, sources, files, code_dir) -> list:
        stdout, stderr, rc = run_in_sandbox(
            [
                "cppcheck",
                "--enable=all",
                "--std=c11",
                "--quiet",
                "--error-exitcode=0",
                *sources,
            ],
            cwd=code_dir,
            timeout=self.timeout,
        )
        if rc == -1:
            if self.verbose:
                logger.warning("cppcheck not available: %s", stderr)
            return []
        # cppcheck reports on stderr; older builds used stdout
        return self._to_issues(parse_cppcheck_output(stdout + "\n" + stderr), files, code_dir)

    # ------------------------------------------------------------------
    # clang-tidy
    # ------------------------------------------------------------------

    def _run_clang_tidy(self, sources, files, code_dir) -> list:
        stdout, stderr, rc = run_in_sandbox(
            [
                "clang-tidy",
                *sources,
                "--",
                "-std=c11",
                "-I", os.path.realpath(code_dir),
            ],
            cwd=code_dir,
            timeout=self.timeout,
        )
        if rc == -1:
            if self.verbose:
                logger.warning("clang-tidy not available: %s", stderr)
            return []
        return self._to_issues(parse_clang_tidy_output(stdout), files, code_dir)

    def _to_issues(self, diagnostics, files, code_dir) -> list:
        issues = []
        for diag in diagnostics:
            path = resolve_file(diag.path, files)
            issues.append(Issue(
                file=display_name(path, code_dir) if path else os.path.basename(diag.path),
                line=diag.line,
                column=diag.column,
                message=diag.message,
                type="static_analysis",
                severity="error" if diag.severity == "error" else "warning",
                code=get_line_content(path, diag.line).strip() if path else "",
            ))
        return issues
