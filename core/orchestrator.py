"""Main pipeline orchestrator — analyse, suggest fixes, patch, re-analyse."""

import os

from agents.compiler import CompilerAgent
from agents.fixer import FixerAgent
from agents.patcher import PatchApplier
from agents.quality import QualityAgent
from agents.static_analysis import StaticAnalysisAgent
from agents.syntax import SyntaxAgent
from config.defaults import DEFAULTS
from core.report import format_report
from core.state import AnalysisResult, RepairRun, RunOptions


def discover_files(code_dir):
    """Source and header files directly inside code_dir, sorted by name."""
    return sorted(
        f for f in os.listdir(code_dir)
        if f.endswith(DEFAULTS["source_extensions"])
        and os.path.isfile(os.path.join(code_dir, f))
    )


class Orchestrator:
    """Runs the diagnostics-and-repair pipeline over one directory snapshot.

    Passes run strictly in order: syntax → compiler → static analysis →
    quality. Each returns its own issues; the orchestrator concatenates them.
    ``errors``, ``warnings`` and ``fixes`` hold the latest run only and are
    replaced, never extended, by each ``analyze()``.
    """

    def __init__(self, options=None, **overrides):
        if options is None:
            options = RunOptions(**overrides)
        elif overrides:
            raise TypeError("Pass either options or keyword overrides, not both")
        self.options = options

        self.syntax = SyntaxAgent()
        self.compiler = CompilerAgent(
            compiler=options.compiler,
            timeout=options.compile_timeout,
            verbose=options.verbose,
        )
        self.static_analysis = StaticAnalysisAgent(
            timeout=options.analyzer_timeout,
            verbose=options.verbose,
        )
        self.quality = QualityAgent()
        self.fixer = FixerAgent(
            model=options.ai_model,
            fallback_model=options.fallback_model,
            timeout=options.inference_timeout,
            max_fixes=options.max_fixes,
            context_lines=options.context_lines,
            verbose=options.verbose,
        )
        self.patcher = PatchApplier()

        self.errors = []
        self.warnings = []
        self.fixes = []

    def _passes(self):
        opts = self.options
        return [
            agent for enabled, agent in (
                (opts.use_syntax, self.syntax),
                (opts.use_compiler, self.compiler),
                (opts.use_static_analysis, self.static_analysis),
                (opts.use_quality, self.quality),
            ) if enabled
        ]

    def resolve_files(self, code_dir, files=None):
        """Absolute paths of the files to analyse inside code_dir."""
        if files is None:
            files = discover_files(code_dir)
        return [os.path.join(code_dir, f) for f in files]

    def analyze(self, code_dir, files=None) -> AnalysisResult:
        """Run every enabled diagnostic pass and collect the issues.

        Raises:
            ValueError: If code_dir does not exist.
        """
        if not os.path.isdir(code_dir):
            raise ValueError(f"Code directory does not exist: {code_dir}")

        paths = self.resolve_files(code_dir, files)
        issues = []
        for agent in self._passes():
            issues.extend(agent.run(paths, code_dir))

        result = AnalysisResult.from_issues(issues)
        self.errors = result.errors
        self.warnings = result.warnings
        self.fixes = []
        return result

    def get_fixes(self, errors, files) -> list:
        """Ask the model for fixes to the first few errors. Never raises on service failure."""
        if not self.options.use_ai:
            self.fixes = []
            return self.fixes
        self.fixes = self.fixer.run(errors, files)
        return self.fixes

    def apply_fixes(self, code_dir, fixes) -> list:
        return self.patcher.run(code_dir, fixes)

    def report(self, result) -> str:
        return format_report(result)

    def run(self, code_dir, files=None, auto_fix=None) -> RepairRun:
        """Analyse once, optionally fix and re-analyse.

        The second analysis reports whatever errors remain after patching;
        it is never assumed to be clean.
        """
        if auto_fix is None:
            auto_fix = self.options.auto_fix

        run = RepairRun()
        result = self.analyze(code_dir, files)

        if self.options.use_ai and result.errors:
            fixes = self.get_fixes(result.errors, self.resolve_files(code_dir, files))
            result = result.with_fixes(fixes)
        run.iterations.append(result)

        if auto_fix and result.fixes:
            applied = self.apply_fixes(code_dir, result.fixes)
            run.applied_fixes = applied
            run.iterations[0] = result.with_applied(applied)
            if applied:
                run.iterations.append(self.analyze(code_dir, files))

        return run
