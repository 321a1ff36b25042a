"""Pipeline records shared across all stages."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from config.defaults import DEFAULTS
from core.sandbox import check_allowed

ISSUE_TYPES = ("syntax", "compilation", "static_analysis", "quality")
SEVERITIES = ("error", "warning")


@dataclass(frozen=True)
class Issue:
    file: str           # path relative to the analysed directory
    line: int           # 1-indexed, 0 if unknown
    column: int         # 0 if unknown
    message: str
    type: str           # "syntax", "compilation", "static_analysis", "quality"
    severity: str       # "error", "warning"
    code: str = ""      # offending source line, best-effort


@dataclass(frozen=True)
class Fix:
    error: Issue
    suggestion: str
    confidence: float   # advisory only
    model: str = ""


@dataclass(frozen=True)
class AppliedFix:
    file: str
    line: int
    old: str
    new: str


def group_by_type(issues) -> dict:
    """Histogram of issue.type -> count, in first-seen order."""
    groups = {}
    for issue in issues:
        groups[issue.type] = groups.get(issue.type, 0) + 1
    return groups


@dataclass(frozen=True)
class Summary:
    total_errors: int
    total_warnings: int
    total_fixes: int
    error_types: dict
    warning_types: dict

    @classmethod
    def build(cls, errors, warnings, fixes) -> Summary:
        return cls(
            total_errors=len(errors),
            total_warnings=len(warnings),
            total_fixes=len(fixes),
            error_types=group_by_type(errors),
            warning_types=group_by_type(warnings),
        )


@dataclass(frozen=True)
class AnalysisResult:
    errors: list[Issue]
    warnings: list[Issue]
    fixes: list[Fix]
    summary: Summary
    applied_fixes: list[AppliedFix] = field(default_factory=list)

    @classmethod
    def from_issues(cls, issues, fixes=None) -> AnalysisResult:
        """Split issues by severity and compute the summary once."""
        errors = [i for i in issues if i.severity == "error"]
        warnings = [i for i in issues if i.severity == "warning"]
        fixes = list(fixes or [])
        return cls(errors, warnings, fixes, Summary.build(errors, warnings, fixes))

    def with_fixes(self, fixes) -> AnalysisResult:
        fixes = list(fixes)
        return replace(
            self,
            fixes=fixes,
            summary=Summary.build(self.errors, self.warnings, fixes),
        )

    def with_applied(self, applied) -> AnalysisResult:
        return replace(self, applied_fixes=list(applied))


@dataclass
class RunOptions:
    use_syntax: bool = True
    use_compiler: bool = True
    use_static_analysis: bool = True
    use_quality: bool = True
    use_ai: bool = True
    compiler: str = DEFAULTS["compiler"]
    ai_model: str = DEFAULTS["model"]
    fallback_model: str | None = DEFAULTS["fallback_model"]
    compile_timeout: float = DEFAULTS["compile_timeout"]
    analyzer_timeout: float = DEFAULTS["analyzer_timeout"]
    inference_timeout: float = DEFAULTS["inference_timeout"]
    auto_fix: bool = False
    verbose: bool = False
    max_fixes: int = DEFAULTS["max_fixes"]
    context_lines: int = DEFAULTS["context_lines"]

    def __post_init__(self):
        check_allowed(self.compiler)


@dataclass
class RepairRun:
    """One convergence run: analyse, optionally fix and re-analyse."""
    iterations: list[AnalysisResult] = field(default_factory=list)
    applied_fixes: list[AppliedFix] = field(default_factory=list)

    @property
    def initial(self) -> AnalysisResult | None:
        return self.iterations[0] if self.iterations else None

    @property
    def final(self) -> AnalysisResult | None:
        return self.iterations[-1] if self.iterations else None
