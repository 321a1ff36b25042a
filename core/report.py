"""Text and JSON rendering of analysis results."""

from __future__ import annotations

from core.state import AnalysisResult

_RULE = "=" * 80
_SUBRULE = "-" * 80


def _format_issue_block(idx, issue):
    lines = [
        f"[{idx}] {issue.file}:{issue.line}:{issue.column}",
        f"    Type: {issue.type}",
        f"    Message: {issue.message}",
    ]
    if issue.code:
        lines.append(f"    Code: {issue.code}")
    return lines


def _format_histogram(title, counts):
    lines = [f"  {title}:"]
    if not counts:
        lines.append("    (none)")
    for issue_type in sorted(counts):
        lines.append(f"    {issue_type:16s} {counts[issue_type]}")
    return lines


def format_report(result: AnalysisResult) -> str:
    """Render a result for terminal or log output.

    Only reads the result; counts and per-type histograms come from
    ``result.summary`` as computed at analysis time.
    """
    summary = result.summary
    report = ["", _RULE, "TRACEBACK ANALYSIS REPORT", _RULE]

    if not result.errors and not result.warnings:
        report.append("")
        report.append("No errors or warnings found!")
        report.append(_RULE)
        return "\n".join(report)

    if result.errors:
        report.append("")
        report.append(f"ERRORS ({summary.total_errors}):")
        report.append(_SUBRULE)
        for idx, issue in enumerate(result.errors, 1):
            report.extend(_format_issue_block(idx, issue))

    if result.warnings:
        report.append("")
        report.append(f"WARNINGS ({summary.total_warnings}):")
        report.append(_SUBRULE)
        for idx, issue in enumerate(result.warnings, 1):
            report.extend(_format_issue_block(idx, issue))

    if result.fixes:
        report.append("")
        report.append(f"FIX SUGGESTIONS ({summary.total_fixes}):")
        report.append(_SUBRULE)
        for idx, fix in enumerate(result.fixes, 1):
            err = fix.error
            report.append(f"[{idx}] {err.file}:{err.line} (confidence {fix.confidence:.1f})")
            report.append(f"    Error: {err.message}")
            report.append("    Suggested Fix:")
            for line in fix.suggestion.split("\n"):
                report.append(f"    {line}")

    report.append("")
    report.append("ISSUE TYPES:")
    report.extend(_format_histogram("errors", summary.error_types))
    report.extend(_format_histogram("warnings", summary.warning_types))

    report.append("")
    report.append(_RULE)
    report.append(
        f"Summary: {summary.total_errors} errors, {summary.total_warnings} warnings, "
        f"{summary.total_fixes} fixes"
    )
    report.append(_RULE)
    return "\n".join(report)


def issue_to_dict(issue):
    return {
        "file": issue.file,
        "line": issue.line,
        "column": issue.column,
        "message": issue.message,
        "type": issue.type,
        "severity": issue.severity,
        "code": issue.code,
    }


def result_to_dict(result: AnalysisResult) -> dict:
    """Serialize a result to the JSON output contract (camelCase keys)."""
    data = {
        "errors": [issue_to_dict(i) for i in result.errors],
        "warnings": [issue_to_dict(i) for i in result.warnings],
        "fixes": [
            {
                "error": issue_to_dict(f.error),
                "suggestion": f.suggestion,
                "confidence": f.confidence,
                "model": f.model,
            }
            for f in result.fixes
        ],
        "summary": {
            "totalErrors": result.summary.total_errors,
            "totalWarnings": result.summary.total_warnings,
            "totalFixes": result.summary.total_fixes,
            "errorTypes": dict(result.summary.error_types),
            "warningTypes": dict(result.summary.warning_types),
        },
    }
    if result.applied_fixes:
        data["appliedFixes"] = [
            {"file": a.file, "line": a.line, "old": a.old, "new": a.new}
            for a in result.applied_fixes
        ]
    return data
