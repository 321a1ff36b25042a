"""Syntax agent — line-oriented heuristics, no tools and no LLM calls."""

import os

from config.rules import (
    NON_STATEMENT_PATTERN,
    SYNTAX_PATTERNS,
    UNCLOSED_STRING_MESSAGE,
)
from core.state import Issue
from utils.source import display_name, read_text


def _has_unclosed_string(line):
    """True if the line has an odd number of unescaped double quotes.

    Quotes inside character literals ('"') are ignored.
    """
    count = 0
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "'" and line[i + 1:i + 3] == "\"'":
            i += 3
            continue
        if ch == '"':
            count += 1
        i += 1
    return count % 2 == 1


class SyntaxAgent:
    """Flags lines that look syntactically incomplete.

    This is a heuristic, not a parser: multi-line statements are reported
    too. Lines ending in a continuation backslash are never flagged.
    """

    name = "syntax"

    def run(self, files, code_dir=None) -> list:
        issues = []
        for path in files:
            if not os.path.isfile(path):
                continue
            rel = display_name(path, code_dir)
            lines = read_text(path).split("\n")
            for line_num, line in enumerate(lines, 1):
                issues.extend(self.check_line(rel, line_num, line))
        return issues

    def check_line(self, file, line_num, line) -> list:
        stripped = line.strip()
        if not stripped or stripped.endswith("\\"):
            return []

        is_statement = not NON_STATEMENT_PATTERN.match(stripped)
        messages = []
        for rule, pattern, message in SYNTAX_PATTERNS:
            if rule == "terminator" and not is_statement:
                continue
            if pattern.search(line):
                messages.append(message)
        if _has_unclosed_string(line):
            messages.append(UNCLOSED_STRING_MESSAGE)

        return [
            Issue(
                file=file,
                line=line_num,
                column=len(line),
                message=message,
                type="syntax",
                severity="error",
                code=stripped,
            )
            for message in messages
        ]
