"""Quality agent — embedded C pitfalls worth a warning."""

import os

from config.rules import (
    DECLARATION_PATTERN,
    NON_DECLARATION_KEYWORDS,
    NON_STATEMENT_PATTERN,
    UNINITIALIZED_MESSAGE,
    VOLATILE_MESSAGE,
)
from core.state import Issue
from utils.source import display_name, read_text


class QualityAgent:
    """Regex scan for volatile-pointer misuse and uninitialised declarations."""

    name = "quality"

    def run(self, files, code_dir=None) -> list:
        issues = []
        for path in files:
            if not os.path.isfile(path):
                continue
            rel = display_name(path, code_dir)
            for line_num, line in enumerate(read_text(path).split("\n"), 1):
                for message in self.check_line(line):
                    issues.append(Issue(
                        file=rel,
                        line=line_num,
                        column=0,
                        message=message,
                        type="quality",
                        severity="warning",
                        code=line.strip(),
                    ))
        return issues

    def check_line(self, line) -> list:
        stripped = line.strip()
        if not stripped or NON_STATEMENT_PATTERN.match(stripped):
            return []

        messages = []
        # volatile dereference with no grouping parentheses at all
        if "volatile" in line and "*" in line and "(" not in line:
            messages.append(VOLATILE_MESSAGE)

        if (DECLARATION_PATTERN.search(line)
                and "=" not in line
                and not NON_DECLARATION_KEYWORDS.search(line)):
            messages.append(UNINITIALIZED_MESSAGE)
        return messages
