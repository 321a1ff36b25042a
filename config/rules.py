"""Line-level heuristics for the syntax and quality passes."""

import re

# Syntax rules. Each entry: (name, pattern_regex, message)
# A rule fires when pattern.search(line) matches. The "terminator" rule is
# only applied to statement lines (see agents.syntax).
SYNTAX_PATTERNS = [
    (
        "terminator",
        re.compile(r"[^;{}\s]\s*$"),
        "Missing semicolon or closing brace",
    ),
    (
        "include",
        re.compile(r"#include\s*<[^>]*$"),
        "Incomplete #include directive",
    ),
    (
        "paren",
        re.compile(r"\([^)]*$"),
        "Unclosed parenthesis",
    ),
    (
        "bracket",
        re.compile(r"\[[^\]]*$"),
        "Unclosed bracket",
    ),
]

UNCLOSED_STRING_MESSAGE = "Unclosed string literal"

# Preprocessor and comment lines. "* text" continues a block comment while
# "*reg = 1;" is a dereference, so a bare star needs whitespace or "/" after it.
NON_STATEMENT_PATTERN = re.compile(r"^(?:#|//|/\*|\*(?:\s|/|$))")

# Quality rules
VOLATILE_MESSAGE = "Potential undefined behavior with volatile pointer"
UNINITIALIZED_MESSAGE = "Potentially uninitialized variable"

# "type name;" with optional pointer stars, e.g. "uint32_t reg;" or "char *buf;"
DECLARATION_PATTERN = re.compile(r"\b[A-Za-z_]\w*\s+\**\s*[A-Za-z_]\w*\s*;")

# Keywords that make a "word word;" line something other than a declaration
# (or a declaration that is initialised elsewhere).
NON_DECLARATION_KEYWORDS = re.compile(
    r"\b(?:extern|static|typedef|return|goto|case|else|break|continue|sizeof)\b"
)
