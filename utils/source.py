"""Helpers for reading C sources and building the synthetic translation unit."""

import os
import re

_INCLUDE_RE = re.compile(r"""#include\s*[<"]([^>"]+)[>"]""")


def read_text(path):
    """Return the file's text, or "" if it cannot be read."""
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            return f.read()
    except OSError:
        return ""


def get_line_content(path, line_num):
    """Return line ``line_num`` (1-indexed) of ``path``, or "" when out of range."""
    if not path or line_num < 1:
        return ""
    lines = read_text(path).split("\n")
    if line_num > len(lines):
        return ""
    return lines[line_num - 1]


def display_name(path, code_dir):
    """Name an analysed file the way Issues and the patch applier refer to it."""
    if code_dir:
        rel = os.path.relpath(os.path.realpath(path), os.path.realpath(code_dir))
        if not rel.startswith(os.pardir):
            return rel
    return os.path.basename(path)


def _include_sites(files):
    """(directive, path, line) for the first occurrence of each included name."""
    sites = []
    seen = set()
    for path in files:
        for line_num, line in enumerate(read_text(path).split("\n"), 1):
            for name in _INCLUDE_RE.findall(line):
                if name not in seen:
                    seen.add(name)
                    sites.append((f"#include <{name}>", path, line_num))
    return sites


def extract_includes(files):
    """Unique include directives across ``files``, normalised to ``#include <name>``."""
    return [directive for directive, _, _ in _include_sites(files)]


def build_unit(files):
    """Concatenate ``files`` into a single translation unit.

    Returns (text, origins) where origins[i] is the (path, line) that unit
    line i + 1 came from. Prelude includes point at the line that first
    included them; separator lines the unit introduced map to None.
    Include lines are blanked in place so per-file line numbers survive.
    """
    sites = _include_sites(files)
    lines = [directive for directive, _, _ in sites] + [""]
    origins = [(path, line_num) for _, path, line_num in sites] + [None]

    first = True
    for path in files:
        if not os.path.isfile(path):
            continue
        if not first:
            lines.append("")
            origins.append(None)
        first = False
        body = _INCLUDE_RE.sub("", read_text(path))
        for idx, line in enumerate(body.split("\n"), 1):
            lines.append(line)
            origins.append((path, idx))

    return "\n".join(lines), origins


def get_code_context(content, line_num, context_lines=5):
    """Numbered window of +/- ``context_lines`` around ``line_num``, error line marked."""
    lines = content.split("\n")
    start = max(0, line_num - context_lines - 1)
    end = min(len(lines), line_num + context_lines)
    rendered = []
    for idx, line in enumerate(lines[start:end], start + 1):
        marker = ">>> " if idx == line_num else "    "
        rendered.append(f"{marker}{idx}: {line}")
    return "\n".join(rendered)
