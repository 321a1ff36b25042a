"""Patch applier — writes fix suggestions into the source files. Zero LLM calls."""

import os

from core.state import AppliedFix


def _read_lines(path):
    # Undecodable bytes and CRLF endings are carried through to the write.
    with open(path, encoding="utf-8", errors="surrogateescape", newline="") as f:
        return f.read().split("\n")


def _write_lines(path, lines):
    with open(path, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
        f.write("\n".join(lines))


class PatchApplier:
    """Replaces the offending line of each fix with its suggestion.

    Each fix overwrites exactly one line slot; a multi-line suggestion ends
    up in that single slot. Files are loaded once, patched in memory and
    written back once after every fix has been processed. A slot that ended
    in CRLF keeps CRLF.
    """

    name = "patcher"

    def run(self, code_dir, fixes) -> list:
        applied = []
        file_lines = {}
        touched = []

        for fix in fixes:
            error = fix.error
            path = os.path.join(code_dir, error.file)
            if not os.path.isfile(path):
                continue

            if path not in file_lines:
                try:
                    file_lines[path] = _read_lines(path)
                except OSError:
                    continue

            lines = file_lines[path]
            idx = error.line - 1
            if idx < 0 or idx >= len(lines):
                continue

            slot = lines[idx]
            eol = "\r" if slot.endswith("\r") else ""
            new = fix.suggestion.strip()
            applied.append(AppliedFix(
                file=error.file, line=error.line, old=slot[:len(slot) - len(eol)], new=new,
            ))
            lines[idx] = new.replace("\n", eol + "\n") + eol
            if path not in touched:
                touched.append(path)

        for path in touched:
            _write_lines(path, file_lines[path])

        return applied
