"""Tests for agents.patcher."""

from agents.patcher import PatchApplier
from core.state import AppliedFix, Fix, Issue


def _fix(line, suggestion, file="a.c"):
    error = Issue(file=file, line=line, column=0, message="m",
                  type="syntax", severity="error", code="")
    return Fix(error=error, suggestion=suggestion, confidence=0.8)


def _ten_lines(tmp_path, name="a.c"):
    path = tmp_path / name
    path.write_text("\n".join(f"int v{i}" for i in range(1, 11)) + "\n")
    return path


def test_replaces_single_line(tmp_path):
    path = _ten_lines(tmp_path)
    applied = PatchApplier().run(str(tmp_path), [_fix(3, "  int v3 = 0;  ")])

    assert applied == [AppliedFix(file="a.c", line=3, old="int v3", new="int v3 = 0;")]
    lines = path.read_text().split("\n")
    assert lines[2] == "int v3 = 0;"
    assert lines[3] == "int v4"
    assert path.read_text().endswith("\n")


def test_out_of_range_line_skipped(tmp_path):
    path = _ten_lines(tmp_path)
    before = path.read_text()
    applied = PatchApplier().run(str(tmp_path), [_fix(1000, "int y;")])
    assert applied == []
    assert path.read_text() == before


def test_line_zero_skipped(tmp_path):
    _ten_lines(tmp_path)
    assert PatchApplier().run(str(tmp_path), [_fix(0, "int y;")]) == []


def test_missing_file_skipped(tmp_path):
    assert PatchApplier().run(str(tmp_path), [_fix(1, "int y;", file="nope.c")]) == []


def test_multiline_suggestion_fills_one_slot(tmp_path):
    path = _ten_lines(tmp_path)
    PatchApplier().run(str(tmp_path), [_fix(2, "int v2 = 0;\nint w = 1;")])
    lines = path.read_text().split("\n")
    assert lines[1] == "int v2 = 0;"
    assert lines[2] == "int w = 1;"
    assert lines[3] == "int v3"


def test_later_fix_on_same_line_wins(tmp_path):
    path = _ten_lines(tmp_path)
    applied = PatchApplier().run(str(tmp_path), [_fix(5, "int first;"), _fix(5, "int second;")])
    assert path.read_text().split("\n")[4] == "int second;"
    assert [a.new for a in applied] == ["int first;", "int second;"]
    assert applied[1].old == "int first;"


def test_applying_twice_is_idempotent(tmp_path):
    path = _ten_lines(tmp_path)
    fix = _fix(4, "int v4 = 4;")
    PatchApplier().run(str(tmp_path), [fix])
    once = path.read_text()
    PatchApplier().run(str(tmp_path), [fix])
    assert path.read_text() == once


def test_multiple_files_in_order(tmp_path):
    _ten_lines(tmp_path, "a.c")
    _ten_lines(tmp_path, "b.c")
    fixes = [_fix(1, "int b1;", file="b.c"), _fix(2, "int a2;", file="a.c"), _fix(99, "x", file="a.c")]
    applied = PatchApplier().run(str(tmp_path), fixes)
    assert [(a.file, a.line) for a in applied] == [("b.c", 1), ("a.c", 2)]
    assert (tmp_path / "b.c").read_text().startswith("int b1;\n")
    assert (tmp_path / "a.c").read_text().split("\n")[1] == "int a2;"


def test_non_utf8_bytes_survive_patch(tmp_path):
    path = tmp_path / "a.c"
    path.write_bytes(b"/* r\xe9gler */\nint x\n")
    applied = PatchApplier().run(str(tmp_path), [_fix(2, "int x;")])
    assert [(a.line, a.old, a.new) for a in applied] == [(2, "int x", "int x;")]
    assert path.read_bytes() == b"/* r\xe9gler */\nint x;\n"


def test_crlf_endings_preserved(tmp_path):
    path = tmp_path / "a.c"
    path.write_bytes(b"int x\r\nint y = 1;\r\n")
    applied = PatchApplier().run(str(tmp_path), [_fix(1, "int x;")])
    assert applied[0].old == "int x"
    assert path.read_bytes() == b"int x;\r\nint y = 1;\r\n"


def test_crlf_multiline_suggestion(tmp_path):
    path = tmp_path / "a.c"
    path.write_bytes(b"int x\r\nint y = 1;\r\n")
    PatchApplier().run(str(tmp_path), [_fix(1, "int x;\nint z;")])
    assert path.read_bytes() == b"int x;\r\nint z;\r\nint y = 1;\r\n"
