"""Tests for the CLI entry point in main.py."""

import json
from unittest.mock import patch

import main

LOCAL = ["--no-compile", "--no-static", "--no-ai"]


def test_clean_directory_exits_zero(tmp_path, capsys):
    (tmp_path / "a.c").write_text("int x = 0;\n")
    assert main.main([str(tmp_path), *LOCAL]) == 0
    assert "No errors or warnings found!" in capsys.readouterr().out


def test_errors_exit_one(tmp_path, capsys):
    (tmp_path / "a.c").write_text("int x\n")
    assert main.main([str(tmp_path), *LOCAL]) == 1
    out = capsys.readouterr().out
    assert "ERRORS (1):" in out
    assert "Summary: 1 errors, 0 warnings, 0 fixes" in out


def test_missing_directory_exits_two(tmp_path, capsys):
    assert main.main([str(tmp_path / "missing"), *LOCAL]) == 2
    assert "does not exist" in capsys.readouterr().err


def test_bad_compiler_exits_two(tmp_path, capsys):
    assert main.main([str(tmp_path), "--compiler", "bash"]) == 2
    assert "not in allowlist" in capsys.readouterr().err


def test_json_output(tmp_path, capsys):
    (tmp_path / "a.c").write_text("int x\nuint8_t pin;\n")
    main.main([str(tmp_path), *LOCAL, "--json"])
    data = json.loads(capsys.readouterr().out)
    assert set(data) == {"initial"}
    assert data["initial"]["summary"]["totalErrors"] == 1
    assert data["initial"]["summary"]["warningTypes"] == {"quality": 1}


def test_fix_applies_and_reanalyzes(tmp_path, capsys):
    (tmp_path / "a.c").write_text("int x\n")
    with patch("utils.llm.generate", return_value="int x;"):
        code = main.main([str(tmp_path), "--no-compile", "--no-static", "--fix", "--json"])

    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["initial"]["appliedFixes"] == [{"file": "a.c", "line": 1, "old": "int x", "new": "int x;"}]
    assert data["final"]["summary"]["totalErrors"] == 0
    assert (tmp_path / "a.c").read_text() == "int x;\n"


def test_fix_text_output_lists_changes(tmp_path, capsys):
    (tmp_path / "a.c").write_text("int x\n")
    with patch("utils.llm.generate", return_value="int x;"):
        main.main([str(tmp_path), "--no-compile", "--no-static", "--fix"])
    out = capsys.readouterr().out
    assert "Applied 1 fixes:" in out
    assert "   - int x" in out
    assert "   + int x;" in out
    assert "Re-analyzing after fixes..." in out


def test_build_options_maps_flags(tmp_path):
    with patch("main.Orchestrator") as MockOrch:
        MockOrch.return_value.run.return_value.final.errors = []
        MockOrch.return_value.run.return_value.applied_fixes = []
        MockOrch.return_value.report.return_value = ""
        main.main([str(tmp_path), "--no-static", "--model", "qwen2.5:1.5b", "--compiler", "clang"])

    options = MockOrch.call_args.args[0]
    assert options.use_compiler is True
    assert options.use_static_analysis is False
    assert options.ai_model == "qwen2.5:1.5b"
    assert options.compiler == "clang"
    assert options.auto_fix is False
