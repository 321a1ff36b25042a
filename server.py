#!/usr/bin/env python3
"""Traceback HTTP API - run the diagnostics-and-repair pipeline over a directory."""

import os

from flask import Flask, jsonify, request

from core.orchestrator import Orchestrator
from core.report import format_report, result_to_dict
from core.state import RunOptions

app = Flask(__name__)


def _flag(data, key, default):
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"'{key}' must be true or false")
    return value


def _options_from(data) -> RunOptions:
    """Map request JSON flags onto RunOptions. Raises ValueError on bad values."""
    return RunOptions(
        use_compiler=_flag(data, "compile", True),
        use_static_analysis=_flag(data, "static", True),
        use_ai=_flag(data, "ai", True),
        ai_model=data.get("model") or RunOptions.ai_model,
        fallback_model=data.get("fallback_model", RunOptions.fallback_model),
        compiler=data.get("compiler") or RunOptions.compiler,
        auto_fix=_flag(data, "fix", False),
    )


def _run_to_dict(run):
    """Serialize a RepairRun to a JSON-safe dict."""
    return {
        "initial": result_to_dict(run.initial),
        "final": result_to_dict(run.final),
        "appliedFixes": [
            {"file": a.file, "line": a.line, "old": a.old, "new": a.new}
            for a in run.applied_fixes
        ],
        "iterations": len(run.iterations),
        "report": format_report(run.final),
    }


@app.route("/api/health")
def api_health():
    return jsonify({"status": "ok"})


@app.route("/api/analyze", methods=["POST"])
def api_analyze():
    """Analyse a code directory; with "fix": true, patch and re-analyse.

    Synchronous and stateless: every call is a fresh pass over the directory.
    """
    data = request.get_json(silent=True)
    if not data or not str(data.get("dir", "")).strip():
        return jsonify({"error": "Missing dir"}), 400

    code_dir = str(data["dir"]).strip()
    if not os.path.isdir(code_dir):
        return jsonify({"error": f"Code directory does not exist: {code_dir}"}), 404

    files = data.get("files")
    if files is not None and not isinstance(files, list):
        return jsonify({"error": "files must be a list"}), 400

    try:
        options = _options_from(data)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    orchestrator = Orchestrator(options)
    run = orchestrator.run(code_dir, files=files)
    return jsonify(_run_to_dict(run))


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5001))
    print(f"Traceback API running at http://localhost:{port}")
    app.run(debug=False, port=port)
