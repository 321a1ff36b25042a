#!/usr/bin/env python3
"""Traceback - error detection and repair for generated firmware C code.

Usage:
    python main.py generated/stm32_uart                   # analyse + AI suggestions
    python main.py generated/stm32_uart --fix             # apply fixes and re-analyse
    python main.py generated/stm32_uart --no-ai --json    # diagnostics only, JSON output
    python main.py generated/stm32_uart --model qwen2.5:1.5b --verbose
"""

import argparse
import json
import os
import sys

from core.orchestrator import Orchestrator
from core.report import result_to_dict
from core.state import RunOptions
from utils.log import setup_logging


def _format_applied(applied):
    """Format applied fixes as a -/+ listing for CLI display."""
    lines = []
    for fix in applied:
        lines.append(f"   {fix.file}:{fix.line}")
        lines.append(f"   - {fix.old}")
        lines.append(f"   + {fix.new}")
    return "\n".join(lines)


def build_options(args) -> RunOptions:
    return RunOptions(
        use_compiler=not args.no_compile,
        use_static_analysis=not args.no_static,
        use_ai=not args.no_ai,
        compiler=args.compiler,
        ai_model=args.model,
        fallback_model=args.fallback_model,
        auto_fix=args.fix,
        verbose=args.verbose,
    )


def cmd_analyze(args):
    """Run the pipeline and print reports. Returns the process exit code."""
    options = build_options(args)
    orchestrator = Orchestrator(options)

    if not args.json:
        print("Starting traceback analysis...\n")
        print(f"Analyzing: {os.path.abspath(args.code_dir)}")
        print(f"Options:   auto_fix={options.auto_fix} compiler={options.use_compiler} "
              f"static={options.use_static_analysis} ai={options.use_ai} model={options.ai_model}")

    run = orchestrator.run(args.code_dir)

    if args.json:
        payload = {"initial": result_to_dict(run.initial)}
        if len(run.iterations) > 1:
            payload["final"] = result_to_dict(run.final)
        print(json.dumps(payload, indent=2))
    else:
        print(orchestrator.report(run.initial))
        if options.auto_fix:
            if run.applied_fixes:
                print(f"\nApplied {len(run.applied_fixes)} fixes:")
                print(_format_applied(run.applied_fixes))
                print("\nRe-analyzing after fixes...")
                print(orchestrator.report(run.final))
            else:
                print("No fixes were applied")

    return 1 if run.final.errors else 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="traceback",
        description="Detect and repair errors in generated embedded C code",
    )
    parser.add_argument("code_dir", help="Directory containing .c/.h/.cpp files")
    parser.add_argument("--fix", action="store_true", help="Automatically apply fixes")
    parser.add_argument("--no-compile", action="store_true", help="Skip compilation checks")
    parser.add_argument("--no-static", action="store_true", help="Skip static analysis")
    parser.add_argument("--no-ai", action="store_true", help="Skip AI-powered fixes")
    parser.add_argument("--model", default=RunOptions.ai_model,
                        help=f"AI model to use (default: {RunOptions.ai_model})")
    parser.add_argument("--fallback-model", default=RunOptions.fallback_model,
                        help=f"Model tried when the primary runs out of memory or times out "
                             f"(default: {RunOptions.fallback_model})")
    parser.add_argument("--compiler", default=RunOptions.compiler,
                        help=f"C compiler binary (default: {RunOptions.compiler})")
    parser.add_argument("--verbose", action="store_true", help="Show detailed output")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")

    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose)

    try:
        return cmd_analyze(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
