"""
CLI interface for codebase_audit.

Provides the command-line interface for duplicate detection and code metrics.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import yaml

from codebase_audit import __version__
from codebase_audit.config import (
    DEFAULT_CONFIG,
    flatten_thresholds,
    get_config_template,
    load_config,
)
from codebase_audit.errors import AuditError
from codebase_audit.languages import DUPLICATE_LANGUAGES
from codebase_audit.scanner import analyze_metrics, find_duplicates
from codebase_audit.templates import create_template_dir, render_report

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)

COMMANDS = ("duplicates", "metrics")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="codebase-audit",
        description="Find duplicate code and measure code metrics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
QUICK START
  codebase-audit duplicates .                 # Duplicate code report (JSON)
  codebase-audit metrics ./src --format markdown
  codebase-audit duplicates . --threshold similarityThreshold=0.9
  codebase-audit --init-config > audit.yaml   # Starter config file

Exit status is 1 when the analysis fails (for example, a missing workspace).
        """,
    )

    parser.add_argument(
        "command",
        nargs="?",
        choices=COMMANDS,
        help="Analysis to run",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Workspace to analyze (default: current directory)",
    )
    parser.add_argument(
        "-o", "--output",
        help="Output file (default: stdout)",
    )
    parser.add_argument(
        "--format",
        choices=("json", "markdown"),
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Only output the summary",
    )

    # Configuration options
    config_group = parser.add_argument_group("Configuration")
    config_group.add_argument(
        "--config",
        metavar="FILE",
        help="Load thresholds from a YAML file",
    )
    config_group.add_argument(
        "--threshold",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override one threshold, e.g. minLines=8 (repeatable, wins over --config)",
    )
    config_group.add_argument(
        "--init-config",
        action="store_true",
        help="Print a documented config template and exit",
    )
    config_group.add_argument(
        "--template-dir",
        metavar="DIR",
        help="Directory with custom Markdown templates",
    )
    config_group.add_argument(
        "--init-templates",
        metavar="DIR",
        help="Write the built-in Markdown templates to DIR for customizing and exit",
    )

    # Run controls
    run_group = parser.add_argument_group("Run Controls")
    run_group.add_argument(
        "--workers",
        type=int,
        metavar="N",
        help="Worker threads (default: CPU count)",
    )
    run_group.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        help="Stop similarity comparisons after SECONDS; the report is marked truncated",
    )
    run_group.add_argument(
        "--no-prune",
        action="store_true",
        help="Compare every pair, even those whose sizes rule out a match",
    )
    run_group.add_argument(
        "--watch",
        action="store_true",
        help="Re-run the analysis whenever files change",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def parse_threshold_overrides(items: list[str]) -> dict[str, Any]:
    """
    Parse ``KEY=VALUE`` threshold overrides.

    Values are read as YAML scalars, so ``8`` is an int and ``0.9`` a float.

    Raises:
        ValueError: If an item has no ``=`` or an empty key.
    """
    overrides: dict[str, Any] = {}
    for item in items:
        key, sep, raw = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Invalid threshold {item!r}, expected KEY=VALUE")
        overrides[key] = yaml.safe_load(raw) if raw.strip() else None
    return overrides


def build_options(args: argparse.Namespace, config: dict[str, Any]) -> dict[str, Any]:
    """Combine config file values and CLI flags into scanner keyword arguments."""
    run = config.get("run", {})
    thresholds = flatten_thresholds(config)
    thresholds.update(parse_threshold_overrides(args.threshold))

    options: dict[str, Any] = {
        "thresholds": thresholds,
        "workers": args.workers if args.workers is not None else run.get("workers"),
    }
    if args.command == "duplicates":
        options["timeout"] = args.timeout if args.timeout is not None else run.get("timeout")
        options["prune_candidates"] = False if args.no_prune else run.get("pruneCandidates", True)
    return options


def run_audit(command: str, path: str, options: dict[str, Any]) -> dict[str, Any]:
    """Run one analysis and return its report."""
    if command == "duplicates":
        return find_duplicates(path, **options)
    return analyze_metrics(path, **options)


def format_report(report: dict[str, Any], command: str, args: argparse.Namespace) -> str:
    """Render a report in the requested format."""
    if args.format == "markdown":
        template_dir = Path(args.template_dir) if args.template_dir else None
        return render_report(command, report, summary_only=args.summary, template_dir=template_dir)

    if args.summary:
        keys = ("success", "error", "workspace", "truncated", "summary")
        report = {key: report[key] for key in keys if key in report}
    return json.dumps(report, indent=2, default=str)


def write_output(output: str, args: argparse.Namespace) -> None:
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
            if not output.endswith("\n"):
                f.write("\n")
        if args.verbose:
            print(f"Output written to: {args.output}", file=sys.stderr)
    else:
        print(output)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    # Handle --init-config: just output the template and exit
    if args.init_config:
        print(get_config_template())
        return

    if args.init_templates:
        create_template_dir(Path(args.init_templates))
        print(f"Templates written to: {args.init_templates}", file=sys.stderr)
        return

    if not args.command:
        parser.error("a command is required: duplicates or metrics")

    # Load config if specified
    config = DEFAULT_CONFIG
    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file '{config_path}' does not exist", file=sys.stderr)
            sys.exit(1)
        try:
            config = load_config(config_path)
        except (AuditError, yaml.YAMLError) as e:
            print(f"Error: Invalid config file '{config_path}': {e}", file=sys.stderr)
            sys.exit(1)
        if args.verbose:
            print(f"Loaded config: {config_path}", file=sys.stderr)

    try:
        options = build_options(args, config)
    except ValueError as e:
        parser.error(str(e))

    def run_once() -> dict[str, Any]:
        report = run_audit(args.command, args.path, options)
        write_output(format_report(report, args.command, args), args)
        return report

    report = run_once()

    if args.watch and report["success"]:
        from codebase_audit.watcher import watch_and_rerun

        root = Path(report["workspace"])
        output_path = Path(args.output).resolve() if args.output else None

        def accept(path: Path) -> bool:
            if output_path is not None and path == output_path:
                return False
            return args.command == "metrics" or DUPLICATE_LANGUAGES.is_supported(path)

        watch_and_rerun(root, run_once, accept=accept)
        return

    if not report["success"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
