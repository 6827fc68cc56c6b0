"""
gh_activity/cli.py — Command-line interface for the activity analysis.

Provides a single entry point that:
  1. Loads GH_ACTIVITY_DATA_PATH from a .env file automatically
  2. Checks the data directory holds actors.csv, commits.csv, events.csv, repos.csv
  3. Builds the entity graph and prints the three activity rankings

Usage:
    gh-activity run --data-path ./data              # rankings, top 10
    gh-activity run --data-path ./data --top 5 --report-path report.md
    gh-activity check --data-path ./data            # preflight only
    gh-activity export-graph --data-path ./data --output graph.graphml

--data-path falls back to GH_ACTIVITY_DATA_PATH (environment or .env).
Any ingestion error is logged and the command exits with status 1 without
printing a report.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from pathlib import Path

from gh_activity.config import DEFAULT_CONFIG, ActivityConfig
from gh_activity.errors import GhActivityError


# ── .env loading ──────────────────────────────────────────────────────────────

def _read_env_file(path: Path) -> dict[str, str]:
    """Parse KEY=VALUE lines; comments and lines without '=' are ignored."""
    values: dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        key, sep, value = line.strip().partition("=")
        if not sep or key.startswith("#"):
            continue
        values[key.strip()] = value.strip().strip("'\"")
    return values


def _load_dotenv(env_file: str | None, config: ActivityConfig = DEFAULT_CONFIG) -> str | None:
    """Set the data-path variable from a .env file.

    Only ``config.data_path_env_var`` is read, and only when the environment
    does not already define it. Without ``env_file`` the nearest .env from the
    working directory upward is used. Returns the value taken from the file.
    """
    name = config.data_path_env_var
    if name in os.environ:
        return None

    if env_file is not None:
        candidates = [Path(env_file)]
    else:
        cwd = Path.cwd()
        candidates = [directory / ".env" for directory in (cwd, *cwd.parents)]

    for candidate in candidates:
        if candidate.is_file():
            value = _read_env_file(candidate).get(name)
            if value is not None:
                os.environ[name] = value
            return value
    return None


# ── Logging setup ─────────────────────────────────────────────────────────────

def _setup_logging(level: str = "INFO") -> None:
    """Configure the root logger with timestamps on stderr."""
    numeric = getattr(logging, level.upper(), logging.INFO)
    fmt = "%(asctime)s  %(levelname)-8s  %(name)s — %(message)s"
    datefmt = "%H:%M:%S"
    logging.basicConfig(level=numeric, format=fmt, datefmt=datefmt, stream=sys.stderr)


logger = logging.getLogger("gh_activity.cli")


def _resolve_data_path(args: argparse.Namespace, config: ActivityConfig) -> str:
    return args.data_path or os.environ.get(config.data_path_env_var, "")


# ── Subcommand: run ───────────────────────────────────────────────────────────

def cmd_run(args: argparse.Namespace) -> int:
    """Load the dataset and print the three activity rankings."""
    _load_dotenv(args.env_file)
    _setup_logging(args.log_level)

    from gh_activity.pipeline import run_analysis

    config = DEFAULT_CONFIG
    data_path = _resolve_data_path(args, config)
    width = args.top if args.top is not None else config.report_width

    logger.info("Running the analysis on data-path=%s", data_path or "(unset)")

    t0 = time.monotonic()
    try:
        result = run_analysis(
            data_path,
            width=width,
            config=config,
            report_path=args.report_path,
            csv_dir=args.csv_dir,
        )
    except GhActivityError as exc:
        logger.error("Failed to run the analysis: %s", exc)
        return 1
    elapsed = time.monotonic() - t0

    report = result.report
    counts = report.entity_counts

    print()
    print("=" * 60)
    print("  ACTIVITY ANALYSIS COMPLETE")
    print("=" * 60)
    print(f"  Elapsed  : {elapsed:.1f}s")
    print(f"  Actors   : {counts['actors']}")
    print(f"  Commits  : {counts['commits']}")
    print(f"  Events   : {counts['events']}")
    print(f"  Repos    : {counts['repos']}")

    print()
    print(f"  Top {width} active non-bot users with most PRs and commits:")
    for item in report.top_active_users:
        print(f"    {item.username}: {item.pr_count} PRs, {item.commit_count} commits")

    print()
    print(f"  Top {width} repositories with most watch events:")
    for item in report.top_watched_repos:
        print(f"    {item.name}: {item.count} watch events")

    print()
    print(f"  Top {width} repositories with most commits:")
    for item in report.top_committed_repos:
        print(f"    {item.name}: {item.count} commits")

    if result.report_path:
        print()
        print(f"  Report saved to : {result.report_path}")
    if result.csv_paths:
        print(f"  CSVs ({len(result.csv_paths)})        : {args.csv_dir}/")
    print("=" * 60)

    return 0


# ── Subcommand: check ─────────────────────────────────────────────────────────

def cmd_check(args: argparse.Namespace) -> int:
    """Verify the data directory without loading anything."""
    _load_dotenv(args.env_file)
    _setup_logging(args.log_level)

    from gh_activity.pipeline import verify_data_path

    config = DEFAULT_CONFIG
    data_path = _resolve_data_path(args, config)

    try:
        paths = verify_data_path(data_path, config)
    except GhActivityError as exc:
        logger.error("Data path check failed: %s", exc)
        return 1

    print(f"\nData path OK: {data_path}")
    for source, path in paths.items():
        size = os.path.getsize(path)
        print(f"  ✓ {source:<8} {os.path.basename(path):<14} {size:>10} bytes")
    print()
    return 0


# ── Subcommand: export-graph ──────────────────────────────────────────────────

def cmd_export_graph(args: argparse.Namespace) -> int:
    """Load the dataset and write its NetworkX projection as GraphML."""
    _load_dotenv(args.env_file)
    _setup_logging(args.log_level)

    from gh_activity.graph.builder import build_graph_from_csv
    from gh_activity.graph.projection import export_graphml
    from gh_activity.pipeline import verify_data_path

    config = DEFAULT_CONFIG
    data_path = _resolve_data_path(args, config)

    try:
        verify_data_path(data_path, config)
        graph = build_graph_from_csv(data_path, config)
    except GhActivityError as exc:
        logger.error("Failed to load the entity graph: %s", exc)
        return 1

    G = export_graphml(graph, args.output, config)
    print(f"\nGraphML written to {args.output}: "
          f"{G.number_of_nodes()} nodes, {G.number_of_edges()} edges\n")
    return 0


# ── Argument parser ───────────────────────────────────────────────────────────

def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gh-activity",
        description=(
            "Rank repositories and users from exported platform activity CSVs.\n"
            "Reads GH_ACTIVITY_DATA_PATH from .env automatically."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Top 10 users / watched repos / committed repos
  gh-activity run --data-path ./data

  # Top 5, with a Markdown report and per-ranking CSVs
  gh-activity run --data-path ./data --top 5 --report-path out/report.md --csv-dir out/

  # Only check that the four CSV files are present
  gh-activity check --data-path ./data

  # Export the entity graph for Gephi / Cytoscape
  gh-activity export-graph --data-path ./data --output out/activity.graphml
        """,
    )

    # Global flags
    parser.add_argument(
        "--env-file",
        default=None,
        metavar="PATH",
        help="Path to .env file (default: auto-detect .env from the working directory up)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    def add_data_path(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--data-path",
            default=None,
            metavar="DIR",
            help="Directory with the GitHub event data CSVs "
                 f"(default: ${DEFAULT_CONFIG.data_path_env_var})",
        )

    # run
    p_run = subparsers.add_parser("run", help="Load data and print the three rankings")
    add_data_path(p_run)
    p_run.add_argument(
        "--top",
        type=_non_negative_int,
        default=None,
        metavar="N",
        help=f"Entries per ranking (default: {DEFAULT_CONFIG.report_width})",
    )
    p_run.add_argument(
        "--report-path",
        default=None,
        metavar="PATH",
        help="Also write a Markdown report to PATH",
    )
    p_run.add_argument(
        "--csv-dir",
        default=None,
        metavar="DIR",
        help="Also write one CSV per ranking into DIR",
    )
    p_run.set_defaults(func=cmd_run)

    # check
    p_check = subparsers.add_parser("check", help="Verify the data directory only")
    add_data_path(p_check)
    p_check.set_defaults(func=cmd_check)

    # export-graph
    p_export = subparsers.add_parser(
        "export-graph",
        help="Write the entity graph as GraphML",
    )
    add_data_path(p_export)
    p_export.add_argument(
        "--output", required=True, metavar="PATH",
        help="GraphML output path",
    )
    p_export.set_defaults(func=cmd_export_graph)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
