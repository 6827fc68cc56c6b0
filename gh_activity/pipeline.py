"""
gh_activity/pipeline.py — Single-call analysis orchestrator.

Provides run_analysis(), which runs the whole load-then-query sequence in
dependency order and returns the built graph together with the report:

    0. Preflight: data directory exists and holds all four sources
    1. Build the entity graph (actors → commits → events → repos)
    2. Rank users / watched repos / committed repos
    3. Optional Markdown and CSV exports

Usage:
    from gh_activity.pipeline import run_analysis
    result = run_analysis("/data/github-sample")
    for item in result.report.top_watched_repos:
        print(item.name, item.count)

The run is all-or-nothing: any ingestion error propagates and no report is
produced.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

from gh_activity.config import DEFAULT_CONFIG, ActivityConfig
from gh_activity.errors import SourceUnavailable
from gh_activity.graph.builder import build_graph_from_csv, source_paths
from gh_activity.graph.models import EntityGraph
from gh_activity.reports.activity_report import (
    ActivityReport,
    export_report_csv,
    export_report_markdown,
    generate_activity_report,
)

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Output of a single run_analysis() call."""

    graph: EntityGraph
    report: ActivityReport
    report_path: Optional[str] = None
    csv_paths: dict[str, str] = field(default_factory=dict)


def verify_data_path(data_path: str, config: ActivityConfig = DEFAULT_CONFIG) -> dict[str, str]:
    """
    Check that ``data_path`` is a directory holding every required source.

    Returns:
        {source name: file path} in load order.

    Raises:
        SourceUnavailable: data_path is empty or not a directory, or a
                           required file is missing.
    """
    if not data_path:
        raise SourceUnavailable("data path", None, "no data path given")
    if not os.path.isdir(data_path):
        raise SourceUnavailable("data path", data_path, "not a directory")

    paths = source_paths(data_path, config)
    for source, path in paths.items():
        if not os.path.isfile(path):
            raise SourceUnavailable(
                source, path, f"file {os.path.basename(path)} not found in data path"
            )
        logger.info("Found required data file: %s", os.path.basename(path))
    return paths


def run_analysis(
    data_path: str,
    width: Optional[int] = None,
    config: ActivityConfig = DEFAULT_CONFIG,
    report_path: Optional[str] = None,
    csv_dir: Optional[str] = None,
) -> AnalysisResult:
    """
    Load the dataset under ``data_path`` and produce the activity report.

    Args:
        data_path:   Directory with actors.csv, commits.csv, events.csv, repos.csv
                     (names configurable via config).
        width:       Ranking width n; defaults to config.report_width.
        config:      ActivityConfig instance.
        report_path: If set, write the Markdown report here.
        csv_dir:     If set, write one CSV per ranking into this directory.

    Returns:
        AnalysisResult with the graph, the report and any written paths.

    Raises:
        SourceUnavailable: preflight failed.
        IngestionFailure:  a source could not be read or held a malformed record.
        ValueError:        width is negative.
    """
    if width is not None and width < 0:
        raise ValueError(f"width must be >= 0, got {width}")

    verify_data_path(data_path, config)

    logger.info("Loading entity graph from data path...")
    graph = build_graph_from_csv(data_path, config)
    logger.info("Done loading the entity graph.")

    report = generate_activity_report(graph, width=width, config=config, data_path=data_path)
    result = AnalysisResult(graph=graph, report=report)

    if report_path:
        export_report_markdown(report, report_path)
        result.report_path = report_path
    if csv_dir:
        result.csv_paths = export_report_csv(report, csv_dir)

    return result
