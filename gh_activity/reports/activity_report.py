"""
gh_activity/reports/activity_report.py — Activity report assembly and export.

Turns the three rankings into named result lists and bundles them into an
ActivityReport:

    top_active_users     UserRankingItem(actor, pr_count, commit_count)
    top_watched_repos    RepoRankingItem(repo, count)   count = watch events
    top_committed_repos  RepoRankingItem(repo, count)   count = commits

Ordering is exactly the ranking order; nothing is re-sorted or deduplicated
here. The report can be exported as Markdown or as one pandas DataFrame /
CSV file per ranking.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

import pandas as pd

from gh_activity.config import DEFAULT_CONFIG, ActivityConfig
from gh_activity.graph.models import Actor, EntityGraph, Repo
from gh_activity.metrics.activity import (
    rank_active_users_by_pull_requests,
    rank_repos_by_commits,
    rank_repos_by_watch_events,
)
from gh_activity.metrics.ranking import RankedEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepoRankingItem:
    """A repository and its score in one of the repo rankings."""

    repo: Repo
    count: int

    @property
    def name(self) -> str:
        return self.repo.name


@dataclass(frozen=True)
class UserRankingItem:
    """An active user with their pull request and commit totals."""

    actor: Actor
    pr_count: int
    commit_count: int

    @property
    def username(self) -> str:
        return self.actor.username


@dataclass
class ActivityReport:
    """
    The three activity rankings plus context for presenting them.

    Fields:
        report_date:          ISO 8601 date the report was generated (UTC).
        width:                Requested ranking width n.
        entity_counts:        {'actors', 'commits', 'events', 'repos'} → count.
        top_active_users:     Active users by PRs, then commits.
        top_watched_repos:    Repos by watch events.
        top_committed_repos:  Repos by commits.
        data_path:            Directory the data was loaded from, if known.
    """

    report_date: str
    width: int
    entity_counts: dict[str, int]
    top_active_users: list[UserRankingItem] = field(default_factory=list)
    top_watched_repos: list[RepoRankingItem] = field(default_factory=list)
    top_committed_repos: list[RepoRankingItem] = field(default_factory=list)
    data_path: Optional[str] = None


def repo_items(entries: list[RankedEntry[Repo]]) -> list[RepoRankingItem]:
    return [RepoRankingItem(repo=e.item, count=e.score) for e in entries]


def user_items(entries: list[RankedEntry[Actor]]) -> list[UserRankingItem]:
    return [
        UserRankingItem(actor=e.item, pr_count=e.score, commit_count=e.tie_break or 0)
        for e in entries
    ]


def generate_activity_report(
    graph: EntityGraph,
    width: Optional[int] = None,
    config: ActivityConfig = DEFAULT_CONFIG,
    data_path: Optional[str] = None,
) -> ActivityReport:
    """
    Run the three rankings over ``graph`` and assemble the report.

    Args:
        graph:     Built EntityGraph.
        width:     Ranking width n (>= 0). Defaults to config.report_width.
        config:    ActivityConfig (event type tags, bot patterns, width).
        data_path: Optional source directory, recorded for presentation.

    Returns:
        ActivityReport whose lists hold min(width, population) entries each.

    Raises:
        ValueError: width is negative.
    """
    n = config.report_width if width is None else width

    report = ActivityReport(
        report_date=datetime.now(tz=timezone.utc).strftime("%Y-%m-%d"),
        width=n,
        entity_counts=graph.counts(),
        top_active_users=user_items(rank_active_users_by_pull_requests(graph, n, config)),
        top_watched_repos=repo_items(rank_repos_by_watch_events(graph, n, config)),
        top_committed_repos=repo_items(rank_repos_by_commits(graph, n)),
        data_path=data_path,
    )
    logger.info(
        "Activity report assembled (n=%d): %d users, %d watched repos, %d committed repos.",
        n,
        len(report.top_active_users),
        len(report.top_watched_repos),
        len(report.top_committed_repos),
    )
    return report


def report_to_dataframes(report: ActivityReport) -> dict[str, pd.DataFrame]:
    """
    Tabulate each ranking as a DataFrame, keeping ranking order.

    Returns:
        {
          'top_active_users':    columns rank, actor_id, username, pr_count, commit_count
          'top_watched_repos':   columns rank, repo_id, name, watch_events
          'top_committed_repos': columns rank, repo_id, name, commits
        }
    """
    users = pd.DataFrame(
        [
            {
                "rank": i,
                "actor_id": item.actor.id,
                "username": item.username,
                "pr_count": item.pr_count,
                "commit_count": item.commit_count,
            }
            for i, item in enumerate(report.top_active_users, start=1)
        ],
        columns=["rank", "actor_id", "username", "pr_count", "commit_count"],
    )
    watched = pd.DataFrame(
        [
            {"rank": i, "repo_id": item.repo.id, "name": item.name, "watch_events": item.count}
            for i, item in enumerate(report.top_watched_repos, start=1)
        ],
        columns=["rank", "repo_id", "name", "watch_events"],
    )
    committed = pd.DataFrame(
        [
            {"rank": i, "repo_id": item.repo.id, "name": item.name, "commits": item.count}
            for i, item in enumerate(report.top_committed_repos, start=1)
        ],
        columns=["rank", "repo_id", "name", "commits"],
    )
    return {
        "top_active_users": users,
        "top_watched_repos": watched,
        "top_committed_repos": committed,
    }


def export_report_csv(report: ActivityReport, output_dir: str) -> dict[str, str]:
    """
    Write one CSV per ranking to ``output_dir`` (created if missing).

    Returns:
        {ranking name: written file path}
    """
    os.makedirs(output_dir, exist_ok=True)
    paths: dict[str, str] = {}
    for name, df in report_to_dataframes(report).items():
        path = os.path.join(output_dir, f"{name}.csv")
        df.to_csv(path, index=False)
        paths[name] = path
    logger.info("Wrote %d ranking CSVs to: %s", len(paths), output_dir)
    return paths


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|")


def export_report_markdown(report: ActivityReport, output_path: Optional[str] = None) -> str:
    """
    Render the report as Markdown, optionally writing it to ``output_path``.

    Structure:
        # Activity Report
        **Date:** ... | **Top:** n

        ## Dataset          (entity counts)
        ## Most Active Users
        ## Most Watched Repositories
        ## Most Committed Repositories

    Returns:
        The Markdown document as a string.
    """
    lines: list[str] = [
        "# Activity Report",
        "",
        f"**Date:** {report.report_date} | **Top:** {report.width}",
        "",
    ]
    if report.data_path:
        lines += [f"**Data path:** `{report.data_path}`", ""]

    lines += [
        "## Dataset",
        "",
        "| Entity | Count |",
        "|--------|-------|",
    ]
    for entity, count in report.entity_counts.items():
        lines.append(f"| {entity.capitalize()} | {count} |")
    lines.append("")

    lines += [
        "## Most Active Users",
        "",
        "Non-bot users ranked by pull requests, ties broken by commits.",
        "",
        "| # | User | PRs | Commits |",
        "|---|------|-----|---------|",
    ]
    for i, item in enumerate(report.top_active_users, start=1):
        lines.append(
            f"| {i} | {_escape_cell(item.username)} | {item.pr_count} | {item.commit_count} |"
        )
    if not report.top_active_users:
        lines.append("| – | _no active users_ | – | – |")
    lines.append("")

    for title, column, items in (
        ("Most Watched Repositories", "Watch Events", report.top_watched_repos),
        ("Most Committed Repositories", "Commits", report.top_committed_repos),
    ):
        lines += [
            f"## {title}",
            "",
            f"| # | Repository | {column} |",
            "|---|------------|" + "-" * (len(column) + 2) + "|",
        ]
        for i, item in enumerate(items, start=1):
            lines.append(f"| {i} | {_escape_cell(item.name)} | {item.count} |")
        if not items:
            lines.append("| – | _no repositories_ | – |")
        lines.append("")

    markdown = "\n".join(lines)

    if output_path:
        parent = os.path.dirname(output_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as fh:
            fh.write(markdown)
        logger.info("Activity report written to: %s", output_path)

    return markdown
