"""
gh_activity/tests/conftest.py — Shared pytest fixtures for the gh_activity test suite.

The sample dataset is small enough to check by hand and covers every ranking
scenario:

    repo 10 'octo/alpha'  3 WatchEvents, 2 PushEvents (4 commits)
    repo 20 'octo/beta'   5 WatchEvents
    repo 30 'octo/gamma'  14 PullRequestEvents, 1 PushEvent (1 commit)

    actor 1 'alice'    2 PRs, 4 commits
    actor 2 'bob'      2 PRs, 1 commit
    actor 3 'ci[bot]'  10 PRs, 0 commits  (excluded from the user ranking)
    actor 4 'carol'    0 PRs, 0 commits   (watches only)

Fixtures:
    sample_records  — dict of the four record lists (no header rows).
    sample_graph    — EntityGraph built from sample_records.
    dataset_dir     — tmp directory with the four CSVs (with header rows).
    make_dataset    — factory for dataset variants (override any source, header=False).
"""

import csv
import os

import pytest

from gh_activity.graph.builder import build_entity_graph

ACTOR_ROWS = [
    ["1", "alice"],
    ["2", "bob"],
    ["3", "ci[bot]"],
    ["4", "carol"],
]

REPO_ROWS = [
    ["10", "octo/alpha"],
    ["20", "octo/beta"],
    ["30", "octo/gamma"],
]

EVENT_ROWS = (
    [
        ["101", "WatchEvent", "1", "10"],
        ["102", "WatchEvent", "2", "10"],
        ["103", "WatchEvent", "4", "10"],
        ["104", "PushEvent", "1", "10"],
        ["105", "PushEvent", "2", "10"],
    ]
    + [[str(200 + i), "WatchEvent", "4", "20"] for i in range(1, 6)]
    + [
        ["301", "PullRequestEvent", "1", "30"],
        ["302", "PullRequestEvent", "1", "30"],
        ["303", "PullRequestEvent", "2", "30"],
        ["304", "PullRequestEvent", "2", "30"],
        ["305", "PushEvent", "1", "30"],
    ]
    + [[str(400 + i), "PullRequestEvent", "3", "30"] for i in range(1, 11)]
)

COMMIT_ROWS = [
    ["c1", "Initial commit", "104"],
    ["c2", "Add parser, fix tests", "104"],
    ["c3", "Bump version", "104"],
    ["c4", "Fix typo", "305"],
    ["c5", "Merge branch 'main'", "105"],
]

HEADERS = {
    "actors": ["id", "username"],
    "commits": ["sha", "message", "event_id"],
    "events": ["id", "type", "actor_id", "repo_id"],
    "repos": ["id", "name"],
}


def write_dataset(
    directory,
    actors=ACTOR_ROWS,
    commits=COMMIT_ROWS,
    events=EVENT_ROWS,
    repos=REPO_ROWS,
    header: bool = True,
) -> str:
    """Write the four CSV sources into ``directory`` and return its path."""
    directory = str(directory)
    os.makedirs(directory, exist_ok=True)
    for name, rows in (
        ("actors", actors),
        ("commits", commits),
        ("events", events),
        ("repos", repos),
    ):
        with open(os.path.join(directory, f"{name}.csv"), "w", newline="", encoding="utf-8") as fh:
            writer = csv.writer(fh)
            if header:
                writer.writerow(HEADERS[name])
            writer.writerows(rows)
    return directory


@pytest.fixture
def sample_records() -> dict[str, list[list[str]]]:
    return {
        "actors": [list(r) for r in ACTOR_ROWS],
        "commits": [list(r) for r in COMMIT_ROWS],
        "events": [list(r) for r in EVENT_ROWS],
        "repos": [list(r) for r in REPO_ROWS],
    }


@pytest.fixture
def sample_graph(sample_records):
    """EntityGraph over the sample dataset, built from in-memory records."""
    return build_entity_graph(
        sample_records["actors"],
        sample_records["commits"],
        sample_records["events"],
        sample_records["repos"],
    )


@pytest.fixture
def dataset_dir(tmp_path) -> str:
    """Directory holding actors.csv, commits.csv, events.csv, repos.csv with headers."""
    return write_dataset(tmp_path / "data")


@pytest.fixture
def make_dataset(tmp_path):
    """Factory writing a variant dataset: make_dataset(events=[...], header=False)."""
    created = []

    def _make(**overrides) -> str:
        created.append(None)
        return write_dataset(tmp_path / f"dataset_{len(created)}", **overrides)

    return _make
