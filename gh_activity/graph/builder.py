"""
gh_activity/graph/builder.py — Entity graph construction.

Builds the linked EntityGraph from the four record streams. The passes run in
a fixed order because each one leaves a pending inverse index for the next:

    1. actors   — Actor entities, no links yet
    2. commits  — Commit entities + pending map  event_id → [Commit]
    3. events   — Event entities take their commits from the pending map;
                  pending maps repo_id → [Event] and actor_id → [Event] are
                  filled, and actors are rebuilt with their events
    4. repos    — Repo entities take their events from the repo pending map

Pending maps receive every record as it is read, so a commit listed under
two events (the same sha pushed to a repo and its fork) belongs to both,
even though the commits mapping keeps only the last row for that sha.

Running the passes in any other order leaves back-references empty for
entities that only know their dependents by id. Entities are frozen, so each
one is created (or replaced) with its back-reference tuple already set.

Sources are consumed one at a time. A streamed source (e.g. the generator
returned by read_csv_records) is closed when its pass ends, whether it ends
normally or by error, before the next source is touched.
"""

import csv
import logging
import os
from collections import defaultdict
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import replace
from types import MappingProxyType

from gh_activity.config import DEFAULT_CONFIG, ActivityConfig
from gh_activity.errors import IngestionFailure, MalformedRecord, SourceUnavailable
from gh_activity.graph.models import Actor, Commit, EntityGraph, Event, Repo
from gh_activity.graph.records import (
    ACTORS,
    COMMITS,
    EVENTS,
    REPOS,
    is_header_row,
    parse_record,
)

logger = logging.getLogger(__name__)

Records = Iterable[Sequence[str]]


def source_paths(data_path: str, config: ActivityConfig = DEFAULT_CONFIG) -> dict[str, str]:
    """Map each source name to its file under ``data_path``, in load order."""
    return {
        ACTORS: os.path.join(data_path, config.actors_file),
        COMMITS: os.path.join(data_path, config.commits_file),
        EVENTS: os.path.join(data_path, config.events_file),
        REPOS: os.path.join(data_path, config.repos_file),
    }


def read_csv_records(
    path: str,
    source: str,
    encoding: str = DEFAULT_CONFIG.csv_encoding,
) -> Iterator[list[str]]:
    """
    Lazily yield the rows of one CSV source.

    The file is opened on the first ``next()`` and closed when the generator
    is exhausted or closed.

    Raises:
        SourceUnavailable: the file cannot be opened, decoded or parsed as CSV.
    """
    try:
        with open(path, newline="", encoding=encoding) as fh:
            reader = csv.reader(fh)
            try:
                yield from reader
            except (csv.Error, UnicodeDecodeError) as exc:
                raise SourceUnavailable(
                    source, path, f"read failed at line {reader.line_num}: {exc}"
                ) from exc
    except OSError as exc:
        if isinstance(exc, SourceUnavailable):
            raise
        raise SourceUnavailable(source, path, exc.strerror or str(exc)) from exc


def _load_source(
    source: str,
    records: Records,
    handle: Callable[[object], None],
    config: ActivityConfig,
) -> int:
    """
    Parse every record of one source and pass each entity to ``handle``.

    Returns the number of entities parsed. The record iterator is closed on
    every exit path.
    """
    logger.info("Started loading %s", source)
    iterator = iter(records)
    loaded = 0
    try:
        for record_number, fields in enumerate(iterator, start=1):
            if record_number == 1 and config.skip_header_rows and is_header_row(source, fields):
                logger.debug("Skipping header row of %s: %s", source, list(fields))
                continue
            if not fields:
                # csv.reader yields [] for blank lines.
                continue
            handle(parse_record(source, fields, record_number))
            loaded += 1
    finally:
        close = getattr(iterator, "close", None)
        if close is not None:
            close()
    logger.info("Done loading %s: %d records", source, loaded)
    return loaded


def _store(mapping: dict, key, entity, source: str, duplicates: dict[str, int]) -> None:
    # Last write wins; the dataset is assumed internally consistent.
    if key in mapping:
        duplicates[source] += 1
    mapping[key] = entity


def build_entity_graph(
    actor_records: Records,
    commit_records: Records,
    event_records: Records,
    repo_records: Records,
    config: ActivityConfig = DEFAULT_CONFIG,
) -> EntityGraph:
    """
    Build the fully linked EntityGraph from four record streams.

    Args:
        actor_records:  Rows of [id, username].
        commit_records: Rows of [sha, message, event_id].
        event_records:  Rows of [id, type, actor_id, repo_id].
        repo_records:   Rows of [id, name].
        config:         ActivityConfig. Uses config.skip_header_rows.

    Returns:
        EntityGraph with every back-reference populated.

    Raises:
        IngestionFailure: wrapping the first MalformedRecord or
                          SourceUnavailable; no partial graph is returned.

    Notes:
        - Re-inserting an id overwrites the earlier entity (last write wins,
          first position kept). Overwrites are counted and logged. The
          back-references still see every row, so a sha listed under two
          events is attached to both.
        - Commits whose event never appears, and events whose actor or repo
          never appears, are kept but unreachable from that side. They are
          counted and logged at WARNING.
    """
    actors: dict[int, Actor] = {}
    commits: dict[str, Commit] = {}
    events: dict[int, Event] = {}
    repos: dict[int, Repo] = {}
    duplicates: dict[str, int] = defaultdict(int)

    def run_pass(source: str, records: Records, handle: Callable[[object], None]) -> None:
        try:
            _load_source(source, records, handle, config)
        except (MalformedRecord, SourceUnavailable) as exc:
            logger.error("Loading %s failed: %s", source, exc)
            raise IngestionFailure(source, exc) from exc

    # ── Pass 1: actors ────────────────────────────────────────────────────────
    run_pass(
        ACTORS, actor_records,
        lambda actor: _store(actors, actor.id, actor, ACTORS, duplicates),
    )

    # ── Pass 2: commits → pending event_id → [Commit] ─────────────────────────
    pending_event_commits: dict[int, list[Commit]] = defaultdict(list)

    def handle_commit(commit: Commit) -> None:
        pending_event_commits[commit.event_id].append(commit)
        _store(commits, commit.sha, commit, COMMITS, duplicates)

    run_pass(COMMITS, commit_records, handle_commit)

    # ── Pass 3: events consume pending commits ────────────────────────────────
    pending_repo_events: dict[int, list[Event]] = defaultdict(list)
    pending_actor_events: dict[int, list[Event]] = defaultdict(list)

    def handle_event(event: Event) -> None:
        event = replace(event, commits=tuple(pending_event_commits.get(event.id, ())))
        pending_repo_events[event.repo_id].append(event)
        pending_actor_events[event.actor_id].append(event)
        _store(events, event.id, event, EVENTS, duplicates)

    run_pass(EVENTS, event_records, handle_event)

    for actor_id, actor in actors.items():
        actors[actor_id] = replace(actor, events=tuple(pending_actor_events.get(actor_id, ())))

    # ── Pass 4: repos consume pending events ──────────────────────────────────
    def handle_repo(repo: Repo) -> None:
        repo = replace(repo, events=tuple(pending_repo_events.get(repo.id, ())))
        _store(repos, repo.id, repo, REPOS, duplicates)

    run_pass(REPOS, repo_records, handle_repo)

    _log_integrity(
        duplicates,
        orphan_commits=sum(
            len(c) for event_id, c in pending_event_commits.items() if event_id not in events
        ),
        orphan_actor_events=sum(
            len(e) for actor_id, e in pending_actor_events.items() if actor_id not in actors
        ),
        orphan_repo_events=sum(
            len(e) for repo_id, e in pending_repo_events.items() if repo_id not in repos
        ),
    )

    graph = EntityGraph(
        actors=MappingProxyType(actors),
        repos=MappingProxyType(repos),
        events=MappingProxyType(events),
        commits=MappingProxyType(commits),
    )
    counts = graph.counts()
    logger.info(
        "Entity graph complete: %d actors, %d commits, %d events, %d repos.",
        counts["actors"], counts["commits"], counts["events"], counts["repos"],
    )
    return graph


def _log_integrity(
    duplicates: dict[str, int],
    orphan_commits: int,
    orphan_actor_events: int,
    orphan_repo_events: int,
) -> None:
    for source, count in duplicates.items():
        logger.warning("%d duplicate ids in %s; later records replaced earlier ones.", count, source)
    if orphan_commits:
        logger.warning("%d commits reference events that were never loaded.", orphan_commits)
    if orphan_actor_events:
        logger.warning("%d events reference actors that were never loaded.", orphan_actor_events)
    if orphan_repo_events:
        logger.warning("%d events reference repos that were never loaded.", orphan_repo_events)


def build_graph_from_csv(
    data_path: str,
    config: ActivityConfig = DEFAULT_CONFIG,
) -> EntityGraph:
    """
    Build the EntityGraph from the four CSV files under ``data_path``.

    File names come from config (actors.csv, commits.csv, events.csv,
    repos.csv by default). Each file is opened only when its pass starts and
    closed before the next one is opened.

    Raises:
        IngestionFailure: a file is missing/unreadable or holds a malformed record.
    """
    paths = source_paths(data_path, config)
    logger.info("Loading entity graph from: %s", data_path)
    return build_entity_graph(
        read_csv_records(paths[ACTORS], ACTORS, config.csv_encoding),
        read_csv_records(paths[COMMITS], COMMITS, config.csv_encoding),
        read_csv_records(paths[EVENTS], EVENTS, config.csv_encoding),
        read_csv_records(paths[REPOS], REPOS, config.csv_encoding),
        config=config,
    )
