"""
gh_activity/graph/records.py — Positional record parsing.

Each source is a delimited-text file with a fixed column layout:

    actors.csv   id, username
    commits.csv  sha, message, event_id
    events.csv   id, type, actor_id, repo_id
    repos.csv    id, name

A record arrives already split into fields (by csv.reader or any other
splitter) and is turned into the matching entity. Id columns must be signed
base-10 64-bit integers; anything else raises MalformedRecord instead of
being coerced to zero. No other validation is performed: extra trailing
fields are ignored and free-text fields are taken verbatim.
"""

import re
from collections.abc import Sequence

from gh_activity.errors import MalformedRecord
from gh_activity.graph.models import Actor, Commit, Event, Repo

ACTORS = "actors"
COMMITS = "commits"
EVENTS = "events"
REPOS = "repos"

# Column names per source, in positional order.
SCHEMAS: dict[str, tuple[str, ...]] = {
    ACTORS: ("id", "username"),
    COMMITS: ("sha", "message", "event_id"),
    EVENTS: ("id", "type", "actor_id", "repo_id"),
    REPOS: ("id", "name"),
}

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_int64(value: str, source: str, field: str) -> int:
    """
    Parse a signed base-10 64-bit integer.

    Accepts an optional leading sign and ASCII digits only; no surrounding
    whitespace, underscores or other bases. Out-of-range values are rejected
    like malformed ones.

    Raises:
        MalformedRecord: value is not a valid int64 (record number unset,
                         the caller binds it).
    """
    if _INT_PATTERN.fullmatch(value) is None:
        raise MalformedRecord(source, None, field, value)
    number = int(value)
    if not INT64_MIN <= number <= INT64_MAX:
        raise MalformedRecord(source, None, field, value)
    return number


def _field(fields: Sequence[str], source: str, name: str) -> str:
    position = SCHEMAS[source].index(name)
    if position >= len(fields):
        raise MalformedRecord(source, None, name, None)
    return fields[position]


def is_header_row(source: str, fields: Sequence[str]) -> bool:
    """True when ``fields`` repeat the column names of ``source``."""
    names = tuple(f.strip().lower() for f in fields[: len(SCHEMAS[source])])
    return names == SCHEMAS[source]


def parse_actor(fields: Sequence[str]) -> Actor:
    return Actor(
        id=parse_int64(_field(fields, ACTORS, "id"), ACTORS, "id"),
        username=_field(fields, ACTORS, "username"),
    )


def parse_commit(fields: Sequence[str]) -> Commit:
    return Commit(
        sha=_field(fields, COMMITS, "sha"),
        message=_field(fields, COMMITS, "message"),
        event_id=parse_int64(_field(fields, COMMITS, "event_id"), COMMITS, "event_id"),
    )


def parse_event(fields: Sequence[str]) -> Event:
    return Event(
        id=parse_int64(_field(fields, EVENTS, "id"), EVENTS, "id"),
        type=_field(fields, EVENTS, "type"),
        actor_id=parse_int64(_field(fields, EVENTS, "actor_id"), EVENTS, "actor_id"),
        repo_id=parse_int64(_field(fields, EVENTS, "repo_id"), EVENTS, "repo_id"),
    )


def parse_repo(fields: Sequence[str]) -> Repo:
    return Repo(
        id=parse_int64(_field(fields, REPOS, "id"), REPOS, "id"),
        name=_field(fields, REPOS, "name"),
    )


PARSERS = {
    ACTORS: parse_actor,
    COMMITS: parse_commit,
    EVENTS: parse_event,
    REPOS: parse_repo,
}


def parse_record(source: str, fields: Sequence[str], record_number: int | None = None):
    """
    Parse one record of ``source`` into its entity.

    Args:
        source:        One of ACTORS, COMMITS, EVENTS, REPOS.
        fields:        The record's fields in positional order.
        record_number: 1-based position in the source, attached to any
                       MalformedRecord raised.

    Returns:
        Actor | Commit | Event | Repo

    Raises:
        MalformedRecord: a required field is missing or an id is not an int64.
        KeyError:        unknown source name.
    """
    parser = PARSERS[source]
    try:
        return parser(fields)
    except MalformedRecord as exc:
        if record_number is None:
            raise
        raise exc.at(record_number) from None
