"""
gh_activity/graph/models.py — Entity types and the linked entity graph.

Four entity types mirror the four CSV extracts:
    Actor   — a platform user (or bot)
    Repo    — a repository
    Event   — one activity record: actor → repo, with optional commits
    Commit  — a commit pushed as part of exactly one event

Relationships are many-to-one by id (Event → Actor, Event → Repo,
Commit → Event). Actor and Repo additionally carry the denormalized list of
their events, and Event carries its commits. These back-references are
inverse indices set once by gh_activity.graph.builder, which constructs each
entity with its tuple already in place. All entities are frozen.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from gh_activity.config import DEFAULT_CONFIG, ActivityConfig


@dataclass(frozen=True)
class Commit:
    """A single commit. ``event_id`` is the push event it arrived with."""

    sha: str
    message: str
    event_id: int


@dataclass(frozen=True)
class Event:
    """
    One activity record.

    Fields:
        id:       Event id (unique).
        type:     Free-form type tag, e.g. 'PushEvent', 'WatchEvent'.
        actor_id: Id of the authoring Actor.
        repo_id:  Id of the targeted Repo.
        commits:  Commits attached to this event, in load order. Empty for
                  anything that is not a push.
    """

    id: int
    type: str
    actor_id: int
    repo_id: int
    commits: tuple[Commit, ...] = field(default=(), repr=False)

    def is_watch_event(self, config: ActivityConfig = DEFAULT_CONFIG) -> bool:
        return self.type == config.watch_event_type

    def is_pull_request_event(self, config: ActivityConfig = DEFAULT_CONFIG) -> bool:
        return self.type == config.pull_request_event_type

    def commit_count(self) -> int:
        return len(self.commits)


def _count_where(events: tuple[Event, ...], predicate: Callable[[Event], bool]) -> int:
    return sum(1 for event in events if predicate(event))


def _count_commits(events: tuple[Event, ...]) -> int:
    return sum(event.commit_count() for event in events)


@dataclass(frozen=True)
class Repo:
    """A repository and the events that targeted it."""

    id: int
    name: str
    events: tuple[Event, ...] = field(default=(), repr=False)

    def count_events_where(self, predicate: Callable[[Event], bool]) -> int:
        return _count_where(self.events, predicate)

    def count_commits(self) -> int:
        """Total commits across every event that targeted this repo."""
        return _count_commits(self.events)


@dataclass(frozen=True)
class Actor:
    """A platform user and the events they authored."""

    id: int
    username: str
    events: tuple[Event, ...] = field(default=(), repr=False)

    def is_active_user(self, config: ActivityConfig = DEFAULT_CONFIG) -> bool:
        """
        True unless the username looks automated.

        A name is treated as a bot when it ends with one of
        ``config.bot_suffixes`` or contains one of ``config.bot_infixes``.
        Anyone can put "bot" in their name, so this is a best-effort filter
        that keeps reports readable, not an identity check.
        """
        name = self.username
        if name.endswith(config.bot_suffixes):
            return False
        return not any(infix in name for infix in config.bot_infixes)

    def count_events_where(self, predicate: Callable[[Event], bool]) -> int:
        return _count_where(self.events, predicate)

    def count_commits(self) -> int:
        """Total commits across every event this actor authored."""
        return _count_commits(self.events)


@dataclass(frozen=True)
class EntityGraph:
    """
    Fully linked, read-only view over the four entity sets.

    Mappings are keyed by entity id (commit sha for commits) and iterate in
    load order. Built by gh_activity.graph.builder.build_entity_graph(); the
    builder hands out read-only mapping proxies so nothing can be added or
    removed after the build.
    """

    actors: Mapping[int, Actor]
    repos: Mapping[int, Repo]
    events: Mapping[int, Event]
    commits: Mapping[str, Commit]

    def counts(self) -> dict[str, int]:
        """Entity counts per type, in load order of the sources."""
        return {
            "actors": len(self.actors),
            "commits": len(self.commits),
            "events": len(self.events),
            "repos": len(self.repos),
        }
