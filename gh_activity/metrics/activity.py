"""
gh_activity/metrics/activity.py — The three activity rankings.

Each ranking is one call to gh_activity.metrics.ranking.top_n() with its own
candidate population, score and tie-break:

    rank_repos_by_watch_events          score = WatchEvents on the repo
    rank_repos_by_commits               score = commits across the repo's events
    rank_active_users_by_pull_requests  active actors only;
                                        score = PullRequestEvents authored,
                                        tie-break = commits authored

All functions are pure reads over a built EntityGraph and can be called any
number of times with identical results.
"""

import logging

from gh_activity.config import DEFAULT_CONFIG, ActivityConfig
from gh_activity.graph.models import Actor, EntityGraph, Repo
from gh_activity.metrics.ranking import RankedEntry, top_n

logger = logging.getLogger(__name__)


def rank_repos_by_watch_events(
    graph: EntityGraph,
    n: int,
    config: ActivityConfig = DEFAULT_CONFIG,
) -> list[RankedEntry[Repo]]:
    """Top n repos by number of events whose type is config.watch_event_type."""
    ranked = top_n(
        graph.repos.values(),
        score=lambda repo: repo.count_events_where(lambda e: e.is_watch_event(config)),
        n=n,
    )
    logger.debug("Ranked %d repos by watch events (n=%d).", len(ranked), n)
    return ranked


def rank_repos_by_commits(
    graph: EntityGraph,
    n: int,
) -> list[RankedEntry[Repo]]:
    """Top n repos by total commits across their events."""
    ranked = top_n(graph.repos.values(), score=Repo.count_commits, n=n)
    logger.debug("Ranked %d repos by commits (n=%d).", len(ranked), n)
    return ranked


def rank_active_users_by_pull_requests(
    graph: EntityGraph,
    n: int,
    config: ActivityConfig = DEFAULT_CONFIG,
) -> list[RankedEntry[Actor]]:
    """
    Top n active (non-bot) actors by pull request events, then commits.

    Actors failing Actor.is_active_user() are excluded from the candidate
    population entirely, however many pull requests they opened. Among actors
    with the same pull request count, the one with more commits ranks higher.
    """
    candidates = (a for a in graph.actors.values() if a.is_active_user(config))
    ranked = top_n(
        candidates,
        score=lambda actor: actor.count_events_where(
            lambda e: e.is_pull_request_event(config)
        ),
        n=n,
        tie_break=Actor.count_commits,
    )
    logger.debug("Ranked %d active users by pull requests (n=%d).", len(ranked), n)
    return ranked
