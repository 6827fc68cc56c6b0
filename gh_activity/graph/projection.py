"""
gh_activity/graph/projection.py — NetworkX projection of the entity graph.

Exposes the EntityGraph as a NetworkX DiGraph for ad-hoc analysis or export
to GraphML (Gephi, Cytoscape, ...). The projection is a copy; mutating it
does not affect the EntityGraph.

Schema:
    Node ids   : 'actor:<id>', 'repo:<id>', 'event:<id>', 'commit:<sha>'
    Node types : Actor, Repo, Event, Commit   (node_type attribute)
    Edge types : authored_by  Event  → Actor
                 targets      Event  → Repo
                 part_of      Commit → Event  (edge_type attribute)

Edges are only added when both endpoints were loaded, so dangling ids in
the source data do not create placeholder nodes.
"""

import logging
import os

import networkx as nx

from gh_activity.config import DEFAULT_CONFIG, ActivityConfig
from gh_activity.graph.models import EntityGraph

logger = logging.getLogger(__name__)


def actor_node(actor_id: int) -> str:
    return f"actor:{actor_id}"


def repo_node(repo_id: int) -> str:
    return f"repo:{repo_id}"


def event_node(event_id: int) -> str:
    return f"event:{event_id}"


def commit_node(sha: str) -> str:
    return f"commit:{sha}"


def to_networkx(graph: EntityGraph, config: ActivityConfig = DEFAULT_CONFIG) -> nx.DiGraph:
    """
    Project ``graph`` onto a NetworkX DiGraph.

    Node attributes:
        Actor:  node_type, actor_id, username, active (bot heuristic result)
        Repo:   node_type, repo_id, name
        Event:  node_type, event_id, event_type
        Commit: node_type, sha, message

    Returns:
        G: nx.DiGraph following the schema in the module docstring.
    """
    G = nx.DiGraph()

    for actor in graph.actors.values():
        G.add_node(
            actor_node(actor.id),
            node_type="Actor",
            actor_id=actor.id,
            username=actor.username,
            active=actor.is_active_user(config),
        )
    for repo in graph.repos.values():
        G.add_node(repo_node(repo.id), node_type="Repo", repo_id=repo.id, name=repo.name)

    for event in graph.events.values():
        node = event_node(event.id)
        G.add_node(node, node_type="Event", event_id=event.id, event_type=event.type)
        if event.actor_id in graph.actors:
            G.add_edge(node, actor_node(event.actor_id), edge_type="authored_by")
        if event.repo_id in graph.repos:
            G.add_edge(node, repo_node(event.repo_id), edge_type="targets")

    for commit in graph.commits.values():
        node = commit_node(commit.sha)
        G.add_node(node, node_type="Commit", sha=commit.sha, message=commit.message)
        if commit.event_id in graph.events:
            G.add_edge(node, event_node(commit.event_id), edge_type="part_of")

    logger.info(
        "NetworkX projection complete: %d nodes, %d edges.",
        G.number_of_nodes(),
        G.number_of_edges(),
    )
    return G


def export_graphml(
    graph: EntityGraph,
    output_path: str,
    config: ActivityConfig = DEFAULT_CONFIG,
) -> nx.DiGraph:
    """Write the NetworkX projection of ``graph`` to GraphML and return it."""
    G = to_networkx(graph, config)
    parent = os.path.dirname(output_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    nx.write_graphml(G, output_path)
    logger.info("GraphML written to: %s", output_path)
    return G
