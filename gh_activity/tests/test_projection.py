"""
gh_activity/tests/test_projection.py — Tests for the NetworkX projection.
"""

import networkx as nx

from gh_activity.graph.builder import build_entity_graph
from gh_activity.graph.projection import export_graphml, to_networkx


def _nodes_of_type(G, node_type):
    return [n for n, d in G.nodes(data=True) if d.get("node_type") == node_type]


def _edges_of_type(G, edge_type):
    return [(u, v) for u, v, d in G.edges(data=True) if d.get("edge_type") == edge_type]


class TestToNetworkx:

    def test_node_counts_by_type(self, sample_graph):
        G = to_networkx(sample_graph)
        assert isinstance(G, nx.DiGraph)
        assert len(_nodes_of_type(G, "Actor")) == 4
        assert len(_nodes_of_type(G, "Repo")) == 3
        assert len(_nodes_of_type(G, "Event")) == 25
        assert len(_nodes_of_type(G, "Commit")) == 5
        assert G.number_of_nodes() == 37

    def test_edge_counts_by_type(self, sample_graph):
        G = to_networkx(sample_graph)
        assert len(_edges_of_type(G, "authored_by")) == 25
        assert len(_edges_of_type(G, "targets")) == 25
        assert len(_edges_of_type(G, "part_of")) == 5
        assert G.number_of_edges() == 55

    def test_node_attributes(self, sample_graph):
        G = to_networkx(sample_graph)
        assert G.nodes["actor:3"]["username"] == "ci[bot]"
        assert G.nodes["actor:3"]["active"] is False
        assert G.nodes["actor:1"]["active"] is True
        assert G.nodes["repo:20"]["name"] == "octo/beta"
        assert G.nodes["event:104"]["event_type"] == "PushEvent"
        assert G.nodes["commit:c2"]["message"] == "Add parser, fix tests"

    def test_edge_directions(self, sample_graph):
        G = to_networkx(sample_graph)
        assert G.has_edge("event:305", "actor:1")
        assert G.has_edge("event:305", "repo:30")
        assert G.has_edge("commit:c4", "event:305")
        assert not G.has_edge("actor:1", "event:305")

    def test_dangling_ids_create_no_edges_or_placeholders(self):
        graph = build_entity_graph(
            [["1", "alice"]],
            [["s1", "orphan", "99"]],
            [["5", "PushEvent", "1", "42"]],
            [],
        )
        G = to_networkx(graph)
        assert G.number_of_nodes() == 3
        assert _edges_of_type(G, "authored_by") == [("event:5", "actor:1")]
        assert _edges_of_type(G, "targets") == []
        assert _edges_of_type(G, "part_of") == []

    def test_projection_is_a_copy(self, sample_graph):
        G = to_networkx(sample_graph)
        G.remove_node("actor:1")
        assert 1 in sample_graph.actors
        assert len(sample_graph.actors[1].events) == 5


def test_export_graphml_round_trip(sample_graph, tmp_path):
    path = tmp_path / "out" / "activity.graphml"
    G = export_graphml(sample_graph, str(path))
    assert path.is_file()

    loaded = nx.read_graphml(str(path))
    assert loaded.number_of_nodes() == G.number_of_nodes()
    assert loaded.number_of_edges() == G.number_of_edges()
    assert loaded.nodes["repo:10"]["name"] == "octo/alpha"
    assert loaded.nodes["actor:2"]["node_type"] == "Actor"
