"""
gh_activity.graph — Entity graph construction layer.

Modules:
    models      — Actor, Repo, Event, Commit and the linked EntityGraph.
    records     — Positional CSV record parsing with strict int64 ids.
    builder     — Four-pass ingestion (actors → commits → events → repos).
    projection  — NetworkX DiGraph projection and GraphML export.

Back-references (Actor.events, Repo.events, Event.commits) are inverse
indices built once during ingestion; the graph is read-only afterwards.
"""
