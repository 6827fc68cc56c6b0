"""
gh_activity.metrics — Ranking computations over the entity graph.

Modules:
    ranking   — Generic bounded top-N selection with score + tie-break.
    activity  — The three activity rankings built on ranking.top_n().

All event type tags and bot-name patterns live in gh_activity.config.ActivityConfig.
"""
