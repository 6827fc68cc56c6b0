"""
gh_activity — Activity analytics over exported version-control platform data.

Loads the four cross-referenced CSV extracts (actors, commits, events, repos)
into an in-memory entity graph and answers three fixed ranking reports:

- Repositories with the most watch events (gh_activity.metrics.activity)
- Repositories with the most commits (gh_activity.metrics.activity)
- Active, non-bot users with the most pull requests, then commits

Entry points: gh_activity.pipeline.run_analysis() and the ``gh-activity`` CLI.
"""

__version__ = "0.1.0"
