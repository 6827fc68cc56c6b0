"""
gh_activity/config.py — All tunable parameters for the activity analysis.

No file name, event type tag or bot-name pattern should be hardcoded in a
loader or metric module. Everything lives here so a dataset with different
naming is a single-file diff.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ActivityConfig:
    """
    Immutable configuration for loading and ranking activity data.

    All fields have documented defaults matching the reference dataset layout.
    Override by constructing a new ActivityConfig with the desired values.
    """

    # ── Reports ───────────────────────────────────────────────────────────────
    report_width: int = 10
    # Number of entries in each top-N report when the caller does not ask
    # for a specific width.

    # ── Source files ──────────────────────────────────────────────────────────
    actors_file: str = "actors.csv"
    # Columns: id, username

    commits_file: str = "commits.csv"
    # Columns: sha, message, event_id

    events_file: str = "events.csv"
    # Columns: id, type, actor_id, repo_id

    repos_file: str = "repos.csv"
    # Columns: id, name

    csv_encoding: str = "utf-8-sig"
    # Plain UTF-8 reads unchanged; a leading byte-order mark is dropped.

    skip_header_rows: bool = True
    # Skip the first row of a source when it repeats the column names
    # (e.g. "id,username"). Any other first row is parsed as data.

    # ── Event type tags ───────────────────────────────────────────────────────
    watch_event_type: str = "WatchEvent"
    # The platform's "star" action.

    pull_request_event_type: str = "PullRequestEvent"

    # ── Bot-name heuristic ────────────────────────────────────────────────────
    bot_suffixes: tuple[str, ...] = ("[bot]", "-bot", "Bot")
    bot_infixes: tuple[str, ...] = ("-bot-",)
    # Usernames ending with a suffix or containing an infix are treated as
    # automated. Case-sensitive and lossy: "foobot" and "botfoo" stay active.

    # ── Environment ───────────────────────────────────────────────────────────
    data_path_env_var: str = "GH_ACTIVITY_DATA_PATH"
    # Fallback for --data-path on the CLI (also read from a .env file).


# Singleton default — import this everywhere instead of constructing anew.
DEFAULT_CONFIG = ActivityConfig()
