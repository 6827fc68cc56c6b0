"""
gh_activity.reports — Activity report assembly.

Modules:
    activity_report — ActivityReport with the three named ranking lists,
                      plus Markdown and pandas/CSV exports.
"""
