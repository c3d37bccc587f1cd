"""Stat tracking domain: rule sets, play events, tracker state and box scores.

Pure code with no Flask imports. HTTP routes and socket handlers go
through ``flagstats.store`` to load, transform and persist the state.
"""
