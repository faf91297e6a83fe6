"""Integration tests for the GitHub Markdown mirror.

These tests run complete mirror passes against the in-memory fake GitHub
and a real vault directory, covering cleanup, pruning and convergence
across repeated runs.
"""
