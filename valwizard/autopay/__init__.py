"""Autopay instruction parsing, script building and batch signing."""
