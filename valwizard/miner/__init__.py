"""Block zero proof-of-work."""
