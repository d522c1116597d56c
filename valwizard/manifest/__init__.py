"""Account manifest assembly, persistence and verification."""
