"""Orchestration core: state machine, run context, hashing and errors."""
