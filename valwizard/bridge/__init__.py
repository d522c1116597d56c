"""Bridges to external systems: Ed25519 crypto and upstream HTTP."""
