"""Bundled test fixtures (genesis blob used by ``--ci`` runs)."""
