"""Typer command-line interface for the validator onboarding wizard."""
