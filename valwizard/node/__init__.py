"""Node home files: app config, genesis sourcing and node yaml."""
