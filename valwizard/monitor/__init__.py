"""Terminal progress output."""
