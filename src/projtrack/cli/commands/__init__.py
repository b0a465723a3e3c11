"""CLI command groups for projtrack."""
