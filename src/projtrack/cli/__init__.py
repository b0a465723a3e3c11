"""CLI interface for projtrack."""
