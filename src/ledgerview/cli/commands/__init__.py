"""CLI commands for ledgerview."""
