"""CLI subcommands of pacjump."""
