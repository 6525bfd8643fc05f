"""Command-line interface for eb-deploy."""
