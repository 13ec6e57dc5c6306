"""Command-line interface for the news feeds."""
