"""HTTP API for the news feeds."""
