"""Command-line shell around the report generator."""
