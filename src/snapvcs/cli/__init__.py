"""Command-line interface for snapvcs."""
