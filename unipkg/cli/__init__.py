"""Command line interface for unipkg."""
