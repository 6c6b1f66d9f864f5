"""Command line interface for localpdf."""
