"""Shared helpers used across localpdf components."""
