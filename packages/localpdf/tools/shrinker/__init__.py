"""Shrink a document by rewriting and recompressing it."""
