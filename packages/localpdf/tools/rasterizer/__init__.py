"""Render every page of a document to images."""
