"""Combine several documents into one."""
