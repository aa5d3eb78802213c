"""Saved calculations keyed by user and financial year."""
