"""Slab tax engine, regime comparison, suggestions and tax tables."""
