"""Keyword batch search service: one API call per keyword, links appended to a flat file."""

__version__ = "0.1.0"
