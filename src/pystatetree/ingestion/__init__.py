"""Ingestion layer.

This package turns raw JSON documents (HTTP responses, streaming frames)
into node creations and value writes against a tree store.
"""

__all__: list[str] = []
