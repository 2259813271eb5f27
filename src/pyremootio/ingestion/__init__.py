"""Ingestion layer.

Translates what the transport receives into typed protocol events.
"""

__all__: list[str] = []
