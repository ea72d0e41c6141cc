"""
Static catalog of date activity templates.

Templates are loaded once from ``data/templates.json`` and shared read-only
across matching calls.
"""
