# src/aura_share/api/v1/__init__.py
"""Version 1 of the HTTP API."""
