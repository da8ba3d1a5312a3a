# src/aura_share/db/__init__.py
"""Database configuration and utilities."""

from .session import Base, atomic, get_db

__all__ = ["Base", "atomic", "get_db"]
