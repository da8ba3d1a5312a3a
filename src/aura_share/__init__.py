"""Aura Share: privacy-scoped lists, posts and moderation over a REST API."""

__version__ = "0.1.0"
