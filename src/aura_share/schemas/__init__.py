"""Pydantic schemas for the Aura Share API."""
