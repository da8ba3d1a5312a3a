# src/aura_share/schemas/common.py
"""Small response shapes shared across endpoints."""

from pydantic import BaseModel


class SuccessResponse(BaseModel):
    """Acknowledgement for mutations that return no entity."""

    success: bool = True
    message: str | None = None


class ChangedResponse(BaseModel):
    """Result of an idempotent toggle such as like or save."""

    success: bool = True
    changed: bool
