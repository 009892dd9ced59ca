"""Schemas shared across routers."""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str


class ErrorResponse(BaseModel):
    """Envelope returned for every handled error."""

    success: bool = False
    status: int
    message: str
    errors: dict[str, list[str]] | None = None
