"""Errors raised on the client side of the generation flow."""

from dataclasses import dataclass


@dataclass(eq=False)
class GenerationRequestError(Exception):
    """Raised when the generation endpoint cannot produce an image URL."""

    message: str
    status_code: int | None = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message
