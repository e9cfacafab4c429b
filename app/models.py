"""Pydantic models shared across application layers."""

from pydantic import BaseModel, Field


class GenerateImageRequest(BaseModel):
    """Incoming body for the generation endpoint."""

    prompt: str | None = Field(default=None, description="Blog post title or topic.")


class GenerateImageResponse(BaseModel):
    """Successful generation payload."""

    image_url: str = Field(serialization_alias="imageUrl")


class ErrorResponse(BaseModel):
    """Error body returned for every non-2xx response."""

    error: str
