"""HTTP handlers for cover image generation."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.dependencies import get_image_provider
from app.exceptions import ProviderError, ProviderTransportError
from app.models import ErrorResponse, GenerateImageRequest, GenerateImageResponse
from app.services.image_provider import ImageProvider

logger = logging.getLogger(__name__)

PROMPT_REQUIRED = "Prompt is required"
GENERATION_FAILED = "Failed to generate image on the server."


async def generate_image(
    request: Request,
    provider: Annotated[ImageProvider, Depends(get_image_provider)],
) -> JSONResponse:
    """Turn a blog title into a cover background returned as a data URI."""

    body = await request.body()
    try:
        payload = GenerateImageRequest.model_validate_json(body or b"{}")
    except ValidationError:
        return _error(status.HTTP_400_BAD_REQUEST, PROMPT_REQUIRED)

    prompt = (payload.prompt or "").strip()
    if len(prompt) == 0:
        return _error(status.HTTP_400_BAD_REQUEST, PROMPT_REQUIRED)

    try:
        image = await provider.generate(prompt)
    except (ProviderError, ProviderTransportError) as exc:
        logger.error(
            "Error in image generation route",
            extra={
                "error_code": exc.code,
                "detail": exc.message,
                "provider_status": exc.status_code,
            },
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERATION_FAILED)

    logger.info(
        "Cover image delivered",
        extra={"client": _client_repr(request), "bytes": len(image.data)},
    )
    response = GenerateImageResponse(image_url=image.to_data_uri())
    return JSONResponse(response.model_dump(by_alias=True))


def _error(status_code: int, message: str) -> JSONResponse:
    """Build a structured error response."""

    return JSONResponse(
        ErrorResponse(error=message).model_dump(), status_code=status_code
    )


def _client_repr(request: Request) -> str:
    """Render the remote client for logging purposes."""

    client = request.client
    if client is None:
        return "unknown"
    return f"{client.host}:{client.port}"
