"""HTTP client for the cover generation endpoint."""

from __future__ import annotations

import logging

import httpx

from client.exceptions import GenerationRequestError

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "http://127.0.0.1:8000/generate-image"
UNKNOWN_ERROR = "An unknown error occurred"


async def generate_cover_image(
    client: httpx.AsyncClient, prompt: str, *, url: str = DEFAULT_ENDPOINT
) -> str:
    """POST the prompt to the generation endpoint and return the image URL.

    Timeouts are whatever the supplied ``client`` is configured with.

    Raises:
        GenerationRequestError: carrying the endpoint's error text, or a
            generic message when the response body cannot be parsed.
    """

    try:
        response = await client.post(url, json={"prompt": prompt})
    except httpx.HTTPError as exc:
        logger.warning("Generation request failed", exc_info=exc)
        raise GenerationRequestError(str(exc) or UNKNOWN_ERROR) from exc

    if response.is_error:
        raise GenerationRequestError(
            _error_message(response), status_code=response.status_code
        )

    try:
        image_url = response.json()["imageUrl"]
    except (ValueError, KeyError, TypeError) as exc:
        logger.error("Malformed generation response", extra={"body": response.text[:200]})
        raise GenerationRequestError(UNKNOWN_ERROR) from exc

    if not isinstance(image_url, str) or not image_url:
        raise GenerationRequestError(UNKNOWN_ERROR)
    return image_url


def _error_message(response: httpx.Response) -> str:
    """Pull the ``error`` field out of a failed response, if there is one."""

    try:
        data = response.json()
    except ValueError:
        return UNKNOWN_ERROR

    if isinstance(data, dict):
        message = data.get("error")
        if isinstance(message, str) and message:
            return message
    return UNKNOWN_ERROR
