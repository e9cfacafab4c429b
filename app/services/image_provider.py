"""Adapter for Gemini image generation."""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from app.config import Settings
from app.exceptions import ProviderError, ProviderTransportError

logger = logging.getLogger(__name__)

COVER_PROMPT_TEMPLATE = (
    "Create a professional and visually appealing blog post cover background image "
    'suitable for an article about "{topic}". The style should be modern, minimalist, '
    "and use a pleasing color palette. The image should have a clear area, perhaps with "
    "a subtle overlay or gradient, where text can be placed on top without being "
    "distracting. Do NOT include any text in the image itself."
)


@dataclass(frozen=True)
class GeneratedImage:
    """Raw image bytes returned by the provider."""

    data: bytes
    mime_type: str

    def to_data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


def build_cover_prompt(topic: str) -> str:
    """Wrap a blog topic in the fixed cover-image instructions."""

    return COVER_PROMPT_TEMPLATE.format(topic=topic)


def extract_first_image(parts: Iterable[Mapping[str, Any]]) -> GeneratedImage:
    """Return the first part carrying inline image data.

    Raises:
        ProviderError: If no part holds inline data or it cannot be decoded.
    """

    for part in parts:
        inline = part.get("inlineData") or part.get("inline_data")
        if not inline:
            continue

        mime_type = inline.get("mimeType") or inline.get("mime_type") or "image/png"
        try:
            data = base64.b64decode(inline.get("data", ""), validate=True)
        except (binascii.Error, TypeError, ValueError) as exc:
            raise ProviderError("Provider returned undecodable image data") from exc

        if not data:
            raise ProviderError("Provider returned an empty image payload")
        return GeneratedImage(data=data, mime_type=mime_type)

    raise ProviderError("API did not return image data.")


class ImageProvider:
    """Wrapper around Gemini's generateContent endpoint for image output."""

    def __init__(
        self, client: httpx.AsyncClient, settings: Settings, api_key: str | None
    ) -> None:
        self._client = client
        self._settings = settings
        self._api_key = api_key

    @property
    def endpoint(self) -> str:
        base = self._settings.gemini_base_url.rstrip("/")
        return f"{base}/models/{self._settings.image_model}:generateContent"

    async def generate(self, topic: str) -> GeneratedImage:
        """Generate a cover background for the supplied topic."""

        if not self._api_key:
            logger.error("Image provider credential is not configured")
            raise ProviderTransportError("Image provider credential is not configured")

        payload = {
            "contents": [{"parts": [{"text": build_cover_prompt(topic)}]}],
            "generationConfig": {"responseModalities": ["IMAGE"]},
        }

        headers = {
            "x-goog-api-key": self._api_key,
            "Content-Type": "application/json",
        }

        try:
            response = await self._client.post(
                self.endpoint,
                headers=headers,
                json=payload,
                timeout=self._settings.provider_timeout,
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.warning("Image generation timed out", exc_info=exc)
            raise ProviderTransportError("Image provider timed out") from exc
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Image generation failed",
                extra={
                    "status_code": exc.response.status_code,
                    "response_text": exc.response.text,
                },
            )
            raise ProviderTransportError(
                "Image provider returned an error",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            logger.exception("Unexpected image provider HTTP error")
            raise ProviderTransportError("Image provider request failed") from exc

        try:
            data = response.json()
        except ValueError as exc:
            logger.error("Image provider returned non-JSON body")
            raise ProviderTransportError("Invalid image provider response") from exc

        try:
            parts = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as exc:
            logger.error("Malformed image response", extra={"raw_response": data})
            raise ProviderError("API did not return image data.") from exc

        image = extract_first_image(parts)
        logger.info(
            "Image generated",
            extra={"mime_type": image.mime_type, "bytes": len(image.data)},
        )
        return image
