"""Dependency providers for the FastAPI application."""

import httpx
from fastapi import Depends
from starlette.requests import HTTPConnection

from app.config import Settings, get_settings
from app.services.image_provider import ImageProvider


async def get_http_client(connection: HTTPConnection) -> httpx.AsyncClient:
    """Retrieve the shared AsyncClient from application state."""

    return connection.app.state.http_client  # type: ignore[return-value]


def get_api_key(settings: Settings = Depends(get_settings)) -> str | None:
    """Read the provider credential from process configuration."""

    return settings.gemini_api_key


async def get_image_provider(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
    api_key: str | None = Depends(get_api_key),
) -> ImageProvider:
    """Dependency provider for ImageProvider."""

    return ImageProvider(client=client, settings=settings, api_key=api_key)
