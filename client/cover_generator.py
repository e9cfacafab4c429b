"""Cover generator component: form input, request lifecycle, view and download."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

from PIL import Image

from client.api import UNKNOWN_ERROR
from client.compositor import (
    CoverStyle,
    compose_cover,
    cover_filename,
    decode_data_uri,
    rasterize_png,
)
from client.state import RequestState, Status

logger = logging.getLogger(__name__)

FetchImage = Callable[[str], Awaitable[str]]

PLACEHOLDER_TEXT = "Your generated image will appear here"
LOADING_TEXT = "Generating your cover, please wait..."
DISPLAY_ERROR = "The generated image could not be displayed."


class ViewKind(str, Enum):
    PLACEHOLDER = "placeholder"
    PROGRESS = "progress"
    ERROR = "error"
    COVER = "cover"


@dataclass(frozen=True)
class View:
    """What the component shows for its current state."""

    kind: ViewKind
    message: str | None = None
    image: Image.Image | None = None


@dataclass(frozen=True)
class CoverDownload:
    filename: str
    data: bytes
    media_type: str = "image/png"


class CoverGenerator:
    """One cover-generation form and its result panel.

    Each instance owns its own request state; nothing is shared between
    instances. ``fetch_image`` takes the prompt and returns the image URL,
    raising with a readable message on failure.
    """

    def __init__(self, fetch_image: FetchImage, style: CoverStyle | None = None) -> None:
        self.prompt = ""
        self.displayed_prompt = ""
        self._fetch_image = fetch_image
        self._style = style or CoverStyle()
        self._state = RequestState.idle()
        self._composite: Image.Image | None = None

    @property
    def state(self) -> RequestState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._state.status is Status.LOADING

    @property
    def can_submit(self) -> bool:
        return bool(self.prompt.strip()) and not self.is_loading

    @property
    def can_download(self) -> bool:
        return self._current_composite() is not None

    async def submit(self) -> None:
        """Start a generation for the current input.

        Ignored when the input is blank or a request is already in flight.
        """

        if not self.can_submit:
            return

        prompt = self.prompt
        # Set before the first await so concurrent submits see the guard.
        self._state = RequestState.loading()
        self._composite = None
        self.displayed_prompt = prompt

        try:
            image_url = await self._fetch_image(prompt)
        except Exception as exc:
            message = str(exc) or UNKNOWN_ERROR
            logger.warning("Cover generation failed", extra={"error": message})
            self._state = RequestState.failure(message)
            return

        self._state = RequestState.success(image_url)
        logger.info("Cover generated", extra={"title": self.displayed_prompt})

    def render(self) -> View:
        status = self._state.status
        if status is Status.LOADING:
            return View(kind=ViewKind.PROGRESS, message=LOADING_TEXT)
        if status is Status.ERROR:
            return View(kind=ViewKind.ERROR, message=self._state.error)
        if status is Status.SUCCESS:
            composite = self._current_composite()
            if composite is None:
                return View(kind=ViewKind.ERROR, message=DISPLAY_ERROR)
            return View(kind=ViewKind.COVER, message=self.displayed_prompt, image=composite)
        return View(kind=ViewKind.PLACEHOLDER, message=PLACEHOLDER_TEXT)

    def download(self) -> CoverDownload | None:
        """Rasterize the displayed cover to a PNG; None unless a result is shown."""

        composite = self._current_composite()
        if composite is None:
            return None

        data = rasterize_png(composite)
        return CoverDownload(filename=cover_filename(self.displayed_prompt), data=data)

    def _current_composite(self) -> Image.Image | None:
        """Composite for a successful result; None when there is none to show."""

        if self._state.status is not Status.SUCCESS:
            return None
        if self._composite is None:
            try:
                self._composite = self._build_composite(self._state.image_url)
            except (ValueError, OSError):
                logger.exception("Generated image could not be decoded")
                return None
        return self._composite

    def _build_composite(self, image_url: str | None) -> Image.Image:
        if image_url is None:
            raise ValueError("Successful result carries no image URL")
        _, image_data = decode_data_uri(image_url)
        return compose_cover(image_data, self.displayed_prompt, self._style)
