"""PIL/Pillow compositing of the generated background and title overlay.

The composite mirrors what the cover view displays: the generated image
cover-fitted to a square canvas, a translucent black scrim, and the title
centered on top in white with a soft drop shadow.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
import re
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont, ImageOps

logger = logging.getLogger(__name__)

_DATA_URI = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)(?P<params>(?:;[\w.+-]+=[^;,]*)*);base64,(?P<payload>.*)$",
    re.DOTALL,
)

FILENAME_PREFIX_LENGTH = 20
FILENAME_SUFFIX = "-cover.png"


@dataclass(frozen=True)
class CoverStyle:
    """Rendering options for the cover composite."""

    size: int = 1024
    scrim_opacity: float = 0.3
    font_path: Path | None = None
    font_ratio: float = 0.07
    padding_ratio: float = 0.08
    text_color: tuple[int, int, int, int] = (255, 255, 255, 255)
    shadow_color: tuple[int, int, int, int] = (0, 0, 0, 204)


def decode_data_uri(uri: str) -> tuple[str, bytes]:
    """Split a base64 ``data:`` URI into its MIME type and raw bytes.

    Raises:
        ValueError: If the URI is not a base64 data URI.
    """

    match = _DATA_URI.match(uri)
    if match is None:
        raise ValueError("Not a base64 data URI")

    try:
        payload = base64.b64decode(match.group("payload"), validate=True)
    except binascii.Error as exc:
        raise ValueError("Data URI payload is not valid base64") from exc
    return match.group("mime"), payload


def cover_filename(title: str) -> str:
    """Suggested download name for a cover with the given title."""

    return f"{title[:FILENAME_PREFIX_LENGTH]}{FILENAME_SUFFIX}"


def compose_cover(image_data: bytes, title: str, style: CoverStyle) -> Image.Image:
    """Render background, scrim and centered title into one RGBA image."""

    size = (style.size, style.size)
    with Image.open(io.BytesIO(image_data)) as source:
        background = ImageOps.fit(
            source.convert("RGBA"), size, method=Image.Resampling.LANCZOS
        )

    # Transparent canvas so regions the source leaves empty stay empty.
    canvas = Image.new("RGBA", size, (0, 0, 0, 0))
    canvas.alpha_composite(background)

    scrim = Image.new("RGBA", size, (0, 0, 0, round(255 * style.scrim_opacity)))
    canvas = Image.alpha_composite(canvas, scrim)

    if title.strip():
        _draw_title(canvas, title.strip(), style)
    return canvas


def rasterize_png(image: Image.Image) -> bytes:
    """Encode a composite as PNG, keeping its alpha channel."""

    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def _draw_title(canvas: Image.Image, title: str, style: CoverStyle) -> None:
    width, height = canvas.size
    pad = int(width * style.padding_ratio)
    max_width = width - 2 * pad

    layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    font = _load_font(style, max(12, int(height * style.font_ratio)))
    spacing = max(4, int(getattr(font, "size", 12) * 0.25))

    text = "\n".join(_wrap(draw, title, font, max_width))
    left, top, right, bottom = draw.multiline_textbbox(
        (0, 0), text, font=font, spacing=spacing, align="center"
    )
    x = (width - (right - left)) // 2 - left
    y = (height - (bottom - top)) // 2 - top

    offset = max(2, width // 256)
    draw.multiline_text(
        (x + offset, y + offset),
        text,
        font=font,
        fill=style.shadow_color,
        spacing=spacing,
        align="center",
    )
    draw.multiline_text(
        (x, y), text, font=font, fill=style.text_color, spacing=spacing, align="center"
    )
    canvas.alpha_composite(layer)


def _wrap(
    draw: ImageDraw.ImageDraw,
    text: str,
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
    max_width: int,
) -> list[str]:
    """Greedy word wrap; words wider than a line are broken by character."""

    def fits(candidate: str) -> bool:
        return draw.textlength(candidate, font=font) <= max_width

    lines: list[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if fits(candidate):
            current = candidate
            continue

        if current:
            lines.append(current)
            current = ""

        # Titles without spaces (e.g. CJK) arrive as one long token.
        for char in word:
            if current and not fits(current + char):
                lines.append(current)
                current = ""
            current += char

    if current:
        lines.append(current)
    return lines


def _load_font(
    style: CoverStyle, size: int
) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    if style.font_path is not None:
        try:
            return ImageFont.truetype(str(style.font_path), size)
        except OSError:
            logger.warning(
                "Font could not be loaded; using default",
                extra={"font_path": str(style.font_path)},
            )
    return ImageFont.load_default(size=size)
