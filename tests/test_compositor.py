import base64
import io

import pytest
from PIL import Image

from client.compositor import (
    CoverStyle,
    compose_cover,
    cover_filename,
    decode_data_uri,
    rasterize_png,
)


def test_decode_data_uri(png_bytes: bytes) -> None:
    uri = f"data:image/png;base64,{base64.b64encode(png_bytes).decode()}"

    mime_type, data = decode_data_uri(uri)

    assert mime_type == "image/png"
    assert data == png_bytes


@pytest.mark.parametrize(
    "uri",
    [
        "https://example.com/cover.png",
        "data:image/png,rawpayload",
        "data:image/png;base64,@@@",
    ],
)
def test_decode_data_uri_rejects_invalid(uri: str) -> None:
    with pytest.raises(ValueError):
        decode_data_uri(uri)


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("Async Patterns 101", "Async Patterns 101-cover.png"),
        ("SEO關鍵字研究系列 – Ep.6 – 進階策略與小撇步", "SEO關鍵字研究系列 – Ep.6 – -cover.png"),
        ("Exactly twenty chars", "Exactly twenty chars-cover.png"),
    ],
)
def test_cover_filename_uses_first_twenty_characters(title: str, expected: str) -> None:
    assert cover_filename(title) == expected


def test_compose_cover_fills_square_canvas(png_bytes: bytes) -> None:
    style = CoverStyle(size=96)

    cover = compose_cover(png_bytes, "A fairly long blog post title that must wrap", style)

    assert cover.mode == "RGBA"
    assert cover.size == (96, 96)
    # Opaque source fully covers the canvas.
    assert cover.getpixel((0, 0))[3] == 255


def test_compose_cover_applies_scrim(png_bytes: bytes) -> None:
    plain = compose_cover(png_bytes, "", CoverStyle(size=64, scrim_opacity=0.0))
    dimmed = compose_cover(png_bytes, "", CoverStyle(size=64, scrim_opacity=0.3))

    assert sum(dimmed.getpixel((1, 1))[:3]) < sum(plain.getpixel((1, 1))[:3])


def test_compose_cover_draws_title(png_bytes: bytes) -> None:
    style = CoverStyle(size=128)

    blank = compose_cover(png_bytes, "", style)
    titled = compose_cover(png_bytes, "Hello", style)

    assert blank.tobytes() != titled.tobytes()


def test_compose_cover_keeps_source_transparency() -> None:
    buffer = io.BytesIO()
    Image.new("RGBA", (32, 32), (0, 0, 0, 0)).save(buffer, format="PNG")

    cover = compose_cover(buffer.getvalue(), "", CoverStyle(size=32, scrim_opacity=0.0))

    assert cover.getpixel((5, 5))[3] == 0


def test_rasterize_png_round_trips_alpha(png_bytes: bytes) -> None:
    cover = compose_cover(png_bytes, "Title", CoverStyle(size=64))

    with Image.open(io.BytesIO(rasterize_png(cover))) as image:
        assert image.format == "PNG"
        assert image.mode == "RGBA"
        assert image.size == (64, 64)
