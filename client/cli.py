"""Command-line front end for the cover generator."""

from __future__ import annotations

import argparse
import asyncio
import functools
import logging
import pathlib
import re
import time

import httpx

from client.api import DEFAULT_ENDPOINT, generate_cover_image
from client.compositor import CoverStyle
from client.cover_generator import CoverGenerator, ViewKind

logger = logging.getLogger("cover_client")

_UNSAFE_FILENAME_CHARS = re.compile(r"[\\/:*?\"<>|\x00-\x1f]")


async def run_client(
    url: str,
    prompt: str,
    output_dir: pathlib.Path,
    style: CoverStyle,
    timeout: float,
) -> pathlib.Path | None:
    """Generate one cover and save it; returns the written path on success."""

    start = time.perf_counter()

    async with httpx.AsyncClient(timeout=timeout) as client:
        generator = CoverGenerator(
            functools.partial(generate_cover_image, client, url=url), style=style
        )
        generator.prompt = prompt
        logger.info("Submitting prompt (%d chars)", len(prompt))
        await generator.submit()

    view = generator.render()
    if view.kind is ViewKind.PLACEHOLDER:
        logger.error("Nothing to generate: the prompt is empty")
        return None
    if view.kind is ViewKind.ERROR:
        logger.error("Generation failed: %s", view.message)
        return None

    download = generator.download()
    if download is None:  # pragma: no cover - render reported success
        return None

    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / _UNSAFE_FILENAME_CHARS.sub("_", download.filename)
    path.write_bytes(download.data)
    logger.info(
        "Cover written to %s (%d bytes) in %.2fs",
        path,
        len(download.data),
        time.perf_counter() - start,
    )
    return path


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a blog post cover image.")
    parser.add_argument("--url", default=DEFAULT_ENDPOINT, help="Endpoint URL (default: %(default)s)")
    parser.add_argument("--prompt", required=True, help="Blog post title or topic.")
    parser.add_argument(
        "--output-dir", type=pathlib.Path, default=pathlib.Path("."), help="Where to save the PNG."
    )
    parser.add_argument("--size", type=int, default=1024, help="Cover edge length in pixels.")
    parser.add_argument("--font", type=pathlib.Path, help="Optional .ttf/.otf font for the title.")
    parser.add_argument(
        "--timeout", type=float, default=120.0, help="Seconds to wait for the endpoint."
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    style = CoverStyle(size=args.size, font_path=args.font)
    try:
        path = asyncio.run(
            run_client(args.url, args.prompt, args.output_dir, style, args.timeout)
        )
    except KeyboardInterrupt:  # pragma: no cover - manual usage only
        return 130
    return 0 if path is not None else 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
