"""
SVG to PNG conversion.

CairoSVG rasterizes the markup; Pillow handles the contain-fit canvas and the
final PNG encoding.
"""

import asyncio
import io
import logging
from typing import Optional

from PIL import Image

logger = logging.getLogger(__name__)

PNG_COMPRESSION_LEVEL = 6
TRANSPARENT = (0, 0, 0, 0)


class SvgConversionError(Exception):
    """The SVG markup could not be rendered to PNG."""


def _render(svg_bytes: bytes, scale: float = 1.0) -> Image.Image:
    # cairosvg loads the native cairo library on import
    import cairosvg

    png = cairosvg.svg2png(bytestring=svg_bytes, scale=scale)
    image = Image.open(io.BytesIO(png))
    image.load()
    return image.convert("RGBA")


def _fit_scale(
    intrinsic_width: int,
    intrinsic_height: int,
    width: Optional[float],
    height: Optional[float],
) -> float:
    """Uniform scale factor that fits the image inside the requested box."""
    if width and height:
        return min(width / intrinsic_width, height / intrinsic_height)
    if width:
        return width / intrinsic_width
    return height / intrinsic_height


def render_svg_to_png(
    svg_string: str,
    width: Optional[float] = None,
    height: Optional[float] = None,
) -> bytes:
    """
    Rasterize SVG markup to PNG bytes.

    With both ``width`` and ``height`` the drawing is scaled to fit inside the
    box while keeping its aspect ratio, then centered on a fully transparent
    canvas of exactly that size. With only one dimension the drawing is scaled
    proportionally to it. With neither it is rendered at its intrinsic size.
    """
    svg_bytes = svg_string.encode("utf-8")
    image = _render(svg_bytes)

    if width or height:
        scale = _fit_scale(image.width, image.height, width, height)
        image = _render(svg_bytes, scale=scale)

        if width and height:
            canvas = Image.new("RGBA", (round(width), round(height)), TRANSPARENT)
            offset = (
                (canvas.width - image.width) // 2,
                (canvas.height - image.height) // 2,
            )
            canvas.paste(image, offset, image)
            image = canvas

    output = io.BytesIO()
    image.save(output, format="PNG", compress_level=PNG_COMPRESSION_LEVEL)
    return output.getvalue()


async def svg_to_png(
    svg_string: str,
    width: Optional[float] = None,
    height: Optional[float] = None,
) -> bytes:
    """
    Convert SVG markup to PNG bytes off the event loop.

    Raises:
        SvgConversionError: On malformed markup or any rendering failure.
    """
    try:
        return await asyncio.to_thread(render_svg_to_png, svg_string, width, height)
    except Exception as e:
        raise SvgConversionError(f"Failed to convert SVG to PNG: {str(e)}") from e
