"""Image preview tier: Pillow decode, bounded downscale, half-block text art.

Each character cell carries two vertically stacked pixels drawn with the
upper-half-block glyph, foreground for the top pixel and background for the
bottom one, using 24-bit colour escapes.
"""

from __future__ import annotations

import io

from PIL import Image, UnidentifiedImageError

from ..errors import DecodeError
from ..storage.backend import StorageService

IMAGE_MAX_BYTES = 5 * 1024 * 1024
MAX_CELL_COLUMNS = 260
MAX_CELL_ROWS = 80
ALPHA_VISIBLE_MIN = 128
UPPER_HALF_BLOCK = "▀"
LOWER_HALF_BLOCK = "▄"
RESET = "\033[0m"


def image_too_large_message(size: int) -> str:
    return (
        f"[Image too large to preview: {size / (1024 * 1024):.1f} MB]\n\n"
        "Use a dedicated image viewer for files > 5MB"
    )


def fit_dimensions(width: int, height: int, max_width: int, max_height: int) -> tuple[int, int]:
    """Scale ``width``x``height`` into the bounding box, never upscaling."""
    if width <= 0 or height <= 0:
        return 0, 0
    scale = min(max_width / width, max_height / height, 1.0)
    return max(1, int(width * scale)), max(1, int(height * scale))


def cell_grid(viewport_width: int, viewport_height: int) -> tuple[int, int]:
    """Return the ``(columns, rows)`` cell budget for an image preview."""
    columns = MAX_CELL_COLUMNS if viewport_width <= 0 else min(MAX_CELL_COLUMNS, viewport_width)
    rows = MAX_CELL_ROWS if viewport_height <= 0 else min(MAX_CELL_ROWS, viewport_height)
    return max(1, columns), max(1, rows)


def _fg(rgb: tuple[int, int, int]) -> str:
    return f"\033[38;2;{rgb[0]};{rgb[1]};{rgb[2]}m"


def _bg(rgb: tuple[int, int, int]) -> str:
    return f"\033[48;2;{rgb[0]};{rgb[1]};{rgb[2]}m"


def image_to_text_art(image: Image.Image) -> str:
    """Render an RGBA image two pixel rows per text line."""
    rgba = image.convert("RGBA")
    width, height = rgba.size
    pixels = rgba.load()
    lines: list[str] = []
    for y in range(0, height, 2):
        out: list[str] = []
        for x in range(width):
            top = pixels[x, y]
            bottom = pixels[x, y + 1] if y + 1 < height else (0, 0, 0, 0)
            top_visible = top[3] >= ALPHA_VISIBLE_MIN
            bottom_visible = bottom[3] >= ALPHA_VISIBLE_MIN
            if top_visible and bottom_visible:
                out.append(_fg(top[:3]) + _bg(bottom[:3]) + UPPER_HALF_BLOCK)
            elif top_visible:
                out.append(_fg(top[:3]) + "\033[49m" + UPPER_HALF_BLOCK)
            elif bottom_visible:
                out.append(_fg(bottom[:3]) + "\033[49m" + LOWER_HALF_BLOCK)
            else:
                out.append(RESET + " ")
        out.append(RESET)
        lines.append("".join(out))
    return "\n".join(lines)


def decode_image(data: bytes) -> Image.Image:
    """Decode ``data`` fully, raising ``DecodeError`` for any failure."""
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError, SyntaxError) as exc:
        raise DecodeError(f"failed to decode image: {exc}") from exc
    return image


def render_image_preview(
    storage: StorageService,
    path: str,
    size: int,
    viewport_width: int = 0,
    viewport_height: int = 0,
) -> tuple[str, bool]:
    """Return ``(text, is_notice)``; raises ``DecodeError`` on bad image data."""
    if size > IMAGE_MAX_BYTES:
        return image_too_large_message(size), True

    image = decode_image(storage.read_file(path, 0, size))
    original_width, original_height = image.size
    image_format = (image.format or "unknown").lower()

    columns, rows = cell_grid(viewport_width, viewport_height)
    target_width, target_height = fit_dimensions(original_width, original_height, columns, rows * 2)
    if (target_width, target_height) != (original_width, original_height):
        try:
            image = image.convert("RGBA").resize(
                (target_width, target_height),
                Image.Resampling.BICUBIC,
            )
        except (OSError, ValueError) as exc:
            raise DecodeError(f"failed to scale image: {exc}") from exc

    header = f"Image: {image_format} format, {original_width}x{original_height} pixels\n\n"
    return header + image_to_text_art(image), False


__all__ = [
    "IMAGE_MAX_BYTES",
    "MAX_CELL_COLUMNS",
    "MAX_CELL_ROWS",
    "cell_grid",
    "decode_image",
    "fit_dimensions",
    "image_to_text_art",
    "image_too_large_message",
    "render_image_preview",
]
