"""Image export utilities for rendered images.

Supported formats:
    - PPM (plain-text P3, one "r g b" line per pixel)
    - PNG (8-bit RGB via Pillow)

All writers take a uint8 array of shape (height, width, 3) with rows ordered
top to bottom, as returned by Renderer.get_pixels(). Filesystem errors are
not caught here; OSError reaches the caller.

Example:
    >>> from src.pathtracer.output.export import save_image
    >>> save_image(renderer.get_pixels(), "output.ppm")
"""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

PPM_MAGIC = "P3"
PPM_MAX_VALUE = 255


def _validate_pixels(pixels: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    """Check the array layout and return it as uint8."""
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (height, width, 3), got {pixels.shape}")
    if not np.issubdtype(pixels.dtype, np.integer):
        raise ValueError(f"Expected integer pixel values, got dtype {pixels.dtype}")
    if pixels.size and (pixels.min() < 0 or pixels.max() > PPM_MAX_VALUE):
        raise ValueError(f"Pixel values must be in [0, {PPM_MAX_VALUE}]")
    return pixels.astype(np.uint8, copy=False)


def write_ppm(pixels: npt.NDArray[np.uint8], stream: TextIO) -> None:
    """Write pixels to a text stream in plain PPM (P3) format.

    The output is the "P3" tag line, a "<width> <height> 255" line, then one
    line of three space-separated integers per pixel, rows top to bottom
    and columns left to right.

    Args:
        pixels: uint8 image array of shape (height, width, 3).
        stream: Writable text stream.

    Raises:
        ValueError: If the array does not hold an RGB image.
        OSError: If writing to the stream fails.
    """
    pixels = _validate_pixels(pixels)
    height, width = pixels.shape[:2]

    stream.write(f"{PPM_MAGIC}\n")
    stream.write(f"{width} {height} {PPM_MAX_VALUE}\n")
    for row in pixels:
        stream.write("".join(f"{r} {g} {b}\n" for r, g, b in row.tolist()))


def save_ppm(pixels: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save pixels as a plain PPM (P3) file.

    Args:
        pixels: uint8 image array of shape (height, width, 3).
        filepath: Output file path.
    """
    with open(filepath, "w", encoding="ascii", newline="\n") as f:
        write_ppm(pixels, f)


def save_png(pixels: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save pixels as an 8-bit RGB PNG file using Pillow.

    Args:
        pixels: uint8 image array of shape (height, width, 3).
        filepath: Output file path (should end in .png).
    """
    pixels = _validate_pixels(pixels)
    pil_image = PILImage.fromarray(np.ascontiguousarray(pixels), mode="RGB")
    pil_image.save(filepath, format="PNG")


def save_image(pixels: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save pixels, choosing the format from the file suffix.

    ".png" writes a PNG; every other suffix writes plain PPM.

    Args:
        pixels: uint8 image array of shape (height, width, 3).
        filepath: Output file path.
    """
    if Path(filepath).suffix.lower() == ".png":
        save_png(pixels, filepath)
    else:
        save_ppm(pixels, filepath)
