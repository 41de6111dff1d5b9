"""Output module for writing rendered images.

Components:
    export: Plain-text PPM writer and Pillow PNG writer
"""

from .export import save_image, save_png, save_ppm, write_ppm

__all__ = [
    "write_ppm",
    "save_ppm",
    "save_png",
    "save_image",
]
