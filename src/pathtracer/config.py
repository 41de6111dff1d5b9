"""Render configuration.

RenderConfig gathers every knob of a render in one place: sampling, camera
and runtime settings. Defaults reproduce the full-quality render of the
random spheres scene.

This module does not declare Taichi fields and can be imported before
ti.init(). init_taichi() performs the initialization for a configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti

if TYPE_CHECKING:
    from src.pathtracer.camera.camera import CameraConfig

# Size of the preallocated render target
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048


def compute_image_height(image_width: int, aspect_ratio: float) -> int:
    """Return int(image_width / aspect_ratio), never less than 1."""
    return max(1, int(image_width / aspect_ratio))


@dataclass
class RenderConfig:
    """Configuration for a render.

    Attributes:
        samples_per_pixel: Samples averaged into every pixel.
        max_depth: Maximum bounces per path.
        vfov: Vertical field of view in degrees.
        aspect_ratio: Ideal width divided by height of the image.
        image_width: Image width in pixels.
        look_from: Camera position.
        look_at: Point the camera looks at.
        vup: Camera up direction.
        seed: Seed for the scene layout and the kernel random generator.
            None picks a fresh seed for each run.
        threads: Number of CPU threads for kernels. None uses every core.
        jitter: Jitter sample positions within each pixel.
    """

    samples_per_pixel: int = 500
    max_depth: int = 50
    vfov: float = 20.0
    aspect_ratio: float = 16.0 / 9.0
    image_width: int = 1200
    look_from: tuple[float, float, float] = (13.0, 2.0, 3.0)
    look_at: tuple[float, float, float] = (0.0, 0.0, 0.0)
    vup: tuple[float, float, float] = (0.0, 1.0, 0.0)
    seed: int | None = None
    threads: int | None = None
    jitter: bool = True

    def validate(self) -> None:
        """Check every value.

        Camera degeneracies that depend on the vectors (coincident look_from
        and look_at, vup along the view direction) are checked when the
        camera is set up.

        Raises:
            ValueError: If a value is out of range.
        """
        if self.samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be at least 1, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {self.max_depth}")
        if not 0.0 < self.vfov < 180.0:
            raise ValueError(f"vfov must be in (0, 180) degrees, got {self.vfov}")
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if not 1 <= self.image_width <= MAX_IMAGE_WIDTH:
            raise ValueError(
                f"image_width must be in [1, {MAX_IMAGE_WIDTH}], got {self.image_width}"
            )
        image_height = compute_image_height(self.image_width, self.aspect_ratio)
        if image_height > MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"image height {image_height} (width {self.image_width} at aspect ratio "
                f"{self.aspect_ratio}) exceeds {MAX_IMAGE_HEIGHT}"
            )
        if self.seed is not None and self.seed < 0:
            raise ValueError(f"seed must not be negative, got {self.seed}")
        if self.threads is not None and self.threads < 1:
            raise ValueError(f"threads must be at least 1, got {self.threads}")

    def camera_config(self) -> CameraConfig:
        """Build the CameraConfig for this render."""
        from src.pathtracer.camera.camera import CameraConfig

        return CameraConfig(
            vfov=self.vfov,
            aspect_ratio=self.aspect_ratio,
            image_width=self.image_width,
            look_from=self.look_from,
            look_at=self.look_at,
            vup=self.vup,
        )


def init_taichi(config: RenderConfig) -> int:
    """Initialize Taichi on the CPU backend for a configuration.

    Args:
        config: The render configuration.

    Returns:
        The random seed the kernels were initialized with.
    """
    seed = config.seed
    if seed is None:
        seed = int(np.random.default_rng().integers(0, 2**31 - 1))

    kwargs = {"arch": ti.cpu, "default_fp": ti.f64, "random_seed": seed}
    if config.threads is not None:
        kwargs["cpu_max_num_threads"] = config.threads
    ti.init(**kwargs)
    return seed
