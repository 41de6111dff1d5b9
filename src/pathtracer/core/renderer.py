"""Row-by-row renderer driving the integrator kernels.

The Renderer owns one render: it sets up the camera and the render target,
launches one kernel per image row from top to bottom, and resolves the
summed samples into 8-bit pixels once every row is done.

Progress is reported through an optional callback before each row and once
more at the end, so callers decide how (or whether) to display it.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.pathtracer.camera.camera import CameraConfig
    >>> from src.pathtracer.core.renderer import Renderer
    >>> from src.pathtracer.scene.random_spheres import create_random_spheres_scene
    >>>
    >>> scene, camera = create_random_spheres_scene(seed=7)
    >>> renderer = Renderer(camera, samples_per_pixel=10, max_depth=10)
    >>> renderer.render()
    >>> renderer.save("output.ppm")
"""

from collections.abc import Callable, Generator
from pathlib import Path

import numpy as np
import numpy.typing as npt

from src.pathtracer.camera.camera import CameraConfig, CameraGeometry, setup_camera
from src.pathtracer.core.integrator import (
    get_linear_image_numpy,
    get_pixels_numpy,
    render_row,
    resolve_image,
    setup_render_target,
)
from src.pathtracer.output.export import save_image

# Type alias for progress callback
# Callback receives (rows_remaining, total_rows)
ProgressCallback = Callable[[int, int], None]


class Renderer:
    """Renders the current scene through a camera.

    The scene itself lives in the global scene fields (see SceneManager);
    the renderer only reads it.

    Attributes:
        geometry: The derived camera geometry.
        samples_per_pixel: Samples averaged into every pixel.
        max_depth: Maximum bounces per path.
        jitter: Whether samples are jittered within each pixel.
    """

    def __init__(
        self,
        camera_config: CameraConfig,
        samples_per_pixel: int = 500,
        max_depth: int = 50,
        jitter: bool = True,
    ) -> None:
        """Set up the camera and render target.

        Args:
            camera_config: The camera to render through.
            samples_per_pixel: Samples per pixel (at least 1).
            max_depth: Maximum bounces per path (not negative).
            jitter: Jitter sample positions within each pixel. Disabling it
                makes every sample of a pixel identical for deterministic
                scenes.

        Raises:
            ValueError: If the sampling parameters or camera are invalid, or
                the image exceeds the render target.
        """
        if samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be at least 1, got {samples_per_pixel}")
        if max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {max_depth}")

        self.samples_per_pixel = samples_per_pixel
        self.max_depth = max_depth
        self.jitter = jitter
        self.geometry: CameraGeometry = setup_camera(camera_config)
        setup_render_target(self.geometry.image_width, self.geometry.image_height)
        self._rows_done = 0

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.geometry.image_width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.geometry.image_height

    @property
    def is_complete(self) -> bool:
        """Whether every row has been rendered and resolved."""
        return self._rows_done == self.height

    def render_rows(self) -> Generator[tuple[int, int], None, None]:
        """Render the image row by row, reporting progress before each row.

        The first report is (total_rows, total_rows). A final (0, total_rows)
        follows once the last row is rendered and the image is resolved.

        Yields:
            Tuple of (rows_remaining, total_rows).
        """
        self._rows_done = 0
        total = self.height
        for j in range(total):
            yield (total - j, total)
            render_row(j, self.samples_per_pixel, self.max_depth, self.jitter)
        resolve_image(self.samples_per_pixel)
        self._rows_done = total
        yield (0, total)

    def render(self, callback: ProgressCallback | None = None) -> None:
        """Render the whole image.

        Args:
            callback: Optional callback called before each row, and once
                more when the image is done, with
                (rows_remaining, total_rows).

        Example:
            >>> def progress(remaining, total):
            ...     print(f"Scanlines remaining: {remaining}")
            >>> renderer.render(callback=progress)
        """
        for remaining, total in self.render_rows():
            if callback is not None:
                callback(remaining, total)

    def _check_complete(self) -> None:
        if not self.is_complete:
            raise RuntimeError("Image has not been rendered. Call render() first.")

    def get_pixels(self) -> npt.NDArray[np.uint8]:
        """Get the final image.

        Returns:
            uint8 array of shape (height, width, 3), rows top to bottom.

        Raises:
            RuntimeError: If render() has not completed.
        """
        self._check_complete()
        return get_pixels_numpy()

    def get_linear_image(self) -> npt.NDArray[np.float32]:
        """Get the averaged linear color before gamma and quantization.

        Returns:
            float32 array of shape (height, width, 3).

        Raises:
            RuntimeError: If render() has not completed.
        """
        self._check_complete()
        return get_linear_image_numpy(self.samples_per_pixel)

    def save(self, filepath: str | Path) -> None:
        """Save the final image as PNG (".png") or plain PPM (anything else).

        Raises:
            RuntimeError: If render() has not completed.
            OSError: If the file cannot be written.
        """
        save_image(self.get_pixels(), filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"samples_per_pixel={self.samples_per_pixel}, max_depth={self.max_depth})"
        )
