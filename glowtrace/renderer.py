"""
Renderer module - drives the integrator over the whole image.

Implements:
- Jittered multi-sample anti-aliasing
- Tile-based parallel rendering on threads or processes
- Reproducible seeded renders (one random stream per tile)
- 8-bit output through Pillow
"""

from __future__ import annotations
import logging
import os
import platform
import time
from concurrent.futures import Executor, ThreadPoolExecutor, ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Optional, Callable, Tuple

import numpy as np
from PIL import Image

from .camera import Camera
from .integrator import Integrator, MAX_BOUNCE_COUNT
from .sampling import RandomSource
from .scene import Scene
from .vec3 import Color

logger = logging.getLogger(__name__)

Tile = Tuple[int, int, int, int]


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 400
    height: int = 400
    rays_per_pixel: int = 100
    max_bounce_count: int = MAX_BOUNCE_COUNT
    tile_size: int = 16
    num_threads: int = 0  # 0 = auto-detect
    use_processes: bool = False
    seed: Optional[int] = None
    gamma: float = 1.0

    def __post_init__(self):
        for name in ('width', 'height', 'rays_per_pixel', 'tile_size'):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.max_bounce_count < 0:
            raise ValueError(f"max_bounce_count must be >= 0, got {self.max_bounce_count}")
        if self.num_threads < 0:
            raise ValueError(f"num_threads must be >= 0, got {self.num_threads}")
        if self.gamma <= 0:
            raise ValueError(f"gamma must be positive, got {self.gamma}")
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4


def render_pixel(scene: Scene, camera: Camera, integrator: Integrator,
                 x: int, y: int, width: int, height: int,
                 rays_per_pixel: int, rng: RandomSource) -> Color:
    """Average `rays_per_pixel` jittered samples of one pixel.

    Args:
        x, y: Pixel coordinate in camera convention (y = 0 is the bottom row)
    """
    total = Color.zero()
    for _ in range(rays_per_pixel):
        ray = camera.get_ray(x + rng.uniform(), y + rng.uniform(), width, height)
        total = total + integrator.trace(scene, ray, rng)
    return total / rays_per_pixel


def _render_tile(scene: Scene, camera: Camera, settings: RenderSettings,
                 tile: Tile, entropy: int, index: int) -> Tuple[Tile, np.ndarray]:
    """Render one tile with its own random stream.

    Module-level so that process pools can pickle it.
    """
    x0, y0, x1, y1 = tile
    width = settings.width
    height = settings.height
    integrator = Integrator(settings.max_bounce_count)
    rng = RandomSource.for_task(entropy, index)

    tile_image = np.zeros((y1 - y0, x1 - x0, 3), dtype=np.float64)
    for j in range(y1 - y0):
        # Image rows run top to bottom, camera y runs bottom to top
        y = height - 1 - (y0 + j)
        for i in range(x1 - x0):
            pixel = render_pixel(
                scene, camera, integrator, x0 + i, y, width, height,
                settings.rays_per_pixel, rng
            )
            tile_image[j, i] = pixel.to_array()

    return tile, tile_image


class Renderer:
    """Path tracing renderer with multi-threading support."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self.integrator = Integrator(self.settings.max_bounce_count)
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def render_pixel(self, scene: Scene, camera: Camera, x: int, y: int, rng: RandomSource) -> Color:
        """Radiance estimate of a single pixel (camera convention, y up)."""
        return render_pixel(
            scene, camera, self.integrator, x, y,
            self.settings.width, self.settings.height,
            self.settings.rays_per_pixel, rng
        )

    def render(self, scene: Scene, camera: Camera) -> np.ndarray:
        """Render the scene and return the image as a numpy array.

        Args:
            scene: The scene to render
            camera: The camera to render from

        Returns:
            HDR image as numpy array of shape (height, width, 3), row 0 at the top
        """
        settings = self.settings
        image = np.zeros((settings.height, settings.width, 3), dtype=np.float64)

        tiles = self._generate_tiles(settings.width, settings.height)
        entropy = RandomSource(settings.seed).entropy
        total_tiles = len(tiles)

        logger.info(
            "Rendering %dx%d, %d rays/pixel, %d tiles on %d %s",
            settings.width, settings.height, settings.rays_per_pixel, total_tiles,
            settings.num_threads, 'processes' if settings.use_processes else 'threads'
        )
        start = time.perf_counter()

        if settings.num_threads > 1:
            with self._make_executor() as executor:
                futures = [
                    executor.submit(_render_tile, scene, camera, settings, tile, entropy, index)
                    for index, tile in enumerate(tiles)
                ]
                for done, future in enumerate(as_completed(futures), start=1):
                    self._place_tile(image, *future.result())
                    self._report(done, total_tiles)
        else:
            for index, tile in enumerate(tiles):
                self._place_tile(image, *_render_tile(scene, camera, settings, tile, entropy, index))
                self._report(index + 1, total_tiles)

        logger.debug("Render finished in %.3fs", time.perf_counter() - start)
        return image

    def _make_executor(self) -> Executor:
        if self.settings.use_processes:
            return ProcessPoolExecutor(max_workers=self.settings.num_threads)
        return ThreadPoolExecutor(max_workers=self.settings.num_threads)

    @staticmethod
    def _place_tile(image: np.ndarray, tile: Tile, tile_image: np.ndarray) -> None:
        x0, y0, x1, y1 = tile
        image[y0:y1, x0:x1] = tile_image

    def _report(self, done: int, total: int) -> None:
        if self._progress_callback:
            self._progress_callback(done / total)

    def _generate_tiles(self, width: int, height: int) -> list[Tile]:
        """Generate tiles for parallel rendering.

        Args:
            width: Image width
            height: Image height

        Returns:
            List of tiles as (x0, y0, x1, y1) tuples, in row-major order
        """
        tile_size = self.settings.tile_size
        tiles = []

        for y in range(0, height, tile_size):
            for x in range(0, width, tile_size):
                x1 = min(x + tile_size, width)
                y1 = min(y + tile_size, height)
                tiles.append((x, y, x1, y1))

        return tiles

    def to_ldr(self, hdr_image: np.ndarray) -> np.ndarray:
        """Convert HDR image to 8-bit LDR with gamma correction.

        Args:
            hdr_image: HDR image array (float64)

        Returns:
            LDR image as uint8 array
        """
        gamma = self.settings.gamma
        corrected = np.power(np.clip(hdr_image, 0, None), 1.0 / gamma)

        ldr = np.clip(corrected * 255, 0, 255).astype(np.uint8)
        return ldr

    def save_image(self, image: np.ndarray, filename: str) -> None:
        """Save image to file; the extension picks the format.

        Args:
            image: Image array (HDR float or LDR uint8)
            filename: Output filename
        """
        if image.dtype != np.uint8:
            image = self.to_ldr(image)

        Image.fromarray(image).save(filename)
        logger.info("Saved %s", filename)


def get_platform_info() -> dict:
    """Get information about the current platform for choosing worker counts.

    Returns:
        Dictionary with platform details
    """
    return {
        'system': platform.system(),
        'machine': platform.machine(),
        'python_version': platform.python_version(),
        'numpy_version': np.__version__,
        'cpu_count': os.cpu_count(),
    }
