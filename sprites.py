# sprites.py
import os
import logging
from collections import deque
from typing import Callable, List, NamedTuple, Optional, Tuple

import pygame

from config import config
from kinematics import Angle, Point, Time, rotation_delta


class ImageResource:
    """Sprite image that becomes available some time after it is requested.

    Exposes the capability the renderer depends on: `is_loaded`, `width`,
    `height`, `on_load(callback)` and the drawable `surface`. Loading is driven
    by `AssetLoader`; until then `surface` is `None` and draws must be deferred.

    If the image file cannot be read, a placeholder disc in `placeholder_color`
    is generated instead so the body still animates.
    """

    def __init__(self, path: str, size: Tuple[int, int], placeholder_color=(200, 200, 200)):
        self.path = path
        self.size = (int(size[0]), int(size[1]))
        self.placeholder_color = placeholder_color
        self.surface: Optional[pygame.Surface] = None
        self.used_placeholder = False
        self._callbacks: List[Callable[[], None]] = []

    @property
    def is_loaded(self) -> bool:
        return self.surface is not None

    @property
    def width(self) -> int:
        return self.size[0]

    @property
    def height(self) -> int:
        return self.size[1]

    def on_load(self, callback: Callable[[], None]) -> None:
        """Registers a one-shot callback fired when loading completes.

        Fires immediately if the image is already loaded.
        """
        if self.is_loaded:
            callback()
        else:
            self._callbacks.append(callback)

    def load(self) -> pygame.Surface:
        """Reads and scales the image, then runs the pending callbacks once."""
        if self.is_loaded:
            return self.surface
        try:
            image = pygame.image.load(self.path)
            if pygame.display.get_init() and pygame.display.get_surface() is not None:
                image = image.convert_alpha()
            try:
                image = pygame.transform.smoothscale(image, self.size)
            except ValueError: # smoothscale only handles 24/32-bit surfaces
                image = pygame.transform.scale(image, self.size)
        except (pygame.error, OSError) as e_load:
            logging.warning(f"Could not load sprite image '{self.path}': {e_load}. Using a placeholder.")
            image = self._make_placeholder()
            self.used_placeholder = True
        self.set_surface(image)
        return self.surface

    def set_surface(self, surface: pygame.Surface) -> None:
        """Marks the resource loaded with `surface` and flushes the callbacks."""
        self.surface = surface
        self.size = surface.get_size()
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback()
            except pygame.error as e_callback:
                logging.error(f"Deferred draw for '{self.path}' failed: {e_callback}", exc_info=True)
            except Exception as e_unexpected:
                logging.error(f"Unexpected error in load callback for '{self.path}': {e_unexpected}", exc_info=True)

    def _make_placeholder(self) -> pygame.Surface:
        width, height = self.size
        surface = pygame.Surface(self.size, pygame.SRCALPHA)
        radius = min(width, height) / 2
        pygame.draw.ellipse(surface, self.placeholder_color, surface.get_rect())
        # Off-center spot so self-rotation stays visible on a flat disc
        spot_color = tuple(int(channel * 0.6) for channel in self.placeholder_color[:3])
        spot_radius = max(1, int(radius / 3))
        pygame.draw.circle(surface, spot_color, (int(width * 0.65), int(height * 0.4)), spot_radius)
        return surface

    def __repr__(self):
        return f"ImageResource({self.path!r}, size={self.size}, loaded={self.is_loaded})"


class AssetLoader:
    """Cooperative, single-threaded image loader.

    `request()` hands out unloaded `ImageResource` objects; `pump()` completes a
    few of them per frame so sprites appear progressively instead of blocking
    the first frame.
    """

    def __init__(self, image_dir: str = None, loads_per_frame: int = None):
        self.image_dir = image_dir if image_dir is not None else config.Assets.IMAGE_DIR
        self.loads_per_frame = loads_per_frame if loads_per_frame is not None else config.Assets.LOADS_PER_FRAME
        self._pending = deque()
        self._cache = {}

    def request(self, filename: str, size: Tuple[int, int], placeholder_color=(200, 200, 200)) -> ImageResource:
        key = (filename, tuple(size))
        if key in self._cache:
            return self._cache[key]
        resource = ImageResource(os.path.join(self.image_dir, filename), size, placeholder_color)
        self._cache[key] = resource
        self._pending.append(resource)
        return resource

    @property
    def pending(self) -> int:
        return len(self._pending)

    def pump(self, limit: int = None) -> int:
        """Loads up to `limit` queued images (default: `loads_per_frame`). Returns how many loaded."""
        if limit is None:
            limit = self.loads_per_frame
        loaded = 0
        while self._pending and loaded < limit:
            resource = self._pending.popleft()
            resource.load()
            loaded += 1
        if loaded:
            logging.debug(f"AssetLoader completed {loaded} image(s), {len(self._pending)} pending.")
        return loaded

    def load_all(self) -> int:
        return self.pump(limit=len(self._pending))


class FrameContext(NamedTuple):
    """Per-frame state a shader needs: where the body is on its orbit and how it is spun."""
    orbit_angle: Angle
    orbit_radius: float
    rotation: Angle


class SpriteShader:
    """Produces a per-frame variant of a sprite image (e.g. lit by the sun)."""

    def shade(self, image: pygame.Surface, context: FrameContext) -> pygame.Surface:
        raise NotImplementedError


class RotatableSprite:
    """An image spinning about its own midpoint, independent of any orbital motion.

    Attributes:
        image (ImageResource): The backing image.
        angle (Angle): Current self-rotation.
        delta (float): Degrees turned per frame, derived from the rotation period.
        shader (SpriteShader | None): Optional per-frame image transformation.
    """

    def __init__(self, image: ImageResource, rotation_period: Time, shader: SpriteShader = None,
                 frame_rate: float = None, start_angle: float = 0.0):
        self.image = image
        self.shader = shader
        self.angle = Angle(start_angle)
        self.delta = rotation_delta(rotation_period, frame_rate)
        self._deferred = None

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def advance(self) -> Angle:
        self.angle = self.angle.rotated(self.delta)
        return self.angle

    def render(self, surface: pygame.Surface, center: Point, context: FrameContext = None) -> bool:
        """Draws the sprite centered on `center`, rotated by its current angle.

        If the image is not loaded yet, nothing is drawn this frame; a single
        deferred draw of the most recent request runs when loading completes.
        Returns True if the sprite was drawn now.
        """
        if not self.image.is_loaded:
            first_request = self._deferred is None
            self._deferred = (surface, center, self.angle, context)
            if first_request:
                self.image.on_load(self._draw_deferred)
            return False
        self._draw(surface, center, self.angle, context)
        return True

    def _draw_deferred(self) -> None:
        if self._deferred is None:
            return
        surface, center, angle, context = self._deferred
        self._deferred = None
        self._draw(surface, center, angle, context)

    def _draw(self, surface: pygame.Surface, center: Point, angle: Angle, context: FrameContext) -> None:
        image = self.image.surface
        if self.shader is not None and context is not None:
            image = self.shader.shade(image, context)
        # pygame rotates counter-clockwise; the canvas convention (y down) is clockwise
        rotated = pygame.transform.rotate(image, -angle.degrees)
        rect = rotated.get_rect(center=(round(center[0]), round(center[1])))
        surface.blit(rotated, rect)
