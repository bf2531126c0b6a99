# lighting.py
from typing import List, Sequence, Tuple

import numpy as np
import pygame

from config import config
from kinematics import Angle, Point
from sprites import FrameContext, SpriteShader


class LightingCompositor(SpriteShader):
    """Shades a planet sprite as if lit from the sun's direction.

    The work happens in planet-local image space (origin at the sprite center):

    1.  The sun is placed `orbit_radius` away along `180 + orbit_angle - rotation`.
        The sprite is drawn already spun by `rotation`, so subtracting it keeps the
        light fixed relative to the sun rather than to the planet's surface.
    2.  A radial gradient centred on that point runs from
        `orbit_radius - planet_radius` to `orbit_radius + planet_radius`, which
        places the planet's silhouette inside the gradient band.
    3.  Black is composited "source-atop" the sprite with the gradient's alpha:
        colors darken towards the far side, the alpha channel is left untouched
        and fully transparent pixels stay transparent.

    The sun direction changes every frame, so nothing is cached; each call pays
    a cost proportional to the sprite's pixel area.

    Attributes:
        stops (List[Tuple[float, float]]): `(offset, black_alpha)` gradient stops.
    """

    def __init__(self, stops: Sequence[Tuple[float, float]] = None):
        if stops is None:
            stops = config.Lighting.GRADIENT_STOPS
        self.stops: List[Tuple[float, float]] = [(float(offset), float(alpha)) for offset, alpha in stops]
        self._offsets = np.array([offset for offset, _ in self.stops], dtype=np.float64)
        self._alphas = np.array([alpha for _, alpha in self.stops], dtype=np.float64)

    @staticmethod
    def sun_position(context: FrameContext) -> Point:
        """Sun position in planet-local coordinates for this frame."""
        planet_to_sun = Angle(180.0 + context.orbit_angle.degrees - context.rotation.degrees)
        return Point.polar(Point(0.0, 0.0), context.orbit_radius, planet_to_sun)

    @staticmethod
    def gradient_radii(width: int, height: int, orbit_radius: float) -> Tuple[float, float]:
        """Inner/outer radii of the shading gradient: an annulus straddling the planet."""
        planet_radius = max(width, height) / 2
        return max(0.0, orbit_radius - planet_radius), orbit_radius + planet_radius

    def shade_alpha(self, width: int, height: int, context: FrameContext) -> np.ndarray:
        """Black opacity per pixel, indexed `[x, y]` like `pygame.surfarray`."""
        sun = self.sun_position(context)
        inner_radius, outer_radius = self.gradient_radii(width, height, context.orbit_radius)
        if outer_radius - inner_radius <= 0:
            return np.zeros((width, height), dtype=np.float64)

        # Pixel centers relative to the sprite center
        xs = np.arange(width, dtype=np.float64) + 0.5 - width / 2
        ys = np.arange(height, dtype=np.float64) + 0.5 - height / 2
        distance = np.hypot(xs[:, None] - sun.x, ys[None, :] - sun.y)

        t = (distance - inner_radius) / (outer_radius - inner_radius)
        alpha = np.interp(t, self._offsets, self._alphas)
        # Only the annulus between the two radii is painted
        alpha[(distance < inner_radius) | (distance > outer_radius)] = 0.0
        return alpha

    def shade(self, image: pygame.Surface, context: FrameContext) -> pygame.Surface:
        width, height = image.get_size()
        # Offscreen copy of the sprite; the original image is never modified
        if image.get_flags() & pygame.SRCALPHA:
            buffer = image.copy()
        else:
            buffer = pygame.Surface((width, height), pygame.SRCALPHA)
            buffer.blit(image, (0, 0))
        if width == 0 or height == 0:
            return buffer

        alpha = self.shade_alpha(width, height, context)
        if not alpha.any():
            return buffer

        # source-atop with black: color scales by (1 - alpha), destination alpha is kept
        rgb = pygame.surfarray.pixels3d(buffer)
        rgb[...] = (rgb * (1.0 - alpha)[:, :, None]).round().astype(np.uint8)
        del rgb # release the surface lock
        return buffer

    def __repr__(self):
        return f"LightingCompositor(stops={self.stops})"
