import pygame
import numpy as np
import math
import random
import logging
from typing import List

from config import config
from kinematics import Angle, Point


class VisualEffects:
    def __init__(self):
        self.glow_cache = {}  # Cache for glow surfaces, keyed by geometry and color

    def draw_orbit_arc(self, surface, center, radius, angle: Angle, arc_degrees=None,
                       color=None, width=None, segments=None):
        """Draw the fading arc trailing a body along its orbit.

        The arc sweeps `arc_degrees` backwards from `angle`. A linear gradient laid
        from the leading point to the trailing point fades it from opaque `color`
        to fully transparent.
        """
        if radius <= 0:
            return
        arc_degrees = config.OrbitPath.ARC_DEGREES if arc_degrees is None else arc_degrees
        color = config.OrbitPath.COLOR if color is None else color
        width = config.OrbitPath.LINE_WIDTH_PX if width is None else width
        segments = config.OrbitPath.SEGMENTS if segments is None else segments

        start_rad = angle.radians()
        end_rad = start_rad - math.radians(arc_degrees)
        thetas = np.linspace(start_rad, end_rad, segments + 1)
        xs = center[0] + radius * np.cos(thetas)
        ys = center[1] + radius * np.sin(thetas)

        # Linear gradient axis: leading edge (t=0) to trailing edge (t=1)
        gx, gy = xs[-1] - xs[0], ys[-1] - ys[0]
        axis_len_sq = gx * gx + gy * gy

        # Draw into a small alpha surface covering only the arc, then blend it in
        pad = width + 1
        left = int(math.floor(xs.min())) - pad
        top = int(math.floor(ys.min())) - pad
        arc_w = int(math.ceil(xs.max())) + pad - left + 1
        arc_h = int(math.ceil(ys.max())) + pad - top + 1
        if arc_w <= 0 or arc_h <= 0:
            return
        arc_surf = pygame.Surface((arc_w, arc_h), pygame.SRCALPHA)

        for i in range(segments):
            mid_x = (xs[i] + xs[i + 1]) / 2
            mid_y = (ys[i] + ys[i + 1]) / 2
            if axis_len_sq > 1e-9:
                t = ((mid_x - xs[0]) * gx + (mid_y - ys[0]) * gy) / axis_len_sq
            else: # full circle: fall back to arc length
                t = (i + 0.5) / segments
            alpha = int(255 * (1.0 - min(1.0, max(0.0, t))))
            if alpha <= 0:
                continue
            pygame.draw.line(arc_surf, (*color[:3], alpha),
                             (xs[i] - left, ys[i] - top),
                             (xs[i + 1] - left, ys[i + 1] - top),
                             width)

        surface.blit(arc_surf, (left, top))

    def draw_glow(self, surface, pos, radius, blur=None, color=None, layers=None):
        """Draw a soft additive halo around `pos`, reaching `blur` pixels past `radius`."""
        blur = config.SunGlow.BLUR_PX if blur is None else blur
        color = config.SunGlow.COLOR if color is None else color
        layers = config.SunGlow.LAYERS if layers is None else layers
        if radius <= 1 or layers <= 0: # Min radius for visibility
            return

        key = (int(radius), int(blur), tuple(color[:3]), int(layers))
        glow_surf = self.glow_cache.get(key)
        if glow_surf is None:
            glow_surf = self._build_glow(*key)
            self.glow_cache[key] = glow_surf

        half = glow_surf.get_width() // 2
        surface.blit(glow_surf, (int(pos[0]) - half, int(pos[1]) - half),
                     special_flags=pygame.BLEND_RGB_ADD) # additive, black adds nothing

    @staticmethod
    def _build_glow(radius, blur, color, layers):
        outer = radius + blur
        size = outer * 2 + 1
        glow_surf = pygame.Surface((size, size))
        glow_surf.fill((0, 0, 0))
        # Outermost layer first; each inner layer overwrites with a brighter value
        for i in range(layers):
            layer_radius = int(outer - blur * i / layers)
            intensity = 0.45 * (i + 1) / layers
            layer_color = tuple(int(channel * intensity) for channel in color)
            if layer_radius > 0:
                pygame.draw.circle(glow_surf, layer_color, (outer, outer), layer_radius)
        return glow_surf


class Star:
    """A point light drifting slowly away from the canvas center.

    Attributes:
        center (Point): Current position.
        radius (float): Drawn radius in pixels (sub-pixel for most stars).
        color (Tuple[int, int, int]): RGB color.
        brightness (str): 'dim', 'typical' or 'bright'.
    """

    def __init__(self, width, height, rng=None):
        self.rng = rng if rng is not None else random
        self.center = self._random_point(width, height)
        self.radius = self.rng.choice(config.Starfield.RADII)
        self.color = self.rng.choice(config.Starfield.COLORS)
        self.brightness = 'dim' if self.radius <= config.Starfield.DIM_RADIUS else 'typical'

        # Make some stars bigger and brighter
        if self.rng.random() < config.Starfield.BRIGHT_PROBABILITY:
            self.color = config.Starfield.BRIGHT_COLOR
            self.radius = config.Starfield.BRIGHT_RADIUS
            self.brightness = 'bright'

    def _random_point(self, width, height) -> Point:
        # random() is in [0, 1), so the point is always inside [0, w) x [0, h)
        return Point(self.rng.random() * width, self.rng.random() * height)

    def is_out_of_bounds(self, width, height) -> bool:
        x, y = self.center
        return x <= 0 or x >= width or y <= 0 or y >= height

    def respawn(self, width, height) -> None:
        self.center = self._random_point(width, height)

    def advance(self, width, height) -> Point:
        """Respawn if on or past the canvas edge, otherwise drift outward from the center."""
        if self.is_out_of_bounds(width, height):
            self.respawn(width, height)
            return self.center

        divisor = config.Starfield.DRIFT_DIVISOR
        x, y = self.center
        self.center = Point(x + (x - width / 2) / divisor, y + (y - height / 2) / divisor)
        return self.center

    def render(self, surface) -> None:
        pos = (int(self.center.x), int(self.center.y))
        if self.radius >= 0.75:
            pygame.draw.circle(surface, self.color, pos, max(1, round(self.radius)))
        else:
            # Sub-pixel star: one pixel dimmed by the fraction of it the disc would cover
            coverage = min(1.0, math.pi * self.radius * self.radius)
            surface.set_at(pos, tuple(int(channel * coverage) for channel in self.color[:3]))


class StarField:
    def __init__(self, width, height, star_count=None, rng=None):
        self.width = width
        self.height = height
        self.star_count = config.Starfield.STAR_COUNT if star_count is None else star_count
        self.rng = rng if rng is not None else random.Random()
        self.stars: List[Star] = self._create_stars()

    def _create_stars(self) -> List[Star]:
        return [Star(self.width, self.height, self.rng) for _ in range(self.star_count)]

    def resize(self, width, height) -> None:
        """Adopt a new canvas size; the stars are regenerated to fill it."""
        self.width = width
        self.height = height
        self.stars = self._create_stars()
        logging.debug(f"StarField regenerated {len(self.stars)} stars for {width}x{height}.")

    def advance(self) -> None:
        for star in self.stars:
            star.advance(self.width, self.height)

    def render(self, surface) -> None:
        for star in self.stars:
            star.render(surface)

    def __len__(self):
        return len(self.stars)
