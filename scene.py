# scene.py
import logging
import random
from typing import List, Optional

import pygame

from config import config
from kinematics import InvalidStateError, Point
from solarsystem import CelestialBody, Planet, Sun, build_planets, build_sun
from sprites import AssetLoader
from visual_effects import StarField, VisualEffects


class Scene:
    """Everything drawn on screen: the star field, the sun and the planets.

    One `Scene` is created at program start and handed to the frame driver,
    which calls `advance()` then `render()` once per frame. `advance()` is the
    only phase that mutates state; `render()` only reads it.

    Attributes:
        width (int): Viewport width in pixels.
        height (int): Viewport height in pixels.
        starfield (StarField): Drifting star backdrop.
        sun (Sun): The central body; its center is the viewport center.
        planets (List[Planet]): Planets in drawing order (innermost first).
        effects (VisualEffects): Shared helpers for orbit arcs and glows.
        frame_count (int): Number of completed `advance()` calls.
    """

    def __init__(self, width: int, height: int, star_count: int = None, frame_rate: float = None,
                 rng: random.Random = None, sun: Optional[Sun] = None):
        self.width = width
        self.height = height
        self.frame_rate = frame_rate if frame_rate is not None else config.Time.FRAME_RATE
        self.starfield = StarField(width, height, star_count=star_count, rng=rng)
        self.sun = sun
        self.planets: List[Planet] = []
        self.effects = VisualEffects()
        self.frame_count = 0

    @classmethod
    def create_default(cls, width: int, height: int, loader: AssetLoader, star_count: int = None,
                       frame_rate: float = None, rng: random.Random = None) -> 'Scene':
        """Builds the canonical nine-planet system centered in the viewport."""
        scene = cls(width, height, star_count=star_count, frame_rate=frame_rate, rng=rng)
        scene.sun = build_sun(scene.viewport_center, loader, frame_rate=scene.frame_rate)
        for planet in build_planets(scene.sun, loader, frame_rate=scene.frame_rate):
            scene.add_planet(planet)
        logging.info(f"Scene created: {width}x{height}, {len(scene.starfield)} stars, "
                     f"{len(scene.planets)} planets at {scene.frame_rate} fps.")
        return scene

    @property
    def viewport_center(self) -> Point:
        return Point(self.width / 2, self.height / 2)

    @property
    def bodies(self) -> List[CelestialBody]:
        """Top-level bodies in drawing order."""
        return ([self.sun] if self.sun is not None else []) + list(self.planets)

    def add_planet(self, planet: Planet) -> Planet:
        self.planets.append(planet)
        return planet

    def find_body(self, name: str) -> Optional[CelestialBody]:
        for body in self.bodies:
            if body.name == name:
                return body
            for child in getattr(body, 'children', []):
                if child.name == name:
                    return child
        return None

    def set_viewport(self, width: int, height: int) -> None:
        """Adopts a new viewport size: the sun moves to the new center and the stars are regenerated.

        Planets orbit the sun's current center, so they follow automatically.
        """
        self.width = width
        self.height = height
        if self.sun is not None:
            self.sun.center = self.viewport_center
        self.starfield.resize(width, height)
        logging.info(f"Viewport changed to {width}x{height}.")

    def advance(self) -> None:
        """Moves every star and body forward by one frame."""
        self.starfield.advance()
        for body in self.bodies:
            body.advance()
        self.frame_count += 1

        if config.Debug.LOG_BODY_POSITIONS and self.frame_count % config.Debug.LOG_INTERVAL_FRAMES == 0:
            self._log_positions()

    def render(self, surface: pygame.Surface, effects: VisualEffects = None) -> None:
        """Draws the current state. A body that fails to draw is logged and skipped."""
        effects = self.effects if effects is None else effects
        surface.fill(config.Display.BACKGROUND_COLOR)
        self.starfield.render(surface)
        for body in self.bodies:
            try:
                body.render(surface, effects)
            except InvalidStateError as e_state:
                logging.error(f"Skipping {body!r} this frame: {e_state}")
            except pygame.error as e_pygame:
                logging.error(f"Pygame error rendering {body!r}: {e_pygame}", exc_info=True)
            except Exception as e_body:
                logging.error(f"Unexpected error rendering {body!r}: {e_body}", exc_info=True)

    def _log_positions(self) -> None:
        for name in config.Debug.LOG_BODY_NAMES:
            body = self.find_body(name)
            if body is None:
                continue
            try:
                center = body.center
            except InvalidStateError:
                continue
            logging.info(f"Frame {self.frame_count}: {name} at ({center.x:.1f}, {center.y:.1f})")
