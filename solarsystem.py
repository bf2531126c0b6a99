# solarsystem.py
import math
import logging
from typing import List, Optional, Tuple

import numpy as np
import pygame

from config import config # Import the global config instance
from kinematics import Angle, BodyCenter, InvalidStateError, Orbit, Point, Time, rotation_delta
from lighting import LightingCompositor
from sprites import AssetLoader, FrameContext, RotatableSprite
from visual_effects import VisualEffects


class CelestialBody:
    """Base class of everything drawn in the solar system.

    A body can advance (mutate its angles once per frame) and render (draw its
    current state). Bodies are created once when the scene is built and never
    destroyed afterwards.
    """

    def __init__(self, name: str):
        self.name = name

    @property
    def center(self) -> Point:
        raise NotImplementedError

    def advance(self) -> None:
        raise NotImplementedError

    def render(self, surface: pygame.Surface, effects: VisualEffects) -> None:
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"


class Sun(CelestialBody):
    """The spinning, glowing body at the center of the system. It has no orbit."""

    def __init__(self, name: str, sprite: RotatableSprite, center: Tuple[float, float]):
        super().__init__(name)
        self.sprite = sprite
        self._center = Point(*center)
        self._deferred_glow = None

    @property
    def center(self) -> Point:
        return self._center

    @center.setter
    def center(self, value: Tuple[float, float]) -> None:
        self._center = Point(*value)

    def advance(self) -> None:
        self.sprite.advance()

    def render(self, surface: pygame.Surface, effects: VisualEffects) -> None:
        if self.sprite.image.is_loaded:
            self._draw_glow(surface, effects, self.center)
        else:
            # Registered before the sprite's own deferred draw, so the glow lands underneath it
            first_request = self._deferred_glow is None
            self._deferred_glow = (surface, effects, self.center)
            if first_request:
                self.sprite.image.on_load(self._draw_deferred_glow)
        self.sprite.render(surface, self.center)

    def _draw_glow(self, surface: pygame.Surface, effects: VisualEffects, center: Point) -> None:
        effects.draw_glow(surface, center, max(self.sprite.width, self.sprite.height) / 2)

    def _draw_deferred_glow(self) -> None:
        if self._deferred_glow is None:
            return
        surface, effects, center = self._deferred_glow
        self._deferred_glow = None
        self._draw_glow(surface, effects, center)


class Planet(CelestialBody):
    """A body on a circular orbit, carrying its own rings and satellites.

    The planet's center is never stored: it is always read from its orbit.
    Children are advanced after the planet, so they follow its new position
    within the same frame.

    Attributes:
        sprite (RotatableSprite): Spinning sprite, usually with a lighting shader.
        orbit (Orbit): The planet's path around the sun (or another center).
        rings (List[Ring]): Owned rings.
        satellites (List[Satellite]): Owned satellites.
    """

    def __init__(self, name: str, sprite: RotatableSprite, orbit: Orbit):
        super().__init__(name)
        self.sprite = sprite
        self.orbit = orbit
        self.rings: List['Ring'] = []
        self.satellites: List['Satellite'] = []

    @property
    def center(self) -> Point:
        return self.orbit.position()

    @property
    def children(self) -> List[CelestialBody]:
        return [*self.rings, *self.satellites]

    def add_ring(self, inner_radius: float, outer_radius: float, color, rotation_period: Time,
                 frame_rate: float = None) -> 'Ring':
        ring = Ring(self, inner_radius, outer_radius, color, rotation_period, frame_rate=frame_rate)
        self.rings.append(ring)
        return ring

    def attach_satellite(self, satellite: 'Satellite', radius: float, period: Time,
                         start_angle: float = 0.0, frame_rate: float = None) -> 'Satellite':
        """Gives `satellite` an orbit around this planet's current center and adopts it."""
        satellite.orbit = Orbit(BodyCenter(self), radius, period, start_angle, frame_rate)
        self.satellites.append(satellite)
        return satellite

    def frame_context(self) -> FrameContext:
        return FrameContext(self.orbit.angle, self.orbit.radius, self.sprite.angle)

    def advance(self) -> None:
        self.orbit.advance()
        self.sprite.advance()
        for child in self.children:
            child.advance()

    def render(self, surface: pygame.Surface, effects: VisualEffects) -> None:
        effects.draw_orbit_arc(surface, self.orbit.center, self.orbit.radius, self.orbit.angle)
        self.sprite.render(surface, self.center, self.frame_context())
        for child in self.children:
            self._render_child(child, surface, effects)

    def _render_child(self, child: CelestialBody, surface: pygame.Surface, effects: VisualEffects) -> None:
        # A broken child only loses its own contribution to the frame
        try:
            child.render(surface, effects)
        except InvalidStateError as e_state:
            logging.error(f"Skipping {child!r} of planet '{self.name}': {e_state}")
        except pygame.error as e_pygame:
            logging.error(f"Pygame error rendering {child!r} of planet '{self.name}': {e_pygame}", exc_info=True)
        except Exception as e_child:
            logging.error(f"Unexpected error rendering {child!r} of planet '{self.name}': {e_child}", exc_info=True)


class Ring(CelestialBody):
    """A flat annulus around a planet, sheared so it reads as a tilted disk.

    The ring reaches its planet through a weak handle and spins on its own.
    """

    def __init__(self, planet: Planet, inner_radius: float, outer_radius: float, color,
                 rotation_period: Time, frame_rate: float = None):
        super().__init__(f"{planet.name} ring")
        self._planet_center = BodyCenter(planet)
        self.inner_radius = float(inner_radius)
        self.outer_radius = float(outer_radius)
        self.color = tuple(color) if len(color) == 4 else (*color, 255)
        self.angle = Angle(0.0)
        self.delta = rotation_delta(rotation_period, frame_rate)

    @property
    def center(self) -> Point:
        return self._planet_center()

    def advance(self) -> None:
        self.angle = self.angle.rotated(self.delta)

    def outline(self, radius: float, segments: int = None) -> np.ndarray:
        """Edge of the ring at `radius`, relative to its center: sheared, then rotated by the spin."""
        segments = config.Ring.SEGMENTS if segments is None else segments
        thetas = np.linspace(0.0, 2 * math.pi, segments, endpoint=False)
        xs = radius * np.cos(thetas)
        ys = radius * np.sin(thetas)
        # Shear transform (1, SHEAR, 0, 1): x' = x, y' = SHEAR * x + y
        ys = config.Ring.SHEAR * xs + ys
        spin = self.angle.radians()
        cos_a, sin_a = math.cos(spin), math.sin(spin)
        return np.column_stack((xs * cos_a - ys * sin_a, xs * sin_a + ys * cos_a))

    def render(self, surface: pygame.Surface, effects: VisualEffects) -> None:
        center = self.center
        outer = self.outline(self.outer_radius)
        inner = self.outline(self.inner_radius)

        extent = int(math.ceil(np.abs(outer).max())) + 1
        ring_surf = pygame.Surface((extent * 2, extent * 2), pygame.SRCALPHA)
        pygame.draw.polygon(ring_surf, self.color, [tuple(p) for p in outer + extent])
        if self.inner_radius > 0:
            # Punch the hole: drawing writes (0, 0, 0, 0) straight into the alpha surface
            pygame.draw.polygon(ring_surf, (0, 0, 0, 0), [tuple(p) for p in inner + extent])
        surface.blit(ring_surf, (round(center.x) - extent, round(center.y) - extent))


class Satellite(CelestialBody):
    """A body orbiting a planet. It must be attached via `Planet.attach_satellite`
    before it is rendered."""

    def __init__(self, name: str, sprite: RotatableSprite, orbit: Optional[Orbit] = None):
        super().__init__(name)
        self.sprite = sprite
        self.orbit = orbit

    @property
    def center(self) -> Point:
        if self.orbit is None:
            raise InvalidStateError(f"Satellite '{self.name}' has no orbit.")
        return self.orbit.position()

    def advance(self) -> None:
        self.sprite.advance()
        if self.orbit is not None:
            self.orbit.advance()

    def render(self, surface: pygame.Surface, effects: VisualEffects) -> None:
        if self.orbit is None:
            raise InvalidStateError(
                f"Satellite '{self.name}' cannot be rendered before it is attached to an orbit."
            )
        self.sprite.render(surface, self.center)
        effects.draw_orbit_arc(surface, self.orbit.center, self.orbit.radius, self.orbit.angle)


def build_sun(center: Tuple[float, float], loader: AssetLoader, frame_rate: float = None) -> Sun:
    """Creates the sun from `config.SolarSystem.SUN_DATA`."""
    data = config.SolarSystem.SUN_DATA
    image = loader.request(data['image'], data['size_px'], data.get('placeholder_color', (255, 200, 64)))
    sprite = RotatableSprite(image, Time(data['rotation_period_s']), frame_rate=frame_rate)
    return Sun(data.get('name', 'Sun'), sprite, center)


def build_planet(name: str, data: dict, center, loader: AssetLoader, frame_rate: float = None,
                 shader: LightingCompositor = None) -> Planet:
    """Creates one planet, its rings and its satellites from a `PLANET_DATA` entry."""
    image = loader.request(data['image'], data['size_px'], data.get('placeholder_color', (200, 200, 200)))
    sprite = RotatableSprite(image, Time(data['rotation_period_s']),
                             shader=shader if shader is not None else LightingCompositor(),
                             frame_rate=frame_rate)
    orbit = Orbit(center, data['orbit_radius_px'], Time(data['orbital_period_s']),
                  data.get('start_angle_deg', 0.0), frame_rate)
    planet = Planet(name, sprite, orbit)

    for ring_data in data.get('rings', []):
        planet.add_ring(ring_data['inner_radius_px'], ring_data['outer_radius_px'], ring_data['color'],
                        Time(ring_data['rotation_period_s']), frame_rate=frame_rate)

    for sat_data in data.get('satellites', []):
        sat_image = loader.request(sat_data['image'], sat_data['size_px'],
                                   sat_data.get('placeholder_color', (200, 200, 200)))
        sat_sprite = RotatableSprite(sat_image, Time(sat_data['rotation_period_s']), frame_rate=frame_rate)
        satellite = Satellite(sat_data['name'], sat_sprite)
        planet.attach_satellite(satellite, sat_data['orbit_radius_px'], Time(sat_data['orbital_period_s']),
                                sat_data.get('start_angle_deg', 0.0), frame_rate)
    return planet


def build_planets(sun: Sun, loader: AssetLoader, frame_rate: float = None) -> List[Planet]:
    """Creates the planets of `config.SolarSystem.PLANET_DATA`, innermost first, orbiting the sun."""
    shader = LightingCompositor()
    planets = [
        build_planet(name, data, BodyCenter(sun), loader, frame_rate=frame_rate, shader=shader)
        for name, data in config.SolarSystem.PLANET_DATA.items()
    ]
    logging.info(f"Built {len(planets)} planets with "
                 f"{sum(len(p.rings) for p in planets)} ring(s) and "
                 f"{sum(len(p.satellites) for p in planets)} satellite(s).")
    return planets
