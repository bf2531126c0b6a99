import os
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import random
import tempfile
import unittest
from unittest.mock import patch

import pygame

from config import config
from kinematics import Orbit, Point, Time
from scene import Scene
from solarsystem import Planet, Satellite, build_sun
from sprites import AssetLoader, RotatableSprite, SpriteShader

MISSING_DIR = os.path.join(tempfile.gettempdir(), "no-such-image-dir")


class _FailingShader(SpriteShader):
    def shade(self, image, context):
        raise ValueError("shader produced no image")


class TestSceneAnimation(unittest.TestCase):

    def test_earth_returns_to_start_after_one_year(self):
        loader = AssetLoader(image_dir=MISSING_DIR)
        sprite = RotatableSprite(loader.request("earth.png", (30, 30)), Time(6.5), frame_rate=60)
        earth = Planet("Earth", sprite, Orbit(Point(0, 0), 120.0, Time(36.5), frame_rate=60))
        scene = Scene(800, 600, star_count=0, frame_rate=60)
        scene.add_planet(earth)

        for _ in range(2190):
            scene.advance()

        difference = abs(earth.orbit.angle.degrees - 0.0)
        self.assertLess(min(difference, 360.0 - difference), 1e-6)
        self.assertAlmostEqual(earth.center.x, 120.0, places=4)
        self.assertAlmostEqual(earth.center.y, 0.0, places=4)
        self.assertEqual(scene.frame_count, 2190)

    def test_periodic_position_logging(self):
        loader = AssetLoader(image_dir=MISSING_DIR)
        earth = Planet("Earth", RotatableSprite(loader.request("earth.png", (30, 30)), Time(6.5)),
                       Orbit(Point(0, 0), 120.0, Time(36.5)))
        earth.attach_satellite(Satellite("Moon", RotatableSprite(loader.request("moon.png", (8, 8)), Time(2.73))),
                               20.0, Time(2.73))
        earth.satellites.append(Satellite("Lost", RotatableSprite(loader.request("lost.png", (8, 8)), Time(2))))
        scene = Scene(800, 600, star_count=0)
        scene.add_planet(earth)

        with patch.object(config.Debug, 'LOG_BODY_POSITIONS', True), \
                patch.object(config.Debug, 'LOG_INTERVAL_FRAMES', 2), \
                patch.object(config.Debug, 'LOG_BODY_NAMES', ["Earth", "Moon", "Lost", "Vulcan"]):
            scene.advance()
            with self.assertLogs(level='INFO') as logs:
                scene.advance()

        position_lines = [line for line in logs.output if "Frame 2:" in line]
        self.assertEqual(len(position_lines), 2)
        self.assertTrue(any("Earth at (" in line for line in position_lines))
        self.assertTrue(any("Moon at (" in line for line in position_lines))
        self.assertFalse(any("Lost" in line for line in logs.output))

    def test_position_logging_off_by_default(self):
        scene = Scene(800, 600, star_count=0)
        with patch.object(config.Debug, 'LOG_INTERVAL_FRAMES', 1), \
                patch.object(Scene, '_log_positions') as log_positions:
            scene.advance()
        log_positions.assert_not_called()


class TestSceneRendering(unittest.TestCase):

    def setUp(self):
        self.loader = AssetLoader(image_dir=MISSING_DIR)
        self.surface = pygame.Surface((400, 300))

    def test_broken_body_does_not_stop_frame(self):
        scene = Scene(400, 300, star_count=0, sun=build_sun((200, 150), self.loader))
        lost = Satellite("Lost", RotatableSprite(self.loader.request("lost.png", (8, 8)), Time(2)))
        scene.planets.append(lost)
        self.loader.load_all()

        with self.assertLogs(level='ERROR') as logs:
            scene.render(self.surface)
        self.assertTrue(any("Lost" in line for line in logs.output))
        # the rest of the frame was still drawn
        self.assertNotEqual(tuple(self.surface.get_at((200, 150)))[:3], (0, 0, 0))

    def test_failing_shader_does_not_stop_later_planets(self):
        scene = Scene(400, 300, star_count=0)
        broken_sprite = RotatableSprite(self.loader.request("broken.png", (20, 20)), Time(5),
                                        shader=_FailingShader())
        scene.add_planet(Planet("Broken", broken_sprite, Orbit(Point(100, 150), 0.0, Time(10))))
        healthy_sprite = RotatableSprite(self.loader.request("healthy.png", (20, 20), (0, 200, 0)), Time(5))
        scene.add_planet(Planet("Healthy", healthy_sprite, Orbit(Point(300, 150), 0.0, Time(10))))
        self.loader.load_all()

        with self.assertLogs(level='ERROR') as logs:
            scene.render(self.surface)
        self.assertTrue(any("Broken" in line and "shader produced no image" in line for line in logs.output))
        self.assertEqual(tuple(self.surface.get_at((300, 150)))[:3], (0, 200, 0))

    def test_render_clears_to_background(self):
        self.surface.fill((255, 0, 0))
        scene = Scene(400, 300, star_count=0)
        scene.render(self.surface)
        self.assertEqual(tuple(self.surface.get_at((10, 10)))[:3], config.Display.BACKGROUND_COLOR)

    def test_set_viewport_recenters_sun_and_regenerates_stars(self):
        scene = Scene.create_default(400, 300, self.loader, star_count=20, rng=random.Random(5))
        earth = scene.find_body("Earth")
        offset_before = Point(earth.center.x - scene.sun.center.x, earth.center.y - scene.sun.center.y)
        old_stars = list(scene.starfield.stars)

        scene.set_viewport(1000, 800)

        self.assertEqual(scene.sun.center, Point(500, 400))
        self.assertAlmostEqual(earth.center.x - 500, offset_before.x)
        self.assertAlmostEqual(earth.center.y - 400, offset_before.y)
        self.assertEqual(len(scene.starfield), 20)
        self.assertFalse(any(a is b for a, b in zip(old_stars, scene.starfield.stars)))
        for star in scene.starfield.stars:
            self.assertLess(star.center.x, 1000)
            self.assertLess(star.center.y, 800)

    def test_find_body_searches_children(self):
        scene = Scene.create_default(400, 300, self.loader, star_count=0)
        self.assertIs(scene.find_body("Sun"), scene.sun)
        self.assertEqual(scene.find_body("Moon").name, "Moon")
        self.assertEqual(scene.find_body("Saturn ring").name, "Saturn ring")
        self.assertIsNone(scene.find_body("Vulcan"))

    def test_default_scene_renders_frames(self):
        scene = Scene.create_default(800, 600, self.loader, star_count=50, rng=random.Random(1))
        self.assertEqual(len(scene.planets), len(config.SolarSystem.PLANET_DATA))
        surface = pygame.Surface((800, 600))
        # first frame draws with images still pending
        scene.advance()
        scene.render(surface)
        self.loader.load_all()
        for _ in range(3):
            scene.advance()
            scene.render(surface)
        self.assertEqual(scene.frame_count, 4)
        self.assertNotEqual(tuple(surface.get_at((400, 300)))[:3], (0, 0, 0))


if __name__ == '__main__':
    unittest.main()
