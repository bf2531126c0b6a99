import os
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import unittest

import numpy as np
import pygame

from kinematics import Angle
from lighting import LightingCompositor
from sprites import FrameContext


def _opaque_sprite(size=20, color=(255, 255, 255)):
    sprite = pygame.Surface((size, size), pygame.SRCALPHA)
    sprite.fill((*color, 255))
    return sprite


class TestLightingGeometry(unittest.TestCase):

    def test_sun_direction_compensates_self_rotation(self):
        context = FrameContext(Angle(0), 100.0, Angle(0))
        sun = LightingCompositor.sun_position(context)
        self.assertAlmostEqual(sun.x, -100.0)
        self.assertAlmostEqual(sun.y, 0.0)

        # Orbit and spin advanced by the same amount leave the sun where it was
        rotated = LightingCompositor.sun_position(FrameContext(Angle(90), 100.0, Angle(90)))
        self.assertAlmostEqual(rotated.x, -100.0)
        self.assertAlmostEqual(rotated.y, 0.0)

        # A half-turn spin moves the sun to the other side of the sprite
        flipped = LightingCompositor.sun_position(FrameContext(Angle(0), 100.0, Angle(180)))
        self.assertAlmostEqual(flipped.x, 100.0)

    def test_gradient_radii(self):
        self.assertEqual(LightingCompositor.gradient_radii(30, 20, 120.0), (105.0, 135.0))
        self.assertEqual(LightingCompositor.gradient_radii(30, 30, 5.0), (0.0, 20.0))

    def test_shade_alpha_follows_stops(self):
        compositor = LightingCompositor(stops=[(0.0, 0.0), (0.3, 0.0), (0.6, 0.6), (0.9, 0.8)])
        alpha = compositor.shade_alpha(20, 20, FrameContext(Angle(0), 100.0, Angle(0)))
        self.assertEqual(alpha.shape, (20, 20))
        self.assertAlmostEqual(alpha[0, 10], 0.0)            # side facing the sun
        self.assertAlmostEqual(alpha[19, 10], 0.8, places=3)  # far side, past the last stop
        # monotonic darkening across the terminator
        row = alpha[:, 10]
        self.assertTrue(np.all(np.diff(row) >= -1e-12))


class TestLightingCompositor(unittest.TestCase):

    def setUp(self):
        self.compositor = LightingCompositor()

    def test_lit_and_dark_sides(self):
        sprite = _opaque_sprite()
        shaded = self.compositor.shade(sprite, FrameContext(Angle(0), 100.0, Angle(0)))
        self.assertEqual(shaded.get_size(), (20, 20))
        self.assertEqual(tuple(shaded.get_at((0, 10))), (255, 255, 255, 255))
        dark = shaded.get_at((19, 10))
        self.assertLessEqual(dark.r, 60)
        self.assertEqual(dark.a, 255)

    def test_original_sprite_is_untouched(self):
        sprite = _opaque_sprite()
        self.compositor.shade(sprite, FrameContext(Angle(0), 100.0, Angle(0)))
        self.assertEqual(tuple(sprite.get_at((19, 10))), (255, 255, 255, 255))

    def test_alpha_channel_and_transparent_pixels_preserved(self):
        sprite = pygame.Surface((20, 20), pygame.SRCALPHA)
        sprite.fill((0, 0, 0, 0))
        pygame.draw.circle(sprite, (200, 100, 50, 255), (10, 10), 8)
        shaded = self.compositor.shade(sprite, FrameContext(Angle(45), 80.0, Angle(10)))

        original_alpha = pygame.surfarray.array_alpha(sprite)
        shaded_alpha = pygame.surfarray.array_alpha(shaded)
        np.testing.assert_array_equal(original_alpha, shaded_alpha)
        self.assertEqual(shaded.get_at((0, 0)).a, 0)

    def test_opaque_surface_input(self):
        sprite = pygame.Surface((20, 20))
        sprite.fill((255, 255, 255))
        shaded = self.compositor.shade(sprite, FrameContext(Angle(0), 100.0, Angle(0)))
        self.assertEqual(shaded.get_at((0, 10)).a, 255)
        self.assertLess(shaded.get_at((19, 10)).r, 255)

    def test_fresh_buffer_every_call(self):
        sprite = _opaque_sprite()
        first = self.compositor.shade(sprite, FrameContext(Angle(0), 100.0, Angle(0)))
        second = self.compositor.shade(sprite, FrameContext(Angle(0), 100.0, Angle(180)))
        self.assertIsNot(first, second)
        # with the sun moved to the other side the lit edge swaps
        self.assertLess(second.get_at((0, 10)).r, 100)
        self.assertEqual(second.get_at((19, 10)).r, 255)


if __name__ == '__main__':
    unittest.main()
