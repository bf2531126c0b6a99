import unittest
from unittest.mock import patch

from config import ConfigurationError, SimulationConfig, config


class TestSimulationConfig(unittest.TestCase):

    def test_default_configuration_is_valid(self):
        config.validate() # must not raise
        self.assertEqual(config.Time.FRAME_RATE, 60)
        self.assertEqual(len(config.SolarSystem.PLANET_DATA), 9)

    def test_planets_are_listed_innermost_first(self):
        radii = [data['orbit_radius_px'] for data in config.SolarSystem.PLANET_DATA.values()]
        self.assertEqual(radii, sorted(radii))

    def test_zero_orbital_period_is_rejected(self):
        with patch.dict(SimulationConfig.SolarSystem.PLANET_DATA['Mars'], {'orbital_period_s': 0.0}):
            with self.assertRaises(ConfigurationError):
                config.validate()
        config.validate() # restored

    def test_zero_satellite_period_is_rejected(self):
        moon = SimulationConfig.SolarSystem.PLANET_DATA['Earth']['satellites'][0]
        with patch.dict(moon, {'rotation_period_s': 0}):
            with self.assertRaises(ConfigurationError):
                config.validate()

    def test_inverted_ring_radii_are_rejected(self):
        ring = SimulationConfig.SolarSystem.PLANET_DATA['Saturn']['rings'][0]
        with patch.dict(ring, {'inner_radius_px': 25.0}):
            with self.assertRaises(ConfigurationError):
                config.validate()

    def test_unordered_gradient_stops_are_rejected(self):
        with patch.object(SimulationConfig.Lighting, 'GRADIENT_STOPS', [(0.6, 0.6), (0.3, 0.0)]):
            with self.assertRaises(ConfigurationError):
                config.validate()

    def test_bright_probability_range(self):
        with patch.object(SimulationConfig.Starfield, 'BRIGHT_PROBABILITY', 1.5):
            with self.assertRaises(ConfigurationError):
                config.validate()

    def test_mismatched_frame_rate_only_warns(self):
        with patch.object(SimulationConfig.Display, 'FPS', 30):
            with self.assertLogs(level='WARNING') as logs:
                config.validate()
        self.assertTrue(any("FRAME_RATE" in line for line in logs.output))


if __name__ == '__main__':
    unittest.main()
