# config.py
import logging

# Configure basic logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(module)s - %(message)s')

# Fundamental animation constant: every angular delta is derived against this rate.
TARGET_FRAME_RATE = 60

class ConfigurationError(Exception):
    """Custom exception for solar system configuration errors.

    Raised by `SimulationConfig.validate()` and other configuration-dependent
    components when settings are invalid, inconsistent, or missing, which
    would prevent the animation from running correctly.

    Attributes:
        message (str): A human-readable explanation of the configuration error.
                       This is the first argument passed to the exception constructor.
    """
    pass

class SimulationConfig:
    """Centralized, hierarchical configuration for the solar system renderer.

    All parameters live in nested static classes (e.g., `SimulationConfig.Display`,
    `SimulationConfig.Starfield`, `SimulationConfig.SolarSystem`) for organized
    access. An instance of this class, named `config`, is created at the end of
    this module, making it globally available via `from config import config`.

    The `__init__` method invokes `validate()`, which checks ranges and
    interdependencies and raises a `ConfigurationError` if any issue is found.

    Example Usage:
        >>> from config import config
        >>> print(f"Window: {config.Display.SCREEN_WIDTH_PX}x{config.Display.SCREEN_HEIGHT_PX}")
        >>> print(f"Frame rate used for deltas: {config.Time.FRAME_RATE}")
    """

    # --- Display Configuration ---
    class Display:
        """Configuration for the pygame display window.

        Attributes:
            SCREEN_WIDTH_PX (int): Initial width of the window in pixels.
            SCREEN_HEIGHT_PX (int): Initial height of the window in pixels.
            FPS (int): Frame cap handed to `pygame.time.Clock.tick`.
            BACKGROUND_COLOR (Tuple[int, int, int]): Color the canvas is cleared to each frame.
            CAPTION (str): Window title.
            RESIZABLE (bool): Whether the window may be resized by the user.
        """
        SCREEN_WIDTH_PX = 1400
        SCREEN_HEIGHT_PX = 900
        FPS = 60
        BACKGROUND_COLOR = (0, 0, 0)
        CAPTION = "Solar System"
        RESIZABLE = True

    # --- Time Configuration ---
    class Time:
        """Configuration related to animation time progression.

        Attributes:
            FRAME_RATE (int): Frames per second assumed when turning a period into a
                              per-frame angular delta. Real frame delivery is not
                              measured, so playback speed only approximates wall-clock time.
        """
        FRAME_RATE = TARGET_FRAME_RATE

    # --- Starfield Configuration ---
    class Starfield:
        """Configuration for the drifting star backdrop.

        Attributes:
            STAR_COUNT (int): Number of stars kept on screen.
            RADII (List[float]): Radii a typical star is drawn with (picked uniformly).
            COLORS (List[Tuple[int, int, int]]): Colors a typical star is drawn with.
            BRIGHT_PROBABILITY (float): Chance that a star is a bright one.
            BRIGHT_COLOR (Tuple[int, int, int]): Color of bright stars.
            BRIGHT_RADIUS (float): Radius of bright stars.
            DIM_RADIUS (float): Radii at or below this value count as dim stars.
            DRIFT_DIVISOR (float): Per-frame drift is the offset from the center divided by this.
        """
        STAR_COUNT = 1000
        RADII = [0.3, 0.4, 0.4, 0.5]
        COLORS = [(255, 255, 255), (255, 233, 196), (212, 251, 255)]
        BRIGHT_PROBABILITY = 0.01
        BRIGHT_COLOR = (255, 255, 0)
        BRIGHT_RADIUS = 0.8
        DIM_RADIUS = 0.3
        DRIFT_DIVISOR = 2500.0

    # --- Orbit Path Configuration ---
    class OrbitPath:
        """Configuration for the fading arc drawn behind orbiting bodies.

        Attributes:
            ARC_DEGREES (float): Sweep of the arc trailing the body.
            LINE_WIDTH_PX (int): Stroke width of the arc.
            SEGMENTS (int): Number of straight segments approximating the arc.
            COLOR (Tuple[int, int, int]): Color at the leading (opaque) edge.
        """
        ARC_DEGREES = 120.0
        LINE_WIDTH_PX = 1
        SEGMENTS = 48
        COLOR = (255, 255, 255)

    # --- Lighting Configuration ---
    class Lighting:
        """Configuration for the day/night shading of planet sprites.

        Attributes:
            GRADIENT_STOPS (List[Tuple[float, float]]): `(offset, black_alpha)` pairs of
                the radial gradient laid from the sun outward across the planet.
        """
        GRADIENT_STOPS = [(0.0, 0.0), (0.3, 0.0), (0.6, 0.6), (0.9, 0.8)]

    # --- Ring Configuration ---
    class Ring:
        """Configuration for planetary rings.

        Attributes:
            SHEAR (float): Vertical shear applied to the ring so it reads as a tilted disk.
            SEGMENTS (int): Number of vertices used for each ring edge.
        """
        SHEAR = 0.3
        SEGMENTS = 64

    # --- Sun Glow Configuration ---
    class SunGlow:
        """Configuration for the halo drawn behind the sun.

        Attributes:
            BLUR_PX (int): How far the glow reaches beyond the sun's edge.
            COLOR (Tuple[int, int, int]): Glow color.
            LAYERS (int): Number of additive layers approximating the blur.
        """
        BLUR_PX = 25
        COLOR = (255, 255, 255)
        LAYERS = 5

    # --- Asset Configuration ---
    class Assets:
        """Configuration for sprite image loading.

        Attributes:
            IMAGE_DIR (str): Directory the sprite images are read from.
            LOADS_PER_FRAME (int): Pending images completed by the loader per frame.
        """
        IMAGE_DIR = "images"
        LOADS_PER_FRAME = 2

    # --- Solar System Configuration ---
    class SolarSystem:
        """Physical constants of every body in the scene.

        Periods are seconds of animation time for one full turn; radii and sizes are
        screen pixels. Planets are listed innermost first and drawn in that order.

        Attributes:
            SUN_DATA (Dict[str, Any]): Sprite and spin of the sun.
            PLANET_DATA (Dict[str, Dict[str, Any]]): Per-planet sprite, spin and orbit,
                plus optional `rings` and `satellites`.
        """
        SUN_DATA = {
            'name': 'Sun', 'image': 'sun.png', 'size_px': (80, 80),
            'rotation_period_s': 30.0, 'placeholder_color': (255, 200, 64)
        }

        PLANET_DATA = {
            'Mercury': {
                'image': 'mercury.png', 'size_px': (10, 10), 'rotation_period_s': 6.0,
                'orbit_radius_px': 60.0, 'orbital_period_s': 8.8, 'placeholder_color': (160, 160, 160)
            },
            'Venus': {
                'image': 'venus.png', 'size_px': (10, 10), 'rotation_period_s': 25.0,
                'orbit_radius_px': 80.0, 'orbital_period_s': 22.5, 'placeholder_color': (222, 184, 135)
            },
            'Earth': {
                'image': 'earth.png', 'size_px': (30, 30), 'rotation_period_s': 6.5,
                'orbit_radius_px': 120.0, 'orbital_period_s': 36.5, 'placeholder_color': (70, 130, 220),
                'satellites': [
                    {'name': 'Moon', 'image': 'moon.png', 'size_px': (8, 8), 'rotation_period_s': 2.73,
                     'orbit_radius_px': 20.0, 'orbital_period_s': 2.73, 'placeholder_color': (200, 200, 200)}
                ]
            },
            'Mars': {
                'image': 'mars.png', 'size_px': (18, 18), 'rotation_period_s': 8.0,
                'orbit_radius_px': 160.0, 'orbital_period_s': 42.0, 'placeholder_color': (193, 68, 14)
            },
            'Jupiter': {
                'image': 'jupiter.png', 'size_px': (27, 27), 'rotation_period_s': 24.0,
                'orbit_radius_px': 200.0, 'orbital_period_s': 57.0, 'placeholder_color': (216, 160, 110)
            },
            'Saturn': {
                'image': 'saturn.png', 'size_px': (27, 27), 'rotation_period_s': 28.0,
                'orbit_radius_px': 240.0, 'orbital_period_s': 62.0, 'placeholder_color': (227, 206, 150),
                'rings': [
                    {'inner_radius_px': 17.0, 'outer_radius_px': 20.0, 'color': (200, 200, 200, 128),
                     'rotation_period_s': 16.0}
                ]
            },
            'Uranus': {
                'image': 'uranus.png', 'size_px': (24, 24), 'rotation_period_s': 34.0,
                'orbit_radius_px': 280.0, 'orbital_period_s': 74.0, 'placeholder_color': (150, 220, 230)
            },
            'Neptune': {
                'image': 'neptune.png', 'size_px': (24, 24), 'rotation_period_s': 40.0,
                'orbit_radius_px': 320.0, 'orbital_period_s': 81.0, 'placeholder_color': (63, 81, 181)
            },
            'Pluto': {
                'image': 'pluto.png', 'size_px': (24, 24), 'rotation_period_s': 44.0,
                'orbit_radius_px': 360.0, 'orbital_period_s': 90.0, 'placeholder_color': (180, 150, 120)
            }
        }

    # --- Monitoring Configuration ---
    class Monitoring:
        """Configuration for system resource monitoring.

        Attributes:
            MEMORY_USAGE_WARN_MB (int): Memory usage threshold in Megabytes. If exceeded,
                                        a warning is logged.
            MEMORY_CHECK_INTERVAL_FRAMES (int): Frequency (in frames) at which
                                                memory usage is checked.
        """
        MEMORY_USAGE_WARN_MB = 1024
        MEMORY_CHECK_INTERVAL_FRAMES = 600

    # --- Debug Configuration ---
    class Debug:
        """Configuration for debugging features and logging verbosity.

        Attributes:
            LOG_BODY_POSITIONS (bool): If True, the scene periodically logs body positions.
            LOG_INTERVAL_FRAMES (int): Frequency (frames) of position logging.
            LOG_BODY_NAMES (List[str]): Names of the bodies whose positions are logged.
        """
        LOG_BODY_POSITIONS = False
        LOG_INTERVAL_FRAMES = 600
        LOG_BODY_NAMES = ["Earth", "Moon"]

    def __init__(self):
        """Initializes the `SimulationConfig` instance and validates it.

        Raises:
            ConfigurationError: If `self.validate()` detects any issues with the
                                configuration values.
        """
        self.validate()

    def validate(self):
        """Performs validation of all configuration settings.

        Checks display and timing values, starfield probabilities, gradient stops,
        and every celestial body's periods, radii and ring bounds. A period of zero
        would make the per-frame delta undefined, so periods must be positive.

        Raises:
            ConfigurationError: If any configuration setting is found to be invalid.
        """
        # Display
        if self.Display.SCREEN_WIDTH_PX <= 0 or self.Display.SCREEN_HEIGHT_PX <= 0:
            raise ConfigurationError("Display screen dimensions (SCREEN_WIDTH_PX, SCREEN_HEIGHT_PX) must be positive.")
        if self.Display.FPS <= 0:
            raise ConfigurationError("Display.FPS must be positive.")

        # Time
        if self.Time.FRAME_RATE <= 0:
            raise ConfigurationError("Time.FRAME_RATE must be positive.")
        if self.Time.FRAME_RATE != self.Display.FPS:
            logging.warning(
                f"Time.FRAME_RATE ({self.Time.FRAME_RATE}) differs from Display.FPS ({self.Display.FPS}). "
                "Animation speed will not match the configured periods."
            )

        # Starfield
        if self.Starfield.STAR_COUNT < 0:
            raise ConfigurationError("Starfield.STAR_COUNT cannot be negative.")
        if not (0.0 <= self.Starfield.BRIGHT_PROBABILITY <= 1.0):
            raise ConfigurationError(
                f"Starfield.BRIGHT_PROBABILITY ({self.Starfield.BRIGHT_PROBABILITY}) must be between 0.0 and 1.0."
            )
        if not self.Starfield.RADII or not self.Starfield.COLORS:
            raise ConfigurationError("Starfield.RADII and Starfield.COLORS must not be empty.")
        if self.Starfield.DRIFT_DIVISOR <= 0:
            raise ConfigurationError("Starfield.DRIFT_DIVISOR must be positive.")

        # Orbit path, rings
        if not (0.0 < self.OrbitPath.ARC_DEGREES <= 360.0):
            raise ConfigurationError("OrbitPath.ARC_DEGREES must be in (0, 360].")
        if self.OrbitPath.SEGMENTS <= 0 or self.Ring.SEGMENTS < 3:
            raise ConfigurationError("OrbitPath.SEGMENTS must be positive and Ring.SEGMENTS at least 3.")

        # Lighting
        offsets = [offset for offset, _ in self.Lighting.GRADIENT_STOPS]
        if not offsets or offsets != sorted(offsets):
            raise ConfigurationError("Lighting.GRADIENT_STOPS must be a non-empty list ordered by offset.")
        for offset, alpha in self.Lighting.GRADIENT_STOPS:
            if not (0.0 <= offset <= 1.0) or not (0.0 <= alpha <= 1.0):
                raise ConfigurationError(f"Gradient stop ({offset}, {alpha}) must have offset and alpha in [0, 1].")

        # Assets
        if self.Assets.LOADS_PER_FRAME <= 0:
            raise ConfigurationError("Assets.LOADS_PER_FRAME must be positive.")

        # Solar System Data Validation
        if self.SolarSystem.SUN_DATA.get('rotation_period_s', 0.0) <= 0:
            raise ConfigurationError("Sun rotation period must be positive.")

        for name, data in self.SolarSystem.PLANET_DATA.items():
            self._validate_body(name, data)
            for ring in data.get('rings', []):
                if ring.get('rotation_period_s', 0.0) <= 0:
                    raise ConfigurationError(f"Ring of '{name}' must have a positive rotation period.")
                if not (0.0 <= ring.get('inner_radius_px', -1.0) < ring.get('outer_radius_px', -1.0)):
                    raise ConfigurationError(
                        f"Ring of '{name}' must satisfy 0 <= inner_radius_px < outer_radius_px."
                    )
            for satellite in data.get('satellites', []):
                self._validate_body(satellite.get('name', f"{name} satellite"), satellite)

        if self.Monitoring.MEMORY_CHECK_INTERVAL_FRAMES <= 0 or self.Debug.LOG_INTERVAL_FRAMES <= 0:
            raise ConfigurationError("Monitoring and debug intervals must be positive.")

        logging.info("Configuration validated successfully.")

    @staticmethod
    def _validate_body(name, data):
        if data.get('rotation_period_s', 0.0) <= 0:
            raise ConfigurationError(f"Rotation period of '{name}' must be positive.")
        if data.get('orbital_period_s', 0.0) <= 0:
            raise ConfigurationError(f"Orbital period of '{name}' must be positive.")
        if data.get('orbit_radius_px', -1.0) < 0:
            raise ConfigurationError(f"Orbit radius of '{name}' cannot be negative.")
        width, height = data.get('size_px', (0, 0))
        if width <= 0 or height <= 0:
            raise ConfigurationError(f"Sprite size of '{name}' must be positive.")


# --- Instantiate the configuration ---
# This makes the config object available for import and runs validation.
# e.g., from config import config
try:
    config = SimulationConfig()
except ConfigurationError as e:
    logging.error(f"FATAL CONFIGURATION ERROR: {e}", exc_info=True)
    raise
