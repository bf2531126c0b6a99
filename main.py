# main.py
import os
import io
import random
import logging
import cProfile
import pstats
import argparse # For command line options (profiling, viewport, fps)

import psutil # For memory monitoring

from config import config, ConfigurationError # Use the global config instance
from scene import Scene
from sprites import AssetLoader
from visualization import Visualization

class SolarSystemApp:
    """Wires the configuration, asset loader, scene and display together.

    The scene is built once here and passed to the frame driver; there is no
    global scene instance.

    Attributes:
        loader (AssetLoader): Cooperative image loader shared by all sprites.
        visualization (Visualization): The pygame window and frame loop.
        scene (Scene): The solar system being animated.
        process (psutil.Process): Handle on this process for memory monitoring.
    """
    def __init__(self, width: int = None, height: int = None, fps: int = None, star_count: int = None,
                 image_dir: str = None, seed: int = None):
        try:
            self.loader = AssetLoader(image_dir=image_dir)
            self.visualization = Visualization(width, height, fps)
            self.scene = Scene.create_default(
                self.visualization.width, self.visualization.height, self.loader,
                star_count=star_count, rng=random.Random(seed)
            )
        except ConfigurationError as e: # Propagated from config or component init
            logging.critical(f"Failed to initialize SolarSystemApp due to ConfigurationError: {e}", exc_info=True)
            raise
        except Exception as e: # Other unexpected errors during component init
            logging.critical(f"An unexpected error occurred during SolarSystemApp initialization: {e}", exc_info=True)
            raise

        self.process = psutil.Process(os.getpid())
        logging.info("SolarSystemApp initialized successfully.")

    def check_memory(self, frame: int) -> float:
        """Logs resident memory every `MEMORY_CHECK_INTERVAL_FRAMES` frames; warns above the threshold.

        Returns:
            float: Resident set size in megabytes, or 0.0 if not checked this frame.
        """
        if frame % config.Monitoring.MEMORY_CHECK_INTERVAL_FRAMES != 0:
            return 0.0
        try:
            rss_mb = self.process.memory_info().rss / (1024 * 1024)
        except psutil.Error as e_psutil:
            logging.warning(f"Could not read memory usage: {e_psutil}")
            return 0.0
        if rss_mb > config.Monitoring.MEMORY_USAGE_WARN_MB:
            logging.warning(f"Memory usage {rss_mb:.1f} MB exceeds {config.Monitoring.MEMORY_USAGE_WARN_MB} MB at frame {frame}.")
        else:
            logging.debug(f"Memory usage at frame {frame}: {rss_mb:.1f} MB")
        return rss_mb

    def run(self, max_frames: int = None) -> int:
        try:
            return self.visualization.run(self.scene, self.loader, max_frames=max_frames,
                                          on_frame=self.check_memory)
        finally:
            self.visualization.close()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Animate the solar system.")
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Enable profiling. Statistics will be saved to 'simulation_profile.prof'."
    )
    parser.add_argument("--width", type=int, default=None, help="Initial window width in pixels.")
    parser.add_argument("--height", type=int, default=None, help="Initial window height in pixels.")
    parser.add_argument("--fps", type=int, default=None, help="Frame cap of the display loop.")
    parser.add_argument("--stars", type=int, default=None, help="Number of stars in the backdrop.")
    parser.add_argument("--assets", default=None, help="Directory holding the sprite images.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the star field.")
    parser.add_argument("--frames", type=int, default=None, help="Stop after this many frames.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging and periodic body position logs.")
    return parser.parse_args(argv)


def main(argv=None):
    """Entry point: parse options, optionally profile, and run the animation until the window closes."""
    args = parse_args(argv)
    if args.debug:
        config.Debug.LOG_BODY_POSITIONS = True
        logging.getLogger().setLevel(logging.DEBUG)

    profiler = None
    if args.profile:
        profiler = cProfile.Profile()
        profiler.enable()
        logging.info("cProfile profiling enabled. Output will be saved to simulation_profile.prof upon completion.")

    try:
        logging.info("Initializing SolarSystemApp...")
        app = SolarSystemApp(args.width, args.height, args.fps, args.stars, args.assets, args.seed)
        app.run(max_frames=args.frames)
    except ConfigurationError as e_config_main:
        logging.critical(f"SolarSystemApp could not be initialized or run due to a ConfigurationError: {e_config_main}", exc_info=True)
        return 1
    except Exception as e_main:
        logging.critical(f"An unexpected critical error occurred in the main execution block: {e_main}", exc_info=True)
        return 1
    finally:
        if profiler:
            profiler.disable()
            stats_file = "simulation_profile.prof"
            try:
                profiler.dump_stats(stats_file)
                logging.info(f"Profiling data successfully saved to {stats_file}")
                summary = io.StringIO()
                pstats.Stats(profiler, stream=summary).sort_stats('cumulative').print_stats(20)
                logging.info(f"\n--- Top 20 Profiled Functions (Cumulative Time) ---\n{summary.getvalue()}")
            except OSError as e_profile_dump:
                logging.error(f"Failed to save or process profiling data to {stats_file}: {e_profile_dump}", exc_info=True)
    logging.info("Solar system animation terminated.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
