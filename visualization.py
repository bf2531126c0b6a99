# visualization.py
import pygame
import logging
from typing import Callable, Optional

from config import config, ConfigurationError
from scene import Scene
from sprites import AssetLoader

class Visualization:
    """Owns the pygame window and drives the scene once per display frame.

    This class is responsible for:
    - Initializing pygame, the (resizable) display window and the frame clock.
    - Translating window events: closing the window or pressing Escape stops the
      loop, resizing notifies the scene of the new viewport.
    - Running the frame: `scene.advance()`, `scene.render()`, then letting the
      `AssetLoader` finish a few images (whose deferred draws land on this frame),
      flipping the display and ticking the clock.

    Attributes:
        screen (pygame.Surface | None): The display surface. `None` if display
            initialization failed.
        visualization_enabled (bool): `False` if the display could not be created.
        clock (pygame.time.Clock | None): Frame clock capped at `config.Display.FPS`.
        fps (int): Frame cap.
        running (bool): Loop flag; cleared by quit events or `stop()`.

    Raises:
        ConfigurationError: If the configured screen dimensions are invalid.
    """
    def __init__(self, width: int = None, height: int = None, fps: int = None):
        self.width = width if width is not None else config.Display.SCREEN_WIDTH_PX
        self.height = height if height is not None else config.Display.SCREEN_HEIGHT_PX
        self.fps = fps if fps is not None else config.Display.FPS
        self.running = False
        self.clock = None
        self.screen = None
        self.visualization_enabled = True

        if not (isinstance(self.width, int) and self.width > 0 and
                isinstance(self.height, int) and self.height > 0):
            raise ConfigurationError(f"Screen dimensions must be positive integers, got {self.width}x{self.height}.")
        if self.fps <= 0:
            raise ConfigurationError(f"FPS must be positive, got {self.fps}.")

        try:
            pygame.init()
            flags = pygame.RESIZABLE if config.Display.RESIZABLE else 0
            self.screen = pygame.display.set_mode((self.width, self.height), flags)
            pygame.display.set_caption(config.Display.CAPTION)
            self.clock = pygame.time.Clock()
            logging.info(f"Display initialized at {self.width}x{self.height}, capped at {self.fps} fps.")
        except pygame.error as e_disp:
            logging.critical(f"Error setting display mode: {e_disp}. Visualization disabled.", exc_info=True)
            self.screen = None
            self.visualization_enabled = False

    def handle_events(self, scene: Scene) -> None:
        """Processes pending window events for this frame."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.running = False
            elif event.type == pygame.VIDEORESIZE:
                self.width, self.height = max(1, event.w), max(1, event.h)
                # pygame 2 resizes the display surface itself
                self.screen = pygame.display.get_surface() or pygame.display.set_mode(
                    (self.width, self.height), pygame.RESIZABLE)
                scene.set_viewport(self.width, self.height)

    def render_frame(self, scene: Scene, loader: Optional[AssetLoader] = None) -> None:
        """Advances and draws one frame, then presents it."""
        scene.advance()
        scene.render(self.screen)
        if loader is not None and loader.pending:
            loader.pump()
        pygame.display.flip()
        if self.clock:
            self.clock.tick(self.fps)

    def run(self, scene: Scene, loader: Optional[AssetLoader] = None, max_frames: int = None,
            on_frame: Callable[[int], None] = None) -> int:
        """Runs the frame loop until the window closes or `max_frames` frames are shown.

        Returns:
            int: The number of frames rendered.
        """
        if not self.visualization_enabled or self.screen is None:
            logging.error("Visualization is disabled; nothing to run.")
            return 0

        if (scene.width, scene.height) != (self.width, self.height):
            scene.set_viewport(self.width, self.height)

        self.running = True
        frames = 0
        try:
            while self.running:
                self.handle_events(scene)
                if not self.running:
                    break
                self.render_frame(scene, loader)
                frames += 1
                if on_frame is not None:
                    on_frame(frames)
                if max_frames is not None and frames >= max_frames:
                    self.running = False
        except pygame.error as e_pygame_render:
            logging.critical(f"Pygame error in the frame loop after {frames} frames: {e_pygame_render}", exc_info=True)
            raise
        finally:
            self.running = False
        logging.info(f"Frame loop stopped after {frames} frames.")
        return frames

    def stop(self) -> None:
        self.running = False

    def close(self) -> None:
        if pygame.get_init():
            pygame.quit()
        self.screen = None
        self.visualization_enabled = False
