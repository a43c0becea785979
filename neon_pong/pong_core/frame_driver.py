"""
Frame Driver
============

Single-threaded frame loop: one simulation step and one render per tick,
with a rolling FPS counter fed back into the game state for display.

The host decides how ticks are paced (vsync, ``pygame.time.Clock.tick``,
or as fast as possible in tests).
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Callable, Optional

from neon_pong.pong_core.state_snapshot import GameSnapshot

if TYPE_CHECKING:
    from neon_pong.pong_core.game import CoreGame


class FpsCounter:
    """
    Counts frames over a wall-clock window.

    The count is published once the window has elapsed, then restarts.
    """

    def __init__(self, window: float = 1.0, initial_fps: int = 60):
        self._window = window
        self._fps = initial_fps
        self._frames = 0
        self._window_start: Optional[float] = None

    @property
    def fps(self) -> int:
        return self._fps

    def tick(self, now: float) -> Optional[int]:
        """
        Count one frame at time ``now`` (seconds).

        Returns:
            The new FPS value when a window closed on this frame, else None.
        """
        if self._window_start is None:
            self._window_start = now

        self._frames += 1
        if now >= self._window_start + self._window:
            self._fps = self._frames
            self._frames = 0
            self._window_start = now
            return self._fps
        return None

    def reset(self, now: Optional[float] = None) -> None:
        self._frames = 0
        self._window_start = now


class FrameDriver:
    """
    Drives a CoreGame one frame at a time.

    Example:
        >>> driver = FrameDriver(game, render=renderer.draw)
        >>> driver.run(wait=lambda: clock.tick(60))
    """

    def __init__(
        self,
        game: "CoreGame",
        render: Optional[Callable[[GameSnapshot], None]] = None,
        clock: Callable[[], float] = time.perf_counter
    ):
        """
        Args:
            game: Game to advance.
            render: Called with each frame's snapshot.
            clock: Monotonic time source in seconds.
        """
        self._game = game
        self._render = render
        self._clock = clock
        frame_cfg = game.config.frame
        self._fps = FpsCounter(frame_cfg.fps_window, frame_cfg.initial_fps)
        self._frames = 0
        self._stopped = False

    @property
    def frames(self) -> int:
        """Total ticks executed."""
        return self._frames

    @property
    def fps(self) -> int:
        return self._fps.fps

    def stop(self) -> None:
        """Make ``run`` return after the current tick."""
        self._stopped = True

    def tick(self) -> GameSnapshot:
        """Measure FPS, step the game and render the resulting frame."""
        measured = self._fps.tick(self._clock())
        if measured is not None:
            self._game.set_fps(measured)

        snapshot = self._game.step().snapshot

        if self._render is not None:
            self._render(snapshot)

        self._frames += 1
        return snapshot

    def run(
        self,
        max_frames: Optional[int] = None,
        wait: Optional[Callable[[], object]] = None
    ) -> int:
        """
        Tick until stopped or ``max_frames`` ticks have run.

        Args:
            max_frames: Stop after this many ticks. Unbounded if None.
            wait: Called after every tick to pace the loop.

        Returns:
            Number of ticks executed by this call.
        """
        self._stopped = False
        ran = 0
        while not self._stopped and (max_frames is None or ran < max_frames):
            self.tick()
            ran += 1
            if wait is not None:
                wait()
        return ran
