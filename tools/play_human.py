"""
Human Play Mode
================

Play Neon Pong in a pygame window.

Controls:
    - Up/Down or W/S: Move paddle
    - Mouse drag / finger drag: Move paddle
    - Click or tap: Start
    - Space: Start / pause / resume
    - 1/2/3: Easy / medium / hard (before starting)
    - R: Restart game
    - ESC: Quit

The high score is kept in a JSON file between sessions.

Usage:
    python -m tools.play_human [--difficulty NAME] [--width W] [--height H]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

import pygame

from neon_pong.pong_core.config_loader import GameConfig, load_config
from neon_pong.pong_core.entities import fit_viewport
from neon_pong.pong_core.frame_driver import FrameDriver
from neon_pong.pong_core.game import CoreGame
from neon_pong.pong_core.persistence import JsonFileStore
from neon_pong.pong_core.render_pygame import PygameRenderer
from neon_pong.pong_core.rules import GamePhase
from neon_pong.pong_core.state_snapshot import GameSnapshot
from neon_pong.pong_core.world import Difficulty

DEFAULT_SCORE_FILE = Path.home() / ".neon_pong" / "scores.json"

# pygame keys whose identifier is not the typed character
NAMED_KEYS = {
    pygame.K_UP: "ArrowUp",
    pygame.K_DOWN: "ArrowDown",
    pygame.K_SPACE: " ",
}

DIFFICULTY_KEYS = {
    pygame.K_1: Difficulty.EASY,
    pygame.K_2: Difficulty.MEDIUM,
    pygame.K_3: Difficulty.HARD,
}


def key_identifier(key: int, unicode: str = "") -> Optional[str]:
    """
    Translate a pygame key event into the game's key identifier.

    Named keys map to their browser-style names; printable keys map to the
    typed character so "W" and "w" stay distinct.
    """
    if key in NAMED_KEYS:
        return NAMED_KEYS[key]
    if unicode and unicode.isprintable():
        return unicode
    name = pygame.key.name(key)
    return name if len(name) == 1 else None


class HumanPlayer:
    """Interactive pygame front end around CoreGame and FrameDriver."""

    def __init__(
        self,
        config: GameConfig,
        width: int,
        height: int,
        difficulty: Optional[str] = None,
        score_file: Path = DEFAULT_SCORE_FILE,
        seed: Optional[int] = None,
    ):
        pygame.init()

        self._config = config
        self._game = CoreGame(
            config=config,
            width=width,
            height=height,
            seed=seed,
            store=JsonFileStore(score_file),
            difficulty=difficulty
        )
        self._renderer = PygameRenderer(config)
        self._driver = FrameDriver(self._game, render=self._render)
        self._clock = pygame.time.Clock()
        self._target_fps = config.frame.target_fps
        self._last_phase = self._game.phase

    @property
    def game(self) -> CoreGame:
        return self._game

    def run(self) -> int:
        """Run the game loop. Returns final score."""
        print("=== Neon Pong ===")
        print("Arrows or W/S to move, drag to move on touch screens")
        print("SPACE to start/pause, 1/2/3 for difficulty, R to restart, ESC to quit")
        print(f"High score: {self._game.high_score}")
        print()

        self._driver.run(wait=self._wait)

        pygame.quit()
        return self._game.score

    def _wait(self) -> None:
        self._clock.tick(self._target_fps)
        self._handle_events()

    def _render(self, snapshot: GameSnapshot) -> None:
        self._renderer.render_to_screen(snapshot)
        self._report(snapshot)

    def _report(self, snapshot: GameSnapshot) -> None:
        """Print phase changes to the console."""
        phase = snapshot.phase
        if phase is self._last_phase:
            return
        if phase is GamePhase.GAME_OVER:
            print(f"GAME OVER - Score: {snapshot.score}  Max combo: x{snapshot.max_combo}")
            if snapshot.is_new_high_score:
                print("  New high score!")
        elif phase is GamePhase.RUNNING and self._last_phase is GamePhase.NOT_STARTED:
            print(f"Started ({snapshot.difficulty.value})")
        self._last_phase = phase

    def _handle_events(self) -> None:
        """Process pygame events."""
        height = self._game.world.height
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._driver.stop()

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._driver.stop()
                elif event.key in DIFFICULTY_KEYS:
                    if self._game.set_difficulty(DIFFICULTY_KEYS[event.key]):
                        print(f"Difficulty: {self._game.difficulty.value}")
                else:
                    key = key_identifier(event.key, event.unicode)
                    if key is not None:
                        self._game.key_down(key)
                        if key in self._config.input.reset:
                            print("\n=== Game Restarted ===\n")

            elif event.type == pygame.KEYUP:
                key = key_identifier(event.key, getattr(event, "unicode", ""))
                if key is not None:
                    self._game.key_up(key)
                # Shifted and unshifted letters share a physical key
                name = pygame.key.name(event.key)
                if len(name) == 1:
                    self._game.key_up(name)
                    self._game.key_up(name.upper())

            # Mouse events synthesized from touches are handled as fingers
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if not getattr(event, "touch", False):
                    self._game.click()
                    self._game.touch_start(event.pos[1])
            elif event.type == pygame.MOUSEMOTION and event.buttons[0]:
                if not getattr(event, "touch", False):
                    self._game.touch_move(event.pos[1])
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                if not getattr(event, "touch", False):
                    self._game.touch_end()

            elif event.type == pygame.FINGERDOWN:
                self._game.click()
                self._game.touch_start(event.y * height)
            elif event.type == pygame.FINGERMOTION:
                self._game.touch_move(event.y * height)
            elif event.type == pygame.FINGERUP:
                self._game.touch_end()


def main():
    parser = argparse.ArgumentParser(description="Play Neon Pong interactively")
    parser.add_argument("--difficulty", choices=[d.value for d in Difficulty], default=None,
                        help="Starting difficulty (default from config)")
    parser.add_argument("--width", type=int, default=None,
                        help="Container width to fit the playfield into (default: base width)")
    parser.add_argument("--height", type=int, default=None,
                        help="Window height used to cap the playfield (default: fit base height)")
    parser.add_argument("--scores", type=Path, default=DEFAULT_SCORE_FILE,
                        help=f"High score file (default: {DEFAULT_SCORE_FILE})")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for effects")

    args = parser.parse_args()

    config = load_config()
    viewport = config.viewport
    if args.width is None and args.height is None:
        width, height = viewport.base_width, viewport.base_height
    else:
        container = args.width if args.width is not None else viewport.max_width + viewport.container_margin
        window = args.height if args.height is not None else viewport.max_height / viewport.max_height_fraction
        width, height = fit_viewport(container, window, config)

    player = HumanPlayer(
        config=config,
        width=int(width),
        height=int(height),
        difficulty=args.difficulty,
        score_file=args.scores,
        seed=args.seed
    )
    score = player.run()
    print(f"\nFinal Score: {score}")
    print(f"High Score: {player.game.high_score}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
