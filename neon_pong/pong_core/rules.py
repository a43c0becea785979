"""
Game Rules
==========

Lifecycle state machine and difficulty selection.

    NOT_STARTED --start--> RUNNING <--toggle_pause--> PAUSED
    RUNNING --lose_ball--> GAME_OVER
    any --reset--> NOT_STARTED

Commands issued from a state where they are not valid are ignored and
return False.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Union

from neon_pong.pong_core.config_loader import GameConfig, get_config
from neon_pong.pong_core.world import Difficulty, GameState, World

logger = logging.getLogger(__name__)


class GamePhase(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


def get_phase(state: GameState) -> GamePhase:
    """Derive the coarse lifecycle phase from the state flags."""
    if not state.started:
        return GamePhase.NOT_STARTED
    if state.game_over:
        return GamePhase.GAME_OVER
    if state.paused:
        return GamePhase.PAUSED
    return GamePhase.RUNNING


class LifecycleRules:
    """
    Applies lifecycle transitions to a World.

    The ``started`` flag is one-way until ``reset``. Difficulty can only be
    changed before the game starts.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize lifecycle rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config

    def difficulty_multiplier(self, difficulty: Difficulty) -> float:
        """Launch speed multiplier for a difficulty."""
        return self._config.difficulty_multiplier(difficulty.value)

    def start(self, world: World) -> bool:
        """Leave NOT_STARTED. Returns True if the game started."""
        if get_phase(world.state) is not GamePhase.NOT_STARTED:
            return False
        world.state.started = True
        logger.debug("Game started (difficulty=%s)", world.state.difficulty.value)
        return True

    def toggle_pause(self, world: World) -> bool:
        """Flip between RUNNING and PAUSED. Returns True if the flag changed."""
        phase = get_phase(world.state)
        if phase not in (GamePhase.RUNNING, GamePhase.PAUSED):
            return False
        world.state.paused = not world.state.paused
        logger.debug("Game %s", "paused" if world.state.paused else "resumed")
        return True

    def lose_ball(self, world: World) -> bool:
        """End the rally. Valid only while RUNNING."""
        if get_phase(world.state) is not GamePhase.RUNNING:
            return False
        world.state.game_over = True
        world.state.combo = 0
        logger.debug(
            "Game over: score=%d max_combo=%d",
            world.state.score, world.state.max_combo
        )
        return True

    def reset(self, world: World) -> None:
        """
        Return to NOT_STARTED from any phase.

        Clears score, combo and effects and re-launches the ball with the
        currently selected difficulty. High score and max combo are kept.
        """
        state = world.state
        state.score = 0
        state.combo = 0
        state.game_over = False
        state.paused = False
        state.started = False
        world.clear_effects()
        world.recenter()
        logger.debug("Game reset (difficulty=%s)", state.difficulty.value)

    def set_difficulty(
        self,
        world: World,
        difficulty: Union[str, Difficulty]
    ) -> bool:
        """
        Select a difficulty. Honored only while NOT_STARTED.

        The waiting ball is re-launched at the new speed so the first rally
        runs at the chosen difficulty. An in-progress ball is never touched.
        """
        difficulty = Difficulty.parse(difficulty)
        if get_phase(world.state) is not GamePhase.NOT_STARTED:
            return False
        world.state.difficulty = difficulty
        speed = world.launch_speed(difficulty)
        world.ball.dx = speed
        world.ball.dy = speed
        return True
