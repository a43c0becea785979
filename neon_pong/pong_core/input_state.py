"""
Input Collector
===============

Turns raw key and touch events into logical actions and a per-frame
movement intent.

Raw key identifiers are plain strings ("ArrowUp", "w", " ", ...). The
collector keeps the set of currently held keys; the physics step only ever
sees a MoveIntent, never raw keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Set

from neon_pong.pong_core.config_loader import GameConfig, get_config


class InputAction(str, Enum):
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    START = "start"
    TOGGLE_PAUSE = "toggle_pause"
    RESET = "reset"


@dataclass(frozen=True)
class MoveIntent:
    """Paddle movement requested for one frame."""
    up: bool = False
    down: bool = False
    touch_dy: float = 0.0     # Pixels, already scaled by touch sensitivity


class KeyBindings:
    """Maps raw key identifiers to logical actions."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        keys = config.input
        self._move: Dict[str, InputAction] = {}
        for key in keys.move_up:
            self._move[key] = InputAction.MOVE_UP
        for key in keys.move_down:
            self._move[key] = InputAction.MOVE_DOWN
        self._start_pause: Set[str] = set(keys.start_pause)
        self._reset: Set[str] = set(keys.reset)

    def action_for(self, key: str, started: bool) -> Optional[InputAction]:
        """
        Resolve a pressed key.

        The start/pause key means START before the game has started and
        TOGGLE_PAUSE afterwards.
        """
        if key in self._start_pause:
            return InputAction.TOGGLE_PAUSE if started else InputAction.START
        if key in self._reset:
            return InputAction.RESET
        return self._move.get(key)

    def movement_for(self, key: str) -> Optional[InputAction]:
        return self._move.get(key)


class InputCollector:
    """
    Snapshot of the player's input between frames.

    Key and touch handlers only write here; ``poll`` is read once per frame.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize input collector.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._bindings = KeyBindings(config)
        self._sensitivity = config.input.touch_sensitivity

        self._held_keys: Set[str] = set()
        self._held_actions: Set[InputAction] = set()
        self._touch_y: Optional[float] = None
        self._pending_touch_dy: float = 0.0

    @property
    def bindings(self) -> KeyBindings:
        return self._bindings

    @property
    def touch_active(self) -> bool:
        return self._touch_y is not None

    def key_down(self, key: str, started: bool = False) -> Optional[InputAction]:
        """Record a key press and return the action it maps to, if any."""
        self._held_keys.add(key)
        return self._bindings.action_for(key, started)

    def key_up(self, key: str) -> None:
        self._held_keys.discard(key)

    def hold(self, action: InputAction) -> None:
        """Hold a movement action without a physical key (agents, tests)."""
        self._held_actions.add(action)

    def release(self, action: InputAction) -> None:
        self._held_actions.discard(action)

    def is_held(self, action: InputAction) -> bool:
        if action in self._held_actions:
            return True
        return any(
            self._bindings.movement_for(key) is action
            for key in self._held_keys
        )

    def touch_start(self, y: float) -> None:
        self._touch_y = y

    def touch_move(self, y: float) -> float:
        """
        Record a drag to screen position ``y``.

        Returns:
            Paddle delta produced by this move (0 without an active touch).
        """
        if self._touch_y is None:
            return 0.0
        delta = (y - self._touch_y) * self._sensitivity
        self._pending_touch_dy += delta
        self._touch_y = y
        return delta

    def touch_end(self) -> None:
        self._touch_y = None

    def poll(self) -> MoveIntent:
        """Read this frame's intent and drain the accumulated touch delta."""
        intent = MoveIntent(
            up=self.is_held(InputAction.MOVE_UP),
            down=self.is_held(InputAction.MOVE_DOWN),
            touch_dy=self._pending_touch_dy
        )
        self._pending_touch_dy = 0.0
        return intent

    def clear(self) -> None:
        """Forget all held keys, holds and touches."""
        self._held_keys.clear()
        self._held_actions.clear()
        self._touch_y = None
        self._pending_touch_dy = 0.0
