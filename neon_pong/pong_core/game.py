"""
Core Game
=========

Main game orchestrator combining world state, input, collision resolution,
effects, scoring and lifecycle rules.

One step = one animation frame.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from neon_pong.pong_core.config_loader import GameConfig, get_config
from neon_pong.pong_core.effects import EffectsSystem
from neon_pong.pong_core.input_state import InputAction, InputCollector, MoveIntent
from neon_pong.pong_core.persistence import HighScoreStore, KeyValueStore
from neon_pong.pong_core.physics import CollisionResolver, StepEvents
from neon_pong.pong_core.rules import GamePhase, LifecycleRules, get_phase
from neon_pong.pong_core.scoring import ScoreTracker
from neon_pong.pong_core.state_snapshot import GameSnapshot, SnapshotBuilder
from neon_pong.pong_core.world import Difficulty, World


@dataclass
class StepResult:
    """Result of a single frame."""
    snapshot: GameSnapshot
    events: StepEvents
    intent: MoveIntent
    delta_score: int
    simulated: bool           # False when the game was not running this frame
    game_over: bool


class CoreGame:
    """
    Main game simulation class.

    Orchestrates:
    - World state and viewport
    - Input collection
    - Collision resolution
    - Effects (particles, trail, floating text, pulses)
    - Scoring and high score persistence
    - Lifecycle rules

    Input handlers may be called at any time between frames; they only
    write to the input collector or flip lifecycle flags. ``step`` is the
    single place the world advances.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        width: Optional[float] = None,
        height: Optional[float] = None,
        seed: Optional[int] = None,
        store: Optional[KeyValueStore] = None,
        difficulty: Optional[Union[str, Difficulty]] = None
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            width: Playfield width in pixels. Base width if None.
            height: Playfield height in pixels. Base height if None.
            seed: Random seed for particle effects.
            store: Key-value store for the high score. Not persisted if None.
            difficulty: Initial difficulty. Configured default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed

        if difficulty is not None:
            difficulty = Difficulty.parse(difficulty)

        # Initialize subsystems
        self._world = World(config, width, height, difficulty)
        self._input = InputCollector(config)
        self._rules = LifecycleRules(config)
        self._scorer = ScoreTracker(
            config,
            HighScoreStore(store, config.persistence.high_score_key)
        )
        self._effects = EffectsSystem(config, seed)
        self._resolver = CollisionResolver(
            config,
            effects=self._effects,
            scorer=self._scorer,
            rules=self._rules
        )
        self._snapshot_builder = SnapshotBuilder(config)

        self._frames: int = 0
        self._scorer.load_high_score(self._world.state)

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def world(self) -> World:
        """Mutable world state."""
        return self._world

    @property
    def input(self) -> InputCollector:
        return self._input

    @property
    def effects(self) -> EffectsSystem:
        return self._effects

    @property
    def phase(self) -> GamePhase:
        return get_phase(self._world.state)

    @property
    def score(self) -> int:
        return self._world.state.score

    @property
    def high_score(self) -> int:
        return self._world.state.high_score

    @property
    def difficulty(self) -> Difficulty:
        return self._world.state.difficulty

    @property
    def frames(self) -> int:
        """Frames stepped since construction."""
        return self._frames

    @property
    def is_over(self) -> bool:
        return self._world.state.game_over

    # Commands

    def start(self) -> bool:
        return self._rules.start(self._world)

    def toggle_pause(self) -> bool:
        return self._rules.toggle_pause(self._world)

    def reset(self, seed: Optional[int] = None) -> GameSnapshot:
        """
        Reset to NOT_STARTED with a freshly centered ball.

        Args:
            seed: New effects seed. Keeps the current RNG stream if None.

        Returns:
            Snapshot of the reset game.
        """
        if seed is not None:
            self._seed = seed
            self._effects.reseed(seed)
        self._rules.reset(self._world)
        self._input.clear()
        return self.snapshot()

    def set_difficulty(self, difficulty: Union[str, Difficulty]) -> bool:
        """Select a difficulty. Ignored once the game has started."""
        return self._rules.set_difficulty(self._world, difficulty)

    def resize(self, width: float, height: float) -> None:
        self._world.resize(width, height)

    def set_fps(self, fps: int) -> None:
        """Record measured frame rate for display."""
        self._world.state.fps = fps

    # Input events

    def key_down(self, key: str) -> Optional[InputAction]:
        """
        Handle a raw key press.

        Start, pause and reset keys act immediately. Movement keys are held
        until ``key_up`` and read by the next frame.
        """
        action = self._input.key_down(key, started=self._world.state.started)
        if action is InputAction.START:
            self.start()
        elif action is InputAction.TOGGLE_PAUSE:
            self.toggle_pause()
        elif action is InputAction.RESET:
            self.reset()
        return action

    def key_up(self, key: str) -> None:
        self._input.key_up(key)

    def hold(self, action: InputAction) -> None:
        self._input.hold(action)

    def release(self, action: InputAction) -> None:
        self._input.release(action)

    def touch_start(self, y: float) -> None:
        self._input.touch_start(y)

    def touch_move(self, y: float) -> float:
        return self._input.touch_move(y)

    def touch_end(self) -> None:
        self._input.touch_end()

    def click(self) -> bool:
        """Pointer click on the playfield. Starts a game that has not started."""
        return self.start()

    # Simulation

    def step(self) -> StepResult:
        """
        Advance one frame.

        Pulses always decay. Input is polled every frame so touch deltas
        never pile up while paused. Collision resolution and effect aging
        only run while the game is running.

        Returns:
            StepResult with the new state and what happened.
        """
        world = self._world
        score_before = world.state.score

        self._effects.decay_pulses(world)
        intent = self._input.poll()

        simulated = world.state.running
        events = self._resolver.step(world, intent)
        if simulated:
            self._effects.age(world)

        self._frames += 1

        return StepResult(
            snapshot=self.snapshot(),
            events=events,
            intent=intent,
            delta_score=world.state.score - score_before,
            simulated=simulated,
            game_over=world.state.game_over
        )

    def snapshot(self) -> GameSnapshot:
        return self._snapshot_builder.build(self._world)

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        state = self._world.state
        return {
            "score": state.score,
            "high_score": state.high_score,
            "combo": state.combo,
            "max_combo": state.max_combo,
            "difficulty": state.difficulty.value,
            "phase": self.phase.value,
            "ball_speed": self._world.ball.speed,
            "particle_count": len(self._world.particles),
            "frames": self._frames,
        }
