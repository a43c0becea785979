"""
Pong Core - The heart of the game.

This module provides the frame-stepped simulation, the Gymnasium
environment wrapper, and all supporting systems (world state, input,
collision resolution, effects, scoring, persistence).

Main exports:
- PongEnv: Gymnasium environment for single-agent training
- CoreGame: Frame-stepped game simulation
- FrameDriver: Host loop running one step and one render per tick
- GameConfig: Configuration loaded from game_config.yaml
"""

from neon_pong.pong_core.config_loader import GameConfig, get_config, load_config
from neon_pong.pong_core.entities import fit_viewport
from neon_pong.pong_core.env_gym import PongEnv
from neon_pong.pong_core.frame_driver import FpsCounter, FrameDriver
from neon_pong.pong_core.game import CoreGame, StepResult
from neon_pong.pong_core.input_state import InputAction
from neon_pong.pong_core.persistence import HighScoreStore, JsonFileStore, MemoryStore
from neon_pong.pong_core.rules import GamePhase
from neon_pong.pong_core.state_snapshot import GameSnapshot
from neon_pong.pong_core.world import Difficulty

__all__ = [
    "GameConfig",
    "get_config",
    "load_config",
    "fit_viewport",
    "PongEnv",
    "FpsCounter",
    "FrameDriver",
    "CoreGame",
    "StepResult",
    "InputAction",
    "HighScoreStore",
    "JsonFileStore",
    "MemoryStore",
    "GamePhase",
    "GameSnapshot",
    "Difficulty",
]
