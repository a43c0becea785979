"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml


Color = Tuple[int, int, int]


@dataclass(frozen=True)
class ViewportConfig:
    """Playfield geometry at the base scale and container-fit limits."""
    base_width: float
    base_height: float
    aspect_ratio: float
    max_width: float
    max_height: float
    container_margin: float
    max_height_fraction: float
    wall_thickness: float        # Scoring wall thickness (unscaled)


@dataclass(frozen=True)
class BallConfig:
    """Ball size and launch speed."""
    base_radius: float
    base_speed: float            # Per-axis speed at launch
    speed_growth: float          # Velocity factor per scoring bounce


@dataclass(frozen=True)
class PaddleConfig:
    """Paddle placement, size and keyboard speed."""
    base_x: float
    base_width: float
    base_height: float
    base_speed: float


@dataclass(frozen=True)
class DifficultyConfig:
    """Difficulty selection and launch speed multipliers."""
    default: str
    multipliers: Dict[str, float]


@dataclass(frozen=True)
class CollisionConfig:
    max_bounce_angle: float


@dataclass(frozen=True)
class TrailConfig:
    capacity: int


@dataclass(frozen=True)
class BurstConfig:
    """A particle burst spawned at one collision site."""
    count: int
    color: Color


@dataclass(frozen=True)
class ParticleConfig:
    """Particle spawn distribution and per-frame aging."""
    gravity: float
    life_min: int
    life_spread: int
    max_life: int
    speed_min: float
    speed_spread: float
    angle_jitter: float
    upward_bias: float
    size_min: float
    size_spread: float
    rotation_speed_spread: float
    palette: Tuple[Color, ...]
    edge_wall: BurstConfig
    scoring_wall: BurstConfig
    paddle: BurstConfig
    ball_lost: BurstConfig


@dataclass(frozen=True)
class FloatingTextConfig:
    life: int
    drift: float
    combo_milestone: int
    offset_x: float
    color: Color


@dataclass(frozen=True)
class PulseConfig:
    decay: float


@dataclass(frozen=True)
class InputConfig:
    """Touch sensitivity and raw key identifiers per logical action."""
    touch_sensitivity: float
    move_up: Tuple[str, ...]
    move_down: Tuple[str, ...]
    start_pause: Tuple[str, ...]
    reset: Tuple[str, ...]


@dataclass(frozen=True)
class PersistenceConfig:
    high_score_key: str


@dataclass(frozen=True)
class FrameConfig:
    """Frame loop timing."""
    fixed_step: float            # Frames advanced per update (positions are per-frame)
    fps_window: float            # Seconds per FPS sample
    initial_fps: int
    target_fps: int


@dataclass(frozen=True)
class EnvConfig:
    """Gymnasium environment parameters."""
    width: int
    height: int
    max_episode_steps: int
    image_width: int
    image_height: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    viewport: ViewportConfig
    ball: BallConfig
    paddle: PaddleConfig
    difficulty: DifficultyConfig
    collision: CollisionConfig
    trail: TrailConfig
    particles: ParticleConfig
    floating_text: FloatingTextConfig
    pulses: PulseConfig
    input: InputConfig
    persistence: PersistenceConfig
    frame: FrameConfig
    env: EnvConfig

    def difficulty_multiplier(self, name: str) -> float:
        """Launch speed multiplier for a difficulty name."""
        try:
            return self.difficulty.multipliers[name]
        except KeyError:
            raise ValueError(f"Unknown difficulty: {name}") from None


def _parse_color(color_data: List) -> Color:
    """Parse RGB color from YAML."""
    if len(color_data) != 3:
        raise ValueError(f"Color must have 3 values [R, G, B], got {color_data}")
    color = (int(color_data[0]), int(color_data[1]), int(color_data[2]))
    if any(c < 0 or c > 255 for c in color):
        raise ValueError(f"Color components must be in [0, 255], got {color_data}")
    return color


def _parse_burst(burst_data: dict) -> BurstConfig:
    return BurstConfig(
        count=int(burst_data["count"]),
        color=_parse_color(burst_data["color"])
    )


def _parse_keys(keys_data: List) -> Tuple[str, ...]:
    return tuple(str(k) for k in keys_data)


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    multipliers = config.difficulty.multipliers
    for name in ("easy", "medium", "hard"):
        if name not in multipliers:
            raise ValueError(f"Missing difficulty multiplier for '{name}'")
        if multipliers[name] <= 0:
            raise ValueError(f"Difficulty multiplier for '{name}' must be positive")

    if config.difficulty.default not in multipliers:
        raise ValueError(f"Default difficulty '{config.difficulty.default}' has no multiplier")

    sizes = {
        "viewport.base_width": config.viewport.base_width,
        "viewport.base_height": config.viewport.base_height,
        "ball.base_radius": config.ball.base_radius,
        "paddle.base_width": config.paddle.base_width,
        "paddle.base_height": config.paddle.base_height,
    }
    for name, value in sizes.items():
        if value <= 0:
            raise ValueError(f"{name} must be positive, got {value}")

    if config.trail.capacity < 1:
        raise ValueError(f"trail.capacity must be at least 1, got {config.trail.capacity}")

    if config.particles.max_life <= 0:
        raise ValueError(f"particles.max_life must be positive, got {config.particles.max_life}")

    if config.floating_text.life <= 0:
        raise ValueError(f"floating_text.life must be positive, got {config.floating_text.life}")

    if config.floating_text.combo_milestone < 1:
        raise ValueError(
            f"floating_text.combo_milestone must be at least 1, "
            f"got {config.floating_text.combo_milestone}"
        )

    if not config.particles.palette:
        raise ValueError("particles.palette must contain at least one color")

    if config.frame.fps_window <= 0:
        raise ValueError(f"frame.fps_window must be positive, got {config.frame.fps_window}")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    vp = raw["viewport"]
    viewport = ViewportConfig(
        base_width=float(vp["base_width"]),
        base_height=float(vp["base_height"]),
        aspect_ratio=float(vp.get("aspect_ratio", 4 / 3)),
        max_width=float(vp.get("max_width", 1000)),
        max_height=float(vp.get("max_height", 750)),
        container_margin=float(vp.get("container_margin", 40)),
        max_height_fraction=float(vp.get("max_height_fraction", 0.65)),
        wall_thickness=float(vp["wall_thickness"])
    )

    ball_data = raw["ball"]
    ball = BallConfig(
        base_radius=float(ball_data["base_radius"]),
        base_speed=float(ball_data["base_speed"]),
        speed_growth=float(ball_data["speed_growth"])
    )

    paddle_data = raw["paddle"]
    paddle = PaddleConfig(
        base_x=float(paddle_data["base_x"]),
        base_width=float(paddle_data["base_width"]),
        base_height=float(paddle_data["base_height"]),
        base_speed=float(paddle_data["base_speed"])
    )

    diff_data = raw["difficulty"]
    difficulty = DifficultyConfig(
        default=str(diff_data.get("default", "medium")),
        multipliers={str(k): float(v) for k, v in diff_data["multipliers"].items()}
    )

    collision = CollisionConfig(
        max_bounce_angle=float(raw["collision"]["max_bounce_angle"])
    )

    trail = TrailConfig(capacity=int(raw["trail"]["capacity"]))

    p = raw["particles"]
    bursts = p["bursts"]
    particles = ParticleConfig(
        gravity=float(p["gravity"]),
        life_min=int(p["life_min"]),
        life_spread=int(p["life_spread"]),
        max_life=int(p["max_life"]),
        speed_min=float(p["speed_min"]),
        speed_spread=float(p["speed_spread"]),
        angle_jitter=float(p.get("angle_jitter", 0.5)),
        upward_bias=float(p.get("upward_bias", 1.0)),
        size_min=float(p["size_min"]),
        size_spread=float(p["size_spread"]),
        rotation_speed_spread=float(p.get("rotation_speed_spread", 0.2)),
        palette=tuple(_parse_color(c) for c in p["palette"]),
        edge_wall=_parse_burst(bursts["edge_wall"]),
        scoring_wall=_parse_burst(bursts["scoring_wall"]),
        paddle=_parse_burst(bursts["paddle"]),
        ball_lost=_parse_burst(bursts["ball_lost"])
    )

    ft = raw["floating_text"]
    floating_text = FloatingTextConfig(
        life=int(ft["life"]),
        drift=float(ft["drift"]),
        combo_milestone=int(ft["combo_milestone"]),
        offset_x=float(ft.get("offset_x", 50)),
        color=_parse_color(ft["color"])
    )

    pulses = PulseConfig(decay=float(raw["pulses"]["decay"]))

    input_data = raw["input"]
    keys = input_data["keys"]
    input_config = InputConfig(
        touch_sensitivity=float(input_data["touch_sensitivity"]),
        move_up=_parse_keys(keys["move_up"]),
        move_down=_parse_keys(keys["move_down"]),
        start_pause=_parse_keys(keys["start_pause"]),
        reset=_parse_keys(keys["reset"])
    )

    persistence = PersistenceConfig(
        high_score_key=str(raw["persistence"]["high_score_key"])
    )

    frame_data = raw["frame"]
    frame = FrameConfig(
        fixed_step=float(frame_data.get("fixed_step", 1.0)),
        fps_window=float(frame_data.get("fps_window", 1.0)),
        initial_fps=int(frame_data.get("initial_fps", 60)),
        target_fps=int(frame_data.get("target_fps", 60))
    )

    env_data = raw.get("env", {})
    env = EnvConfig(
        width=int(env_data.get("width", viewport.base_width)),
        height=int(env_data.get("height", viewport.base_height)),
        max_episode_steps=int(env_data.get("max_episode_steps", 20000)),
        image_width=int(env_data.get("image_width", 160)),
        image_height=int(env_data.get("image_height", 120))
    )

    config = GameConfig(
        viewport=viewport,
        ball=ball,
        paddle=paddle,
        difficulty=difficulty,
        collision=collision,
        trail=trail,
        particles=particles,
        floating_text=floating_text,
        pulses=pulses,
        input=input_config,
        persistence=persistence,
        frame=frame,
        env=env
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
