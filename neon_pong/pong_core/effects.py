"""
Effects System
==============

Particles, ball trail, floating text and hit pulses. Effects never feed
back into gameplay: the collision resolver spawns them and they are aged
and pruned independently every running frame.
"""

from __future__ import annotations

import math
import random
from typing import Optional

from neon_pong.pong_core.config_loader import BurstConfig, Color, GameConfig, get_config
from neon_pong.pong_core.entities import FloatingText, Particle, TrailPoint
from neon_pong.pong_core.world import World


class EffectsSystem:
    """
    Spawns and ages ephemeral visual entities stored on the World.

    Spawn parameters are randomized from a private RNG so a seeded game
    produces the same effects.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize effects system.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = random.Random(seed)

    def reseed(self, seed: Optional[int]) -> None:
        self._rng = random.Random(seed)

    # Spawning

    def spawn_particles(
        self,
        world: World,
        x: float,
        y: float,
        count: int,
        base_color: Color
    ) -> None:
        """
        Emit ``count`` particles radially from (x, y).

        Particle i leaves at angle 2*pi*i/count plus a small random jitter.
        Counts <= 0 emit nothing.
        """
        cfg = self._config.particles
        rng = self._rng
        colors = (base_color,) + cfg.palette

        for i in range(count):
            angle = (math.pi * 2 * i) / count + rng.random() * cfg.angle_jitter
            speed = cfg.speed_min + rng.random() * cfg.speed_spread
            world.particles.append(Particle(
                x=x,
                y=y,
                dx=math.cos(angle) * speed,
                dy=math.sin(angle) * speed - cfg.upward_bias,
                life=cfg.life_min + int(rng.random() * cfg.life_spread),
                max_life=cfg.max_life,
                size=cfg.size_min + rng.random() * cfg.size_spread,
                color=rng.choice(colors),
                rotation=rng.random() * math.pi * 2,
                rotation_speed=(rng.random() - 0.5) * cfg.rotation_speed_spread
            ))

    def burst(self, world: World, x: float, y: float, burst: BurstConfig) -> None:
        """Emit one of the configured collision bursts."""
        self.spawn_particles(world, x, y, burst.count, burst.color)

    def add_floating_text(
        self,
        world: World,
        x: float,
        y: float,
        text: str,
        color: Optional[Color] = None
    ) -> None:
        cfg = self._config.floating_text
        world.floating_texts.append(FloatingText(
            x=x,
            y=y,
            text=text,
            life=cfg.life,
            max_life=cfg.life,
            color=color if color is not None else cfg.color
        ))

    def push_trail(self, world: World, x: float, y: float) -> None:
        """
        Append a point to the trail ring buffer, evicting the oldest when full.

        Alpha is index / length, so the newest point is the most opaque.
        """
        trail = world.trail
        trail.append(TrailPoint(x=x, y=y, alpha=1.0))
        length = len(trail)
        for index, point in enumerate(trail):
            point.alpha = index / length

    def flash_wall(self, world: World) -> None:
        world.wall_pulse = 1.0

    def flash_paddle(self, world: World) -> None:
        world.paddle_pulse = 1.0

    # Aging

    def decay_pulses(self, world: World) -> None:
        decay = self._config.pulses.decay
        if world.wall_pulse > 0:
            world.wall_pulse = max(0.0, world.wall_pulse - decay)
        if world.paddle_pulse > 0:
            world.paddle_pulse = max(0.0, world.paddle_pulse - decay)

    def age_particles(self, world: World) -> None:
        """Advance every particle one frame and drop the dead ones in place."""
        gravity = self._config.particles.gravity
        particles = world.particles

        write_idx = 0
        for particle in particles:
            particle.x += particle.dx
            particle.y += particle.dy
            particle.dy += gravity
            particle.life -= 1
            particle.rotation += particle.rotation_speed
            if particle.life > 0:
                particles[write_idx] = particle
                write_idx += 1
        del particles[write_idx:]

    def age_floating_texts(self, world: World) -> None:
        drift = self._config.floating_text.drift
        texts = world.floating_texts

        write_idx = 0
        for text in texts:
            text.y -= drift
            text.life -= 1
            if text.life > 0:
                texts[write_idx] = text
                write_idx += 1
        del texts[write_idx:]

    def age(self, world: World) -> None:
        """Age particles and floating texts by one frame."""
        self.age_particles(world)
        self.age_floating_texts(world)
