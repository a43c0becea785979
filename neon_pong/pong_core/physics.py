"""
Collision Resolver
==================

Per-frame integration and collision response for the ball and paddle.

Each running frame executes, in this order:

1. Move the paddle from the input intent, clamped to the playfield.
2. Integrate the ball (explicit Euler, one fixed step per frame).
3. Push the ball position onto the trail.
4. Top/bottom walls: reflect dy and clamp.
5. Scoring wall (right): reflect dx, clamp, score, speed up.
6. Paddle: push the ball out and re-aim it by hit position.
7. Left edge behind the paddle: the ball is lost.

The checks are independent and always run in this order. Positions are in
pixels per frame; ``frame.fixed_step`` is the only place a time step enters.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from neon_pong.pong_core.config_loader import GameConfig, get_config
from neon_pong.pong_core.effects import EffectsSystem
from neon_pong.pong_core.input_state import MoveIntent
from neon_pong.pong_core.rules import LifecycleRules
from neon_pong.pong_core.scoring import ScoreEvent, ScoreTracker
from neon_pong.pong_core.world import World


@dataclass
class StepEvents:
    """What happened during one resolver step."""
    edge_bounce: bool = False
    score_event: Optional[ScoreEvent] = None
    paddle_hit: bool = False
    hit_position: Optional[float] = None   # 0 = paddle top, 1 = paddle bottom
    ball_lost: bool = False

    @property
    def scored(self) -> bool:
        return self.score_event is not None


class CollisionResolver:
    """
    Advances ball and paddle for one frame and resolves collisions.

    Does nothing unless the game is running.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        effects: Optional[EffectsSystem] = None,
        scorer: Optional[ScoreTracker] = None,
        rules: Optional[LifecycleRules] = None
    ):
        """
        Initialize resolver.

        Args:
            config: Game configuration. Uses default if None.
            effects: Effects system spawning particles and text.
            scorer: Score tracker updated on scoring bounces.
            rules: Lifecycle rules used to end the game on a miss.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._effects = effects if effects is not None else EffectsSystem(config)
        self._scorer = scorer if scorer is not None else ScoreTracker(config)
        self._rules = rules if rules is not None else LifecycleRules(config)

        self._step = config.frame.fixed_step
        self._growth = config.ball.speed_growth
        self._max_angle = config.collision.max_bounce_angle

    def step(self, world: World, intent: MoveIntent) -> StepEvents:
        """
        Run one frame of simulation.

        Args:
            world: World to mutate.
            intent: Paddle movement requested for this frame.

        Returns:
            StepEvents describing collisions that happened.
        """
        events = StepEvents()
        if not world.state.running:
            return events

        self.move_paddle(world, intent)
        self.integrate_ball(world)

        ball = world.ball
        self._effects.push_trail(world, ball.x, ball.y)

        self._resolve_edge_walls(world, events)
        self._resolve_scoring_wall(world, events)
        self._resolve_paddle(world, events)
        self._resolve_miss(world, events)

        return events

    def move_paddle(self, world: World, intent: MoveIntent) -> None:
        """
        Apply keyboard and touch movement.

        Up and down are checked one after the other, so holding both moves
        up then down (no net motion away from the edges).
        """
        paddle = world.paddle
        speed = world.paddle_speed * self._step

        if intent.up and paddle.y > 0:
            paddle.y -= speed
        if intent.down and paddle.y < world.paddle_max_y:
            paddle.y += speed

        paddle.y += intent.touch_dy
        world.clamp_paddle()

    def integrate_ball(self, world: World) -> None:
        ball = world.ball
        ball.x += ball.dx * self._step
        ball.y += ball.dy * self._step

    def _resolve_edge_walls(self, world: World, events: StepEvents) -> None:
        ball = world.ball
        height = world.height

        if ball.y - ball.radius <= 0 or ball.y + ball.radius >= height:
            ball.dy = -ball.dy
            ball.y = ball.radius if ball.y - ball.radius <= 0 else height - ball.radius
            self._effects.burst(world, ball.x, ball.y, self._config.particles.edge_wall)
            events.edge_bounce = True

    def _resolve_scoring_wall(self, world: World, events: StepEvents) -> None:
        ball = world.ball
        wall_x = world.viewport.wall_x

        if ball.x + ball.radius < wall_x:
            return

        ball.dx = -ball.dx
        ball.x = wall_x - ball.radius
        self._effects.burst(world, ball.x, ball.y, self._config.particles.scoring_wall)
        self._effects.flash_wall(world)

        event = self._scorer.register_wall_bounce(world.state)
        if event.is_milestone:
            self._effects.add_floating_text(
                world,
                wall_x - self._config.floating_text.offset_x,
                world.height / 2,
                event.milestone_text
            )
        events.score_event = event

        ball.dx *= self._growth
        ball.dy *= self._growth
        self._scorer.persist(event)

    def _resolve_paddle(self, world: World, events: StepEvents) -> None:
        ball = world.ball
        paddle = world.paddle

        overlaps = (
            ball.x - ball.radius <= paddle.right
            and ball.x + ball.radius >= paddle.x
            and paddle.y <= ball.y <= paddle.bottom
        )
        if not overlaps:
            return

        ball.x = paddle.right + ball.radius
        self._effects.burst(world, ball.x, ball.y, self._config.particles.paddle)
        self._effects.flash_paddle(world)

        hit_pos = (ball.y - paddle.y) / paddle.height
        angle = self.bounce_angle(hit_pos)
        speed = ball.speed
        ball.dx = abs(speed * math.cos(angle))
        ball.dy = speed * math.sin(angle)

        events.paddle_hit = True
        events.hit_position = hit_pos

    def bounce_angle(self, hit_pos: float) -> float:
        """
        Outgoing angle off the horizontal for a paddle hit position.

        Linear from -max_bounce_angle at the paddle top (hit_pos 0) to
        +max_bounce_angle at the bottom (hit_pos 1); 0 at the center.
        """
        return (hit_pos - 0.5) * 2 * self._max_angle

    def _resolve_miss(self, world: World, events: StepEvents) -> None:
        ball = world.ball
        if ball.x - ball.radius > 0:
            return

        self._effects.burst(world, ball.x, ball.y, self._config.particles.ball_lost)
        events.ball_lost = self._rules.lose_ball(world)
