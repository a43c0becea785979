"""
Tests for the collision resolver: scoring wall, paddle, edges and misses.
"""

import math

import pytest

from neon_pong.pong_core.config_loader import load_config
from neon_pong.pong_core.effects import EffectsSystem
from neon_pong.pong_core.input_state import MoveIntent
from neon_pong.pong_core.physics import CollisionResolver
from neon_pong.pong_core.rules import LifecycleRules
from neon_pong.pong_core.scoring import ScoreTracker
from neon_pong.pong_core.world import World


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def rules(config):
    return LifecycleRules(config)


@pytest.fixture
def world(config, rules):
    world = World(config)
    rules.start(world)
    return world


@pytest.fixture
def resolver(config, rules):
    return CollisionResolver(
        config,
        effects=EffectsSystem(config, seed=0),
        scorer=ScoreTracker(config),
        rules=rules
    )


def place_ball(world, x, y, dx, dy):
    world.ball.x, world.ball.y, world.ball.dx, world.ball.dy = x, y, dx, dy


NO_INPUT = MoveIntent()


class TestScoringWall:
    """Test right-wall bounces."""

    def test_scenario_wall_bounce(self, world, resolver):
        """Ball at (790, 300) moving right reflects, clamps, scores and speeds up."""
        place_ball(world, 790, 300, 5, 0)
        events = resolver.step(world, NO_INPUT)

        assert world.ball.x == pytest.approx(772)
        assert world.ball.dx == pytest.approx(-5.125)
        assert world.ball.dy == 0
        assert world.state.score == 1
        assert world.state.combo == 1
        assert events.scored
        assert world.wall_pulse == 1.0
        assert len(world.particles) == 20

    def test_speed_grows_by_factor(self, world, resolver):
        """Each scoring bounce multiplies speed by exactly the growth factor."""
        place_ball(world, 790, 300, 3, 4)
        before = world.ball.speed
        resolver.step(world, NO_INPUT)
        assert world.ball.speed == pytest.approx(before * 1.025)

    def test_running_maxima(self, world, resolver):
        """max_combo and high_score follow score and combo."""
        for _ in range(3):
            place_ball(world, 790, 300, 5, 0)
            resolver.step(world, NO_INPUT)
        assert world.state.max_combo == 3
        assert world.state.high_score == 3

    def test_milestone_text_every_fifth_combo(self, world, resolver):
        """'5X COMBO!' appears once at combo 5, not at 1-4 or 6-9."""
        counts = []
        for _ in range(9):
            place_ball(world, 790, 300, 5, 0)
            resolver.step(world, NO_INPUT)
            counts.append(len(world.floating_texts))

        assert counts == [0, 0, 0, 0, 1, 1, 1, 1, 1]
        text = world.floating_texts[0]
        assert text.text == "5X COMBO!"
        assert text.x == pytest.approx(730)
        assert text.y == pytest.approx(300)

    def test_tenth_combo_milestone(self, world, resolver):
        """Combo 10 is also a milestone."""
        world.state.combo = 9
        place_ball(world, 790, 300, 5, 0)
        resolver.step(world, NO_INPUT)
        assert world.floating_texts[-1].text == "10X COMBO!"


class TestPaddle:
    """Test paddle collisions."""

    def test_center_hit_is_horizontal(self, world, resolver):
        """A hit at the paddle center sends the ball straight back."""
        place_ball(world, 70, 300, -5, 0)
        events = resolver.step(world, NO_INPUT)

        assert events.paddle_hit
        assert events.hit_position == pytest.approx(0.5)
        assert world.ball.dy == pytest.approx(0.0)
        assert world.ball.dx == pytest.approx(5.0)
        assert world.ball.x == pytest.approx(world.paddle.right + world.ball.radius)
        assert world.paddle_pulse == 1.0

    def test_top_edge_hit_is_steepest_upward(self, world, resolver):
        """A hit at the paddle top leaves at -max_bounce_angle."""
        place_ball(world, 70, 250, -5, 0)
        resolver.step(world, NO_INPUT)

        angle = math.atan2(world.ball.dy, world.ball.dx)
        assert angle == pytest.approx(-math.pi / 5)
        assert world.ball.dy < 0

    def test_bottom_edge_hit(self, world, resolver):
        """A hit at the paddle bottom leaves at +max_bounce_angle."""
        place_ball(world, 70, 350, -5, 0)
        resolver.step(world, NO_INPUT)
        angle = math.atan2(world.ball.dy, world.ball.dx)
        assert angle == pytest.approx(math.pi / 5)

    def test_speed_preserved(self, world, resolver):
        """Paddle bounces keep the speed magnitude and force dx rightward."""
        place_ball(world, 70, 280, -3, 4)
        before = world.ball.speed
        resolver.step(world, NO_INPUT)
        assert world.ball.speed == pytest.approx(before)
        assert world.ball.dx > 0

    def test_no_hit_outside_paddle_span(self, world, resolver):
        """A ball passing above the paddle is not deflected."""
        place_ball(world, 70, 100, -5, 0)
        events = resolver.step(world, NO_INPUT)
        assert not events.paddle_hit
        assert world.ball.dx == -5


class TestEdges:
    """Test top and bottom walls and the tangent case."""

    def test_top_wall_reflects_and_clamps(self, world, resolver):
        """Crossing the top reflects dy and clamps to the radius."""
        place_ball(world, 400, 10, 0, -5)
        events = resolver.step(world, NO_INPUT)
        assert events.edge_bounce
        assert world.ball.dy == 5
        assert world.ball.y == pytest.approx(8)
        assert len(world.particles) == 10

    def test_bottom_wall_reflects_and_clamps(self, world, resolver):
        """Crossing the bottom reflects dy and clamps inside."""
        place_ball(world, 400, 590, 0, 5)
        resolver.step(world, NO_INPUT)
        assert world.ball.dy == -5
        assert world.ball.y == pytest.approx(592)

    def test_tangent_reflects_once(self, world, resolver):
        """A ball reaching distance == radius reflects exactly once."""
        place_ball(world, 400, 12, 0, -4)
        bounces = 0
        for _ in range(5):
            if resolver.step(world, NO_INPUT).edge_bounce:
                bounces += 1
        assert bounces == 1
        assert world.ball.dy == 4


class TestMiss:
    """Test ball loss behind the paddle."""

    def test_scenario_miss(self, world, resolver):
        """Trailing edge crossing x=0 ends the game and freezes the ball."""
        world.state.combo = 4
        place_ball(world, 10, 500, -5, 0)
        events = resolver.step(world, NO_INPUT)

        assert events.ball_lost
        assert world.state.game_over is True
        assert world.state.combo == 0
        assert len(world.particles) == 30

        frozen = (world.ball.x, world.ball.y)
        later = resolver.step(world, MoveIntent(up=True))
        assert (world.ball.x, world.ball.y) == frozen
        assert not later.ball_lost

    def test_not_running_does_nothing(self, config, resolver):
        """A world that has not started is never advanced."""
        world = World(config)
        before = (world.ball.x, world.ball.y, world.paddle.y)
        resolver.step(world, MoveIntent(down=True))
        assert (world.ball.x, world.ball.y, world.paddle.y) == before
        assert len(world.trail) == 0


class TestPaddleMovement:
    """Test keyboard and touch paddle movement."""

    def test_up_moves_by_paddle_speed(self, world, resolver):
        """Holding up moves 7 px per frame."""
        resolver.move_paddle(world, MoveIntent(up=True))
        assert world.paddle.y == 243

    def test_both_keys_cancel(self, world, resolver):
        """Holding up and down away from the edges leaves the paddle in place."""
        resolver.move_paddle(world, MoveIntent(up=True, down=True))
        assert world.paddle.y == 250

    def test_clamped_at_edges(self, world, resolver):
        """The paddle never leaves [0, height - paddle height]."""
        for _ in range(100):
            resolver.move_paddle(world, MoveIntent(up=True))
            assert 0 <= world.paddle.y <= world.paddle_max_y
        assert world.paddle.y == 0

        for _ in range(100):
            resolver.move_paddle(world, MoveIntent(down=True))
            assert 0 <= world.paddle.y <= world.paddle_max_y
        assert world.paddle.y == 500

    def test_touch_delta_is_clamped(self, world, resolver):
        """Large touch deltas are clamped to the playfield."""
        resolver.move_paddle(world, MoveIntent(touch_dy=-1000))
        assert world.paddle.y == 0
        resolver.move_paddle(world, MoveIntent(touch_dy=30))
        assert world.paddle.y == 30


class TestRallyInvariants:
    """Test invariants over a long simulated rally."""

    def test_speed_never_decreases_and_paddle_in_bounds(self, world, resolver):
        """Over a rally the speed is non-decreasing and the paddle stays in range."""
        speed = world.ball.speed
        for _ in range(3000):
            center = world.paddle.y + world.paddle.height / 2
            intent = MoveIntent(up=world.ball.y < center - 5, down=world.ball.y > center + 5)
            resolver.step(world, intent)

            assert 0 <= world.paddle.y <= world.paddle_max_y
            assert world.ball.speed >= speed - 1e-9
            speed = world.ball.speed
            if world.state.game_over:
                break

        assert world.state.score > 0
