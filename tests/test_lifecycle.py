"""
Tests for world state, viewport fitting and the lifecycle state machine.
"""

import math

import pytest

from neon_pong.pong_core.config_loader import load_config
from neon_pong.pong_core.entities import fit_viewport
from neon_pong.pong_core.rules import GamePhase, LifecycleRules, get_phase
from neon_pong.pong_core.world import Difficulty, World


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def world(config):
    return World(config)


@pytest.fixture
def rules(config):
    return LifecycleRules(config)


class TestWorldInit:
    """Test initial world layout."""

    def test_ball_centered_with_launch_velocity(self, world):
        """Ball starts in the middle moving down-right at the base speed."""
        assert world.ball.x == 400
        assert world.ball.y == 300
        assert world.ball.dx == pytest.approx(4.0)
        assert world.ball.dy == pytest.approx(4.0)
        assert world.ball.radius == pytest.approx(8.0)

    def test_paddle_centered(self, world):
        """Paddle sits at x=50, vertically centered."""
        assert world.paddle.x == 50
        assert world.paddle.y == 250
        assert world.paddle.width == 12
        assert world.paddle.height == 100

    def test_initial_state(self, world):
        """Fresh world is NOT_STARTED with zeroed counters."""
        state = world.state
        assert get_phase(state) is GamePhase.NOT_STARTED
        assert state.score == 0
        assert state.combo == 0
        assert state.difficulty is Difficulty.MEDIUM
        assert len(world.trail) == 0
        assert world.particles == []

    def test_scaled_world(self, config):
        """Sizes scale with the viewport width."""
        world = World(config, width=400, height=300)
        assert world.viewport.scale == pytest.approx(0.5)
        assert world.ball.radius == pytest.approx(4.0)
        assert world.paddle.x == pytest.approx(25.0)
        assert world.paddle.height == pytest.approx(50.0)
        assert world.launch_speed() == pytest.approx(2.0)
        assert world.paddle_speed == pytest.approx(3.5)

    def test_wall_x_is_not_scaled(self, config):
        """Scoring wall thickness is fixed in pixels."""
        assert World(config).viewport.wall_x == 780
        assert World(config, width=400, height=300).viewport.wall_x == 380


class TestViewport:
    """Test container fitting and resize."""

    def test_fit_wide_container(self, config):
        """Width is capped at the maximum."""
        assert fit_viewport(2000, 2000, config) == pytest.approx((1000, 750))

    def test_fit_uses_margin(self, config):
        """Container margin is subtracted before fitting."""
        assert fit_viewport(840, 2000, config) == pytest.approx((800, 600))

    def test_fit_short_window(self, config):
        """Short windows cap height and shrink width to keep 4:3."""
        width, height = fit_viewport(1040, 600, config)
        assert height == pytest.approx(390)
        assert width == pytest.approx(520)

    def test_resize_keeps_ball_motion(self, world):
        """Resize rescales sizes but keeps ball position and velocity."""
        world.ball.x, world.ball.y, world.ball.dx, world.ball.dy = 123, 45, -3, 2
        world.resize(400, 300)

        assert (world.ball.x, world.ball.y, world.ball.dx, world.ball.dy) == (123, 45, -3, 2)
        assert world.ball.radius == pytest.approx(4.0)
        assert world.paddle.height == pytest.approx(50.0)

    def test_resize_reclamps_paddle(self, world):
        """Paddle stays on the playfield after shrinking."""
        world.paddle.y = 500
        world.resize(400, 300)
        assert 0 <= world.paddle.y <= world.height - world.paddle.height


class TestLifecycle:
    """Test the NotStarted / Running / Paused / GameOver transitions."""

    def test_start_only_from_not_started(self, world, rules):
        """start() works once, then is ignored."""
        assert rules.start(world) is True
        assert get_phase(world.state) is GamePhase.RUNNING
        assert rules.start(world) is False

    def test_toggle_pause(self, world, rules):
        """Pause and resume flip between RUNNING and PAUSED."""
        assert rules.toggle_pause(world) is False
        rules.start(world)
        assert rules.toggle_pause(world) is True
        assert get_phase(world.state) is GamePhase.PAUSED
        assert rules.toggle_pause(world) is True
        assert get_phase(world.state) is GamePhase.RUNNING

    def test_lose_ball_only_while_running(self, world, rules):
        """lose_ball is ignored unless RUNNING."""
        assert rules.lose_ball(world) is False
        rules.start(world)
        rules.toggle_pause(world)
        assert rules.lose_ball(world) is False

        rules.toggle_pause(world)
        world.state.combo = 7
        assert rules.lose_ball(world) is True
        assert world.state.game_over is True
        assert world.state.combo == 0
        assert get_phase(world.state) is GamePhase.GAME_OVER

    def test_no_pause_after_game_over(self, world, rules):
        """Pause is a no-op once the game is over."""
        rules.start(world)
        rules.lose_ball(world)
        assert rules.toggle_pause(world) is False
        assert world.state.paused is False

    def test_reset_after_game_over(self, world, rules):
        """reset restores a fresh NOT_STARTED round."""
        rules.start(world)
        world.state.score = 12
        world.state.combo = 3
        world.state.max_combo = 9
        world.state.high_score = 12
        world.ball.x, world.ball.dx, world.ball.dy = 5, -9, 3
        rules.lose_ball(world)

        rules.reset(world)
        state = world.state
        assert state.score == 0
        assert state.combo == 0
        assert state.game_over is False
        assert state.paused is False
        assert state.started is False
        assert state.max_combo == 9
        assert state.high_score == 12
        assert (world.ball.x, world.ball.y) == (400, 300)
        assert world.ball.speed == pytest.approx(4.0 * math.sqrt(2))

    def test_reset_clears_effects(self, world, rules):
        """reset drops trail, particles and pulses."""
        world.wall_pulse = 1.0
        world.paddle_pulse = 0.5
        world.floating_texts.append(object())
        rules.reset(world)
        assert world.wall_pulse == 0.0
        assert world.paddle_pulse == 0.0
        assert world.floating_texts == []


class TestDifficulty:
    """Test difficulty selection."""

    def test_parse(self):
        """Names parse case-insensitively; unknown names raise."""
        assert Difficulty.parse("HARD") is Difficulty.HARD
        assert Difficulty.parse(Difficulty.EASY) is Difficulty.EASY
        with pytest.raises(ValueError):
            Difficulty.parse("nightmare")

    def test_hard_is_1_4x_medium(self, config, rules):
        """Hard before start launches exactly 1.4x faster than medium."""
        medium = World(config)
        hard = World(config)
        assert rules.set_difficulty(hard, "hard") is True

        assert hard.ball.speed / medium.ball.speed == pytest.approx(1.4)
        rules.reset(hard)
        assert hard.ball.speed / medium.ball.speed == pytest.approx(1.4)

    def test_easy_multiplier(self, world, rules):
        """Easy uses the 0.7 multiplier."""
        rules.set_difficulty(world, Difficulty.EASY)
        assert world.ball.dx == pytest.approx(2.8)
        assert world.ball.dy == pytest.approx(2.8)

    def test_locked_after_start(self, world, rules):
        """Difficulty changes are ignored once started, even after game over."""
        rules.start(world)
        world.ball.dx, world.ball.dy = 5.0, -1.0
        assert rules.set_difficulty(world, "hard") is False
        assert world.state.difficulty is Difficulty.MEDIUM
        assert (world.ball.dx, world.ball.dy) == (5.0, -1.0)

        rules.lose_ball(world)
        assert rules.set_difficulty(world, "hard") is False

        rules.reset(world)
        assert rules.set_difficulty(world, "hard") is True
        assert world.ball.dx == pytest.approx(5.6)

    def test_multiplier_lookup(self, rules):
        """difficulty_multiplier reads the configured table."""
        assert rules.difficulty_multiplier(Difficulty.HARD) == pytest.approx(1.4)
