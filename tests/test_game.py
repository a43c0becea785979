"""
Tests for the CoreGame orchestrator.
"""

import math

import pytest

from neon_pong.pong_core.config_loader import load_config
from neon_pong.pong_core.game import CoreGame
from neon_pong.pong_core.input_state import InputAction
from neon_pong.pong_core.rules import GamePhase
from neon_pong.pong_core.world import Difficulty


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def game(config):
    return CoreGame(config, seed=42)


class TestStep:
    """Test per-frame stepping."""

    def test_not_started_does_not_simulate(self, game):
        """Before start, step neither moves the ball nor ages effects."""
        result = game.step()
        assert not result.simulated
        assert result.snapshot.ball.x == 400
        assert game.frames == 1

    def test_running_advances_ball(self, game):
        """A running frame integrates the ball once."""
        game.start()
        result = game.step()
        assert result.simulated
        assert (result.snapshot.ball.x, result.snapshot.ball.y) == (404, 304)

    def test_delta_score(self, game):
        """delta_score reports points gained this frame."""
        game.start()
        ball = game.world.ball
        ball.x, ball.y, ball.dx, ball.dy = 790, 300, 5, 0
        assert game.step().delta_score == 1
        assert game.step().delta_score == 0

    def test_effects_age_only_while_running(self, game):
        """Particles freeze while paused."""
        game.start()
        ball = game.world.ball
        ball.x, ball.y, ball.dx, ball.dy = 790, 300, 5, 0
        game.step()
        game.toggle_pause()
        lives = [p.life for p in game.world.particles]
        game.step()
        assert [p.life for p in game.world.particles] == lives

    def test_game_over_result(self, game):
        """Losing the ball is reported in the step result."""
        game.start()
        ball = game.world.ball
        ball.x, ball.y, ball.dx, ball.dy = 10, 500, -5, 0
        result = game.step()
        assert result.game_over
        assert result.events.ball_lost
        assert game.is_over


class TestCommands:
    """Test command methods."""

    def test_set_difficulty_before_start(self, game):
        """Hard before start launches at 1.4x."""
        assert game.set_difficulty("hard")
        assert game.difficulty is Difficulty.HARD
        assert game.world.ball.speed == pytest.approx(4 * 1.4 * math.sqrt(2))

    def test_constructor_difficulty(self, config):
        """Difficulty can be chosen at construction."""
        game = CoreGame(config, difficulty="easy")
        assert game.world.ball.dx == pytest.approx(2.8)

    def test_reset_returns_snapshot(self, game):
        """reset returns a NOT_STARTED snapshot and releases holds."""
        game.start()
        game.hold(InputAction.MOVE_UP)
        snap = game.reset(seed=3)
        assert snap.phase is GamePhase.NOT_STARTED
        game.start()
        game.step()
        assert game.world.paddle.y == 250

    def test_resize(self, game):
        """resize rescales the playfield."""
        game.resize(400, 300)
        snap = game.snapshot()
        assert snap.viewport.width == 400
        assert snap.ball.radius == pytest.approx(4)

    def test_info(self, game):
        """get_info has the bookkeeping fields."""
        info = game.get_info()
        for key in ("score", "high_score", "combo", "max_combo", "difficulty", "phase", "frames"):
            assert key in info
        assert info["phase"] == "not_started"
        assert info["difficulty"] == "medium"
