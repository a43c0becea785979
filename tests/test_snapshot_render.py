"""
Tests for frame snapshots, observation packing and the numpy renderer.
"""

import math

import numpy as np
import pytest

from neon_pong.pong_core.config_loader import load_config
from neon_pong.pong_core.game import CoreGame
from neon_pong.pong_core.render_solid import SolidRenderer
from neon_pong.pong_core.rules import GamePhase
from neon_pong.pong_core.state_snapshot import MAX_SPEED_RATIO


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def game(config):
    return CoreGame(config, seed=0)


class TestSnapshot:
    """Test the read-only render contract."""

    def test_contains_render_fields(self, game):
        """Snapshot exposes entities and every scalar field."""
        snap = game.snapshot()
        assert (snap.ball.x, snap.ball.y, snap.ball.radius) == (400, 300, 8)
        assert (snap.paddle.x, snap.paddle.y) == (50, 250)
        assert snap.score == 0
        assert snap.high_score == 0
        assert snap.fps == 60
        assert snap.phase is GamePhase.NOT_STARTED
        assert not snap.running

    def test_entities_are_copies(self, game):
        """Mutating a snapshot does not touch the world."""
        snap = game.snapshot()
        snap.ball.x = -100
        snap.paddle.y = 0
        assert game.world.ball.x == 400
        assert game.world.paddle.y == 250

    def test_collections_are_frozen(self, game):
        """Effect collections are tuples captured at build time."""
        game.start()
        game.step()
        snap = game.snapshot()
        assert isinstance(snap.trail, tuple)
        assert len(snap.trail) == 1
        game.step()
        assert len(snap.trail) == 1

    def test_speed_ratio(self, game):
        """Launch speed reads 1.0 and the ratio caps at 2."""
        assert game.snapshot().speed_ratio == pytest.approx(1.0)

        ball = game.world.ball
        ball.dx *= 10
        assert game.snapshot().speed_ratio == MAX_SPEED_RATIO

    def test_pulse_visible_on_hit_frame(self, game):
        """A wall hit shows a full pulse in that frame's snapshot."""
        game.start()
        ball = game.world.ball
        ball.x, ball.y, ball.dx, ball.dy = 790, 300, 5, 0
        result = game.step()
        assert result.snapshot.wall_pulse == 1.0
        assert game.step().snapshot.wall_pulse == pytest.approx(0.95)

    def test_new_high_score_flag(self, game):
        """is_new_high_score is set once the score is the high score."""
        game.start()
        assert not game.snapshot().is_new_high_score
        ball = game.world.ball
        ball.x, ball.y, ball.dx, ball.dy = 790, 300, 5, 0
        assert game.step().snapshot.is_new_high_score

    def test_obs_dict(self, game):
        """Observation arrays are scalar numpy values of fixed dtypes."""
        obs = game.snapshot().to_obs_dict()
        assert obs["ball_x"].dtype == np.float32
        assert obs["ball_x"].shape == ()
        assert obs["score"].dtype == np.int64
        assert float(obs["wall_x"]) == 780
        assert float(obs["paddle_height"]) == 100
        assert float(obs["speed_ratio"]) == pytest.approx(1.0)


class TestSolidRenderer:
    """Test numpy rasterization."""

    def test_shape_and_dtype(self, config, game):
        """Output is (H, W, 3) uint8 at the requested size."""
        img = SolidRenderer(config).render(game.snapshot(), 160, 120)
        assert img.shape == (120, 160, 3)
        assert img.dtype == np.uint8

    def test_draws_ball_and_wall(self, config, game):
        """Ball pixel is white and the scoring wall is green."""
        img = SolidRenderer(config).render(game.snapshot(), 800, 600)
        assert tuple(img[300, 400]) == (255, 255, 255)
        assert tuple(img[300, 790]) == (16, 185, 129)

    def test_paddle_drawn(self, config, game):
        """Paddle pixels use the paddle color."""
        img = SolidRenderer(config).render(game.snapshot(), 800, 600)
        assert tuple(img[300, 55]) == (59, 130, 246)

    def test_background(self, config, game):
        """Empty areas keep the background color."""
        img = SolidRenderer(config).render(game.snapshot(), 800, 600)
        assert tuple(img[10, 10]) == (15, 23, 42)
