"""
Tests for Gymnasium environment API.
"""

import numpy as np
import pytest

from neon_pong.pong_core.env_gym import ACTION_DOWN, ACTION_STAY, ACTION_UP, PongEnv
from neon_pong.pong_core.rules import GamePhase


@pytest.fixture
def env():
    env = PongEnv()
    yield env
    env.close()


def put_ball(env, x, y, dx, dy):
    ball = env.game.world.ball
    ball.x, ball.y, ball.dx, ball.dy = x, y, dx, dy


class TestPongEnv:
    """Test single environment API."""

    def test_spaces(self, env):
        """Discrete(3) actions and a Dict observation."""
        assert env.action_space.n == 3
        assert "ball_x" in env.observation_space.spaces
        assert "board_rgb" not in env.observation_space.spaces

    def test_reset_returns_obs_and_info(self, env):
        """Reset returns (observation, info) and starts the rally."""
        obs, info = env.reset(seed=42)
        assert isinstance(obs, dict)
        assert isinstance(info, dict)
        assert info["delta_score"] == 0
        assert env.game.phase is GamePhase.RUNNING

    def test_observation_in_space(self, env):
        """Observations conform to the declared space."""
        obs, _ = env.reset(seed=0)
        assert env.observation_space.contains(obs)
        obs, *_ = env.step(ACTION_UP)
        assert env.observation_space.contains(obs)

    def test_step_returns_five_tuple(self, env):
        """Step follows the Gymnasium 5-tuple API."""
        env.reset(seed=0)
        obs, reward, terminated, truncated, info = env.step(ACTION_STAY)
        assert isinstance(reward, float)
        assert terminated is False
        assert truncated is False
        assert "score" in info

    def test_actions_move_paddle(self, env):
        """Up and down actions move the paddle one frame's worth."""
        obs, _ = env.reset(seed=0)
        start = float(obs["paddle_y"])
        obs, *_ = env.step(ACTION_UP)
        assert float(obs["paddle_y"]) == pytest.approx(start - 7)
        obs, *_ = env.step(ACTION_DOWN)
        assert float(obs["paddle_y"]) == pytest.approx(start)
        obs, *_ = env.step(ACTION_STAY)
        assert float(obs["paddle_y"]) == pytest.approx(start)

    def test_numpy_action(self, env):
        """Numpy integer actions are accepted."""
        env.reset(seed=0)
        env.step(np.array(1))
        env.step(np.int64(2))

    def test_invalid_action(self, env):
        """Out-of-range actions raise ValueError."""
        env.reset(seed=0)
        with pytest.raises(ValueError):
            env.step(3)

    def test_reward_is_score_gain(self, env):
        """A scoring bounce yields reward 1."""
        env.reset(seed=0)
        put_ball(env, 790, 300, 5, 0)
        _, reward, _, _, info = env.step(ACTION_STAY)
        assert reward == 1.0
        assert info["delta_score"] == 1

    def test_terminated_on_miss(self, env):
        """Losing the ball terminates the episode."""
        env.reset(seed=0)
        put_ball(env, 10, 500, -5, 0)
        _, reward, terminated, truncated, _ = env.step(ACTION_STAY)
        assert terminated is True
        assert truncated is False
        assert reward == 0.0

    def test_truncated_at_step_limit(self):
        """Episodes are truncated after max_episode_steps frames."""
        env = PongEnv(max_episode_steps=5)
        env.reset(seed=0)
        results = [env.step(ACTION_STAY) for _ in range(5)]
        assert [r[3] for r in results] == [False, False, False, False, True]
        env.close()

    def test_reset_option_difficulty(self, env):
        """reset(options={'difficulty': ...}) applies before launch."""
        obs, _ = env.reset(seed=0, options={"difficulty": "hard"})
        assert float(obs["ball_dx"]) == pytest.approx(5.6)
        assert env.game.difficulty.value == "hard"

    def test_bad_render_mode(self):
        """Unknown render modes are rejected."""
        with pytest.raises(ValueError):
            PongEnv(render_mode="ascii")


class TestImageObservations:
    """Test RGB observation and rgb_array rendering."""

    def test_board_rgb(self):
        """image_obs adds a uint8 image of the configured size."""
        env = PongEnv(image_obs=True)
        obs, _ = env.reset(seed=0)
        assert obs["board_rgb"].shape == (120, 160, 3)
        assert obs["board_rgb"].dtype == np.uint8
        assert env.observation_space.contains(obs)
        env.close()

    def test_rgb_array_render(self):
        """rgb_array render returns a full-size frame."""
        env = PongEnv(render_mode="rgb_array")
        env.reset(seed=0)
        frame = env.render()
        assert frame.shape == (600, 800, 3)
        env.close()
