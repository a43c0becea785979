"""
Baseline Tracker Agent - Keeps the paddle under the ball.

This is a simple heuristic agent that reads the ball and paddle from the
observation and steers the paddle center toward where the ball will cross
the paddle's face.

This serves as:
1. A working example of how to read observations and return actions
2. A baseline benchmark to compare against
3. A verification that the environment API works correctly

Strategy:
- If the ball is moving toward the paddle, fold its straight-line path
  off the top and bottom walls to predict the arrival y
- Otherwise drift back to the middle of the board
- Move up or down when the target is outside a small dead zone
"""

from typing import Any, Dict

# Actions of the Discrete(3) space
STAY = 0
UP = 1
DOWN = 2


class PongAgent:
    """
    Simple baseline agent that tracks the ball's predicted arrival point.
    """

    def __init__(self, dead_zone: float = 0.15, debug: bool = False):
        """
        Initialize the agent.

        Args:
            dead_zone: Fraction of the paddle height around its center in
                which the agent holds still.
            debug: If True, print decisions to stdout.
        """
        self.dead_zone = dead_zone
        self.debug = debug

    def reset(self) -> None:
        """Called when a new episode starts (stateless agent)."""
        pass

    def predict_arrival_y(self, observation: Dict[str, Any]) -> float:
        """
        Y coordinate where the ball center reaches the paddle's face.

        Returns the board middle when the ball is moving away.
        """
        ball_x = float(observation["ball_x"])
        ball_y = float(observation["ball_y"])
        dx = float(observation["ball_dx"])
        dy = float(observation["ball_dy"])
        radius = float(observation["ball_radius"])
        height = float(observation["board_height"])
        face_x = float(observation["paddle_x"]) + radius

        if dx >= 0:
            return height / 2

        frames = (ball_x - face_x) / -dx
        raw_y = ball_y + dy * max(0.0, frames)

        # Fold the straight path into the band the ball center can occupy
        low = radius
        span = max(1e-6, height - 2 * radius)
        offset = (raw_y - low) % (2 * span)
        if offset > span:
            offset = 2 * span - offset
        return low + offset

    def act(self, observation: Dict[str, Any], debug: bool = False) -> int:
        """
        Choose a paddle move.

        Args:
            observation: Dict of numpy arrays from the environment.
            debug: If True, print debug info for this step.

        Returns:
            0 (stay), 1 (up) or 2 (down).
        """
        target = self.predict_arrival_y(observation)
        paddle_h = float(observation["paddle_height"])
        center = float(observation["paddle_y"]) + paddle_h / 2
        error = target - center
        tolerance = paddle_h * self.dead_zone

        if error < -tolerance:
            action = UP
        elif error > tolerance:
            action = DOWN
        else:
            action = STAY

        if debug or self.debug:
            print(f"[Tracker Agent] Target={target:.1f}, "
                  f"Paddle center={center:.1f}, "
                  f"Action={action}")

        return action


# Convenience function to create agent (used by tools and tests)
def create_agent(**kwargs) -> PongAgent:
    """Factory function to create an agent instance."""
    return PongAgent(**kwargs)
