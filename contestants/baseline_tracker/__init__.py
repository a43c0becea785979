"""
Baseline Tracker Agent Package

A simple heuristic agent that keeps the paddle under the ball's predicted
arrival point. Serves as a benchmark and example.
"""

from .agent import PongAgent, create_agent

__all__ = ["PongAgent", "create_agent"]
