"""
Neon Pong Package
=================

Single-player wall pong: the ball bounces off the top, bottom and right
walls, the player guards the left side with a paddle, and every bounce off
the right (scoring) wall adds a point and speeds the ball up.

The simulation core lives in ``neon_pong.pong_core``. All tunable
parameters are in game_config.yaml next to this file.
"""
