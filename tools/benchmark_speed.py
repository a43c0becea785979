"""
Performance Benchmark
=====================

Measures headless frame throughput of the core game and the Gymnasium
environment, with and without image observations.

Usage:
    python -m tools.benchmark_speed [--steps S] [--quick]
"""

from __future__ import annotations

import argparse
import sys
import time

import numpy as np

from contestants.baseline_tracker import create_agent
from neon_pong.pong_core.config_loader import load_config
from neon_pong.pong_core.env_gym import PongEnv
from neon_pong.pong_core.frame_driver import FrameDriver
from neon_pong.pong_core.game import CoreGame
from neon_pong.pong_core.input_state import InputAction


def benchmark_core_game(
    num_steps: int = 1000,
    seed: int = 42
) -> dict:
    """
    Benchmark raw CoreGame frames without Gym overhead.

    The paddle follows the ball so rallies last and effects stay busy.

    Returns:
        Dict with timing results.
    """
    config = load_config()
    game = CoreGame(config=config, seed=seed)
    game.start()

    def follow_ball() -> None:
        world = game.world
        center = world.paddle.y + world.paddle.height / 2
        if world.ball.y < center:
            game.hold(InputAction.MOVE_UP)
            game.release(InputAction.MOVE_DOWN)
        else:
            game.hold(InputAction.MOVE_DOWN)
            game.release(InputAction.MOVE_UP)

    start = time.perf_counter()
    for _ in range(num_steps):
        follow_ball()
        result = game.step()
        if result.game_over:
            game.reset()
            game.start()
    elapsed = time.perf_counter() - start

    return {
        "mode": "core_game",
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def benchmark_frame_driver(
    num_steps: int = 1000,
    seed: int = 42
) -> dict:
    """Benchmark the host loop (FPS counter + step + snapshot) with no pacing."""
    game = CoreGame(config=load_config(), seed=seed)
    game.start()
    driver = FrameDriver(game)

    start = time.perf_counter()
    driver.run(max_frames=num_steps)
    elapsed = time.perf_counter() - start

    return {
        "mode": "frame_driver",
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps,
        "measured_fps": driver.fps
    }


def benchmark_env(
    num_steps: int = 1000,
    seed: int = 42,
    image_obs: bool = False
) -> dict:
    """
    Benchmark PongEnv driven by the baseline tracker agent.

    Returns:
        Dict with timing results.
    """
    env = PongEnv(image_obs=image_obs)
    agent = create_agent()
    scores = []

    obs, _ = env.reset(seed=seed)
    start = time.perf_counter()
    for _ in range(num_steps):
        obs, _, terminated, truncated, info = env.step(agent.act(obs))
        if terminated or truncated:
            scores.append(info["score"])
            obs, _ = env.reset()
    elapsed = time.perf_counter() - start
    env.close()

    return {
        "mode": "env_image" if image_obs else "env",
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps,
        "episodes": len(scores),
        "mean_score": float(np.mean(scores)) if scores else 0.0
    }


def run_all_benchmarks(steps: int = 2000) -> list:
    """Run comprehensive benchmarks."""
    results = []

    print("=" * 60)
    print("NEON PONG PERFORMANCE BENCHMARK")
    print("=" * 60)
    print()

    for label, bench in (
        ("CoreGame (raw)", lambda: benchmark_core_game(num_steps=steps)),
        ("FrameDriver (unpaced)", lambda: benchmark_frame_driver(num_steps=steps)),
        ("PongEnv", lambda: benchmark_env(num_steps=steps)),
        ("PongEnv + image obs", lambda: benchmark_env(num_steps=steps, image_obs=True)),
    ):
        print(f"Benchmarking {label}...")
        result = bench()
        results.append(result)
        print(f"  Steps/sec: {result['steps_per_second']:.1f}")
        print(f"  ms/step:   {result['ms_per_step']:.3f}")
        print()

    print("=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print()
    print(f"{'Mode':<20} {'Steps/s':>12} {'ms/step':>10}")
    print("-" * 44)
    for r in results:
        print(f"{r['mode']:<20} {r['steps_per_second']:>12.1f} {r['ms_per_step']:>10.3f}")

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark Neon Pong simulation performance")
    parser.add_argument("--steps", type=int, default=2000, help="Frames per benchmark")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer frames)")

    args = parser.parse_args()

    steps = 200 if args.quick else args.steps
    run_all_benchmarks(steps=steps)

    return 0


if __name__ == "__main__":
    sys.exit(main())
