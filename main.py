"""
main.py — Master Entry Point
=============================
Top-level script that runs the simulation.

Usage:
    python main.py                    # Headless run (default)
    python main.py --mode live        # Live visualization
    python main.py --mode benchmark   # Benchmark physics performance
"""

import argparse
import logging

import numpy as np


def _make_simulation(n: int, diffusion: float, dt: float):
    from fluid import FluidConfig, FluidSimulation

    return FluidSimulation(FluidConfig(n=n, diffusion=diffusion), dt=dt)


def _feed_source(sim):
    """Continuous emitter near the bottom center, blowing upward."""
    n = sim.interior_size()
    sim.add_source(n // 2, 2, density=100.0, velocity=(0.0, 20.0))


def run_live(n: int = 64, diffusion: float = 0.0001, dt: float = 0.1, gif: str = None):
    """Live interactive visualization."""
    from visualizer import FluidVisualizer

    print(f"Starting live simulation (n={n})...")
    print("Drag the mouse to push smoke around. Close the window to exit.\n")

    sim = _make_simulation(n, diffusion, dt)
    viz = FluidVisualizer(sim)
    if gif:
        viz.save_gif(gif)
    else:
        viz.run(fps=10)


def _timing_table(logs: list, cells: int):
    """Mean/min/max of every *_ms phase in the step metrics, plus cost per interior cell."""
    keys = [k for k in logs[0] if k.endswith("_ms")]
    print(f"\n{'Phase':<20} {'Mean':>8} {'Min':>8} {'Max':>8} {'us/cell':>9}")
    print(f"{'─'*58}")
    for k in keys:
        vals = np.array([m[k] for m in logs])
        print(f"  {k:<18} {vals.mean():>7.1f}ms {vals.min():>7.1f}ms {vals.max():>7.1f}ms "
              f"{1000 * vals.mean() / cells:>8.2f}")


def run_headless(n: int = 64, frames: int = 100, diffusion: float = 0.0001, dt: float = 0.1):
    """Run simulation without display — prints density and timing every 10 frames."""
    sim = _make_simulation(n, diffusion, dt)
    print(f"\nHeadless simulation | n={n} ({sim.buffer_length()} cells incl. border) | "
          f"{frames} frames | k={dt * diffusion:g}")
    print(f"{'─'*60}")

    for f in range(frames):
        _feed_source(sim)
        metrics = sim.step()
        if f % 10 == 0:
            peak = sim.density_grid().max()
            print(f"  Frame {f:03d} | {metrics['total_ms']:6.1f}ms | "
                  f"density total={metrics['density_total']:.1f} peak={peak:.2f}")

    total = np.array([m["total_ms"] for m in sim.perf_log])
    print(f"\n{'─'*60}")
    print(f"  Average: {total.mean():.1f}ms/frame ({1000 / total.mean():.1f} FPS), "
          f"range {total.min():.1f}–{total.max():.1f}ms")
    sim.print_status()


def run_benchmark(n: int = 64, frames: int = 50, diffusion: float = 0.0001, dt: float = 0.1):
    """
    Per-phase timing of the velocity and density steps.
    Warm-up frames are dropped from the log before the table is built.
    """
    print(f"\n{'='*60}")
    print(f"  PHYSICS BENCHMARK | n={n} | {frames} frames")
    print(f"{'='*60}")

    sim = _make_simulation(n, diffusion, dt)
    warmup = 5
    for _ in range(warmup + frames):
        _feed_source(sim)
        sim.step()

    logs = sim.perf_log[warmup:]
    _timing_table(logs, cells=n * n)

    total = np.mean([m["total_ms"] for m in logs])
    print(f"\n{'─'*58}")
    print(f"  FPS (physics only): {1000 / total:.1f}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="2D Fluid Simulation")
    parser.add_argument(
        "--mode", choices=["live", "headless", "benchmark"],
        default="headless",
        help="Run mode (default: headless)"
    )
    parser.add_argument("--n",         type=int,   default=64,     help="Interior grid size (default: 64)")
    parser.add_argument("--frames",    type=int,   default=100,    help="Number of frames")
    parser.add_argument("--diffusion", type=float, default=0.0001, help="Diffusion rate (default: 0.0001)")
    parser.add_argument("--dt",        type=float, default=0.1,    help="Timestep (default: 0.1)")
    parser.add_argument("--gif",       default=None, help="Live mode: render to this GIF instead of a window")
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for the fluid package (default: WARNING)"
    )
    return parser


if __name__ == "__main__":
    args = build_parser().parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.mode == "live":
        run_live(n=args.n, diffusion=args.diffusion, dt=args.dt, gif=args.gif)
    elif args.mode == "headless":
        run_headless(n=args.n, frames=args.frames, diffusion=args.diffusion, dt=args.dt)
    elif args.mode == "benchmark":
        run_benchmark(n=args.n, frames=args.frames, diffusion=args.diffusion, dt=args.dt)
