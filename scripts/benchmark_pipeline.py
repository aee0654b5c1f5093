#!/usr/bin/env python3
"""Benchmark full level generation across map sizes."""

from __future__ import annotations

import argparse
import json
import time
from pathlib import Path

from warrens.environment.generators.pipeline import generate_level

GRID_SIZES: tuple[tuple[int, int], ...] = (
    (40, 25),
    (80, 43),
    (120, 60),
    (160, 90),
)


class PipelineBenchmark:
    """Times generate_level over a fixed set of seeds per map size."""

    def __init__(self, iterations: int, depth: int) -> None:
        self.iterations = iterations
        self.depth = depth
        self.results: dict[str, dict[str, float]] = {}

    def _run_case(self, width: int, height: int) -> float:
        """Run one benchmark case and return average build time in milliseconds."""
        elapsed_total = 0.0

        for i in range(self.iterations):
            seed = (width * 1_000_000) + (height * 1_000) + i
            start = time.perf_counter()
            generate_level(self.depth, seed, width, height)
            elapsed_total += time.perf_counter() - start

        return (elapsed_total / self.iterations) * 1000.0

    def run(self) -> None:
        """Run all configured map-size benchmarks."""
        print("Level Generation Benchmark")
        print("=" * 42)
        print(f"Iterations per size: {self.iterations}  Depth: {self.depth}")
        print()
        print(f"{'Size':>12} {'Build (ms)':>14}")
        print("-" * 42)

        for width, height in GRID_SIZES:
            build_ms = self._run_case(width, height)
            size_key = f"{width}x{height}"
            self.results[size_key] = {"build_ms": build_ms}
            print(f"{size_key:>12} {build_ms:14.2f}")

    def save_results(self, filename: str) -> None:
        """Save benchmark output to a JSON file."""
        with Path(filename).open("w") as f:
            json.dump(self.results, f, indent=2)
        print(f"\nSaved benchmark results to {filename}")

    def compare_with_baseline(self, baseline_file: str) -> None:
        """Compare current run with a saved baseline JSON file."""
        try:
            with Path(baseline_file).open() as f:
                baseline: dict[str, dict[str, float]] = json.load(f)
        except FileNotFoundError:
            print(f"\nBaseline file not found: {baseline_file}")
            return

        print(f"\nComparison vs baseline: {baseline_file}")
        print("=" * 64)

        for size_key, current in self.results.items():
            old_ms = baseline.get(size_key, {}).get("build_ms", 0.0)
            if old_ms <= 0:
                continue
            new_ms = current["build_ms"]
            delta_pct = ((new_ms - old_ms) / old_ms) * 100.0
            trend = "faster" if new_ms < old_ms else "slower"
            print(
                f"{size_key:>12}: {new_ms:8.2f}ms vs {old_ms:8.2f}ms "
                f"{trend} ({delta_pct:+6.1f}%)"
            )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Benchmark level generation")
    parser.add_argument(
        "--iterations",
        type=int,
        default=5,
        help="Number of levels per map size (default: 5)",
    )
    parser.add_argument(
        "--depth", type=int, default=1, help="Level depth (default: 1)"
    )
    parser.add_argument("--save", type=str, help="Save current results to JSON")
    parser.add_argument(
        "--compare",
        type=str,
        help="Compare current results against baseline JSON",
    )
    args = parser.parse_args(argv)

    benchmark = PipelineBenchmark(iterations=args.iterations, depth=args.depth)
    benchmark.run()

    if args.save:
        benchmark.save_results(args.save)

    if args.compare:
        benchmark.compare_with_baseline(args.compare)


if __name__ == "__main__":
    main()
