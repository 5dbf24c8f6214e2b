#!/usr/bin/env python3
"""Benchmark map generation time for every algorithm."""

from __future__ import annotations

import argparse
import json
import time
from pathlib import Path

from delve.environment import metrics
from delve.environment.generators.pipeline.factory import Algorithm, create_pipeline

GRID_SIZES: tuple[tuple[int, int], ...] = (
    (20, 20),
    (80, 50),
    (160, 100),
)


class GeneratorBenchmark:
    """Benchmark runner for the pipeline generators."""

    def __init__(self, iterations: int) -> None:
        self.iterations = iterations
        self.results: dict[str, dict[str, float]] = {}

    def _run_case(
        self, algorithm: Algorithm, width: int, height: int
    ) -> tuple[float, float]:
        """Run one case and return (average ms, average floor density)."""
        elapsed_total = 0.0
        density_total = 0.0

        for seed in range(self.iterations):
            generator = create_pipeline(algorithm, width, height, seed)

            start = time.perf_counter()
            map_data = generator.generate()
            elapsed_total += time.perf_counter() - start
            density_total += metrics.density(map_data.grid)

        return (
            (elapsed_total / self.iterations) * 1000.0,
            density_total / self.iterations,
        )

    def run(self) -> None:
        """Run every algorithm at every configured grid size."""
        print("Map Generator Benchmark")
        print("=" * 54)
        print(f"Iterations per case: {self.iterations}")
        print()
        print(f"{'Algorithm':>18} {'Size':>10} {'Time (ms)':>12} {'Density':>9}")
        print("-" * 54)

        for algorithm in Algorithm:
            for width, height in GRID_SIZES:
                elapsed_ms, floor_density = self._run_case(algorithm, width, height)

                case_key = f"{algorithm.value}/{width}x{height}"
                self.results[case_key] = {
                    "ms": elapsed_ms,
                    "density": floor_density,
                }

                print(
                    f"{algorithm.value:>18} {width}x{height:<6} "
                    f"{elapsed_ms:12.2f} {floor_density:9.3f}"
                )

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
        print("=" * 72)

        for case_key, current in self.results.items():
            if case_key not in baseline:
                continue

            old_ms = baseline[case_key].get("ms", 0.0)
            new_ms = current["ms"]
            if old_ms <= 0:
                continue

            delta_pct = ((new_ms - old_ms) / old_ms) * 100.0
            speed_ratio = old_ms / new_ms if new_ms > 0 else 0.0
            trend = "faster" if speed_ratio > 1.0 else "slower"

            print(
                f"{case_key:>28}: {new_ms:8.2f}ms "
                f"vs {old_ms:8.2f}ms | {speed_ratio:5.2f}x {trend} "
                f"({delta_pct:+6.1f}%)"
            )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Benchmark map generators")
    parser.add_argument(
        "--iterations",
        type=int,
        default=5,
        help="Number of seeds per algorithm and size (default: 5)",
    )
    parser.add_argument("--save", type=str, help="Save current results to JSON")
    parser.add_argument(
        "--compare",
        type=str,
        help="Compare current results against baseline JSON",
    )
    args = parser.parse_args(argv)

    benchmark = GeneratorBenchmark(iterations=args.iterations)
    benchmark.run()

    if args.save:
        benchmark.save_results(args.save)

    if args.compare:
        benchmark.compare_with_baseline(args.compare)


if __name__ == "__main__":
    main()
