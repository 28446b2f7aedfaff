#!/usr/bin/env python3
"""Benchmark suite for the pyskip SkipList (latencies and height profile)."""

import argparse
import json
import math
import random
import time
from pathlib import Path
from typing import Dict, List

import numpy as np
import plotly.graph_objects as go
from tqdm import tqdm

from pyskip import RandomLevels, SkipList


class Metrics:
    def __init__(self):
        self.add_latencies: List[float] = []
        self.find_latencies: List[float] = []
        self.remove_latencies: List[float] = []
        self.insert_heights: List[int] = []
        self.list_height: int = 0

    @staticmethod
    def _percentiles(samples: List[float]) -> Dict[str, float]:
        return {
            "p50": float(np.percentile(samples, 50)),
            "p95": float(np.percentile(samples, 95)),
            "p99": float(np.percentile(samples, 99)),
        }

    def to_dict(self, factor: int) -> Dict:
        n = len(self.insert_heights)
        return {
            "add_latencies": self._percentiles(self.add_latencies),
            "find_latencies": self._percentiles(self.find_latencies),
            "remove_latencies": self._percentiles(self.remove_latencies),
            "mean_insert_height": float(np.mean(self.insert_heights)),
            "list_height": self.list_height,
            "expected_height": math.log(n, factor) if n > 1 else 1.0,
        }

    def plot_latencies(self, title: str, output_path: Path):
        fig = go.Figure()
        for name, samples in (
            ("Add Latency", self.add_latencies),
            ("Find Latency", self.find_latencies),
            ("Remove Latency", self.remove_latencies),
        ):
            fig.add_trace(go.Box(y=samples, name=name, boxpoints="outliers"))

        fig.update_layout(
            title=title,
            yaxis_title="Latency (µs)",
            boxmode="group"
        )

        fig.write_html(output_path)

    def plot_heights(self, title: str, output_path: Path):
        fig = go.Figure(go.Histogram(x=self.insert_heights, name="Insertion height"))
        fig.update_layout(title=title, xaxis_title="Height", yaxis_title="Insertions", yaxis_type="log")
        fig.write_html(output_path)


class BenchmarkSuite:
    def __init__(self, num_entries: int, factor: int, seed: int):
        self.num_entries = num_entries
        self.factor = factor
        self.metrics = Metrics()
        rnd = random.Random(seed)
        self._values = [rnd.randrange(num_entries * 4) for _ in range(num_entries)]
        self._policy = RandomLevels(factor, seed=seed)

    def _recording_policy(self) -> int:
        height = self._policy()
        self.metrics.insert_heights.append(height)
        return height

    def run(self):
        sl: SkipList[int] = SkipList(levels=self._recording_policy)

        for v in tqdm(self._values, desc="SkipList Add"):
            start = time.perf_counter()
            sl.add(v)
            self.metrics.add_latencies.append((time.perf_counter() - start) * 1e6)
        self.metrics.list_height = sl.height()

        for v in tqdm(self._values, desc="SkipList Find"):
            start = time.perf_counter()
            sl.find(v)
            self.metrics.find_latencies.append((time.perf_counter() - start) * 1e6)

        for v in tqdm(self._values, desc="SkipList Remove"):
            start = time.perf_counter()
            sl.remove(v)
            self.metrics.remove_latencies.append((time.perf_counter() - start) * 1e6)

        if len(sl) or sl.height() != 1:
            raise RuntimeError(f"skip list not drained: {len(sl)} values, height {sl.height()}")


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--size", type=int, default=100000, help="Number of values")
    parser.add_argument("--factor", type=int, default=4, help="Inverse promotion probability")
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    parser.add_argument("--output", type=Path, default=Path("benchmark_results"), help="Output directory")
    args = parser.parse_args()

    args.output.mkdir(parents=True, exist_ok=True)

    suite = BenchmarkSuite(args.size, args.factor, args.seed)
    suite.run()
    metrics = suite.metrics

    # Generate reports
    metrics.plot_latencies("SkipList Latency Distribution", args.output / "skiplist_latencies.html")
    metrics.plot_heights("SkipList Insertion Heights", args.output / "skiplist_heights.html")

    with open(args.output / "metrics.json", "w") as f:
        json.dump({"skiplist": metrics.to_dict(args.factor)}, f, indent=2)


if __name__ == "__main__":
    main()
