#!/usr/bin/env python3
"""Micro-benchmarks for the log bloom byte loops and public operations."""

import argparse
import json
import os
import time
from pathlib import Path
from typing import Callable, Dict, List

import numpy as np
import plotly.graph_objects as go
from tqdm import tqdm

from pyethbloom import Bloom, BloomRef, Raw
from pyethbloom.bloom import BLOOM_SIZE


class Metrics:
    def __init__(self):
        self.latencies: Dict[str, List[float]] = {}

    def record(self, name: str, micros: float):
        self.latencies.setdefault(name, []).append(micros)

    def to_dict(self) -> Dict:
        return {
            name: {
                "p50": np.percentile(values, 50),
                "p95": np.percentile(values, 95),
                "p99": np.percentile(values, 99),
                "mean": np.mean(values),
            }
            for name, values in self.latencies.items()
        }

    def plot_latencies(self, title: str, output_path: Path):
        fig = go.Figure()
        for name, values in self.latencies.items():
            fig.add_trace(go.Box(y=values, name=name, boxpoints="outliers"))
        fig.update_layout(
            title=title,
            yaxis_title="Latency (µs)",
            boxmode="group"
        )
        fig.write_html(output_path)


# Raw OR-merge loops over plain buffers, forwards and backwards
def forwards(data: bytearray, other: bytes):
    for i in range(BLOOM_SIZE):
        data[i] |= other[i]


def backwards(data: bytearray, other: bytes):
    for i in range(BLOOM_SIZE):
        data[BLOOM_SIZE - 1 - i] |= other[BLOOM_SIZE - 1 - i]


class BenchmarkSuite:
    def __init__(self, rounds: int, num_inputs: int):
        self.rounds = rounds
        self.metrics = Metrics()
        self._inputs = [Raw(os.urandom(20)) for _ in range(num_inputs)]
        self._full = Bloom.from_inputs(self._inputs)

    def _time(self, name: str, fn: Callable[[], object]):
        for _ in tqdm(range(self.rounds), desc=name):
            start = time.perf_counter()
            fn()
            self.metrics.record(name, (time.perf_counter() - start) * 1e6)

    def run_loop_benchmarks(self):
        data = bytearray(BLOOM_SIZE)
        other = bytes([1]) * BLOOM_SIZE
        self._time("forwards", lambda: forwards(data, other))
        self._time("backwards", lambda: backwards(data, other))

    def run_bloom_benchmarks(self):
        target = Bloom()
        ref = BloomRef(self._full)
        item = self._inputs[0]
        self._time("accrue_bloom", lambda: target.accrue_bloom(ref))
        self._time("accrue", lambda: target.accrue(item))
        self._time("contains", lambda: self._full.contains(item))
        self._time("contains_bloom", lambda: self._full.contains_bloom(ref))


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--rounds", type=int, default=10000, help="Timed calls per benchmark")
    parser.add_argument("--inputs", type=int, default=100, help="Items accrued into the reference bloom")
    parser.add_argument("--output", type=Path, default=Path("benchmark_results"), help="Output directory")
    args = parser.parse_args()

    args.output.mkdir(parents=True, exist_ok=True)

    suite = BenchmarkSuite(args.rounds, args.inputs)
    suite.run_loop_benchmarks()
    suite.run_bloom_benchmarks()

    suite.metrics.plot_latencies(
        "Log Bloom Latency Distribution",
        args.output / "bloom_latencies.html"
    )

    with open(args.output / "metrics.json", "w") as f:
        json.dump(suite.metrics.to_dict(), f, indent=2)


if __name__ == "__main__":
    main()
