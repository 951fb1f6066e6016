"""Benchmark: Memory usage of catalog loading and permission checks.

Uses tracemalloc to measure memory allocated while building an engine and
repeatedly resolving and evaluating a user's permissions.
"""
from __future__ import annotations

import json
import tracemalloc
from pathlib import Path

from _bench_data import make_engine

_ITERATIONS: int = 500

_TARGETS: tuple[str, ...] = (
    "api:iam:users:42:read",
    "api:billing:invoices:list",
    "api:portfolio:accounts:42:read",
)


def bench_engine_memory_usage() -> dict[str, object]:
    """Benchmark memory usage during repeated resolution and evaluation.

    Returns
    -------
    dict with keys: operation, iterations, peak_memory_kb, current_memory_kb,
    ops_per_second, avg_latency_ms, memory_peak_mb.
    """
    tracemalloc.start()
    snapshot_before = tracemalloc.take_snapshot()

    engine = make_engine()
    engine.store.assign_role("mem-user", "OWNER", {"owner": "42"})
    engine.store.assign_role("mem-user", "AUDITOR")
    snapshot = engine.store.snapshot("mem-user")

    for i in range(_ITERATIONS):
        engine.has_permission(snapshot, _TARGETS[i % len(_TARGETS)])

    snapshot_after = tracemalloc.take_snapshot()
    tracemalloc.stop()

    stats = snapshot_after.compare_to(snapshot_before, "lineno")
    total_bytes = sum(stat.size_diff for stat in stats if stat.size_diff > 0)
    peak_kb = round(total_bytes / 1024, 2)

    result: dict[str, object] = {
        "operation": "engine_memory_usage",
        "iterations": _ITERATIONS,
        "peak_memory_kb": peak_kb,
        "current_memory_kb": peak_kb,
        "ops_per_second": 0.0,
        "avg_latency_ms": 0.0,
        "memory_peak_mb": round(peak_kb / 1024, 4),
    }
    print(
        f"[bench_memory_usage] {result['operation']}: "
        f"peak {peak_kb:.2f} KB over {_ITERATIONS} iterations"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_engine_memory_usage()


if __name__ == "__main__":
    result = run_benchmark()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "memory_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
