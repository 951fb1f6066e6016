"""Benchmark: effective permission resolution latency: per-call p99.

Measures EffectivePermissionResolver.resolve_snapshot() for a user with a
parameterised role, a static role and a handful of direct grants.
"""
from __future__ import annotations

import json
import time
from pathlib import Path

from scope_authz.grants import UserPermissionGrant

from _bench_data import make_engine

_WARMUP: int = 100
_ITERATIONS: int = 2_000


def bench_resolution_latency() -> dict[str, object]:
    """Benchmark resolve_snapshot() per-call latency.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p99_latency_ms, memory_peak_mb.
    """
    engine = make_engine()
    store = engine.store
    store.assign_role("bench-user", "OWNER", {"owner": "42"})
    store.assign_role("bench-user", "AUDITOR")
    for n in range(5):
        store.grant("bench-user", UserPermissionGrant.allow(f"api:reports:invoices:{n}:read"))
    store.grant("bench-user", UserPermissionGrant.deny("api:iam:users:42:write"))
    snapshot = store.snapshot("bench-user")
    resolver = engine.resolver

    for _ in range(_WARMUP):
        resolver.resolve_snapshot(snapshot)

    latencies_ms: list[float] = []
    for _ in range(_ITERATIONS):
        t0 = time.perf_counter()
        resolver.resolve_snapshot(snapshot)
        latencies_ms.append((time.perf_counter() - t0) * 1000)

    sorted_lats = sorted(latencies_ms)
    n = len(sorted_lats)
    total = sum(latencies_ms) / 1000

    result: dict[str, object] = {
        "operation": "resolution_latency",
        "iterations": _ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1),
        "avg_latency_ms": round(sum(latencies_ms) / n, 4),
        "p99_latency_ms": round(sorted_lats[min(int(n * 0.99), n - 1)], 4),
        "memory_peak_mb": 0.0,
    }
    print(
        f"[bench_resolution_latency] {result['operation']}: "
        f"p99={result['p99_latency_ms']:.4f}ms  "
        f"mean={result['avg_latency_ms']:.4f}ms"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_resolution_latency()


if __name__ == "__main__":
    result = run_benchmark()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "latency_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
