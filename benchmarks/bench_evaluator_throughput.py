"""Benchmark: ScopeEvaluator throughput: decisions per second.

Evaluates a fixed mix of allowed and denied target paths against the
effective directives of a user holding every benchmark role.
"""
from __future__ import annotations

import json
import time
from pathlib import Path

from scope_authz.roles import UserRoleAssignment

from _bench_data import make_engine

_WARMUP: int = 200
_ITERATIONS: int = 5_000

_TARGETS: tuple[str, ...] = (
    "api:iam:users:42:read",
    "api:iam:users:7:write",
    "api:billing:invoices:list",
    "api:reports:roles:9:write",
    "api:portfolio:accounts:42:read",
    "api:auth:apikeys:list",
)


def bench_evaluator_throughput() -> dict[str, object]:
    """Benchmark ScopeEvaluator.has_permission() throughput.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, memory_peak_mb.
    """
    engine = make_engine()
    directives = engine.effective_permissions(
        [
            UserRoleAssignment("ADMIN"),
            UserRoleAssignment("OWNER", {"owner": "42"}),
            UserRoleAssignment("AUDITOR"),
        ]
    )
    evaluator = engine.evaluator

    for i in range(_WARMUP):
        evaluator.has_permission(directives, _TARGETS[i % len(_TARGETS)])

    start = time.perf_counter()
    for i in range(_ITERATIONS):
        evaluator.has_permission(directives, _TARGETS[i % len(_TARGETS)])
    total = time.perf_counter() - start

    result: dict[str, object] = {
        "operation": "evaluator_throughput",
        "iterations": _ITERATIONS,
        "directives": len(directives),
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1),
        "avg_latency_ms": round(total / _ITERATIONS * 1000, 4),
        "memory_peak_mb": 0.0,
    }
    print(
        f"[bench_evaluator_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_evaluator_throughput()


if __name__ == "__main__":
    result = run_benchmark()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "throughput_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
