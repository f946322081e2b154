# scripts/bench_graph_eager_vs_lazy.py
"""
Microbench: eager Array arithmetic vs lazy graph evaluation (CPU).

What it measures
----------------
- ``eager``: the expression chain evaluated directly with Array elementwise ops.
- ``build``: appending the same chain to a fresh Graph (no evaluation).
- ``cold``: build + first `calculate` (every step evaluated once).
- ``memo``: `calculate` on an already evaluated graph (cache hit + clone).
- ``grad``: building the symbolic gradient graph of the chain (no evaluation).
- ``grad_eval``: build + grad + evaluation of every gradient.

Notes
-----
- The chain is ``y = ((a * b + a) / b - a) * ...`` repeated `--depth` times,
  so every step has a short dependency list and shared inputs.
- Graph-side timings include Python overhead of step records and shape /
  hardware inference, which dominates for small shapes.

Example
-------
python -O scripts/bench_graph_eager_vs_lazy.py --shape 256 32 --depth 16 \
    --warmup 10 --repeats 50
"""

from __future__ import annotations

import argparse
import math
import statistics
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence

import numpy as np

import os
import sys

THIS_DIR = os.path.dirname(os.path.abspath(__file__))
ROOT_DIR = os.path.abspath(os.path.join(THIS_DIR, ".."))
SRC_DIR = os.path.join(ROOT_DIR, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from lazygrad import Array, CpuHardware, Graph, Node, grad  # noqa: E402


# ----------------------------
# Stats helpers
# ----------------------------
def _median(xs: Sequence[float]) -> float:
    return statistics.median(xs) if xs else float("nan")


def _p95(xs: Sequence[float]) -> float:
    if not xs:
        return float("nan")
    ys = sorted(xs)
    k = int(math.ceil(0.95 * len(ys))) - 1
    k = max(0, min(k, len(ys) - 1))
    return ys[k]


def _fmt(sec: float) -> str:
    if sec < 1e-3:
        return f"{sec * 1e6:8.1f} us"
    return f"{sec * 1e3:8.3f} ms"


@dataclass
class CaseResult:
    name: str
    med: float
    p95: float


# ----------------------------
# Bench core
# ----------------------------
def _time_case(fn: Callable[[], object], *, warmup: int, repeats: int) -> List[float]:
    for _ in range(warmup):
        fn()

    times: List[float] = []
    for _ in range(repeats):
        t0 = time.perf_counter()
        fn()
        t1 = time.perf_counter()
        times.append(t1 - t0)
    return times


def _eager_chain(a: Array, b: Array, depth: int) -> Array:
    y = a
    for _ in range(depth):
        y = y.elementwise_mul(b).elementwise_add(a)
        y = y.elementwise_div(b).elementwise_sub(a)
    return y


def _lazy_chain(a: Node, b: Node, depth: int) -> Node:
    y = a
    for _ in range(depth):
        y = (y * b + a) / b - a
    return y


def _build_cases(a_arr: Array, b_arr: Array, depth: int) -> Dict[str, Callable[[], object]]:
    def build():
        g = Graph()
        a = Node.from_array(g, a_arr)
        b = Node.from_array(g, b_arr)
        return a, b, _lazy_chain(a, b, depth)

    def cold():
        _, _, y = build()
        return y.calculate()

    _, _, warm = build()
    warm.calculate()

    def grads():
        a, b, y = build()
        return grad(y, [a, b])

    def grads_eval():
        return [n.calculate() for n in grads()]

    return {
        "eager": lambda: _eager_chain(a_arr, b_arr, depth),
        "build": build,
        "cold": cold,
        "memo": warm.calculate,
        "grad": grads,
        "grad_eval": grads_eval,
    }


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument(
        "--shape",
        nargs="*",
        type=int,
        default=[256, 32],
        help="Array shape, e.g. --shape 256 32 (empty for a scalar)",
    )
    ap.add_argument("--depth", type=int, default=16)
    ap.add_argument("--warmup", type=int, default=10)
    ap.add_argument("--repeats", type=int, default=50)
    ap.add_argument(
        "--cases",
        nargs="*",
        default=["eager", "build", "cold", "memo", "grad", "grad_eval"],
    )
    args = ap.parse_args()

    shape = tuple(int(x) for x in args.shape)

    print("=" * 72)
    print(
        f"lazygrad graph bench | shape={shape} depth={args.depth} "
        f"warmup={args.warmup} repeats={args.repeats}"
    )
    print("=" * 72)

    rng = np.random.default_rng(0)
    hw = CpuHardware()
    a_arr = Array.from_values(hw, shape, rng.uniform(0.5, 1.5, size=shape))
    b_arr = Array.from_values(hw, shape, rng.uniform(0.5, 1.5, size=shape))

    cases = _build_cases(a_arr, b_arr, args.depth)
    selected = [c for c in args.cases if c in cases]
    if not selected:
        raise SystemExit(f"No valid cases selected. Choose from: {', '.join(cases)}")

    results: List[CaseResult] = []
    for name in selected:
        times = _time_case(cases[name], warmup=args.warmup, repeats=args.repeats)
        results.append(CaseResult(name=name, med=_median(times), p95=_p95(times)))

    print("\nResults (median / p95):")
    print("-" * 72)
    print(f"{'case':12s} | {'median':>12s} {'p95':>12s}")
    print("-" * 72)
    for r in results:
        print(f"{r.name:12s} | {_fmt(r.med):>12s} {_fmt(r.p95):>12s}")
    print("-" * 72)
    print(f"live allocations after run: {hw.num_allocations()}")


if __name__ == "__main__":
    main()
