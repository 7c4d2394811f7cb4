"""Benchmark: design loading and ZPL compile throughput.

Measures how many compile passes and batch compiles complete per second
using the public zplc.compile() and zplc.compile_batch() APIs.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import zplc
from zplc.model import DesignSerializer, LabelDesign

_ITERATIONS: int = 5_000
_BATCH_SIZE: int = 500

_SAMPLE_DESIGN = """
page: {dpi: 203, width: 4, height: 6, unit: inch}
elements:
  - {kind: text, x: 20, y: 20, text: "ACME Components", font_size: 28}
  - {kind: text, x: 20, y: 80, is_dynamic: true, field_key: customer_name}
  - {kind: text, x: 20, y: 120, is_dynamic: true, field_key: po_number}
  - {kind: rectangle, x: 10, y: 10, width: 792, height: 1198, stroke_width: 3}
  - {kind: line, x: 10, y: 180, points: [0, 0, 792, 0], stroke_width: 2}
  - kind: media
    x: 40
    y: 220
    height: 120
    is_dynamic: true
    field_key: ct_number
    payload: {type: barcode, format: CODE128}
  - kind: media
    x: 560
    y: 900
    width: 200
    is_dynamic: true
    field_key: order_uid
    payload: {type: qrcode}
"""

_BINDINGS = {
    "customer_name": "Northwind Traders",
    "po_number": "4500012345",
    "ct_number": "CT00000001234",
    "order_uid": "ORD-2024-000042",
}


def _design() -> LabelDesign:
    return DesignSerializer().from_yaml(_SAMPLE_DESIGN)


def _report(operation: str, iterations: int, total: float) -> dict[str, object]:
    result: dict[str, object] = {
        "operation": operation,
        "iterations": iterations,
        "total_seconds": round(total, 4),
        "ops_per_second": round(iterations / total, 1),
        "avg_latency_ms": round(total / iterations * 1000, 4),
    }
    print(
        f"[bench_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


def bench_compile_throughput(iterations: int = _ITERATIONS) -> dict[str, object]:
    """Benchmark single-label compile throughput.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    design = _design()
    start = time.perf_counter()
    for _ in range(iterations):
        zplc.compile(design, _BINDINGS)
    return _report("zplc_compile_throughput", iterations, time.perf_counter() - start)


def bench_batch_throughput(batch_size: int = _BATCH_SIZE) -> dict[str, object]:
    """Benchmark a batch compile of *batch_size* labels, reported per label."""
    design = _design()
    batch = [{**_BINDINGS, "ct_number": f"CT{n:011d}"} for n in range(batch_size)]
    start = time.perf_counter()
    zplc.compile_batch(design, batch)
    return _report("zplc_batch_throughput", batch_size, time.perf_counter() - start)


if __name__ == "__main__":
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)

    for bench_fn, fname in [
        (bench_compile_throughput, "compile_throughput_baseline.json"),
        (bench_batch_throughput, "batch_throughput_baseline.json"),
    ]:
        result = bench_fn()
        output_path = results_dir / fname
        with open(output_path, "w", encoding="utf-8") as fh:
            json.dump(result, fh, indent=2)
        print(f"Results saved to {output_path}")
