#!/usr/bin/env python3
"""Benchmark delivery finalization: upload both artifacts at once and time it.

Each delivery gets its signature and original PDF posted concurrently, so the
two upload paths race for the finalization lock. The run fails if any
delivery ends up not finalized.

Usage:
  export API_URL=http://localhost:8000
  uv run python scripts/bench_finalize.py [--num-deliveries 50] [--pages 3]
"""
from __future__ import annotations

import argparse
import asyncio
import io
import os
import statistics
import sys
import time
import uuid

import httpx
from PIL import Image, ImageDraw
from reportlab.pdfgen import canvas


def build_pdf(pages: int) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf)
    for i in range(1, pages + 1):
        c.drawString(72, 770, f"Delivery note page {i}")
        c.showPage()
    c.save()
    return buf.getvalue()


def build_signature() -> bytes:
    image = Image.new("RGBA", (600, 200), "white")
    ImageDraw.Draw(image).line((20, 180, 580, 20), fill="black", width=4)
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


async def run_one(
    client: httpx.AsyncClient, tenant_id: str, index: int, pdf: bytes, signature: bytes
) -> tuple[float, bool]:
    r = await client.post(
        "/v1/deliveries",
        json={
            "tenant_id": tenant_id,
            "business_name": "Bench Supplies",
            "signer_name": "Bench Signer",
            "doc_number": f"BENCH-{index:05d}",
        },
    )
    r.raise_for_status()
    delivery_id = r.json()["id"]

    t0 = time.perf_counter()
    sig, orig = await asyncio.gather(
        client.post(
            f"/v1/deliveries/{delivery_id}/signature",
            content=signature,
            headers={"Content-Type": "image/png"},
        ),
        client.post(
            f"/v1/deliveries/{delivery_id}/original",
            content=pdf,
            headers={"Content-Type": "application/pdf"},
        ),
    )
    elapsed = time.perf_counter() - t0
    sig.raise_for_status()
    orig.raise_for_status()

    r = await client.get(f"/v1/deliveries/{delivery_id}")
    r.raise_for_status()
    return elapsed, r.json()["status"] == "FINALIZED"


async def run(args: argparse.Namespace, api_url: str) -> list[tuple[float, bool]]:
    pdf = build_pdf(args.pages)
    signature = build_signature()
    tenant_id = str(uuid.uuid4())
    limits = asyncio.Semaphore(args.concurrency)

    async with httpx.AsyncClient(base_url=api_url, timeout=120.0) as client:

        async def bounded(i: int) -> tuple[float, bool]:
            async with limits:
                return await run_one(client, tenant_id, i, pdf, signature)

        return await asyncio.gather(*(bounded(i) for i in range(args.num_deliveries)))


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark delivery finalization")
    parser.add_argument("--num-deliveries", type=int, default=50, help="Deliveries to finalize")
    parser.add_argument("--pages", type=int, default=3, help="Pages in each original PDF")
    parser.add_argument("--concurrency", type=int, default=8, help="Deliveries in flight")
    parser.add_argument("--output", type=str, default="/results/bench_finalize.txt", help="Output file path")
    args = parser.parse_args()

    api_url = os.environ.get("API_URL", "http://localhost:8000").rstrip("/")

    print(f"Finalizing {args.num_deliveries} deliveries ({args.pages} pages each)...")
    start_total = time.perf_counter()
    results = asyncio.run(run(args, api_url))
    total_elapsed = time.perf_counter() - start_total

    latencies = [elapsed for elapsed, _ in results]
    not_finalized = sum(1 for _, finalized in results if not finalized)
    n = len(latencies)
    if n == 0:
        print("No deliveries processed.")
        return 1

    p50 = statistics.median(latencies) * 1000
    p95 = sorted(latencies)[int(n * 0.95) - 1] * 1000 if n >= 20 else p50

    summary = (
        f"Finalize benchmark (n={n}, not_finalized={not_finalized})\n"
        f"  Throughput: {n / total_elapsed:.2f} deliveries/s\n"
        f"  Upload pair latency: p50={p50:.1f} ms, p95={p95:.1f} ms\n"
        f"  Total time: {total_elapsed:.2f} s\n"
    )
    print(summary)

    try:
        os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(summary)
        print(f"Wrote {args.output}")
    except OSError as e:
        print(f"Could not write {args.output}: {e}")

    return 1 if not_finalized else 0


if __name__ == "__main__":
    sys.exit(main())
