"""Health and metrics endpoints."""

from __future__ import annotations

import time
from collections import Counter

from fastapi import APIRouter, Response

router = APIRouter()

__all__ = ["record_request", "record_verification", "router"]

_START_TIME = time.time()
_requests_by_status: Counter[int] = Counter()
_verifications: Counter[str] = Counter({"ok": 0, "failed": 0})


def record_request(status: int) -> None:
    _requests_by_status[status] += 1


def record_verification(ok: bool) -> None:
    _verifications["ok" if ok else "failed"] += 1


def _metric(name: str, kind: str, help_text: str, samples: list[tuple[str, float]]) -> list[str]:
    lines = [f"# HELP {name} {help_text}", f"# TYPE {name} {kind}"]
    lines += [f"{name}{labels} {value}" for labels, value in samples]
    return lines


@router.get("/health", summary="Liveness probe", operation_id="health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/metrics", summary="Prometheus metrics", operation_id="metrics")
async def metrics() -> Response:
    lines = _metric("euplatesc_up", "gauge", "Gateway service is up", [("", 1)])
    lines += _metric(
        "euplatesc_uptime_seconds",
        "gauge",
        "Seconds since process start",
        [("", round(time.time() - _START_TIME, 1))],
    )
    lines += _metric(
        "euplatesc_requests_total",
        "counter",
        "Total HTTP requests",
        [("", sum(_requests_by_status.values()))]
        + [(f'{{status="{status}"}}', count) for status, count in sorted(_requests_by_status.items())],
    )
    lines += _metric(
        "euplatesc_verifications_total",
        "counter",
        "Gateway response signature checks",
        [(f'{{result="{result}"}}', _verifications[result]) for result in ("ok", "failed")],
    )
    return Response(content="\n".join(lines) + "\n", media_type="text/plain; charset=utf-8")
