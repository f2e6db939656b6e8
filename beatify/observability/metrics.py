from __future__ import annotations

from typing import Optional

from flask import Blueprint, Response
from prometheus_client import Counter, Histogram, generate_latest

metrics_blueprint = Blueprint("metrics_bp", __name__)

CONTENT_TYPE_LATEST = "text/plain; version=0.0.4; charset=utf-8"

PROVIDER_ATTEMPTS = Counter(
    "beatify_provider_attempts_total",
    "Mood track requests attempted per provider, by outcome.",
    ["provider", "outcome"],
)
PROVIDER_FALLBACKS = Counter(
    "beatify_provider_fallbacks_total",
    "Times a failed provider handed the request to the next one in the chain.",
    ["from_provider", "to_provider"],
)
PROVIDER_LATENCY = Histogram(
    "beatify_provider_request_seconds",
    "Wall time of a single provider attempt.",
    ["provider"],
    buckets=(0.1, 0.25, 0.5, 1, 2, 5, 10, 30, float("inf")),
)
TRACKS_RETURNED = Histogram(
    "beatify_tracks_returned",
    "Number of tracks returned per successful mood request.",
    buckets=(0, 1, 5, 10, 20, 50, 100, float("inf")),
)


def record_provider_success(provider: str, track_count: int, duration_seconds: Optional[float] = None) -> None:
    PROVIDER_ATTEMPTS.labels(provider=provider, outcome="success").inc()
    TRACKS_RETURNED.observe(track_count)
    if duration_seconds is not None:
        PROVIDER_LATENCY.labels(provider=provider).observe(duration_seconds)


def record_provider_failure(provider: str, kind: str, duration_seconds: Optional[float] = None) -> None:
    PROVIDER_ATTEMPTS.labels(provider=provider, outcome=kind).inc()
    if duration_seconds is not None:
        PROVIDER_LATENCY.labels(provider=provider).observe(duration_seconds)


def record_fallback(from_provider: str, to_provider: str) -> None:
    PROVIDER_FALLBACKS.labels(from_provider=from_provider, to_provider=to_provider).inc()


@metrics_blueprint.route("/metrics")
def metrics_endpoint() -> Response:
    return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)
