from __future__ import annotations

from typing import Optional

from flask import Blueprint, Response
from prometheus_client import Counter, Histogram, generate_latest

metrics_blueprint = Blueprint("metrics_bp", __name__)

CONTENT_TYPE_LATEST = "text/plain; version=0.0.4; charset=utf-8"

GENRE_RESOLUTIONS = Counter(
    "smartsplit_genre_resolutions_total",
    "Tracks resolved to a genre, by resolution source.",
    ["source"],
)
INFERENCE_FAILURES = Counter(
    "smartsplit_inference_failures_total",
    "Inference calls that raised or returned an unusable payload.",
    ["stage"],
)
PLAYLISTS_CREATED = Counter(
    "smartsplit_playlists_created_total",
    "Playlists created by split apply or genre mix creation.",
)
SPLIT_APPLY_FAILURES = Counter(
    "smartsplit_split_apply_failures_total",
    "Split instructions that failed while being applied.",
)
COVER_FAILURES = Counter(
    "smartsplit_cover_failures_total",
    "Cover image generations or uploads that failed.",
)
RESOLUTION_TIME = Histogram(
    "smartsplit_genre_resolution_seconds",
    "Wall time of one genre resolution pass.",
    buckets=(0.1, 0.5, 1, 2, 5, 10, 30, 60, float("inf")),
)


def record_genre_resolution(source: str, count: int = 1) -> None:
    if count > 0:
        GENRE_RESOLUTIONS.labels(source=source).inc(count)


def record_inference_failure(stage: str) -> None:
    INFERENCE_FAILURES.labels(stage=stage).inc()


def record_playlist_created() -> None:
    PLAYLISTS_CREATED.inc()


def record_split_apply_failure() -> None:
    SPLIT_APPLY_FAILURES.inc()


def record_cover_failure() -> None:
    COVER_FAILURES.inc()


def observe_resolution_time(duration_seconds: Optional[float]) -> None:
    if duration_seconds is not None:
        RESOLUTION_TIME.observe(duration_seconds)


@metrics_blueprint.route("/metrics")
def metrics_endpoint() -> Response:
    return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)
