# noqa: D104 - package initialization
from .logging import configure_structured_logging  # noqa: F401
from .metrics import (  # noqa: F401
    metrics_blueprint,
    record_cover_failure,
    record_genre_resolution,
    record_inference_failure,
    record_playlist_created,
    record_split_apply_failure,
)
from .tracing import init_tracing  # noqa: F401
