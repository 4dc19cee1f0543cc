"""
Genre resolution cascade.

Every track passes through the same ordered stages and leaves with exactly
one genre:

1. catalog: first tag of the first artist that has any tags
2. batch inference: one call for all tracks still unresolved
3. per-track inference retry, one track at a time
4. fixed default (``Pop``)

Stages 2 and 3 only run when the inference collaborator is configured.
Inference failures degrade to "unresolved" and never abort the pass; catalog
failures propagate to the caller.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import time
from typing import Dict, Iterable, List, Optional, Sequence

from src.domain.catalog.base import PlaylistCatalog
from src.domain.inference.base import GenreInference
from src.models.domain import Artist, GenreSource, Track
from src.observability.metrics import (
    observe_resolution_time,
    record_genre_resolution,
    record_inference_failure,
)
from src.settings import SPOTIFY_MAX_ARTIST_BATCH

from .normalizer import DEFAULT_GENRE, normalize

logger = logging.getLogger(__name__)


class ResolutionStatus(str, enum.Enum):
    """Per-track position in the cascade."""

    UNRESOLVED = "unresolved"
    CATALOG_CHECKED = "catalog_checked"
    BATCH_CHECKED = "batch_checked"
    RETRY_CHECKED = "retry_checked"
    RESOLVED = "resolved"


class TrackResolution:
    """One track's walk through the cascade; ``history`` lists every status it held."""

    __slots__ = ("track", "status", "history", "genre", "source")

    def __init__(self, track: Track) -> None:
        self.track = track
        self.status = ResolutionStatus.UNRESOLVED
        self.history: List[ResolutionStatus] = [ResolutionStatus.UNRESOLVED]
        self.genre: Optional[str] = None
        self.source: Optional[GenreSource] = None

    @property
    def resolved(self) -> bool:
        return self.status is ResolutionStatus.RESOLVED

    def advance(self, status: ResolutionStatus) -> None:
        if not self.resolved:
            self.status = status
            self.history.append(status)

    def settle(self, genre: str, source: GenreSource) -> None:
        self.genre = genre
        self.source = source
        self.status = ResolutionStatus.RESOLVED
        self.history.append(ResolutionStatus.RESOLVED)


def _normalize_text(raw: object) -> Optional[str]:
    return normalize(raw) if isinstance(raw, str) else None


def _in_status(states: Sequence[TrackResolution], status: ResolutionStatus) -> List[TrackResolution]:
    return [state for state in states if state.status is status]


def unique_artist_ids(tracks: Iterable[Track]) -> List[str]:
    """Artist ids referenced by ``tracks`` in first-seen order, without duplicates."""
    seen: Dict[str, None] = {}
    for track in tracks:
        for artist in track.artists:
            if artist.id and artist.id not in seen:
                seen[artist.id] = None
    return list(seen)


def catalog_genre(track: Track, artists_by_id: Dict[str, Artist]) -> Optional[str]:
    """Normalized first tag of the first artist on ``track`` whose first tag is usable.

    Artists are scanned in credit order and only their first tag is looked at;
    the scan stops at the first match.
    """
    for ref in track.artists:
        artist = artists_by_id.get(ref.id) if ref.id else None
        if artist is None or not artist.genres:
            continue
        genre = normalize(artist.genres[0])
        if genre:
            return genre
    return None


class GenreResolver:
    """Assign a genre and genre source to every track of a playlist."""

    def __init__(
        self,
        catalog: PlaylistCatalog,
        inference: GenreInference,
        artist_batch_size: int = SPOTIFY_MAX_ARTIST_BATCH,
    ) -> None:
        self._catalog = catalog
        self._inference = inference
        self._artist_batch_size = max(1, min(int(artist_batch_size), SPOTIFY_MAX_ARTIST_BATCH))

    async def resolve(self, tracks: Sequence[Track]) -> List[Track]:
        """Return copies of ``tracks`` (same order) with ``genre`` and ``genre_source`` set."""
        if not tracks:
            return []

        started = time.perf_counter()
        states = await self.run_stages(tracks)
        resolved = [state.track.with_genre(state.genre, state.source) for state in states]
        self._record(resolved)
        observe_resolution_time(time.perf_counter() - started)
        return resolved

    async def run_stages(self, tracks: Sequence[Track]) -> List[TrackResolution]:
        """Run every stage and return the per-track states, in input order."""
        states = [TrackResolution(track) for track in tracks]
        await self._catalog_stage(_in_status(states, ResolutionStatus.UNRESOLVED))
        if self._inference.is_configured():
            await self._batch_stage(_in_status(states, ResolutionStatus.CATALOG_CHECKED))
            await self._retry_stage(_in_status(states, ResolutionStatus.BATCH_CHECKED))
        else:
            logger.debug("Genre inference not configured; skipping inference stages")
        self._default_stage([state for state in states if not state.resolved])
        return states

    async def lookup_artists(self, artist_ids: Sequence[str]) -> Dict[str, Artist]:
        """Fetch artists in upstream-sized batches, concurrently, merged by id."""
        if not artist_ids:
            return {}
        size = self._artist_batch_size
        batches = [artist_ids[i:i + size] for i in range(0, len(artist_ids), size)]
        results = await asyncio.gather(*(self._catalog.fetch_artists(batch) for batch in batches))

        artists_by_id: Dict[str, Artist] = {}
        for batch in results:
            for artist in batch:
                if artist is not None and artist.id:
                    artists_by_id[artist.id] = artist
        return artists_by_id

    async def _catalog_stage(self, states: List[TrackResolution]) -> None:
        artists_by_id = await self.lookup_artists(unique_artist_ids(state.track for state in states))
        for state in states:
            genre = catalog_genre(state.track, artists_by_id)
            if genre:
                state.settle(genre, GenreSource.CATALOG)
            else:
                state.advance(ResolutionStatus.CATALOG_CHECKED)

    async def _batch_stage(self, pending: List[TrackResolution]) -> None:
        if not pending:
            return

        try:
            inferred = await self._inference.infer_genres([state.track for state in pending])
        except Exception as exc:
            logger.warning(
                "Batch genre inference failed for %d tracks: %s",
                len(pending),
                exc,
                extra={"stage": "batch", "track_count": len(pending)},
            )
            record_inference_failure("batch")
            inferred = {}
        if not isinstance(inferred, dict):
            logger.warning(
                "Batch genre inference returned %s instead of a mapping; ignoring it",
                type(inferred).__name__,
                extra={"stage": "batch"},
            )
            record_inference_failure("batch")
            inferred = {}

        for state in pending:
            genre = _normalize_text(inferred.get(state.track.id))
            if genre:
                state.settle(genre, GenreSource.INFERRED)
            else:
                state.advance(ResolutionStatus.BATCH_CHECKED)

    async def _retry_stage(self, states: List[TrackResolution]) -> None:
        for state in states:
            try:
                raw = await self._inference.infer_genre(state.track)
            except Exception as exc:
                logger.info(
                    "Genre inference retry failed for track %s: %s",
                    state.track.id,
                    exc,
                    extra={"stage": "retry"},
                )
                record_inference_failure("retry")
                raw = None

            genre = _normalize_text(raw)
            if genre:
                state.settle(genre, GenreSource.INFERRED)
            else:
                state.advance(ResolutionStatus.RETRY_CHECKED)

    @staticmethod
    def _default_stage(states: List[TrackResolution]) -> None:
        for state in states:
            state.settle(DEFAULT_GENRE, GenreSource.FALLBACK)

    @staticmethod
    def _record(tracks: Sequence[Track]) -> None:
        counts: Dict[str, int] = {}
        for track in tracks:
            key = track.genre_source.value if track.genre_source else GenreSource.FALLBACK.value
            counts[key] = counts.get(key, 0) + 1
        for source, count in counts.items():
            record_genre_resolution(source, count)
        logger.info(
            "Resolved genres for %d tracks (%s)",
            len(tracks),
            ", ".join(f"{source}={count}" for source, count in sorted(counts.items())),
            extra={"track_count": len(tracks)},
        )


__all__ = [
    "GenreResolver",
    "ResolutionStatus",
    "TrackResolution",
    "unique_artist_ids",
    "catalog_genre",
]
