"""Request-scoped facade tying the catalog, the resolver and the planner together."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from src.domain.catalog.base import PlaylistCatalog
from src.domain.errors import SplitValidationError
from src.domain.genres.resolver import GenreResolver
from src.domain.inference.base import GenreInference
from src.models.domain import PlaylistDetail, PlaylistSummary, Track, UserProfile
from src.models.dto import SplitInstruction
from src.observability.metrics import record_cover_failure, record_playlist_created
from src.settings import AppSettings

from . import planner

logger = logging.getLogger(__name__)


class SmartSplitService:
    """Smart split operations for one authenticated user."""

    def __init__(self, catalog: PlaylistCatalog, inference: GenreInference, settings: AppSettings):
        self.catalog = catalog
        self.inference = inference
        self.resolver = GenreResolver(catalog, inference, artist_batch_size=settings.artist_batch_size)

    async def _resolved_playlist(self, playlist_id: str) -> PlaylistDetail:
        detail = await self.catalog.fetch_playlist(playlist_id)
        tracks = await self.resolver.resolve(detail.tracks)
        return PlaylistDetail(playlist=detail.playlist, tracks=tuple(tracks))

    @staticmethod
    def _track_count(detail: PlaylistDetail) -> int:
        return detail.playlist.track_total or len(detail.tracks)

    async def list_playlists(self) -> List[PlaylistSummary]:
        return await self.catalog.fetch_user_playlists()

    async def current_user(self) -> UserProfile:
        return await self.catalog.current_user()

    async def playlist_detail(self, playlist_id: str) -> Dict[str, Any]:
        detail = await self._resolved_playlist(playlist_id)
        payload = detail.playlist.to_dict()
        payload["trackCount"] = self._track_count(detail)
        payload["tracks"] = [track.to_dict() for track in detail.tracks]
        return payload

    async def preview(self, playlist_id: str) -> Dict[str, Any]:
        detail = await self._resolved_playlist(playlist_id)
        preview = planner.plan_preview(detail.playlist.name, detail.tracks)
        return {
            "playlist": {
                "id": detail.playlist.id,
                "name": detail.playlist.name,
                "description": detail.playlist.description,
                "trackCount": self._track_count(detail),
                "suggestedMixName": preview.suggested_mix_name,
            },
            "splits": [split.to_dict() for split in preview.splits],
        }

    async def filter(self, playlist_id: str, genres: Sequence[str]) -> Dict[str, Any]:
        if not genres:
            raise SplitValidationError("genres must be a non-empty array")
        detail = await self._resolved_playlist(playlist_id)
        matching = planner.filter_by_genres(detail.tracks, genres)
        labels = planner.distinct_genres(matching)
        return {
            "playlist": {
                "id": detail.playlist.id,
                "name": detail.playlist.name,
                "description": detail.playlist.description,
            },
            "genres": labels,
            "trackCount": len(matching),
            "suggestedName": planner.suggest_mix_name(detail.playlist.name, labels),
            "tracks": [track.to_dict() for track in matching],
        }

    async def apply(
        self,
        playlist_id: str,
        instructions: Sequence[SplitInstruction],
        description_template: Optional[str] = None,
    ) -> Dict[str, Any]:
        # Reject unusable batches before touching Spotify.
        planner.prune_instructions(instructions)

        detail = await self.catalog.fetch_playlist(playlist_id)
        user = await self.catalog.current_user()
        planned = planner.plan_apply(instructions, detail.playlist.name, description_template)
        result = await planner.execute_apply(self.catalog, user.id, planned)
        logger.info(
            "Applied smart split of playlist %s: %d created, %d failed",
            playlist_id,
            len(result.created),
            len(result.failed),
            extra={"playlist_id": playlist_id},
        )
        return result.to_dict()

    async def create_from_genres(
        self,
        playlist_id: str,
        genres: Sequence[str],
        name: Optional[str] = None,
        make_public: bool = False,
    ) -> Dict[str, Any]:
        if not genres:
            raise SplitValidationError("genres must be a non-empty array")

        detail = await self._resolved_playlist(playlist_id)
        plan = planner.plan_create_from_genres(
            detail.playlist.name,
            detail.tracks,
            genres,
            requested_name=name,
            make_public=make_public,
        )
        user = await self.catalog.current_user()
        created = await self.catalog.create_playlist(user.id, plan.name, plan.description, plan.is_public)
        await self.catalog.add_tracks_to_playlist(created.id, plan.uris)
        record_playlist_created()

        cover_set = await self._set_cover(created.id, plan.name, plan.genres, plan.tracks)
        return {
            "playlist": {
                "id": created.id,
                "name": created.name,
                "genres": plan.genres,
                "trackCount": len(plan.uris),
                "uri": created.uri,
                "isPublic": bool(created.is_public if created.is_public is not None else plan.is_public),
                "coverImageSet": cover_set,
            }
        }

    async def _set_cover(self, playlist_id: str, name: str, genres: List[str], tracks: Sequence[Track]) -> bool:
        """Generate and upload a cover; any failure only means the cover stays unset."""
        if not self.inference.is_configured():
            return False
        try:
            image = await self.inference.generate_cover(name, genres, tracks)
            if not image:
                return False
            await self.catalog.set_playlist_cover_image(playlist_id, image)
        except Exception as exc:
            logger.warning(
                "Failed to set cover image for playlist %s: %s",
                playlist_id,
                exc,
                extra={"playlist_id": playlist_id},
            )
            record_cover_failure()
            return False
        return True


__all__ = ["SmartSplitService"]
