"""
Pure planning functions over genre-resolved tracks.

Nothing in this module talks to the catalog; :func:`execute_apply` is the only
coroutine and it just walks a list of already planned splits.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from src.domain.catalog.base import PlaylistCatalog
from src.domain.errors import SplitValidationError
from src.domain.genres.normalizer import format_genre_label, normalize_key
from src.models.domain import (
    AppliedSplit,
    ApplyResult,
    GenreSplit,
    MixPlan,
    PlannedSplit,
    SplitPreview,
    Track,
)
from src.models.dto import SplitInstruction
from src.observability.metrics import record_playlist_created, record_split_apply_failure

logger = logging.getLogger(__name__)

DEFAULT_BASE_NAME = "Playlist"
DEFAULT_APPLY_DESCRIPTION = 'Smart split from "{source}" ({genre})'
MIX_DESCRIPTION = 'Generated from "{source}" focusing on {genres}.'


def _base_name(source_name: Optional[str]) -> str:
    trimmed = (source_name or "").strip()
    return trimmed or DEFAULT_BASE_NAME


def unique_uris(uris: Iterable[Optional[str]]) -> List[str]:
    """Drop blanks and duplicates, keeping first-seen order."""
    seen: Dict[str, None] = {}
    for uri in uris:
        if uri and uri not in seen:
            seen[uri] = None
    return list(seen)


def distinct_genres(tracks: Iterable[Track]) -> List[str]:
    labels: Dict[str, None] = {}
    for track in tracks:
        labels.setdefault(format_genre_label(track.genre), None)
    return list(labels)


def group_by_genre(tracks: Sequence[Track]) -> Dict[str, List[Track]]:
    """Group tracks by display genre, ordered by each genre's first appearance."""
    groups: Dict[str, List[Track]] = {}
    for track in tracks:
        groups.setdefault(format_genre_label(track.genre), []).append(track)
    return groups


def suggest_split_name(source_name: Optional[str], genre: Optional[str]) -> str:
    return f"{_base_name(source_name)} • {format_genre_label(genre)}"


def suggest_mix_name(source_name: Optional[str], genres: Sequence[str]) -> str:
    base = _base_name(source_name)
    labels = [format_genre_label(genre) for genre in genres]
    if not labels:
        return base
    if len(labels) == 1:
        return f"{base} • {labels[0]}"
    if len(labels) == 2:
        return f"{base} • {labels[0]} & {labels[1]}"
    if len(labels) == 3:
        return f"{base} • {labels[0]}, {labels[1]} & {labels[2]}"
    return f"{base} • {labels[0]}, {labels[1]} + More"


def filter_by_genres(tracks: Sequence[Track], genres: Sequence[str]) -> List[Track]:
    """Tracks whose genre matches one of ``genres``; an empty selection matches nothing."""
    if not genres:
        return []
    wanted = {normalize_key(genre) for genre in genres}
    return [track for track in tracks if normalize_key(track.genre) in wanted]


def plan_preview(playlist_name: Optional[str], tracks: Sequence[Track]) -> SplitPreview:
    groups = group_by_genre(tracks)
    splits = [
        GenreSplit(genre=genre, tracks=members, suggested_name=suggest_split_name(playlist_name, genre))
        for genre, members in groups.items()
    ]
    return SplitPreview(splits=splits, suggested_mix_name=suggest_mix_name(playlist_name, list(groups)))


def prune_instructions(instructions: Optional[Sequence[SplitInstruction]]) -> List[SplitInstruction]:
    """Reject an empty batch and drop instructions that carry no track URIs."""
    if not instructions:
        raise SplitValidationError("splits must be a non-empty array")
    survivors = [instruction for instruction in instructions if unique_uris(instruction.track_uris)]
    if not survivors:
        raise SplitValidationError("No tracks provided for playlist creation")
    return survivors


def render_description(template: Optional[str], source_name: str, genre_label: str) -> str:
    if not template:
        return DEFAULT_APPLY_DESCRIPTION.format(source=source_name, genre=genre_label)
    return template.replace("{{genre}}", genre_label).replace("{{source}}", source_name)


def plan_apply(
    instructions: Optional[Sequence[SplitInstruction]],
    source_name: str,
    description_template: Optional[str] = None,
) -> List[PlannedSplit]:
    """Turn split instructions into concrete create/append payloads.

    Raises :class:`SplitValidationError` before anything is planned when no
    instruction has tracks to insert.
    """
    planned: List[PlannedSplit] = []
    for instruction in prune_instructions(instructions):
        genre_label = format_genre_label(instruction.genre)
        planned.append(
            PlannedSplit(
                genre=genre_label,
                name=instruction.name,
                description=render_description(description_template, source_name, genre_label),
                is_public=bool(instruction.make_public),
                uris=tuple(unique_uris(instruction.track_uris)),
            )
        )
    return planned


def plan_create_from_genres(
    playlist_name: str,
    tracks: Sequence[Track],
    selected_genres: Sequence[str],
    requested_name: Optional[str] = None,
    make_public: bool = False,
) -> MixPlan:
    """Plan a single playlist holding every track of the selected genres."""
    if not selected_genres:
        raise SplitValidationError("genres must be a non-empty array")

    matching = filter_by_genres(tracks, selected_genres)
    if not matching:
        raise SplitValidationError("No tracks match the selected genres")

    genres = distinct_genres(matching)
    name = (requested_name or "").strip() or suggest_mix_name(playlist_name, genres)
    return MixPlan(
        name=name,
        description=MIX_DESCRIPTION.format(source=playlist_name, genres=", ".join(genres)),
        is_public=bool(make_public),
        genres=genres,
        uris=unique_uris(track.uri for track in matching),
        tracks=matching,
    )


async def execute_apply(
    catalog: PlaylistCatalog,
    owner_id: str,
    planned: Sequence[PlannedSplit],
) -> ApplyResult:
    """Create and fill one playlist per planned split, strictly one after another.

    A failing split is reported in the result and does not undo or stop the
    others; playlists created before the failure are left in place.
    """
    result = ApplyResult()
    for split in planned:
        try:
            created = await catalog.create_playlist(owner_id, split.name, split.description, split.is_public)
            await catalog.add_tracks_to_playlist(created.id, list(split.uris))
        except Exception as exc:
            logger.warning(
                "Applying split '%s' (%s) failed: %s",
                split.name,
                split.genre,
                exc,
                extra={"genre": split.genre},
            )
            record_split_apply_failure()
            result.outcomes.append(AppliedSplit(genre=split.genre, name=split.name, error=str(exc)))
            continue

        record_playlist_created()
        result.outcomes.append(
            AppliedSplit(
                genre=split.genre,
                name=created.name or split.name,
                playlist_id=created.id,
                uri=created.uri,
                track_count=len(split.uris),
            )
        )
    return result


__all__ = [
    "DEFAULT_APPLY_DESCRIPTION",
    "unique_uris",
    "distinct_genres",
    "group_by_genre",
    "suggest_split_name",
    "suggest_mix_name",
    "filter_by_genres",
    "plan_preview",
    "prune_instructions",
    "render_description",
    "plan_apply",
    "plan_create_from_genres",
    "execute_apply",
]
