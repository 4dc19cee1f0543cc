"""
OpenAI-backed genre inference and playlist cover generation.

Transport errors from the OpenAI SDK propagate unchanged and unusable JSON
raises :class:`InferenceResponseError`; the resolver decides how to degrade.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from openai import AsyncOpenAI

from src.domain.errors import InferenceResponseError
from src.models.domain import Track
from src.settings import AppSettings

from .base import GenreInference

logger = logging.getLogger(__name__)

BATCH_TEMPERATURE = 0.2
BATCH_MAX_TOKENS = 400
SINGLE_TEMPERATURE = 0.1
SINGLE_MAX_TOKENS = 200
COVER_TRACK_SAMPLE = 6
# Spotify rejects cover uploads above 256 KB of base64 payload.
MAX_COVER_BASE64_BYTES = 256 * 1024

SYSTEM_PROMPT = (
    "You are a music metadata expert with deep knowledge of Spotify's public genre "
    "taxonomy and historical music context."
)

BATCH_INSTRUCTIONS = """Infer a single, mainstream, widely recognizable genre for every song provided.
- NEVER use placeholders like "Unknown", "None", "Misc", "Other", "N/A" or blank values. Infer the closest real genre.
- Prefer well-known, high-level genres a mainstream listener would expect (e.g. "Pop", "Rock", "Hip Hop", "Jazz").
- For classic tracks use the genre they were known for at their peak popularity.
- Title Case every word and keep it concise (1-3 words).

Return strict JSON with the shape {"items": [{"id": string, "genre": string}, ...]}.
Songs: %s"""

SINGLE_INSTRUCTIONS = """Infer the single best mainstream Spotify genre for the song described below.
- NEVER use placeholders like "Unknown", "None", "Misc", "Other", "N/A" or blank values.
- Respond with strict JSON exactly like {"genre": "Genre Name"} (Title Case, 1-3 words).
Song: %s
Artists: %s
Album: %s"""


def build_batch_prompt(tracks: Sequence[Track]) -> str:
    payload = [
        {
            "id": track.id,
            "title": track.name,
            "artists": track.artist_names,
            "album": track.album.name,
        }
        for track in tracks
    ]
    return BATCH_INSTRUCTIONS % json.dumps(payload, ensure_ascii=False)


def build_single_prompt(track: Track) -> str:
    return SINGLE_INSTRUCTIONS % (track.name, ", ".join(track.artist_names), track.album.name)


def build_cover_prompt(playlist_name: str, genres: Sequence[str], tracks: Sequence[Track]) -> str:
    snippets = "; ".join(
        f"{track.name} by {', '.join(track.artist_names)}" for track in list(tracks)[:COVER_TRACK_SAMPLE]
    )
    return (
        f'Design a modern, text-free Spotify playlist cover for a playlist titled "{playlist_name}" '
        f"featuring the genres {', '.join(genres)}. Capture the shared mood of these songs: {snippets}. "
        "Use vibrant colors, expressive abstract art, and a square 1:1 composition. "
        "No text, no watermark, no words, no logos."
    )


def parse_genre_items(content: Optional[str]) -> Dict[str, str]:
    """Parse the batch answer into ``{track_id: raw_genre}``; malformed items are skipped."""
    if not content or not content.strip():
        return {}
    try:
        parsed = json.loads(content)
    except ValueError as exc:
        raise InferenceResponseError("Genre inference returned malformed JSON", details=str(exc)) from exc
    if not isinstance(parsed, dict):
        raise InferenceResponseError("Genre inference returned an unexpected payload")

    genres: Dict[str, str] = {}
    for item in parsed.get("items") or []:
        if not isinstance(item, dict):
            continue
        track_id = item.get("id")
        genre = item.get("genre")
        if isinstance(track_id, str) and isinstance(genre, str) and genre.strip():
            genres[track_id] = genre.strip()
    return genres


def parse_single_genre(content: Optional[str]) -> Optional[str]:
    """Parse ``{"genre": ...}``, falling back to the raw text stripped of quotes."""
    text = (content or "").strip()
    if not text:
        return None
    try:
        parsed = json.loads(text)
    except ValueError:
        parsed = None
    if isinstance(parsed, dict):
        genre = parsed.get("genre")
        if isinstance(genre, str) and genre.strip():
            return genre.strip()
        return None
    cleaned = text.strip('"').strip()
    return cleaned or None


class OpenAIGenreInference(GenreInference):
    """Genre guesses and cover art from the OpenAI API."""

    def __init__(self, settings: AppSettings, client: Optional[Any] = None):
        self._genre_model = settings.genre_model
        self._image_model = settings.image_model
        self._client = client
        if self._client is None and settings.openai_api_key:
            self._client = AsyncOpenAI(api_key=settings.openai_api_key)
            logger.info("OpenAI client initialized (genre model=%s)", self._genre_model)
        elif self._client is None:
            logger.warning("OPENAI_API_KEY not set. Genre inference and cover generation are disabled.")

    def is_configured(self) -> bool:
        return self._client is not None

    async def _complete(self, prompt: str, *, temperature: float, max_tokens: int, json_mode: bool) -> str:
        kwargs: Dict[str, Any] = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        response = await self._client.chat.completions.create(
            model=self._genre_model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
            **kwargs,
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def infer_genres(self, tracks: Sequence[Track]) -> Dict[str, str]:
        if not tracks or not self.is_configured():
            return {}
        logger.info("Inferring genres for %d tracks", len(tracks), extra={"track_count": len(tracks)})
        content = await self._complete(
            build_batch_prompt(tracks),
            temperature=BATCH_TEMPERATURE,
            max_tokens=BATCH_MAX_TOKENS,
            json_mode=True,
        )
        genres = parse_genre_items(content)
        if len(genres) < len(tracks):
            logger.debug("Batch inference answered for %d of %d tracks", len(genres), len(tracks))
        return genres

    async def infer_genre(self, track: Track) -> Optional[str]:
        if not self.is_configured():
            return None
        content = await self._complete(
            build_single_prompt(track),
            temperature=SINGLE_TEMPERATURE,
            max_tokens=SINGLE_MAX_TOKENS,
            json_mode=False,
        )
        return parse_single_genre(content)

    async def generate_cover(
        self, playlist_name: str, genres: Sequence[str], tracks: Sequence[Track]
    ) -> Optional[str]:
        """Base64 JPEG cover for the playlist, or ``None`` when nothing usable came back."""
        if not self.is_configured():
            return None
        response = await self._client.images.generate(
            model=self._image_model,
            prompt=build_cover_prompt(playlist_name, genres, tracks),
            size="1024x1024",
            n=1,
            output_format="jpeg",
            output_compression=70,
        )
        data: List[Any] = list(getattr(response, "data", None) or [])
        image = data[0].b64_json if data else None
        if not image:
            logger.warning("Cover generation for '%s' returned no image data", playlist_name)
            return None
        if len(image) > MAX_COVER_BASE64_BYTES:
            logger.warning(
                "Generated cover for '%s' is %d bytes, above the upload limit; skipping",
                playlist_name,
                len(image),
            )
            return None
        return image


__all__ = [
    "OpenAIGenreInference",
    "build_batch_prompt",
    "build_single_prompt",
    "build_cover_prompt",
    "parse_genre_items",
    "parse_single_genre",
]
