# manage.py
import asyncio
import json
import os
import sys

from dotenv import load_dotenv

load_dotenv()

from src.domain.catalog import SpotifyCatalog
from src.domain.inference import OpenAIGenreInference
from src.domain.splits import SmartSplitService
from src.settings import load_app_settings

USAGE = "Usage: python manage.py [preview|resolve] <playlist_id>  (requires SPOTIFY_ACCESS_TOKEN)"


def _build_service(access_token: str) -> SmartSplitService:
    settings = load_app_settings()
    return SmartSplitService(
        SpotifyCatalog(access_token, settings),
        OpenAIGenreInference(settings),
        settings,
    )


def preview(service: SmartSplitService, playlist_id: str) -> dict:
    """Genre splits the API would suggest for the playlist."""
    return asyncio.run(service.preview(playlist_id))


def resolve(service: SmartSplitService, playlist_id: str) -> dict:
    """Playlist tracks with their resolved genre and genre source."""
    return asyncio.run(service.playlist_detail(playlist_id))


COMMANDS = {
    'preview': preview,
    'resolve': resolve,
}


def main(argv=None) -> int:
    argv = sys.argv if argv is None else argv
    if len(argv) < 3:
        print(f"No command provided. {USAGE}")
        return 1
    command, playlist_id = argv[1], argv[2]
    handler = COMMANDS.get(command)
    if handler is None:
        print(f"Unknown command: {command}")
        print(USAGE)
        return 1

    access_token = os.getenv('SPOTIFY_ACCESS_TOKEN')
    if not access_token:
        print("SPOTIFY_ACCESS_TOKEN is not set.")
        return 1

    result = handler(_build_service(access_token), playlist_id)
    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == '__main__':
    sys.exit(main())
