#!/usr/bin/env python
"""Container healthcheck against the Smart Split readiness endpoint."""

import os
import sys
from urllib import request, error


def readiness_url() -> str:
    host = os.getenv("HEALTHCHECK_HOST", "127.0.0.1")
    port = os.getenv("PORT", "4000")
    path = os.getenv("HEALTHCHECK_PATH", "/readyz")
    return f"http://{host}:{port}{path}"


def main() -> int:
    try:
        with request.urlopen(readiness_url(), timeout=5) as resp:
            return 0 if resp.status == 200 else 1
    except error.URLError:
        # HTTPError (503 while Spotify is unconfigured) is a URLError too
        return 1


if __name__ == "__main__":
    sys.exit(main())
