"""Configuration constants for codesource-search."""

import os
from pathlib import Path

# Remote content API. Overridable for staging / local servers.
API_BASE_URL: str = os.environ.get("CODESOURCE_API_URL", "https://api.codesource.com/v1")

# Seconds before a search request is abandoned by the transport.
API_TIMEOUT: float = 10.0

# Optional API token. First file found is used; the environment variable wins.
API_TOKEN_ENV: str = "CODESOURCE_API_TOKEN"
API_TOKEN_FILES: list[Path] = [
    Path("~/.config/codesource-token.txt").expanduser(),
    Path("~/.config/secret/codesource-token.txt").expanduser(),
]

# Directory with local data (search history). First directory which is found is used.
DATA_DIRECTORIES: list[Path] = [
    Path("~/.local/share/codesource-search").expanduser(),
    Path("~/.codesource-search").expanduser(),
    Path("~/.config/codesource-search").expanduser(),
]

HISTORY_FILENAME: str = "recent-searches.json"
HISTORY_CAPACITY: int = 5

# Keystrokes must be stable this long (seconds) before anything is computed.
DEBOUNCE_DELAY: float = 0.3

# Shorter settled queries never reach the network.
MIN_QUERY_LENGTH: int = 2

# Shorter settled queries get no heuristic suggestions.
MIN_SUGGEST_LENGTH: int = 3

# Served when the trending endpoint is unavailable.
TRENDING_SEARCHES: list[str] = [
    "React performance optimization",
    "Modern JavaScript features",
    "GraphQL vs REST API",
    "TypeScript best practices",
    "Docker for developers",
]


def resolve_data_directory() -> Path:
    """Return the first existing data directory, or the preferred default."""
    for candidate in DATA_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return DATA_DIRECTORIES[0]


def resolve_api_token() -> str | None:
    """Return the API token from the environment or the first token file found."""
    env_token = os.environ.get(API_TOKEN_ENV, "").strip()
    if env_token:
        return env_token
    for token_path in API_TOKEN_FILES:
        try:
            token = token_path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            continue
        if token:
            return token
    return None
