"""CodeSource content API client (search endpoints only)."""

from collections.abc import Mapping
from typing import Any

import requests
from loguru import logger

from codesource_search.config import API_BASE_URL, API_TIMEOUT, resolve_api_token
from codesource_search.models.search import ResultItem, ResultKind


class SearchApiError(RuntimeError):
    """A search request failed; ``reason`` is fit for an inline message."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


def _error_reason(response: requests.Response | None, default: str) -> str:
    """Prefer the server's own ``message`` field, like the web client does."""
    if response is None:
        return default
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict) and isinstance(body.get("message"), str) and body["message"]:
        return body["message"]
    return default


def parse_result_item(raw: Any) -> ResultItem:
    """Convert one ``results[]`` element of the search response."""
    if not isinstance(raw, dict):
        msg = f"bad result item: {raw!r}"
        raise SearchApiError(msg)
    return ResultItem(
        id=str(raw.get("id", "")),
        kind=ResultKind.parse(raw.get("type", raw.get("kind"))),
        title=str(raw.get("title", "")),
        excerpt=str(raw.get("excerpt", "")),
    )


class SearchApi:
    """Encapsulated CodeSource search API."""

    def __init__(
        self,
        *,
        base_url: str = API_BASE_URL,
        token: str | None = None,
        timeout: float = API_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.sess = session or requests.Session()
        self.api_token = token if token is not None else resolve_api_token()
        if self.api_token:
            self.sess.headers["Authorization"] = f"Bearer {self.api_token}"

        logger.debug(
            "API ready: base_url {!r}, token {}",
            self.base_url,
            "present" if self.api_token else "absent",
        )

    def call(self, path: str, params: Mapping[str, str] | None = None) -> Any:
        """GET an API path and return the decoded JSON body."""
        logger.debug("Making request: {!r} {}", path, repr(dict(params or {}))[:64])
        try:
            r = self.sess.get(f"{self.base_url}/{path}", params=dict(params or {}), timeout=self.timeout)
        except requests.RequestException as e:
            raise SearchApiError("Search failed: network error") from e

        try:
            r.raise_for_status()
        except requests.HTTPError as e:
            raise SearchApiError(_error_reason(r, f"Search failed ({r.status_code})")) from e

        try:
            return r.json()
        except ValueError as e:
            msg = f"API call returned invalid JSON: {path!r}"
            raise SearchApiError(msg) from e

    def search(self, text: str, filters: Mapping[str, str]) -> tuple[ResultItem, ...]:
        """Run a search; only set facets are sent alongside ``q``."""
        body = self.call("search", {"q": text, **filters})
        if not isinstance(body, dict) or not isinstance(body.get("results", []), list):
            msg = f"bad search response keys: {type(body).__name__}"
            raise SearchApiError(msg)
        return tuple(parse_result_item(raw) for raw in body.get("results", []))

    def trending(self) -> tuple[str, ...]:
        """Fetch trending searches; accepts a bare list or ``{"trending": [...]}``."""
        body = self.call("search/trending")
        if isinstance(body, dict):
            body = body.get("trending", body.get("results"))
        if not isinstance(body, list):
            msg = "bad trending response"
            raise SearchApiError(msg)
        texts: list[str] = []
        for item in body:
            text = item.get("text") if isinstance(item, dict) else item
            if isinstance(text, str) and text.strip():
                texts.append(text)
        return tuple(texts)
