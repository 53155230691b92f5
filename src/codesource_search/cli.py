"""CLI for the CodeSource search box engine (suggest, search, history, trending)."""

import asyncio
import json
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger

from codesource_search.api import SearchApi, SearchApiError
from codesource_search.config import (
    API_BASE_URL,
    DEBOUNCE_DELAY,
    HISTORY_FILENAME,
    TRENDING_SEARCHES,
    resolve_data_directory,
)
from codesource_search.core.composite import CompositeList
from codesource_search.core.history import HistoryStore
from codesource_search.core.navigation import Key
from codesource_search.core.session import SearchSession
from codesource_search.core.suggest.heuristics import OPERATOR_PATTERNS, generate_suggestions
from codesource_search.logging_config import configure_logging
from codesource_search.models.search import NavigationRequest
from codesource_search.protocols import SearchApiProtocol

app = typer.Typer(help="CodeSource search: suggestions, remote results and recent searches.")

DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", "-d", help="Directory holding the search history"),
]
JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors"),
) -> None:
    configure_logging(verbose=verbose, quiet=quiet)


def _history_store(data_dir: Path | None) -> HistoryStore:
    directory = data_dir or resolve_data_directory()
    store = HistoryStore(directory / HISTORY_FILENAME)
    store.load()
    return store


def _load_trending(api: SearchApiProtocol) -> tuple[str, ...]:
    """Served trending searches, or the built-in list if the API cannot provide them."""
    try:
        served = api.trending()
    except SearchApiError as e:
        logger.warning("Trending searches unavailable ({}), using defaults", e.reason)
        return tuple(TRENDING_SEARCHES)
    return served or tuple(TRENDING_SEARCHES)


def _composite_as_json(composite: CompositeList, active_index: int) -> list[dict[str, Any]]:
    return [
        {
            "index": item.index,
            "section": item.section.value,
            "label": item.label,
            "query": item.query,
            "detail": item.detail,
            "active": item.index == active_index,
        }
        for item in composite
    ]


def _echo_composite(session: SearchSession) -> None:
    active = session.navigation.active_index
    for section, items in session.composite.sections():
        typer.echo(f"{section.title}:")
        for item in items:
            marker = ">" if item.index == active else " "
            typer.echo(f" {marker}[{item.index}] {item.icon} {item.label}")
            if item.detail:
                typer.echo(f"        {item.detail}")
        typer.echo()
    if session.status_message:
        typer.echo(session.status_message)
    if not session.text:
        typer.echo("Search tips:")
        for op in OPERATOR_PATTERNS[:3]:
            typer.echo(f"  {op.pattern:<24} {op.description}")


@app.command()
def suggest(
    text: str = typer.Argument(..., help="Partial query text"),
    output_json: JsonOption = False,
) -> None:
    """Show heuristic suggestions for a partial query (no network)."""
    suggestions = generate_suggestions(text)
    if output_json:
        data = [
            {"kind": s.kind.value, "label": s.label, "query": s.executable_query, "icon": s.icon}
            for s in suggestions
        ]
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return
    if not suggestions:
        typer.echo("No suggestions.")
        return
    for s in suggestions:
        typer.echo(f"  {s.icon} {s.label}  ->  {s.executable_query}")


async def run_search_session(
    session: SearchSession,
    text: str,
    *,
    type_interval: float = 0.0,
    pick: int | None = None,
    execute: bool = False,
) -> NavigationRequest | None:
    """Type ``text`` into the session, wait for results, optionally execute.

    With a positive ``type_interval`` the text is typed one character at a
    time, so only the final settled value reaches the network.
    """
    session.focus()
    if type_interval > 0:
        for end in range(1, len(text) + 1):
            session.type_text(text[:end])
            await asyncio.sleep(type_interval)
    else:
        session.type_text(text)
    await session.idle()

    if pick is not None:
        session.hover(pick)
    if execute or pick is not None:
        return session.key(Key.ENTER)
    return None


@app.command()
def search(
    text: str = typer.Argument(..., help="Query text"),
    content_type: Annotated[
        str | None, typer.Option("--content-type", "-t", help="articles, tutorials, ...")
    ] = None,
    language: Annotated[str | None, typer.Option("--language", "-l", help="Language id")] = None,
    date_range: Annotated[
        str | None, typer.Option("--date-range", help="last_week, last_month, last_year, all_time")
    ] = None,
    level: Annotated[
        str | None, typer.Option("--level", help="beginner, intermediate, advanced")
    ] = None,
    pick: Annotated[
        int | None, typer.Option("--pick", "-p", help="Execute the composite item at this index")
    ] = None,
    execute: bool = typer.Option(False, "--execute", "-x", help="Execute the typed text"),
    type_interval: float = typer.Option(
        0.0, "--type-interval", help="Seconds between simulated keystrokes"
    ),
    api_url: Annotated[str, typer.Option("--api-url", help="Content API base URL")] = API_BASE_URL,
    data_dir: DataDirOption = None,
    output_json: JsonOption = False,
) -> None:
    """Run the search box against the remote API and show the composite list."""
    api = SearchApi(base_url=api_url)
    history = _history_store(data_dir)
    session = SearchSession(api, history, trending=_load_trending(api), delay=DEBOUNCE_DELAY)
    session.set_filters(
        {"contentType": content_type, "language": language, "dateRange": date_range, "level": level}
    )

    try:
        request = asyncio.run(
            run_search_session(session, text, type_interval=type_interval, pick=pick, execute=execute)
        )
    finally:
        session.close()

    if output_json:
        data: dict[str, Any] = {
            "query": text,
            "filters": dict(session.filters.snapshot()),
            "status": session.outcome.status.value,
            "message": session.status_message,
            "requests": session.remote.dispatched,
            "items": _composite_as_json(session.composite, session.navigation.active_index),
            "navigate": None,
        }
        if request is not None:
            data["navigate"] = {"text": request.text, "url": request.url}
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    if request is not None:
        typer.echo(f"Navigate to {request.url}")
        return
    _echo_composite(session)


@app.command()
def history(
    clear: bool = typer.Option(False, "--clear", help="Forget all recent searches"),
    data_dir: DataDirOption = None,
    output_json: JsonOption = False,
) -> None:
    """List (or clear) recent searches."""
    store = _history_store(data_dir)
    if clear:
        store.clear()
        typer.echo("Search history cleared.")
        return

    if output_json:
        data = [{"text": e.text, "timestamp": e.executed_at.isoformat()} for e in store.entries]
        typer.echo(json.dumps(data, indent=2))
        return
    if not store.entries:
        typer.echo("No recent searches.")
        return
    for entry in store.entries:
        typer.echo(f"  {entry.executed_at:%Y-%m-%d %H:%M}  {entry.text}")


@app.command()
def trending(
    api_url: Annotated[str, typer.Option("--api-url", help="Content API base URL")] = API_BASE_URL,
    output_json: JsonOption = False,
) -> None:
    """Show trending searches (served, or the built-in list)."""
    texts = _load_trending(SearchApi(base_url=api_url))
    if output_json:
        typer.echo(json.dumps(list(texts), indent=2))
        return
    for text in texts:
        typer.echo(f"  {text}")
