"""Command-line interface for the Opportunity Scanner service."""

import asyncio
import json
import logging
from typing import Any, Dict, List

import typer
from typing_extensions import Annotated

from opportunity_scanner.config.settings import settings
from opportunity_scanner.core.exceptions import OpportunityScannerError
from opportunity_scanner.core.pipeline import build_pipeline
from opportunity_scanner.core.result_store import ResultStore
from opportunity_scanner.utils.db_session import get_async_engine
from opportunity_scanner.utils.logging_utils import setup_logging

app = typer.Typer(help="Opportunity Scanner - find business ideas in subreddit discussions")

logger = logging.getLogger(__name__)


async def _open_store() -> ResultStore:
    store = ResultStore(get_async_engine())
    await store.initialize()
    return store


async def run_search_once() -> List[Dict[str, Any]]:
    """Run one search and return the JSON-ready results."""
    pipeline = build_pipeline(await _open_store())
    try:
        results = await pipeline.run_search()
    finally:
        await pipeline.close()
    return [r.model_dump(mode="json", by_alias=True, exclude_none=True) for r in results]


async def load_history() -> List[Dict[str, Any]]:
    """Return every stored record as JSON-ready dicts."""
    store = await _open_store()
    try:
        records = await store.list_all()
    finally:
        await store.close()
    return [r.model_dump(mode="json", by_alias=True, exclude_none=True) for r in records]


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="Interface to bind")] = settings.API_HOST,
    port: Annotated[int, typer.Option(help="Port to listen on")] = settings.API_PORT,
) -> None:
    """Start the HTTP API."""
    import uvicorn

    setup_logging()
    logger.info(f"Server listening on {host}:{port}")
    uvicorn.run("opportunity_scanner.api.main:app", host=host, port=port)


@app.command()
def search() -> None:
    """Run a single search and print the results as JSON."""
    setup_logging()
    try:
        results = asyncio.run(run_search_once())
    except OpportunityScannerError as e:
        typer.echo(f"Search failed: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(results, indent=2))


@app.command()
def history() -> None:
    """Print every stored score record as JSON, newest first."""
    setup_logging()
    try:
        records = asyncio.run(load_history())
    except OpportunityScannerError as e:
        typer.echo(f"Could not read history: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(records, indent=2))


if __name__ == "__main__":
    app()
