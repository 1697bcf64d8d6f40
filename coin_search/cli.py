from __future__ import annotations

import asyncio
import logging
import sys
from typing import List, Optional, Tuple

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from coin_search.config import AppConfig
from coin_search.core.errors import CoinSearchError
from coin_search.core.types import CoinResult
from coin_search.infra.http.client import HttpClient
from coin_search.modules.coin_search.rows import build_rows
from coin_search.modules.coin_search.service import CoinSearchService
from coin_search.services.config_store import ConfigStore
from coin_search.settings import AppSettings

app = typer.Typer(help="Coin Search CLI")
console = Console()


def _store() -> ConfigStore:
    settings = AppSettings()
    return ConfigStore(config_path=settings.config_file)


def _load_config() -> AppConfig:
    return _store().load()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def render_results(results: List[CoinResult], title: str = "Coins") -> Table:
    table = Table(title=title)
    table.add_column("Rank", justify="right")
    table.add_column("Symbol")
    table.add_column("Name")
    table.add_column("ID")
    for row in build_rows(results):
        table.add_row(row.rank_label, row.symbol, row.name, row.id)
    return table


async def _run_search(
    config: AppConfig, text: str
) -> Tuple[List[CoinResult], Optional[CoinSearchError]]:
    async with HttpClient(
        timeout_seconds=config.request_timeout_seconds,
        user_agent=config.user_agent,
    ) as client:
        service = CoinSearchService(config=config, client=client)
        async with service.create_pipeline() as pipeline:
            pipeline.set_query_text(text)
            await pipeline.wait_idle()
            return pipeline.results, pipeline.last_error


async def _run_interactive(config: AppConfig) -> None:
    loop = asyncio.get_running_loop()
    async with HttpClient(
        timeout_seconds=config.request_timeout_seconds,
        user_agent=config.user_agent,
    ) as client:
        service = CoinSearchService(config=config, client=client)
        async with service.create_pipeline() as pipeline:

            def on_results(results: List[CoinResult]) -> None:
                console.print(render_results(results, title=f"Coins: {pipeline.query!r}"))
                if pipeline.last_error is not None:
                    console.print(f"[yellow]Search failed:[/yellow] {pipeline.last_error}")

            pipeline.subscribe_results(on_results)
            while True:
                line = await loop.run_in_executor(None, sys.stdin.readline)
                if not line:
                    break
                pipeline.set_query_text(line.rstrip("\r\n"))
            await pipeline.wait_idle()


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None, help="Logging level, default from settings."
    ),
) -> None:
    settings = AppSettings()
    _configure_logging(log_level or settings.log_level)


@app.command("init-config")
def init_config() -> None:
    store = _store()
    config = store.load()
    store.save(config)
    console.print(f"[green]Config initialized:[/green] {store.config_path.resolve()}")


@app.command("search")
def search(
    text: str = typer.Argument(..., help="Search text, sent verbatim."),
    debounce: Optional[float] = typer.Option(
        None, min=0.0, help="Override debounce window in seconds."
    ),
) -> None:
    config = _load_config()
    if debounce is not None:
        config.search.debounce_seconds = debounce
    results, error = asyncio.run(_run_search(config, text))
    if error is not None:
        console.print(f"[yellow]Search failed:[/yellow] {error}")
    console.print(render_results(results, title=f"Coins: {text!r}"))


@app.command("interactive")
def interactive() -> None:
    """Treat each stdin line as the new search text."""
    config = _load_config()
    asyncio.run(_run_interactive(config))


if __name__ == "__main__":
    app()
