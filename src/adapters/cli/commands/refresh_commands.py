"""
Commandes CLI de rafraichissement des flux (refresh, discover).
"""

import asyncio
from typing import Annotated, Optional

import typer
from rich.markup import escape
from rich.status import Status
from rich.table import Table

from src.adapters.cli.helpers import close_clients, console, suppress_loguru, with_container
from src.core.entities.torrent import Torrent
from src.services.refresh import RefreshResult


def refresh(
    url: Annotated[
        Optional[str],
        typer.Argument(help="URL du flux (par defaut : tous les flux actifs)"),
    ] = None,
) -> None:
    """Rafraichit un flux, ou tous les flux actifs: decouverte puis mise en file."""
    asyncio.run(_refresh_async(url))


@with_container()
async def _refresh_async(container, url: Optional[str]) -> None:
    """Implementation async de la commande refresh."""
    service = container.refresh_service()
    try:
        with suppress_loguru(), Status("[cyan]Rafraichissement des flux...", console=console):
            if url:
                results = {url: await service.refresh_feed(url)}
            else:
                results = await service.refresh_all()
    finally:
        await close_clients(container)

    if not results:
        console.print("[yellow]Aucun flux actif.[/yellow]")
        console.print("[dim]Ajoutez un flux avec: bangumi feed add URL[/dim]")
        return

    _display_results(results)
    _display_queued(container.download_queue().drain())


def _display_results(results: dict[str, RefreshResult]) -> None:
    table = Table(title="Rafraichissement", show_header=True)
    table.add_column("Flux", style="cyan", overflow="fold")
    table.add_column("En file", justify="right", style="green")
    table.add_column("Ignores", justify="right")
    table.add_column("Non reconnus", justify="right", style="yellow")
    table.add_column("Erreurs", justify="right", style="red")

    for feed_url, result in results.items():
        table.add_row(
            feed_url,
            str(result.enqueued),
            str(result.skipped),
            str(result.unmatched),
            str(result.failed),
        )
    console.print(table)


def _display_queued(torrents: list[Torrent]) -> None:
    if not torrents:
        console.print("\n[dim]Aucune release a telecharger.[/dim]")
        return

    table = Table(title=f"Releases a telecharger ({len(torrents)})", show_header=True)
    table.add_column("Release", style="cyan", overflow="fold")
    table.add_column("Lien", style="dim", overflow="fold")
    for torrent in torrents:
        table.add_row(escape(torrent.name), torrent.url)
    console.print(table)
    console.print(
        "[dim]Aucun client de telechargement n'est branche sur la CLI : ces releases "
        "restent enregistrees en base et reviennent au prochain rafraichissement "
        "tant qu'elles ne sont pas marquees telechargees.[/dim]"
    )


def discover(
    url: Annotated[str, typer.Argument(help="URL du flux RSS")],
) -> None:
    """Recherche les nouveaux bangumis d'un flux (sans mise en file)."""
    asyncio.run(_discover_async(url))


@with_container()
async def _discover_async(container, url: str) -> None:
    """Implementation async de la commande discover."""
    service = container.refresh_service()
    try:
        with suppress_loguru(), Status("[cyan]Resolution des releases inconnues...", console=console):
            result = await service.find_new_bangumi(url)
            await service.wait_pending()
    finally:
        await close_clients(container)

    console.print("\n[bold]Resume de la decouverte:[/bold]")
    console.print(f"  [green]{result.dispatched}[/green] titre(s) resolu(s)")
    console.print(f"  {result.known} release(s) deja connue(s)")
    if result.filtered:
        console.print(f"  [dim]{result.filtered} release(s) filtree(s)[/dim]")
    if result.unparsed:
        console.print(f"  [yellow]{result.unparsed}[/yellow] nom(s) non parsable(s)")
