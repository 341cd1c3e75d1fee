"""
Commandes CLI de gestion des abonnements RSS (add, list, enable, disable, remove).
"""

from typing import Annotated

import typer
from rich.table import Table

from src.adapters.cli.helpers import console
from src.container import Container
from src.core.entities.torrent import RSSItem


feed_app = typer.Typer(
    name="feed",
    help="Gestion des abonnements RSS",
    rich_markup_mode="rich",
)


def _get_repository():
    container = Container()
    container.database.init()
    return container.rss_repository()


@feed_app.command("add")
def feed_add(
    url: Annotated[str, typer.Argument(help="URL du flux RSS")],
    name: Annotated[str, typer.Option("--name", "-n", help="Nom affiche")] = "",
    parser: Annotated[
        str,
        typer.Option("--parser", help="Source de metadonnees (mikan, tmdb)"),
    ] = "mikan",
) -> None:
    """Ajoute (ou met a jour) un abonnement."""
    repo = _get_repository()
    item = repo.save(RSSItem(url=url, name=name, parser=parser))
    console.print(f"[green]Flux {item.id} enregistre:[/green] {item.url}")


@feed_app.command("list")
def feed_list() -> None:
    """Liste les abonnements."""
    repo = _get_repository()
    items = repo.list_all()
    if not items:
        console.print("[yellow]Aucun flux.[/yellow]")
        return

    table = Table(title="Flux RSS", show_header=True)
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Nom", style="cyan")
    table.add_column("URL", overflow="fold")
    table.add_column("Actif", justify="center")
    for item in items:
        table.add_row(
            str(item.id),
            item.name or "-",
            item.url,
            "[green]oui[/green]" if item.enabled else "[red]non[/red]",
        )
    console.print(table)


def _set_enabled(rss_id: int, enabled: bool) -> None:
    repo = _get_repository()
    if not repo.set_enabled(rss_id, enabled):
        console.print(f"[red]Flux {rss_id} introuvable.[/red]")
        raise typer.Exit(code=1)
    state = "active" if enabled else "desactive"
    console.print(f"[green]Flux {rss_id} {state}.[/green]")


@feed_app.command("enable")
def feed_enable(rss_id: Annotated[int, typer.Argument(help="ID du flux")]) -> None:
    """Active un abonnement."""
    _set_enabled(rss_id, True)


@feed_app.command("disable")
def feed_disable(rss_id: Annotated[int, typer.Argument(help="ID du flux")]) -> None:
    """Desactive un abonnement (ignore par refresh)."""
    _set_enabled(rss_id, False)


@feed_app.command("remove")
def feed_remove(rss_id: Annotated[int, typer.Argument(help="ID du flux")]) -> None:
    """Supprime un abonnement."""
    repo = _get_repository()
    if not repo.delete(rss_id):
        console.print(f"[red]Flux {rss_id} introuvable.[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Flux {rss_id} supprime.[/green]")
