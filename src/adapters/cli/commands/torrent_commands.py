"""
Commande CLI de consultation des releases (torrents).
"""

from typing import Annotated, Optional

import typer
from rich.table import Table

from src.adapters.cli.helpers import console
from src.container import Container


def torrents(
    unrenamed: Annotated[
        bool,
        typer.Option("--unrenamed", help="Releases telechargees mais pas encore renommees"),
    ] = False,
    bangumi_id: Annotated[
        Optional[int],
        typer.Option("--bangumi", "-b", help="Releases d'un bangumi"),
    ] = None,
) -> None:
    """Liste les releases connues."""
    if not unrenamed and bangumi_id is None:
        console.print("[yellow]Precisez --unrenamed ou --bangumi ID.[/yellow]")
        raise typer.Exit(code=1)

    container = Container()
    container.database.init()
    repo = container.torrent_repository()
    items = repo.list_unrenamed() if unrenamed else repo.list_by_bangumi(bangumi_id)
    if not items:
        console.print("[dim]Aucune release.[/dim]")
        return

    table = Table(title=f"Releases ({len(items)})", show_header=True)
    table.add_column("Nom", style="cyan", overflow="fold")
    table.add_column("Bangumi", justify="right")
    table.add_column("Telecharge", justify="center")
    table.add_column("Renomme", justify="center")
    for torrent in items:
        table.add_row(
            torrent.name,
            str(torrent.bangumi_id) if torrent.bangumi_id is not None else "-",
            "oui" if torrent.downloaded else "non",
            "oui" if torrent.renamed else "non",
        )
    console.print(table)
