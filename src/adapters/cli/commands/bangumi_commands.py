"""
Commandes CLI de consultation des bangumis (list, show, delete).
"""

from typing import Annotated

import typer
from rich.panel import Panel
from rich.table import Table

from src.adapters.cli.helpers import console
from src.container import Container


bangumi_app = typer.Typer(
    name="bangumi",
    help="Consultation des bangumis connus",
    rich_markup_mode="rich",
)


def _get_repository():
    container = Container()
    container.database.init()
    return container.bangumi_repository()


@bangumi_app.command("list")
def bangumi_list(
    all_: Annotated[
        bool,
        typer.Option("--all", "-a", help="Inclure les bangumis supprimes"),
    ] = False,
) -> None:
    """Liste les bangumis."""
    repo = _get_repository()
    bangumis = repo.list_all(include_deleted=all_)
    if not bangumis:
        console.print("[yellow]Aucun bangumi.[/yellow]")
        return

    table = Table(title=f"Bangumis ({len(bangumis)})", show_header=True)
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Titre", style="cyan")
    table.add_column("Saison", justify="right")
    table.add_column("Mikan", justify="right")
    table.add_column("TMDB", justify="right")
    table.add_column("Releases", justify="right")

    for bangumi in bangumis:
        title = bangumi.official_title
        if bangumi.deleted:
            title = f"[strike]{title}[/strike]"
        table.add_row(
            str(bangumi.id),
            title,
            str(bangumi.season),
            str(bangumi.mikan_id) if bangumi.mikan_id is not None else "-",
            str(bangumi.tmdb_id) if bangumi.tmdb_id is not None else "-",
            str(len(bangumi.episode_metadata)),
        )
    console.print(table)


@bangumi_app.command("show")
def bangumi_show(
    bangumi_id: Annotated[int, typer.Argument(help="ID du bangumi")],
) -> None:
    """Affiche un bangumi, ses fiches externes et ses releases connues."""
    repo = _get_repository()
    bangumi = repo.get_with_details(bangumi_id)
    if bangumi is None:
        console.print(f"[red]Bangumi {bangumi_id} introuvable.[/red]")
        raise typer.Exit(code=1)

    lines = [
        f"[bold]{bangumi.official_title}[/bold] ({bangumi.year or '?'}) - saison {bangumi.season}",
        f"Flux: {bangumi.rss_link or '-'}",
    ]
    if bangumi.mikan_item is not None:
        lines.append(f"Mikan: {bangumi.mikan_item.id} - {bangumi.mikan_item.official_title}")
    if bangumi.tmdb_item is not None:
        tmdb = bangumi.tmdb_item
        lines.append(
            f"TMDB: {tmdb.id} - {tmdb.title} ({tmdb.original_title}), "
            f"{tmdb.episode_count} episodes, note {tmdb.vote_average}"
        )
    if bangumi.include_filter or bangumi.exclude_filter:
        lines.append(
            f"Filtres: inclure [{bangumi.include_filter}] exclure [{bangumi.exclude_filter}]"
        )
    if bangumi.deleted:
        lines.append("[red]Supprime[/red]")
    console.print(Panel("\n".join(lines), title=f"Bangumi {bangumi.id}"))

    if bangumi.episode_metadata:
        table = Table(show_header=True)
        table.add_column("Titre", style="cyan")
        table.add_column("Groupe")
        table.add_column("Resolution")
        table.add_column("Sous-titres")
        for meta in bangumi.episode_metadata:
            table.add_row(
                meta.title,
                meta.group,
                meta.resolution,
                " ".join(p for p in (meta.sub, meta.sub_type) if p),
            )
        console.print(table)


@bangumi_app.command("delete")
def bangumi_delete(
    bangumi_id: Annotated[int, typer.Argument(help="ID du bangumi")],
) -> None:
    """Supprime (logiquement) un bangumi : ses releases ne sont plus mises en file."""
    repo = _get_repository()
    if not repo.soft_delete(bangumi_id):
        console.print(f"[red]Bangumi {bangumi_id} introuvable.[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Bangumi {bangumi_id} supprime.[/green]")
