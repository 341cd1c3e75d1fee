"""
Point d'entrée CLI.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

from typing import Annotated

import typer
from loguru import logger

from .adapters.cli.commands import (
    bangumi_app,
    discover,
    feed_app,
    refresh,
    torrents,
)
from .config import Settings
from .container import Container
from .logging_config import configure_logging, console_level

__version__ = "0.1.0"

app = typer.Typer(
    name="bangumi",
    help="Suivi des flux RSS de releases d'anime",
)
container = Container()


def _setup_logging(verbose: int = 0, quiet: bool = False) -> None:
    settings = container.config()
    configure_logging(
        log_level=console_level(settings.log_level, verbose, quiet),
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Augmenter la verbosite (-v, -vv, -vvv)"
        ),
    ] = 0,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Mode silencieux (erreurs uniquement)"),
    ] = False,
) -> None:
    """Bangumi RSS - rattachement des releases et decouverte des nouveaux bangumis."""
    # Sans option, le logging installe par main() reste en place
    if verbose or quiet:
        _setup_logging(verbose, quiet)


app.command()(refresh)
app.command()(discover)
app.command()(torrents)

# Sous-commandes
app.add_typer(bangumi_app, name="bangumi")
app.add_typer(feed_app, name="feed")


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    typer.echo(f"Base de données : {config.database_url}")
    typer.echo(f"Mikan : {config.mikan_base_url}")
    typer.echo(f"API TMDB : {'activée' if config.tmdb_enabled else 'désactivée'} ({config.tmdb_language})")
    typer.echo(f"Résolutions simultanées : {config.discovery_workers}")
    typer.echo(f"Exclusions globales : {', '.join(config.global_exclude) or '-'}")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"bangumi-rss v{__version__}")


def main() -> None:
    """Point d'entrée de l'application."""
    _setup_logging()

    # Crée les tables si nécessaire
    container.database.init()

    logger.info("Démarrage", version=__version__)
    app()


if __name__ == "__main__":
    main()
