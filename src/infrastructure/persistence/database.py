"""
Configuration de la base de donnees SQLite.

Ce module fournit :
- Creation d'un engine SQLite utilisable depuis plusieurs threads
- Session factory
- Fonction d'initialisation des tables

L'engine n'est pas un singleton global : il est construit une fois par le
container (ou par les tests) et passe explicitement aux repositories.
"""

from collections.abc import Generator
from pathlib import Path

from loguru import logger
from sqlalchemy import Engine
from sqlmodel import Session, SQLModel, create_engine


def create_db_engine(database_url: str) -> Engine:
    """
    Cree l'engine SQLAlchemy pour l'URL donnee.

    Cree le repertoire parent si l'URL designe un fichier SQLite.
    check_same_thread est desactive : les fusions de bangumis s'executent
    dans des threads de travail.

    Args:
        database_url: URL SQLAlchemy (ex: sqlite:///data/data.db)

    Returns:
        Engine configure
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": 30}
        if database_url.startswith("sqlite:///") and ":memory:" not in database_url:
            db_path = Path(database_url.replace("sqlite:///", "", 1))
            db_path.parent.mkdir(exist_ok=True, parents=True)

    return create_engine(database_url, echo=False, connect_args=connect_args)


def get_session(engine: Engine) -> Generator[Session, None, None]:
    """
    Generateur de session SQLModel.

    Utilisation :
        session = next(get_session(engine))

    Ou avec context manager :
        with Session(engine) as session:
            # operations

    Yields:
        Session SQLModel connectee a l'engine
    """
    with Session(engine) as session:
        yield session


def init_db(engine: Engine) -> Engine:
    """
    Initialise la base de donnees en creant toutes les tables.

    Importe les modeles pour enregistrer leurs metadonnees dans
    SQLModel.metadata, puis cree les tables manquantes.

    Returns:
        L'engine, pour utilisation comme ressource du container
    """
    # Import des modeles pour enregistrer leurs metadonnees
    from src.infrastructure.persistence import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.debug("Base de donnees initialisee", url=str(engine.url))
    return engine
