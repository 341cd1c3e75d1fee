"""
Configuration du logging de l'application via loguru.

Deux sorties :
- stderr : colorée, niveau réglable depuis la CLI (-v / -q)
- fichier : JSON avec rotation, toujours en DEBUG
"""

import sys
from pathlib import Path

from loguru import logger

# -v, -vv, -vvv
_VERBOSE_LEVELS = ("INFO", "DEBUG", "TRACE")


def console_level(base_level: str, verbose: int = 0, quiet: bool = False) -> str:
    """Niveau de la sortie console selon les options de verbosité.

    >>> console_level("WARNING", verbose=2)
    'DEBUG'
    """
    if quiet:
        return "ERROR"
    if verbose <= 0:
        return base_level.upper()
    return _VERBOSE_LEVELS[min(verbose, len(_VERBOSE_LEVELS)) - 1]


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/bangumi.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
) -> None:
    """Installe les handlers loguru (remplace ceux déjà présents).

    Args :
        log_level : Niveau minimum de la sortie console
        log_file : Fichier de log JSON
        rotation_size : Taille avant rotation (ex: "10 MB")
        retention_count : Nombre de fichiers conservés

    Les résolutions tournent dans des threads de travail : le handler
    fichier passe par une file (enqueue=True).
    """
    logger.remove()

    logger.add(
        sys.stderr,
        level=log_level,
        format=(
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level> <dim>{extra}</dim>"
        ),
        colorize=True,
    )

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,
    )

    logger.debug("Logging configuré", log_file=str(log_file), console=log_level)
