"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe BANGUMI_,
et peut optionnellement être fournie via un fichier .env.

La clé API TMDB est optionnelle - sans elle, seule la résolution via Mikan est active.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Trouver le fichier .env à la racine du projet (parent de src/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe BANGUMI_.
    Exemple : BANGUMI_LOG_LEVEL=DEBUG

    Les listes (global_exclude) s'écrivent en JSON dans l'environnement :
    BANGUMI_GLOBAL_EXCLUDE='["720", "合集"]'
    """

    model_config = SettingsConfigDict(
        env_prefix="BANGUMI_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Base de données
    database_url: str = Field(default="sqlite:///data/data.db")

    # Catalogues externes
    tmdb_api_key: Optional[str] = Field(default=None)
    tmdb_language: str = Field(default="zh-CN")
    mikan_base_url: str = Field(default="https://mikanani.me")
    request_timeout: float = Field(default=30.0, gt=0)
    cache_dir: Path = Field(default=Path(".cache/api"))

    # Découverte des nouveaux bangumis
    discovery_workers: int = Field(default=4, ge=1)

    # Filtre de base (regex, insensible à la casse)
    global_exclude: list[str] = Field(default_factory=lambda: ["720", r"\d+-\d+"])

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/bangumi.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("cache_dir", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @property
    def tmdb_enabled(self) -> bool:
        """Vérifie si l'API TMDB est configurée."""
        return bool(self.tmdb_api_key)
