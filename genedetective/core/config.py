import json
from typing import Literal, TypeAlias

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from genedetective import __version__

# Type personnalisé pour les listes configurables depuis l'environnement
ConfigurableList: TypeAlias = str | list[str] | list[AnyHttpUrl]


def parse_list_from_env(value: ConfigurableList, field_name: str = "field") -> list[str]:
    """
    Fonction utilitaire pour parser une liste depuis une variable d'environnement.

    Supporte les formats suivants:
    - Liste Python directe: ['val1', 'val2']
    - Format JSON: '["val1", "val2"]'
    - Format virgules: "val1,val2,val3"
    - Chaîne vide: "" → []

    Args:
        value: La valeur à parser (chaîne ou liste)
        field_name: Nom du champ pour les messages d'erreur

    Returns:
        Liste de chaînes parsée

    Raises:
        ValueError: Si le format n'est pas valide
    """
    if isinstance(value, list):
        return [str(item) for item in value]
    elif isinstance(value, str):
        value = value.strip()
        if value.startswith("[") and value.endswith("]"):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                raise ValueError(f"Format JSON invalide pour {field_name}: {value}")
        elif value:
            return [item.strip() for item in value.split(",") if item.strip()]
        else:
            return []
    raise ValueError(f"Valeur invalide pour {field_name}: {value}")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        extra="ignore",
    )

    PROJECT_NAME: str = "genedetective-identity"
    VERSION: str = __version__
    DESCRIPTION: str = "Authentication, roles and record ownership for GeneDetective"

    # Préfixe commun des routes HTTP
    API_PREFIX: str = "/api"

    # Environnement
    ENVIRONMENT: Literal["development", "staging", "production", "test"] = "development"
    DEBUG: bool = False

    # JWT - secret de signature chargé une seule fois au démarrage
    JWT_SECRET: str = Field(..., min_length=1)
    JWT_ALGORITHM: Literal["HS256", "HS384", "HS512"] = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = Field(default=24, gt=0)

    # Hachage des mots de passe (facteur de travail fixe)
    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=31)

    # Base de données
    # SQLite (aiosqlite) par défaut, PostgreSQL (asyncpg) en production
    SQLALCHEMY_DATABASE_URI: str = "sqlite+aiosqlite:///./data/gene_detective.db"
    SQLALCHEMY_ECHO: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s %(levelname)s [%(name)s] [%(filename)s:%(lineno)d] - %(message)s"

    # CORS
    # Définir dans .env, ex: ALLOWED_ORIGINS='["http://localhost:3000","https://myfrontend.com"]'
    ALLOWED_ORIGINS: ConfigurableList = ["http://localhost:3000"]
    # Définir dans .env, ex: TRUSTED_HOSTS='["localhost","127.0.0.1"]'
    TRUSTED_HOSTS: ConfigurableList = ["localhost", "127.0.0.1"]

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: ConfigurableList) -> list[str]:
        """
        Permet de définir ALLOWED_ORIGINS de plusieurs façons:
        - Chaîne séparée par des virgules: "http://localhost:3000,https://api.exemple.com"
        - Format JSON: '["http://localhost:3000","https://api.exemple.com"]'
        - Liste Python directe (si déjà parsée)
        """
        return parse_list_from_env(v, "ALLOWED_ORIGINS")

    @field_validator("TRUSTED_HOSTS", mode="before")
    @classmethod
    def assemble_trusted_hosts(cls, v: ConfigurableList) -> list[str]:
        """Parse TRUSTED_HOSTS depuis une variable d'environnement."""
        return parse_list_from_env(v, "TRUSTED_HOSTS")

    @property
    def is_sqlite(self) -> bool:
        return self.SQLALCHEMY_DATABASE_URI.startswith("sqlite")


# Instance unique des paramètres chargée depuis .env
settings = Settings()
