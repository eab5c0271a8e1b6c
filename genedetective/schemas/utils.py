"""Annotations Pydantic réutilisables pour validation.

Ce module centralise les types annotés et la configuration camelCase
partagée par les schémas exposés sur l'API.
"""

from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, StringConstraints
from pydantic.alias_generators import to_camel

# Chaînes avec contraintes
FullName = Annotated[
    str,
    StringConstraints(min_length=1, max_length=100, strip_whitespace=True),
    Field(description="Nom complet", examples=["Ada Lovelace"]),
]
Password = Annotated[str, Field(min_length=1, description="Mot de passe en clair")]

# Identifiants
PatientId = Annotated[int, Field(gt=0, description="ID de l'enregistrement patient")]

# Métadonnées
EMAIL_MAX_LENGTH = 100


def _check_email_length(value: str) -> str:
    if len(value) > EMAIL_MAX_LENGTH:
        raise ValueError(f"L'email ne doit pas dépasser {EMAIL_MAX_LENGTH} caractères")
    return value


Email = Annotated[
    EmailStr,
    AfterValidator(_check_email_length),
    Field(description="Adresse email valide"),
]


class CamelModel(BaseModel):
    """Base des schémas de l'API: champs snake_case, JSON en camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
