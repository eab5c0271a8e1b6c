"""Hachage et vérification des mots de passe.

Fonction lente et adaptative (bcrypt) avec un facteur de travail fixe
(``BCRYPT_ROUNDS``): chaque appel à ``hash_password`` produit un sel
aléatoire, la vérification reste déterministe.
"""

import bcrypt

from genedetective.core.config import settings

# bcrypt ne considère que les 72 premiers octets
BCRYPT_MAX_BYTES = 72

_DUMMY_HASH = bcrypt.hashpw(b"genedetective-dummy-password", bcrypt.gensalt(settings.BCRYPT_ROUNDS))


def _to_bytes(password: str | bytes) -> bytes:
    if isinstance(password, str):
        password = password.encode("utf-8")
    elif not isinstance(password, bytes):
        raise TypeError("Password must be a string or bytes.")
    return password[:BCRYPT_MAX_BYTES]


def hash_password(password: str | bytes) -> str:
    salt = bcrypt.gensalt(settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_to_bytes(password), salt).decode("utf-8")


def verify_password(password: str | bytes, password_hash: str | None) -> bool:
    """
    Vérifie un mot de passe contre son hash (comparaison à temps constant).

    Un hash absent ou illisible est traité comme un échec, sans distinguer
    la cause.
    """
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(_to_bytes(password), password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def dummy_verify() -> None:
    """Consomme un temps comparable à une vérification pour un compte inexistant."""
    bcrypt.checkpw(b"genedetective-wrong-password", _DUMMY_HASH)
