"""
Couche d'accès aux données: point de passage unique vers le stockage.

Les appelants indiquent explicitement si une instruction lit ou écrit
(``Operation.READ`` / ``Operation.WRITE``) au lieu de laisser la couche deviner
à partir du texte SQL. Les valeurs sont toujours transmises comme paramètres
liés par SQLAlchemy, jamais interpolées dans l'instruction.
"""

import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeAlias

from fastapi import Depends
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Executable

from genedetective.core.database import get_session
from genedetective.core.exceptions import ConstraintViolationError, StorageError

logger = logging.getLogger(__name__)

RowSet: TypeAlias = list[dict[str, Any]]


class Operation(str, Enum):
    READ = "read"
    WRITE = "write"


@dataclass(frozen=True)
class MutationResult:
    """Résultat normalisé d'une écriture."""

    inserted_id: int | None
    affected_count: int


class DataAccess:
    """
    Exécute les lectures et écritures sur une ``AsyncSession``.

    Hors d'un bloc ``transaction()``, chaque écriture est validée
    immédiatement. Dans un bloc ``transaction()``, les écritures sont validées
    ensemble à la sortie ou annulées si une exception survient.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self._transaction_depth = 0

    @property
    def in_transaction(self) -> bool:
        return self._transaction_depth > 0

    async def execute(
        self,
        statement: Executable,
        params: Mapping[str, Any] | None = None,
        *,
        operation: Operation,
    ) -> RowSet | MutationResult:
        if operation is Operation.READ:
            return await self.fetch_all(statement, params)
        if operation is Operation.WRITE:
            return await self.mutate(statement, params)
        raise ValueError(f"Unknown operation: {operation!r}")

    async def fetch_all(
        self, statement: Executable, params: Mapping[str, Any] | None = None
    ) -> RowSet:
        result = await self._run(statement, params)
        return [dict(row) for row in result.mappings().all()]

    async def fetch_one(
        self, statement: Executable, params: Mapping[str, Any] | None = None
    ) -> dict[str, Any] | None:
        result = await self._run(statement, params)
        row = result.mappings().first()
        return dict(row) if row is not None else None

    async def mutate(
        self, statement: Executable, params: Mapping[str, Any] | None = None
    ) -> MutationResult:
        result = await self._run(statement, params)

        inserted_id = None
        if getattr(result, "is_insert", False) and result.inserted_primary_key:
            inserted_id = result.inserted_primary_key[0]
        mutation = MutationResult(inserted_id=inserted_id, affected_count=result.rowcount)

        if not self.in_transaction:
            await self._commit()
        return mutation

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["DataAccess"]:
        """
        Regroupe plusieurs écritures dans une seule unité atomique.

        Les blocs imbriqués rejoignent la transaction la plus externe.
        """
        self._transaction_depth += 1
        try:
            yield self
        except BaseException:
            self._transaction_depth -= 1
            if not self.in_transaction:
                await self.session.rollback()
                logger.debug("Transaction annulée")
            raise
        else:
            self._transaction_depth -= 1
            if not self.in_transaction:
                await self._commit()

    async def _run(self, statement: Executable, params: Mapping[str, Any] | None):
        try:
            if params:
                return await self.session.execute(statement, dict(params))
            return await self.session.execute(statement)
        except IntegrityError as e:
            await self._rollback_if_autonomous()
            logger.warning(f"Integrity constraint violated: {e.orig}")
            raise ConstraintViolationError("Integrity constraint violated", original=e) from e
        except SQLAlchemyError as e:
            await self._rollback_if_autonomous()
            logger.error(f"Storage operation failed: {e}")
            raise StorageError(original=e) from e

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConstraintViolationError("Integrity constraint violated", original=e) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Commit failed: {e}")
            raise StorageError("Commit failed", original=e) from e

    async def _rollback_if_autonomous(self) -> None:
        # Dans une transaction, le rollback revient au bloc englobant
        if not self.in_transaction:
            await self.session.rollback()


async def get_data_access(session: AsyncSession = Depends(get_session)) -> DataAccess:
    """Dépendance FastAPI: une couche d'accès par requête."""
    return DataAccess(session)
