"""Modèle de données User pour le service Identity.

Un utilisateur possède exactement un rôle, fixé à l'inscription, et exactement
un enregistrement d'extension correspondant à ce rôle.
"""

from datetime import date, datetime
from enum import IntEnum

from sqlalchemy import Date, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from genedetective.core.database import Base


class Role(IntEnum):
    """Codes de rôle persistés dans ``users.user_role`` et dans les tokens."""

    PATIENT = 1
    COUNSELOR = 2
    RESEARCHER = 4


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Hash opaque, jamais exposé",
    )
    date_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    user_role: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=Role.PATIENT,
        comment="1=Patient, 2=Counselor, 4=Researcher (immuable)",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role={self.user_role})>"
