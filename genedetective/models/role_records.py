"""Enregistrements d'extension par rôle (1:1 avec ``users``).

Chaque table référence ``users.id`` avec ON DELETE CASCADE et une contrainte
d'unicité sur ``user_id``: un utilisateur a au plus un enregistrement par table.
"""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from genedetective.core.database import Base


class Patient(Base):
    __tablename__ = "patients"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    medical_history: Mapped[str | None] = mapped_column(Text, nullable=True, default="")


class GeneticCounselor(Base):
    __tablename__ = "genetic_counselors"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    specialization: Mapped[str | None] = mapped_column(String(100), nullable=True, default="")


class Researcher(Base):
    __tablename__ = "researchers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    institution: Mapped[str | None] = mapped_column(String(100), nullable=True, default="")
    research_area: Mapped[str | None] = mapped_column(String(100), nullable=True, default="")
