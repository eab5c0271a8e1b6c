"""Flux d'enregistrements par patient, en ajout seul.

Les lignes ne sont jamais modifiées après insertion. Toutes référencent
``patients.id`` avec ON DELETE CASCADE.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from genedetective.core.database import Base


class GeneticDataSample(Base):
    """Échantillon génétique brut. L'échantillon courant est le plus récent."""

    __tablename__ = "genetic_data"
    __table_args__ = (Index("idx_genetic_data_patient_created", "patient_id", "created_at"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    patient_id: Mapped[int] = mapped_column(
        ForeignKey("patients.id", ondelete="CASCADE"), nullable=False
    )
    genetic_data_raw: Mapped[str | None] = mapped_column(Text, nullable=True, comment="JSON")
    ancestry_data: Mapped[str | None] = mapped_column(Text, nullable=True, comment="JSON")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


class AnalysisResult(Base):
    """Résultat d'analyse d'expression génique."""

    __tablename__ = "gene_expressions"
    __table_args__ = (Index("idx_gene_expressions_patient", "patient_id"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    patient_id: Mapped[int] = mapped_column(
        ForeignKey("patients.id", ondelete="CASCADE"), nullable=False
    )
    gene_expression_result: Mapped[str | None] = mapped_column(Text, nullable=True, comment="JSON")
    analysis_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


class Recommendation(Base):
    __tablename__ = "recommendations"
    __table_args__ = (Index("idx_recommendations_patient", "patient_id"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    patient_id: Mapped[int] = mapped_column(
        ForeignKey("patients.id", ondelete="CASCADE"), nullable=False
    )
    # Le conseiller auteur peut disparaître sans emporter la recommandation du patient
    counselor_id: Mapped[int | None] = mapped_column(
        ForeignKey("genetic_counselors.id", ondelete="SET NULL"), nullable=True
    )
    recommendation_results: Mapped[str | None] = mapped_column(Text, nullable=True, comment="JSON")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
