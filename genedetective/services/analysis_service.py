"""Service metier pour les analyses d'expression genique et les recommandations.

Les resultats et recommandations sont des journaux en ajout seul: ils ne sont
jamais modifies apres insertion.
"""

import json
import logging
from typing import Any

from opentelemetry import trace
from sqlalchemy import insert, select

from genedetective.core.data_access import DataAccess
from genedetective.core.exceptions import AnalysisPreconditionError
from genedetective.models import gene_expressions_table, patients_table, recommendations_table
from genedetective.services.analysis_engine import GeneAnalyzer
from genedetective.services.medical_service import get_current_genetic_data

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


async def run_analysis(dal: DataAccess, analyzer: GeneAnalyzer, patient_id: int) -> dict[str, Any]:
    """
    Analyse l'échantillon courant du patient et journalise le résultat.

    Raises:
        AnalysisPreconditionError: aucun échantillon génétique
    """
    with tracer.start_as_current_span("run_analysis") as span:
        span.set_attribute("patient.id", patient_id)

        sample = await get_current_genetic_data(dal, patient_id)
        if sample is None:
            raise AnalysisPreconditionError()

        patient = await dal.fetch_one(
            select(patients_table.c.medical_history).where(patients_table.c.id == patient_id)
        )
        medical_history = (patient or {}).get("medical_history") or ""

        results = analyzer.analyze(
            sample["genetic_data_raw"], sample["ancestry_data"], medical_history
        )

        await dal.mutate(
            insert(gene_expressions_table).values(
                patient_id=patient_id, gene_expression_result=json.dumps(results)
            )
        )
        logger.info(f"Analysis stored for patient {patient_id}")
        return results


async def list_analysis_results(dal: DataAccess, patient_id: int) -> list[dict[str, Any]]:
    """Résultats du patient, du plus récent au plus ancien."""
    rows = await dal.fetch_all(
        select(
            gene_expressions_table.c.gene_expression_result,
            gene_expressions_table.c.analysis_date,
        )
        .where(gene_expressions_table.c.patient_id == patient_id)
        .order_by(gene_expressions_table.c.analysis_date.desc(), gene_expressions_table.c.id.desc())
    )
    results = []
    for row in rows:
        result = json.loads(row["gene_expression_result"] or "{}")
        result["analysisDate"] = row["analysis_date"]
        results.append(result)
    return results


async def add_recommendation(
    dal: DataAccess, counselor_id: int, patient_id: int, recommendations: Any
) -> int:
    result = await dal.mutate(
        insert(recommendations_table).values(
            patient_id=patient_id,
            counselor_id=counselor_id,
            recommendation_results=json.dumps(recommendations),
        )
    )
    logger.info(f"Recommendation {result.inserted_id} stored by counselor {counselor_id}")
    return result.inserted_id


async def list_recommendations(dal: DataAccess, patient_id: int) -> list[dict[str, Any]]:
    rows = await dal.fetch_all(
        select(
            recommendations_table.c.id,
            recommendations_table.c.counselor_id,
            recommendations_table.c.recommendation_results,
            recommendations_table.c.created_at,
        )
        .where(recommendations_table.c.patient_id == patient_id)
        .order_by(recommendations_table.c.created_at.desc(), recommendations_table.c.id.desc())
    )
    return [
        {
            "id": row["id"],
            "counselor_id": row["counselor_id"],
            "recommendations": json.loads(row["recommendation_results"])
            if row["recommendation_results"]
            else None,
            "created_at": row["created_at"],
        }
        for row in rows
    ]
