"""Moteur d'analyse génique simulé.

Collaborateur externe du service: il reçoit les données génétiques, l'ascendance
et l'historique médical, et retourne un rapport. L'implémentation fournie est
une simulation (variants déterminés par l'ascendance, scores aléatoires).
"""

import random
from datetime import UTC, datetime
from typing import Any, Protocol

ANALYZED_GENES = ["BRCA1", "BRCA2", "APOE", "CFTR", "ACTN3", "MCM6"]


class GeneAnalyzer(Protocol):
    def analyze(
        self, genetic_data: Any, ancestry_data: dict[str, Any] | None, medical_history: str
    ) -> dict[str, Any]: ...


def _ancestry_share(value: Any) -> float:
    """Proportion d'ascendance; une valeur non numérique compte pour 0."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


class MockGeneAnalyzer:
    """Analyse simulée; ``seed`` rend les scores reproductibles."""

    def __init__(self, seed: int | None = None):
        self._random = random.Random(seed)

    def analyze(
        self, genetic_data: Any, ancestry_data: dict[str, Any] | None, medical_history: str
    ) -> dict[str, Any]:
        ancestry = ancestry_data or {}
        european = _ancestry_share(ancestry.get("european"))
        asian = _ancestry_share(ancestry.get("asian"))

        results: dict[str, Any] = {
            "analyzedGenes": list(ANALYZED_GENES),
            "riskVariants": [],
            "beneficialTraits": [],
            "overallRiskScore": self._random.random() * 100,
            "analysisDate": datetime.now(UTC).isoformat(),
        }

        if european > 0.5:
            results["riskVariants"].append(
                {
                    "gene": "BRCA1",
                    "variant": "5382insC",
                    "condition": "Breast Cancer",
                    "riskLevel": "moderate",
                    "riskPercentage": 15 + self._random.random() * 20,
                }
            )
        if asian > 0.3:
            results["riskVariants"].append(
                {
                    "gene": "APOE",
                    "variant": "e3/e4",
                    "condition": "Alzheimer's Disease",
                    "riskLevel": "low",
                    "riskPercentage": 5 + self._random.random() * 15,
                }
            )

        results["beneficialTraits"].append(
            {
                "gene": "ACTN3",
                "variant": "R/R",
                "trait": "Enhanced Athletic Performance",
                "category": "Physical Performance",
                "confidence": "high",
            }
        )
        if european > 0.7:
            results["beneficialTraits"].append(
                {
                    "gene": "MCM6",
                    "variant": "C/T",
                    "trait": "Lactose Tolerance",
                    "category": "Dietary",
                    "confidence": "high",
                }
            )

        return results


_default_analyzer = MockGeneAnalyzer()


def get_analyzer() -> GeneAnalyzer:
    """Dépendance FastAPI, surchargeable dans les tests."""
    return _default_analyzer
