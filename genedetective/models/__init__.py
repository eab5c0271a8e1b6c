# Modèles SQLAlchemy pour genedetective-identity
#
# Hiérarchie:
# - users: identité et rôle
# - patients / genetic_counselors / researchers: extension 1:1 selon le rôle
# - genetic_data / gene_expressions / recommendations: flux par patient (ajout seul)
#
# Les services passent par la couche d'accès aux données avec des instructions
# SQLAlchemy Core construites sur les tables ci-dessous.

from .records import AnalysisResult, GeneticDataSample, Recommendation
from .role_records import GeneticCounselor, Patient, Researcher
from .user import Role, User

users_table = User.__table__
patients_table = Patient.__table__
counselors_table = GeneticCounselor.__table__
researchers_table = Researcher.__table__
genetic_data_table = GeneticDataSample.__table__
gene_expressions_table = AnalysisResult.__table__
recommendations_table = Recommendation.__table__

# Table d'extension attendue pour chaque rôle
ROLE_RECORD_TABLES = {
    Role.PATIENT: patients_table,
    Role.COUNSELOR: counselors_table,
    Role.RESEARCHER: researchers_table,
}

__all__ = [
    "ROLE_RECORD_TABLES",
    "AnalysisResult",
    "GeneticCounselor",
    "GeneticDataSample",
    "Patient",
    "Recommendation",
    "Researcher",
    "Role",
    "User",
    "counselors_table",
    "gene_expressions_table",
    "genetic_data_table",
    "patients_table",
    "recommendations_table",
    "researchers_table",
    "users_table",
]
