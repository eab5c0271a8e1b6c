"""genedetective-identity: authentification, rôles et hiérarchie des dossiers GeneDetective."""

__version__ = "0.1.0"
