"""
Tests d'intégration pour genedetective-identity.

Ces tests passent par l'application complète (client httpx ASGI) sur une base
SQLite en mémoire, clés étrangères activées.

Usage:
    pytest -m integration
"""
