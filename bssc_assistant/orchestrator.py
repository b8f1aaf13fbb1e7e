"""
orchestrator.py

Enchaînement d'une requête utilisateur :

1. validation de la question
2. vérification de la clé Gemini (avant tout appel sortant)
3. contexte : page de l'explorateur si la saisie ressemble à un identifiant
   (plus de 30 caractères), sinon contexte par défaut
4. appel Gemini avec (contexte, question)

Aucun état conservé entre deux requêtes, aucun retry.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from pydantic import BaseModel

from bssc_assistant.ai.ai_client import GeminiAIClient
from bssc_assistant.config import Settings
from bssc_assistant.services.explorer_fetcher import ExplorerFetcher, ExplorerSummary


logger = logging.getLogger(__name__)

DEFAULT_CONTEXT = "No specific BSSC data context needed."

# Au-delà, la saisie est traitée comme une adresse / un hash
EXPLORER_QUERY_MIN_LENGTH = 30


class QueryValidationError(Exception):
    """Question absente ou vide."""

    pass


class AnalysisResult(BaseModel):
    query: str
    context: str
    answer: str
    explorer: Optional[ExplorerSummary] = None


def needs_explorer_context(query: str) -> bool:
    return len(query) > EXPLORER_QUERY_MIN_LENGTH


class RequestOrchestrator:
    """Relie l'explorateur et le client IA pour répondre à une question."""

    def __init__(
        self,
        settings: Settings,
        explorer: Optional[ExplorerFetcher] = None,
        ai_client: Optional[GeminiAIClient] = None,
    ):
        self.settings = settings
        self.explorer = explorer or ExplorerFetcher(settings)
        self.ai_client = ai_client or GeminiAIClient(settings)

    async def _resolve_context(
        self, query: str
    ) -> Tuple[str, Optional[ExplorerSummary]]:
        if not needs_explorer_context(query):
            return DEFAULT_CONTEXT, None

        explorer = await self.explorer.fetch_summary(query)
        return explorer.summary, explorer

    async def analyze(self, query: Optional[str]) -> AnalysisResult:
        """
        Traite une question utilisateur de bout en bout.

        Lève :
        - QueryValidationError si la question est vide
        - AIConfigurationError si la clé Gemini manque
        - AIUpstreamError si Gemini répond en erreur
        """

        query = (query or "").strip()
        if not query:
            raise QueryValidationError("Query is required")

        self.ai_client.ensure_configured()

        logger.info(
            "Incoming query: length=%s explorer=%s",
            len(query),
            needs_explorer_context(query),
        )

        context, explorer = await self._resolve_context(query)
        answer = await self.ai_client.ask(context, query)

        return AnalysisResult(
            query=query,
            context=context,
            answer=answer,
            explorer=explorer,
        )
