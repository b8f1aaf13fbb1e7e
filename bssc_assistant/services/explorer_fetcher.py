"""
explorer_fetcher.py

Module chargé de récupérer la page de l'explorateur BSSC pour un identifiant
(adresse de wallet ou hash de transaction) et d'en tirer un court résumé texte.

Pas d'API structurée ici : on lit la page HTML publique de l'explorateur

    {explorer}/tx/{id}        si l'identifiant fait plus de 44 caractères
    {explorer}/address/{id}   sinon

puis on délègue l'extraction à html_summarizer.

Ce module ne lève jamais d'exception vers l'appelant : en cas d'échec il renvoie
un ExplorerSummary(ok=False) dont le résumé reste utilisable comme contexte.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import BaseModel

from bssc_assistant.config import Settings
from bssc_assistant.services.html_summarizer import format_summary, parse_document


logger = logging.getLogger(__name__)

# Une adresse tient en 44 caractères max (base58), au-delà c'est une transaction
ADDRESS_MAX_LENGTH = 44


class ExplorerFetcherError(Exception):
    """Exception personnalisée pour le module explorer_fetcher."""

    pass


class ExplorerSummary(BaseModel):
    """
    Résultat d'une consultation de l'explorateur.

    `summary` est toujours exploitable comme contexte, que `ok` soit vrai ou non.
    """

    identifier: str
    url: str
    ok: bool
    summary: str
    error: Optional[str] = None


def is_transaction_id(identifier: str) -> bool:
    return len(identifier) > ADDRESS_MAX_LENGTH


def build_explorer_url(base_url: str, identifier: str) -> str:
    """Construit l'URL de la page /tx/ ou /address/ pour l'identifiant."""

    kind = "tx" if is_transaction_id(identifier) else "address"
    return f"{base_url.rstrip('/')}/{kind}/{identifier}"


def fallback_summary(identifier: str) -> str:
    return f"Error fetching explorer data for {identifier}."


class ExplorerFetcher:
    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        # injecté par les tests (httpx.MockTransport)
        self._transport = transport

    async def _call_explorer(self, url: str) -> str:
        """Appelle l'explorateur et renvoie le HTML brut."""

        async with httpx.AsyncClient(
            timeout=self.settings.http_timeout,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            resp = await client.get(url)

        if not resp.is_success:
            raise ExplorerFetcherError(
                f"Erreur HTTP {resp.status_code} depuis l'explorateur ({url})"
            )

        return resp.text

    async def fetch_summary(self, identifier: str) -> ExplorerSummary:
        """
        Fonction principale appelée par l'orchestrateur.

        Étapes :
        1. Choix de l'URL (/tx/ ou /address/) selon la longueur de l'identifiant.
        2. GET de la page HTML.
        3. Extraction titre + texte et mise en forme du résumé.
        """

        url = build_explorer_url(self.settings.explorer_base_url, identifier)
        logger.info(
            "Explorer lookup: kind=%s url=%s",
            "tx" if is_transaction_id(identifier) else "address",
            url,
        )

        try:
            html = await self._call_explorer(url)
            document = parse_document(html)
        except Exception as e:
            # ExplorerFetcherError, erreurs réseau httpx, ou tout autre imprévu
            logger.warning("Explorer fetch failed for %s: %s", identifier, e)
            return ExplorerSummary(
                identifier=identifier,
                url=url,
                ok=False,
                summary=fallback_summary(identifier),
                error=str(e) or type(e).__name__,
            )

        return ExplorerSummary(
            identifier=identifier,
            url=url,
            ok=True,
            summary=format_summary(document),
        )
