"""Client IA de l'assistant BSSC.

Un seul appel à l'API Gemini `generateContent` par requête :
- un prompt mono-tour "Context: ...\\nUser query: ..."
- on garde uniquement le texte du premier candidat.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from bssc_assistant.config import Settings


logger = logging.getLogger(__name__)

NO_LEGIBLE_RESPONSE = "No legible response from AI."

# Longueur max du corps d'erreur Gemini recopié dans le message
ERROR_DETAILS_MAX_CHARS = 100


class AIClientError(Exception):
    """Exception de base du client IA."""

    pass


class AIConfigurationError(AIClientError):
    """Clé API absente (ou encore la valeur d'exemple)."""

    pass


class AIUpstreamError(AIClientError):
    """L'API Gemini a répondu avec un statut HTTP d'erreur."""

    def __init__(self, status_code: int, details: str = ""):
        self.status_code = status_code
        self.details = details
        super().__init__(
            f"Gemini API call failed with status {status_code}. "
            f"Details: {details[:ERROR_DETAILS_MAX_CHARS]}..."
        )


def build_prompt(context: str, query: str) -> str:
    return f"Context: {context}\nUser query: {query}"


def build_payload(prompt: str) -> Dict[str, Any]:
    """Structure attendue par Gemini : contents[] -> parts[] -> text."""

    return {"contents": [{"parts": [{"text": prompt}]}]}


def _first(value: Any) -> Any:
    if isinstance(value, list) and value:
        return value[0]
    return None


def extract_answer(data: Any) -> str:
    """
    Lit candidates[0].content.parts[0].text.
    Si un maillon manque (ou le texte est vide), renvoie NO_LEGIBLE_RESPONSE.
    """

    if not isinstance(data, dict):
        return NO_LEGIBLE_RESPONSE

    candidate = _first(data.get("candidates"))
    content = candidate.get("content") if isinstance(candidate, dict) else None
    part = _first(content.get("parts")) if isinstance(content, dict) else None
    text = part.get("text") if isinstance(part, dict) else None

    if isinstance(text, str) and text:
        return text
    return NO_LEGIBLE_RESPONSE


class GeminiAIClient:
    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return self.settings.has_gemini_key

    def ensure_configured(self) -> None:
        if not self.is_configured:
            raise AIConfigurationError(
                "GEMINI_API_KEY is missing. Set it in the server environment "
                "(or in a .env file) and restart the service."
            )

    async def ask(self, context: str, query: str) -> str:
        """Envoie (contexte, question) à Gemini et renvoie le texte de la réponse."""

        self.ensure_configured()

        payload = build_payload(build_prompt(context, query))

        async with httpx.AsyncClient(
            timeout=self.settings.http_timeout,
            transport=self._transport,
        ) as client:
            resp = await client.post(
                self.settings.gemini_model_url,
                params={"key": self.settings.gemini_api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
            )

        if not resp.is_success:
            logger.error(
                "Gemini API error: status=%s body=%s",
                resp.status_code,
                resp.text[:500],
            )
            raise AIUpstreamError(resp.status_code, resp.text)

        answer = extract_answer(resp.json())
        logger.info(
            "Gemini responded: status=%s answer_chars=%s",
            resp.status_code,
            len(answer),
        )
        return answer
