"""
config.py

Configuration centralisée de l'assistant BSSC.

Toutes les valeurs (clé Gemini, URLs de l'explorateur et du RPC, timeout HTTP…)
sont lues une seule fois depuis l'environnement (et un éventuel fichier .env),
puis passées explicitement à chaque composant à sa construction.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import List, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


BSSC_EXPLORER_URL = "https://explorer.bssc.live"
BSSC_RPC_URL = "https://bssc-rpc.bssc.live"
GEMINI_MODEL_URL = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "gemini-2.5-pro-exp-09-2025:generateContent"
)

# Valeur livrée dans le front d'origine, à remplacer : ce n'est pas une vraie clé
GEMINI_API_KEY_PLACEHOLDER = "YOUR_SECURE_GEMINI_API_KEY"

DEFAULT_HTTP_TIMEOUT = 15.0


class Settings(BaseModel):
    """Paramètres de l'application."""

    gemini_api_key: Optional[str] = Field(default=None, repr=False)
    gemini_model_url: str = GEMINI_MODEL_URL

    explorer_base_url: str = BSSC_EXPLORER_URL
    # Pas utilisé par le flux actuel (pas de lecture de solde)
    rpc_url: str = BSSC_RPC_URL

    # None = pas de timeout côté transport
    http_timeout: Optional[float] = DEFAULT_HTTP_TIMEOUT

    allowed_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @property
    def has_gemini_key(self) -> bool:
        key = (self.gemini_api_key or "").strip()
        return bool(key) and key != GEMINI_API_KEY_PLACEHOLDER

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Construit les settings depuis les variables d'environnement."""

        env = os.environ if environ is None else environ

        return cls(
            gemini_api_key=env.get("GEMINI_API_KEY") or env.get("VITE_GEMINI_API_KEY"),
            gemini_model_url=env.get("GEMINI_MODEL_URL") or GEMINI_MODEL_URL,
            explorer_base_url=env.get("BSSC_EXPLORER_URL") or BSSC_EXPLORER_URL,
            rpc_url=env.get("BSSC_RPC_URL") or BSSC_RPC_URL,
            http_timeout=_parse_timeout(env.get("HTTP_TIMEOUT")),
            allowed_origins=_parse_origins(env.get("ALLOWED_ORIGINS")),
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        )


def _parse_timeout(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return DEFAULT_HTTP_TIMEOUT

    value = value.strip().lower()
    if value in ("0", "none", "off"):
        return None

    try:
        timeout = float(value)
    except ValueError:
        return DEFAULT_HTTP_TIMEOUT

    return timeout if timeout > 0 else None


def _parse_origins(value: Optional[str]) -> List[str]:
    if not value:
        return ["*"]

    origins = [origin.strip() for origin in value.split(",") if origin.strip()]
    return origins or ["*"]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv()
    return Settings.from_env()
