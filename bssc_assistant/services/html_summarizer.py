"""
html_summarizer.py

Transforme une page HTML de l'explorateur en un petit résumé texte :
- le titre de la page (<title>)
- un extrait du texte du <body>, sans balises, espaces compactés et tronqué.

Aucune I/O ici : fonction pure, utilisée par explorer_fetcher.
"""

from __future__ import annotations

import logging
import re
from html.parser import HTMLParser
from typing import List, Optional

from pydantic import BaseModel


logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Explorer Data"

# 1re troncature (extraction), puis 2e troncature à l'affichage
EXCERPT_MAX_CHARS = 1000
DISPLAY_MAX_CHARS = 500

_WHITESPACE_RE = re.compile(r"\s+")

# Contenu jamais affiché à l'utilisateur
_IGNORED_TAGS = {"script", "style", "noscript", "template"}

# Balises autorisées dans <head> ; toute autre balise (ou du texte) ferme le head
_HEAD_TAGS = {"base", "link", "meta", "title", "head", "html"} | _IGNORED_TAGS


class ParsedDocument(BaseModel):
    title: str
    text: str


class _ExplorerPageParser(HTMLParser):
    """
    Parcourt le document une seule fois et collecte titre + texte visible.

    Comme un navigateur : tout ce qui n'est pas dans <head> appartient au body,
    y compris le texte avant un <body> tardif ou après </body>.
    """

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.title_parts: List[str] = []
        self.body_parts: List[str] = []

        self._in_title = False
        self._title_done = False
        self._in_head = False
        self._ignored_depth = 0

    def handle_starttag(self, tag, attrs):
        if tag == "head":
            self._in_head = True
        elif tag not in _HEAD_TAGS:
            self._in_head = False

        if tag in _IGNORED_TAGS:
            self._ignored_depth += 1
        elif tag == "title" and not self._title_done:
            self._in_title = True

    def handle_endtag(self, tag):
        if tag in _IGNORED_TAGS and self._ignored_depth:
            self._ignored_depth -= 1
        elif tag == "title" and self._in_title:
            self._in_title = False
            self._title_done = True
        elif tag == "head":
            self._in_head = False

    def handle_data(self, data):
        if self._in_title:
            self.title_parts.append(data)
            return

        if self._ignored_depth:
            return

        if self._in_head:
            if not data.strip():
                return
            self._in_head = False

        # Séparateur pour éviter de coller les textes de deux balises voisines
        self.body_parts.append(data)
        self.body_parts.append(" ")


def _collapse(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def parse_document(html: Optional[str]) -> ParsedDocument:
    """
    Extrait {title, text} d'une page HTML.

    - title : texte du premier <title>, sinon DEFAULT_TITLE
    - text  : texte visible hors <head> (body implicite, texte après </body>
      compris), espaces compactés, au plus EXCERPT_MAX_CHARS caractères

    Ne lève jamais d'exception : en cas de HTML cassé on renvoie ce qu'on a pu lire.
    """

    if not isinstance(html, str) or not html:
        return ParsedDocument(title=DEFAULT_TITLE, text="")

    parser = _ExplorerPageParser()
    try:
        parser.feed(html)
        parser.close()
    except Exception as e:
        # HTMLParser est tolérant, mais on garde le best-effort quoi qu'il arrive
        logger.debug("HTML partiellement illisible : %s", e)

    title = _collapse("".join(parser.title_parts)) or DEFAULT_TITLE

    text = _collapse("".join(parser.body_parts))[:EXCERPT_MAX_CHARS]

    return ParsedDocument(title=title, text=text)


def format_summary(document: ParsedDocument) -> str:
    """Résumé lisible transmis comme contexte à l'IA."""

    return f"Parsed {document.title}: {document.text[:DISPLAY_MAX_CHARS]}..."
