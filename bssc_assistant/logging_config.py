import logging
import sys


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure le logger racine (console uniquement)."""

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # httpx logue chaque requête en INFO, avec l'URL complète (clé API incluse)
    logging.getLogger("httpx").setLevel(logging.WARNING)
