"""CLI de l'assistant BSSC (même flux que POST /api/analyze)."""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import List, Optional

from bssc_assistant.ai.ai_client import AIClientError
from bssc_assistant.config import get_settings
from bssc_assistant.logging_config import setup_logging
from bssc_assistant.orchestrator import QueryValidationError, RequestOrchestrator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bssc-assistant",
        description="Ask the BSSC AI assistant about a wallet, a transaction or anything else.",
    )
    parser.add_argument("query", nargs="+", help="Wallet address, tx hash or question")
    parser.add_argument(
        "--show-context",
        action="store_true",
        help="Also print the context sent to the model",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    orchestrator = RequestOrchestrator(get_settings())
    query = " ".join(args.query)

    try:
        result = asyncio.run(orchestrator.analyze(query))
    except (QueryValidationError, AIClientError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error connecting to AI or fetching data: {e}", file=sys.stderr)
        return 2

    if args.show_context:
        print(f"Context: {result.context}\n")
    print(result.answer)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
