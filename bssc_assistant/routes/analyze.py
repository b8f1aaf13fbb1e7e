import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from bssc_assistant.ai.ai_client import AIConfigurationError, AIUpstreamError
from bssc_assistant.config import get_settings
from bssc_assistant.orchestrator import QueryValidationError, RequestOrchestrator


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analyze"])


class AnalyzeRequest(BaseModel):
    query: Optional[str] = None


class AnalyzeResponse(BaseModel):
    answer: str


class ErrorResponse(BaseModel):
    error: str


def get_orchestrator() -> RequestOrchestrator:
    return RequestOrchestrator(get_settings())


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
    summary="Poser une question à l'assistant BSSC",
)
async def analyze(
    request: Optional[AnalyzeRequest] = None,
    orchestrator: RequestOrchestrator = Depends(get_orchestrator),
):
    """
    Exemple body :
    {
      "query": "7Np41oeYqPefeNQEHSv1UDhYrehxin3NStELsSKCT4K2"
    }
    """
    query = request.query if request else None

    try:
        result = await orchestrator.analyze(query)
    except QueryValidationError as e:
        return error_response(400, str(e))
    except AIConfigurationError as e:
        logger.error("Configuration error: %s", e)
        return error_response(500, str(e))
    except AIUpstreamError as e:
        return error_response(502, str(e))
    except Exception as e:
        logger.exception("API analyze runtime error: %s", e)
        return error_response(500, f"Internal Server Error: {e}")

    return AnalyzeResponse(answer=result.answer)
