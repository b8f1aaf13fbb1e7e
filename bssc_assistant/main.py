import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bssc_assistant.config import get_settings
from bssc_assistant.logging_config import setup_logging
from bssc_assistant.routes import analyze


logger = logging.getLogger(__name__)

settings = get_settings()
setup_logging(settings.log_level)


app = FastAPI(
    title="BSSC AI Assistant API",
    version="2.0.0",
    description="Assistant IA pour les adresses et transactions BSSC (explorateur + Gemini).",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # body absent / JSON invalide : même réponse qu'une question manquante
    logger.warning("Invalid request on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Query is required"})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"error": f"Internal Server Error: {exc}"},
    )


@app.get("/health")
def health_check():
    return {"status": "ok", "app": "BSSC AI Assistant"}


app.include_router(analyze.router)
