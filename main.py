"""Point d'entrée serveur : `python main.py` ou `uvicorn main:app`."""

import os

from bssc_assistant.main import app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )
