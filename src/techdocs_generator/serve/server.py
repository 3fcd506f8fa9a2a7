"""Launch the FastAPI app under uvicorn."""
from __future__ import annotations
import os

import uvicorn

from techdocs_generator.common.config import load_settings

def main() -> None:
    settings = load_settings()
    host = os.getenv("TECHDOCS_HOST", settings.host)
    port = int(os.getenv("TECHDOCS_PORT", str(settings.port)))
    uvicorn.run(
        "techdocs_generator.serve.fastapi_app:app",
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
    )

if __name__ == "__main__":
    main()
