"""Launch the summarization service with uvicorn."""
from __future__ import annotations
import logging
import sys

import uvicorn
from pydantic import ValidationError

from prompt_summarizer.common.logging_setup import setup_logging
from prompt_summarizer.common.settings import Settings

LOGGER = logging.getLogger("prompt_summarizer.serve.server")

def main() -> None:
    """Start the server; exits with status 1 on bad or missing configuration."""
    setup_logging()
    try:
        settings = Settings()
    except ValidationError as e:
        for err in e.errors():
            name = ".".join(str(x) for x in err["loc"]).upper()
            LOGGER.error("Invalid setting %s=%r: %s", name, err.get("input"), err["msg"])
        sys.exit(1)

    if not settings.openai_api_key:
        LOGGER.error("OPENAI_API_KEY is not set. Add it to the environment or to a .env file.")
        sys.exit(1)

    uvicorn.run(
        "prompt_summarizer.serve.fastapi_app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )

if __name__ == "__main__":
    main()
