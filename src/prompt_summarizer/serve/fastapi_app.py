"""FastAPI summarization service.

Endpoints:
- GET /health
- POST /api/summarize  { "text": "..." }
- GET /  static single-page client
"""
from __future__ import annotations
import logging
import threading
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from prompt_summarizer.common.errors import CompletionAPIError, InputValidationError, TemplateError
from prompt_summarizer.common.logging_setup import setup_logging
from prompt_summarizer.common.schema import (
    QUOTA_EXCEEDED_CODE,
    SERVER_BUSY_CODE,
    SUMMARIZATION_FAILED_CODE,
    ErrorOut,
    SummarizeIn,
    SummarizeOut,
)
from prompt_summarizer.common.settings import Settings
from prompt_summarizer.common.templates import PLACEHOLDER, load_template, render_prompt
from prompt_summarizer.serve.completion import DEFAULT_MODEL, CompletionClient

LOGGER = logging.getLogger("prompt_summarizer.serve.app")

QUOTA_ERROR = "OpenAI API Quota Exceeded"
QUOTA_MESSAGE = (
    "Your OpenAI API key has insufficient quota. Please check your billing "
    "details at https://platform.openai.com/account/billing"
)
GENERIC_ERROR = "Failed to generate summary"
GENERIC_MESSAGE = "An unexpected error occurred"


def _validate_template_on_startup(path: str) -> None:
    """Warn if the prompt template is unreadable or has no placeholder."""
    try:
        template = load_template(path)
    except Exception as e:
        LOGGER.warning("Failed to read prompt template: %s", e)
        return
    if PLACEHOLDER not in template.prompt:
        LOGGER.warning(
            "Prompt template %s has no %s placeholder; input text will be ignored",
            path,
            PLACEHOLDER,
        )


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_completion_client(request: Request) -> CompletionClient:
    return request.app.state.completion_client


def _error_response(status_code: int, error: str, message: str, code: str) -> JSONResponse:
    body = ErrorOut(error=error, message=message, code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _response_for(exc: Exception) -> JSONResponse:
    if isinstance(exc, CompletionAPIError) and exc.is_quota_exceeded:
        return _error_response(402, QUOTA_ERROR, QUOTA_MESSAGE, QUOTA_EXCEEDED_CODE)
    return _error_response(500, GENERIC_ERROR, str(exc) or GENERIC_MESSAGE, SUMMARIZATION_FAILED_CODE)


def summarize_text(text: str | None, settings: Settings, completion: CompletionClient) -> str:
    """
    Run validate -> load template -> render -> generate for one request.

    Raises whatever the failing step raised; nothing is retried.
    """
    if not text:
        raise InputValidationError("Text is required")
    if not settings.openai_api_key:
        raise InputValidationError(
            "OpenAI API key not set. Please set OPENAI_API_KEY environment variable."
        )
    template = load_template(settings.template_path)
    prompt = render_prompt(template, text)
    return completion.generate(prompt, template.config)


def create_app(
    settings: Settings | None = None,
    completion_client: CompletionClient | None = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Defaults to ``Settings()`` (environment and ``.env``).
        completion_client: Injected client. When omitted one is built on
            startup from ``settings`` and closed on shutdown.
    """
    if settings is None:
        settings = Settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        _validate_template_on_startup(settings.template_path)
        client = completion_client or CompletionClient(
            settings.openai_api_key,
            base_url=settings.openai_base_url,
            timeout=settings.openai_timeout,
        )
        app.state.completion_client = client
        LOGGER.info("Summarizer ready on port %s", settings.port)
        try:
            yield
        finally:
            if completion_client is None:
                client.close()

    app = FastAPI(title="Prompt Summarizer", lifespan=lifespan)
    app.state.settings = settings
    admission = (
        threading.BoundedSemaphore(settings.max_in_flight) if settings.max_in_flight > 0 else None
    )

    @app.exception_handler(RequestValidationError)
    async def _bad_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        LOGGER.error("Summarization error: invalid request body: %s", exc.errors())
        return _error_response(500, GENERIC_ERROR, "Text is required", SUMMARIZATION_FAILED_CODE)

    @app.get("/health")
    def health(settings: Settings = Depends(get_settings)) -> dict[str, str | None]:
        try:
            template = load_template(settings.template_path)
        except TemplateError as e:
            LOGGER.warning("Health check could not load prompt template: %s", e)
            return {"status": "degraded", "model": None}
        return {"status": "ok", "model": template.config.model or DEFAULT_MODEL}

    @app.post("/api/summarize", response_model=SummarizeOut)
    def summarize(
        body: SummarizeIn,
        settings: Settings = Depends(get_settings),
        completion: CompletionClient = Depends(get_completion_client),
    ) -> SummarizeOut | JSONResponse:
        if admission is not None and not admission.acquire(blocking=False):
            LOGGER.warning("Rejecting request: %s summarizations in flight", settings.max_in_flight)
            return _error_response(
                503, "Server busy", "Too many summarization requests in flight", SERVER_BUSY_CODE
            )
        try:
            summary = summarize_text(body.text, settings, completion)
        except Exception as e:
            LOGGER.exception("Summarization error: %s", e)
            return _response_for(e)
        finally:
            if admission is not None:
                admission.release()
        return SummarizeOut(summary=summary)

    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    else:
        LOGGER.warning("Static directory %s not found; client UI disabled", static_dir)

    return app
