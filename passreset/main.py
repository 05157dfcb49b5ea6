import logging
from contextlib import asynccontextmanager

import psycopg
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from passreset.domain.ports.email_port import EmailPort
from passreset.infrastructure.db.pool import close_pool, get_pool
from passreset.infrastructure.db.schema import ensure_schema
from passreset.infrastructure.email.http_smtp_adapter import HttpSmtpEmailAdapter
from passreset.infrastructure.email.notifier import (
    EmailPasscodeNotifier,
    MessageTemplates,
)
from passreset.infrastructure.email.smtp_adapter import SmtpEmailAdapter
from passreset.logging import setup_logging
from passreset.presentation.api import api
from passreset.settings import Settings, get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def build_email_adapter(settings: Settings) -> EmailPort:
    if settings.email_transport == "http":
        return HttpSmtpEmailAdapter(
            base_url=settings.smtp_base_url, timeout=settings.smtp_timeout_seconds
        )
    return SmtpEmailAdapter(
        hostname=settings.smtp_server,
        port=settings.smtp_port,
        username=settings.smtp_username if settings.smtp_auth else None,
        password=settings.smtp_password if settings.smtp_auth else None,
        use_tls=settings.smtp_use_tls,
        start_tls=settings.smtp_start_tls,
        from_address=settings.mail_from_address,
        from_name=settings.mail_from_name,
        timeout=settings.smtp_timeout_seconds,
    )


def build_templates(settings: Settings) -> MessageTemplates:
    return MessageTemplates(
        subject=settings.mail_subject,
        html_body=settings.mail_body,
        text_body=settings.mail_alt_body,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    pool = get_pool(settings.database_url)
    await pool.open()
    if settings.auto_create_schema:
        await ensure_schema(pool)

    email_adapter = build_email_adapter(settings)
    app.state.notifier = EmailPasscodeNotifier(
        email_adapter, build_templates(settings)
    )  # expose to dependencies

    try:
        yield
    finally:
        # shutdown
        await email_adapter.aclose()
        await close_pool()


async def on_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "malformed request"},
    )


async def on_storage_error(request: Request, exc: psycopg.Error) -> JSONResponse:
    logger.exception("storage failure", extra={"path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "internal server error"},
    )


def create_app() -> FastAPI:
    setup_logging(settings.log_level)
    app = FastAPI(title="Password Reset Passcodes", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.add_exception_handler(RequestValidationError, on_request_validation_error)
    app.add_exception_handler(psycopg.Error, on_storage_error)
    app.include_router(api)
    return app


app = create_app()
