import logging
import secrets
from datetime import datetime, timedelta, timezone
from urllib.parse import urlparse

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from app.api.exception_handlers import register_exception_handlers
from app.api.v1.router import api_router
from app.core.config import Settings
from app.core.logging import configure_logging
from app.core.security import PasswordHasher, TokenService
from app.db.base import create_session_factory
from app.domain.password_reset import ResetTokenPolicy
from app.services.email import EmailSender, SmtpEmailSender

logger = logging.getLogger(__name__)

_STARTED_AT = datetime.now(timezone.utc)


def create_app(
    settings: Settings | None = None, email_sender: EmailSender | None = None
) -> FastAPI:
    """
    Assemble the application from an explicit configuration object.

    Every collaborator that needs configuration (token service, password
    hasher, session factory, email sender) is built here once and kept on
    ``app.state``; request handlers reach them through dependencies.
    """
    settings = settings or Settings()
    configure_logging(settings.log_level)

    secret_key = settings.secret_key
    if not secret_key:
        # Settings refuse production without a key, so this is dev/test only.
        logger.warning("SECRET_KEY is not set; using a random key for this process")
        secret_key = secrets.token_urlsafe(48)

    app = FastAPI(title=settings.app_name)
    app.state.settings = settings
    app.state.session_factory = create_session_factory(settings.database_url)
    app.state.token_service = TokenService(
        secret_key=secret_key,
        algorithm=settings.algorithm,
        expire_minutes=settings.access_token_expire_minutes,
    )
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.reset_policy = ResetTokenPolicy(
        ttl=timedelta(minutes=settings.password_reset_token_expire_minutes)
    )
    app.state.email_sender = email_sender or SmtpEmailSender(settings)

    if settings.frontend_url:
        parsed = urlparse(settings.frontend_url)
        origin = f"{parsed.scheme}://{parsed.netloc}"
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[origin],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app, settings)
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "environment": settings.environment,
            "uptime_seconds": int((datetime.now(timezone.utc) - _STARTED_AT).total_seconds()),
        }

    logger.info("%s started in %s mode", settings.app_name, settings.environment)
    return app


app = create_app()
