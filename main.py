import logging

import uvicorn
from fastapi import FastAPI, Request

from uri_locale.config import Settings, settings
from uri_locale.exception_handlers import register_exception_handlers
from uri_locale.interceptor import LocaleConfig
from uri_locale.middleware.locale_prefix import LocalePrefixMiddleware
from uri_locale.middleware.logging import StructuredLoggingMiddleware, setup_structured_logging
from uri_locale.routes.i18n import i18n_router

logger = logging.getLogger(__name__)


def create_app(app_settings: Settings | None = None, locale_config: LocaleConfig | None = None) -> FastAPI:
    """Create the FastAPI application.

    ``locale_config`` overrides the configuration derived from settings;
    building it raises ConfigurationError, which aborts startup.
    """
    app_settings = app_settings or settings
    locale_config = locale_config or LocaleConfig.from_settings(app_settings)

    app = FastAPI(
        title=app_settings.app_name,
        description="Locale-prefixed URL negotiation powered by FastAPI",
        debug=app_settings.debug,
        version=app_settings.app_version,
    )
    app.state.locale_config = locale_config

    register_exception_handlers(app)

    # Starlette middleware is LIFO: logging wraps the locale middleware
    app.add_middleware(
        LocalePrefixMiddleware,
        config=locale_config,
        exclude_paths=app_settings.exclude_paths,
        redirect_status_code=app_settings.redirect_status_code,
    )
    app.add_middleware(StructuredLoggingMiddleware)

    app.include_router(i18n_router, prefix="/{locale}/i18n")

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    @app.get("/{locale}", tags=["Root"])
    async def home(request: Request, locale: str):
        return {"message": f"Welcome to {app_settings.app_name}", "locale": request.state.locale}

    if app_settings.debug:
        logger.info(f"Running in {app_settings.environment} mode")

    return app


setup_structured_logging(log_level=settings.log_level, json_format=settings.json_logs)
app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.debug)
