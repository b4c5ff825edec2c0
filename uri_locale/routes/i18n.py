"""
i18n Routes

Every route lives under the locale prefix, so by the time a handler runs the
locale middleware has already accepted the request and bound the locale.

i18n_router  (prefix: /{locale}/i18n)
    GET    /languages   → list supported languages
    GET    /current     → the locale negotiated for this request
"""

import logging

from fastapi import APIRouter, Request
from pydantic import BaseModel

from uri_locale.i18n.locale import get_language_info
from uri_locale.resolver import get_current_locale

i18n_router = APIRouter(tags=["Internationalization"])
logger = logging.getLogger(__name__)


class LanguageInfo(BaseModel):
    code: str
    wire: str
    name: str
    is_rtl: bool


class CurrentLocale(BaseModel):
    locale: str
    canonical: str
    is_rtl: bool


@i18n_router.get("/languages", response_model=list[LanguageInfo])
async def list_supported_languages(request: Request) -> list[LanguageInfo]:
    """List all supported languages with wire form, name and RTL flag."""
    config = request.app.state.locale_config
    return [LanguageInfo(**get_language_info(code)) for code in config.supported_locales]


@i18n_router.get("/current", response_model=CurrentLocale)
async def current_locale(request: Request) -> CurrentLocale:
    """Return the locale bound by the locale middleware."""
    tag = request.state.locale_tag
    info = get_language_info(tag.canonical)
    return CurrentLocale(locale=get_current_locale() or request.state.locale, canonical=tag.canonical, is_rtl=info["is_rtl"])
