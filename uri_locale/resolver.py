"""
Locale resolver binding

The interceptor hands the negotiated locale to a ``LocaleResolver``. The
Starlette implementation stores it on ``request.state`` and in a context
variable so handlers, templates and log records can read it without the
request object.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from starlette.requests import Request

    from uri_locale.i18n.locale import LocaleTag

logger = logging.getLogger(__name__)

# Context variable for the active locale (wire form, e.g. "en-us")
current_locale_var: ContextVar[str] = ContextVar("current_locale", default="")


class LocaleResolver(Protocol):
    def set_active_locale(self, locale: LocaleTag) -> None: ...


class RequestStateLocaleResolver:
    """Binds the locale to ``request.state.locale`` and the current context."""

    def __init__(self, request: Request):
        self.request = request

    def set_active_locale(self, locale: LocaleTag) -> None:
        self.request.state.locale = locale.wire
        self.request.state.locale_tag = locale
        current_locale_var.set(locale.wire)


def default_resolver_factory(request: Request) -> LocaleResolver | None:
    return RequestStateLocaleResolver(request)


def get_current_locale() -> str:
    """Get the active locale (wire form) from context."""
    return current_locale_var.get("")
