"""
Locale Prefix Middleware

Enforces locale-prefixed URLs (``/en/products``):
  1. Requests under an excluded prefix (health checks, docs) pass untouched.
  2. A supported first path segment is bound as the active locale.
  3. Anything else is redirected to the default-locale URL, keeping the
     rest of the path and the query string.

The Location header only ever carries path + query, never scheme or host.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import quote

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import RedirectResponse

from uri_locale.interceptor import Failure, LocaleInterceptor, Proceed, Redirect, RequestFacts
from uri_locale.resolver import default_resolver_factory

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from fastapi import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

    from uri_locale.interceptor import LocaleConfig
    from uri_locale.resolver import LocaleResolver

logger = logging.getLogger(__name__)

# RFC 3986 pchar delimiters plus "/" and "%"
PATH_SAFE_CHARS = "/:@!$&'()*+,;=%"


def facts_from_request(request: Request) -> RequestFacts:
    """Extract RequestFacts from a Starlette request.

    Uses the undecoded ``raw_path`` when the server provides it so that
    percent-encoded segments survive the redirect unchanged. Otherwise the
    decoded ``path`` is re-quoted so that ``?`` and ``#`` stay in the path.
    """
    scope = request.scope
    raw_path = scope.get("raw_path")
    if raw_path:
        path = raw_path.decode("latin-1").split("?", 1)[0]
    else:
        path = quote(scope.get("path", "/"), safe=PATH_SAFE_CHARS)
    client = request.client
    return RequestFacts(
        path=path,
        scheme=request.url.scheme,
        host=client.host if client else None,
        port=client.port if client else None,
        query_string=scope.get("query_string", b"").decode("latin-1"),
    )


class LocalePrefixMiddleware(BaseHTTPMiddleware):
    """
    Run the locale interceptor on every request.

    Attributes set on request.state (via the resolver):
        locale      (str)       : wire form of the negotiated locale
        locale_tag  (LocaleTag) : parsed locale
    """

    def __init__(
        self,
        app: ASGIApp,
        config: LocaleConfig,
        resolver_factory: Callable[[Request], LocaleResolver | None] = default_resolver_factory,
        exclude_paths: Iterable[str] = (),
        redirect_status_code: int = 302,
    ):
        super().__init__(app)
        self.interceptor = LocaleInterceptor(config)
        self.resolver_factory = resolver_factory
        self.exclude_paths = tuple(exclude_paths)
        self.redirect_status_code = redirect_status_code

    def _is_excluded(self, path: str) -> bool:
        return any(path == prefix or path.startswith(prefix.rstrip("/") + "/") for prefix in self.exclude_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if self._is_excluded(request.url.path):
            return await call_next(request)

        resolver = self.resolver_factory(request)
        decision = self.interceptor.evaluate(facts_from_request(request), resolver)

        if isinstance(decision, Proceed):
            logger.debug(f"Locale {decision.locale} accepted for {request.url.path}")
            resolver.set_active_locale(decision.locale)
            return await call_next(request)

        if isinstance(decision, Redirect):
            logger.debug(f"Redirecting {request.url.path} to {decision.target}")
            return RedirectResponse(decision.target, status_code=self.redirect_status_code)

        if isinstance(decision, Failure):
            decision.raise_error()

        raise TypeError(f"Unknown decision: {decision!r}")
