"""
Request URI Locale Interceptor

Decides, per request, whether the first path segment names a supported
locale. Supported → ``Proceed(locale)``; anything else → ``Redirect`` to the
same path re-prefixed with the default locale (or to the home path when
nothing follows the locale segment).

The interceptor only sees ``RequestFacts`` and a ``LocaleResolver``; it never
touches framework request objects and never raises. Failures come back as
``Failure`` decisions for the caller to raise.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, NoReturn, Union

from babel import Locale
from starlette.datastructures import URL

from uri_locale.exceptions import (
    ConfigurationError,
    ErrorCode,
    LocaleInterceptorError,
    LocaleResolverUnavailable,
    UriConstructionError,
)
from uri_locale.i18n.locale import LocaleTag, canonical_locale, parse_locale_tag, to_wire_form

if TYPE_CHECKING:
    from uri_locale.config import Settings
    from uri_locale.resolver import LocaleResolver

logger = logging.getLogger(__name__)

PATH_DELIMITER = "/"
LOCALE_SLOT = "{locale}"
DEFAULT_PORTS: frozenset[int] = frozenset({80, 443})

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
_INVALID_HOST_RE = re.compile(r"[\s/?#@\\]")


# ── Configuration ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class InterceptorOptions:
    """Optional settings for ``build_config``."""

    supported_locales: Iterable[str | Locale] = ()
    home_path_template: str | None = None


@dataclass(frozen=True)
class LocaleConfig:
    """Immutable interceptor configuration, shared by every request."""

    default_locale: str
    supported_locales: tuple[str, ...] = ()
    home_path_template: str = ""

    @property
    def default_wire(self) -> str:
        return to_wire_form(self.default_locale)

    @classmethod
    def from_settings(cls, settings: Settings) -> LocaleConfig:
        return build_config(
            settings.default_locale,
            InterceptorOptions(
                supported_locales=settings.supported_locales,
                home_path_template=settings.home_path_template,
            ),
        )


def _configured_locale(value: str | Locale, field: str) -> str:
    canonical = canonical_locale(value)
    if not canonical:
        raise ConfigurationError(f"Not a valid locale: {value!r}", field=field)
    return canonical


def build_config(default_locale: str | Locale | None, options: InterceptorOptions | None = None) -> LocaleConfig:
    """
    Build a validated LocaleConfig.

    Args:
        default_locale: Locale every unsupported request is redirected to.
        options: Supported locales (default: none) and home path template
            (default: ``/`` + wire form of the default locale).

    Returns:
        A frozen LocaleConfig.

    Raises:
        ConfigurationError: If the default locale is missing or blank, a
            configured locale is not a valid tag, supported locales are given
            as a bare string, or a supplied home path template does not
            contain exactly one ``{locale}`` slot.

    Configured locales are stored in canonical form (``"en-US"`` becomes
    ``en_US``), the same form request segments are compared in.
    """
    if default_locale is None:
        raise ConfigurationError("Default locale is null", field="default_locale")
    if not str(default_locale).strip():
        raise ConfigurationError("Default locale is empty", field="default_locale")
    default = _configured_locale(default_locale, "default_locale")

    options = options or InterceptorOptions()
    if isinstance(options.supported_locales, str):
        raise ConfigurationError(
            f"Supported locales must be a collection, not a string: {options.supported_locales!r}",
            field="supported_locales",
        )

    supported: list[str] = []
    for locale in options.supported_locales or ():
        if not str(locale).strip():
            continue
        value = _configured_locale(locale, "supported_locales")
        if value not in supported:
            supported.append(value)

    template = options.home_path_template
    if template is None:
        template = PATH_DELIMITER + to_wire_form(default)
    elif template.count(LOCALE_SLOT) != 1:
        raise ConfigurationError(
            f"Home path template must contain exactly one {LOCALE_SLOT} slot: {template!r}",
            field="home_path_template",
        )

    config = LocaleConfig(
        default_locale=default,
        supported_locales=tuple(supported),
        home_path_template=template,
    )
    logger.info(f"Locale interceptor configured: default={default} supported={list(config.supported_locales)}")
    return config


# ── Request facts and decisions ───────────────────────────────────────────────


@dataclass(frozen=True)
class RequestFacts:
    """The parts of an inbound request the interceptor needs."""

    path: str
    scheme: str = "http"
    host: str | None = None
    port: int | None = None
    query_string: str = ""


@dataclass(frozen=True)
class Proceed:
    """Request accepted; bind ``locale`` on the resolver and continue."""

    locale: LocaleTag


@dataclass(frozen=True)
class Redirect:
    """Halt and redirect to ``target`` (path and query only)."""

    target: str


@dataclass(frozen=True)
class Failure:
    """Evaluation failed; ``error`` wraps the original cause."""

    kind: ErrorCode
    error: LocaleInterceptorError

    def raise_error(self) -> NoReturn:
        raise self.error from self.error.cause


Decision = Union[Proceed, Redirect, Failure]


# ── Path and URI helpers ──────────────────────────────────────────────────────


def split_path(path: str) -> list[str]:
    """Split a request path into literal segments.

    The empty segment produced by the leading slash is dropped and the root
    path yields no segments. Duplicate and trailing slashes are kept as
    empty segments.
    """
    if path.startswith(PATH_DELIMITER):
        path = path[1:]
    if not path:
        return []
    return path.split(PATH_DELIMITER)


def _netloc(host: str | None, port: int | None) -> str:
    if not host:
        return ""
    if _INVALID_HOST_RE.search(host):
        raise UriConstructionError(f"Invalid host: {host!r}", component="host", value=host)
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"
    if port is None or port in DEFAULT_PORTS:
        return host
    if not isinstance(port, int) or not 0 <= port <= 65535:
        raise UriConstructionError(f"Invalid port: {port!r}", component="port", value=port)
    return f"{host}:{port}"


def build_redirect_uri(facts: RequestFacts, path: str) -> URL:
    """Assemble the absolute redirect URI for ``path`` from the request facts.

    Default ports (80, 443) are left out of the authority. Literal ``?`` and
    ``#`` in ``path`` are percent-encoded so they stay part of the path.
    """
    scheme = facts.scheme or ""
    if not _SCHEME_RE.match(scheme):
        raise UriConstructionError(f"Invalid scheme: {scheme!r}", component="scheme", value=scheme)
    return URL(
        scheme=scheme.lower(),
        netloc=_netloc(facts.host, facts.port),
        path=path.replace("?", "%3F").replace("#", "%23"),
        query=facts.query_string or "",
    )


# ── Interceptor ───────────────────────────────────────────────────────────────


class LocaleInterceptor:
    """Accept-or-redirect decision for locale-prefixed request paths."""

    def __init__(self, config: LocaleConfig):
        self.config = config

    def is_supported(self, locale: LocaleTag) -> bool:
        canonical = locale.canonical
        return any(supported == canonical for supported in self.config.supported_locales)

    def target_path(self, segments: list[str]) -> str:
        """Re-prefix everything after the first segment with the default locale."""
        wire = self.config.default_wire
        remainder = PATH_DELIMITER.join(segments[1:])
        if remainder:
            return f"{PATH_DELIMITER}{wire}{PATH_DELIMITER}{remainder}"
        return self.config.home_path_template.replace(LOCALE_SLOT, wire)

    def evaluate(self, facts: RequestFacts, resolver: LocaleResolver | None) -> Decision:
        """
        Decide what to do with a request.

        Args:
            facts: Path, scheme, remote host/port and query of the request.
            resolver: The request's locale resolver. ``None`` means the host
                framework could not supply one, which is a failure.

        Returns:
            Proceed, Redirect or Failure. Never raises.
        """
        try:
            if resolver is None:
                raise LocaleResolverUnavailable()

            segments = split_path(facts.path)
            candidate = parse_locale_tag(segments[0] if segments else "")
            if self.is_supported(candidate):
                return Proceed(candidate)

            url = build_redirect_uri(facts, self.target_path(segments))
            # Only path and query leave the interceptor
            return Redirect(url.path + ("?" + url.query if url.query else ""))
        except Exception as e:
            error = LocaleInterceptorError(e)
            return Failure(kind=error.kind, error=error)
