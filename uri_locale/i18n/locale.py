"""
Locale helpers

Pure functions for language-tag handling:
- Tolerant BCP 47 tag parsing into a canonical locale identifier
- Wire-form rendering for URL path segments
- RTL (right-to-left) detection and language metadata lookup
"""

from __future__ import annotations

from dataclasses import dataclass

from babel import Locale
from babel.core import get_locale_identifier, parse_locale

# ── Constants ─────────────────────────────────────────────────────────────────

# Base language codes whose scripts read right-to-left
RTL_LOCALES: frozenset[str] = frozenset({"ar", "he", "fa", "ur", "yi", "ku"})

# Human-readable names for common locales (subset of the BCP 47 code space)
LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "fr": "Français",
    "de": "Deutsch",
    "es": "Español",
    "ar": "العربية",
    "zh": "中文",
    "ja": "日本語",
    "pt": "Português",
    "it": "Italiano",
    "nl": "Nederlands",
}

TAG_SEPARATOR = "-"


# ── Types ─────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class LocaleTag:
    """A parsed locale.

    ``canonical`` is the identifier used for allow-list comparison
    (``en_US``, ``zh_Hant_TW``); ``wire`` is the URL segment form (``en-us``).
    The empty tag (``canonical == ""``) is what unparsable input becomes.
    """

    language: str = ""
    territory: str | None = None
    script: str | None = None
    variant: str | None = None

    @property
    def canonical(self) -> str:
        if not self.language:
            return ""
        return get_locale_identifier((self.language, self.territory, self.script, self.variant))

    @property
    def wire(self) -> str:
        return to_wire_form(self.canonical)

    def __bool__(self) -> bool:
        return bool(self.language)

    def __str__(self) -> str:
        return self.canonical


EMPTY_LOCALE = LocaleTag()


# ── Public helpers ────────────────────────────────────────────────────────────


def parse_locale_tag(tag: str | None) -> LocaleTag:
    """Parse a language tag, never failing.

    Underscores are accepted as separators so ``en_US`` and ``en-us`` denote
    the same locale. Anything that is not a well-formed tag (empty strings,
    numbers, file names such as ``favicon.ico``) yields ``EMPTY_LOCALE``.

    Args:
        tag: Raw tag, typically the first segment of a request path.

    Returns:
        The parsed LocaleTag, or EMPTY_LOCALE.
    """
    if not tag:
        return EMPTY_LOCALE
    tag = tag.strip()
    # POSIX suffixes (".UTF-8", "@euro") are not part of a language tag
    if not tag or not tag.isascii() or "." in tag or "@" in tag:
        return EMPTY_LOCALE
    try:
        parts = parse_locale(tag.replace("_", TAG_SEPARATOR), sep=TAG_SEPARATOR)
    except ValueError:
        return EMPTY_LOCALE
    language, territory, script, variant = parts[:4]
    return LocaleTag(language=language, territory=territory, script=script, variant=variant)


def canonical_locale(value: str | Locale | LocaleTag) -> str:
    """Return the allow-list comparison string for a configured locale.

    Strings and Babel ``Locale`` objects go through ``parse_locale_tag`` so
    that ``"en-US"``, ``"en_us"`` and ``Locale("en", "US")`` all become
    ``en_US``, the same form request segments parse to. Malformed input
    yields ``""``.
    """
    if isinstance(value, LocaleTag):
        return value.canonical
    return parse_locale_tag(str(value)).canonical


def to_wire_form(locale: str | Locale | LocaleTag) -> str:
    """Render a locale as a lowercase, hyphen-separated URL segment."""
    if isinstance(locale, LocaleTag):
        locale = locale.canonical
    return str(locale).lower().replace("_", TAG_SEPARATOR)


def is_rtl_locale(locale: str) -> bool:
    """Return True when the given locale is right-to-left.

    Compares only the base language, so "ar", "ar-SA" and "ar_SA" are all
    identified as RTL.
    """
    base = locale.replace("_", TAG_SEPARATOR).split(TAG_SEPARATOR)[0].lower()
    return base in RTL_LOCALES


def get_language_info(locale: str) -> dict[str, str | bool]:
    """Return a metadata dict describing the given locale.

    Args:
        locale: Locale code, e.g. "ar", "fr", "pt_BR".

    Returns:
        Dict with keys: ``code`` (str), ``wire`` (str), ``name`` (str),
        ``is_rtl`` (bool).
    """
    base = parse_locale_tag(locale).language
    return {
        "code": locale,
        "wire": to_wire_form(locale),
        "name": LANGUAGE_NAMES.get(locale, LANGUAGE_NAMES.get(base, locale)),
        "is_rtl": is_rtl_locale(locale),
    }
