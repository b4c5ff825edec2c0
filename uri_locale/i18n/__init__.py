"""
i18n (Internationalization) package

Provides language-tag parsing, canonical/wire locale forms, language
metadata and RTL detection for the locale prefix negotiator.
"""

from .locale import (
    EMPTY_LOCALE,
    LANGUAGE_NAMES,
    RTL_LOCALES,
    LocaleTag,
    canonical_locale,
    get_language_info,
    is_rtl_locale,
    parse_locale_tag,
    to_wire_form,
)

__all__ = [
    "EMPTY_LOCALE",
    "LANGUAGE_NAMES",
    "RTL_LOCALES",
    "LocaleTag",
    "canonical_locale",
    "get_language_info",
    "is_rtl_locale",
    "parse_locale_tag",
    "to_wire_form",
]
