"""BCP 47 locale tags: canonicalization, likely subtags and negotiation.

Parsing of the language/script/region/variant core is delegated to Babel's
``parse_locale``; likely-subtag data comes from Babel's bundled CLDR
``likely_subtags`` table. Only the Unicode ``-u-`` extension is kept, since
``nu`` (numbering system) is the one keyword the formatter honours.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Collection, Iterable, Mapping
from dataclasses import dataclass, replace
from functools import lru_cache

from babel.core import get_global, parse_locale

from ..errors import InvalidLocaleError
from ..models.locale_data import NumberFormatLocaleData
from ..models.options import LocaleDataOptions

_TAG_CHARS = re.compile(r"^[A-Za-z0-9]+(?:[-_][A-Za-z0-9]+)*$")
_LANGUAGE = re.compile(r"^(?:[a-z]{2,3}|[a-z]{5,8})$")
_EXTENSION_KEY = re.compile(r"^[a-z0-9][a-z]$")


@dataclass(frozen=True)
class LocaleTag:
    """A parsed locale tag with its Unicode extension keywords."""

    language: str
    script: str | None = None
    region: str | None = None
    variants: tuple[str, ...] = ()
    keywords: tuple[tuple[str, str], ...] = ()

    @property
    def base(self) -> str:
        return "-".join(p for p in (self.language, self.script, self.region, *self.variants) if p)

    @property
    def core(self) -> tuple[str, str | None, str | None]:
        return self.language, self.script, self.region

    def keyword(self, key: str) -> str | None:
        for k, v in self.keywords:
            if k == key:
                return v
        return None

    def __str__(self) -> str:
        if not self.keywords:
            return self.base
        ext = "-".join(f"{k}-{v}" if v != "true" else k for k, v in self.keywords)
        return f"{self.base}-u-{ext}"


def _parse_unicode_extension(subtags: list[str]) -> tuple[tuple[str, str], ...]:
    keywords: dict[str, str] = {}
    key: str | None = None
    values: list[str] = []
    for subtag in subtags:
        if _EXTENSION_KEY.match(subtag):
            if key is not None:
                keywords.setdefault(key, "-".join(values) or "true")
            key, values = subtag, []
        elif key is not None:
            values.append(subtag)
        # attributes before the first key are dropped
    if key is not None:
        keywords.setdefault(key, "-".join(values) or "true")
    return tuple(sorted(keywords.items()))


@lru_cache(maxsize=1024)
def parse_tag(locale: str) -> LocaleTag:
    """Parse *locale* into a :class:`LocaleTag`.

    Accepts ``-`` or ``_`` separators. Raises :class:`InvalidLocaleError` for
    anything that is not a well-formed tag.
    """
    if not isinstance(locale, str) or not _TAG_CHARS.match(locale.strip()):
        raise InvalidLocaleError(f"Incorrect locale information provided: {locale!r}")

    subtags = locale.strip().lower().replace("_", "-").split("-")
    base_parts = subtags
    keywords: tuple[tuple[str, str], ...] = ()
    for i, subtag in enumerate(subtags[1:], start=1):
        if len(subtag) == 1:
            base_parts = subtags[:i]
            extensions = subtags[i:]
            if extensions[0] == "u":
                end = next(
                    (j for j, s in enumerate(extensions[1:], start=1) if len(s) == 1),
                    len(extensions),
                )
                keywords = _parse_unicode_extension(extensions[1:end])
            break

    if not _LANGUAGE.match(base_parts[0]):
        raise InvalidLocaleError(f"Incorrect locale information provided: {locale!r}")

    # Babel's parser takes a single variant; extra variants are split off first
    variants = tuple(p for p in base_parts[1:] if len(p) >= 5 or (len(p) == 4 and p[0].isdigit()))
    core = [p for p in base_parts if p not in variants]
    try:
        language, region, script, *_ = parse_locale("-".join(core), sep="-")
    except ValueError as e:
        raise InvalidLocaleError(f"Incorrect locale information provided: {locale!r}", e) from e

    return LocaleTag(language, script, region, variants, keywords)


def canonicalize_locale_list(locales: str | Iterable[str] | None) -> list[str]:
    """Canonicalize and de-duplicate a requested locale list, keeping order."""
    if locales is None:
        return []
    if isinstance(locales, str):
        locales = [locales]

    seen: list[str] = []
    for locale in locales:
        canonical = str(parse_tag(locale))
        if canonical not in seen:
            seen.append(canonical)
    return seen


# ---------------------------------------------------------------------------
# Likely subtags
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1024)
def maximize(tag: LocaleTag) -> LocaleTag:
    """Add likely subtags (``en`` → ``en-Latn-US``)."""
    likely: Mapping[str, str] = get_global("likely_subtags")
    language, script, region = tag.core

    keys = []
    if script and region:
        keys.append(f"{language}_{script}_{region}")
    if region:
        keys.append(f"{language}_{region}")
    if script:
        keys.append(f"{language}_{script}")
    keys.append(language)
    if language != "und" and script:
        keys.append(f"und_{script}")

    for key in keys:
        match = likely.get(key)
        if match:
            m_language, m_region, m_script, *_ = parse_locale(match)
            return replace(
                tag,
                language=m_language if language == "und" else language,
                script=script or m_script,
                region=region or m_region,
            )
    return tag


@lru_cache(maxsize=1024)
def minimize(tag: LocaleTag) -> LocaleTag:
    """Remove likely subtags (``en-Latn-US`` → ``en``, ``zh-Hant-TW`` → ``zh-TW``)."""
    maximal = maximize(tag)
    trials = (
        LocaleTag(maximal.language),
        LocaleTag(maximal.language, region=maximal.region),
        LocaleTag(maximal.language, script=maximal.script),
    )
    for trial in trials:
        if maximize(trial).core == maximal.core:
            return replace(tag, language=trial.language, script=trial.script, region=trial.region)
    return maximal


def minimize_locale(locale: str) -> str:
    return str(minimize(parse_tag(locale)))


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------

Matcher = Callable[[Collection[str], list[str]], tuple[str, str] | None]


def _lookup_one(available: Collection[str], locale: str) -> str | None:
    candidate = parse_tag(locale).base
    while candidate:
        if candidate in available:
            return candidate
        candidate = candidate.rpartition("-")[0]
    return None


def lookup_match(available: Collection[str], requested: list[str]) -> tuple[str, str] | None:
    """RFC 4647 lookup. Returns ``(available tag, requested tag)``."""
    for locale in requested:
        found = _lookup_one(available, locale)
        if found is not None:
            return found, locale
    return None


def best_fit_match(available: Collection[str], requested: list[str]) -> tuple[str, str] | None:
    """Exact match, else closest available tag sharing language and script.

    Among candidates the one in the requested region wins, then the shortest
    tag. Unlike lookup, ``zh-TW`` never falls back to a Simplified ``zh``.
    """
    for locale in requested:
        tag = parse_tag(locale)
        if tag.base in available:
            return tag.base, locale

        wanted = maximize(tag)
        candidates = []
        for candidate in available:
            have = maximize(parse_tag(candidate))
            if have.language == wanted.language and have.script == wanted.script:
                candidates.append((have.region != wanted.region, len(candidate), candidate))
        if candidates:
            return min(candidates)[2], locale
    return None


def get_matcher(locale_matcher: str) -> Matcher:
    return lookup_match if locale_matcher == "lookup" else best_fit_match


@dataclass(frozen=True)
class ResolvedLocale:
    locale: str
    data_locale: str
    numbering_system: str


def resolve_locale(
    available: Collection[str],
    requested: list[str],
    options: LocaleDataOptions,
    locale_data: Mapping[str, NumberFormatLocaleData],
    get_default_locale: Callable[[], str],
) -> ResolvedLocale:
    """Negotiate the data locale and numbering system for a request.

    The ``nu`` extension of the matched request is honoured when the locale
    data supports it; ``options.numbering_system`` overrides it on the same
    condition. Otherwise the first numbering system of the data is used.
    """
    match = get_matcher(options.locale_matcher)(available, requested)
    if match is not None:
        data_locale, requested_locale = match
        extension_nu = parse_tag(requested_locale).keyword("nu")
    else:
        data_locale, extension_nu = get_default_locale(), None

    supported = locale_data[data_locale].numbering_systems
    numbering_system = supported[0] if supported else "latn"
    locale = data_locale

    if extension_nu is not None and extension_nu in supported:
        numbering_system = extension_nu
        locale = f"{data_locale}-u-nu-{extension_nu}"

    option_nu = options.numbering_system
    if option_nu is not None and option_nu in supported and option_nu != numbering_system:
        numbering_system = option_nu
        locale = data_locale

    return ResolvedLocale(locale=locale, data_locale=data_locale, numbering_system=numbering_system)


def supported_locales(
    available: Collection[str],
    requested: list[str],
    locale_matcher: str = "best fit",
) -> list[str]:
    """Subset of *requested* that has a match in *available*, order kept."""
    matcher = get_matcher(locale_matcher)
    return [locale for locale in requested if matcher(available, [locale]) is not None]
