"""
Transliteration directive resolution.

A text value of the form ``$transliterateFrom=SAN|IAST`` asks for the entry to
be derived from another language already present in the same list. Candidates
are tried left to right; the first one with a usable source wins. Directives
that cannot be resolved are left in place so a later pass can retry once more
data exists.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from . import scripts
from .models import LanguageValue, ScriptCode

logger = logging.getLogger(__name__)

DIRECTIVE_PREFIX = "$transliterateFrom"
DIRECTIVE_SEPARATOR = "|"

# Source priority when filling languages absent from a list.
FILL_SOURCE_PRIORITY = (
    ScriptCode.IAST.value,
    ScriptCode.SLP1.value,
    ScriptCode.ITRANS.value,
    ScriptCode.SAN.value,
    ScriptCode.TEL.value,
)


@dataclass(frozen=True)
class Directive:
    """Parsed form of a text value. Empty `candidates` means no directive."""
    candidates: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.candidates)


NO_DIRECTIVE = Directive()


def is_directive(value: Optional[str]) -> bool:
    """True if the value carries the directive prefix, well-formed or not."""
    return isinstance(value, str) and value.startswith(DIRECTIVE_PREFIX)


def parse_directive(value: Optional[str]) -> Directive:
    """
    Parse a directive value into its ordered source candidates.

    Malformed directives (no ``=``, empty candidate list) parse to NO_DIRECTIVE.
    """
    if not is_directive(value):
        return NO_DIRECTIVE

    rest = value[len(DIRECTIVE_PREFIX):]
    if not rest.startswith("="):
        return NO_DIRECTIVE

    candidates = tuple(
        part.strip().upper()
        for part in rest[1:].split(DIRECTIVE_SEPARATOR)
        if part.strip()
    )
    return Directive(candidates) if candidates else NO_DIRECTIVE


def build_directive(languages: Iterable) -> str:
    """Build a directive string from source languages, in priority order."""
    codes = [
        lang.value if isinstance(lang, ScriptCode) else str(lang).strip().upper()
        for lang in languages
    ]
    return f"{DIRECTIVE_PREFIX}={DIRECTIVE_SEPARATOR.join(codes)}"


def _source_value(sources: Sequence[LanguageValue], language: str) -> Optional[str]:
    for entry in sources:
        if entry.language.strip().upper() == language and entry.value:
            return entry.value
    return None


def _resolve_entry(
    entry: LanguageValue,
    directive: Directive,
    sources: Sequence[LanguageValue],
) -> LanguageValue:
    to_scheme = scripts.scheme_for(entry.language)
    if to_scheme is None:
        logger.debug("Directive on %s left unresolved: no target scheme", entry.language)
        return entry

    for candidate in directive.candidates:
        from_scheme = scripts.scheme_for(candidate)
        text = _source_value(sources, candidate)
        if from_scheme and text:
            return LanguageValue(entry.language, scripts.convert(text, from_scheme, to_scheme))

    logger.debug(
        "Directive on %s left unresolved: no source among %s",
        entry.language, "|".join(directive.candidates),
    )
    return entry


def _fill_source(sources: Sequence[LanguageValue]) -> Optional[LanguageValue]:
    for language in FILL_SOURCE_PRIORITY:
        for entry in sources:
            if entry.language.strip().upper() == language and entry.value:
                return entry
    for entry in sources:
        if entry.value and scripts.has_scheme(entry.language):
            return entry
    return None


def resolve_directives(
    entries: Optional[Sequence[LanguageValue]],
    fill_languages: Optional[Iterable] = None,
) -> Optional[list[LanguageValue]]:
    """
    Resolve transliteration directives in a list of language values.

    Args:
        entries: Ordered language values; order is the directive candidate order.
        fill_languages: Languages to append when absent from `entries`.

    Returns:
        A new list with directives substituted (or left as-is when unresolved)
        and any filled languages appended. None passes through as None.
    """
    if entries is None:
        return None

    # Only originally-present, non-directive entries may act as sources.
    sources = [entry for entry in entries if not is_directive(entry.value)]

    resolved = []
    for entry in entries:
        directive = parse_directive(entry.value)
        if directive:
            resolved.append(_resolve_entry(entry, directive, sources))
        else:
            resolved.append(entry)

    if not fill_languages:
        return resolved

    present = {entry.language.strip().upper() for entry in resolved}
    source = _fill_source(sources)

    for language in fill_languages:
        code = language.value if isinstance(language, ScriptCode) else str(language).strip().upper()
        if code in present:
            continue
        to_scheme = scripts.scheme_for(code)
        if source is None or to_scheme is None:
            continue
        from_scheme = scripts.scheme_for(source.language)
        resolved.append(LanguageValue(code, scripts.convert(source.value, from_scheme, to_scheme)))
        present.add(code)

    return resolved
