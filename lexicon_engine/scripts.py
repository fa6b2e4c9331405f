"""
Script conversion primitive.

Thin wrapper over indic_transliteration's sanscript module. Every caller in the
engine goes through `convert`, which never raises: a failed conversion is
logged and the input text comes back unchanged.
"""

import logging
from types import MappingProxyType
from typing import Optional

from indic_transliteration import sanscript

from .models import ScriptCode

logger = logging.getLogger(__name__)

DEVANAGARI = "devanagari"
TELUGU = "telugu"
TAMIL = "tamil"
IAST = "iast"
SLP1 = "slp1"
ITRANS = "itrans"
ITRANS_DRAVIDIAN = "itrans_dravidian"

# Older sanscript releases ship plain ITRANS only.
ITRANS_SCHEME = ITRANS_DRAVIDIAN if ITRANS_DRAVIDIAN in sanscript.SCHEMES else ITRANS

LANGUAGE_SCHEME_MAP = MappingProxyType({
    ScriptCode.SAN.value: DEVANAGARI,
    ScriptCode.TEL.value: TELUGU,
    ScriptCode.TAM.value: TAMIL,
    ScriptCode.ITRANS.value: ITRANS_SCHEME,
    ScriptCode.IAST.value: IAST,
    ScriptCode.SLP1.value: SLP1,
})

# Schemes every Sanskrit headword/description is rendered into, in output order.
TRANSCRIPT_SCHEMES = (DEVANAGARI, ITRANS, IAST, SLP1, TELUGU)

SCHEME_LANGUAGE_MAP = MappingProxyType({
    DEVANAGARI: ScriptCode.SAN.value,
    ITRANS: ScriptCode.ITRANS.value,
    ITRANS_DRAVIDIAN: ScriptCode.ITRANS.value,
    IAST: ScriptCode.IAST.value,
    SLP1: ScriptCode.SLP1.value,
    TELUGU: ScriptCode.TEL.value,
    TAMIL: ScriptCode.TAM.value,
})


def scheme_for(language) -> Optional[str]:
    """Return the transliteration scheme for a language code, or None."""
    if isinstance(language, ScriptCode):
        language = language.value
    if not isinstance(language, str):
        return None
    return LANGUAGE_SCHEME_MAP.get(language.strip().upper())


def has_scheme(language) -> bool:
    return scheme_for(language) is not None


def language_for_scheme(scheme: str) -> Optional[str]:
    """Return the language code a scheme is stored under, or None."""
    return SCHEME_LANGUAGE_MAP.get(scheme)


def is_known_scheme(scheme: str) -> bool:
    return scheme in sanscript.SCHEMES


def convert(text: str, from_scheme: str, to_scheme: str) -> str:
    """
    Convert text between two transliteration schemes.

    Args:
        text: The text to convert.
        from_scheme: Scheme identifier the text is written in.
        to_scheme: Scheme identifier to convert into.

    Returns:
        The converted text, or the original text if conversion is not possible.
    """
    if not text or from_scheme == to_scheme:
        return text

    for scheme in (from_scheme, to_scheme):
        if not is_known_scheme(scheme):
            logger.warning(
                "Cannot transliterate %r from %s to %s: unknown scheme %r",
                text, from_scheme, to_scheme, scheme,
            )
            return text

    try:
        return sanscript.transliterate(text, from_scheme, to_scheme)
    except Exception as e:
        logger.warning(
            "Failed to transliterate %r from %s to %s: %s",
            text, from_scheme, to_scheme, e,
        )
        return text
