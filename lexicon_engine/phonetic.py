"""
Phonetic index generation.

Builds one compact search string per dictionary entry from its word and
description values. Non-English values are transliterated into ITRANS and SLP1
so that a query typed in any romanization finds the entry; stop words,
numbers and markup debris are filtered out and duplicates dropped.
"""

import re
from typing import Iterable, Optional

from . import scripts
from .models import LanguageValue, ScriptCode

DEFAULT_MAX_LENGTH = 1000
MIN_WORD_LENGTH = 3
MAX_WORD_LENGTH = 50

TAG_PATTERN = re.compile(r"<[^>]+>")
SPECIAL_CHARS_PATTERN = re.compile(r"[<>{}\[\]().,;:!?\"'\-_=+*/\\|`~@#$%^&“”‘’]+")
NUMBER_PATTERN = re.compile(r"^\d+$")
WHITESPACE_PATTERN = re.compile(r"\s+")

# Token boundaries inside a non-English value, including the Devanagari dandas.
TOKEN_SPLIT_PATTERN = re.compile(r"[\s,;:!?()\[\]{}\"'|।॥]+")
PLAIN_TOKEN_PATTERN = re.compile(r"[A-Za-z0-9]+")

# Basic Latin alphanumerics, Latin Extended-A and Extended Additional
# (IAST diacritics), Devanagari, Telugu.
VALID_CHARS_PATTERN = re.compile(r"[a-zA-Z0-9\u0100-\u017F\u1E00-\u1EFF\u0900-\u097F\u0C00-\u0C7F]")

HTML_ENTITIES = (
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&nbsp;", " "),
)

_ENGLISH_STOP_WORDS = (
    "a", "an", "the", "and", "or", "but", "in", "on", "at", "to", "for", "of",
    "with", "by", "from", "as", "is", "are", "was", "were", "be", "been",
    "being", "have", "has", "had", "do", "does", "did", "will", "would",
    "could", "should", "may", "might", "can", "must", "shall", "this", "that",
    "these", "those", "he", "she", "it", "they", "we", "you", "i", "me", "him",
    "her", "us", "them", "my", "your", "his", "its", "our", "their", "also",
    "only", "just", "very", "more", "most", "such", "some", "any", "each",
    "every", "all", "both", "either", "neither", "same", "different", "other",
    "another", "one", "two", "first", "last", "next", "previous", "many",
    "much", "few", "little", "less", "least", "than", "then", "now", "here",
    "there", "where", "when", "why", "how", "what", "which", "who", "whom",
    "whose", "if", "unless", "until", "while", "during", "before", "after",
    "above", "below", "up", "down", "out", "over", "under", "again",
    "further", "once", "see", "used", "name", "epithet", "term", "word",
    "meaning", "called", "known",
    # dictionary register
    "said", "says", "named", "cf", "etc", "viz", "lit", "literally",
    "figuratively", "metaphorically", "esp", "especially", "particularly",
    "generally", "usually", "commonly", "often", "sometimes", "always",
    "never", "rarely", "frequently",
)

_TELUGU_STOP_WORDS = (
    "అను", "అందు", "అందువల్ల", "అంటే", "అయితే", "ఇది", "కాదు", "ఇలా",
    "మాత్రమే", "కాని", "అయిన", "అయినప్పటికీ",
    "చ", "వా", "తు", "హి", "ఏవ", "అపి", "తథా", "యథా", "ఇతి", "కిన్తు",
    "పరన్తు", "అథవా", "యది", "చేత్", "తర్హి", "తదా", "సః", "సా", "తత్",
    "తే", "తాః", "తాని", "ఏషః", "ఏషా", "ఏతత్", "ఏతే", "ఏతాః", "ఏతాని",
)

_SANSKRIT_STOP_WORDS = (
    "च", "वा", "तु", "हि", "एव", "अपि", "तथा", "यथा", "इति", "किन्तु",
    "परन्तु", "अथवा", "यदि", "चेत्", "तर्हि", "तदा", "सः", "सा", "तत्", "ते",
    "ताः", "तानि", "एषः", "एषा", "एतत्", "एते", "एताः", "एतानि",
)

_ROMAN_STOP_WORDS = (
    # IAST
    "vā", "tu", "tathā", "yathā", "athavā", "tadā", "saḥ", "sā", "tāḥ",
    "tāni", "eṣaḥ", "eṣā", "etāḥ", "etāni",
    # SLP1
    "ca", "vA", "eva", "taTA", "yaTA", "aTavA", "cet", "tadA", "saH", "sA",
    "te", "tAH", "tAni", "ezaH", "ezA", "etat", "ete", "etAH", "etAni",
    # ITRANS
    "cha", "hi", "Eva", "api", "tathA", "yathA", "iti", "kintu", "parantu",
    "athavA", "yadi", "chEt", "tarhi", "tat", "tE", "EShaH", "EShA", "Etat",
    "EtE", "EtAH", "EtAni",
)

# Tokens are lower-cased before lookup, so the set is too.
STOP_WORDS = frozenset(
    word.lower()
    for group in (_ENGLISH_STOP_WORDS, _TELUGU_STOP_WORDS, _SANSKRIT_STOP_WORDS, _ROMAN_STOP_WORDS)
    for word in group
)


def clean_text(text: str) -> str:
    """Strip markup, entities and special characters; collapse whitespace; lowercase."""
    if not text:
        return ""

    cleaned = TAG_PATTERN.sub("", text)
    for entity, replacement in HTML_ENTITIES:
        cleaned = cleaned.replace(entity, replacement)
    cleaned = SPECIAL_CHARS_PATTERN.sub(" ", cleaned)
    cleaned = WHITESPACE_PATTERN.sub(" ", cleaned).strip()
    return cleaned.lower()


def extract_meaningful_words(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> list[str]:
    """
    Extract searchable words from text.

    Args:
        text: Raw text, possibly containing markup.
        max_length: Text beyond this many characters is ignored.

    Returns:
        Cleaned words, minus short, numeric, overlong and stop words.
    """
    if not text:
        return []

    cleaned = clean_text(text[:max_length])
    words = []
    for word in cleaned.split():
        if len(word) < MIN_WORD_LENGTH:
            continue
        if NUMBER_PATTERN.match(word):
            continue
        if word in STOP_WORDS:
            continue
        if len(word) > MAX_WORD_LENGTH:
            continue
        words.append(word)
    return words


def get_transliterated_words(item: Optional[LanguageValue]) -> list[str]:
    """
    Return the searchable spellings of one language value.

    English values and values in languages without a scheme come back as-is.
    Otherwise ASCII tokens pass through together, and the remaining tokens are
    joined and rendered in ITRANS and SLP1.
    """
    if item is None or not item.value:
        return []

    value = item.value.strip()
    if not value:
        return []

    language = (item.language or "").strip().upper()
    if language == ScriptCode.ENG.value:
        return [value]

    scheme = scripts.scheme_for(language)
    if scheme is None:
        return [value]

    tokens = [token for token in TOKEN_SPLIT_PATTERN.split(value) if token]
    plain = [token for token in tokens if PLAIN_TOKEN_PATTERN.fullmatch(token)]
    foreign = [token for token in tokens if not PLAIN_TOKEN_PATTERN.fullmatch(token)]

    words = []
    if plain:
        words.append(" ".join(plain))

    if foreign:
        source = " ".join(foreign)
        converted = []
        for target in (scripts.ITRANS_SCHEME, scripts.SLP1):
            if target == scheme:
                continue
            result = scripts.convert(source, scheme, target)
            if result and result != source and result not in converted:
                converted.append(result)
        words.extend(converted or [source])

    return words


def _mostly_invalid(word: str) -> bool:
    invalid = len(VALID_CHARS_PATTERN.sub("", word))
    return invalid > len(word) * 0.5


def generate_phonetic_string(
    words: Optional[Iterable[LanguageValue]] = None,
    descriptions: Optional[Iterable[LanguageValue]] = None,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> str:
    """
    Generate the phonetic search string for an entry.

    Args:
        words: Word values in any language.
        descriptions: Description values in any language.
        max_length: Each value is truncated to this many characters before
            it is tokenized.

    Returns:
        Unique search tokens joined by single spaces, in first-seen order.
    """
    all_words = []
    for item in [*(words or ()), *(descriptions or ())]:
        if item is None or not item.value or not item.value.strip():
            continue
        truncated = LanguageValue(item.language, item.value.strip()[:max_length])
        for text in get_transliterated_words(truncated):
            all_words.extend(extract_meaningful_words(text, max_length))

    seen = set()
    unique_words = []
    for word in all_words:
        key = word.lower()
        if key in seen or len(key) < 2:
            continue
        if _mostly_invalid(word):
            continue
        seen.add(key)
        unique_words.append(word)

    return " ".join(unique_words)
