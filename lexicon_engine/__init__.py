"""
Lexicon Engine - multi-script dictionary processing

Converts Sanskrit, Telugu and English dictionary entries between scripts,
turns their markup into markdown, resolves transliteration directives and
builds phonetic search strings for lookup in any romanization.
"""

from .core import LexiconProcessor, RowProcessingError, process_row, process_rows, validate_row
from .dictionaries import ConfigurationError, DictionaryName, UnknownDictionaryError, get_dictionary_config
from .directives import parse_directive, resolve_directives
from .models import LanguageValue, ProcessedDictionaryWord, ScriptCode
from .phonetic import generate_phonetic_string
from .scripts import convert

__version__ = "1.0.0"

__all__ = [
    "ConfigurationError",
    "DictionaryName",
    "LanguageValue",
    "LexiconProcessor",
    "ProcessedDictionaryWord",
    "RowProcessingError",
    "ScriptCode",
    "UnknownDictionaryError",
    "convert",
    "generate_phonetic_string",
    "get_dictionary_config",
    "parse_directive",
    "process_row",
    "process_rows",
    "resolve_directives",
    "validate_row",
]
