from .markup_converter import (
    DEFAULT_TAG_HANDLERS,
    LexiconMarkupParser,
    MarkupConverter,
    ParserConfig,
    TagReplacement,
    clean_markup_content,
    convert_lexicon_markup,
    line_break_on_attribute,
    looks_like_markup,
    suppress_headword_repetition,
)

__all__ = [
    "DEFAULT_TAG_HANDLERS",
    "LexiconMarkupParser",
    "MarkupConverter",
    "ParserConfig",
    "TagReplacement",
    "clean_markup_content",
    "convert_lexicon_markup",
    "line_break_on_attribute",
    "looks_like_markup",
    "suppress_headword_repetition",
]
