"""
Lexicon Entry Processor

Turns one tabular dictionary row into a ProcessedDictionaryWord: word and
description transcripts in every supported script plus the phonetic search
string. Routing depends on the source dictionary's configuration; the
processor itself holds no state between rows.
"""

from typing import Iterable, Mapping, Optional

from . import scripts
from .converters.markup_converter import MarkupConverter, looks_like_markup
from .dictionaries import (
    DictionaryConfig,
    DictionaryKind,
    DictionaryName,
    UnknownDictionaryError,
    get_dictionary_config,
)
from .models import LanguageValue, ProcessedDictionaryWord, RowValidation, ScriptCode
from .phonetic import DEFAULT_MAX_LENGTH, generate_phonetic_string


class RowProcessingError(Exception):
    """Raised when a single dictionary row cannot be processed."""

    def __init__(self, word_index: int, message: str):
        super().__init__(f"row {word_index}: {message}")
        self.word_index = word_index
        self.message = message


class LexiconProcessor:
    """
    Processes rows of one source dictionary.

    Args:
        dictionary: Dictionary name or DictionaryName member.
        include_markup: Run the markup parser on descriptions even when they
            carry no recognizable tags.
        columns: Column names available in the source table. Defaults to the
            keys of each row.
        max_length: Per-value truncation applied by the phonetic generator.

    Raises:
        UnknownDictionaryError: If the dictionary is not supported.
    """

    def __init__(
        self,
        dictionary,
        include_markup: bool = False,
        columns: Optional[Iterable[str]] = None,
        max_length: int = DEFAULT_MAX_LENGTH,
    ):
        self.config: DictionaryConfig = get_dictionary_config(dictionary)
        self.include_markup = include_markup
        self.columns = frozenset(columns) if columns is not None else None
        self.max_length = max_length

    @property
    def name(self) -> DictionaryName:
        return self.config.name

    def process(self, row: Mapping, word_index: int) -> ProcessedDictionaryWord:
        """
        Process a single row.

        Args:
            row: Column name to value mapping.
            word_index: 1-based position of the row in its dictionary.

        Returns:
            The processed entry.
        """
        word = self._extract_word(row)
        description = self._extract_description(row)

        word_transcripts = self._word_transcripts(word)
        description_transcripts = self._description_transcripts(description, word)

        entry = ProcessedDictionaryWord(
            word_index=word_index,
            origin=self.config.origin,
            word=word_transcripts,
            description=description_transcripts,
            phonetic=generate_phonetic_string(
                word_transcripts, description_transcripts, self.max_length
            ),
            source_data=self._source_data(row),
        )

        lnum = row.get("lnum")
        if lnum is not None and lnum != "":
            entry.word_lnum = int(float(lnum))

        return entry

    def process_rows(self, rows: Iterable[Mapping], start_index: int = 1) -> list[ProcessedDictionaryWord]:
        """Process rows in order, numbering them from `start_index`."""
        return [self.process(row, index) for index, row in enumerate(rows, start=start_index)]

    def validate(self, row: Mapping) -> RowValidation:
        """Check that a row carries the columns its dictionary needs."""
        errors = []
        name = self.config.name.value

        if self.config.word_field not in row:
            errors.append(
                f"Missing word field '{self.config.word_field}' for dictionary '{name}'"
            )

        columns = self._columns_for(row)
        if not any(field in columns for field in self.config.description_fields):
            errors.append(
                f"Missing description field '{self.config.description_field}' "
                f"for dictionary '{name}'"
            )

        return RowValidation(is_valid=not errors, errors=tuple(errors))

    # --- extraction ---

    def _columns_for(self, row: Mapping) -> frozenset:
        return self.columns if self.columns is not None else frozenset(row.keys())

    def _extract_word(self, row: Mapping) -> str:
        value = row.get(self.config.word_field)
        return str(value) if value else ""

    def _extract_description(self, row: Mapping) -> str:
        fields = self.config.description_fields
        if len(fields) == 1:
            value = row.get(fields[0])
            return str(value) if value else ""

        # Comma-joined fields: combine in order, skipping absent or empty ones.
        columns = self._columns_for(row)
        values = [str(row.get(field) or "") for field in fields if field in columns]
        return " ".join(value for value in values if value)

    def _source_data(self, row: Mapping) -> dict:
        return {
            "data": dict(row),
            "wordField": self.config.word_field,
            "descriptionField": self.config.description_field,
            "wordLang": self.config.word_language,
            "descriptionLang": self.config.description_language,
        }

    # --- transcripts ---

    def _word_transcripts(self, word: str) -> list[LanguageValue]:
        kind = self.config.kind

        if kind is DictionaryKind.SANSKRIT_SANSKRIT:
            return _all_schemes(word, scripts.DEVANAGARI, trim=True)

        if kind is DictionaryKind.SANSKRIT:
            return _all_schemes(word, scripts.SLP1)

        return [LanguageValue.of(ScriptCode.ENG, word)]

    def _description_transcripts(self, text: str, word: str) -> list[LanguageValue]:
        config = self.config
        kind = config.kind
        has_markup = self.include_markup or looks_like_markup(text)

        if kind is DictionaryKind.SANSKRIT_SANSKRIT:
            return _all_schemes(text, scripts.DEVANAGARI, trim=True)

        if kind is DictionaryKind.ENGLISH_ENGLISH:
            return [LanguageValue.of(ScriptCode.ENG, text.strip())]

        if not config.transliterate_description:
            # English prose wrapped in dictionary markup
            value = MarkupConverter.convert(text, config.name, key_word=word) if has_markup else text
            return [LanguageValue.of(ScriptCode.ENG, value.strip())]

        if kind is DictionaryKind.ENGLISH_TELUGU:
            return _all_schemes(text, scripts.TELUGU, trim=True)

        transcripts = []
        for scheme in scripts.TRANSCRIPT_SCHEMES:
            if has_markup:
                value = MarkupConverter.convert(text, config.name, key_word=word, to_scheme=scheme)
            else:
                value = scripts.convert(text, scripts.SLP1, scheme)
            transcripts.append(LanguageValue(scripts.language_for_scheme(scheme), value.strip()))
        return transcripts


def _all_schemes(text: str, from_scheme: str, trim: bool = False) -> list[LanguageValue]:
    """Render text into every transcript scheme."""
    transcripts = []
    for scheme in scripts.TRANSCRIPT_SCHEMES:
        value = scripts.convert(text, from_scheme, scheme)
        if trim:
            value = value.strip()
        transcripts.append(LanguageValue(scripts.language_for_scheme(scheme), value))
    return transcripts


def process_row(
    row: Mapping,
    dictionary,
    word_index: int,
    columns: Optional[Iterable[str]] = None,
    include_markup: bool = False,
) -> ProcessedDictionaryWord:
    """Process a single row of `dictionary`. See LexiconProcessor.process."""
    processor = LexiconProcessor(dictionary, include_markup=include_markup, columns=columns)
    return processor.process(row, word_index)


def process_rows(
    rows: Iterable[Mapping],
    dictionary,
    columns: Optional[Iterable[str]] = None,
    include_markup: bool = False,
) -> list[ProcessedDictionaryWord]:
    """Process rows of `dictionary`, with word indices starting at 1."""
    processor = LexiconProcessor(dictionary, include_markup=include_markup, columns=columns)
    return processor.process_rows(rows)


def validate_row(row: Mapping, dictionary) -> RowValidation:
    """
    Check a row against its dictionary's configuration.

    An unknown dictionary is reported as a validation error rather than raised.
    """
    try:
        processor = LexiconProcessor(dictionary)
    except UnknownDictionaryError as e:
        return RowValidation(is_valid=False, errors=(str(e),))
    return processor.validate(row)
