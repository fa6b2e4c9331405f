"""
Unit tests for the dictionary configuration table.
"""

from dataclasses import replace

import pytest

from lexicon_engine import scripts
from lexicon_engine.dictionaries import (
    DICTIONARY_CONFIGS,
    ConfigurationError,
    DictionaryKind,
    DictionaryName,
    UnknownDictionaryError,
    dictionary_name,
    get_dictionary_config,
    list_dictionaries,
    validate_dictionary_table,
)


class TestDictionaryLookup:
    """Tests for resolving dictionary names."""

    def test_every_name_has_a_config(self):
        """Test that the table covers the whole enum."""
        assert set(DICTIONARY_CONFIGS) == set(DictionaryName)
        assert len(list_dictionaries()) == len(DictionaryName)

    def test_lookup_by_string_and_enum(self):
        """Test that names resolve regardless of form and case."""
        assert get_dictionary_config("mw") is get_dictionary_config(DictionaryName.MW)
        assert dictionary_name(" MW ") is DictionaryName.MW

    def test_unknown_name_raises(self):
        """Test that unknown dictionaries raise a configuration error."""
        with pytest.raises(UnknownDictionaryError, match="klingon"):
            get_dictionary_config("klingon")

    def test_unknown_dictionary_is_a_configuration_error(self):
        """Test the exception hierarchy."""
        assert issubclass(UnknownDictionaryError, ConfigurationError)

    def test_table_is_read_only(self):
        """Test that the shared table cannot be modified."""
        with pytest.raises(TypeError):
            DICTIONARY_CONFIGS[DictionaryName.MW] = None


class TestDictionaryConfig:
    """Tests for individual dictionary settings."""

    def test_sanskrit_defaults(self):
        """Test the settings shared by SLP1-keyed dictionaries."""
        config = get_dictionary_config("mw")

        assert config.kind is DictionaryKind.SANSKRIT
        assert config.is_sanskrit
        assert config.origin == "MW"
        assert config.table_name == "mw"
        assert config.word_field == "key"
        assert config.description_fields == ("data",)
        assert config.headword_tag == "s"
        assert config.headword_scheme == scripts.SLP1
        assert config.word_language == "SLP1"
        assert config.description_language == "SLP1"

    @pytest.mark.parametrize(
        "name,tag",
        [("bhs", "b"), ("lan", "b"), ("vei", "b"), ("ieg", "i"), ("mw72", "i"), ("pgn", "i")],
    )
    def test_non_default_headword_tags_use_iast(self, name, tag):
        """Test dictionaries whose headwords are italic or bold IAST."""
        config = get_dictionary_config(name)
        assert config.headword_tag == tag
        assert config.headword_scheme == scripts.IAST

    def test_english_telugu(self):
        """Test the English-Telugu dictionary settings."""
        config = get_dictionary_config("eng2te")

        assert config.kind is DictionaryKind.ENGLISH_TELUGU
        assert config.origin == "ENG2TEL"
        assert config.word_field == "eng_word"
        assert config.description_fields == ("pos", "pos_type", "meaning")
        assert config.description_field == "pos,pos_type,meaning"
        assert (config.word_language, config.description_language) == ("ENG", "TEL")

    def test_english_english(self):
        """Test the English-English dictionary settings."""
        config = get_dictionary_config("eng2en")

        assert config.origin == "ENG2ENG"
        assert config.table_name == "entries"
        assert config.description_field == "wordtype,definition"

    def test_dhatu_pata(self):
        """Test the Sanskrit-Sanskrit verb root list settings."""
        config = get_dictionary_config("dhatu_pata")

        assert config.kind is DictionaryKind.SANSKRIT_SANSKRIT
        assert config.table_name == "dictEntries"
        assert config.word_field == "word"
        assert config.description_fields == ("desc",)
        assert (config.word_language, config.description_language) == ("SAN", "SAN")

    @pytest.mark.parametrize("name", ["pe", "md", "pui", "pgn"])
    def test_markup_only_descriptions(self, name):
        """Test dictionaries whose descriptions are English prose."""
        assert not get_dictionary_config(name).transliterate_description

    @pytest.mark.parametrize("name", ["ae", "bor", "mwe"])
    def test_english_headword_dictionaries(self, name):
        """Test English-to-Sanskrit dictionaries."""
        config = get_dictionary_config(name)
        assert config.kind is DictionaryKind.ENGLISH
        assert not config.is_sanskrit
        assert config.word_language == "ENG"


class TestValidateDictionaryTable:
    """Tests for start-up validation of the table."""

    def test_shipped_table_is_valid(self):
        """Test that the shipped table passes validation."""
        validate_dictionary_table(DICTIONARY_CONFIGS)

    def test_missing_entry_is_rejected(self):
        """Test that a table lacking a dictionary fails."""
        table = dict(DICTIONARY_CONFIGS)
        del table[DictionaryName.WIL]

        with pytest.raises(ConfigurationError, match="wil"):
            validate_dictionary_table(table)

    def test_missing_word_field_is_rejected(self):
        """Test that an empty word field fails."""
        table = dict(DICTIONARY_CONFIGS)
        table[DictionaryName.MW] = replace(table[DictionaryName.MW], word_field="")

        with pytest.raises(ConfigurationError, match="word field"):
            validate_dictionary_table(table)

    def test_unknown_language_is_rejected(self):
        """Test that a language outside the script codes fails."""
        table = dict(DICTIONARY_CONFIGS)
        table[DictionaryName.MW] = replace(table[DictionaryName.MW], word_language="HIN")

        with pytest.raises(ConfigurationError, match="HIN"):
            validate_dictionary_table(table)
