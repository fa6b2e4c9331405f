"""
Unit tests for the lexicon entry processor.
"""

import pytest

from lexicon_engine import scripts
from lexicon_engine.core import (
    LexiconProcessor,
    RowProcessingError,
    process_row,
    process_rows,
    validate_row,
)
from lexicon_engine.dictionaries import UnknownDictionaryError
from tests.fixtures.sample_entries import (
    DHATU_PATA_ROWS,
    ENG2EN_ROWS,
    ENG2TE_ROWS,
    MW_ROWS,
    PE_ROWS,
    is_devanagari,
    is_telugu,
)

TRANSCRIPT_LANGUAGES = ["SAN", "ITRANS", "IAST", "SLP1", "TEL"]


def by_language(values):
    return {item.language: item.value for item in values}


class TestSanskritDictionaryRows:
    """Tests for SLP1-keyed dictionaries such as mw."""

    def test_word_transcripts(self, mw_processor):
        """Test that the headword is rendered in every transcript scheme."""
        entry = mw_processor.process(MW_ROWS[0], 1)
        words = by_language(entry.word)

        assert [item.language for item in entry.word] == TRANSCRIPT_LANGUAGES
        assert words["SAN"] == "अग्नि"
        assert words["SLP1"] == "agni"
        assert words["IAST"] == "agni"
        assert is_telugu(words["TEL"])

    def test_markup_description_per_scheme(self, mw_processor):
        """Test that markup descriptions are converted once per scheme."""
        entry = mw_processor.process(MW_ROWS[0], 1)
        descriptions = by_language(entry.description)

        assert [item.language for item in entry.description] == TRANSCRIPT_LANGUAGES
        assert descriptions["SAN"].startswith("अग्नि m. fire")
        assert descriptions["SLP1"].startswith("agni m. fire")
        assert "  \nthe god of fire" in descriptions["SAN"]

    def test_plain_description_is_transliterated(self, mw_processor):
        """Test descriptions without markup."""
        entry = mw_processor.process(MW_ROWS[2], 3)
        descriptions = by_language(entry.description)

        assert descriptions["SLP1"] == MW_ROWS[2]["data"]
        assert is_devanagari(descriptions["SAN"])

    def test_entry_metadata(self, mw_processor):
        """Test origin, index, lnum and source data."""
        entry = mw_processor.process(MW_ROWS[1], 2)

        assert entry.word_index == 2
        assert entry.origin == "MW"
        assert entry.word_lnum == 2
        assert entry.source_data == {
            "data": MW_ROWS[1],
            "wordField": "key",
            "descriptionField": "data",
            "wordLang": "SLP1",
            "descriptionLang": "SLP1",
        }

    def test_phonetic_string(self, mw_processor):
        """Test that the search string covers word and description."""
        entry = mw_processor.process(MW_ROWS[0], 1)
        tokens = entry.phonetic.split()

        assert "agni" in tokens
        assert "fire" in tokens
        assert "the" not in tokens

    def test_include_markup_forces_parser(self):
        """Test that include_markup runs plain text through the parser."""
        entry = LexiconProcessor("mw", include_markup=True).process({"key": "a", "data": "fire"}, 1)
        assert by_language(entry.description)["SAN"] == "fire"


class TestOtherDictionaryRows:
    """Tests for the non-SLP1 dictionaries."""

    def test_english_telugu(self, eng2te_processor):
        """Test combined description columns and Telugu transliteration."""
        entry = eng2te_processor.process(ENG2TE_ROWS[1], 1)

        assert [item.to_dict() for item in entry.word] == [{"language": "ENG", "value": "water"}]
        assert entry.origin == "ENG2TEL"
        descriptions = by_language(entry.description)
        assert [item.language for item in entry.description] == TRANSCRIPT_LANGUAGES
        assert descriptions["TEL"] == "n. noun నీరు"
        assert entry.word_lnum is None

    def test_empty_description_columns_are_skipped(self, eng2te_processor):
        """Test that empty columns do not leave double spaces."""
        entry = eng2te_processor.process(ENG2TE_ROWS[0], 1)
        assert by_language(entry.description)["TEL"] == "n. అగ్ని"

    def test_columns_limit_description_fields(self):
        """Test that only columns present in the table are combined."""
        processor = LexiconProcessor("eng2te", columns=["eng_word", "meaning"])
        entry = processor.process(ENG2TE_ROWS[1], 1)
        assert by_language(entry.description)["TEL"] == "నీరు"

    def test_english_english(self):
        """Test a single trimmed English description."""
        entry = process_row(ENG2EN_ROWS[0], "eng2en", 1)

        assert entry.origin == "ENG2ENG"
        assert [item.to_dict() for item in entry.description] == [
            {"language": "ENG", "value": "n. the vocabulary of a language"}
        ]

    def test_dhatu_pata(self):
        """Test Devanagari words and descriptions, trimmed."""
        entry = process_row(DHATU_PATA_ROWS[0], "dhatu_pata", 1)
        words = by_language(entry.word)
        descriptions = by_language(entry.description)

        assert words["SAN"] == "भू"
        assert words["SLP1"] == "BU"
        assert descriptions["SAN"] == "सत्तायाम्"
        assert descriptions["IAST"] == "sattāyām"

    def test_english_prose_dictionary(self):
        """Test that pe descriptions become markdown without transliteration."""
        entry = process_row(PE_ROWS[0], "pe", 1)

        assert [item.language for item in entry.word] == TRANSCRIPT_LANGUAGES
        assert [item.to_dict() for item in entry.description] == [
            {"language": "ENG", "value": "*Agastya* is a sage.  \nHe drank the ocean."}
        ]

    def test_english_prose_without_markup_is_kept(self):
        """Test that plain pe text is only trimmed."""
        entry = process_row({"key": "a", "data": "  plain text  "}, "pe", 1)
        assert entry.description[0].value == "plain text"

    def test_missing_columns_give_empty_values(self):
        """Test that absent word and description columns do not raise."""
        entry = process_row({}, "eng2en", 1)
        assert entry.word[0].value == ""
        assert entry.description[0].value == ""
        assert entry.phonetic == ""


class TestModuleFunctions:
    """Tests for the module-level helpers."""

    def test_process_rows_numbers_from_one(self):
        """Test word indices assigned by process_rows."""
        entries = process_rows(MW_ROWS, "mw")
        assert [entry.word_index for entry in entries] == [1, 2, 3]

    def test_unknown_dictionary_raises(self):
        """Test that processing rows of an unknown dictionary fails."""
        with pytest.raises(UnknownDictionaryError):
            process_row(MW_ROWS[0], "klingon", 1)

    def test_to_dict(self):
        """Test the serialized form of a processed entry."""
        data = process_row(MW_ROWS[0], "mw", 7).to_dict()

        assert data["wordIndex"] == 7
        assert data["wordLnum"] == 1
        assert data["origin"] == "MW"
        assert data["word"][0] == {"language": "SAN", "value": "अग्नि"}
        assert set(data) == {
            "wordIndex", "origin", "word", "description", "phonetic", "sourceData", "wordLnum"
        }

    def test_bad_lnum_raises(self):
        """Test that a non-numeric lnum surfaces as an error."""
        with pytest.raises(ValueError):
            process_row({"lnum": "x", "key": "agni", "data": ""}, "mw", 1)

    def test_row_processing_error_message(self):
        """Test the row error format."""
        error = RowProcessingError(12, "bad data")
        assert str(error) == "row 12: bad data"
        assert error.word_index == 12


class TestValidateRow:
    """Tests for validate_row."""

    def test_valid_row(self):
        """Test a row with all required columns."""
        result = validate_row(MW_ROWS[0], "mw")
        assert result.is_valid
        assert result.errors == ()

    def test_missing_word_field(self):
        """Test a row lacking its word column."""
        result = validate_row({"data": "x"}, "mw")
        assert not result.is_valid
        assert "Missing word field 'key'" in result.errors[0]

    def test_missing_description_fields(self):
        """Test a row lacking every description column."""
        result = validate_row({"eng_word": "fire"}, "eng2te")
        assert not result.is_valid
        assert "pos,pos_type,meaning" in result.errors[0]

    def test_partial_description_fields_are_enough(self):
        """Test that one of several description columns suffices."""
        assert validate_row({"eng_word": "fire", "meaning": "అగ్ని"}, "eng2te").is_valid

    def test_unknown_dictionary_is_reported(self):
        """Test that validation reports rather than raises."""
        result = validate_row(MW_ROWS[0], "klingon")
        assert not result.is_valid
        assert "klingon" in result.errors[0]
