"""
Pytest configuration and shared fixtures.
"""

import sqlite3
import sys
from pathlib import Path

import pytest

# Add the project root to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from lexicon_engine.converters.markup_converter import LexiconMarkupParser, ParserConfig
from lexicon_engine.core import LexiconProcessor
from lexicon_engine.models import LanguageValue, ScriptCode
from tests.fixtures.sample_entries import ENG2TE_ROWS, MW_ROWS


# ============================================================================
# Pytest Hooks
# ============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark as integration test")


# ============================================================================
# Parser Fixtures
# ============================================================================


@pytest.fixture
def markup_parser():
    """Create a generic markup parser."""
    return LexiconMarkupParser()


@pytest.fixture
def mw_parser():
    """Create a parser configured for Monier-Williams entries."""
    return LexiconMarkupParser(ParserConfig.for_dictionary("mw", key_word="agni"))


# ============================================================================
# Processor Fixtures
# ============================================================================


@pytest.fixture
def mw_processor():
    """Create an entry processor for Monier-Williams."""
    return LexiconProcessor("mw")


@pytest.fixture
def eng2te_processor():
    """Create an entry processor for the English-Telugu dictionary."""
    return LexiconProcessor("eng2te")


# ============================================================================
# Language Value Fixtures
# ============================================================================


@pytest.fixture
def sanskrit_values():
    """The same word in several scripts."""
    return [
        LanguageValue.of(ScriptCode.SAN, "राम"),
        LanguageValue.of(ScriptCode.IAST, "rāma"),
        LanguageValue.of(ScriptCode.SLP1, "rAma"),
    ]


# ============================================================================
# Temporary Database Fixtures
# ============================================================================


def _create_table(conn, table, columns, rows):
    column_sql = ", ".join(f'"{column}"' for column in columns)
    placeholders = ", ".join("?" for _ in columns)
    conn.execute(f'CREATE TABLE "{table}" ({column_sql})')
    conn.executemany(
        f'INSERT INTO "{table}" ({column_sql}) VALUES ({placeholders})',
        [tuple(row.get(column) for column in columns) for row in rows],
    )


@pytest.fixture
def dictionary_db(tmp_path):
    """Create a SQLite file holding small mw and eng2te tables."""
    db_path = tmp_path / "lexicon.sqlite"
    conn = sqlite3.connect(db_path)
    try:
        # Inserted out of order to exercise ordering by lnum
        _create_table(conn, "mw", ["lnum", "key", "data"], list(reversed(MW_ROWS)))
        _create_table(conn, "eng2te", ["eng_word", "pos", "pos_type", "meaning"], ENG2TE_ROWS)
        conn.commit()
    finally:
        conn.close()
    return db_path
