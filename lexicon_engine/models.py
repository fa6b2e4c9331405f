"""
Core data structures for the lexicon engine.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ScriptCode(Enum):
    """Language codes carried on multi-script text values."""
    SAN = "SAN"
    TEL = "TEL"
    TAM = "TAM"
    IAST = "IAST"
    ITRANS = "ITRANS"
    SLP1 = "SLP1"
    ENG = "ENG"

    @classmethod
    def parse(cls, value: Any) -> Optional["ScriptCode"]:
        """Return the matching code, or None for unknown languages."""
        if isinstance(value, ScriptCode):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


@dataclass(frozen=True)
class LanguageValue:
    """
    A unit of multi-script text.

    `language` is kept as the raw string the caller supplied, so that entries
    tagged with languages the engine does not know survive a round trip.
    """
    language: str
    value: str

    @property
    def script(self) -> Optional[ScriptCode]:
        return ScriptCode.parse(self.language)

    @classmethod
    def of(cls, language: "ScriptCode | str", value: str) -> "LanguageValue":
        if isinstance(language, ScriptCode):
            language = language.value
        return cls(language=language, value=value)

    @classmethod
    def from_dict(cls, data: dict) -> "LanguageValue":
        return cls(
            language=str(data.get("language") or ""),
            value=str(data.get("value") or ""),
        )

    def to_dict(self) -> dict:
        return {"language": self.language, "value": self.value}


@dataclass
class ProcessedDictionaryWord:
    """A dictionary row turned into word/description transcripts plus its search string."""
    word_index: int
    origin: str
    word: list[LanguageValue]
    description: list[LanguageValue]
    phonetic: str
    source_data: dict = field(default_factory=dict)
    word_lnum: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        data = {
            "wordIndex": self.word_index,
            "origin": self.origin,
            "word": [item.to_dict() for item in self.word],
            "description": [item.to_dict() for item in self.description],
            "phonetic": self.phonetic,
            "sourceData": self.source_data,
        }
        if self.word_lnum is not None:
            data["wordLnum"] = self.word_lnum
        return data


@dataclass(frozen=True)
class RowValidation:
    """Outcome of checking a raw row against its dictionary configuration."""
    is_valid: bool
    errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class ImportProgress:
    """Progress snapshot emitted after each import batch."""
    dictionary: str
    batch_number: int
    processed: int
    total: int
    errors: int

    @property
    def percent(self) -> float:
        if self.total <= 0:
            return 100.0
        return round(self.processed / self.total * 100, 1)


@dataclass
class ImportResult:
    """Summary of one dictionary import run."""
    dictionary: str
    total_rows: int = 0
    processed_rows: int = 0
    valid_rows: int = 0
    invalid_rows: int = 0
    errors: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def succeeded(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {
            "dictionary": self.dictionary,
            "total_rows": self.total_rows,
            "processed_rows": self.processed_rows,
            "valid_rows": self.valid_rows,
            "invalid_rows": self.invalid_rows,
            "errors": list(self.errors),
            "duration_seconds": self.duration_seconds,
        }
