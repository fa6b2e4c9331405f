"""
Per-dictionary configuration.

Every supported source dictionary has exactly one immutable DictionaryConfig,
keyed by the closed DictionaryName enum. The table is checked once at import
time so a missing or inconsistent entry fails the process at start-up instead
of surfacing as a per-row error later on.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from . import scripts
from .models import ScriptCode


class ConfigurationError(Exception):
    """Raised when the dictionary configuration is missing or inconsistent."""
    pass


class UnknownDictionaryError(ConfigurationError):
    """Raised when a dictionary name is not part of the dictionary table."""
    pass


class DictionaryName(Enum):
    """All supported source dictionaries."""
    AE = "ae"
    ACC = "acc"
    AP90 = "ap90"
    ARMH = "armh"
    BOR = "bor"
    BEN = "ben"
    BHS = "bhs"
    CAE = "cae"
    GST = "gst"
    IEG = "ieg"
    INM = "inm"
    KRM = "krm"
    LAN = "lan"
    MCI = "mci"
    MD = "md"
    MW = "mw"
    MWE = "mwe"
    MW72 = "mw72"
    PE = "pe"
    PUI = "pui"
    SHS = "shs"
    SKD = "skd"
    SNP = "snp"
    VCP = "vcp"
    VEI = "vei"
    WIL = "wil"
    YAT = "yat"
    PGN = "pgn"
    ENG2TE = "eng2te"
    ENG2EN = "eng2en"
    DHATU_PATA = "dhatu_pata"


class DictionaryKind(Enum):
    """How a dictionary's words and descriptions are encoded."""
    SANSKRIT = "sanskrit"                  # SLP1 headwords, markup descriptions
    SANSKRIT_SANSKRIT = "sanskrit_sanskrit"  # Devanagari words and descriptions
    ENGLISH = "english"                    # English headwords, markup descriptions
    ENGLISH_TELUGU = "english_telugu"
    ENGLISH_ENGLISH = "english_english"


@dataclass(frozen=True)
class DictionaryConfig:
    """Static description of one source dictionary."""
    name: DictionaryName
    kind: DictionaryKind
    origin: str
    table_name: str
    word_field: str
    description_fields: tuple[str, ...]
    headword_tag: str
    headword_scheme: str
    word_language: str
    description_language: str
    transliterate_description: bool = True

    @property
    def is_sanskrit(self) -> bool:
        """True for dictionaries whose headword tags hold transliterable Sanskrit."""
        return self.kind is DictionaryKind.SANSKRIT

    @property
    def description_field(self) -> str:
        """Description fields in their comma-joined table form."""
        return ",".join(self.description_fields)


SANSKRIT_DICTIONARIES = frozenset({
    DictionaryName.ACC, DictionaryName.AP90, DictionaryName.ARMH, DictionaryName.BEN,
    DictionaryName.BHS, DictionaryName.CAE, DictionaryName.GST, DictionaryName.IEG,
    DictionaryName.INM, DictionaryName.KRM, DictionaryName.LAN, DictionaryName.MCI,
    DictionaryName.MD, DictionaryName.MW, DictionaryName.MW72, DictionaryName.PE,
    DictionaryName.PGN, DictionaryName.PUI, DictionaryName.SHS, DictionaryName.SKD,
    DictionaryName.SNP, DictionaryName.VCP, DictionaryName.VEI, DictionaryName.WIL,
    DictionaryName.YAT,
})

DEFAULT_HEADWORD_TAG = "s"

# Dictionaries that mark headwords with something other than <s>. The italic
# and bold dialects carry IAST rather than SLP1.
HEADWORD_TAGS = {
    DictionaryName.BEN: "i",  # has both i and s
    DictionaryName.BHS: "b",
    DictionaryName.IEG: "i",
    DictionaryName.INM: "i",
    DictionaryName.LAN: "b",
    DictionaryName.MCI: "i",
    DictionaryName.MW72: "i",  # has both i and s
    DictionaryName.PGN: "i",
    DictionaryName.PUI: "i",
    DictionaryName.SNP: "i",
    DictionaryName.VEI: "b",
}

# Descriptions that need markup cleanup but are English prose.
MARKUP_ONLY_DESCRIPTIONS = frozenset({
    DictionaryName.PE, DictionaryName.MD, DictionaryName.PUI, DictionaryName.PGN,
})

_ORIGINS = {
    DictionaryName.ENG2TE: "ENG2TEL",
    DictionaryName.ENG2EN: "ENG2ENG",
}

_TABLE_NAMES = {
    DictionaryName.DHATU_PATA: "dictEntries",
    DictionaryName.ENG2EN: "entries",
}

_WORD_FIELDS = {
    DictionaryName.ENG2TE: "eng_word",
    DictionaryName.DHATU_PATA: "word",
    DictionaryName.ENG2EN: "word",
}

_DESCRIPTION_FIELDS = {
    DictionaryName.DHATU_PATA: ("desc",),
    DictionaryName.ENG2TE: ("pos", "pos_type", "meaning"),
    DictionaryName.ENG2EN: ("wordtype", "definition"),
}

_LANGUAGES = {
    DictionaryName.ENG2TE: (ScriptCode.ENG, ScriptCode.TEL),
    DictionaryName.ENG2EN: (ScriptCode.ENG, ScriptCode.ENG),
    DictionaryName.PE: (ScriptCode.SLP1, ScriptCode.ENG),
    DictionaryName.PGN: (ScriptCode.SLP1, ScriptCode.ENG),
    DictionaryName.DHATU_PATA: (ScriptCode.SAN, ScriptCode.SAN),
}


def _kind_of(name: DictionaryName) -> DictionaryKind:
    if name in SANSKRIT_DICTIONARIES:
        return DictionaryKind.SANSKRIT
    if name is DictionaryName.DHATU_PATA:
        return DictionaryKind.SANSKRIT_SANSKRIT
    if name is DictionaryName.ENG2TE:
        return DictionaryKind.ENGLISH_TELUGU
    if name is DictionaryName.ENG2EN:
        return DictionaryKind.ENGLISH_ENGLISH
    return DictionaryKind.ENGLISH


def _build_config(name: DictionaryName) -> DictionaryConfig:
    kind = _kind_of(name)
    headword_tag = HEADWORD_TAGS.get(name, DEFAULT_HEADWORD_TAG)
    default_word_language = ScriptCode.SLP1 if kind is DictionaryKind.SANSKRIT else ScriptCode.ENG
    word_language, description_language = _LANGUAGES.get(
        name, (default_word_language, ScriptCode.SLP1)
    )
    return DictionaryConfig(
        name=name,
        kind=kind,
        origin=_ORIGINS.get(name, name.value.upper()),
        table_name=_TABLE_NAMES.get(name, name.value),
        word_field=_WORD_FIELDS.get(name, "key"),
        description_fields=_DESCRIPTION_FIELDS.get(name, ("data",)),
        headword_tag=headword_tag,
        headword_scheme=scripts.IAST if headword_tag in ("i", "b") else scripts.SLP1,
        word_language=word_language.value,
        description_language=description_language.value,
        transliterate_description=name not in MARKUP_ONLY_DESCRIPTIONS,
    )


def validate_dictionary_table(table: Mapping[DictionaryName, DictionaryConfig]) -> None:
    """
    Check that every dictionary has a complete, self-consistent config.

    Raises:
        ConfigurationError: On the first problem found.
    """
    for name in DictionaryName:
        config = table.get(name)
        if config is None:
            raise ConfigurationError(f"No configuration for dictionary '{name.value}'")
        if config.name is not name:
            raise ConfigurationError(
                f"Configuration for '{name.value}' is registered as '{config.name.value}'"
            )
        if not config.word_field:
            raise ConfigurationError(f"Missing word field for dictionary '{name.value}'")
        if not config.description_fields or not all(config.description_fields):
            raise ConfigurationError(f"Missing description field for dictionary '{name.value}'")
        if not config.headword_tag:
            raise ConfigurationError(f"Missing headword tag for dictionary '{name.value}'")
        if config.headword_scheme not in (scripts.IAST, scripts.SLP1):
            raise ConfigurationError(
                f"Unsupported headword scheme '{config.headword_scheme}' for '{name.value}'"
            )
        for language in (config.word_language, config.description_language):
            if ScriptCode.parse(language) is None:
                raise ConfigurationError(
                    f"Unknown language '{language}' for dictionary '{name.value}'"
                )


DICTIONARY_CONFIGS: Mapping[DictionaryName, DictionaryConfig] = MappingProxyType(
    {name: _build_config(name) for name in DictionaryName}
)

validate_dictionary_table(DICTIONARY_CONFIGS)


def dictionary_name(name) -> DictionaryName:
    """
    Resolve a dictionary identifier to its enum member.

    Raises:
        UnknownDictionaryError: If the name is not a supported dictionary.
    """
    if isinstance(name, DictionaryName):
        return name
    try:
        return DictionaryName(str(name).strip().lower())
    except ValueError:
        raise UnknownDictionaryError(f"Unknown dictionary name '{name}'") from None


def get_dictionary_config(name) -> DictionaryConfig:
    """Return the configuration for a dictionary name or enum member."""
    return DICTIONARY_CONFIGS[dictionary_name(name)]


def list_dictionaries() -> list[DictionaryConfig]:
    return [DICTIONARY_CONFIGS[name] for name in DictionaryName]
