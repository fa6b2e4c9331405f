# Test fixtures
from .sample_entries import (
    DHATU_PATA_ROWS,
    ENG2EN_ROWS,
    ENG2TE_ROWS,
    IAST_OM,
    MW_ROWS,
    PE_ROWS,
    SAN_GAYATRI,
    is_devanagari,
    is_telugu,
    telugu_from,
)

__all__ = [
    "DHATU_PATA_ROWS",
    "ENG2EN_ROWS",
    "ENG2TE_ROWS",
    "IAST_OM",
    "MW_ROWS",
    "PE_ROWS",
    "SAN_GAYATRI",
    "is_devanagari",
    "is_telugu",
    "telugu_from",
]
