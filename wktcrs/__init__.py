from pathlib import Path

from wktcrs.utils.exceptions import (
    LexicalError,
    SemanticError,
    WKTError,
    WKTSyntaxError,
    WriterError,
)
from wktcrs.wkt.pretty import pretty
from wktcrs.wkt.reader import CRSReader, read_crs, read_wkt
from wktcrs.wkt.writer import CRSWriter, write_wkt


def package_root() -> Path:
    return Path(__file__).parent


__all__ = [
    "CRSReader",
    "CRSWriter",
    "LexicalError",
    "SemanticError",
    "WKTError",
    "WKTSyntaxError",
    "WriterError",
    "package_root",
    "pretty",
    "read_crs",
    "read_wkt",
    "write_wkt",
]
