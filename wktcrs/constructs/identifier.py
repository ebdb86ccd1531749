from __future__ import annotations

from typing import NamedTuple, Optional


class Identifier(NamedTuple):
    """
    An authority reference for a WKT object, written as ID[...] (AUTHORITY[...] in WKT1).

    The unique id and version are kept exactly as they were written so that
    "4326" and "EPSG_4326" style codes both survive a round trip.

    Attributes:
        authority: The authority name, e.g. "EPSG"
        unique_id: The code within the authority, kept as text
        version: An optional version of the authority's definition
        citation: An optional citation of the authority
        uri: An optional URI to the authority's definition

    Examples:
        >>> ident = Identifier.epsg(4326)
        >>> str(ident)
        'EPSG:4326'
        >>> ident.code
        4326
    """

    authority: str
    unique_id: str
    version: Optional[str] = None
    citation: Optional[str] = None
    uri: Optional[str] = None

    @classmethod
    def epsg(cls, code: int) -> Identifier:
        return cls(authority="EPSG", unique_id=str(code))

    def has_version(self) -> bool:
        return self.version is not None

    def has_citation(self) -> bool:
        return self.citation is not None

    def has_uri(self) -> bool:
        return self.uri is not None

    @property
    def code(self) -> Optional[int]:
        """The unique id as an integer, or None when it is not numeric."""
        if self.unique_id.isdigit():
            return int(self.unique_id)
        return None

    def is_epsg(self) -> bool:
        return self.authority.upper() == "EPSG"

    def __str__(self):
        return f"{self.authority}:{self.unique_id}"
