"""WKT keywords and the spellings that resolve to them.

Each canonical WKT2 keyword may be spelled several ways: the long WKT2 form
(GEOGRAPHICCRS), the legacy WKT1 form (GEOGCS) and so on. The unit keywords
share the bare spelling UNIT, so that spelling is ambiguous on its own and the
reader narrows it down from its position in the grammar.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import AbstractSet, Dict, FrozenSet, Iterable, Mapping, Optional, Set, Tuple

from wktcrs.constructs.unit import UnitType
from wktcrs.utils.exceptions import SemanticError, UnknownKeyword


class Keyword(Enum):
    """The canonical WKT2 keywords. The value is the spelling the writer uses."""

    ABRIDGEDTRANSFORMATION = "ABRIDGEDTRANSFORMATION"
    ANCHOR = "ANCHOR"
    ANGLEUNIT = "ANGLEUNIT"
    AREA = "AREA"
    AXIS = "AXIS"
    BASEENGCRS = "BASEENGCRS"
    BASEGEODCRS = "BASEGEODCRS"
    BASEGEOGCRS = "BASEGEOGCRS"
    BASEPARAMCRS = "BASEPARAMCRS"
    BASEPROJCRS = "BASEPROJCRS"
    BASETIMECRS = "BASETIMECRS"
    BASEVERTCRS = "BASEVERTCRS"
    BBOX = "BBOX"
    BEARING = "BEARING"
    BOUNDCRS = "BOUNDCRS"
    CALENDAR = "CALENDAR"
    CITATION = "CITATION"
    COMPOUNDCRS = "COMPOUNDCRS"
    CONCATENATEDOPERATION = "CONCATENATEDOPERATION"
    CONVERSION = "CONVERSION"
    COORDINATEMETADATA = "COORDINATEMETADATA"
    COORDINATEOPERATION = "COORDINATEOPERATION"
    CS = "CS"
    DATUM = "DATUM"
    DERIVEDPROJCRS = "DERIVEDPROJCRS"
    DERIVINGCONVERSION = "DERIVINGCONVERSION"
    DYNAMIC = "DYNAMIC"
    EDATUM = "EDATUM"
    ELLIPSOID = "ELLIPSOID"
    ENGCRS = "ENGCRS"
    ENSEMBLE = "ENSEMBLE"
    ENSEMBLEACCURACY = "ENSEMBLEACCURACY"
    EPOCH = "EPOCH"
    EXTENSION = "EXTENSION"
    FRAMEEPOCH = "FRAMEEPOCH"
    GEODCRS = "GEODCRS"
    GEOGCRS = "GEOGCRS"
    GEOIDMODEL = "GEOIDMODEL"
    ID = "ID"
    INTERPOLATIONCRS = "INTERPOLATIONCRS"
    LENGTHUNIT = "LENGTHUNIT"
    MEMBER = "MEMBER"
    MERIDIAN = "MERIDIAN"
    METHOD = "METHOD"
    MODEL = "MODEL"
    OPERATIONACCURACY = "OPERATIONACCURACY"
    ORDER = "ORDER"
    PARAMETER = "PARAMETER"
    PARAMETERFILE = "PARAMETERFILE"
    PARAMETRICCRS = "PARAMETRICCRS"
    PARAMETRICUNIT = "PARAMETRICUNIT"
    PDATUM = "PDATUM"
    POINTMOTIONOPERATION = "POINTMOTIONOPERATION"
    PRIMEM = "PRIMEM"
    PROJCRS = "PROJCRS"
    REMARK = "REMARK"
    SCALEUNIT = "SCALEUNIT"
    SCOPE = "SCOPE"
    SOURCECRS = "SOURCECRS"
    STEP = "STEP"
    TARGETCRS = "TARGETCRS"
    TDATUM = "TDATUM"
    TIMECRS = "TIMECRS"
    TIMEEXTENT = "TIMEEXTENT"
    TIMEORIGIN = "TIMEORIGIN"
    TIMEUNIT = "TIMEUNIT"
    TOWGS84 = "TOWGS84"
    TRIAXIAL = "TRIAXIAL"
    URI = "URI"
    USAGE = "USAGE"
    VDATUM = "VDATUM"
    VERSION = "VERSION"
    VERTCRS = "VERTCRS"
    VERTICALEXTENT = "VERTICALEXTENT"


# spellings beyond the canonical one
KEYWORD_ALIASES: Mapping[Keyword, Tuple[str, ...]] = MappingProxyType(
    {
        Keyword.ANGLEUNIT: ("UNIT",),
        Keyword.BASEPROJCRS: ("BASEPROJECTEDCRS",),
        Keyword.COMPOUNDCRS: ("COMPD_CS",),
        Keyword.DATUM: ("GEODETICDATUM", "TRF"),
        Keyword.DERIVEDPROJCRS: ("DERIVEDPROJECTEDCRS",),
        Keyword.EDATUM: ("ENGINEERINGDATUM", "LOCAL_DATUM"),
        Keyword.ELLIPSOID: ("SPHEROID",),
        Keyword.ENGCRS: ("ENGINEERINGCRS", "LOCAL_CS"),
        Keyword.EPOCH: ("COORDEPOCH",),
        Keyword.GEODCRS: ("GEODETICCRS", "GEOCCS"),
        Keyword.GEOGCRS: ("GEOGRAPHICCRS", "GEOGCS"),
        Keyword.ID: ("AUTHORITY",),
        Keyword.LENGTHUNIT: ("UNIT",),
        Keyword.METHOD: ("PROJECTION",),
        Keyword.MODEL: ("VELOCITYGRID",),
        Keyword.PARAMETRICUNIT: ("UNIT",),
        Keyword.PDATUM: ("PARAMETRICDATUM",),
        Keyword.PRIMEM: ("PRIMEMERIDIAN",),
        Keyword.PROJCRS: ("PROJECTEDCRS", "PROJCS"),
        Keyword.SCALEUNIT: ("UNIT",),
        Keyword.TDATUM: ("TIMEDATUM",),
        Keyword.TIMEUNIT: ("UNIT", "TEMPORALQUANTITY"),
        Keyword.VDATUM: ("VRF", "VERTICALDATUM", "VERT_DATUM"),
        Keyword.VERTCRS: ("VERTICALCRS", "VERT_CS"),
    }
)

UNIT_KEYWORD_TYPES: Mapping[Keyword, UnitType] = MappingProxyType(
    {
        Keyword.ANGLEUNIT: UnitType.ANGLE,
        Keyword.LENGTHUNIT: UnitType.LENGTH,
        Keyword.PARAMETRICUNIT: UnitType.PARAMETRIC,
        Keyword.SCALEUNIT: UnitType.SCALE,
        Keyword.TIMEUNIT: UnitType.TIME,
    }
)

UNIT_KEYWORDS: FrozenSet[Keyword] = frozenset(UNIT_KEYWORD_TYPES)
SPATIAL_UNIT_KEYWORDS: FrozenSet[Keyword] = UNIT_KEYWORDS - {Keyword.TIMEUNIT}


class KeywordRegistry:
    """
    Resolves WKT keyword spellings to canonical keywords.

    Lookups are case insensitive. The tables are built once and never change.

    Args:
        aliases: For each keyword, the spellings other than its canonical one

    Examples:
        >>> registry = KeywordRegistry(KEYWORD_ALIASES)
        >>> registry.resolve("geogcs")
        <Keyword.GEOGCRS: 'GEOGCRS'>
        >>> registry.resolve("UNIT") is None
        True
    """

    def __init__(self, aliases: Mapping[Keyword, Iterable[str]]):
        by_spelling: Dict[str, Set[Keyword]] = {}
        spellings: Dict[Keyword, Tuple[str, ...]] = {}
        for keyword in Keyword:
            names = (keyword.value,) + tuple(
                a for a in aliases.get(keyword, ()) if a != keyword.value
            )
            spellings[keyword] = names
            for name in names:
                by_spelling.setdefault(name.upper(), set()).add(keyword)

        self._by_spelling: Mapping[str, FrozenSet[Keyword]] = MappingProxyType(
            {k: frozenset(v) for k, v in by_spelling.items()}
        )
        self._spellings: Mapping[Keyword, Tuple[str, ...]] = MappingProxyType(spellings)

    def resolve(self, spelling: str) -> Optional[Keyword]:
        """
        The keyword for a spelling, if the spelling means exactly one keyword.

        Returns:
            The keyword, or None for unknown or ambiguous spellings
        """
        candidates = self.resolve_ambiguous(spelling)
        if len(candidates) == 1:
            return next(iter(candidates))
        return None

    def resolve_required(self, spelling: str) -> Keyword:
        """
        The keyword for an unambiguous spelling.

        Raises:
            UnknownKeyword: If the spelling is unknown or ambiguous
        """
        keyword = self.resolve(spelling)
        if keyword is None:
            raise UnknownKeyword(
                f"{spelling!r} is not a unique WKT keyword",
                token=spelling,
                expected=sorted(k.value for k in self.resolve_ambiguous(spelling)),
            )
        return keyword

    def resolve_ambiguous(self, spelling: str) -> FrozenSet[Keyword]:
        """Every keyword the spelling may stand for; empty when it is not a keyword."""
        return self._by_spelling.get(spelling.upper(), frozenset())

    def spellings(self, keyword: Keyword) -> Tuple[str, ...]:
        """The canonical spelling followed by the aliases of a keyword."""
        return self._spellings[keyword]

    def resolve_unit_type(self, spelling: str, expected: AbstractSet[UnitType]) -> UnitType:
        """
        Determine the type of a unit from its keyword spelling and grammar position.

        A type specific keyword such as LENGTHUNIT gives its own type. The bare
        UNIT spelling is narrowed to the single type the position expects; if
        the position admits several types it falls back to the generic unit
        when that is allowed.

        Args:
            spelling: The keyword as written
            expected: The unit types the position admits. UnitType.UNIT in the
                set means a generic unit is acceptable.

        Returns:
            The unit type

        Raises:
            UnknownKeyword: If the spelling is not a unit keyword
            SemanticError: If a bare UNIT cannot be narrowed down

        Examples:
            >>> KEYWORDS.resolve_unit_type("UNIT", {UnitType.ANGLE})
            <UnitType.ANGLE: 'ANGLEUNIT'>
        """
        types = {
            UNIT_KEYWORD_TYPES[k]
            for k in self.resolve_ambiguous(spelling)
            if k in UNIT_KEYWORD_TYPES
        }
        if not types:
            raise UnknownKeyword(
                f"{spelling!r} is not a unit keyword",
                token=spelling,
                expected=sorted(k.value for k in UNIT_KEYWORDS),
            )
        if len(types) == 1:
            return types.pop()

        narrowed = types & set(expected)
        if len(narrowed) == 1:
            return narrowed.pop()
        if UnitType.UNIT in expected:
            return UnitType.UNIT
        raise SemanticError(
            f"Ambiguous unit keyword {spelling!r}",
            token=spelling,
            expected=sorted(t.keyword for t in (narrowed or types)),
        )


KEYWORDS = KeywordRegistry(KEYWORD_ALIASES)


def resolve(spelling: str) -> Optional[Keyword]:
    return KEYWORDS.resolve(spelling)


def resolve_required(spelling: str) -> Keyword:
    return KEYWORDS.resolve_required(spelling)


def resolve_ambiguous(spelling: str) -> FrozenSet[Keyword]:
    return KEYWORDS.resolve_ambiguous(spelling)


def resolve_unit_type(spelling: str, expected: AbstractSet[UnitType]) -> UnitType:
    return KEYWORDS.resolve_unit_type(spelling, expected)
