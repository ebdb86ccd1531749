from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import NamedTuple, Optional, Tuple

from wktcrs.constructs.base import Identifiable, freeze
from wktcrs.constructs.identifier import Identifier
from wktcrs.constructs.unit import Unit, UnitType
from wktcrs.utils.constants import AXIS_NAME_ABBREVIATION_PATTERN
from wktcrs.utils.exceptions import SemanticError


class AxisDirection(Enum):
    """Axis directions; the value is the spelling written in WKT2."""

    NORTH = "north"
    NORTH_NORTH_EAST = "northNorthEast"
    NORTH_EAST = "northEast"
    EAST_NORTH_EAST = "eastNorthEast"
    EAST = "east"
    EAST_SOUTH_EAST = "eastSouthEast"
    SOUTH_EAST = "southEast"
    SOUTH_SOUTH_EAST = "southSouthEast"
    SOUTH = "south"
    SOUTH_SOUTH_WEST = "southSouthWest"
    SOUTH_WEST = "southWest"
    WEST_SOUTH_WEST = "westSouthWest"
    WEST = "west"
    WEST_NORTH_WEST = "westNorthWest"
    NORTH_WEST = "northWest"
    NORTH_NORTH_WEST = "northNorthWest"
    GEOCENTRIC_X = "geocentricX"
    GEOCENTRIC_Y = "geocentricY"
    GEOCENTRIC_Z = "geocentricZ"
    UP = "up"
    DOWN = "down"
    FORWARD = "forward"
    AFT = "aft"
    PORT = "port"
    STARBOARD = "starboard"
    CLOCKWISE = "clockwise"
    COUNTER_CLOCKWISE = "counterClockwise"
    COLUMN_POSITIVE = "columnPositive"
    COLUMN_NEGATIVE = "columnNegative"
    ROW_POSITIVE = "rowPositive"
    ROW_NEGATIVE = "rowNegative"
    DISPLAY_RIGHT = "displayRight"
    DISPLAY_LEFT = "displayLeft"
    DISPLAY_UP = "displayUp"
    DISPLAY_DOWN = "displayDown"
    FUTURE = "future"
    PAST = "past"
    TOWARDS = "towards"
    AWAY_FROM = "awayFrom"
    UNSPECIFIED = "unspecified"

    @classmethod
    def from_name(cls, name: str) -> Optional[AxisDirection]:
        """
        Look up a direction from its WKT spelling, ignoring case.

        The legacy spelling OTHER maps to UNSPECIFIED.

        Examples:
            >>> AxisDirection.from_name("NORTH")
            <AxisDirection.NORTH: 'north'>
        """
        return _DIRECTIONS_BY_NAME.get(name.lower())

    def is_compass(self) -> bool:
        return self in _COMPASS_DIRECTIONS

    def is_vertical(self) -> bool:
        return self in (AxisDirection.UP, AxisDirection.DOWN)


_DIRECTIONS_BY_NAME = MappingProxyType(
    {
        **{d.value.lower(): d for d in AxisDirection},
        **{d.name.lower(): d for d in AxisDirection},
        "other": AxisDirection.UNSPECIFIED,
    }
)

_COMPASS_DIRECTIONS = frozenset(list(AxisDirection)[:16])


class Meridian(NamedTuple):
    """The longitude of the meridian a north or south axis points along."""

    longitude: float
    unit: Unit


def split_name_abbreviation(text: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Split the WKT axis label into a name and an abbreviation.

    Examples:
        >>> split_name_abbreviation("Easting (E)")
        ('Easting', 'E')
        >>> split_name_abbreviation("(X)")
        (None, 'X')
        >>> split_name_abbreviation("Latitude")
        ('Latitude', None)
    """
    match = AXIS_NAME_ABBREVIATION_PATTERN.match(text)
    if match is None:
        return text, None
    return match.group("name"), match.group("abbreviation")


@dataclass(frozen=True)
class Axis(Identifiable):
    """
    One axis of a coordinate system.

    A meridian is only meaningful for north or south axes and a bearing only
    for clockwise or counter clockwise axes.

    Attributes:
        name: The axis name, e.g. "Easting"
        direction: The direction of increasing coordinate values
        abbreviation: The axis abbreviation, e.g. "E"
        meridian: For north/south axes, the meridian the axis follows
        bearing: For clockwise/counter clockwise axes, the bearing in degrees
        order: The position of the axis in the coordinate tuple, starting at 1
        unit: The axis unit, when it differs from the coordinate system unit
        identifiers: Optional identifiers of the axis

    Examples:
        >>> axis = Axis("Easting", AxisDirection.EAST, "E", order=1)
        >>> axis.label
        'Easting (E)'
    """

    name: Optional[str]
    direction: AxisDirection
    abbreviation: Optional[str] = None
    meridian: Optional[Meridian] = None
    bearing: Optional[float] = None
    order: Optional[int] = None
    unit: Optional[Unit] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None

    def __post_init__(self):
        freeze(self, "identifiers")
        if self.name is None and self.abbreviation is None:
            raise SemanticError("An axis requires a name or an abbreviation")
        if self.meridian is not None:
            if self.direction not in (AxisDirection.NORTH, AxisDirection.SOUTH):
                raise SemanticError(
                    f"MERIDIAN is only allowed for north or south axes, not {self.direction.value}"
                )
            if self.meridian.unit.unit_type is not UnitType.ANGLE:
                raise SemanticError("MERIDIAN requires an angle unit")
        if self.bearing is not None and self.direction not in (
            AxisDirection.CLOCKWISE,
            AxisDirection.COUNTER_CLOCKWISE,
        ):
            raise SemanticError(
                f"BEARING is only allowed for clockwise or counterClockwise axes, not {self.direction.value}"
            )
        if self.order is not None and self.order < 1:
            raise SemanticError(f"Axis order must be at least 1, got {self.order}")

    @property
    def label(self) -> str:
        """The text written as the first AXIS child: "name (abbreviation)", "(abbreviation)" or "name"."""
        if self.abbreviation is None:
            return self.name
        if self.name is None:
            return f"({self.abbreviation})"
        return f"{self.name} ({self.abbreviation})"

    def has_abbreviation(self) -> bool:
        return self.abbreviation is not None

    def has_meridian(self) -> bool:
        return self.meridian is not None

    def has_bearing(self) -> bool:
        return self.bearing is not None

    def has_order(self) -> bool:
        return self.order is not None

    def has_unit(self) -> bool:
        return self.unit is not None
