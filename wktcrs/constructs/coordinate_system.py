from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from wktcrs.constructs.axis import Axis, AxisDirection
from wktcrs.constructs.base import Identifiable, freeze
from wktcrs.constructs.identifier import Identifier
from wktcrs.constructs.unit import Unit, UnitType
from wktcrs.utils.exceptions import SemanticError


class CoordinateSystemType(Enum):
    """Coordinate system types; the value is the spelling written in CS[...]."""

    AFFINE = "affine"
    CARTESIAN = "Cartesian"
    CYLINDRICAL = "cylindrical"
    ELLIPSOIDAL = "ellipsoidal"
    LINEAR = "linear"
    ORDINAL = "ordinal"
    PARAMETRIC = "parametric"
    POLAR = "polar"
    SPHERICAL = "spherical"
    TEMPORAL_COUNT = "temporalCount"
    TEMPORAL_DATE_TIME = "temporalDateTime"
    TEMPORAL_MEASURE = "temporalMeasure"
    VERTICAL = "vertical"

    @classmethod
    def from_name(cls, name: str) -> Optional[CoordinateSystemType]:
        for cs_type in cls:
            if cs_type.value.lower() == name.lower():
                return cs_type
        return None

    def has_units(self) -> bool:
        """False for the ordinal and date-time types, whose axes carry no unit."""
        return self not in (CoordinateSystemType.ORDINAL, CoordinateSystemType.TEMPORAL_DATE_TIME)

    def is_temporal(self) -> bool:
        return self in (
            CoordinateSystemType.TEMPORAL_COUNT,
            CoordinateSystemType.TEMPORAL_DATE_TIME,
            CoordinateSystemType.TEMPORAL_MEASURE,
        )

    def unit_types(self) -> FrozenSet[UnitType]:
        """The unit types a unit shared by all axes may have."""
        if self in (CoordinateSystemType.ELLIPSOIDAL, CoordinateSystemType.SPHERICAL):
            return frozenset({UnitType.ANGLE})
        if self in (
            CoordinateSystemType.AFFINE,
            CoordinateSystemType.CARTESIAN,
            CoordinateSystemType.LINEAR,
            CoordinateSystemType.VERTICAL,
        ):
            return frozenset({UnitType.LENGTH})
        if self is CoordinateSystemType.PARAMETRIC:
            return frozenset({UnitType.PARAMETRIC})
        if self.is_temporal():
            return frozenset({UnitType.TIME})
        # polar and cylindrical mix lengths and angles
        return frozenset()

    def axis_unit_types(self, direction: AxisDirection) -> FrozenSet[UnitType]:
        """The unit types an axis pointing in the given direction may have."""
        if self is CoordinateSystemType.ELLIPSOIDAL:
            if direction.is_vertical():
                return frozenset({UnitType.LENGTH})
            return frozenset({UnitType.ANGLE})
        if self in (
            CoordinateSystemType.SPHERICAL,
            CoordinateSystemType.POLAR,
            CoordinateSystemType.CYLINDRICAL,
        ):
            if direction in (AxisDirection.AWAY_FROM, AxisDirection.TOWARDS) or direction.is_vertical():
                return frozenset({UnitType.LENGTH})
            return frozenset({UnitType.ANGLE})
        return self.unit_types()


@dataclass(frozen=True)
class CoordinateSystem(Identifiable):
    """
    A coordinate system: its type, dimension, axes and an optional unit shared by the axes.

    In WKT the axes and the shared unit follow CS[...] as siblings rather
    than children, but they belong to the coordinate system.

    Attributes:
        cs_type: The coordinate system type
        dimension: The number of axes, from 1 to 3
        axes: The axes in the order they were defined
        unit: The unit shared by all axes, if any
        identifiers: Optional identifiers of the coordinate system

    Examples:
        >>> from wktcrs.constructs.unit import Units
        >>> cs = CoordinateSystem(
        ...     CoordinateSystemType.CARTESIAN,
        ...     2,
        ...     (Axis("Easting", AxisDirection.EAST, "E"), Axis("Northing", AxisDirection.NORTH, "N")),
        ...     Units.METRE,
        ... )
        >>> cs.axis_unit(0).name
        'metre'
    """

    cs_type: CoordinateSystemType
    dimension: int
    axes: Tuple[Axis, ...]
    unit: Optional[Unit] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None

    def __post_init__(self):
        freeze(self, "axes", "identifiers")
        if not 1 <= self.dimension <= 3:
            raise SemanticError(f"Coordinate system dimension must be 1, 2 or 3, got {self.dimension}")
        if len(self.axes) != self.dimension:
            raise SemanticError(
                f"{self.cs_type.value} coordinate system of dimension {self.dimension} "
                f"has {len(self.axes)} axes"
            )
        if not self.cs_type.has_units():
            if self.unit is not None or any(a.unit is not None for a in self.axes):
                raise SemanticError(f"{self.cs_type.value} coordinate system axes cannot have units")

    def has_unit(self) -> bool:
        return self.unit is not None

    def axis_unit(self, index: int) -> Optional[Unit]:
        """The unit of an axis: its own unit, else the shared one."""
        axis = self.axes[index]
        return axis.unit if axis.unit is not None else self.unit
