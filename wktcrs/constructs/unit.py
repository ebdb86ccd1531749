from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from wktcrs.constructs.base import Identifiable, freeze
from wktcrs.constructs.identifier import Identifier
from wktcrs.utils.exceptions import SemanticError


class UnitType(Enum):
    """
    The kind of quantity a unit measures.

    The value is the WKT2 keyword used to write a unit of that type; UNIT is
    the generic unit that WKT1 style parameters may carry.
    """

    ANGLE = "ANGLEUNIT"
    LENGTH = "LENGTHUNIT"
    PARAMETRIC = "PARAMETRICUNIT"
    SCALE = "SCALEUNIT"
    TIME = "TIMEUNIT"
    UNIT = "UNIT"

    @property
    def keyword(self) -> str:
        return self.value


@dataclass(frozen=True)
class Unit(Identifiable):
    """
    A unit of measure with its conversion factor to the SI base unit of its type.

    Only time units may leave the conversion factor out, for calendar based
    units such as a month.

    Attributes:
        unit_type: The kind of quantity measured
        name: The unit name, e.g. "metre"
        conversion_factor: The factor to the base unit of the type (metre, radian, unity, second, pascal)
        identifiers: Optional identifiers of the unit

    Examples:
        >>> foot = Unit(UnitType.LENGTH, "foot", 0.3048)
        >>> foot.to_base(10)
        3.048
    """

    unit_type: UnitType
    name: str
    conversion_factor: Optional[float] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None

    def __post_init__(self):
        freeze(self, "identifiers")
        if self.conversion_factor is None:
            if self.unit_type is not UnitType.TIME:
                raise SemanticError(
                    f"{self.unit_type.keyword} {self.name!r} requires a conversion factor"
                )
        elif self.conversion_factor <= 0:
            raise SemanticError(
                f"Unit {self.name!r} conversion factor must be positive, got {self.conversion_factor}"
            )

    def has_conversion_factor(self) -> bool:
        return self.conversion_factor is not None

    def to_base(self, value: float) -> float:
        return value * self._factor()

    def from_base(self, value: float) -> float:
        return value / self._factor()

    def _factor(self) -> float:
        if self.conversion_factor is None:
            raise ValueError(f"Unit {self.name!r} has no conversion factor")
        return self.conversion_factor


def convert(value: float, from_unit: Unit, to_unit: Unit) -> float:
    """
    Convert a value between two units measuring the same kind of quantity.

    Args:
        value: The value expressed in from_unit
        from_unit: The unit the value is expressed in
        to_unit: The unit to express the value in

    Returns:
        The converted value

    Raises:
        ValueError: If the units are of different types or lack conversion factors

    Examples:
        >>> convert(1.0, Units.KILOMETRE, Units.METRE)
        1000.0
    """
    generic = UnitType.UNIT
    if from_unit.unit_type != to_unit.unit_type and generic not in (
        from_unit.unit_type,
        to_unit.unit_type,
    ):
        raise ValueError(
            f"cannot convert {from_unit.unit_type.name} unit {from_unit.name!r} "
            f"to {to_unit.unit_type.name} unit {to_unit.name!r}"
        )
    if from_unit == to_unit:
        return value
    return to_unit.from_base(from_unit.to_base(value))


class Units:
    """Well-known units with EPSG factors."""

    MICROMETRE = Unit(UnitType.LENGTH, "micrometre", 1e-06)
    MILLIMETRE = Unit(UnitType.LENGTH, "millimetre", 0.001)
    METRE = Unit(UnitType.LENGTH, "metre", 1.0)
    KILOMETRE = Unit(UnitType.LENGTH, "kilometre", 1000.0)
    GERMAN_LEGAL_METRE = Unit(UnitType.LENGTH, "German legal metre", 1.0000135965)
    US_SURVEY_FOOT = Unit(UnitType.LENGTH, "US survey foot", 0.304800609601219)
    FOOT = Unit(UnitType.LENGTH, "foot", 0.3048)

    MICRORADIAN = Unit(UnitType.ANGLE, "microradian", 1e-06)
    MILLIRADIAN = Unit(UnitType.ANGLE, "milliradian", 0.001)
    RADIAN = Unit(UnitType.ANGLE, "radian", 1.0)
    ARC_SECOND = Unit(UnitType.ANGLE, "arc-second", 4.84813681109536e-06)
    ARC_MINUTE = Unit(UnitType.ANGLE, "arc-minute", 0.000290888208665722)
    DEGREE = Unit(UnitType.ANGLE, "degree", 0.0174532925199433)
    GRAD = Unit(UnitType.ANGLE, "grad", 0.015707963267949)

    UNITY = Unit(UnitType.SCALE, "unity", 1.0)
    BIN = Unit(UnitType.SCALE, "bin", 1.0)
    PARTS_PER_MILLION = Unit(UnitType.SCALE, "parts per million", 1e-06)

    PASCAL = Unit(UnitType.PARAMETRIC, "pascal", 1.0)
    HECTOPASCAL = Unit(UnitType.PARAMETRIC, "hectopascal", 100.0)

    MICROSECOND = Unit(UnitType.TIME, "microsecond", 1e-06)
    MILLISECOND = Unit(UnitType.TIME, "millisecond", 0.001)
    SECOND = Unit(UnitType.TIME, "second", 1.0)
    MINUTE = Unit(UnitType.TIME, "minute", 60.0)
    HOUR = Unit(UnitType.TIME, "hour", 3600.0)
    DAY = Unit(UnitType.TIME, "day", 86400.0)
    YEAR = Unit(UnitType.TIME, "year", 31556925.445)
    CALENDAR_SECOND = Unit(UnitType.TIME, "calendar second", 1.0)
    CALENDAR_MONTH = Unit(UnitType.TIME, "calendar month")


def _index_units() -> Mapping[str, Unit]:
    by_name: Dict[str, Unit] = {}
    for unit in vars(Units).values():
        if isinstance(unit, Unit):
            by_name[unit.name.lower()] = unit
    # common spellings used by WKT1 producers
    by_name["meter"] = Units.METRE
    by_name["foot_us"] = Units.US_SURVEY_FOOT
    return MappingProxyType(by_name)


UNITS_BY_NAME = _index_units()

_DEFAULT_UNITS = MappingProxyType(
    {
        UnitType.LENGTH: Units.METRE,
        UnitType.ANGLE: Units.DEGREE,
        UnitType.SCALE: Units.UNITY,
        UnitType.PARAMETRIC: Units.PASCAL,
        UnitType.TIME: Units.SECOND,
    }
)


def get_unit(name: str, unit_type: Optional[UnitType] = None) -> Optional[Unit]:
    """
    Look up a well-known unit by name, case insensitively.

    Args:
        name: The unit name, e.g. "Metre" or "US survey foot"
        unit_type: When given, only a unit of this type matches

    Returns:
        The unit, or None if it is not a well-known unit
    """
    unit = UNITS_BY_NAME.get(name.lower())
    if unit is None:
        return None
    if unit_type is not None and unit_type is not UnitType.UNIT and unit.unit_type != unit_type:
        return None
    return unit


def default_unit(unit_type: UnitType) -> Unit:
    """
    The unit assumed for a quantity of the given type when WKT leaves it out.

    Raises:
        ValueError: For the generic unit type, which has no default
    """
    try:
        return _DEFAULT_UNITS[unit_type]
    except KeyError as e:
        raise ValueError(f"there is no default unit for {unit_type.name}") from e
