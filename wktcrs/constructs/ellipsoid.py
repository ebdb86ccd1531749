from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from wktcrs.constructs.base import Identifiable, freeze
from wktcrs.constructs.identifier import Identifier
from wktcrs.constructs.unit import Unit, UnitType
from wktcrs.utils.exceptions import SemanticError


class EllipsoidType(Enum):
    OBLATE = "ELLIPSOID"
    TRIAXIAL = "TRIAXIAL"


@dataclass(frozen=True)
class Ellipsoid(Identifiable):
    """
    The figure of the earth (or another body) used by a geodetic reference frame.

    An oblate ellipsoid is defined by its semi-major axis and inverse
    flattening, where an inverse flattening of 0 describes a sphere. A
    triaxial ellipsoid is defined by its three semi-axes. Use the `oblate`
    and `triaxial` constructors rather than building the shape tuple by hand.

    Attributes:
        name: The ellipsoid name
        semi_major_axis: The semi-major axis, in the ellipsoid unit
        ellipsoid_type: OBLATE or TRIAXIAL
        shape: (inverse_flattening,) for OBLATE, (semi_median_axis, semi_minor_axis) for TRIAXIAL
        unit: Optional length unit of the axes, metre when absent
        identifiers: Optional identifiers of the ellipsoid

    Examples:
        >>> wgs84 = Ellipsoid.oblate("WGS 84", 6378137.0, 298.257223563)
        >>> round(wgs84.semi_minor_axis, 3)
        6356752.314
        >>> Ellipsoid.triaxial("Io", 1829400.0, 1819400.0, 1815700.0).semi_median_axis
        1819400.0
    """

    name: str
    semi_major_axis: float
    ellipsoid_type: EllipsoidType
    shape: Tuple[float, ...]
    unit: Optional[Unit] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None

    def __post_init__(self):
        freeze(self, "shape", "identifiers")
        if self.semi_major_axis <= 0:
            raise SemanticError(f"Ellipsoid {self.name!r} semi-major axis must be positive")
        if self.ellipsoid_type is EllipsoidType.OBLATE:
            if len(self.shape) != 1:
                raise SemanticError("An oblate ellipsoid is defined by its inverse flattening")
            if self.shape[0] < 0:
                raise SemanticError(f"Ellipsoid {self.name!r} inverse flattening must not be negative")
        else:
            if len(self.shape) != 2:
                raise SemanticError("A triaxial ellipsoid is defined by its semi-median and semi-minor axes")
            if any(axis <= 0 for axis in self.shape):
                raise SemanticError(f"Ellipsoid {self.name!r} semi-axes must be positive")
        if self.unit is not None and self.unit.unit_type is not UnitType.LENGTH:
            raise SemanticError(f"Ellipsoid unit must be a length unit, got {self.unit.name!r}")

    @classmethod
    def oblate(
        cls,
        name: str,
        semi_major_axis: float,
        inverse_flattening: float,
        unit: Optional[Unit] = None,
        identifiers: Optional[Tuple[Identifier, ...]] = None,
    ) -> Ellipsoid:
        return cls(
            name,
            semi_major_axis,
            EllipsoidType.OBLATE,
            (inverse_flattening,),
            unit,
            identifiers,
        )

    @classmethod
    def triaxial(
        cls,
        name: str,
        semi_major_axis: float,
        semi_median_axis: float,
        semi_minor_axis: float,
        unit: Optional[Unit] = None,
        identifiers: Optional[Tuple[Identifier, ...]] = None,
    ) -> Ellipsoid:
        return cls(
            name,
            semi_major_axis,
            EllipsoidType.TRIAXIAL,
            (semi_median_axis, semi_minor_axis),
            unit,
            identifiers,
        )

    def is_oblate(self) -> bool:
        return self.ellipsoid_type is EllipsoidType.OBLATE

    def is_sphere(self) -> bool:
        return self.is_oblate() and self.shape[0] == 0

    @property
    def inverse_flattening(self) -> float:
        """
        Raises:
            TypeError: For a triaxial ellipsoid
        """
        if not self.is_oblate():
            raise TypeError(f"Triaxial ellipsoid {self.name!r} has no inverse flattening")
        return self.shape[0]

    @property
    def flattening(self) -> float:
        inverse_flattening = self.inverse_flattening
        return 0.0 if inverse_flattening == 0 else 1.0 / inverse_flattening

    @property
    def semi_median_axis(self) -> float:
        """
        Raises:
            TypeError: For an oblate ellipsoid
        """
        if self.is_oblate():
            raise TypeError(f"Oblate ellipsoid {self.name!r} has no semi-median axis")
        return self.shape[0]

    @property
    def semi_minor_axis(self) -> float:
        """The polar semi-axis; derived from the flattening for an oblate ellipsoid."""
        if self.is_oblate():
            return self.semi_major_axis * (1.0 - self.flattening)
        return self.shape[1]

    def has_unit(self) -> bool:
        return self.unit is not None


@dataclass(frozen=True)
class PrimeMeridian(Identifiable):
    """
    The meridian longitudes are counted from, given relative to Greenwich.

    Attributes:
        name: The prime meridian name, e.g. "Greenwich" or "Paris"
        longitude: The longitude of the meridian from Greenwich
        unit: Optional angle unit of the longitude
        identifiers: Optional identifiers of the prime meridian
    """

    name: str
    longitude: float
    unit: Optional[Unit] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None

    def __post_init__(self):
        freeze(self, "identifiers")
        if self.unit is not None and self.unit.unit_type is not UnitType.ANGLE:
            raise SemanticError(f"Prime meridian unit must be an angle unit, got {self.unit.name!r}")

    def has_unit(self) -> bool:
        return self.unit is not None
