from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from wktcrs.constructs.base import Identifiable, freeze
from wktcrs.constructs.date_time import DateTime
from wktcrs.constructs.ellipsoid import Ellipsoid, PrimeMeridian
from wktcrs.constructs.identifier import Identifier
from wktcrs.utils.exceptions import SemanticError


@dataclass(frozen=True)
class GeodeticReferenceFrame(Identifiable):
    """
    A geodetic datum: the ellipsoid, prime meridian and anchor that tie coordinates to the earth.

    The prime meridian follows the datum in WKT text as a sibling, but it is
    kept here because it is part of the frame.

    Examples:
        >>> frame = GeodeticReferenceFrame(
        ...     "World Geodetic System 1984",
        ...     Ellipsoid.oblate("WGS 84", 6378137.0, 298.257223563),
        ... )
        >>> frame.has_prime_meridian()
        False
    """

    name: str
    ellipsoid: Ellipsoid
    prime_meridian: Optional[PrimeMeridian] = None
    anchor: Optional[str] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None

    def __post_init__(self):
        freeze(self, "identifiers")

    def has_prime_meridian(self) -> bool:
        return self.prime_meridian is not None

    def has_anchor(self) -> bool:
        return self.anchor is not None


@dataclass(frozen=True)
class VerticalReferenceFrame(Identifiable):
    name: str
    anchor: Optional[str] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None

    def __post_init__(self):
        freeze(self, "identifiers")

    def has_anchor(self) -> bool:
        return self.anchor is not None


@dataclass(frozen=True)
class EngineeringDatum(Identifiable):
    name: str
    anchor: Optional[str] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None

    def __post_init__(self):
        freeze(self, "identifiers")

    def has_anchor(self) -> bool:
        return self.anchor is not None


@dataclass(frozen=True)
class ParametricDatum(Identifiable):
    name: str
    anchor: Optional[str] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None

    def __post_init__(self):
        freeze(self, "identifiers")

    def has_anchor(self) -> bool:
        return self.anchor is not None


@dataclass(frozen=True)
class TemporalDatum(Identifiable):
    """
    A temporal datum: an optional calendar and the origin of the time scale.

    The origin is a DateTime when it parses as one and free text otherwise.
    """

    name: str
    calendar: Optional[str] = None
    origin: Optional[Union[DateTime, str]] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None

    def __post_init__(self):
        freeze(self, "identifiers")

    def has_calendar(self) -> bool:
        return self.calendar is not None

    def has_origin(self) -> bool:
        return self.origin is not None

    def has_origin_date_time(self) -> bool:
        return isinstance(self.origin, DateTime)


ReferenceFrame = Union[
    GeodeticReferenceFrame,
    VerticalReferenceFrame,
    EngineeringDatum,
    ParametricDatum,
    TemporalDatum,
]


@dataclass(frozen=True)
class DatumEnsembleMember(Identifiable):
    name: str
    identifiers: Optional[Tuple[Identifier, ...]] = None

    def __post_init__(self):
        freeze(self, "identifiers")


@dataclass(frozen=True)
class DatumEnsemble(Identifiable):
    """
    A collection of realizations of a datum treated as interchangeable within an accuracy.

    A geodetic ensemble carries an ellipsoid (and optionally a prime meridian);
    an ensemble without an ellipsoid is a vertical ensemble.

    Attributes:
        name: The ensemble name
        members: The datum realizations, at least two
        accuracy: The positional accuracy of the ensemble in metres
        ellipsoid: The ellipsoid shared by a geodetic ensemble
        prime_meridian: The prime meridian of a geodetic ensemble
        identifiers: Optional identifiers of the ensemble
    """

    name: str
    members: Tuple[DatumEnsembleMember, ...]
    accuracy: float
    ellipsoid: Optional[Ellipsoid] = None
    prime_meridian: Optional[PrimeMeridian] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None

    def __post_init__(self):
        freeze(self, "members", "identifiers")
        if len(self.members) < 2:
            raise SemanticError(
                f"Datum ensemble {self.name!r} requires at least 2 members, got {len(self.members)}"
            )
        if self.accuracy < 0:
            raise SemanticError(f"Datum ensemble {self.name!r} accuracy must not be negative")
        if self.prime_meridian is not None and self.ellipsoid is None:
            raise SemanticError("A vertical datum ensemble cannot have a prime meridian")

    def is_geodetic(self) -> bool:
        return self.ellipsoid is not None

    def has_prime_meridian(self) -> bool:
        return self.prime_meridian is not None


@dataclass(frozen=True)
class Dynamic:
    """
    Marks a reference frame as dynamic: coordinates change with time.

    Attributes:
        frame_epoch: The reference epoch of the frame, as a decimal year
        model_name: The optional deformation model
        model_identifiers: Optional identifiers of the deformation model
    """

    frame_epoch: float
    model_name: Optional[str] = None
    model_identifiers: Optional[Tuple[Identifier, ...]] = None

    def __post_init__(self):
        freeze(self, "model_identifiers")
        if self.model_identifiers is not None and self.model_name is None:
            raise SemanticError("Deformation model identifiers require a model name")

    def has_model(self) -> bool:
        return self.model_name is not None


@dataclass(frozen=True)
class GeoidModel(Identifiable):
    name: str
    identifiers: Optional[Tuple[Identifier, ...]] = None

    def __post_init__(self):
        freeze(self, "identifiers")
