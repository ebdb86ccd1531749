from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Tuple, Union

from wktcrs.constructs.base import Identifiable, ObjectUsage, freeze
from wktcrs.constructs.coordinate_system import CoordinateSystem, CoordinateSystemType
from wktcrs.constructs.datum import (
    DatumEnsemble,
    Dynamic,
    EngineeringDatum,
    GeodeticReferenceFrame,
    GeoidModel,
    ParametricDatum,
    ReferenceFrame,
    TemporalDatum,
    VerticalReferenceFrame,
)
from wktcrs.constructs.ellipsoid import Ellipsoid, PrimeMeridian
from wktcrs.constructs.extent import Usage
from wktcrs.constructs.identifier import Identifier
from wktcrs.constructs.operation import AbridgedTransformation, DerivingConversion, MapProjection
from wktcrs.constructs.unit import Unit
from wktcrs.utils.exceptions import SemanticError


class CRSKind(Enum):
    GEODETIC = "geodetic"
    GEOGRAPHIC = "geographic"
    PROJECTED = "projected"
    VERTICAL = "vertical"
    ENGINEERING = "engineering"
    PARAMETRIC = "parametric"
    TEMPORAL = "temporal"
    DERIVED = "derived"
    COMPOUND = "compound"
    BOUND = "bound"
    COORDINATE_OPERATION = "coordinate operation"
    CONCATENATED_OPERATION = "concatenated operation"
    POINT_MOTION_OPERATION = "point motion operation"

    def is_geodetic(self) -> bool:
        return self in (CRSKind.GEODETIC, CRSKind.GEOGRAPHIC)


_DATUM_TYPES = {
    CRSKind.GEODETIC: GeodeticReferenceFrame,
    CRSKind.GEOGRAPHIC: GeodeticReferenceFrame,
    CRSKind.VERTICAL: VerticalReferenceFrame,
    CRSKind.ENGINEERING: EngineeringDatum,
    CRSKind.PARAMETRIC: ParametricDatum,
    CRSKind.TEMPORAL: TemporalDatum,
}

_ENSEMBLE_KINDS = (CRSKind.GEODETIC, CRSKind.GEOGRAPHIC, CRSKind.VERTICAL)


def _check_datum(
    kind: CRSKind,
    datum: Optional[ReferenceFrame],
    ensemble: Optional[DatumEnsemble],
    dynamic: Optional[Dynamic],
):
    if datum is not None and ensemble is not None:
        raise SemanticError(f"A {kind.value} CRS takes a datum or a datum ensemble, not both")
    if datum is None and ensemble is None:
        raise SemanticError(f"A {kind.value} CRS requires a datum or a datum ensemble")
    if datum is not None and not isinstance(datum, _DATUM_TYPES[kind]):
        raise SemanticError(
            f"A {kind.value} CRS cannot use a {type(datum).__name__} as its datum"
        )
    if ensemble is not None:
        if kind not in _ENSEMBLE_KINDS:
            raise SemanticError(f"A {kind.value} CRS cannot use a datum ensemble")
        if kind.is_geodetic() != ensemble.is_geodetic():
            raise SemanticError(
                f"A {kind.value} CRS cannot use a "
                f"{'geodetic' if ensemble.is_geodetic() else 'vertical'} datum ensemble"
            )
    if dynamic is not None and kind not in _ENSEMBLE_KINDS:
        raise SemanticError(f"A {kind.value} CRS cannot be dynamic")


class DatumBearing:
    """Predicates for model classes with `datum`, `ensemble` and `dynamic` fields."""

    datum: Optional[ReferenceFrame]
    ensemble: Optional[DatumEnsemble]
    dynamic: Optional[Dynamic]

    def has_datum(self) -> bool:
        return self.datum is not None

    def has_ensemble(self) -> bool:
        return self.ensemble is not None

    def has_dynamic(self) -> bool:
        return self.dynamic is not None

    @property
    def ellipsoid(self) -> Optional[Ellipsoid]:
        """The ellipsoid of the geodetic datum or ensemble; None for other datums."""
        source = self.datum if self.datum is not None else self.ensemble
        return getattr(source, "ellipsoid", None)

    @property
    def prime_meridian(self) -> Optional[PrimeMeridian]:
        source = self.datum if self.datum is not None else self.ensemble
        return getattr(source, "prime_meridian", None)


@dataclass(frozen=True)
class GeodeticCRS(ObjectUsage, DatumBearing):
    """
    A geodetic (GEODCRS) or geographic (GEOGCRS) coordinate reference system.

    It is based on exactly one of a geodetic reference frame or a geodetic
    datum ensemble.

    Attributes:
        name: The CRS name
        kind: CRSKind.GEODETIC or CRSKind.GEOGRAPHIC
        coordinate_system: The coordinate system; ellipsoidal for a geographic CRS
        datum: The reference frame, when not an ensemble
        ensemble: The datum ensemble, when not a reference frame
        dynamic: Set for a dynamic reference frame
        usages: Optional scopes and extents
        identifiers: Optional identifiers of the CRS
        remark: Optional free text remark
        extensions: Legacy EXTENSION passthroughs, which are not written back

    Examples:
        >>> from wktcrs import read_wkt
        >>> crs = read_wkt('GEOGCS["WGS 84",DATUM["WGS_1984",SPHEROID["WGS 84",6378137,298.257223563]],'
        ...                'PRIMEM["Greenwich",0],UNIT["degree",0.0174532925199433]]')
        >>> crs.kind
        <CRSKind.GEOGRAPHIC: 'geographic'>
        >>> crs.ellipsoid.inverse_flattening
        298.257223563
    """

    name: str
    kind: CRSKind
    coordinate_system: CoordinateSystem
    datum: Optional[GeodeticReferenceFrame] = None
    ensemble: Optional[DatumEnsemble] = None
    dynamic: Optional[Dynamic] = None
    usages: Optional[Tuple[Usage, ...]] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None
    remark: Optional[str] = None
    extensions: Optional[Tuple[Tuple[str, str], ...]] = None

    def __post_init__(self):
        freeze(self, "usages", "identifiers", "extensions")
        if not self.kind.is_geodetic():
            raise SemanticError(f"A geodetic CRS cannot be of kind {self.kind.value}")
        _check_datum(self.kind, self.datum, self.ensemble, self.dynamic)
        if (
            self.kind is CRSKind.GEOGRAPHIC
            and self.coordinate_system.cs_type is not CoordinateSystemType.ELLIPSOIDAL
        ):
            raise SemanticError(
                f"A geographic CRS requires an ellipsoidal coordinate system, "
                f"not {self.coordinate_system.cs_type.value}"
            )


@dataclass(frozen=True)
class BaseCRS(Identifiable, DatumBearing):
    """
    The abridged CRS a projected or derived CRS is built on (BASEGEOGCRS[...] and friends).

    A base CRS has no coordinate system of its own; a geodetic base may state
    the unit of its ellipsoidal coordinate system instead.
    """

    name: str
    kind: CRSKind
    datum: Optional[ReferenceFrame] = None
    ensemble: Optional[DatumEnsemble] = None
    dynamic: Optional[Dynamic] = None
    unit: Optional[Unit] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None

    def __post_init__(self):
        freeze(self, "identifiers")
        if self.kind not in _DATUM_TYPES:
            raise SemanticError(f"A base CRS cannot be of kind {self.kind.value}")
        _check_datum(self.kind, self.datum, self.ensemble, self.dynamic)

    def has_unit(self) -> bool:
        return self.unit is not None


@dataclass(frozen=True)
class BaseProjectedCRS(Identifiable):
    """The projected base of a derived projected CRS, written as BASEPROJCRS[...]."""

    kind: ClassVar[CRSKind] = CRSKind.PROJECTED

    name: str
    base: BaseCRS
    conversion: MapProjection
    unit: Optional[Unit] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None

    def __post_init__(self):
        freeze(self, "identifiers")
        if not self.base.kind.is_geodetic():
            raise SemanticError("A projected CRS requires a geodetic or geographic base CRS")

    def has_unit(self) -> bool:
        return self.unit is not None


@dataclass(frozen=True)
class ProjectedCRS(ObjectUsage):
    """
    A projected CRS: a geographic base CRS, a map projection and a Cartesian coordinate system.

    Attributes:
        name: The CRS name
        base: The geodetic or geographic base CRS
        conversion: The map projection from the base CRS
        coordinate_system: The coordinate system of the projected coordinates
    """

    kind: ClassVar[CRSKind] = CRSKind.PROJECTED

    name: str
    base: BaseCRS
    conversion: MapProjection
    coordinate_system: CoordinateSystem
    usages: Optional[Tuple[Usage, ...]] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None
    remark: Optional[str] = None
    extensions: Optional[Tuple[Tuple[str, str], ...]] = None

    def __post_init__(self):
        freeze(self, "usages", "identifiers", "extensions")
        if not self.base.kind.is_geodetic():
            raise SemanticError("A projected CRS requires a geodetic or geographic base CRS")


@dataclass(frozen=True)
class VerticalCRS(ObjectUsage, DatumBearing):
    kind: ClassVar[CRSKind] = CRSKind.VERTICAL

    name: str
    coordinate_system: CoordinateSystem
    datum: Optional[VerticalReferenceFrame] = None
    ensemble: Optional[DatumEnsemble] = None
    dynamic: Optional[Dynamic] = None
    geoid_models: Optional[Tuple[GeoidModel, ...]] = None
    usages: Optional[Tuple[Usage, ...]] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None
    remark: Optional[str] = None
    extensions: Optional[Tuple[Tuple[str, str], ...]] = None

    def __post_init__(self):
        freeze(self, "geoid_models", "usages", "identifiers", "extensions")
        _check_datum(self.kind, self.datum, self.ensemble, self.dynamic)

    def has_geoid_models(self) -> bool:
        return self.geoid_models is not None


@dataclass(frozen=True)
class EngineeringCRS(ObjectUsage):
    kind: ClassVar[CRSKind] = CRSKind.ENGINEERING

    name: str
    datum: EngineeringDatum
    coordinate_system: CoordinateSystem
    usages: Optional[Tuple[Usage, ...]] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None
    remark: Optional[str] = None
    extensions: Optional[Tuple[Tuple[str, str], ...]] = None

    def __post_init__(self):
        freeze(self, "usages", "identifiers", "extensions")
        _check_datum(self.kind, self.datum, None, None)


@dataclass(frozen=True)
class ParametricCRS(ObjectUsage):
    kind: ClassVar[CRSKind] = CRSKind.PARAMETRIC

    name: str
    datum: ParametricDatum
    coordinate_system: CoordinateSystem
    usages: Optional[Tuple[Usage, ...]] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None
    remark: Optional[str] = None
    extensions: Optional[Tuple[Tuple[str, str], ...]] = None

    def __post_init__(self):
        freeze(self, "usages", "identifiers", "extensions")
        _check_datum(self.kind, self.datum, None, None)


@dataclass(frozen=True)
class TemporalCRS(ObjectUsage):
    kind: ClassVar[CRSKind] = CRSKind.TEMPORAL

    name: str
    datum: TemporalDatum
    coordinate_system: CoordinateSystem
    usages: Optional[Tuple[Usage, ...]] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None
    remark: Optional[str] = None
    extensions: Optional[Tuple[Tuple[str, str], ...]] = None

    def __post_init__(self):
        freeze(self, "usages", "identifiers", "extensions")
        _check_datum(self.kind, self.datum, None, None)
        if not self.coordinate_system.cs_type.is_temporal():
            raise SemanticError(
                f"A temporal CRS requires a temporal coordinate system, "
                f"not {self.coordinate_system.cs_type.value}"
            )


# which base kinds each kind of derived CRS may be built on
_DERIVED_BASE_KINDS = {
    CRSKind.GEODETIC: (CRSKind.GEODETIC, CRSKind.GEOGRAPHIC),
    CRSKind.GEOGRAPHIC: (CRSKind.GEODETIC, CRSKind.GEOGRAPHIC),
    CRSKind.PROJECTED: (CRSKind.PROJECTED,),
    CRSKind.VERTICAL: (CRSKind.VERTICAL,),
    CRSKind.ENGINEERING: (
        CRSKind.ENGINEERING,
        CRSKind.GEODETIC,
        CRSKind.GEOGRAPHIC,
        CRSKind.PROJECTED,
    ),
    CRSKind.PARAMETRIC: (CRSKind.PARAMETRIC,),
    CRSKind.TEMPORAL: (CRSKind.TEMPORAL,),
}


@dataclass(frozen=True)
class DerivedCRS(ObjectUsage):
    """
    A CRS derived from a base CRS by a deriving conversion.

    Attributes:
        name: The CRS name
        derived_kind: The kind of CRS this is derived as, e.g. CRSKind.VERTICAL for a derived vertical CRS
        base: The base CRS
        conversion: The conversion from the base CRS
        coordinate_system: The coordinate system of the derived CRS
    """

    kind: ClassVar[CRSKind] = CRSKind.DERIVED

    name: str
    derived_kind: CRSKind
    base: Union[BaseCRS, BaseProjectedCRS]
    conversion: DerivingConversion
    coordinate_system: CoordinateSystem
    usages: Optional[Tuple[Usage, ...]] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None
    remark: Optional[str] = None
    extensions: Optional[Tuple[Tuple[str, str], ...]] = None

    def __post_init__(self):
        freeze(self, "usages", "identifiers", "extensions")
        allowed = _DERIVED_BASE_KINDS.get(self.derived_kind)
        if allowed is None:
            raise SemanticError(f"There is no derived {self.derived_kind.value} CRS")
        if self.base.kind not in allowed:
            raise SemanticError(
                f"A derived {self.derived_kind.value} CRS cannot have a {self.base.kind.value} base CRS"
            )


@dataclass(frozen=True)
class CompoundCRS(ObjectUsage):
    """
    Two or more CRSs describing different dimensions of the same position.

    A component may not itself be compound or bound.
    """

    kind: ClassVar[CRSKind] = CRSKind.COMPOUND

    name: str
    components: Tuple[SingleCRS, ...]
    usages: Optional[Tuple[Usage, ...]] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None
    remark: Optional[str] = None
    extensions: Optional[Tuple[Tuple[str, str], ...]] = None

    def __post_init__(self):
        freeze(self, "components", "usages", "identifiers", "extensions")
        if len(self.components) < 2:
            raise SemanticError(
                f"A compound CRS requires at least 2 components, got {len(self.components)}"
            )
        for component in self.components:
            if not isinstance(component, SINGLE_CRS_TYPES):
                raise SemanticError(
                    f"A compound CRS cannot contain a {type(component).__name__}"
                )


@dataclass(frozen=True)
class BoundCRS(ObjectUsage):
    """
    A CRS bound to a target CRS through a transformation, written as BOUNDCRS[...].

    A bound CRS has no name of its own; it reports the name of its source CRS.
    """

    kind: ClassVar[CRSKind] = CRSKind.BOUND

    source: CRS
    target: CRS
    transformation: AbridgedTransformation
    usages: Optional[Tuple[Usage, ...]] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None
    remark: Optional[str] = None
    extensions: Optional[Tuple[Tuple[str, str], ...]] = None

    def __post_init__(self):
        freeze(self, "usages", "identifiers", "extensions")
        for crs in (self.source, self.target):
            if not isinstance(crs, CRS_TYPES) or isinstance(crs, BoundCRS):
                raise SemanticError(f"A bound CRS cannot bind a {type(crs).__name__}")

    @property
    def name(self) -> str:
        return self.source.name


SingleCRS = Union[
    GeodeticCRS,
    ProjectedCRS,
    VerticalCRS,
    EngineeringCRS,
    ParametricCRS,
    TemporalCRS,
    DerivedCRS,
]
CRS = Union[SingleCRS, CompoundCRS, BoundCRS]

SINGLE_CRS_TYPES = (
    GeodeticCRS,
    ProjectedCRS,
    VerticalCRS,
    EngineeringCRS,
    ParametricCRS,
    TemporalCRS,
    DerivedCRS,
)
CRS_TYPES = SINGLE_CRS_TYPES + (CompoundCRS, BoundCRS)
