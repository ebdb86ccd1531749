"""Recursive descent reader turning WKT text into the CRS object model.

Both ISO 19162 (WKT2, 2015 and 2019 forms) and the legacy OGC WKT1 grammar
are accepted. Optional children are found by peeking one token past the next
separator, so the reader never backtracks. Every error raised while a
production is open is tagged with that production's keyword and the offset
the reader had reached.
"""

from __future__ import annotations

import dataclasses
import logging
from contextlib import contextmanager
from typing import (
    AbstractSet,
    Callable,
    Dict,
    FrozenSet,
    Iterator,
    List,
    NamedTuple,
    Optional,
    TextIO,
    Tuple,
    Type,
    Union,
)

from wktcrs.constructs.axis import Axis, AxisDirection, Meridian, split_name_abbreviation
from wktcrs.constructs.coordinate_operation import (
    ConcatenatedOperation,
    CoordinateMetadata,
    CoordinateOperation,
    PointMotionOperation,
    Step,
)
from wktcrs.constructs.coordinate_system import CoordinateSystem, CoordinateSystemType
from wktcrs.constructs.crs import (
    CRS,
    CRS_TYPES,
    BaseCRS,
    BaseProjectedCRS,
    BoundCRS,
    CompoundCRS,
    CRSKind,
    DerivedCRS,
    EngineeringCRS,
    GeodeticCRS,
    ParametricCRS,
    ProjectedCRS,
    TemporalCRS,
    VerticalCRS,
)
from wktcrs.constructs.date_time import DateTime
from wktcrs.constructs.datum import (
    DatumEnsemble,
    DatumEnsembleMember,
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
from wktcrs.constructs.extent import (
    Extent,
    GeographicBoundingBox,
    TemporalExtent,
    Usage,
    VerticalExtent,
)
from wktcrs.constructs.identifier import Identifier
from wktcrs.constructs.operation import (
    AbridgedTransformation,
    DerivingConversion,
    MapProjection,
    OperationMethod,
    OperationParameter,
    Parameter,
    ParameterFile,
)
from wktcrs.constructs.unit import Unit, UnitType
from wktcrs.utils import epsg
from wktcrs.utils.constants import (
    DATUM_TYPE_EXTENSION,
    DEFAULT_GEOCENTRIC_AXES,
    DEFAULT_GEOGRAPHIC_AXES,
    DEFAULT_PROJECTED_AXES,
    DEFAULT_VERTICAL_AXES,
    LEFT_DELIMITERS,
    NUMBER_PATTERN,
    QUOTE,
    RIGHT_DELIMITERS,
    SEPARATOR,
    TOKEN_CHARACTERS,
    TOWGS84_HELMERT_METHOD_CODES,
    TOWGS84_PARAMETER_CODES,
    TOWGS84_TRANSLATION_METHOD_CODES,
)
from wktcrs.utils.crs import WGS84_GEOGRAPHIC
from wktcrs.utils.epsg import WellKnownMethod
from wktcrs.utils.exceptions import (
    InvalidDelimiter,
    MissingSeparator,
    SemanticError,
    UnexpectedEndOfInput,
    UnexpectedKeyword,
    UnknownKeyword,
    WKTError,
    WKTSyntaxError,
)
from wktcrs.wkt.keywords import (
    KEYWORDS,
    SPATIAL_UNIT_KEYWORDS,
    UNIT_KEYWORDS,
    Keyword,
)
from wktcrs.wkt.text_reader import TextReader, Token

log = logging.getLogger(__name__)

TopLevel = Union[CRS, CoordinateOperation, PointMotionOperation, ConcatenatedOperation, CoordinateMetadata]

CRS_KEYWORDS: FrozenSet[Keyword] = frozenset(
    {
        Keyword.GEODCRS,
        Keyword.GEOGCRS,
        Keyword.PROJCRS,
        Keyword.DERIVEDPROJCRS,
        Keyword.VERTCRS,
        Keyword.ENGCRS,
        Keyword.PARAMETRICCRS,
        Keyword.TIMECRS,
        Keyword.COMPOUNDCRS,
        Keyword.BOUNDCRS,
    }
)

OPERATION_KEYWORDS: FrozenSet[Keyword] = frozenset(
    {
        Keyword.COORDINATEOPERATION,
        Keyword.POINTMOTIONOPERATION,
        Keyword.CONCATENATEDOPERATION,
    }
)

_BASE_KINDS = {
    Keyword.BASEGEODCRS: CRSKind.GEODETIC,
    Keyword.BASEGEOGCRS: CRSKind.GEOGRAPHIC,
    Keyword.BASEVERTCRS: CRSKind.VERTICAL,
    Keyword.BASEENGCRS: CRSKind.ENGINEERING,
    Keyword.BASEPARAMCRS: CRSKind.PARAMETRIC,
    Keyword.BASETIMECRS: CRSKind.TEMPORAL,
}

# base CRS keywords each derived CRS keyword accepts, and the kind it derives
_DERIVED_BASES = {
    Keyword.GEODCRS: (Keyword.BASEGEODCRS, Keyword.BASEGEOGCRS),
    Keyword.GEOGCRS: (Keyword.BASEGEODCRS, Keyword.BASEGEOGCRS),
    Keyword.VERTCRS: (Keyword.BASEVERTCRS,),
    Keyword.ENGCRS: (
        Keyword.BASEENGCRS,
        Keyword.BASEGEODCRS,
        Keyword.BASEGEOGCRS,
        Keyword.BASEPROJCRS,
    ),
    Keyword.PARAMETRICCRS: (Keyword.BASEPARAMCRS,),
    Keyword.TIMECRS: (Keyword.BASETIMECRS,),
    Keyword.DERIVEDPROJCRS: (Keyword.BASEPROJCRS,),
}

_DERIVED_KINDS = {
    Keyword.GEODCRS: CRSKind.GEODETIC,
    Keyword.GEOGCRS: CRSKind.GEOGRAPHIC,
    Keyword.VERTCRS: CRSKind.VERTICAL,
    Keyword.ENGCRS: CRSKind.ENGINEERING,
    Keyword.PARAMETRICCRS: CRSKind.PARAMETRIC,
    Keyword.TIMECRS: CRSKind.TEMPORAL,
    Keyword.DERIVEDPROJCRS: CRSKind.PROJECTED,
}

_DATUM_KEYWORDS = {
    CRSKind.GEODETIC: Keyword.DATUM,
    CRSKind.GEOGRAPHIC: Keyword.DATUM,
    CRSKind.VERTICAL: Keyword.VDATUM,
    CRSKind.ENGINEERING: Keyword.EDATUM,
    CRSKind.PARAMETRIC: Keyword.PDATUM,
    CRSKind.TEMPORAL: Keyword.TDATUM,
}

_ENSEMBLE_KINDS = (CRSKind.GEODETIC, CRSKind.GEOGRAPHIC, CRSKind.VERTICAL)


class _LegacyCoordinateSystem(NamedTuple):
    cs_type: CoordinateSystemType
    unit_type: UnitType
    default_axes: Tuple[Tuple[str, str], ...]


# WKT1 has no CS keyword; the CRS keyword implies the coordinate system
_LEGACY_COORDINATE_SYSTEMS = {
    CRSKind.GEOGRAPHIC: _LegacyCoordinateSystem(
        CoordinateSystemType.ELLIPSOIDAL, UnitType.ANGLE, DEFAULT_GEOGRAPHIC_AXES
    ),
    CRSKind.GEODETIC: _LegacyCoordinateSystem(
        CoordinateSystemType.CARTESIAN, UnitType.LENGTH, DEFAULT_GEOCENTRIC_AXES
    ),
    CRSKind.PROJECTED: _LegacyCoordinateSystem(
        CoordinateSystemType.CARTESIAN, UnitType.LENGTH, DEFAULT_PROJECTED_AXES
    ),
    CRSKind.VERTICAL: _LegacyCoordinateSystem(
        CoordinateSystemType.VERTICAL, UnitType.LENGTH, DEFAULT_VERTICAL_AXES
    ),
    CRSKind.ENGINEERING: _LegacyCoordinateSystem(
        CoordinateSystemType.CARTESIAN, UnitType.LENGTH, DEFAULT_PROJECTED_AXES
    ),
}


class _Header(NamedTuple):
    """The trailing children shared by every top level object."""

    usages: Optional[Tuple[Usage, ...]]
    identifiers: Optional[Tuple[Identifier, ...]]
    remark: Optional[str]
    extensions: Optional[Tuple[Tuple[str, str], ...]]


def _candidates(token: Token) -> FrozenSet[Keyword]:
    if token.quoted or token.value[0] not in TOKEN_CHARACTERS:
        return frozenset()
    return KEYWORDS.resolve_ambiguous(token.value)


def _keyword_error(token: Token, expected: AbstractSet[Keyword]) -> WKTSyntaxError:
    names = sorted(k.value for k in expected)
    if token.quoted or token.value[0] not in TOKEN_CHARACTERS:
        return UnexpectedKeyword(
            f"Expected a keyword, got {token.raw}",
            token=token.raw,
            offset=token.offset,
            expected=names,
        )
    if not KEYWORDS.resolve_ambiguous(token.value):
        return UnknownKeyword(
            f"Unknown keyword {token.value}",
            token=token.raw,
            offset=token.offset,
            expected=names,
        )
    return UnexpectedKeyword(
        f"Unexpected keyword {token.value}",
        token=token.raw,
        offset=token.offset,
        expected=names,
    )


class CRSReader:
    """
    Reads CRS objects, coordinate operations and their parts from WKT text.

    The reader is a context manager: a file-like source is closed on exit.
    One reader reads one object; create a new reader per text.

    In strict mode every grammar violation raises. With strict=False a
    missing separator and text trailing the top level object are logged as
    warnings and otherwise ignored.

    A legacy TOWGS84 block turns the CRS that carries it into a BoundCRS
    whose target is WGS 84. Inside BOUNDCRS, COORDINATEOPERATION,
    POINTMOTIONOPERATION and CONCATENATEDOPERATION the explicit operation
    wins and TOWGS84 blocks are discarded with a warning. Only the first
    TOWGS84 block of a compound CRS is kept.

    Args:
        source: The WKT text, or an open text stream to read it from
        strict: Raise on every grammar violation. Default is True.

    Examples:
        >>> with CRSReader('VERTCRS["NAVD88",VDATUM["North American Vertical Datum 1988"],'
        ...                'CS[vertical,1],AXIS["gravity-related height (H)",up],'
        ...                'LENGTHUNIT["metre",1.0]]') as reader:
        ...     crs = reader.read()
        >>> crs.coordinate_system.axes[0].abbreviation
        'H'
    """

    def __init__(self, source: Union[str, TextIO], strict: bool = True):
        self._reader = TextReader(source)
        self._strict = strict
        self._to_wgs84: Optional[Tuple[float, ...]] = None
        self._operation_depth = 0
        self._pending_extensions: List[Tuple[str, str]] = []

        self._crs_productions: Dict[Keyword, Callable[[], CRS]] = {
            Keyword.GEODCRS: self.read_geodetic_crs,
            Keyword.GEOGCRS: self.read_geodetic_crs,
            Keyword.PROJCRS: self.read_projected_crs,
            Keyword.DERIVEDPROJCRS: self.read_derived_projected_crs,
            Keyword.VERTCRS: self.read_vertical_crs,
            Keyword.ENGCRS: self.read_engineering_crs,
            Keyword.PARAMETRICCRS: self.read_parametric_crs,
            Keyword.TIMECRS: self.read_temporal_crs,
            Keyword.COMPOUNDCRS: self.read_compound_crs,
            Keyword.BOUNDCRS: self.read_bound_crs,
        }
        self._top_level_productions: Dict[Keyword, Callable[[], TopLevel]] = {
            **self._crs_productions,
            Keyword.COORDINATEOPERATION: self.read_coordinate_operation,
            Keyword.POINTMOTIONOPERATION: self.read_point_motion_operation,
            Keyword.CONCATENATEDOPERATION: self.read_concatenated_operation,
            Keyword.COORDINATEMETADATA: self.read_coordinate_metadata,
        }

    def __enter__(self) -> CRSReader:
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def close(self):
        self._reader.close()

    @property
    def strict(self) -> bool:
        return self._strict

    def read(self) -> TopLevel:
        """
        Read one complete top level object and check that no text follows it.

        Returns:
            A CRS, a coordinate operation or coordinate metadata

        Raises:
            WKTError: On any lexical, syntax or semantic problem
        """
        result = self._dispatch(self._top_level_productions)
        self.read_end()
        if isinstance(result, CRS_TYPES):
            result = self._bind_to_wgs84(result)
        return result

    def read_crs(self) -> CRS:
        """Read any CRS, without checking for trailing text."""
        return self._dispatch(self._crs_productions)

    def read_end(self):
        """
        Check that the text is exhausted.

        Raises:
            WKTSyntaxError: If tokens remain and the reader is strict
        """
        token = self._reader.peek_token()
        if token is None:
            return
        if self._strict:
            raise WKTSyntaxError(
                "Unexpected text after the end of the WKT object",
                token=token.raw,
                offset=token.offset,
            )
        log.warning(f"ignoring text after the end of the WKT object at offset {token.offset}")

    # CRS productions

    def read_geodetic_crs(self) -> Union[GeodeticCRS, DerivedCRS]:
        """Read GEODCRS[...] or GEOGCRS[...], including the WKT1 GEOCCS and GEOGCS forms."""
        keyword = self._read_keyword(Keyword.GEODCRS, Keyword.GEOGCRS)
        kind = CRSKind.GEOGRAPHIC if keyword is Keyword.GEOGCRS else CRSKind.GEODETIC
        with self._production(keyword.value):
            self._read_left_delimiter()
            name = self._read_quoted_text()
            if self._is_keyword_next(*_DERIVED_BASES[keyword]):
                return self._read_derived_crs(keyword, name)
            datum, ensemble, dynamic = self._read_datum_or_ensemble(Keyword.DATUM)
            coordinate_system = self._read_crs_coordinate_system(kind)
            header = self._read_header()
            self._read_right_delimiter()
            return GeodeticCRS(
                name,
                kind,
                coordinate_system,
                datum=datum,
                ensemble=ensemble,
                dynamic=dynamic,
                **header._asdict(),
            )

    def read_projected_crs(self) -> ProjectedCRS:
        """Read PROJCRS[...] or the WKT1 PROJCS[...] form."""
        self._read_keyword(Keyword.PROJCRS)
        with self._production(Keyword.PROJCRS.value):
            self._read_left_delimiter()
            name = self._read_quoted_text()
            legacy = self._is_keyword_next(Keyword.GEODCRS, Keyword.GEOGCRS)
            self._read_separator()
            if legacy:
                base = self._base_from_geodetic(self.read_geodetic_crs())
                self._read_separator()
                method = self.read_method()
                parameters = self._read_parameters(method)
                conversion = MapProjection(method.name, method, parameters or None)
                coordinate_system = self._read_crs_coordinate_system(CRSKind.PROJECTED)
            else:
                base = self._read_base_crs(Keyword.BASEGEODCRS, Keyword.BASEGEOGCRS)
                self._read_separator()
                conversion = self.read_map_projection()
                coordinate_system = self._read_crs_coordinate_system(None)
            header = self._read_header()
            self._read_right_delimiter()
            return ProjectedCRS(name, base, conversion, coordinate_system, **header._asdict())

    def read_derived_projected_crs(self) -> DerivedCRS:
        self._read_keyword(Keyword.DERIVEDPROJCRS)
        with self._production(Keyword.DERIVEDPROJCRS.value):
            self._read_left_delimiter()
            name = self._read_quoted_text()
            return self._read_derived_crs(Keyword.DERIVEDPROJCRS, name)

    def read_vertical_crs(self) -> Union[VerticalCRS, DerivedCRS]:
        """Read VERTCRS[...] or the WKT1 VERT_CS[...] form."""
        self._read_keyword(Keyword.VERTCRS)
        with self._production(Keyword.VERTCRS.value):
            self._read_left_delimiter()
            name = self._read_quoted_text()
            if self._is_keyword_next(*_DERIVED_BASES[Keyword.VERTCRS]):
                return self._read_derived_crs(Keyword.VERTCRS, name)
            datum, ensemble, dynamic = self._read_datum_or_ensemble(Keyword.VDATUM)
            coordinate_system = self._read_crs_coordinate_system(CRSKind.VERTICAL)
            geoid_models = []
            while self._is_keyword_next(Keyword.GEOIDMODEL):
                self._read_separator()
                geoid_models.append(self._read_geoid_model())
            header = self._read_header()
            self._read_right_delimiter()
            return VerticalCRS(
                name,
                coordinate_system,
                datum=datum,
                ensemble=ensemble,
                dynamic=dynamic,
                geoid_models=geoid_models or None,
                **header._asdict(),
            )

    def read_engineering_crs(self) -> Union[EngineeringCRS, DerivedCRS]:
        """Read ENGCRS[...] or the WKT1 LOCAL_CS[...] form."""
        return self._read_simple_crs(Keyword.ENGCRS, EngineeringCRS, CRSKind.ENGINEERING)

    def read_parametric_crs(self) -> Union[ParametricCRS, DerivedCRS]:
        return self._read_simple_crs(Keyword.PARAMETRICCRS, ParametricCRS, None)

    def read_temporal_crs(self) -> Union[TemporalCRS, DerivedCRS]:
        return self._read_simple_crs(Keyword.TIMECRS, TemporalCRS, None)

    def _read_simple_crs(self, keyword: Keyword, crs_type: Type, legacy_kind: Optional[CRSKind]):
        self._read_keyword(keyword)
        with self._production(keyword.value):
            self._read_left_delimiter()
            name = self._read_quoted_text()
            if self._is_keyword_next(*_DERIVED_BASES[keyword]):
                return self._read_derived_crs(keyword, name)
            self._read_separator()
            datum = self._read_datum(_DATUM_KEYWORDS[crs_type.kind])
            coordinate_system = self._read_crs_coordinate_system(legacy_kind)
            header = self._read_header()
            self._read_right_delimiter()
            return crs_type(name, datum, coordinate_system, **header._asdict())

    def read_compound_crs(self) -> CompoundCRS:
        """Read COMPOUNDCRS[...] or the WKT1 COMPD_CS[...] form."""
        self._read_keyword(Keyword.COMPOUNDCRS)
        with self._production(Keyword.COMPOUNDCRS.value):
            self._read_left_delimiter()
            name = self._read_quoted_text()
            components = []
            while self._is_keyword_next(*CRS_KEYWORDS):
                self._read_separator()
                components.append(self.read_crs())
            header = self._read_header()
            self._read_right_delimiter()
            return CompoundCRS(name, components, **header._asdict())

    def read_bound_crs(self) -> BoundCRS:
        self._read_keyword(Keyword.BOUNDCRS)
        with self._production(Keyword.BOUNDCRS.value), self._operation():
            self._read_left_delimiter()
            source = self._read_crs_slot(Keyword.SOURCECRS)
            self._read_separator()
            target = self._read_crs_slot(Keyword.TARGETCRS)
            self._read_separator()
            transformation = self.read_abridged_transformation()
            header = self._read_header()
            self._read_right_delimiter()
            return BoundCRS(source, target, transformation, **header._asdict())

    def _read_derived_crs(self, keyword: Keyword, name: str) -> DerivedCRS:
        self._read_separator()
        base = self._read_base_crs(*_DERIVED_BASES[keyword])
        self._read_separator()
        conversion = self.read_deriving_conversion()
        self._read_separator()
        coordinate_system = self.read_coordinate_system()
        header = self._read_header()
        self._read_right_delimiter()
        return DerivedCRS(
            name,
            _DERIVED_KINDS[keyword],
            base,
            conversion,
            coordinate_system,
            **header._asdict(),
        )

    def _read_base_crs(self, *keywords: Keyword) -> Union[BaseCRS, BaseProjectedCRS]:
        keyword = self._read_keyword(*keywords)
        with self._production(keyword.value):
            self._read_left_delimiter()
            name = self._read_quoted_text()
            if keyword is Keyword.BASEPROJCRS:
                self._read_separator()
                base = self._read_base_crs(Keyword.BASEGEODCRS, Keyword.BASEGEOGCRS)
                self._read_separator()
                conversion = self.read_map_projection()
                unit = self._read_unit_if_next(frozenset({UnitType.LENGTH}), {Keyword.LENGTHUNIT})
                identifiers = self._read_identifiers()
                self._read_right_delimiter()
                return BaseProjectedCRS(name, base, conversion, unit, identifiers)

            kind = _BASE_KINDS[keyword]
            datum_keyword = _DATUM_KEYWORDS[kind]
            if kind in _ENSEMBLE_KINDS:
                datum, ensemble, dynamic = self._read_datum_or_ensemble(datum_keyword)
            else:
                self._read_separator()
                datum, ensemble, dynamic = self._read_datum(datum_keyword), None, None
            unit = None
            if kind.is_geodetic():
                unit = self._read_unit_if_next(frozenset({UnitType.ANGLE}), {Keyword.ANGLEUNIT})
            identifiers = self._read_identifiers()
            self._read_right_delimiter()
            return BaseCRS(name, kind, datum, ensemble, dynamic, unit, identifiers)

    def _base_from_geodetic(self, crs: GeodeticCRS) -> BaseCRS:
        # the extensions of a WKT1 GEOGCS belong to the enclosing PROJCS
        self._pending_extensions.extend(crs.extensions or ())
        return BaseCRS(
            crs.name,
            crs.kind,
            crs.datum,
            crs.ensemble,
            crs.dynamic,
            crs.coordinate_system.unit,
            crs.identifiers,
        )

    def _read_crs_slot(self, keyword: Keyword) -> CRS:
        self._read_keyword(keyword)
        with self._production(keyword.value):
            self._read_left_delimiter()
            crs = self.read_crs()
            self._read_right_delimiter()
            return crs

    # operations

    def read_coordinate_operation(self) -> CoordinateOperation:
        self._read_keyword(Keyword.COORDINATEOPERATION)
        with self._production(Keyword.COORDINATEOPERATION.value), self._operation():
            self._read_left_delimiter()
            name = self._read_quoted_text()
            version = self._read_version_if_next()
            self._read_separator()
            source = self._read_crs_slot(Keyword.SOURCECRS)
            self._read_separator()
            target = self._read_crs_slot(Keyword.TARGETCRS)
            self._read_separator()
            method = self.read_method()
            parameters = self._read_parameters(method)
            interpolation = None
            if self._is_keyword_next(Keyword.INTERPOLATIONCRS):
                self._read_separator()
                interpolation = self._read_crs_slot(Keyword.INTERPOLATIONCRS)
            accuracy = self._read_accuracy_if_next()
            header = self._read_header()
            self._read_right_delimiter()
            return CoordinateOperation(
                name,
                source,
                target,
                method,
                parameters or None,
                version,
                interpolation,
                accuracy,
                **header._asdict(),
            )

    def read_point_motion_operation(self) -> PointMotionOperation:
        self._read_keyword(Keyword.POINTMOTIONOPERATION)
        with self._production(Keyword.POINTMOTIONOPERATION.value), self._operation():
            self._read_left_delimiter()
            name = self._read_quoted_text()
            version = self._read_version_if_next()
            self._read_separator()
            source = self._read_crs_slot(Keyword.SOURCECRS)
            self._read_separator()
            method = self.read_method()
            parameters = self._read_parameters(method)
            accuracy = self._read_accuracy_if_next()
            header = self._read_header()
            self._read_right_delimiter()
            return PointMotionOperation(
                name,
                source,
                method,
                parameters or None,
                version,
                accuracy,
                **header._asdict(),
            )

    def read_concatenated_operation(self) -> ConcatenatedOperation:
        self._read_keyword(Keyword.CONCATENATEDOPERATION)
        with self._production(Keyword.CONCATENATEDOPERATION.value), self._operation():
            self._read_left_delimiter()
            name = self._read_quoted_text()
            version = self._read_version_if_next()
            self._read_separator()
            source = self._read_crs_slot(Keyword.SOURCECRS)
            self._read_separator()
            target = self._read_crs_slot(Keyword.TARGETCRS)
            steps = []
            while self._is_keyword_next(Keyword.STEP):
                self._read_separator()
                steps.append(self._read_step())
            accuracy = self._read_accuracy_if_next()
            header = self._read_header()
            self._read_right_delimiter()
            return ConcatenatedOperation(
                name,
                source,
                target,
                steps,
                version,
                accuracy,
                **header._asdict(),
            )

    def _read_step(self) -> Step:
        self._read_keyword(Keyword.STEP)
        with self._production(Keyword.STEP.value):
            self._read_left_delimiter()
            step = self._dispatch(
                {
                    Keyword.COORDINATEOPERATION: self.read_coordinate_operation,
                    Keyword.POINTMOTIONOPERATION: self.read_point_motion_operation,
                    Keyword.CONVERSION: self.read_map_projection,
                }
            )
            self._read_right_delimiter()
            return step

    def read_coordinate_metadata(self) -> CoordinateMetadata:
        self._read_keyword(Keyword.COORDINATEMETADATA)
        with self._production(Keyword.COORDINATEMETADATA.value):
            self._read_left_delimiter()
            crs = self._bind_to_wgs84(self.read_crs())
            epoch = None
            if self._is_keyword_next(Keyword.EPOCH):
                self._read_separator()
                epoch = self._read_keyword_number(Keyword.EPOCH, self._reader.read_number)
            self._read_right_delimiter()
            return CoordinateMetadata(crs, epoch)

    def read_abridged_transformation(self) -> AbridgedTransformation:
        self._read_keyword(Keyword.ABRIDGEDTRANSFORMATION)
        with self._production(Keyword.ABRIDGEDTRANSFORMATION.value):
            self._read_left_delimiter()
            name = self._read_quoted_text()
            version = self._read_version_if_next()
            self._read_separator()
            method = self.read_method()
            parameters = self._read_parameters(method)
            header = self._read_header()
            self._read_right_delimiter()
            return AbridgedTransformation(
                name, method, parameters or None, version, **header._asdict()
            )

    def read_map_projection(self) -> MapProjection:
        """Read CONVERSION[...]."""
        return self._read_conversion(Keyword.CONVERSION, MapProjection)

    def read_deriving_conversion(self) -> DerivingConversion:
        return self._read_conversion(Keyword.DERIVINGCONVERSION, DerivingConversion)

    def _read_conversion(self, keyword: Keyword, conversion_type: Type):
        self._read_keyword(keyword)
        with self._production(keyword.value):
            self._read_left_delimiter()
            name = self._read_quoted_text()
            self._read_separator()
            method = self.read_method()
            parameters = self._read_parameters(method)
            identifiers = self._read_identifiers()
            self._read_right_delimiter()
            return conversion_type(name, method, parameters or None, identifiers)

    def read_method(self) -> OperationMethod:
        """Read METHOD[...], or PROJECTION[...] in WKT1."""
        self._read_keyword(Keyword.METHOD)
        with self._production(Keyword.METHOD.value):
            self._read_left_delimiter()
            name = self._read_quoted_text()
            identifiers = self._read_identifiers()
            self._read_right_delimiter()
            return OperationMethod(name, identifiers)

    def _read_parameters(self, method: OperationMethod) -> List[Parameter]:
        well_known = method.well_known
        parameters = []
        while self._is_keyword_next(Keyword.PARAMETER, Keyword.PARAMETERFILE):
            self._read_separator()
            if self._next_keyword(Keyword.PARAMETER, Keyword.PARAMETERFILE) is Keyword.PARAMETERFILE:
                parameters.append(self.read_parameter_file())
            else:
                parameters.append(self.read_parameter(well_known))
        return parameters

    def read_parameter(self, method: Optional[WellKnownMethod] = None) -> OperationParameter:
        """
        Read PARAMETER[...].

        The type of a bare UNIT is taken from the well-known parameter of the
        same name, looked up among the parameters of the method when it is known.

        Args:
            method: The well-known method the parameter belongs to, if any
        """
        self._read_keyword(Keyword.PARAMETER)
        with self._production(Keyword.PARAMETER.value):
            self._read_left_delimiter()
            name = self._read_quoted_text()
            self._read_separator()
            value = self._reader.read_number()
            entry = epsg.get_parameter(name, method)
            if entry is not None and entry.unit_type is not None:
                expected = frozenset({entry.unit_type})
            else:
                expected = frozenset({UnitType.UNIT})
            unit = self._read_unit_if_next(expected, UNIT_KEYWORDS)
            identifiers = self._read_identifiers()
            self._read_right_delimiter()
            return OperationParameter(name, value, unit, identifiers)

    def read_parameter_file(self) -> ParameterFile:
        self._read_keyword(Keyword.PARAMETERFILE)
        with self._production(Keyword.PARAMETERFILE.value):
            self._read_left_delimiter()
            name = self._read_quoted_text()
            self._read_separator()
            file_name = self._read_quoted_text()
            identifiers = self._read_identifiers()
            self._read_right_delimiter()
            return ParameterFile(name, file_name, identifiers)

    def _read_version_if_next(self) -> Optional[str]:
        if not self._is_keyword_next(Keyword.VERSION):
            return None
        self._read_separator()
        return self._read_keyword_text(Keyword.VERSION)

    def _read_accuracy_if_next(self) -> Optional[float]:
        if not self._is_keyword_next(Keyword.OPERATIONACCURACY):
            return None
        self._read_separator()
        return self._read_keyword_number(Keyword.OPERATIONACCURACY, self._reader.read_unsigned_number)

    # datums

    def _read_datum_or_ensemble(
        self, datum_keyword: Keyword
    ) -> Tuple[Optional[ReferenceFrame], Optional[DatumEnsemble], Optional[Dynamic]]:
        dynamic = None
        if self._is_keyword_next(Keyword.DYNAMIC):
            self._read_separator()
            dynamic = self.read_dynamic()

        datum = ensemble = None
        keyword = self._next_keyword(datum_keyword, Keyword.ENSEMBLE)
        if keyword is None:
            token = self._peek_past_separator()
            raise SemanticError(
                f"Expected a {datum_keyword.value} or an {Keyword.ENSEMBLE.value}",
                token=token.raw if token is not None else None,
                offset=token.offset if token is not None else len(self._reader.text),
                expected=[datum_keyword.value, Keyword.ENSEMBLE.value],
            )
        self._read_separator()
        if keyword is Keyword.ENSEMBLE:
            ensemble = self.read_datum_ensemble()
        else:
            datum = self._read_datum(datum_keyword)
        self._check_not_both(datum_keyword)

        if datum_keyword is Keyword.DATUM and self._is_keyword_next(Keyword.PRIMEM):
            self._read_separator()
            prime_meridian = self.read_prime_meridian()
            if datum is not None:
                datum = dataclasses.replace(datum, prime_meridian=prime_meridian)
            else:
                ensemble = dataclasses.replace(ensemble, prime_meridian=prime_meridian)
            self._check_not_both(datum_keyword)
        return datum, ensemble, dynamic

    def _check_not_both(self, datum_keyword: Keyword):
        if self._is_keyword_next(datum_keyword, Keyword.ENSEMBLE):
            token = self._peek_past_separator()
            raise SemanticError(
                "A CRS takes a datum or a datum ensemble, not both",
                token=token.raw,
                offset=token.offset,
            )

    def _read_datum(self, keyword: Keyword) -> ReferenceFrame:
        if keyword is Keyword.DATUM:
            return self.read_geodetic_reference_frame()
        if keyword is Keyword.VDATUM:
            return self.read_vertical_reference_frame()
        if keyword is Keyword.EDATUM:
            return self.read_engineering_datum()
        if keyword is Keyword.PDATUM:
            return self.read_parametric_datum()
        return self.read_temporal_datum()

    def read_geodetic_reference_frame(self) -> GeodeticReferenceFrame:
        """
        Read DATUM[...].

        A WKT1 TOWGS84 child is captured here and applied to the enclosing
        CRS once it is complete.
        """
        self._read_keyword(Keyword.DATUM)
        with self._production(Keyword.DATUM.value):
            self._read_left_delimiter()
            name = self._read_quoted_text()
            self._read_separator()
            ellipsoid = self.read_ellipsoid()
            anchor, identifiers = self._read_datum_children(to_wgs84=True)
            self._read_right_delimiter()
            return GeodeticReferenceFrame(name, ellipsoid, anchor=anchor, identifiers=identifiers)

    def read_vertical_reference_frame(self) -> VerticalReferenceFrame:
        return self._read_simple_datum(Keyword.VDATUM, VerticalReferenceFrame)

    def read_engineering_datum(self) -> EngineeringDatum:
        return self._read_simple_datum(Keyword.EDATUM, EngineeringDatum)

    def read_parametric_datum(self) -> ParametricDatum:
        return self._read_simple_datum(Keyword.PDATUM, ParametricDatum)

    def _read_simple_datum(self, keyword: Keyword, datum_type: Type):
        self._read_keyword(keyword)
        with self._production(keyword.value):
            self._read_left_delimiter()
            name = self._read_quoted_text()
            if keyword is not Keyword.PDATUM and self._is_value_next():
                # WKT1 VERT_DATUM and LOCAL_DATUM carry a datum type number
                self._read_separator()
                self._pending_extensions.append((DATUM_TYPE_EXTENSION, self._read_number_or_text()))
            anchor, identifiers = self._read_datum_children(to_wgs84=False)
            self._read_right_delimiter()
            return datum_type(name, anchor=anchor, identifiers=identifiers)

    def _read_datum_children(self, to_wgs84: bool) -> Tuple[Optional[str], Optional[List[Identifier]]]:
        anchor = None
        identifiers = []
        while True:
            if anchor is None and self._is_keyword_next(Keyword.ANCHOR):
                self._read_separator()
                anchor = self._read_keyword_text(Keyword.ANCHOR)
            elif to_wgs84 and self._is_keyword_next(Keyword.TOWGS84):
                self._read_separator()
                self._read_to_wgs84()
            elif self._is_keyword_next(Keyword.ID):
                self._read_separator()
                identifiers.append(self.read_identifier())
            elif self._is_keyword_next(Keyword.EXTENSION):
                self._read_separator()
                self._pending_extensions.append(self._read_extension())
            else:
                return anchor, identifiers or None

    def read_temporal_datum(self) -> TemporalDatum:
        self._read_keyword(Keyword.TDATUM)
        with self._production(Keyword.TDATUM.value):
            self._read_left_delimiter()
            name = self._read_quoted_text()
            calendar = origin = None
            if self._is_keyword_next(Keyword.CALENDAR):
                self._read_separator()
                calendar = self._read_keyword_text(Keyword.CALENDAR)
            if self._is_keyword_next(Keyword.TIMEORIGIN):
                self._read_separator()
                self._read_keyword(Keyword.TIMEORIGIN)
                with self._production(Keyword.TIMEORIGIN.value):
                    self._read_left_delimiter()
                    origin = self._read_date_time_or_text()
                    self._read_right_delimiter()
            identifiers = self._read_identifiers()
            self._read_right_delimiter()
            return TemporalDatum(name, calendar, origin, identifiers)

    def read_datum_ensemble(self) -> DatumEnsemble:
        self._read_keyword(Keyword.ENSEMBLE)
        with self._production(Keyword.ENSEMBLE.value):
            self._read_left_delimiter()
            name = self._read_quoted_text()
            members = []
            self._read_separator()
            members.append(self._read_ensemble_member())
            while self._is_keyword_next(Keyword.MEMBER):
                self._read_separator()
                members.append(self._read_ensemble_member())
            ellipsoid = None
            if self._is_keyword_next(Keyword.ELLIPSOID, Keyword.TRIAXIAL):
                self._read_separator()
                ellipsoid = self.read_ellipsoid()
            self._read_separator()
            accuracy = self._read_keyword_number(
                Keyword.ENSEMBLEACCURACY, self._reader.read_unsigned_number
            )
            identifiers = self._read_identifiers()
            self._read_right_delimiter()
            return DatumEnsemble(name, members, accuracy, ellipsoid, identifiers=identifiers)

    def _read_ensemble_member(self) -> DatumEnsembleMember:
        self._read_keyword(Keyword.MEMBER)
        with self._production(Keyword.MEMBER.value):
            self._read_left_delimiter()
            name = self._read_quoted_text()
            identifiers = self._read_identifiers()
            self._read_right_delimiter()
            return DatumEnsembleMember(name, identifiers)

    def read_dynamic(self) -> Dynamic:
        self._read_keyword(Keyword.DYNAMIC)
        with self._production(Keyword.DYNAMIC.value):
            self._read_left_delimiter()
            frame_epoch = self._read_keyword_number(Keyword.FRAMEEPOCH, self._reader.read_number)
            model_name = model_identifiers = None
            if self._is_keyword_next(Keyword.MODEL):
                self._read_separator()
                self._read_keyword(Keyword.MODEL)
                with self._production(Keyword.MODEL.value):
                    self._read_left_delimiter()
                    model_name = self._read_quoted_text()
                    model_identifiers = self._read_identifiers()
                    self._read_right_delimiter()
            self._read_right_delimiter()
            return Dynamic(frame_epoch, model_name, model_identifiers)

    def _read_geoid_model(self) -> GeoidModel:
        self._read_keyword(Keyword.GEOIDMODEL)
        with self._production(Keyword.GEOIDMODEL.value):
            self._read_left_delimiter()
            name = self._read_quoted_text()
            identifiers = self._read_identifiers()
            self._read_right_delimiter()
            return GeoidModel(name, identifiers)

    def read_ellipsoid(self) -> Ellipsoid:
        """Read ELLIPSOID[...] (SPHEROID[...] in WKT1) or TRIAXIAL[...]."""
        keyword = self._read_keyword(Keyword.ELLIPSOID, Keyword.TRIAXIAL)
        with self._production(keyword.value):
            self._read_left_delimiter()
            name = self._read_quoted_text()
            self._read_separator()
            semi_major_axis = self._reader.read_number()
            self._read_separator()
            second = self._reader.read_number()
            third = None
            if keyword is Keyword.TRIAXIAL:
                self._read_separator()
                third = self._reader.read_number()
            unit = self._read_unit_if_next(frozenset({UnitType.LENGTH}), {Keyword.LENGTHUNIT})
            identifiers = self._read_identifiers()
            self._read_right_delimiter()
            if keyword is Keyword.TRIAXIAL:
                return Ellipsoid.triaxial(name, semi_major_axis, second, third, unit, identifiers)
            return Ellipsoid.oblate(name, semi_major_axis, second, unit, identifiers)

    def read_prime_meridian(self) -> PrimeMeridian:
        self._read_keyword(Keyword.PRIMEM)
        with self._production(Keyword.PRIMEM.value):
            self._read_left_delimiter()
            name = self._read_quoted_text()
            self._read_separator()
            longitude = self._reader.read_number()
            unit = self._read_unit_if_next(frozenset({UnitType.ANGLE}), {Keyword.ANGLEUNIT})
            identifiers = self._read_identifiers()
            self._read_right_delimiter()
            return PrimeMeridian(name, longitude, unit, identifiers)

    def _read_to_wgs84(self):
        self._read_keyword(Keyword.TOWGS84)
        with self._production(Keyword.TOWGS84.value):
            self._read_left_delimiter()
            values = [self._reader.read_number()]
            while self._is_separator_next():
                self._read_separator()
                values.append(self._reader.read_number())
            self._read_right_delimiter()
            if len(values) not in (3, 7):
                raise SemanticError(f"TOWGS84 takes 3 or 7 values, got {len(values)}")
        self._register_to_wgs84(tuple(values))

    def _register_to_wgs84(self, values: Tuple[float, ...]):
        if self._operation_depth > 0:
            log.warning("discarding TOWGS84 inside an explicit coordinate operation")
        elif self._to_wgs84 is not None:
            log.warning("discarding TOWGS84, an earlier TOWGS84 already binds this CRS to WGS 84")
        else:
            self._to_wgs84 = values

    def _bind_to_wgs84(self, crs: CRS) -> CRS:
        values, self._to_wgs84 = self._to_wgs84, None
        if values is None:
            return crs
        geocentric = (
            isinstance(crs, GeodeticCRS)
            and crs.coordinate_system.cs_type is CoordinateSystemType.CARTESIAN
        )
        codes = TOWGS84_HELMERT_METHOD_CODES if len(values) == 7 else TOWGS84_TRANSLATION_METHOD_CODES
        code = codes[1] if geocentric else codes[0]
        method = OperationMethod(epsg.METHODS_BY_CODE[code].name, (Identifier.epsg(code),))
        parameters = [
            OperationParameter(
                epsg.PARAMETERS_BY_CODE[parameter_code].name,
                value,
                identifiers=(Identifier.epsg(parameter_code),),
            )
            for parameter_code, value in zip(TOWGS84_PARAMETER_CODES, values)
        ]
        log.debug(f"binding {crs.name!r} to WGS 84 with EPSG method {code}")
        transformation = AbridgedTransformation(
            f"Transformation from {crs.name} to WGS84", method, parameters
        )
        return BoundCRS(crs, WGS84_GEOGRAPHIC, transformation)

    # coordinate systems

    def _read_crs_coordinate_system(self, legacy_kind: Optional[CRSKind]) -> CoordinateSystem:
        if legacy_kind is None or self._is_keyword_next(Keyword.CS):
            self._read_separator()
            return self.read_coordinate_system()
        return self._read_legacy_coordinate_system(legacy_kind)

    def read_coordinate_system(self) -> CoordinateSystem:
        """
        Read CS[...] followed by its AXIS siblings and the optional shared unit.

        Returns:
            The coordinate system with its axes and unit
        """
        self._read_keyword(Keyword.CS)
        with self._production(Keyword.CS.value):
            self._read_left_delimiter()
            token = self._reader.read_expected_token("coordinate system type")
            cs_type = None if token.quoted else CoordinateSystemType.from_name(token.value)
            if cs_type is None:
                raise UnexpectedKeyword(
                    f"Unknown coordinate system type {token.raw}",
                    token=token.raw,
                    offset=token.offset,
                    expected=[t.value for t in CoordinateSystemType],
                )
            self._read_separator()
            dimension = self._reader.read_unsigned_integer()
            identifiers = self._read_identifiers()
            self._read_right_delimiter()

            axes = []
            while self._is_keyword_next(Keyword.AXIS):
                self._read_separator()
                axes.append(self.read_axis(cs_type))
            allowed = {Keyword.TIMEUNIT} if cs_type.is_temporal() else SPATIAL_UNIT_KEYWORDS
            unit = self._read_unit_if_next(cs_type.unit_types() or frozenset({UnitType.UNIT}), allowed)
            return CoordinateSystem(cs_type, dimension, axes, unit, identifiers)

    def _read_legacy_coordinate_system(self, kind: CRSKind) -> CoordinateSystem:
        legacy = _LEGACY_COORDINATE_SYSTEMS[kind]
        unit = None
        axes = []
        # WKT1 producers disagree on whether UNIT comes before or after AXIS
        while True:
            if unit is None and self._is_keyword_next(*SPATIAL_UNIT_KEYWORDS):
                self._read_separator()
                unit = self.read_unit(frozenset({legacy.unit_type}), SPATIAL_UNIT_KEYWORDS)
            elif self._is_keyword_next(Keyword.AXIS):
                self._read_separator()
                axes.append(self.read_axis(legacy.cs_type))
            else:
                break
        if not axes:
            axes = [
                Axis(name, AxisDirection.from_name(direction))
                for name, direction in legacy.default_axes
            ]
        with self._production(Keyword.CS.value):
            return CoordinateSystem(legacy.cs_type, len(axes), axes, unit)

    def read_axis(self, cs_type: Optional[CoordinateSystemType] = None) -> Axis:
        """
        Read AXIS[...].

        Args:
            cs_type: The type of the enclosing coordinate system, which decides
                what a bare UNIT inside the axis means. Without it a bare UNIT
                is read as a generic unit.
        """
        self._read_keyword(Keyword.AXIS)
        with self._production(Keyword.AXIS.value):
            self._read_left_delimiter()
            name, abbreviation = split_name_abbreviation(self._read_quoted_text())
            self._read_separator()
            token = self._reader.read_expected_token("axis direction")
            direction = None if token.quoted else AxisDirection.from_name(token.value)
            if direction is None:
                raise UnknownKeyword(
                    f"Unknown axis direction {token.raw}",
                    token=token.raw,
                    offset=token.offset,
                    expected=[d.value for d in AxisDirection],
                )

            meridian = bearing = order = None
            if self._is_keyword_next(Keyword.MERIDIAN):
                self._read_separator()
                meridian = self._read_meridian()
            if self._is_keyword_next(Keyword.BEARING):
                self._read_separator()
                bearing = self._read_keyword_number(Keyword.BEARING, self._reader.read_number)
            if self._is_keyword_next(Keyword.ORDER):
                self._read_separator()
                order = self._read_keyword_number(Keyword.ORDER, self._reader.read_unsigned_integer)

            if cs_type is None:
                unit = self._read_unit_if_next(frozenset({UnitType.UNIT}), UNIT_KEYWORDS)
            else:
                allowed = {Keyword.TIMEUNIT} if cs_type.is_temporal() else SPATIAL_UNIT_KEYWORDS
                expected = cs_type.axis_unit_types(direction) or frozenset({UnitType.UNIT})
                unit = self._read_unit_if_next(expected, allowed)
            identifiers = self._read_identifiers()
            self._read_right_delimiter()
            return Axis(name, direction, abbreviation, meridian, bearing, order, unit, identifiers)

    def _read_meridian(self) -> Meridian:
        self._read_keyword(Keyword.MERIDIAN)
        with self._production(Keyword.MERIDIAN.value):
            self._read_left_delimiter()
            longitude = self._reader.read_number()
            self._read_separator()
            unit = self.read_unit(frozenset({UnitType.ANGLE}), {Keyword.ANGLEUNIT})
            self._read_right_delimiter()
            return Meridian(longitude, unit)

    # units, identifiers and the common header

    def read_unit(
        self,
        expected: AbstractSet[UnitType] = frozenset({UnitType.UNIT}),
        allowed: AbstractSet[Keyword] = UNIT_KEYWORDS,
    ) -> Unit:
        """
        Read a unit: LENGTHUNIT[...], ANGLEUNIT[...] and so on, or a bare UNIT[...].

        Args:
            expected: The unit types the position admits; a bare UNIT is narrowed to these.
                UnitType.UNIT in the set lets a bare UNIT stay generic.
            allowed: The unit keywords the position admits

        Raises:
            UnexpectedKeyword: If the keyword is not an allowed unit keyword
            SemanticError: If a bare UNIT cannot be narrowed down
        """
        token = self._reader.read_expected_token("unit")
        if not _candidates(token) & set(allowed):
            raise _keyword_error(token, allowed)
        unit_type = KEYWORDS.resolve_unit_type(token.value, expected)
        with self._production(unit_type.keyword):
            self._read_left_delimiter()
            name = self._read_quoted_text()
            conversion_factor = None
            if unit_type is not UnitType.TIME or self._is_value_next():
                self._read_separator()
                conversion_factor = self._reader.read_number()
            identifiers = self._read_identifiers()
            self._read_right_delimiter()
            return Unit(unit_type, name, conversion_factor, identifiers)

    def _read_unit_if_next(
        self, expected: AbstractSet[UnitType], allowed: AbstractSet[Keyword]
    ) -> Optional[Unit]:
        if not self._is_keyword_next(*allowed):
            return None
        self._read_separator()
        return self.read_unit(expected, allowed)

    def read_identifier(self) -> Identifier:
        """Read ID[...], or AUTHORITY[...] in WKT1."""
        self._read_keyword(Keyword.ID)
        with self._production(Keyword.ID.value):
            self._read_left_delimiter()
            authority = self._read_quoted_text()
            self._read_separator()
            unique_id = self._read_number_or_text()
            version = citation = uri = None
            if self._is_value_next():
                self._read_separator()
                version = self._read_number_or_text()
            if self._is_keyword_next(Keyword.CITATION):
                self._read_separator()
                citation = self._read_keyword_text(Keyword.CITATION)
            if self._is_keyword_next(Keyword.URI):
                self._read_separator()
                uri = self._read_keyword_text(Keyword.URI)
            self._read_right_delimiter()
            return Identifier(authority, unique_id, version, citation, uri)

    def _read_identifiers(self) -> Optional[List[Identifier]]:
        identifiers = []
        while self._is_keyword_next(Keyword.ID):
            self._read_separator()
            identifiers.append(self.read_identifier())
        return identifiers or None

    def read_usage(self) -> Usage:
        """Read USAGE[SCOPE[...],<extent>]."""
        self._read_keyword(Keyword.USAGE)
        with self._production(Keyword.USAGE.value):
            self._read_left_delimiter()
            scope = self._read_keyword_text(Keyword.SCOPE)
            extent = self._read_extent()
            self._read_right_delimiter()
            return Usage(scope, extent)

    def _read_extent(self) -> Extent:
        area = bounding_box = vertical_extent = temporal_extent = None
        if self._is_keyword_next(Keyword.AREA):
            self._read_separator()
            area = self._read_keyword_text(Keyword.AREA)
        if self._is_keyword_next(Keyword.BBOX):
            self._read_separator()
            bounding_box = self._read_bounding_box()
        if self._is_keyword_next(Keyword.VERTICALEXTENT):
            self._read_separator()
            vertical_extent = self._read_vertical_extent()
        if self._is_keyword_next(Keyword.TIMEEXTENT):
            self._read_separator()
            temporal_extent = self._read_temporal_extent()
        return Extent(area, bounding_box, vertical_extent, temporal_extent)

    def _read_bounding_box(self) -> GeographicBoundingBox:
        self._read_keyword(Keyword.BBOX)
        with self._production(Keyword.BBOX.value):
            self._read_left_delimiter()
            values = [self._reader.read_number()]
            for _ in range(3):
                self._read_separator()
                values.append(self._reader.read_number())
            self._read_right_delimiter()
            return GeographicBoundingBox(*values)

    def _read_vertical_extent(self) -> VerticalExtent:
        self._read_keyword(Keyword.VERTICALEXTENT)
        with self._production(Keyword.VERTICALEXTENT.value):
            self._read_left_delimiter()
            minimum = self._reader.read_number()
            self._read_separator()
            maximum = self._reader.read_number()
            unit = self._read_unit_if_next(frozenset({UnitType.LENGTH}), {Keyword.LENGTHUNIT})
            self._read_right_delimiter()
            return VerticalExtent(minimum, maximum, unit)

    def _read_temporal_extent(self) -> TemporalExtent:
        self._read_keyword(Keyword.TIMEEXTENT)
        with self._production(Keyword.TIMEEXTENT.value):
            self._read_left_delimiter()
            start = self._read_date_time_or_text()
            self._read_separator()
            end = self._read_date_time_or_text()
            self._read_right_delimiter()
            return TemporalExtent(start, end)

    def _read_header(self) -> _Header:
        usages = []
        identifiers = []
        extensions = []
        remark = None
        while True:
            if self._is_keyword_next(Keyword.USAGE):
                self._read_separator()
                usages.append(self.read_usage())
            elif self._is_keyword_next(Keyword.SCOPE):
                # 2015 form: SCOPE and the extent are direct children
                self._read_separator()
                scope = self._read_keyword_text(Keyword.SCOPE)
                usages.append(Usage(scope, self._read_extent()))
            elif self._is_keyword_next(Keyword.ID):
                self._read_separator()
                identifiers.append(self.read_identifier())
            elif remark is None and self._is_keyword_next(Keyword.REMARK):
                self._read_separator()
                remark = self._read_keyword_text(Keyword.REMARK)
            elif self._is_keyword_next(Keyword.EXTENSION):
                self._read_separator()
                extensions.append(self._read_extension())
            else:
                break
        extensions = self._pending_extensions + extensions
        self._pending_extensions = []
        return _Header(
            tuple(usages) or None,
            tuple(identifiers) or None,
            remark,
            tuple(extensions) or None,
        )

    def _read_extension(self) -> Tuple[str, str]:
        self._read_keyword(Keyword.EXTENSION)
        with self._production(Keyword.EXTENSION.value):
            self._read_left_delimiter()
            name = self._read_quoted_text()
            self._read_separator()
            value = self._read_quoted_text()
            self._read_right_delimiter()
        log.debug(f"keeping EXTENSION {name!r}, it is not written back")
        return name, value

    # token level helpers

    @contextmanager
    def _production(self, name: str) -> Iterator[None]:
        try:
            yield
        except WKTError as e:
            e.attach_context(name, self._reader.offset)
            raise

    @contextmanager
    def _operation(self) -> Iterator[None]:
        self._operation_depth += 1
        try:
            yield
        finally:
            self._operation_depth -= 1

    def _dispatch(self, productions: Dict[Keyword, Callable]):
        token = self._reader.peek_token()
        if token is None:
            raise UnexpectedEndOfInput(
                "Unexpected end of input",
                offset=len(self._reader.text),
                expected=sorted(k.value for k in productions),
            )
        matches = _candidates(token) & set(productions)
        if len(matches) != 1:
            raise _keyword_error(token, set(productions))
        keyword = next(iter(matches))
        log.debug(f"reading {keyword.value} at offset {token.offset}")
        return productions[keyword]()

    def _peek_past_separator(self) -> Optional[Token]:
        token = self._reader.peek_token()
        if token is not None and token.is_punctuation(SEPARATOR):
            return self._reader.peek_token(2)
        return token

    def _matching_keywords(self, keywords) -> FrozenSet[Keyword]:
        token = self._peek_past_separator()
        if token is None:
            return frozenset()
        return _candidates(token) & set(keywords)

    def _is_keyword_next(self, *keywords: Keyword) -> bool:
        """True when the next child, past an optional separator, starts with one of the keywords."""
        return bool(self._matching_keywords(keywords))

    def _next_keyword(self, *keywords: Keyword) -> Optional[Keyword]:
        matches = self._matching_keywords(keywords)
        if len(matches) == 1:
            return next(iter(matches))
        return None

    def _is_separator_next(self) -> bool:
        token = self._reader.peek_token()
        return token is not None and token.is_punctuation(SEPARATOR)

    def _is_value_next(self) -> bool:
        """True when a separator is followed by quoted text, a number or a date rather than a keyword."""
        if not self._is_separator_next():
            return False
        token = self._reader.peek_token(2)
        if token is None:
            return False
        if token.quoted:
            return True
        return token.value[0] in TOKEN_CHARACTERS and not KEYWORDS.resolve_ambiguous(token.value)

    def _read_separator(self):
        token = self._reader.peek_token()
        if token is None:
            raise UnexpectedEndOfInput(
                "Unexpected end of input", offset=len(self._reader.text), expected=[SEPARATOR]
            )
        if token.is_punctuation(SEPARATOR):
            self._reader.read_token()
            return
        if self._strict:
            raise MissingSeparator(
                f"Missing separator before {token.raw}",
                token=token.raw,
                offset=token.offset,
                expected=[SEPARATOR],
            )
        log.warning(f"missing separator before {token.raw!r} at offset {token.offset}")

    def _read_left_delimiter(self):
        token = self._reader.read_expected_token(LEFT_DELIMITERS[0])
        if not token.is_punctuation("".join(LEFT_DELIMITERS)):
            raise InvalidDelimiter(
                f"Expected a left delimiter, got {token.raw}",
                token=token.raw,
                offset=token.offset,
                expected=LEFT_DELIMITERS,
            )

    def _read_right_delimiter(self):
        token = self._reader.read_expected_token(RIGHT_DELIMITERS[0])
        if not token.is_punctuation("".join(RIGHT_DELIMITERS)):
            raise InvalidDelimiter(
                f"Expected a right delimiter, got {token.raw}",
                token=token.raw,
                offset=token.offset,
                expected=RIGHT_DELIMITERS,
            )

    def _read_keyword(self, *expected: Keyword) -> Keyword:
        token = self._reader.read_expected_token(" or ".join(k.value for k in expected))
        matches = _candidates(token) & set(expected)
        if not matches:
            raise _keyword_error(token, set(expected))
        if len(matches) > 1:
            raise SemanticError(
                f"Ambiguous keyword {token.value}",
                token=token.raw,
                offset=token.offset,
                expected=sorted(k.value for k in matches),
            )
        return next(iter(matches))

    def _read_quoted_text(self) -> str:
        token = self._reader.read_expected_token("quoted text")
        if not token.quoted:
            raise WKTSyntaxError(
                f"Expected quoted text, got {token.raw}",
                token=token.raw,
                offset=token.offset,
                expected=[QUOTE],
            )
        return token.value

    def _read_number_or_text(self) -> str:
        """A number is kept as written; anything else must be quoted."""
        token = self._reader.read_expected_token("number or quoted text")
        if token.quoted or NUMBER_PATTERN.match(token.value):
            return token.value
        raise WKTSyntaxError(
            f"Expected a number or quoted text, got {token.raw}",
            token=token.raw,
            offset=token.offset,
            expected=["number", "quoted text"],
        )

    def _read_date_time_or_text(self) -> Union[DateTime, str]:
        token = self._reader.read_expected_token("date and time or quoted text")
        if token.quoted:
            return token.value
        date_time = DateTime.try_parse(token.value)
        if date_time is None:
            raise SemanticError(
                f"Invalid date and time {token.raw}", token=token.raw, offset=token.offset
            )
        return date_time

    def _read_keyword_text(self, keyword: Keyword) -> str:
        self._read_keyword(keyword)
        with self._production(keyword.value):
            self._read_left_delimiter()
            text = self._read_quoted_text()
            self._read_right_delimiter()
            return text

    def _read_keyword_number(self, keyword: Keyword, read: Callable[[], Union[int, float]]):
        self._read_keyword(keyword)
        with self._production(keyword.value):
            self._read_left_delimiter()
            value = read()
            self._read_right_delimiter()
            return value


def read_wkt(text: Union[str, TextIO], strict: bool = True) -> TopLevel:
    """
    Read a CRS, a coordinate operation or coordinate metadata from WKT.

    Args:
        text: The WKT text, or an open text stream, which is closed afterwards
        strict: Raise on every grammar violation. Default is True.

    Returns:
        The object described by the text

    Raises:
        WKTError: If the text is not valid WKT

    Examples:
        >>> crs = read_wkt('GEOGCS["WGS 84",DATUM["WGS_1984",SPHEROID["WGS 84",6378137,298.257223563]],'
        ...                'PRIMEM["Greenwich",0],UNIT["degree",0.0174532925199433]]')
        >>> crs.name, crs.prime_meridian.longitude
        ('WGS 84', 0.0)
    """
    with CRSReader(text, strict=strict) as reader:
        return reader.read()


def _read_checked(
    text: Union[str, TextIO],
    strict: bool,
    accept: Callable[[object], bool],
    description: str,
    unwrap_bound: bool = True,
):
    result = read_wkt(text, strict=strict)
    candidate = result.source if unwrap_bound and isinstance(result, BoundCRS) else result
    if not accept(candidate):
        kind = getattr(candidate, "kind", None)
        found = kind.value if kind is not None else type(candidate).__name__
        raise SemanticError(f"Expected {description}, got {found}")
    return result


def read_crs(text: Union[str, TextIO], strict: bool = True) -> CRS:
    return _read_checked(text, strict, lambda r: isinstance(r, CRS_TYPES), "a CRS", False)


def read_geodetic(text: Union[str, TextIO], strict: bool = True) -> Union[GeodeticCRS, BoundCRS]:
    """
    Read a geodetic or geographic CRS.

    A legacy CRS with TOWGS84 comes back as a BoundCRS wrapping it; the check
    applies to the wrapped CRS.
    """
    return _read_checked(text, strict, lambda r: isinstance(r, GeodeticCRS), "a geodetic CRS")


def read_geographic(text: Union[str, TextIO], strict: bool = True) -> Union[GeodeticCRS, BoundCRS]:
    return _read_checked(
        text,
        strict,
        lambda r: isinstance(r, GeodeticCRS) and r.kind is CRSKind.GEOGRAPHIC,
        "a geographic CRS",
    )


def read_projected(text: Union[str, TextIO], strict: bool = True) -> Union[ProjectedCRS, BoundCRS]:
    return _read_checked(text, strict, lambda r: isinstance(r, ProjectedCRS), "a projected CRS")


def read_vertical(text: Union[str, TextIO], strict: bool = True) -> Union[VerticalCRS, BoundCRS]:
    return _read_checked(text, strict, lambda r: isinstance(r, VerticalCRS), "a vertical CRS")


def read_engineering(text: Union[str, TextIO], strict: bool = True) -> Union[EngineeringCRS, BoundCRS]:
    return _read_checked(text, strict, lambda r: isinstance(r, EngineeringCRS), "an engineering CRS")


def read_parametric(text: Union[str, TextIO], strict: bool = True) -> Union[ParametricCRS, BoundCRS]:
    return _read_checked(text, strict, lambda r: isinstance(r, ParametricCRS), "a parametric CRS")


def read_temporal(text: Union[str, TextIO], strict: bool = True) -> Union[TemporalCRS, BoundCRS]:
    return _read_checked(text, strict, lambda r: isinstance(r, TemporalCRS), "a temporal CRS")


def read_derived(text: Union[str, TextIO], strict: bool = True) -> Union[DerivedCRS, BoundCRS]:
    return _read_checked(text, strict, lambda r: isinstance(r, DerivedCRS), "a derived CRS")


def read_compound(text: Union[str, TextIO], strict: bool = True) -> Union[CompoundCRS, BoundCRS]:
    return _read_checked(text, strict, lambda r: isinstance(r, CompoundCRS), "a compound CRS")


def read_bound(text: Union[str, TextIO], strict: bool = True) -> BoundCRS:
    return _read_checked(text, strict, lambda r: isinstance(r, BoundCRS), "a bound CRS", False)


def read_coordinate_operation(text: Union[str, TextIO], strict: bool = True) -> CoordinateOperation:
    return _read_checked(
        text, strict, lambda r: isinstance(r, CoordinateOperation), "a coordinate operation", False
    )


def read_point_motion_operation(text: Union[str, TextIO], strict: bool = True) -> PointMotionOperation:
    return _read_checked(
        text, strict, lambda r: isinstance(r, PointMotionOperation), "a point motion operation", False
    )


def read_concatenated_operation(text: Union[str, TextIO], strict: bool = True) -> ConcatenatedOperation:
    return _read_checked(
        text,
        strict,
        lambda r: isinstance(r, ConcatenatedOperation),
        "a concatenated operation",
        False,
    )


def read_coordinate_metadata(text: Union[str, TextIO], strict: bool = True) -> CoordinateMetadata:
    return _read_checked(
        text, strict, lambda r: isinstance(r, CoordinateMetadata), "coordinate metadata", False
    )
