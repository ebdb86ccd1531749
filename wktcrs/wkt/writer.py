from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from wktcrs.constructs.axis import Axis
from wktcrs.constructs.coordinate_operation import (
    ConcatenatedOperation,
    CoordinateMetadata,
    CoordinateOperation,
    PointMotionOperation,
)
from wktcrs.constructs.coordinate_system import CoordinateSystem
from wktcrs.constructs.crs import (
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
    TemporalDatum,
    VerticalReferenceFrame,
)
from wktcrs.constructs.ellipsoid import Ellipsoid, EllipsoidType, PrimeMeridian
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
from wktcrs.constructs.unit import Unit
from wktcrs.utils import epsg
from wktcrs.utils.constants import (
    DEFAULT_INDENT,
    DEFAULT_NEWLINE,
    LEFT_DELIMITERS,
    NUMBER_PATTERN,
    QUOTE,
    RIGHT_DELIMITERS,
    SEPARATOR,
)
from wktcrs.utils.exceptions import WriterError
from wktcrs.wkt.keywords import Keyword
from wktcrs.wkt.pretty import pretty as pretty_print

log = logging.getLogger(__name__)

_CRS_KEYWORDS = {
    CRSKind.GEODETIC: Keyword.GEODCRS,
    CRSKind.GEOGRAPHIC: Keyword.GEOGCRS,
    CRSKind.PROJECTED: Keyword.DERIVEDPROJCRS,
    CRSKind.VERTICAL: Keyword.VERTCRS,
    CRSKind.ENGINEERING: Keyword.ENGCRS,
    CRSKind.PARAMETRIC: Keyword.PARAMETRICCRS,
    CRSKind.TEMPORAL: Keyword.TIMECRS,
}

_BASE_KEYWORDS = {
    CRSKind.GEODETIC: Keyword.BASEGEODCRS,
    CRSKind.GEOGRAPHIC: Keyword.BASEGEOGCRS,
    CRSKind.VERTICAL: Keyword.BASEVERTCRS,
    CRSKind.ENGINEERING: Keyword.BASEENGCRS,
    CRSKind.PARAMETRIC: Keyword.BASEPARAMCRS,
    CRSKind.TEMPORAL: Keyword.BASETIMECRS,
}


def format_number(value: Union[int, float]) -> str:
    """
    Format a number the way it is written in WKT.

    Integers are written as integers; floats use their shortest round tripping
    form with an upper case exponent marker.

    Raises:
        WriterError: For infinities and NaN, which WKT cannot express

    Examples:
        >>> format_number(6378137.0)
        '6378137.0'
        >>> format_number(4.84813681109536e-06)
        '4.84813681109536E-06'
        >>> format_number(2)
        '2'
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if math.isnan(value) or math.isinf(value):
        raise WriterError(f"Cannot write {value} as a WKT number")
    return repr(float(value)).replace("e", "E")


def quote(text: str) -> str:
    """Quote text, doubling embedded quotes."""
    return QUOTE + text.replace(QUOTE, QUOTE * 2) + QUOTE


class CRSWriter:
    """
    Writes the CRS object model as compact WKT2.

    Every model class has a write method mirroring the reader production of
    the same name, so any object the reader returns (fragments included) can
    be written back. Canonical WKT2 keywords are used whatever spelling the
    source text had. Legacy EXTENSION passthroughs are not written.

    A method or parameter without identifiers that matches a well-known EPSG
    entry is written with ID["EPSG",code]. Parameters are only matched when
    their method is well known.

    Examples:
        >>> from wktcrs.constructs.unit import Units
        >>> CRSWriter().write(Units.METRE)
        'LENGTHUNIT["metre",1.0]'
    """

    def __init__(self):
        self._parts: List[str] = []
        self._writers: Dict[type, Callable] = {
            GeodeticCRS: self._write_geodetic_crs,
            ProjectedCRS: self._write_projected_crs,
            VerticalCRS: self._write_vertical_crs,
            EngineeringCRS: self._write_simple_crs,
            ParametricCRS: self._write_simple_crs,
            TemporalCRS: self._write_simple_crs,
            DerivedCRS: self._write_derived_crs,
            CompoundCRS: self._write_compound_crs,
            BoundCRS: self._write_bound_crs,
            BaseCRS: self._write_base_crs,
            BaseProjectedCRS: self._write_base_projected_crs,
            CoordinateOperation: self._write_coordinate_operation,
            PointMotionOperation: self._write_point_motion_operation,
            ConcatenatedOperation: self._write_concatenated_operation,
            CoordinateMetadata: self._write_coordinate_metadata,
            AbridgedTransformation: self._write_abridged_transformation,
            MapProjection: self._write_map_projection,
            DerivingConversion: self._write_deriving_conversion,
            OperationMethod: self._write_method,
            OperationParameter: self._write_parameter,
            ParameterFile: self._write_parameter_file,
            GeodeticReferenceFrame: self._write_geodetic_reference_frame,
            VerticalReferenceFrame: self._write_simple_datum,
            EngineeringDatum: self._write_simple_datum,
            ParametricDatum: self._write_simple_datum,
            TemporalDatum: self._write_temporal_datum,
            DatumEnsemble: self._write_datum_ensemble,
            DatumEnsembleMember: self._write_ensemble_member,
            Dynamic: self._write_dynamic,
            GeoidModel: self._write_geoid_model,
            Ellipsoid: self._write_ellipsoid,
            PrimeMeridian: self._write_prime_meridian,
            CoordinateSystem: self._write_coordinate_system,
            Axis: self._write_axis,
            Unit: self._write_unit,
            Identifier: self._write_identifier,
            Usage: self._write_usage,
            Extent: self._write_extent,
            GeographicBoundingBox: self._write_bounding_box,
            VerticalExtent: self._write_vertical_extent,
            TemporalExtent: self._write_temporal_extent,
        }

    def write(self, obj) -> str:
        """
        Write any model object as compact WKT.

        Args:
            obj: A CRS, an operation, coordinate metadata or any of their parts

        Returns:
            The WKT text

        Raises:
            WriterError: If the object is not part of the model
        """
        self._parts = []
        self._write(obj)
        return "".join(self._parts)

    def _write(self, obj):
        writer = self._writers.get(type(obj))
        if writer is None:
            raise WriterError(f"Cannot write a {type(obj).__name__} as WKT")
        writer(obj)

    # CRSs

    def _write_geodetic_crs(self, crs: GeodeticCRS):
        with self._element(_CRS_KEYWORDS[crs.kind]):
            self._text(crs.name)
            self._write_datum_or_ensemble(crs.datum, crs.ensemble, crs.dynamic)
            self._write_coordinate_system(crs.coordinate_system)
            self._write_header(crs)

    def _write_projected_crs(self, crs: ProjectedCRS):
        with self._element(Keyword.PROJCRS):
            self._text(crs.name)
            self._write_base_crs(crs.base)
            self._write_map_projection(crs.conversion)
            self._write_coordinate_system(crs.coordinate_system)
            self._write_header(crs)

    def _write_vertical_crs(self, crs: VerticalCRS):
        with self._element(Keyword.VERTCRS):
            self._text(crs.name)
            self._write_datum_or_ensemble(crs.datum, crs.ensemble, crs.dynamic)
            self._write_coordinate_system(crs.coordinate_system)
            for geoid_model in crs.geoid_models or ():
                self._write_geoid_model(geoid_model)
            self._write_header(crs)

    def _write_simple_crs(self, crs: Union[EngineeringCRS, ParametricCRS, TemporalCRS]):
        with self._element(_CRS_KEYWORDS[crs.kind]):
            self._text(crs.name)
            self._write(crs.datum)
            self._write_coordinate_system(crs.coordinate_system)
            self._write_header(crs)

    def _write_derived_crs(self, crs: DerivedCRS):
        with self._element(_CRS_KEYWORDS[crs.derived_kind]):
            self._text(crs.name)
            self._write(crs.base)
            self._write_deriving_conversion(crs.conversion)
            self._write_coordinate_system(crs.coordinate_system)
            self._write_header(crs)

    def _write_compound_crs(self, crs: CompoundCRS):
        with self._element(Keyword.COMPOUNDCRS):
            self._text(crs.name)
            for component in crs.components:
                self._write(component)
            self._write_header(crs)

    def _write_bound_crs(self, crs: BoundCRS):
        with self._element(Keyword.BOUNDCRS):
            self._write_crs_slot(Keyword.SOURCECRS, crs.source)
            self._write_crs_slot(Keyword.TARGETCRS, crs.target)
            self._write_abridged_transformation(crs.transformation)
            self._write_header(crs)

    def _write_base_crs(self, base: Union[BaseCRS, BaseProjectedCRS]):
        if isinstance(base, BaseProjectedCRS):
            self._write_base_projected_crs(base)
            return
        with self._element(_BASE_KEYWORDS[base.kind]):
            self._text(base.name)
            if base.kind.is_geodetic() or base.kind is CRSKind.VERTICAL:
                self._write_datum_or_ensemble(base.datum, base.ensemble, base.dynamic)
            else:
                self._write(base.datum)
            if base.unit is not None:
                self._write_unit(base.unit)
            self._write_identifiers(base.identifiers)

    def _write_base_projected_crs(self, base: BaseProjectedCRS):
        with self._element(Keyword.BASEPROJCRS):
            self._text(base.name)
            self._write_base_crs(base.base)
            self._write_map_projection(base.conversion)
            if base.unit is not None:
                self._write_unit(base.unit)
            self._write_identifiers(base.identifiers)

    def _write_crs_slot(self, keyword: Keyword, crs):
        with self._element(keyword):
            self._write(crs)

    # operations

    def _write_coordinate_operation(self, operation: CoordinateOperation):
        with self._element(Keyword.COORDINATEOPERATION):
            self._text(operation.name)
            self._write_version(operation.version)
            self._write_crs_slot(Keyword.SOURCECRS, operation.source)
            self._write_crs_slot(Keyword.TARGETCRS, operation.target)
            self._write_method(operation.method)
            self._write_parameters(operation.method, operation.parameters)
            if operation.interpolation is not None:
                self._write_crs_slot(Keyword.INTERPOLATIONCRS, operation.interpolation)
            self._write_accuracy(operation.accuracy)
            self._write_header(operation)

    def _write_point_motion_operation(self, operation: PointMotionOperation):
        with self._element(Keyword.POINTMOTIONOPERATION):
            self._text(operation.name)
            self._write_version(operation.version)
            self._write_crs_slot(Keyword.SOURCECRS, operation.source)
            self._write_method(operation.method)
            self._write_parameters(operation.method, operation.parameters)
            self._write_accuracy(operation.accuracy)
            self._write_header(operation)

    def _write_concatenated_operation(self, operation: ConcatenatedOperation):
        with self._element(Keyword.CONCATENATEDOPERATION):
            self._text(operation.name)
            self._write_version(operation.version)
            self._write_crs_slot(Keyword.SOURCECRS, operation.source)
            self._write_crs_slot(Keyword.TARGETCRS, operation.target)
            for step in operation.steps:
                with self._element(Keyword.STEP):
                    self._write(step)
            self._write_accuracy(operation.accuracy)
            self._write_header(operation)

    def _write_coordinate_metadata(self, metadata: CoordinateMetadata):
        with self._element(Keyword.COORDINATEMETADATA):
            self._write(metadata.crs)
            if metadata.epoch is not None:
                with self._element(Keyword.EPOCH):
                    self._number(metadata.epoch)

    def _write_abridged_transformation(self, transformation: AbridgedTransformation):
        with self._element(Keyword.ABRIDGEDTRANSFORMATION):
            self._text(transformation.name)
            self._write_version(transformation.version)
            self._write_method(transformation.method)
            self._write_parameters(transformation.method, transformation.parameters)
            self._write_header(transformation)

    def _write_map_projection(self, conversion: MapProjection):
        self._write_conversion(Keyword.CONVERSION, conversion)

    def _write_deriving_conversion(self, conversion: DerivingConversion):
        self._write_conversion(Keyword.DERIVINGCONVERSION, conversion)

    def _write_conversion(self, keyword: Keyword, conversion: Union[MapProjection, DerivingConversion]):
        with self._element(keyword):
            self._text(conversion.name)
            self._write_method(conversion.method)
            self._write_parameters(conversion.method, conversion.parameters)
            self._write_identifiers(conversion.identifiers)

    def _write_method(self, method: OperationMethod):
        identifiers = method.identifiers
        if identifiers is None:
            well_known = method.well_known
            if well_known is not None:
                identifiers = (Identifier.epsg(well_known.code),)
        with self._element(Keyword.METHOD):
            self._text(method.name)
            self._write_identifiers(identifiers)

    def _write_parameters(self, method: OperationMethod, parameters: Optional[Tuple[Parameter, ...]]):
        well_known = method.well_known
        for parameter in parameters or ():
            identifiers = parameter.identifiers
            if identifiers is None and well_known is not None:
                entry = epsg.get_parameter(parameter.name, well_known)
                if entry is not None:
                    identifiers = (Identifier.epsg(entry.code),)
            if isinstance(parameter, ParameterFile):
                self._write_parameter_file(parameter, identifiers)
            else:
                self._write_parameter(parameter, identifiers)

    def _write_parameter(self, parameter: OperationParameter, identifiers=None):
        with self._element(Keyword.PARAMETER):
            self._text(parameter.name)
            self._number(parameter.value)
            if parameter.unit is not None:
                self._write_unit(parameter.unit)
            self._write_identifiers(identifiers or parameter.identifiers)

    def _write_parameter_file(self, parameter: ParameterFile, identifiers=None):
        with self._element(Keyword.PARAMETERFILE):
            self._text(parameter.name)
            self._text(parameter.file_name)
            self._write_identifiers(identifiers or parameter.identifiers)

    def _write_version(self, version: Optional[str]):
        if version is not None:
            with self._element(Keyword.VERSION):
                self._text(version)

    def _write_accuracy(self, accuracy: Optional[float]):
        if accuracy is not None:
            with self._element(Keyword.OPERATIONACCURACY):
                self._number(accuracy)

    # datums

    def _write_datum_or_ensemble(
        self,
        datum,
        ensemble: Optional[DatumEnsemble],
        dynamic: Optional[Dynamic],
    ):
        if dynamic is not None:
            self._write_dynamic(dynamic)
        if ensemble is not None:
            self._write_datum_ensemble(ensemble)
            prime_meridian = ensemble.prime_meridian
        else:
            self._write(datum)
            prime_meridian = getattr(datum, "prime_meridian", None)
        # the prime meridian is a sibling of the datum in WKT
        if prime_meridian is not None:
            self._write_prime_meridian(prime_meridian)

    def _write_geodetic_reference_frame(self, datum: GeodeticReferenceFrame):
        with self._element(Keyword.DATUM):
            self._text(datum.name)
            self._write_ellipsoid(datum.ellipsoid)
            self._write_anchor(datum.anchor)
            self._write_identifiers(datum.identifiers)

    def _write_simple_datum(self, datum: Union[VerticalReferenceFrame, EngineeringDatum, ParametricDatum]):
        keyword = {
            VerticalReferenceFrame: Keyword.VDATUM,
            EngineeringDatum: Keyword.EDATUM,
            ParametricDatum: Keyword.PDATUM,
        }[type(datum)]
        with self._element(keyword):
            self._text(datum.name)
            self._write_anchor(datum.anchor)
            self._write_identifiers(datum.identifiers)

    def _write_anchor(self, anchor: Optional[str]):
        if anchor is not None:
            with self._element(Keyword.ANCHOR):
                self._text(anchor)

    def _write_temporal_datum(self, datum: TemporalDatum):
        with self._element(Keyword.TDATUM):
            self._text(datum.name)
            if datum.calendar is not None:
                with self._element(Keyword.CALENDAR):
                    self._text(datum.calendar)
            if datum.origin is not None:
                with self._element(Keyword.TIMEORIGIN):
                    self._date_time_or_text(datum.origin)
            self._write_identifiers(datum.identifiers)

    def _write_datum_ensemble(self, ensemble: DatumEnsemble):
        with self._element(Keyword.ENSEMBLE):
            self._text(ensemble.name)
            for member in ensemble.members:
                self._write_ensemble_member(member)
            if ensemble.ellipsoid is not None:
                self._write_ellipsoid(ensemble.ellipsoid)
            with self._element(Keyword.ENSEMBLEACCURACY):
                self._number(ensemble.accuracy)
            self._write_identifiers(ensemble.identifiers)

    def _write_ensemble_member(self, member: DatumEnsembleMember):
        with self._element(Keyword.MEMBER):
            self._text(member.name)
            self._write_identifiers(member.identifiers)

    def _write_dynamic(self, dynamic: Dynamic):
        with self._element(Keyword.DYNAMIC):
            with self._element(Keyword.FRAMEEPOCH):
                self._number(dynamic.frame_epoch)
            if dynamic.model_name is not None:
                with self._element(Keyword.MODEL):
                    self._text(dynamic.model_name)
                    self._write_identifiers(dynamic.model_identifiers)

    def _write_geoid_model(self, geoid_model: GeoidModel):
        with self._element(Keyword.GEOIDMODEL):
            self._text(geoid_model.name)
            self._write_identifiers(geoid_model.identifiers)

    def _write_ellipsoid(self, ellipsoid: Ellipsoid):
        keyword = Keyword.TRIAXIAL if ellipsoid.ellipsoid_type is EllipsoidType.TRIAXIAL else Keyword.ELLIPSOID
        with self._element(keyword):
            self._text(ellipsoid.name)
            self._number(ellipsoid.semi_major_axis)
            for value in ellipsoid.shape:
                self._number(value)
            if ellipsoid.unit is not None:
                self._write_unit(ellipsoid.unit)
            self._write_identifiers(ellipsoid.identifiers)

    def _write_prime_meridian(self, prime_meridian: PrimeMeridian):
        with self._element(Keyword.PRIMEM):
            self._text(prime_meridian.name)
            self._number(prime_meridian.longitude)
            if prime_meridian.unit is not None:
                self._write_unit(prime_meridian.unit)
            self._write_identifiers(prime_meridian.identifiers)

    # coordinate systems

    def _write_coordinate_system(self, coordinate_system: CoordinateSystem):
        with self._element(Keyword.CS):
            self._raw(coordinate_system.cs_type.value)
            self._number(coordinate_system.dimension)
            self._write_identifiers(coordinate_system.identifiers)
        for axis in coordinate_system.axes:
            self._write_axis(axis)
        if coordinate_system.unit is not None:
            self._write_unit(coordinate_system.unit)

    def _write_axis(self, axis: Axis):
        with self._element(Keyword.AXIS):
            self._text(axis.label)
            self._raw(axis.direction.value)
            if axis.meridian is not None:
                with self._element(Keyword.MERIDIAN):
                    self._number(axis.meridian.longitude)
                    self._write_unit(axis.meridian.unit)
            if axis.bearing is not None:
                with self._element(Keyword.BEARING):
                    self._number(axis.bearing)
            if axis.order is not None:
                with self._element(Keyword.ORDER):
                    self._number(axis.order)
            if axis.unit is not None:
                self._write_unit(axis.unit)
            self._write_identifiers(axis.identifiers)

    # units, identifiers and the common header

    def _write_unit(self, unit: Unit):
        with self._element(unit.unit_type.keyword):
            self._text(unit.name)
            if unit.conversion_factor is not None:
                self._number(unit.conversion_factor)
            self._write_identifiers(unit.identifiers)

    def _write_identifier(self, identifier: Identifier):
        with self._element(Keyword.ID):
            self._text(identifier.authority)
            self._number_or_text(identifier.unique_id)
            if identifier.version is not None:
                self._number_or_text(identifier.version)
            if identifier.citation is not None:
                with self._element(Keyword.CITATION):
                    self._text(identifier.citation)
            if identifier.uri is not None:
                with self._element(Keyword.URI):
                    self._text(identifier.uri)

    def _write_identifiers(self, identifiers: Optional[Iterable[Identifier]]):
        for identifier in identifiers or ():
            self._write_identifier(identifier)

    def _write_header(self, obj):
        """Usages, identifiers and remark, the trailing children of every top level object."""
        for usage in obj.usages or ():
            self._write_usage(usage)
        self._write_identifiers(obj.identifiers)
        if obj.remark is not None:
            with self._element(Keyword.REMARK):
                self._text(obj.remark)
        if obj.extensions:
            log.debug(f"not writing {len(obj.extensions)} EXTENSION passthrough(s) of {obj.name!r}")

    def _write_usage(self, usage: Usage):
        # always the 2019 form, whichever form was read
        with self._element(Keyword.USAGE):
            with self._element(Keyword.SCOPE):
                self._text(usage.scope)
            self._write_extent(usage.extent)

    def _write_extent(self, extent: Extent):
        if extent.area_description is not None:
            with self._element(Keyword.AREA):
                self._text(extent.area_description)
        if extent.bounding_box is not None:
            self._write_bounding_box(extent.bounding_box)
        if extent.vertical_extent is not None:
            self._write_vertical_extent(extent.vertical_extent)
        if extent.temporal_extent is not None:
            self._write_temporal_extent(extent.temporal_extent)

    def _write_bounding_box(self, bounding_box: GeographicBoundingBox):
        with self._element(Keyword.BBOX):
            self._number(bounding_box.lower_left_latitude)
            self._number(bounding_box.lower_left_longitude)
            self._number(bounding_box.upper_right_latitude)
            self._number(bounding_box.upper_right_longitude)

    def _write_vertical_extent(self, vertical_extent: VerticalExtent):
        with self._element(Keyword.VERTICALEXTENT):
            self._number(vertical_extent.minimum_height)
            self._number(vertical_extent.maximum_height)
            if vertical_extent.unit is not None:
                self._write_unit(vertical_extent.unit)

    def _write_temporal_extent(self, temporal_extent: TemporalExtent):
        with self._element(Keyword.TIMEEXTENT):
            self._date_time_or_text(temporal_extent.start)
            self._date_time_or_text(temporal_extent.end)

    # output primitives

    @contextmanager
    def _element(self, keyword: Union[Keyword, str]) -> Iterator[None]:
        name = keyword.value if isinstance(keyword, Keyword) else keyword
        self._raw(name + LEFT_DELIMITERS[0])
        yield
        self._parts.append(RIGHT_DELIMITERS[0])

    def _raw(self, text: str):
        if self._parts and not self._parts[-1].endswith(LEFT_DELIMITERS[0]):
            self._parts.append(SEPARATOR)
        self._parts.append(text)

    def _text(self, text: str):
        self._raw(quote(text))

    def _number(self, value: Union[int, float]):
        self._raw(format_number(value))

    def _number_or_text(self, value: str):
        """Identifier codes and versions keep their source text: bare when numeric, quoted otherwise."""
        if NUMBER_PATTERN.match(value):
            self._raw(value)
        else:
            self._text(value)

    def _date_time_or_text(self, value: Union[DateTime, str]):
        if isinstance(value, DateTime):
            self._raw(str(value))
        else:
            self._text(value)


def write_wkt(
    obj,
    pretty: bool = False,
    newline: str = DEFAULT_NEWLINE,
    indent: str = DEFAULT_INDENT,
) -> str:
    """
    Write a model object as WKT2.

    Args:
        obj: A CRS, an operation, coordinate metadata or any of their parts
        pretty: Write one element per line, indented by nesting depth
        newline: The line break used when pretty is set
        indent: The indent unit used when pretty is set; "" gives no indentation

    Returns:
        The WKT text

    Examples:
        >>> from wktcrs.utils.crs import WGS84_ELLIPSOID
        >>> write_wkt(WGS84_ELLIPSOID)
        'ELLIPSOID["WGS 84",6378137.0,298.257223563,LENGTHUNIT["metre",1.0]]'
    """
    text = CRSWriter().write(obj)
    if pretty:
        return pretty_print(text, newline=newline, indent=indent)
    return text
