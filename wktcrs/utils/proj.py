"""Read-only accessors over parsed CRSs and the bridge to pyproj.

Nothing here parses WKT: a CRS read by wktcrs is written back as WKT2 and
handed to pyproj, which builds its own PROJ object from it.
"""

from __future__ import annotations

import logging
from typing import Dict, NamedTuple, Optional, Tuple, Union

from pyproj import CRS, Geod, Transformer
from pyproj.exceptions import ProjError

from wktcrs.constructs.crs import BaseCRS, BoundCRS, GeodeticCRS, ProjectedCRS
from wktcrs.constructs.ellipsoid import Ellipsoid
from wktcrs.constructs.identifier import Identifier
from wktcrs.constructs.operation import OperationParameter
from wktcrs.constructs.unit import Unit, Units, convert
from wktcrs.utils.constants import (
    TOWGS84_HELMERT_METHOD_CODES,
    TOWGS84_PARAMETER_CODES,
    TOWGS84_TRANSLATION_METHOD_CODES,
)
from wktcrs.wkt.writer import write_wkt

log = logging.getLogger(__name__)

GeodeticOrProjected = Union[GeodeticCRS, ProjectedCRS, BoundCRS]


class EllipsoidParameters(NamedTuple):
    """The figure of an oblate ellipsoid, with the axes in the ellipsoid's own unit."""

    semi_major_axis: float
    semi_minor_axis: float
    inverse_flattening: float
    flattening: float
    unit: Unit


def _unwrap(crs: GeodeticOrProjected) -> Union[GeodeticCRS, ProjectedCRS]:
    if isinstance(crs, BoundCRS):
        crs = crs.source
    if not isinstance(crs, (GeodeticCRS, ProjectedCRS)):
        raise ValueError(f"expected a geodetic, geographic or projected CRS, got a {type(crs).__name__}")
    return crs


def _geodetic_part(crs: GeodeticOrProjected) -> Union[GeodeticCRS, BaseCRS]:
    crs = _unwrap(crs)
    if isinstance(crs, ProjectedCRS):
        return crs.base
    return crs


def get_ellipsoid(crs: GeodeticOrProjected) -> Ellipsoid:
    """
    The ellipsoid of a geodetic, geographic or projected CRS.

    Raises:
        ValueError: If the CRS is of another kind
    """
    return _geodetic_part(crs).ellipsoid


def ellipsoid_parameters(crs: GeodeticOrProjected) -> EllipsoidParameters:
    """
    The semi-axes and flattening of the CRS ellipsoid.

    Args:
        crs: A geodetic, geographic or projected CRS, or a bound CRS wrapping one

    Returns:
        The ellipsoid parameters, in the ellipsoid unit (metre when it states none)

    Raises:
        ValueError: If the ellipsoid is triaxial, or the CRS is of another kind

    Examples:
        >>> from wktcrs import read_wkt
        >>> crs = read_wkt('GEOGCS["WGS 84",DATUM["WGS_1984",SPHEROID["WGS 84",6378137,298.257223563]],'
        ...                'PRIMEM["Greenwich",0],UNIT["degree",0.0174532925199433]]')
        >>> round(ellipsoid_parameters(crs).semi_minor_axis, 3)
        6356752.314
    """
    ellipsoid = get_ellipsoid(crs)
    if not ellipsoid.is_oblate():
        raise ValueError(f"ellipsoid {ellipsoid.name!r} is triaxial")
    return EllipsoidParameters(
        ellipsoid.semi_major_axis,
        ellipsoid.semi_minor_axis,
        ellipsoid.inverse_flattening,
        ellipsoid.flattening,
        ellipsoid.unit or Units.METRE,
    )


def prime_meridian(crs: GeodeticOrProjected) -> Tuple[float, Unit]:
    """
    The prime meridian longitude from Greenwich and its unit.

    A CRS that states no prime meridian is taken to use Greenwich, and a prime
    meridian without a unit is taken to be in degrees.
    """
    meridian = _geodetic_part(crs).prime_meridian
    if meridian is None:
        return 0.0, Units.DEGREE
    return meridian.longitude, meridian.unit or Units.DEGREE


def datum_identifier(crs: GeodeticOrProjected, authority: str = "EPSG") -> Optional[Identifier]:
    """The identifier of the datum (or datum ensemble) issued by the authority, if any."""
    part = _geodetic_part(crs)
    source = part.datum if part.datum is not None else part.ensemble
    return source.identifier(authority)


def projection_method(crs: GeodeticOrProjected) -> Tuple[str, Optional[int]]:
    """
    The map projection method name and its EPSG code.

    The code comes from the method's EPSG identifier or, without one, from the
    well-known method of the same name.

    Raises:
        ValueError: If the CRS is not projected
    """
    crs = _unwrap(crs)
    if not isinstance(crs, ProjectedCRS):
        raise ValueError(f"{crs.name!r} is not a projected CRS")
    method = crs.conversion.method
    well_known = method.well_known
    return method.name, well_known.code if well_known is not None else None


def projection_parameters(crs: GeodeticOrProjected) -> Dict[str, Tuple[float, Optional[Unit]]]:
    """
    The map projection parameters as name to (value, unit), in the order they were written.

    Parameter files are left out since they have no numeric value.

    Raises:
        ValueError: If the CRS is not projected
    """
    crs = _unwrap(crs)
    if not isinstance(crs, ProjectedCRS):
        raise ValueError(f"{crs.name!r} is not a projected CRS")
    return {
        parameter.name: (parameter.value, parameter.unit)
        for parameter in crs.conversion.parameters or ()
        if isinstance(parameter, OperationParameter)
    }


def to_wgs84_parameters(crs: BoundCRS) -> Optional[Tuple[float, ...]]:
    """
    The seven TOWGS84 style parameters of a bound CRS transformation.

    Translations come first, then rotations and the scale difference. A three
    parameter translation gives zero rotations and scale.

    Returns:
        The seven values, or None when the transformation is not a Helmert or
        geocentric translation method
    """
    transformation = crs.transformation
    method = transformation.method.well_known
    codes = TOWGS84_HELMERT_METHOD_CODES + TOWGS84_TRANSLATION_METHOD_CODES
    if method is None or method.code not in codes:
        return None
    values = []
    for code in TOWGS84_PARAMETER_CODES:
        parameter = transformation.parameter(code)
        values.append(parameter.value if isinstance(parameter, OperationParameter) else 0.0)
    return tuple(values)


def to_pyproj_crs(crs) -> CRS:
    """
    Build a pyproj CRS from a parsed CRS.

    Args:
        crs: Any CRS read by wktcrs

    Returns:
        The pyproj CRS

    Raises:
        ValueError: If PROJ rejects the definition
    """
    wkt = write_wkt(crs)
    log.debug(f"handing {crs.name!r} to PROJ")
    try:
        return CRS.from_wkt(wkt)
    except ProjError as e:
        raise ValueError(f"PROJ could not build a CRS from {crs.name!r}") from e


def to_geod(crs: GeodeticOrProjected) -> Geod:
    """
    Build a pyproj Geod for geodesic calculations on the CRS ellipsoid.

    Raises:
        ValueError: If the ellipsoid is triaxial, or the CRS has no ellipsoid

    Examples:
        >>> from wktcrs.utils.crs import WGS84_GEOGRAPHIC
        >>> geod = to_geod(WGS84_GEOGRAPHIC)
        >>> round(geod.a)
        6378137
    """
    parameters = ellipsoid_parameters(crs)
    semi_major_axis = convert(parameters.semi_major_axis, parameters.unit, Units.METRE)
    if parameters.inverse_flattening == 0:
        return Geod(a=semi_major_axis, b=semi_major_axis)
    return Geod(a=semi_major_axis, rf=parameters.inverse_flattening)


def transformer(source, target) -> Transformer:
    """
    Build a pyproj Transformer between two parsed CRSs, with x/y (longitude/latitude) axis order.

    Raises:
        ValueError: If PROJ rejects either CRS or finds no operation between them
    """
    source_crs = to_pyproj_crs(source)
    target_crs = to_pyproj_crs(target)
    try:
        return Transformer.from_crs(source_crs, target_crs, always_xy=True)
    except ProjError as e:
        raise ValueError(f"no transformation from {source.name!r} to {target.name!r}") from e

