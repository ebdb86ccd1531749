"""Well-known EPSG operation methods and parameters.

The tables are keyed by EPSG code and by every accepted spelling of the
name. Spellings are matched case insensitively; for each alias an underscore
variant ("Transverse_Mercator") and an underscore variant without the
parenthesized part are accepted as well, since that is how WKT1 producers
write them. When several entries share a spelling the first one defined wins.
"""

from __future__ import annotations

import re
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple, Union

from wktcrs.constructs.unit import UnitType


class OperationType(Enum):
    COORDINATE = "coordinate operation"
    POINT_MOTION = "point motion operation"
    MAP_PROJECTION = "map projection"
    DERIVING_CONVERSION = "deriving conversion"
    ABRIDGED_COORDINATE_TRANSFORMATION = "abridged coordinate transformation"


class WellKnownParameter(NamedTuple):
    code: int
    name: str
    unit_type: Optional[UnitType] = None
    aliases: Tuple[str, ...] = ()


class WellKnownMethod(NamedTuple):
    code: int
    name: str
    operation_type: OperationType
    aliases: Tuple[str, ...] = ()
    parameter_codes: Tuple[int, ...] = ()

    def parameters(self) -> Tuple[WellKnownParameter, ...]:
        return tuple(PARAMETERS_BY_CODE[code] for code in self.parameter_codes)


_ANGLE = UnitType.ANGLE
_LENGTH = UnitType.LENGTH
_SCALE = UnitType.SCALE

_HELMERT_PARAMETERS = (8605, 8606, 8607, 8608, 8609, 8610, 8611)
_NATURAL_ORIGIN_PARAMETERS = (8801, 8802, 8806, 8807)
_SCALED_NATURAL_ORIGIN_PARAMETERS = (8801, 8802, 8805, 8806, 8807)
_FALSE_ORIGIN_PARAMETERS = (8821, 8822, 8823, 8824, 8826, 8827)

_MAP = OperationType.MAP_PROJECTION
_COORDINATE = OperationType.COORDINATE

PARAMETERS: Tuple[WellKnownParameter, ...] = (
    WellKnownParameter(8814, "Angle from Rectified to Skew Grid", _ANGLE, ("rectified_grid_angle",)),
    WellKnownParameter(8813, "Azimuth of initial line", _ANGLE, ("azimuth",)),
    WellKnownParameter(1036, "Co-latitude of cone axis", _ANGLE),
    WellKnownParameter(8826, "Easting at false origin", _LENGTH, ("False easting",)),
    WellKnownParameter(8816, "Easting at projection centre", _LENGTH, ("False easting",)),
    WellKnownParameter(1058, "Ellipsoidal height difference file"),
    WellKnownParameter(8806, "False easting", _LENGTH),
    WellKnownParameter(8807, "False northing", _LENGTH),
    WellKnownParameter(8656, "Latitude and longitude difference file"),
    WellKnownParameter(8657, "Latitude difference file"),
    WellKnownParameter(8823, "Latitude of 1st standard parallel", _ANGLE, ("Standard parallel 1",)),
    WellKnownParameter(8824, "Latitude of 2nd standard parallel", _ANGLE, ("Standard parallel 2",)),
    WellKnownParameter(8821, "Latitude of false origin", _ANGLE, ("Latitude of origin",)),
    WellKnownParameter(
        8801, "Latitude of natural origin", _ANGLE, ("Latitude of origin", "Latitude of center")
    ),
    WellKnownParameter(8811, "Latitude of projection centre", _ANGLE, ("Latitude of center",)),
    WellKnownParameter(8818, "Latitude of pseudo standard parallel", _ANGLE),
    WellKnownParameter(8832, "Latitude of standard parallel", _ANGLE),
    WellKnownParameter(8658, "Longitude difference file"),
    WellKnownParameter(
        8822,
        "Longitude of false origin",
        _ANGLE,
        ("Longitude of origin", "Longitude of center", "Central meridian"),
    ),
    WellKnownParameter(
        8802,
        "Longitude of natural origin",
        _ANGLE,
        ("Longitude of origin", "Longitude of center", "Central meridian"),
    ),
    WellKnownParameter(8602, "Longitude offset", _ANGLE),
    WellKnownParameter(8833, "Longitude of origin", _ANGLE),
    WellKnownParameter(8812, "Longitude of projection centre", _ANGLE, ("Longitude of center",)),
    WellKnownParameter(8827, "Northing at false origin", _LENGTH, ("False northing",)),
    WellKnownParameter(8817, "Northing at projection centre", _LENGTH, ("False northing",)),
    WellKnownParameter(8617, "Ordinate 1 of evaluation point", _LENGTH),
    WellKnownParameter(8618, "Ordinate 2 of evaluation point", _LENGTH),
    WellKnownParameter(8667, "Ordinate 3 of evaluation point", _LENGTH),
    WellKnownParameter(8611, "Scale difference", _SCALE, ("dS", "ppm")),
    WellKnownParameter(8805, "Scale factor at natural origin", _SCALE, ("Scale factor",)),
    WellKnownParameter(8815, "Scale factor on initial line", _SCALE, ("Scale factor",)),
    WellKnownParameter(8819, "Scale factor on pseudo standard parallel", _SCALE),
    WellKnownParameter(8603, "Vertical Offset", _LENGTH, ("dH",)),
    WellKnownParameter(8608, "X-axis rotation", _ANGLE, ("rX", "eX")),
    WellKnownParameter(8605, "X-axis translation", _LENGTH, ("dX", "tX")),
    WellKnownParameter(8609, "Y-axis rotation", _ANGLE, ("rY", "eY")),
    WellKnownParameter(8606, "Y-axis translation", _LENGTH, ("dY", "tY")),
    WellKnownParameter(8610, "Z-axis rotation", _ANGLE, ("rZ", "eZ")),
    WellKnownParameter(8607, "Z-axis translation", _LENGTH, ("dZ", "tZ")),
)

METHODS: Tuple[WellKnownMethod, ...] = (
    WellKnownMethod(
        9822, "Albers Equal Area", _MAP, ("Albers", "Albers Conic Equal Area"), _FALSE_ORIGIN_PARAMETERS
    ),
    WellKnownMethod(
        9818, "American Polyconic", _MAP, ("Polyconic",), _NATURAL_ORIGIN_PARAMETERS
    ),
    WellKnownMethod(
        9806, "Cassini-Soldner", _MAP, ("Cassini", "Cassini Soldner"), _NATURAL_ORIGIN_PARAMETERS
    ),
    WellKnownMethod(
        1032,
        "Coordinate Frame rotation (geocentric domain)",
        _COORDINATE,
        ("Coordinate Frame rotation", "Coordinate Frame", "Bursa-Wolf", "Helmert"),
        _HELMERT_PARAMETERS,
    ),
    WellKnownMethod(
        9607,
        "Coordinate Frame rotation (geog2D domain)",
        _COORDINATE,
        ("Coordinate Frame rotation",),
        _HELMERT_PARAMETERS,
    ),
    WellKnownMethod(
        9823,
        "Equidistant Cylindrical (Spherical)",
        _MAP,
        ("Equidistant Cylindrical", "Equirectangular"),
        _NATURAL_ORIGIN_PARAMETERS,
    ),
    WellKnownMethod(
        1031,
        "Geocentric translations (geocentric domain)",
        _COORDINATE,
        ("Geocentric translations",),
        (8605, 8606, 8607),
    ),
    WellKnownMethod(
        9603,
        "Geocentric translations (geog2D domain)",
        _COORDINATE,
        ("Geocentric translations",),
        (8605, 8606, 8607),
    ),
    WellKnownMethod(
        9812,
        "Hotine Oblique Mercator (variant A)",
        _MAP,
        ("Rectified skew orthomorphic", "Hotine Oblique Mercator"),
        (8811, 8812, 8813, 8814, 8815, 8806, 8807),
    ),
    WellKnownMethod(
        9815,
        "Hotine Oblique Mercator (variant B)",
        _MAP,
        ("Rectified skew orthomorphic", "Hotine Oblique Mercator Azimuth Center"),
        (8811, 8812, 8813, 8814, 8815, 8816, 8817),
    ),
    WellKnownMethod(9819, "Krovak", _MAP, (), (8811, 8833, 1036, 8818, 8819, 8806, 8807)),
    WellKnownMethod(
        9820,
        "Lambert Azimuthal Equal Area",
        _MAP,
        ("Lambert Equal Area", "LAEA"),
        _NATURAL_ORIGIN_PARAMETERS,
    ),
    WellKnownMethod(
        9801,
        "Lambert Conic Conformal (1SP)",
        _MAP,
        ("Lambert Conic Conformal", "LCC", "Lambert Conformal Conic 1SP"),
        _SCALED_NATURAL_ORIGIN_PARAMETERS,
    ),
    WellKnownMethod(
        9802,
        "Lambert Conic Conformal (2SP)",
        _MAP,
        ("Lambert Conic Conformal", "LCC", "Lambert Conformal Conic 2SP"),
        _FALSE_ORIGIN_PARAMETERS,
    ),
    WellKnownMethod(
        9834,
        "Lambert Cylindrical Equal Area (Spherical)",
        _MAP,
        ("Lambert Cylindrical Equal Area",),
        (8823, 8802, 8806, 8807),
    ),
    WellKnownMethod(9601, "Longitude rotation", _COORDINATE, (), (8602,)),
    WellKnownMethod(
        9804,
        "Mercator (variant A)",
        _MAP,
        ("Mercator", "Mercator 1SP"),
        _SCALED_NATURAL_ORIGIN_PARAMETERS,
    ),
    WellKnownMethod(
        9805, "Mercator (variant B)", _MAP, ("Mercator", "Mercator 2SP"), (8823, 8802, 8806, 8807)
    ),
    WellKnownMethod(
        1034,
        "Molodensky-Badekas (geocentric domain)",
        _COORDINATE,
        ("Molodensky-Badekas",),
        _HELMERT_PARAMETERS + (8617, 8618, 8667),
    ),
    WellKnownMethod(9613, "NADCON", _COORDINATE, (), (8657, 8658)),
    WellKnownMethod(1075, "NADCON5 (3D)", _COORDINATE, ("NADCON5",), (8657, 8658, 1058)),
    WellKnownMethod(9811, "New Zealand Map Grid", _MAP, (), _NATURAL_ORIGIN_PARAMETERS),
    WellKnownMethod(9615, "NTv2", _COORDINATE, (), (8656,)),
    WellKnownMethod(
        9809,
        "Oblique Stereographic",
        _MAP,
        ("Double stereographic",),
        _SCALED_NATURAL_ORIGIN_PARAMETERS,
    ),
    WellKnownMethod(
        9810,
        "Polar Stereographic (variant A)",
        _MAP,
        ("Polar Stereographic",),
        _SCALED_NATURAL_ORIGIN_PARAMETERS,
    ),
    WellKnownMethod(
        9829, "Polar Stereographic (variant B)", _MAP, (), (8832, 8833, 8806, 8807)
    ),
    WellKnownMethod(
        9830, "Polar Stereographic (variant C)", _MAP, (), (8832, 8833, 8826, 8827)
    ),
    WellKnownMethod(
        1024,
        "Popular Visualisation Pseudo Mercator",
        _MAP,
        ("Pseudo Mercator",),
        _NATURAL_ORIGIN_PARAMETERS,
    ),
    WellKnownMethod(
        1033,
        "Position Vector transformation (geocentric domain)",
        _COORDINATE,
        (
            "Position Vector transformation",
            "Position Vector 7-param. transformation",
            "Bursa-Wolf",
            "Helmert",
        ),
        _HELMERT_PARAMETERS,
    ),
    WellKnownMethod(
        9606,
        "Position Vector transformation (geog2D domain)",
        _COORDINATE,
        ("Position Vector transformation",),
        _HELMERT_PARAMETERS,
    ),
    WellKnownMethod(
        9807,
        "Transverse Mercator",
        _MAP,
        ("Gauss-Boaga", "Gauss-Krüger", "TM"),
        _SCALED_NATURAL_ORIGIN_PARAMETERS,
    ),
    WellKnownMethod(
        9808,
        "Transverse Mercator (South Orientated)",
        _MAP,
        ("Gauss-Conform",),
        _SCALED_NATURAL_ORIGIN_PARAMETERS,
    ),
    WellKnownMethod(9616, "Vertical Offset", _COORDINATE, (), (8603,)),
)

_PARENTHESIZED = re.compile(r"\s*\(.*?\)")


def _spellings(name: str, aliases: Iterable[str], with_unparenthesized: bool) -> List[str]:
    spellings = []
    for alias in (name,) + tuple(aliases):
        spellings.append(alias)
        spellings.append(alias.replace(" ", "_"))
        if with_unparenthesized:
            spellings.append(_PARENTHESIZED.sub("", alias).replace(" ", "_"))
    return spellings


def _index(entries, with_unparenthesized: bool):
    by_code: Dict[int, NamedTuple] = {}
    by_name: Dict[str, list] = {}
    for entry in entries:
        if entry.code in by_code:
            raise ValueError(f"duplicate EPSG code {entry.code} for {entry.name!r}")
        by_code[entry.code] = entry
        for spelling in _spellings(entry.name, entry.aliases, with_unparenthesized):
            matches = by_name.setdefault(spelling.lower(), [])
            if entry not in matches:
                matches.append(entry)
    return (
        MappingProxyType(by_code),
        MappingProxyType({k: tuple(v) for k, v in by_name.items()}),
    )


METHODS_BY_CODE, _METHODS_BY_NAME = _index(METHODS, with_unparenthesized=True)
PARAMETERS_BY_CODE, _PARAMETERS_BY_NAME = _index(PARAMETERS, with_unparenthesized=False)


def get_methods(name: str) -> Tuple[WellKnownMethod, ...]:
    """Every well-known method one of whose spellings matches the name."""
    return _METHODS_BY_NAME.get(name.strip().lower(), ())


def get_method(code_or_name: Union[int, str]) -> Optional[WellKnownMethod]:
    """
    Look up a well-known operation method.

    Args:
        code_or_name: An EPSG code, or a name or alias in any letter case

    Returns:
        The method, or None when it is not in the table

    Examples:
        >>> get_method("Transverse_Mercator").code
        9807
        >>> get_method(9802).name
        'Lambert Conic Conformal (2SP)'
    """
    if isinstance(code_or_name, int):
        return METHODS_BY_CODE.get(code_or_name)
    matches = get_methods(code_or_name)
    return matches[0] if matches else None


def get_parameters(name: str) -> Tuple[WellKnownParameter, ...]:
    """Every well-known parameter one of whose spellings matches the name."""
    return _PARAMETERS_BY_NAME.get(name.strip().lower(), ())


def get_parameter(
    code_or_name: Union[int, str], method: Optional[WellKnownMethod] = None
) -> Optional[WellKnownParameter]:
    """
    Look up a well-known operation parameter.

    A name such as "latitude of origin" means different parameters for
    different methods, so when the method is known only its parameters are
    considered.

    Args:
        code_or_name: An EPSG code, or a name or alias in any letter case
        method: The method the parameter belongs to, if known

    Returns:
        The parameter, or None when it is not in the table (or not a parameter of the method)
    """
    if isinstance(code_or_name, int):
        parameter = PARAMETERS_BY_CODE.get(code_or_name)
        candidates = (parameter,) if parameter is not None else ()
    else:
        candidates = get_parameters(code_or_name)
    if method is not None:
        candidates = tuple(p for p in candidates if p.code in method.parameter_codes)
    return candidates[0] if candidates else None
