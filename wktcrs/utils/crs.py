"""Coordinate Reference System (CRS) constants used throughout wktcrs.

WGS84_GEOGRAPHIC is the target of the bound CRS built from a legacy TOWGS84
block; it matches EPSG:4326 as written by current WKT2 producers.
"""

from wktcrs.constructs.axis import Axis, AxisDirection
from wktcrs.constructs.coordinate_system import CoordinateSystem, CoordinateSystemType
from wktcrs.constructs.crs import CRSKind, GeodeticCRS
from wktcrs.constructs.datum import GeodeticReferenceFrame
from wktcrs.constructs.ellipsoid import Ellipsoid, PrimeMeridian
from wktcrs.constructs.identifier import Identifier
from wktcrs.constructs.unit import Units
from wktcrs.utils.constants import WGS84_NAME

WGS84_ELLIPSOID = Ellipsoid.oblate(WGS84_NAME, 6378137.0, 298.257223563, Units.METRE)

GREENWICH = PrimeMeridian("Greenwich", 0.0, Units.DEGREE)

# WGS84 latitude/longitude coordinate system (EPSG:4326)
WGS84_GEOGRAPHIC = GeodeticCRS(
    name=WGS84_NAME,
    kind=CRSKind.GEOGRAPHIC,
    coordinate_system=CoordinateSystem(
        CoordinateSystemType.ELLIPSOIDAL,
        2,
        (
            Axis("geodetic latitude", AxisDirection.NORTH, "Lat", order=1),
            Axis("geodetic longitude", AxisDirection.EAST, "Lon", order=2),
        ),
        Units.DEGREE,
    ),
    datum=GeodeticReferenceFrame(
        "World Geodetic System 1984",
        WGS84_ELLIPSOID,
        prime_meridian=GREENWICH,
    ),
    identifiers=(Identifier.epsg(4326),),
)
