from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from shapely.geometry import MultiPolygon, Polygon, box
from shapely.geometry.base import BaseGeometry

from wktcrs.constructs.date_time import DateTime
from wktcrs.constructs.unit import Unit, UnitType
from wktcrs.utils.exceptions import SemanticError


@dataclass(frozen=True)
class GeographicBoundingBox:
    """
    A latitude/longitude box in degrees, written as BBOX[...].

    The lower left longitude is greater than the upper right longitude when the
    box crosses the antimeridian.

    Attributes:
        lower_left_latitude: The southern bound
        lower_left_longitude: The western bound
        upper_right_latitude: The northern bound
        upper_right_longitude: The eastern bound

    Examples:
        >>> bbox = GeographicBoundingBox(20.0, 122.0, 46.0, 154.0)
        >>> bbox.to_geometry().bounds
        (122.0, 20.0, 154.0, 46.0)
    """

    lower_left_latitude: float
    lower_left_longitude: float
    upper_right_latitude: float
    upper_right_longitude: float

    def __post_init__(self):
        for latitude in (self.lower_left_latitude, self.upper_right_latitude):
            if not -90.0 <= latitude <= 90.0:
                raise SemanticError(f"Bounding box latitude {latitude} is out of range")
        for longitude in (self.lower_left_longitude, self.upper_right_longitude):
            if not -180.0 <= longitude <= 180.0:
                raise SemanticError(f"Bounding box longitude {longitude} is out of range")
        if self.lower_left_latitude > self.upper_right_latitude:
            raise SemanticError(
                "Bounding box lower left latitude must not exceed upper right latitude"
            )

    def crosses_antimeridian(self) -> bool:
        return self.lower_left_longitude > self.upper_right_longitude

    def to_geometry(self) -> Union[Polygon, MultiPolygon]:
        """
        Build the shapely geometry covered by the box, in longitude/latitude order.

        Returns:
            A polygon, or a multipolygon split at the antimeridian when the box crosses it
        """
        south, north = self.lower_left_latitude, self.upper_right_latitude
        west, east = self.lower_left_longitude, self.upper_right_longitude
        if not self.crosses_antimeridian():
            return box(west, south, east, north)
        return MultiPolygon([box(west, south, 180.0, north), box(-180.0, south, east, north)])

    @classmethod
    def from_geometry(cls, geometry: BaseGeometry) -> GeographicBoundingBox:
        """
        The box around a shapely geometry given in longitude/latitude.

        Args:
            geometry: Any non empty shapely geometry

        Raises:
            ValueError: If the geometry is empty
        """
        if geometry.is_empty:
            raise ValueError("cannot build a bounding box around an empty geometry")
        west, south, east, north = geometry.bounds
        return cls(south, west, north, east)


@dataclass(frozen=True)
class VerticalExtent:
    minimum_height: float
    maximum_height: float
    unit: Optional[Unit] = None

    def __post_init__(self):
        if self.unit is not None and self.unit.unit_type is not UnitType.LENGTH:
            raise SemanticError(f"Vertical extent unit must be a length unit, got {self.unit.name!r}")

    def has_unit(self) -> bool:
        return self.unit is not None


@dataclass(frozen=True)
class TemporalExtent:
    """A start and an end, each either a date and time or free text."""

    start: Union[DateTime, str]
    end: Union[DateTime, str]


@dataclass(frozen=True)
class Extent:
    """
    The area, height range and time span over which something applies.

    At least one of the four parts must be present.
    """

    area_description: Optional[str] = None
    bounding_box: Optional[GeographicBoundingBox] = None
    vertical_extent: Optional[VerticalExtent] = None
    temporal_extent: Optional[TemporalExtent] = None

    def __post_init__(self):
        if all(
            part is None
            for part in (
                self.area_description,
                self.bounding_box,
                self.vertical_extent,
                self.temporal_extent,
            )
        ):
            raise SemanticError("An extent requires at least one of AREA, BBOX, VERTICALEXTENT or TIMEEXTENT")

    def has_area_description(self) -> bool:
        return self.area_description is not None

    def has_bounding_box(self) -> bool:
        return self.bounding_box is not None

    def has_vertical_extent(self) -> bool:
        return self.vertical_extent is not None

    def has_temporal_extent(self) -> bool:
        return self.temporal_extent is not None


@dataclass(frozen=True)
class Usage:
    """A scope (what an object is used for) with the extent it is valid in."""

    scope: str
    extent: Extent
