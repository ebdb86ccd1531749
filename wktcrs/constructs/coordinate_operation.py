from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple, Union

from wktcrs.constructs.base import ObjectUsage, freeze
from wktcrs.constructs.crs import CRS, CRS_TYPES, BoundCRS, CRSKind
from wktcrs.constructs.extent import Usage
from wktcrs.constructs.identifier import Identifier
from wktcrs.constructs.operation import MapProjection, OperationMethod, Parameter, Parameterized
from wktcrs.utils.exceptions import SemanticError


def _check_crs(role: str, crs: CRS):
    if not isinstance(crs, CRS_TYPES) or isinstance(crs, BoundCRS):
        raise SemanticError(f"The {role} CRS of an operation cannot be a {type(crs).__name__}")


@dataclass(frozen=True)
class CoordinateOperation(ObjectUsage, Parameterized):
    """
    A transformation between two CRSs, written as COORDINATEOPERATION[...].

    Attributes:
        name: The operation name
        source: The CRS coordinates are transformed from
        target: The CRS coordinates are transformed to
        method: The transformation method
        parameters: The method parameters in the order they were given
        version: Optional version of the operation
        interpolation: Optional CRS used to interpolate grid files
        accuracy: Optional accuracy of the operation in metres
    """

    kind: ClassVar[CRSKind] = CRSKind.COORDINATE_OPERATION

    name: str
    source: CRS
    target: CRS
    method: OperationMethod
    parameters: Optional[Tuple[Parameter, ...]] = None
    version: Optional[str] = None
    interpolation: Optional[CRS] = None
    accuracy: Optional[float] = None
    usages: Optional[Tuple[Usage, ...]] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None
    remark: Optional[str] = None
    extensions: Optional[Tuple[Tuple[str, str], ...]] = None

    def __post_init__(self):
        freeze(self, "parameters", "usages", "identifiers", "extensions")
        _check_crs("source", self.source)
        _check_crs("target", self.target)
        if self.interpolation is not None:
            _check_crs("interpolation", self.interpolation)
        if self.accuracy is not None and self.accuracy < 0:
            raise SemanticError("Operation accuracy must not be negative")

    def has_version(self) -> bool:
        return self.version is not None

    def has_interpolation(self) -> bool:
        return self.interpolation is not None

    def has_accuracy(self) -> bool:
        return self.accuracy is not None


@dataclass(frozen=True)
class PointMotionOperation(ObjectUsage, Parameterized):
    """A change of coordinates over time within one CRS, written as POINTMOTIONOPERATION[...]."""

    kind: ClassVar[CRSKind] = CRSKind.POINT_MOTION_OPERATION

    name: str
    source: CRS
    method: OperationMethod
    parameters: Optional[Tuple[Parameter, ...]] = None
    version: Optional[str] = None
    accuracy: Optional[float] = None
    usages: Optional[Tuple[Usage, ...]] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None
    remark: Optional[str] = None
    extensions: Optional[Tuple[Tuple[str, str], ...]] = None

    def __post_init__(self):
        freeze(self, "parameters", "usages", "identifiers", "extensions")
        _check_crs("source", self.source)
        if self.accuracy is not None and self.accuracy < 0:
            raise SemanticError("Operation accuracy must not be negative")

    def has_version(self) -> bool:
        return self.version is not None

    def has_accuracy(self) -> bool:
        return self.accuracy is not None


Step = Union[CoordinateOperation, PointMotionOperation, MapProjection]


@dataclass(frozen=True)
class ConcatenatedOperation(ObjectUsage):
    """
    A chain of operations applied one after the other, written as CONCATENATEDOPERATION[...].

    Each step is a coordinate operation, a point motion operation or a conversion.
    """

    kind: ClassVar[CRSKind] = CRSKind.CONCATENATED_OPERATION

    name: str
    source: CRS
    target: CRS
    steps: Tuple[Step, ...]
    version: Optional[str] = None
    accuracy: Optional[float] = None
    usages: Optional[Tuple[Usage, ...]] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None
    remark: Optional[str] = None
    extensions: Optional[Tuple[Tuple[str, str], ...]] = None

    def __post_init__(self):
        freeze(self, "steps", "usages", "identifiers", "extensions")
        _check_crs("source", self.source)
        _check_crs("target", self.target)
        if len(self.steps) < 2:
            raise SemanticError(
                f"A concatenated operation requires at least 2 steps, got {len(self.steps)}"
            )
        for step in self.steps:
            if not isinstance(step, (CoordinateOperation, PointMotionOperation, MapProjection)):
                raise SemanticError(f"A concatenated operation cannot have a {type(step).__name__} step")
        if self.accuracy is not None and self.accuracy < 0:
            raise SemanticError("Operation accuracy must not be negative")

    def has_version(self) -> bool:
        return self.version is not None

    def has_accuracy(self) -> bool:
        return self.accuracy is not None


Operation = Union[CoordinateOperation, PointMotionOperation, ConcatenatedOperation]
OPERATION_TYPES = (CoordinateOperation, PointMotionOperation, ConcatenatedOperation)


@dataclass(frozen=True)
class CoordinateMetadata:
    """
    A CRS together with the epoch its coordinates refer to, written as COORDINATEMETADATA[...].

    Attributes:
        crs: The coordinate reference system
        epoch: The coordinate epoch as a decimal year, required for dynamic CRSs
    """

    crs: CRS
    epoch: Optional[float] = None

    def __post_init__(self):
        if not isinstance(self.crs, CRS_TYPES):
            raise SemanticError(f"Coordinate metadata cannot describe a {type(self.crs).__name__}")

    def has_epoch(self) -> bool:
        return self.epoch is not None

    @property
    def name(self) -> str:
        return self.crs.name
