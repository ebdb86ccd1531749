from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from wktcrs.constructs.base import Identifiable, ObjectUsage, freeze
from wktcrs.constructs.extent import Usage
from wktcrs.constructs.identifier import Identifier
from wktcrs.constructs.unit import Unit
from wktcrs.utils import epsg
from wktcrs.utils.epsg import WellKnownMethod, WellKnownParameter


def _epsg_code(item: Identifiable) -> Optional[int]:
    ident = item.identifier("EPSG")
    return ident.code if ident is not None else None


@dataclass(frozen=True)
class OperationMethod(Identifiable):
    """
    The algorithm of a conversion or transformation, written as METHOD[...] (PROJECTION[...] in WKT1).

    Examples:
        >>> OperationMethod("Transverse_Mercator").well_known.code
        9807
    """

    name: str
    identifiers: Optional[Tuple[Identifier, ...]] = None

    def __post_init__(self):
        freeze(self, "identifiers")

    @property
    def well_known(self) -> Optional[WellKnownMethod]:
        """The EPSG table entry, found by EPSG identifier first and by name otherwise."""
        code = _epsg_code(self)
        if code is not None and code in epsg.METHODS_BY_CODE:
            return epsg.METHODS_BY_CODE[code]
        return epsg.get_method(self.name)


@dataclass(frozen=True)
class OperationParameter(Identifiable):
    name: str
    value: float
    unit: Optional[Unit] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None

    def __post_init__(self):
        freeze(self, "identifiers")

    def has_unit(self) -> bool:
        return self.unit is not None

    @property
    def well_known(self) -> Optional[WellKnownParameter]:
        code = _epsg_code(self)
        if code is not None and code in epsg.PARAMETERS_BY_CODE:
            return epsg.PARAMETERS_BY_CODE[code]
        return epsg.get_parameter(self.name)


@dataclass(frozen=True)
class ParameterFile(Identifiable):
    """A parameter whose value is a file, such as a grid of datum shifts."""

    name: str
    file_name: str
    identifiers: Optional[Tuple[Identifier, ...]] = None

    def __post_init__(self):
        freeze(self, "identifiers")

    @property
    def well_known(self) -> Optional[WellKnownParameter]:
        code = _epsg_code(self)
        if code is not None and code in epsg.PARAMETERS_BY_CODE:
            return epsg.PARAMETERS_BY_CODE[code]
        return epsg.get_parameter(self.name)


Parameter = Union[OperationParameter, ParameterFile]


class Parameterized:
    """Adds parameter lookups to model classes with `method` and `parameters` fields."""

    method: OperationMethod
    parameters: Optional[Tuple[Parameter, ...]]

    def has_parameters(self) -> bool:
        return self.parameters is not None

    def parameter(self, name_or_code: Union[str, int]) -> Optional[Parameter]:
        """
        Find a parameter by EPSG code, by name, or by an alias of its well-known entry.

        Args:
            name_or_code: An EPSG parameter code or a name in any letter case

        Returns:
            The first matching parameter, or None
        """
        parameters = self.parameters or ()
        if isinstance(name_or_code, int):
            for parameter in parameters:
                if _epsg_code(parameter) == name_or_code:
                    return parameter
            wanted = epsg.get_parameter(name_or_code)
        else:
            for parameter in parameters:
                if parameter.name.lower() == name_or_code.lower():
                    return parameter
            wanted = epsg.get_parameter(name_or_code, self.method.well_known)
        if wanted is None:
            return None
        for parameter in parameters:
            if self.well_known_parameter(parameter) == wanted:
                return parameter
        return None

    def well_known_parameter(self, parameter: Parameter) -> Optional[WellKnownParameter]:
        """The EPSG entry of one of the parameters, resolved among the parameters of the method."""
        code = _epsg_code(parameter)
        if code is not None and code in epsg.PARAMETERS_BY_CODE:
            return epsg.PARAMETERS_BY_CODE[code]
        method = self.method.well_known
        if method is None:
            return epsg.get_parameter(parameter.name)
        return epsg.get_parameter(parameter.name, method)


@dataclass(frozen=True)
class MapProjection(Identifiable, Parameterized):
    """
    The conversion from a geographic base CRS to a projected CRS, written as CONVERSION[...].

    Attributes:
        name: The conversion name, e.g. "UTM zone 10N"
        method: The projection method
        parameters: The parameters in the order they were given
        identifiers: Optional identifiers of the conversion
    """

    name: str
    method: OperationMethod
    parameters: Optional[Tuple[Parameter, ...]] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None

    def __post_init__(self):
        freeze(self, "parameters", "identifiers")


@dataclass(frozen=True)
class DerivingConversion(Identifiable, Parameterized):
    """The conversion from the base CRS of a derived CRS, written as DERIVINGCONVERSION[...]."""

    name: str
    method: OperationMethod
    parameters: Optional[Tuple[Parameter, ...]] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None

    def __post_init__(self):
        freeze(self, "parameters", "identifiers")


@dataclass(frozen=True)
class AbridgedTransformation(ObjectUsage, Parameterized):
    """
    The transformation of a bound CRS, written as ABRIDGEDTRANSFORMATION[...].

    Legacy TOWGS84 blocks are read into one of these.
    """

    name: str
    method: OperationMethod
    parameters: Optional[Tuple[Parameter, ...]] = None
    version: Optional[str] = None
    usages: Optional[Tuple[Usage, ...]] = None
    identifiers: Optional[Tuple[Identifier, ...]] = None
    remark: Optional[str] = None
    extensions: Optional[Tuple[Tuple[str, str], ...]] = None

    def __post_init__(self):
        freeze(self, "parameters", "usages", "identifiers", "extensions")

    def has_version(self) -> bool:
        return self.version is not None
