"""Constants shared by the WKT reader, writer and pretty printer."""

import re

# delimiters; either left form may be closed by either right form
LEFT_DELIMITERS = ("[", "(")
RIGHT_DELIMITERS = ("]", ")")
SEPARATOR = ","

QUOTE = '"'
# typographic quotes are accepted on input, never written
OPEN_QUOTES = {'"': '"', "“": "”"}

TOKEN_CHARACTERS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789+-.:_"
)

NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
UNSIGNED_NUMBER_PATTERN = re.compile(r"^(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")
UNSIGNED_INTEGER_PATTERN = re.compile(r"^\d+$")

# "Easting (E)" or "(E)"
AXIS_NAME_ABBREVIATION_PATTERN = re.compile(r"^(?:(?P<name>.+) )?\((?P<abbreviation>[A-Za-z]+)\)$")

DEFAULT_INDENT = "    "
DEFAULT_NEWLINE = "\n"

# axes assumed by legacy CRS definitions that omit AXIS
DEFAULT_GEOGRAPHIC_AXES = (("Lon", "east"), ("Lat", "north"))
DEFAULT_PROJECTED_AXES = (("X", "east"), ("Y", "north"))
DEFAULT_GEOCENTRIC_AXES = (("X", "other"), ("Y", "east"), ("Z", "north"))
DEFAULT_VERTICAL_AXES = (("Gravity-related height", "up"),)

# legacy TOWGS84 handling
WGS84_NAME = "WGS 84"
TOWGS84_PARAMETER_CODES = (8605, 8606, 8607, 8608, 8609, 8610, 8611)
# (geographic, geocentric) method codes for 7 and 3 parameter blocks
TOWGS84_HELMERT_METHOD_CODES = (9606, 1033)
TOWGS84_TRANSLATION_METHOD_CODES = (9603, 1031)

# key used to keep a legacy VERT_DATUM/LOCAL_DATUM type number
DATUM_TYPE_EXTENSION = "DATUM_TYPE"
