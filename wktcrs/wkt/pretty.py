from __future__ import annotations

from wktcrs.utils.constants import DEFAULT_INDENT, DEFAULT_NEWLINE, LEFT_DELIMITERS, RIGHT_DELIMITERS
from wktcrs.wkt.text_reader import TextReader

_LEFT = "".join(LEFT_DELIMITERS)
_RIGHT = "".join(RIGHT_DELIMITERS)


def pretty(wkt: str, newline: str = DEFAULT_NEWLINE, indent: str = DEFAULT_INDENT) -> str:
    """
    Reformat WKT so that every nested element starts on its own line.

    The text is only re-tokenized, never parsed, so any WKT (including text the
    reader would reject) can be reformatted. Whitespace outside quoted text is
    dropped; a pretty printed text therefore compacts back to the same text.

    Args:
        wkt: The WKT text, usually compact writer output
        newline: The line break inserted before each nested element
        indent: The indent unit repeated once per nesting level; "" disables indentation

    Returns:
        The reformatted text

    Examples:
        >>> print(pretty('VDATUM["NAVD88",ID["EPSG",5103]]', indent="  "))
        VDATUM["NAVD88",
          ID["EPSG",5103]]
    """
    parts = []
    depth = 0
    with TextReader(wkt) as reader:
        token = reader.read_token()
        while token is not None:
            if token.is_punctuation(_LEFT):
                depth += 1
            elif token.is_punctuation(_RIGHT):
                depth -= 1
            elif parts and not token.quoted:
                following = reader.peek_token()
                if following is not None and following.is_punctuation(_LEFT):
                    parts.append(newline + indent * max(depth, 0))
            parts.append(token.raw)
            token = reader.read_token()
    return "".join(parts)
