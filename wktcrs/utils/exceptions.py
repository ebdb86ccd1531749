"""Errors raised while reading, building or writing WKT CRS objects.

Every error carries enough context to point a user at the problem in the
source text: the offending token, its character offset, the alternatives the
reader would have accepted and the innermost production (keyword) that was
open when the error happened. Context that is not known where the error is
raised gets attached on the way out of the reader.
"""

from __future__ import annotations

from typing import Iterable, Optional


class WKTError(Exception):
    """
    Base class for every error raised by wktcrs.

    Attributes:
        message: A human readable description of the problem
        token: The offending token text, if any
        offset: The character offset of the offending token in the source text
        expected: The alternatives that would have been accepted
        production: The innermost open production keyword, e.g. "ELLIPSOID"
    """

    def __init__(
        self,
        message: str,
        token: Optional[str] = None,
        offset: Optional[int] = None,
        expected: Optional[Iterable[str]] = None,
        production: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.token = token
        self.offset = offset
        self.expected = tuple(expected) if expected else ()
        self.production = production

    def attach_context(
        self, production: Optional[str] = None, offset: Optional[int] = None
    ) -> WKTError:
        """
        Fill in the production and offset if they are not already known.

        The innermost production wins, so callers can attach context while
        unwinding nested productions without overwriting it.

        Args:
            production: The keyword of the production being read
            offset: The reader offset at the time of the failure

        Returns:
            This error, for re-raising
        """
        if self.production is None:
            self.production = production
        if self.offset is None:
            self.offset = offset
        return self

    def __str__(self):
        details = []
        if self.production is not None:
            details.append(f"in {self.production}")
        if self.token is not None:
            details.append(f"at token {self.token!r}")
        if self.offset is not None:
            details.append(f"offset {self.offset}")
        if self.expected:
            details.append("expected one of: " + ", ".join(self.expected))
        if not details:
            return self.message
        return f"{self.message} ({'; '.join(details)})"


class LexicalError(WKTError):
    """An unterminated quoted string or a malformed numeric token."""


class WKTSyntaxError(WKTError):
    """The token stream does not follow the WKT grammar."""


class UnexpectedEndOfInput(WKTSyntaxError):
    """The text ended while a production was still open."""


class UnexpectedKeyword(WKTSyntaxError):
    """A known keyword (or a non keyword) showed up where it is not allowed."""


class InvalidDelimiter(WKTSyntaxError):
    """A left or right delimiter was required but something else was found."""


class MissingSeparator(WKTSyntaxError):
    """Two children were not separated by a comma."""


class UnknownKeyword(WKTSyntaxError):
    """The token is not a spelling of any WKT keyword."""


class SemanticError(WKTError):
    """
    The text is well formed but describes an invalid object.

    Raised by the model constructors when an invariant does not hold, and by
    the reader for context dependent problems such as an ambiguous bare UNIT.
    """


class WriterError(WKTError):
    """The writer was handed an object it does not know how to serialize."""
