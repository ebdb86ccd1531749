from __future__ import annotations

import logging
import re
from typing import List, NamedTuple, Optional, TextIO, Union

from wktcrs.utils.constants import (
    INTEGER_PATTERN,
    NUMBER_PATTERN,
    OPEN_QUOTES,
    QUOTE,
    TOKEN_CHARACTERS,
    UNSIGNED_INTEGER_PATTERN,
    UNSIGNED_NUMBER_PATTERN,
)
from wktcrs.utils.exceptions import LexicalError, UnexpectedEndOfInput

log = logging.getLogger(__name__)


class Token(NamedTuple):
    """
    A single lexical token of WKT text.

    Attributes:
        value: The token text with quotes removed and doubled quotes collapsed
        raw: The token exactly as it appears in the source
        quoted: True for a quoted string
        offset: The character offset of the first character of the token
    """

    value: str
    raw: str
    quoted: bool
    offset: int

    def is_punctuation(self, characters: str) -> bool:
        """True when this is an unquoted single character token found in characters."""
        return not self.quoted and len(self.value) == 1 and self.value in characters


class TextReader:
    """
    Splits WKT text into tokens with bounded lookahead.

    Three kinds of token are produced: runs of token characters (keywords,
    numbers, enumeration values, dates), quoted strings and single punctuation
    characters. Whitespace between tokens is skipped.

    The reader is a context manager; a file-like source handed to it is
    closed on exit.

    Args:
        source: The WKT text, or an open text stream to read it from

    Examples:
        >>> with TextReader('ID["EPSG",4326]') as reader:
        ...     [t.value for t in iter(reader.read_token, None)]
        ['ID', '[', 'EPSG', ',', '4326', ']']
    """

    def __init__(self, source: Union[str, TextIO]):
        if isinstance(source, str):
            self._stream: Optional[TextIO] = None
            self._text = source
        else:
            self._stream = source
            self._text = source.read()
        self._position = 0
        self._peeked: List[Token] = []

    def __enter__(self) -> TextReader:
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def close(self):
        if self._stream is None:
            return
        try:
            self._stream.close()
        except OSError as e:
            log.warning(f"failed to close WKT source: {e}")
        self._stream = None

    @property
    def text(self) -> str:
        return self._text

    @property
    def offset(self) -> int:
        """Offset of the next peeked token, else of the character after the last token read."""
        if self._peeked:
            return self._peeked[0].offset
        return self._position

    def read_token(self) -> Optional[Token]:
        """
        Read the next token.

        Returns:
            The next token, or None at the end of the text

        Raises:
            LexicalError: If a quoted string is not terminated
        """
        if self._peeked:
            return self._peeked.pop(0)
        return self._scan()

    def peek_token(self, n: int = 1) -> Optional[Token]:
        """
        Look at the n-th next token without consuming anything.

        Args:
            n: 1 for the next token, 2 for the one after it and so on

        Returns:
            The token, or None if the text ends before it
        """
        while len(self._peeked) < n:
            token = self._scan()
            if token is None:
                return None
            self._peeked.append(token)
        return self._peeked[n - 1]

    def read_expected_token(self, expected: Optional[str] = None) -> Token:
        """
        Read the next token, which must exist.

        Args:
            expected: A description of what the caller wants, used in the error

        Raises:
            UnexpectedEndOfInput: If the text is exhausted
        """
        token = self.read_token()
        if token is None:
            raise UnexpectedEndOfInput(
                "Unexpected end of input",
                offset=len(self._text),
                expected=[expected] if expected else None,
            )
        return token

    def read_number(self) -> float:
        return float(self._read_matching(NUMBER_PATTERN, "number").value)

    def read_unsigned_number(self) -> float:
        return float(self._read_matching(UNSIGNED_NUMBER_PATTERN, "unsigned number").value)

    def read_integer(self) -> int:
        return int(self._read_matching(INTEGER_PATTERN, "integer").value)

    def read_unsigned_integer(self) -> int:
        return int(self._read_matching(UNSIGNED_INTEGER_PATTERN, "unsigned integer").value)

    def _read_matching(self, pattern: re.Pattern, description: str) -> Token:
        token = self.read_expected_token(description)
        if token.quoted or not pattern.match(token.value):
            raise LexicalError(
                f"Invalid {description}",
                token=token.raw,
                offset=token.offset,
                expected=[description],
            )
        return token

    def _skip_whitespace(self):
        text = self._text
        while self._position < len(text) and text[self._position].isspace():
            self._position += 1

    def _scan(self) -> Optional[Token]:
        self._skip_whitespace()
        text = self._text
        start = self._position
        if start >= len(text):
            return None

        character = text[start]
        if character in OPEN_QUOTES:
            return self._scan_quoted(start, OPEN_QUOTES[character])

        end = start
        while end < len(text) and text[end] in TOKEN_CHARACTERS:
            end += 1
        if end == start:
            # punctuation
            end = start + 1
        self._position = end
        value = text[start:end]
        return Token(value=value, raw=value, quoted=False, offset=start)

    def _scan_quoted(self, start: int, closing: str) -> Token:
        text = self._text
        value = []
        index = start + 1
        while index < len(text):
            character = text[index]
            if character == closing:
                if closing == QUOTE and text.startswith(QUOTE, index + 1):
                    value.append(QUOTE)
                    index += 2
                    continue
                self._position = index + 1
                return Token(
                    value="".join(value),
                    raw=text[start : index + 1],
                    quoted=True,
                    offset=start,
                )
            value.append(character)
            index += 1

        raise LexicalError(
            "Unterminated quoted text",
            token=text[start : start + 32],
            offset=start,
            expected=[closing],
        )
