"""Immutable byte buffer with UTF-8 aware accessors."""

from __future__ import annotations

import re
from typing import Callable, Iterable, Iterator, List, Optional, Pattern, Sequence, Union

ContentLike = Union[str, bytes, "Content"]
Replacement = Union[str, "Content", Callable[[re.Match], str]]

_WHITESPACE = b" \t\n\r"
_NEW_LINE = 0x0A
_CARRIAGE_RETURN = 0x0D


def _to_bytes(value: ContentLike | bytearray | memoryview) -> bytes:
    if isinstance(value, Content):
        return value._data
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(
        f"Invalid content type; must be str, bytes or Content, got {type(value).__name__}"
    )


class Content:
    """Immutable sequence of bytes exposing a UTF-8 text view.

    Every transformation returns a new instance; the wrapped bytes are never
    mutated. Offsets are byte offsets. Out-of-range offsets are clamped and
    offsets that land inside a multi-byte codepoint are moved back to the
    start of that codepoint.
    """

    __slots__ = ("_data",)

    def __init__(self, value: ContentLike | bytearray | memoryview = b"") -> None:
        self._data = _to_bytes(value)

    @classmethod
    def empty(cls) -> "Content":
        return cls(b"")

    @classmethod
    def join(cls, parts: Iterable[ContentLike], separator: ContentLike = b"") -> "Content":
        """Concatenate ``parts`` with ``separator`` between them."""
        return cls(_to_bytes(separator).join(_to_bytes(part) for part in parts))

    # ------------------------------------------------------------------
    # Views

    @property
    def size(self) -> int:
        return len(self._data)

    @property
    def text(self) -> str:
        return self._data.decode("utf-8", errors="replace")

    def to_bytes(self) -> bytes:
        return self._data

    def is_empty(self) -> bool:
        return not self._data

    def is_multiline(self) -> bool:
        return _NEW_LINE in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __bytes__(self) -> bytes:
        return self._data

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Content({self.text!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (Content, str, bytes)):
            return self._data == _to_bytes(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._data)

    def __add__(self, other: ContentLike) -> "Content":
        return self.append(other)

    def equals(self, other: ContentLike) -> bool:
        return self._data == _to_bytes(other)

    # ------------------------------------------------------------------
    # Searching

    def search(self, value: ContentLike | int, offset: int = 0) -> int:
        """Return the byte index of the first occurrence at or after ``offset``."""
        start = self._clamp(offset)
        if isinstance(value, int):
            return self._data.find(bytes([value & 0xFF]), start)
        return self._data.find(_to_bytes(value), start)

    def search_last(self, value: ContentLike | int, end: Optional[int] = None) -> int:
        """Return the byte index of the last occurrence that ends before ``end``."""
        stop = self.size if end is None else self._clamp(end)
        if isinstance(value, int):
            return self._data.rfind(bytes([value & 0xFF]), 0, stop)
        return self._data.rfind(_to_bytes(value), 0, stop)

    def includes(self, value: ContentLike) -> bool:
        return self.search(value) != -1

    def includes_at(self, value: str | int, position: int) -> bool:
        """Return True when the byte at ``position`` equals ``value``.

        ``value`` is either a byte value or a string whose first encoded byte
        is compared.
        """
        if position < 0 or position >= self.size:
            return False
        if isinstance(value, int):
            return 0 <= value <= 0xFF and self._data[position] == value
        encoded = value.encode("utf-8")
        if not encoded:
            return False
        return self._data[position] == encoded[0]

    def starts_with(self, value: ContentLike, position: int = 0) -> bool:
        return self._data.startswith(_to_bytes(value), self._clamp(position))

    def ends_with(self, value: ContentLike) -> bool:
        return self._data.endswith(_to_bytes(value))

    def test(self, pattern: Pattern[str]) -> bool:
        if self.is_empty():
            return False
        return pattern.search(self.text) is not None

    def match(self, pattern: Pattern[str]) -> Optional[re.Match]:
        if self.is_empty():
            return None
        return pattern.search(self.text)

    def finditer(self, pattern: Pattern[str]) -> Iterator[re.Match]:
        return pattern.finditer(self.text)

    # ------------------------------------------------------------------
    # Transformations

    def append(self, *parts: ContentLike) -> "Content":
        if not parts:
            return self
        return Content(self._data + b"".join(_to_bytes(part) for part in parts))

    def slice(self, start: Optional[int] = None, end: Optional[int] = None) -> "Content":
        begin = self._boundary(0 if start is None else self._clamp(start))
        stop = self._boundary(self.size if end is None else self._clamp(end))
        if stop <= begin:
            return Content.empty()
        return Content(self._data[begin:stop])

    def replace(
        self,
        pattern: ContentLike | Pattern[str],
        replacement: Replacement,
        count: int = 0,
    ) -> "Content":
        """Replace occurrences of ``pattern``; all of them when ``count`` is 0.

        String replacements are inserted literally, even for regex patterns.
        """
        if self.is_empty():
            return self
        if isinstance(pattern, re.Pattern):
            if callable(replacement):
                repl = replacement
            else:
                literal = str(replacement)
                repl = lambda _match: literal  # noqa: E731
            return Content(pattern.sub(repl, self.text, count=count))
        if callable(replacement):
            raise TypeError("Callable replacements require a compiled pattern")
        old = _to_bytes(pattern)
        if not old:
            return self
        return Content(self._data.replace(old, _to_bytes(replacement), count or -1))

    def trim(self) -> "Content":
        return Content(self._data.strip(_WHITESPACE))

    def trim_start(self) -> "Content":
        return Content(self._data.lstrip(_WHITESPACE))

    def trim_end(self) -> "Content":
        return Content(self._data.rstrip(_WHITESPACE))

    def upper(self) -> "Content":
        return Content(self.text.upper())

    def pad_end(self, count: int, char: str = " ") -> "Content":
        if count <= 0:
            return self
        return self.append(char * count)

    def escape(self, chars: str | Sequence[str], escape_char: str = "\\") -> "Content":
        """Prefix every character of each occurrence of ``chars`` with ``escape_char``.

        A list applies each entry in order. Nothing outside the given
        sequences is touched.
        """
        if self.is_empty() or not chars:
            return self
        if not isinstance(chars, str):
            result = self
            for item in chars:
                result = result.escape(item, escape_char)
            return result
        escaped = "".join(escape_char + char for char in chars)
        return Content(self._data.replace(chars.encode("utf-8"), escaped.encode("utf-8")))

    def html_escape(self) -> "Content":
        if self.is_empty():
            return self
        data = self._data.replace(b"&", b"&amp;").replace(b"<", b"&lt;").replace(b">", b"&gt;")
        return Content(data)

    def split_lines(self) -> "LineView":
        """Lines without separators; ``\\n`` and ``\\r\\n`` both split."""
        return LineView(self._data)

    # ------------------------------------------------------------------
    # Internal helpers

    def _clamp(self, index: int) -> int:
        if index < 0:
            return max(self.size + index, 0)
        return min(index, self.size)

    def _boundary(self, index: int) -> int:
        # Continuation bytes look like 0b10xxxxxx.
        while 0 < index < self.size and (self._data[index] & 0xC0) == 0x80:
            index -= 1
        return index


class LineView:
    """Lazy, restartable iterable over the lines of a buffer."""

    __slots__ = ("_data",)

    def __init__(self, data: bytes) -> None:
        self._data = data

    def __iter__(self) -> Iterator[Content]:
        data = self._data
        size = len(data)
        start = 0
        while start < size:
            end = data.find(b"\n", start)
            if end == -1:
                line = data[start:]
                start = size
            else:
                line = data[start:end]
                start = end + 1
            if line and line[-1] == _CARRIAGE_RETURN:
                line = line[:-1]
            yield Content(line)

    def to_list(self) -> List[Content]:
        return list(self)


__all__ = ["Content", "ContentLike", "LineView"]
