"""Mutable response descriptor handed through the pipeline.

:class:`Headers` is an ordered, case-insensitive, multi-valued header list
(``Set-Cookie`` may legitimately appear several times). :class:`ResponseArtifact`
pairs it with the raw body bytes. One artifact belongs to exactly one
response and is discarded once the response is sent.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional


class Headers:
    """Ordered multi-valued header list with case-insensitive names.

    Original name casing is preserved for output; lookups ignore case.

    Example::

        headers = Headers([("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")])
        headers.get_all("set-cookie")   # ['a=1', 'b=2']
        headers.set("Cache-Control", "public")
    """

    def __init__(self, items: Optional[Iterable[tuple[str, str]]] = None) -> None:
        self._items: list[tuple[str, str]] = [(str(k), str(v)) for k, v in items or ()]

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return the first value for *name*, or *default* when absent."""
        key = name.lower()
        for k, v in self._items:
            if k.lower() == key:
                return v
        return default

    def get_all(self, name: str) -> list[str]:
        """Return every value for *name* in order."""
        key = name.lower()
        return [v for k, v in self._items if k.lower() == key]

    def add(self, name: str, value: str) -> None:
        """Append a value without touching existing ones."""
        self._items.append((name, value))

    def set(self, name: str, value: str) -> None:
        """Replace all values for *name* with a single *value*.

        The new value takes the position of the first existing occurrence,
        or goes to the end when the header was absent.
        """
        key = name.lower()
        result: list[tuple[str, str]] = []
        placed = False
        for k, v in self._items:
            if k.lower() != key:
                result.append((k, v))
            elif not placed:
                result.append((name, value))
                placed = True
        if not placed:
            result.append((name, value))
        self._items = result

    def remove(self, name: str) -> None:
        """Drop every occurrence of *name*. Missing headers are a no-op."""
        key = name.lower()
        self._items = [(k, v) for k, v in self._items if k.lower() != key]

    def items(self) -> list[tuple[str, str]]:
        """Return a copy of the ``(name, value)`` pairs in order."""
        return list(self._items)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return self.get(name) is not None

    def __iter__(self) -> Iterator[str]:
        return (k for k, _ in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Headers({self._items!r})"


class ResponseArtifact:
    """A response as seen by the pipeline: headers plus raw body bytes.

    Args:
        body: Response body. ``str`` values are encoded as UTF-8.
        headers: Initial headers as ``(name, value)`` pairs, a mapping, or
            an existing :class:`Headers` instance.
        content_type: Convenience shortcut that sets ``Content-Type``.
    """

    def __init__(
        self,
        body: bytes | str = b"",
        headers: Optional[Headers | Iterable[tuple[str, str]] | dict[str, str]] = None,
        content_type: Optional[str] = None,
    ) -> None:
        if isinstance(headers, Headers):
            self.headers = headers
        elif isinstance(headers, dict):
            self.headers = Headers(headers.items())
        else:
            self.headers = Headers(headers)
        if content_type is not None:
            self.headers.set("Content-Type", content_type)
        self.body = body.encode("utf-8") if isinstance(body, str) else body

    @property
    def content_type(self) -> str:
        """The ``Content-Type`` header value, or an empty string."""
        return self.headers.get("Content-Type", "") or ""

    def is_html(self) -> bool:
        """Whether the body is an HTML document the body rewriters may touch."""
        return "text/html" in self.content_type.lower()

    def text(self) -> str:
        """Decode the body so that :meth:`set_text` restores undecodable bytes."""
        return self.body.decode("utf-8", errors="surrogateescape")

    def set_text(self, text: str) -> None:
        """Replace the body with *text*, re-encoding it like :meth:`text` decoded it."""
        self.body = text.encode("utf-8", errors="surrogateescape")
