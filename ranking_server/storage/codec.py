"""Line-based key/value codec for ranking files.

Format:
  # optional comment lines
  alice=50
  bob=30

Keys and values are separated by the first unescaped `=` or `:`. Backslash
escapes `\\`, `\\=`, `\\:`, `\\#`, `\\!`, `\\ `, `\\n`, `\\r` and `\\t`.
Other whitespace in keys, and at either end of values, is written as a
backslash followed by the raw character. Records end at `\\n` only; a trailing
`\\r` is dropped, so CRLF files read the same.
Blank lines and lines starting with `#` or `!` are ignored.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

SEPARATORS = "=:"
COMMENT_CHARS = "#!"

_ESCAPES = {"\\": "\\\\", "\n": "\\n", "\r": "\\r", "\t": "\\t"}
_UNESCAPES = {"n": "\n", "r": "\r", "t": "\t"}


class CodecError(ValueError):
    pass


def _escape(text: str, *, key: bool) -> str:
    out = []
    last = len(text) - 1
    for i, ch in enumerate(text):
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ch in SEPARATORS:
            out.append("\\" + ch)
        elif ch.isspace() and (key or i == 0 or i == last):
            out.append("\\" + ch)
        elif ch in COMMENT_CHARS and key and i == 0:
            out.append("\\" + ch)
        else:
            out.append(ch)
    return "".join(out)


def _join(chars: list[tuple[str, bool]]) -> str:
    # Unescaped whitespace around keys and values is insignificant.
    start, end = 0, len(chars)
    while start < end and not chars[start][1] and chars[start][0].isspace():
        start += 1
    while end > start and not chars[end - 1][1] and chars[end - 1][0].isspace():
        end -= 1
    return "".join(ch for ch, _ in chars[start:end])


def _split_line(line: str, lineno: int) -> tuple[str, str]:
    key: list[tuple[str, bool]] = []
    value: list[tuple[str, bool]] = []
    cur = key
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            if i + 1 >= len(line):
                raise CodecError(f"line {lineno}: dangling escape")
            nxt = line[i + 1]
            cur.append((_UNESCAPES.get(nxt, nxt), True))
            i += 2
            continue
        if cur is key and ch in SEPARATORS:
            cur = value
        else:
            cur.append((ch, False))
        i += 1
    return _join(key), _join(value)


def encode(items: Mapping[str, Any] | Iterable[tuple[str, Any]], header: str | None = None) -> str:
    pairs = items.items() if isinstance(items, Mapping) else items
    lines = []
    if header:
        for h in header.splitlines():
            lines.append("#" + h)
    for k, v in pairs:
        lines.append(f"{_escape(str(k), key=True)}={_escape(str(v), key=False)}")
    return "".join(line + "\n" for line in lines)


def decode(text: str) -> dict[str, str]:
    out: dict[str, str] = {}
    for lineno, raw in enumerate(text.split("\n"), start=1):
        if raw.endswith("\r"):
            raw = raw[:-1]
        line = raw.lstrip()
        if not line or line[0] in COMMENT_CHARS:
            continue
        k, v = _split_line(line, lineno)
        out[k] = v
    return out
