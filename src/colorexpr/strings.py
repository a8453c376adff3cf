"""Escape-sequence decoding for string literals."""

from __future__ import annotations

import regex

_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    '"': '"',
    "'": "'",
    "`": "`",
    "\\": "\\",
}

_ESCAPE = regex.compile(r"\\(u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|[nrt'\"`\\])")


def unescape_string(content: str) -> str:
    """Resolve backslash escapes in the body of a string literal.

    Recognised: \\n \\r \\t \\" \\' \\` \\\\ plus \\uXXXX and \\xXX. Any
    other backslash sequence, including a malformed \\u or \\x, is kept
    as written.
    """
    if "\\" not in content:
        return content
    return _ESCAPE.sub(_resolve, content)


def _resolve(match: regex.Match) -> str:
    seq = match.group(1)
    if len(seq) > 1:
        return chr(int(seq[1:], 16))
    return _SIMPLE_ESCAPES[seq]
