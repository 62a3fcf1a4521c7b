"""Escaping and unescaping of keys and values in .properties files.

The raw text of a key or value is what is stored on disk. The logical text
is what an application sees. Unescaping is lenient: malformed escapes are
passed through literally so that no input ever makes it fail.
"""

import re

# Characters that end a key and therefore need escaping inside one
KEY_TERMINATORS = "=: \t\f"

# Whitespace that is skipped before a key, around a separator and after
# a line continuation
WHITESPACE = " \t\f"

_UNESCAPES = {
    't': '\t',
    'n': '\n',
    'r': '\r',
    'f': '\f',
}

_ESCAPES = {
    '\\': '\\\\',
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
    '\f': '\\f',
}

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

# A \u that is not itself escaped and not followed by four hex digits
_MALFORMED_UNICODE = re.compile(r'(?<!\\)((?:\\\\)*)\\u(?![0-9a-fA-F]{4})')


def unescape(raw: str) -> str:
    """Convert raw escaped text into its logical value.

    Handles the single character escapes (\\t, \\n, \\r, \\f), \\uXXXX
    escapes (combining surrogate pairs) and line continuations. Any other
    escaped character stands for itself. A trailing lone backslash and an
    incomplete \\u escape are kept literally.

    Args:
        raw: Raw text as found in a .properties document.

    Returns:
        The logical (unescaped) text.
    """
    if '\\' not in raw:
        return raw

    result = []
    i = 0
    length = len(raw)

    while i < length:
        char = raw[i]
        if char != '\\':
            result.append(char)
            i += 1
            continue

        if i + 1 == length:
            result.append(char)
            break

        next_char = raw[i + 1]
        if next_char in '\r\n':
            i = _skip_continuation(raw, i + 1)
        elif next_char == 'u':
            code_point = _read_unicode(raw, i)
            if code_point is None:
                result.append('\\u')
                i += 2
            else:
                result.append(_combine_surrogates(result, code_point))
                i += 6
        else:
            result.append(_UNESCAPES.get(next_char, next_char))
            i += 2

    return ''.join(result)


def escape(text: str, is_key: bool = False) -> str:
    """Convert a logical value into raw text for a .properties document.

    Only structurally significant characters are escaped: backslashes, line
    breaks and leading whitespace. Keys additionally escape the separator
    characters and every whitespace character, and a leading comment
    character. Everything else, including non-ASCII characters, is left
    alone; encoding concerns are handled when writing.

    Args:
        text: Logical key or value.
        is_key: Whether the text is used as a key.

    Returns:
        The raw (escaped) text.
    """
    result = []
    leading = True

    for char in text:
        if leading and char in WHITESPACE:
            result.append('\\ ' if char == ' ' else _ESCAPES[char])
            continue
        leading = False

        if char in _ESCAPES and (is_key or char not in WHITESPACE):
            result.append(_ESCAPES[char])
        elif is_key and char in KEY_TERMINATORS:
            result.append('\\' + char)
        else:
            result.append(char)

    if is_key and result and result[0] in ('#', '!'):
        result[0] = '\\' + result[0]

    return ''.join(result)


def escape_key(key: str) -> str:
    """Escape a logical key."""
    return escape(key, is_key=True)


def escape_value(value: str) -> str:
    """Escape a logical value."""
    return escape(value)


def escape_unicode(text: str, encoding: str = "ascii") -> str:
    """Replace characters the encoding cannot represent with \\uXXXX escapes.

    Characters outside the Basic Multilingual Plane are written as a
    surrogate pair of escapes.
    """
    try:
        text.encode(encoding)
    except UnicodeEncodeError:
        return ''.join(_encodable(char, encoding) for char in text)
    return text


def _encodable(char: str, encoding: str) -> str:
    try:
        char.encode(encoding)
    except UnicodeEncodeError:
        return _unicode_escape(char)
    return char


def has_malformed_escape(raw: str) -> bool:
    """Check whether raw text contains a \\u escape without four hex digits."""
    return _MALFORMED_UNICODE.search(raw) is not None


def ends_with_continuation(content: str) -> bool:
    """Check whether a line (without terminator) ends in an unescaped backslash."""
    trailing = len(content) - len(content.rstrip('\\'))
    return trailing % 2 == 1


def _skip_continuation(raw: str, i: int) -> int:
    if raw.startswith('\r\n', i):
        i += 2
    else:
        i += 1
    while i < len(raw) and raw[i] in WHITESPACE:
        i += 1
    return i


def _read_unicode(raw: str, i: int):
    digits = raw[i + 2:i + 6]
    if len(digits) != 4 or not all(c in _HEX_DIGITS for c in digits):
        return None
    return int(digits, 16)


def _combine_surrogates(result: list, code_point: int) -> str:
    if 0xDC00 <= code_point <= 0xDFFF and result:
        previous = result[-1]
        if len(previous) == 1 and 0xD800 <= ord(previous) <= 0xDBFF:
            result.pop()
            high = ord(previous) - 0xD800
            return chr(0x10000 + (high << 10) + (code_point - 0xDC00))
    return chr(code_point)


def _unicode_escape(char: str) -> str:
    code_point = ord(char)
    if code_point > 0xFFFF:
        code_point -= 0x10000
        high = 0xD800 + (code_point >> 10)
        low = 0xDC00 + (code_point & 0x3FF)
        return f"\\u{high:04x}\\u{low:04x}"
    return f"\\u{code_point:04x}"
