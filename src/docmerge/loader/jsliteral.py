"""Decode the JavaScript object literals embedded in generated fragment files.

The generator writes data as JS rather than JSON: object keys may be bare
identifiers, strings may use single quotes, and arrays may carry a trailing
comma. :func:`js_literal_to_json` rewrites those constructs, leaving string
contents untouched, so the standard :mod:`json` decoder can take over.
"""

from __future__ import annotations

import json
import re
from typing import Any

from docmerge.core.exceptions import FragmentFormatError


_IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?")
_KEYWORDS = {"true": "true", "false": "false", "null": "null", "undefined": "null"}
_OPENERS = {"[": "]", "{": "}"}


_SIMPLE_ESCAPES = {"'": "'", "v": "\\u000b", "0": "\\u0000"}
_LINE_BREAKS = ("\r\n", "\n", "\r", "\u2028", "\u2029")


def _read_string(text: str, start: int) -> tuple[str, int]:
    """Return the JSON form of the string literal at ``start`` and its end index."""
    quote = text[start]
    out = ['"']
    index = start + 1
    length = len(text)
    while index < length:
        char = text[index]
        if char == "\\":
            if index + 1 >= length:
                break
            escaped = text[index + 1]
            continuation = next(
                (brk for brk in _LINE_BREAKS if text.startswith(brk, index + 1)), None
            )
            if continuation is not None:
                index += 1 + len(continuation)
                continue
            if escaped in _SIMPLE_ESCAPES:
                out.append(_SIMPLE_ESCAPES[escaped])
            elif escaped == "x" and index + 3 < length:
                out.append(f"\\u00{text[index + 2:index + 4]}")
                index += 2
            else:
                out.append("\\" + escaped)
            index += 2
            continue
        if char == quote:
            out.append('"')
            return "".join(out), index + 1
        if char == '"':
            out.append('\\"')
        elif char < " ":
            out.append(f"\\u{ord(char):04x}")
        else:
            out.append(char)
        index += 1
    raise FragmentFormatError(f"Unterminated string literal starting at offset {start}.")


def _previous_significant(out: list[str]) -> str:
    for chunk in reversed(out):
        stripped = chunk.rstrip()
        if stripped:
            return stripped[-1]
    return ""


def _next_significant(text: str, index: int) -> tuple[str, int]:
    length = len(text)
    while index < length and text[index].isspace():
        index += 1
    return (text[index], index) if index < length else ("", index)


def js_literal_to_json(text: str) -> str:
    """Rewrite a JS object/array literal into equivalent JSON text."""
    out: list[str] = []
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char in "\"'":
            literal, index = _read_string(text, index)
            out.append(literal)
            continue
        if char == ",":
            following, _ = _next_significant(text, index + 1)
            if following in ("]", "}"):
                index += 1
                continue
            out.append(char)
            index += 1
            continue
        number = _NUMBER.match(text, index)
        if number:
            out.append(number.group(0))
            index = number.end()
            continue
        match = _IDENTIFIER.match(text, index)
        if match:
            word = match.group(0)
            end = match.end()
            following, _ = _next_significant(text, end)
            if following == ":" and _previous_significant(out) in ("{", ","):
                out.append(json.dumps(word))
            elif word in _KEYWORDS:
                out.append(_KEYWORDS[word])
            else:
                raise FragmentFormatError(f"Unexpected identifier '{word}' at offset {index}.")
            index = end
            continue
        out.append(char)
        index += 1
    return "".join(out)


def find_literal_end(text: str, start: int) -> int:
    """Return the index just past the bracketed literal opening at ``start``."""
    if start >= len(text) or text[start] not in _OPENERS:
        raise FragmentFormatError(f"Expected '[' or '{{' at offset {start}.")
    stack: list[str] = []
    index = start
    length = len(text)
    while index < length:
        char = text[index]
        if char in "\"'":
            _, index = _read_string(text, index)
            continue
        if char in _OPENERS:
            stack.append(_OPENERS[char])
        elif char in ("]", "}"):
            if not stack or stack.pop() != char:
                raise FragmentFormatError(f"Unbalanced '{char}' at offset {index}.")
            if not stack:
                return index + 1
        index += 1
    raise FragmentFormatError(f"Literal starting at offset {start} is never closed.")


def parse_js_literal(text: str) -> Any:
    """Decode a single JS literal into Python data."""
    try:
        return json.loads(js_literal_to_json(text.strip()))
    except json.JSONDecodeError as exc:
        raise FragmentFormatError(f"Invalid literal: {exc.msg} (offset {exc.pos}).") from exc


def extract_literal(text: str, start: int) -> tuple[Any, int]:
    """Decode the literal beginning at or after ``start``; return it and its end."""
    length = len(text)
    index = start
    while index < length and text[index] not in _OPENERS:
        if not text[index].isspace():
            raise FragmentFormatError(
                f"Expected a literal at offset {index}, found '{text[index]}'."
            )
        index += 1
    end = find_literal_end(text, index)
    return parse_js_literal(text[index:end]), end


__all__ = ["extract_literal", "find_literal_end", "js_literal_to_json", "parse_js_literal"]
