"""Lexical helpers for structured-query text.

These helpers never build a syntax tree. They only track brace and
parenthesis depth (skipping string literals and comments) so that the
validator and corrector can tell a root-level field such as
``articles(limit: 5) { ... }`` apart from a nested selection such as
``category { name }``.
"""

from __future__ import annotations

from dataclasses import dataclass

_NAME_START = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz_")
_NAME_CHARS = _NAME_START | frozenset("0123456789")


@dataclass(frozen=True)
class RootField:
    """A field selected directly in an operation's top-level selection set.

    Attributes:
        name: Field name (the alias, if any, is stripped).
        name_end: Index just past the field name.
        arguments: Text between the argument parentheses, or ``None`` when
            the field is selected without an argument list.
        selection_start: Index of the ``{`` opening the field's selection set.
        selection_end: Index of the matching ``}``.
        selection: Text between those braces, or ``None`` without a selection set.
    """

    name: str
    name_end: int
    arguments: str | None = None
    selection_start: int | None = None
    selection_end: int | None = None
    selection: str | None = None


def _skip_string(text: str, index: int) -> int:
    """Return the index just past the string literal starting at ``index``."""
    if text.startswith('"""', index):
        end = text.find('"""', index + 3)
        return len(text) if end == -1 else end + 3
    i = index + 1
    while i < len(text):
        char = text[i]
        if char == "\\":
            i += 2
            continue
        if char == '"' or char == "\n":
            return i + 1
        i += 1
    return i


def _skip_comment(text: str, index: int) -> int:
    end = text.find("\n", index)
    return len(text) if end == -1 else end + 1


def _skip_whitespace(text: str, index: int) -> int:
    while index < len(text) and (text[index].isspace() or text[index] == ","):
        index += 1
    return index


def _read_name(text: str, index: int) -> int:
    while index < len(text) and text[index] in _NAME_CHARS:
        index += 1
    return index


def find_closing(text: str, index: int) -> int:
    """Find the bracket matching the opener at ``index``.

    Args:
        text: Query text.
        index: Position of a ``{`` or ``(``.

    Returns:
        Position of the matching closer, or ``len(text)`` if unbalanced.
    """
    opener = text[index]
    closer = "}" if opener == "{" else ")"
    depth = 0
    i = index
    while i < len(text):
        char = text[i]
        if char == '"':
            i = _skip_string(text, i)
            continue
        if char == "#":
            i = _skip_comment(text, i)
            continue
        if char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return len(text)


def find_root_fields(text: str) -> list[RootField]:
    """List the root-level fields of every operation in a query document.

    Fragment definitions are skipped whole; their fields are not root
    operations.

    Args:
        text: GraphQL document text.

    Returns:
        Root fields in document order.
    """
    fields: list[RootField] = []
    depth = 0
    i = 0
    while i < len(text):
        char = text[i]
        if char == '"':
            i = _skip_string(text, i)
            continue
        if char == "#":
            i = _skip_comment(text, i)
            continue
        if char == "(":
            # Variable definitions of the operation itself
            i = find_closing(text, i) + 1
            continue
        if char == "{":
            depth += 1
            i += 1
            continue
        if char == "}":
            depth -= 1
            i += 1
            continue
        if depth == 0 and char in _NAME_START:
            name_end = _read_name(text, i)
            if text[i:name_end] == "fragment":
                i = _skip_definition(text, name_end)
            else:
                i = name_end
            continue
        if depth == 1 and char in _NAME_START:
            field, i = _read_root_field(text, i)
            fields.append(field)
            continue
        i += 1
    return fields


def _skip_definition(text: str, index: int) -> int:
    """Return the index just past the next top-level selection set."""
    i = index
    while i < len(text):
        char = text[i]
        if char == '"':
            i = _skip_string(text, i)
            continue
        if char == "#":
            i = _skip_comment(text, i)
            continue
        if char == "(":
            i = find_closing(text, i) + 1
            continue
        if char == "{":
            return find_closing(text, i) + 1
        i += 1
    return len(text)


def strip_strings(text: str) -> str:
    """Replace every string literal in ``text`` with an empty ``""``."""
    parts: list[str] = []
    start = i = 0
    while i < len(text):
        if text[i] == '"':
            parts.append(text[start:i])
            parts.append('""')
            i = _skip_string(text, i)
            start = i
            continue
        i += 1
    parts.append(text[start:])
    return "".join(parts)


def _read_root_field(text: str, start: int) -> tuple[RootField, int]:
    name_end = _read_name(text, start)
    name = text[start:name_end]

    cursor = _skip_whitespace(text, name_end)
    if cursor < len(text) and text[cursor] == ":":
        alias_target = _skip_whitespace(text, cursor + 1)
        name_end = _read_name(text, alias_target)
        name = text[alias_target:name_end]
        cursor = _skip_whitespace(text, name_end)

    arguments = None
    if cursor < len(text) and text[cursor] == "(":
        close = find_closing(text, cursor)
        arguments = text[cursor + 1 : close]
        cursor = _skip_whitespace(text, close + 1)

    selection_start = selection_end = selection = None
    if cursor < len(text) and text[cursor] == "{":
        selection_start = cursor
        selection_end = find_closing(text, cursor)
        selection = text[cursor + 1 : selection_end]
        cursor = selection_end + 1

    field = RootField(
        name=name,
        name_end=name_end,
        arguments=arguments,
        selection_start=selection_start,
        selection_end=selection_end,
        selection=selection,
    )
    return field, max(cursor, name_end)
