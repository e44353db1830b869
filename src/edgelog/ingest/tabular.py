"""Delimited-text splitting for broker exports.

Fields are comma separated.  A double quote toggles a "quoted" state
in which commas are literal; each field is trimmed, then one pair of
wrapping quotes is stripped.  Malformed quoting never raises: an
unbalanced quote simply keeps the rest of the line in one field.
"""

from __future__ import annotations

DELIMITER = ","
QUOTE = '"'


def _clean(field: str) -> str:
    field = field.strip()
    if len(field) >= 2 and field.startswith(QUOTE) and field.endswith(QUOTE):
        field = field[1:-1]
    return field


def parse_line(line: str) -> list[str]:
    """Split one line into trimmed, quote-stripped fields."""
    fields: list[str] = []
    start = 0
    in_quotes = False
    for i, ch in enumerate(line):
        if ch == QUOTE:
            in_quotes = not in_quotes
        elif ch == DELIMITER and not in_quotes:
            fields.append(_clean(line[start:i]))
            start = i + 1
    fields.append(_clean(line[start:]))
    return fields


def split_lines(text: str) -> list[str]:
    """Break raw file text into lines, ignoring surrounding blank space."""
    return text.strip().splitlines()


def parse_table(text: str) -> tuple[list[str], list[list[str]]]:
    """Parse *text* into ``(headers, rows)``.

    Returns ``([], [])`` for empty input.
    """
    lines = split_lines(text)
    if not lines:
        return [], []
    headers = parse_line(lines[0])
    rows = [parse_line(line) for line in lines[1:]]
    return headers, rows
