"""
CSV rendering for snapshot output.

Quoting follows RFC 4180: a field containing a comma, a double quote or a
newline is wrapped in double quotes and its inner quotes are doubled. Lines
are joined with "\\n" and there is no trailing newline, so the same rows
always produce the same bytes.
"""
import math
import re
from typing import List, Mapping, Sequence

_NEEDS_QUOTING = re.compile(r'[",\n]')


def format_value(value) -> str:
    """Render one value the way it appeared in the upstream JSON."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if not math.isfinite(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def escape_field(value) -> str:
    text = format_value(value)
    if _NEEDS_QUOTING.search(text):
        return '"' + text.replace('"', '""') + '"'
    return text


def to_csv(rows: Sequence[Mapping]) -> str:
    """
    Render uniform records as CSV text.

    The header is taken from the first record's keys; every row is written in
    that column order. An empty sequence yields an empty string.
    """
    if not rows:
        return ""
    headers: List[str] = list(rows[0].keys())
    lines = [",".join(escape_field(h) for h in headers)]
    for row in rows:
        lines.append(",".join(escape_field(row.get(h)) for h in headers))
    return "\n".join(lines)
