"""
Append-only event-count log (scan_history.csv).

Two quoting conventions are supported:
    - "literal": key and title are written as JSON string literals. This is the
      format existing history files use, so it is the default.
    - "csv": every field goes through the snapshot CSV escaping.
"""
import json
from pathlib import Path
from typing import Iterable

from core.csv_writer import escape_field
from core.models import ScanHistoryRow
from utils.logger import get_logger

logger = get_logger(__name__)

HISTORY_HEADER = "timestamp,key,title,region,count\n"

LITERAL = "literal"
CSV = "csv"


def _literal(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def format_history_line(row: ScanHistoryRow, quoting: str = LITERAL) -> str:
    if quoting == CSV:
        fields = [row.timestamp, row.key, row.title, row.region, row.count]
        return ",".join(escape_field(f) for f in fields) + "\n"
    if quoting != LITERAL:
        raise ValueError(f"Unknown history quoting: {quoting}")
    return f"{row.timestamp},{_literal(row.key)},{_literal(row.title)},{row.region},{row.count}\n"


def append_history(rows: Iterable[ScanHistoryRow], path: Path, quoting: str = LITERAL) -> int:
    """
    Append one line per row, writing the header only when the file is new.

    Args:
        rows: Scan results to append
        path: Target CSV file
        quoting: "literal" (default) or "csv"

    Returns:
        Number of rows appended
    """
    path = Path(path)
    lines = [format_history_line(row, quoting) for row in rows]

    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(HISTORY_HEADER)

    with open(path, "a", encoding="utf-8", newline="") as f:
        f.write("".join(lines))

    logger.info(f"Appended {len(lines)} rows to {path}")
    return len(lines)
