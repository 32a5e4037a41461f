import json
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from core.csv_writer import to_csv
from utils.clock import iso_timestamp
from utils.logger import get_logger

logger = get_logger(__name__)

LATEST_CSV = "odds_latest.csv"
LATEST_JSON = "odds_latest.json"


def archive_stamp(fetched_at: datetime) -> str:
    """
    Fixed-width UTC stamp for archive names: YYYYMMDDTHHMM.

    Plain string order of stamps is chronological order.
    """
    if fetched_at.tzinfo is None:
        fetched_at = fetched_at.replace(tzinfo=timezone.utc)
    return fetched_at.astimezone(timezone.utc).strftime("%Y%m%dT%H%M")


def _write_text(path: Path, text: str):
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


def _write_json(path: Path, document: dict):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document, f, indent=2, ensure_ascii=False, allow_nan=False)


def write_latest(rows: List[dict], fetched_at: datetime, region: str, out_dir: Path) -> str:
    """
    Overwrite odds_latest.csv and odds_latest.json in out_dir.

    Returns:
        The CSV text that was written, for reuse by the archive copy
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    csv_text = to_csv(rows)
    _write_text(out_dir / LATEST_CSV, csv_text)
    _write_json(out_dir / LATEST_JSON, {
        "fetchedAt": iso_timestamp(fetched_at),
        "region": region,
        "count": len(rows),
        "rows": rows,
    })
    logger.info(f"Wrote {len(rows)} rows to {out_dir / LATEST_CSV} (region={region})")
    return csv_text


def write_archive(csv_text: str, fetched_at: datetime, out_dir: Path) -> Path:
    """
    Write a timestamped archive copy. Existing archives are never rewritten:
    a name collision gets a zero-padded _002, _003, ... suffix.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    stamp = archive_stamp(fetched_at)
    candidate = out_dir / f"odds_{stamp}.csv"
    suffix = 1
    while True:
        try:
            with open(candidate, "x", encoding="utf-8", newline="") as f:
                f.write(csv_text)
            break
        except FileExistsError:
            suffix += 1
            candidate = out_dir / f"odds_{stamp}_{suffix:03d}.csv"

    logger.info(f"Archived snapshot to {candidate}")
    return candidate


def write_competition_snapshot(competition_key: str, region: str, include: Optional[str],
                               fetched_at: datetime, events: List[dict], out_dir: Path,
                               csv_rows: Optional[List[dict]] = None) -> List[Path]:
    """
    Write odds_{key}.json and, when csv_rows is given, odds_{key}.csv.

    Returns:
        Paths written, JSON first
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    json_path = out_dir / f"odds_{competition_key}.json"
    _write_json(json_path, {
        "sportKey": competition_key,
        "region": region,
        "filter": include or None,
        "fetchedAt": iso_timestamp(fetched_at),
        "events": events,
    })
    logger.info(f"Saved {len(events)} events to {json_path} (region={region})")
    written = [json_path]

    if csv_rows is not None:
        csv_path = out_dir / f"odds_{competition_key}.csv"
        _write_text(csv_path, to_csv(csv_rows))
        logger.info(f"Saved CSV to {csv_path} (region={region})")
        written.append(csv_path)

    return written
