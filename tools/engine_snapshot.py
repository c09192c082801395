"""
Offline engine run over an exported journal file.

    python -m tools.engine_snapshot trades.jsonl --weekly-target 200 --view

Input is a JSON list (or a {"trades": [...]} object) or JSONL of {date, pnl}
records. Prints the engine snapshot, or the UI view with --view, as JSON.
"""
from __future__ import annotations
import argparse
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

from src.journal.schema import TargetPair
from src.journal.stats_engine import StatsEngine
from src.journal.status import derive_status
from src.journal.view import to_view


def read_records(path: Path) -> List[Dict[str, Any]]:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".jsonl":
        out = []
        for line in text.splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                out.append(json.loads(line))
            except json.JSONDecodeError:
                continue
        return out
    obj = json.loads(text)
    if isinstance(obj, dict):
        obj = obj.get("trades", [])
    return obj


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    p.add_argument("path", help="JSON or JSONL file of {date, pnl} records")
    p.add_argument("--at", default=None, help="reference instant (ISO 8601), default now")
    p.add_argument("--timezone", default=None, help="IANA zone for day/week/month bucketing")
    p.add_argument("--weekly-target", type=float, default=None)
    p.add_argument("--monthly-target", type=float, default=None)
    p.add_argument("--view", action="store_true", help="print the UI view with status")
    p.add_argument("--out-json", default=None)
    args = p.parse_args(argv)

    tz = ZoneInfo(args.timezone) if args.timezone else None
    ref = datetime.fromisoformat(args.at) if args.at else None
    engine = StatsEngine(tz)
    snapshot, skipped = engine.aggregate(
        read_records(Path(args.path)),
        ref,
        TargetPair(weekly=args.weekly_target, monthly=args.monthly_target),
    )
    out: Dict[str, Any] = to_view(snapshot, derive_status(snapshot)) if args.view else snapshot.to_dict()

    rendered = json.dumps(out, indent=2)
    if args.out_json:
        Path(args.out_json).write_text(rendered, encoding="utf-8")
    print(rendered)
    if skipped:
        print(f"skipped {skipped} invalid records")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
