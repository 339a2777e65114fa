from __future__ import annotations

import csv
import json
from decimal import Decimal
from pathlib import Path
from typing import List, Mapping

from .models import Process


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.

    Malformed entries raise ValueError; out-of-range or over-precise times
    raise InvalidProcessParameters (itself a ValueError).
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _load_json(path)
    if suffix == ".csv":
        return _load_csv(path)

    raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        # Decimal keeps 0.1 exactly 0.1
        raw = json.load(f, parse_float=Decimal)

    if not isinstance(raw, list):
        raise ValueError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            # CSV has no types; "2" should sort and label like JSON 2
            for key in ("pid", "id"):
                if key in row and (row[key] or "").strip().isdecimal():
                    row[key] = int(row[key].strip())
            processes.append(_process_from_mapping(row))
    return processes


def _process_from_mapping(mapping: Mapping) -> Process:
    if not isinstance(mapping, Mapping):
        raise ValueError(f"Invalid process entry: {mapping!r}")

    try:
        pid = mapping["pid"] if "pid" in mapping else mapping["id"]
        arrival_time = mapping["arrival_time"]
        burst_time = mapping["burst_time"]
    except KeyError as exc:
        raise ValueError(f"Invalid process entry: {mapping!r}") from exc

    if pid in (None, ""):
        raise ValueError(f"Invalid process entry: {mapping!r}")

    priority_val = mapping.get("priority")
    try:
        priority = int(priority_val) if priority_val not in (None, "") else None
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid priority in entry: {mapping!r}") from exc

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )
